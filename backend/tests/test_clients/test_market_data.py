"""Tests for the Key Data market benchmark client."""

import json
from datetime import date

import httpx
import pytest

from staymetrics.clients.market_data import (
    NO_MARKET_DATA,
    MarketBreakdownItem,
    MarketDataClient,
    MarketDataError,
    monthly_market_averages,
)
from staymetrics.metrics.periods import outlook_periods

BREAKDOWN = {
    "marketId": "mkt-bali",
    "breakdown": [
        {"date": "2025-06-01", "adr": 210.0, "occupancy": 70.0, "revPar": 147.0, "roomNights": 1200},
        {"date": "2025-07-01", "adr": 240.0, "occupancy": 81.5, "revPar": 195.6},
    ],
}


def _client(handler) -> MarketDataClient:
    return MarketDataClient(
        base_url="https://keydata.test",
        api_key="secret-key",
        timeout=5,
        transport=httpx.MockTransport(handler),
    )


class TestGetMarketBreakdown:
    async def test_request_shape_and_parsing(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=BREAKDOWN)

        items = await _client(handler).get_market_breakdown("mkt-bali", date(2025, 6, 1), date(2025, 7, 31))

        request = seen[0]
        assert request.method == "GET"
        assert request.url.path == "/v2/markets/mkt-bali/performance/breakdown"
        assert request.url.params["start_date"] == "2025-06-01"
        assert request.url.params["end_date"] == "2025-07-31"
        assert request.url.params["aggregation"] == "monthly"
        assert request.headers["Authorization"] == "Bearer secret-key"

        assert len(items) == 2
        assert items[0].revpar == 147.0
        assert items[0].room_nights == 1200
        assert items[1].room_nights is None
        assert items[1].day == date(2025, 7, 1)

    async def test_server_error_raises(self):
        client = _client(lambda request: httpx.Response(500, json={"detail": "down"}))
        with pytest.raises(MarketDataError):
            await client.get_market_breakdown("mkt-bali", date(2025, 6, 1), date(2025, 6, 30))

    async def test_not_json_raises(self):
        client = _client(lambda request: httpx.Response(200, content=b"<html>maintenance</html>"))
        with pytest.raises(MarketDataError):
            await client.get_market_breakdown("mkt-bali", date(2025, 6, 1), date(2025, 6, 30))

    async def test_wrong_shape_raises(self):
        payload = json.dumps({"marketId": "mkt-bali", "breakdown": [{"date": "2025-06-01"}]}).encode()
        client = _client(lambda request: httpx.Response(200, content=payload))
        with pytest.raises(MarketDataError):
            await client.get_market_breakdown("mkt-bali", date(2025, 6, 1), date(2025, 6, 30))

    async def test_connection_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(MarketDataError):
            await _client(handler).get_market_breakdown("mkt-bali", date(2025, 6, 1), date(2025, 6, 30))


class TestMonthlyMarketAverages:
    PERIODS = outlook_periods(date(2025, 6, 10), 3)

    def test_averages_rows_per_month(self):
        items = [
            MarketBreakdownItem(date="2025-06-01", adr=200.0, occupancy=60.0, revpar=120.0),
            MarketBreakdownItem(date="2025-06-16T00:00:00Z", adr=220.0, occupancy=80.0, revpar=176.0),
            MarketBreakdownItem(date="2025-08-01", adr=260.0, occupancy=90.0, revpar=234.0),
        ]

        averages = monthly_market_averages(items, self.PERIODS)

        assert set(averages) == {"2025-06", "2025-07", "2025-08"}
        assert averages["2025-06"].adr == pytest.approx(210.0)
        assert averages["2025-06"].occupancy == pytest.approx(70.0)
        assert averages["2025-06"].revpar == pytest.approx(148.0)
        assert averages["2025-07"] == NO_MARKET_DATA
        assert averages["2025-08"].adr == pytest.approx(260.0)

    def test_rows_outside_the_outlook_are_dropped(self):
        items = [MarketBreakdownItem(date="2025-12-01", adr=999.0, occupancy=99.0, revpar=989.0)]
        averages = monthly_market_averages(items, self.PERIODS)
        assert all(value == NO_MARKET_DATA for value in averages.values())

    def test_unparseable_dates_are_skipped(self, caplog):
        items = [
            MarketBreakdownItem(date="June", adr=999.0, occupancy=99.0, revpar=989.0),
            MarketBreakdownItem(date="2025-06-01", adr=200.0, occupancy=60.0, revpar=120.0),
        ]
        averages = monthly_market_averages(items, self.PERIODS)
        assert averages["2025-06"].adr == pytest.approx(200.0)
        assert "unparseable date" in caplog.text
