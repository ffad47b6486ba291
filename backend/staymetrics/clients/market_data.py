"""Async Key Data API client — market ADR, occupancy and RevPAR benchmarks."""

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from statistics import fmean

import httpx
from pydantic import BaseModel, ConfigDict, Field

from staymetrics.config import settings
from staymetrics.metrics.periods import Period, month_key

logger = logging.getLogger(__name__)


class MarketDataError(Exception):
    """The market-data service could not be reached or returned an unusable payload."""


class MarketBreakdownItem(BaseModel):
    """One row of the market performance breakdown."""

    model_config = ConfigDict(populate_by_name=True)

    date: str
    adr: float
    occupancy: float
    revpar: float = Field(alias="revPar")
    revenue: float | None = None
    room_nights: float | None = Field(None, alias="roomNights")

    @property
    def day(self) -> date:
        return date.fromisoformat(self.date[:10])


class MarketBreakdownResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    market_id: str = Field(alias="marketId")
    breakdown: list[MarketBreakdownItem] = []


@dataclass(frozen=True)
class MarketMetrics:
    """Monthly market averages; ``None`` where the market reported nothing."""

    adr: float | None = None
    occupancy: float | None = None
    revpar: float | None = None


NO_MARKET_DATA = MarketMetrics()


class MarketDataClient:
    """Thin wrapper around the Key Data performance endpoints.

    ``transport`` lets tests plug in an ``httpx.MockTransport``.
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url or settings.key_data_api_base_url
        self.api_key = api_key if api_key is not None else settings.key_data_api_key
        self.timeout = timeout or settings.key_data_timeout_seconds
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            timeout=self.timeout,
            transport=self._transport,
        )

    async def get_market_breakdown(
        self,
        market_id: str,
        start_date: date,
        end_date: date,
    ) -> list[MarketBreakdownItem]:
        """Fetch the monthly performance breakdown for a market.

        Raises:
            MarketDataError: On transport errors, non-2xx responses or a
                payload that does not match the expected shape.
        """
        logger.info("Fetching market breakdown for %s (%s to %s)", market_id, start_date, end_date)
        async with self._client() as client:
            try:
                response = await client.get(
                    f"/v2/markets/{market_id}/performance/breakdown",
                    params={
                        "start_date": start_date.isoformat(),
                        "end_date": end_date.isoformat(),
                        "aggregation": "monthly",
                    },
                )
                response.raise_for_status()
            except httpx.HTTPError as exc:
                raise MarketDataError(f"Market breakdown request failed for {market_id}: {exc}") from exc

        try:
            payload = MarketBreakdownResponse.model_validate(response.json())
        except ValueError as exc:
            raise MarketDataError(f"Malformed market breakdown for {market_id}") from exc
        return payload.breakdown


def _mean(values: list[float]) -> float | None:
    return fmean(values) if values else None


def monthly_market_averages(
    items: Iterable[MarketBreakdownItem],
    periods: Sequence[Period],
) -> dict[str, MarketMetrics]:
    """Average the breakdown rows per calendar month of ``periods``.

    Rows for months outside ``periods`` are dropped; months without rows get
    ``NO_MARKET_DATA``.
    """
    wanted = {period.key for period in periods}
    buckets: dict[str, dict[str, list[float]]] = defaultdict(lambda: {"adr": [], "occupancy": [], "revpar": []})
    for item in items:
        try:
            key = month_key(item.day)
        except ValueError:
            logger.warning("Skipping market row with unparseable date %r", item.date)
            continue
        if key not in wanted:
            continue
        bucket = buckets[key]
        bucket["adr"].append(item.adr)
        bucket["occupancy"].append(item.occupancy)
        bucket["revpar"].append(item.revpar)

    averages: dict[str, MarketMetrics] = {}
    for period in periods:
        bucket = buckets.get(period.key)
        if bucket is None:
            averages[period.key] = NO_MARKET_DATA
            continue
        averages[period.key] = MarketMetrics(
            adr=_mean(bucket["adr"]),
            occupancy=_mean(bucket["occupancy"]),
            revpar=_mean(bucket["revpar"]),
        )
        logger.debug("Market %s: %d rows", period.key, len(bucket["adr"]))
    return averages


def get_market_data_client() -> MarketDataClient:
    """FastAPI dependency returning a client configured from settings."""
    return MarketDataClient()
