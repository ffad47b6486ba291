"""Analytics service — portfolio outlook, weekly pacing and STLY comparisons.

Each report looks at the same future months through up to three booking
snapshots:

- current: everything booked up to now
- week ago: everything booked up to ``pickup_window_days`` ago
- STLY: the same months one year earlier, booked up to one year ago

A snapshot is fetched with one query covering every month of the outlook,
then each month is aggregated independently by the metrics engine.
"""

import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from staymetrics.clients.market_data import (
    NO_MARKET_DATA,
    MarketDataClient,
    MarketDataError,
    MarketMetrics,
    monthly_market_averages,
)
from staymetrics.config import settings
from staymetrics.metrics.aggregation import MonthMetrics, aggregate_periods
from staymetrics.metrics.periods import Period, outlook_periods, same_time_last_year, spanning_window, years_before
from staymetrics.metrics.rounding import RoundingPolicy
from staymetrics.metrics.variance import HEADLINE_METRICS, compare_metrics, pickup
from staymetrics.schemas.analytics import (
    ComprehensiveAnalytics,
    HeadlineValues,
    OutlookMetric,
    OutlookMetrics,
    PortfolioMonthlyOutlook,
    PropertyPerformance,
    VarianceResponse,
    WeeklyPacing,
)
from staymetrics.services.reservation_service import (
    fetch_stays,
    get_active_property_ids,
    get_organization_market_id,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SnapshotCutoffs:
    """Booking cutoffs for the three snapshots of a report."""

    current: datetime
    week_ago: datetime
    last_year: datetime


def snapshot_cutoffs(now: datetime, pickup_window_days: int | None = None) -> SnapshotCutoffs:
    window = pickup_window_days if pickup_window_days is not None else settings.pickup_window_days
    return SnapshotCutoffs(
        current=now,
        week_ago=now - timedelta(days=window),
        last_year=years_before(now),
    )


def _as_float(value: Decimal | None) -> float | None:
    return None if value is None else float(value)


def _now(now: datetime | None) -> datetime:
    return now if now is not None else datetime.now(timezone.utc)


async def _snapshot(
    db: AsyncSession,
    property_ids: Sequence[uuid.UUID],
    periods: Sequence[Period],
    booked_by: datetime,
) -> list[MonthMetrics]:
    """Fetch one booking snapshot and aggregate it into each period."""
    stays = await fetch_stays(db, property_ids, spanning_window(periods), booked_by)
    return aggregate_periods(stays, periods, len(property_ids), RoundingPolicy(settings.revenue_rounding))


def _outlook_metrics(current: MonthMetrics, stly: MonthMetrics, week_ago: MonthMetrics) -> OutlookMetrics:
    variances = compare_metrics(current, stly)
    return OutlookMetrics(
        **{
            name: OutlookMetric(
                current_projection=_as_float(getattr(current, name)),
                stly_actual=_as_float(getattr(stly, name)),
                variance_vs_stly=VarianceResponse(
                    absolute=_as_float(variances[name].absolute),
                    percentage=_as_float(variances[name].percentage),
                ),
                wow_pickup=_as_float(pickup(getattr(current, name), getattr(week_ago, name))),
            )
            for name in HEADLINE_METRICS
        }
    )


def _pickup_values(current: MonthMetrics, week_ago: MonthMetrics) -> HeadlineValues:
    return HeadlineValues(
        adr=_as_float(pickup(current.adr, week_ago.adr)),
        occupancy=_as_float(pickup(current.occupancy, week_ago.occupancy)),
        revpar=_as_float(pickup(current.revpar, week_ago.revpar)),
    )


async def get_portfolio_monthly_outlook(
    db: AsyncSession,
    organization_id: uuid.UUID,
    now: datetime | None = None,
) -> list[PortfolioMonthlyOutlook]:
    """Current projection vs STLY actual, variance and WoW pickup for each outlook month.

    Returns an empty list when the organization has no active properties.
    """
    now = _now(now)
    property_ids = await get_active_property_ids(db, organization_id)
    if not property_ids:
        logger.info("Organization %s has no active properties; empty outlook", organization_id)
        return []

    cutoffs = snapshot_cutoffs(now)
    periods = outlook_periods(now.date(), settings.outlook_months)
    stly_periods = [same_time_last_year(period) for period in periods]

    current = await _snapshot(db, property_ids, periods, cutoffs.current)
    week_ago = await _snapshot(db, property_ids, periods, cutoffs.week_ago)
    stly = await _snapshot(db, property_ids, stly_periods, cutoffs.last_year)

    logger.info(
        "Built %d-month outlook for organization %s over %d properties",
        len(periods),
        organization_id,
        len(property_ids),
    )
    return [
        PortfolioMonthlyOutlook(
            month=period.start,
            month_display=period.display,
            metrics=_outlook_metrics(cur, last_year, prior_week),
        )
        for period, cur, prior_week, last_year in zip(periods, current, week_ago, stly, strict=True)
    ]


async def get_weekly_pacing(
    db: AsyncSession,
    organization_id: uuid.UUID,
    now: datetime | None = None,
) -> list[WeeklyPacing]:
    """Week-over-week pickup of ADR, occupancy and RevPAR for each outlook month."""
    now = _now(now)
    property_ids = await get_active_property_ids(db, organization_id)
    if not property_ids:
        logger.info("Organization %s has no active properties; empty pacing", organization_id)
        return []

    cutoffs = snapshot_cutoffs(now)
    periods = outlook_periods(now.date(), settings.outlook_months)
    current = await _snapshot(db, property_ids, periods, cutoffs.current)
    week_ago = await _snapshot(db, property_ids, periods, cutoffs.week_ago)

    return [
        WeeklyPacing(
            month=period.start,
            month_display=period.display,
            wow_pickup=_pickup_values(cur, prior_week),
        )
        for period, cur, prior_week in zip(periods, current, week_ago, strict=True)
    ]


async def _current_and_stly(
    db: AsyncSession,
    organization_id: uuid.UUID,
    now: datetime,
) -> tuple[list[Period], list[MonthMetrics], list[MonthMetrics]]:
    property_ids = await get_active_property_ids(db, organization_id)
    cutoffs = snapshot_cutoffs(now)
    periods = outlook_periods(now.date(), settings.outlook_months)
    stly_periods = [same_time_last_year(period) for period in periods]
    current = await _snapshot(db, property_ids, periods, cutoffs.current)
    stly = await _snapshot(db, property_ids, stly_periods, cutoffs.last_year)
    return periods, current, stly


async def get_property_performance(
    db: AsyncSession,
    organization_id: uuid.UUID,
    now: datetime | None = None,
) -> list[PropertyPerformance]:
    """Current and STLY ADR and occupancy for each outlook month."""
    periods, current, stly = await _current_and_stly(db, organization_id, _now(now))
    return [
        PropertyPerformance(
            month=period.start,
            current_adr=_as_float(cur.adr),
            stly_adr=_as_float(last_year.adr),
            current_occupancy=_as_float(cur.occupancy),
            stly_occupancy=_as_float(last_year.occupancy),
        )
        for period, cur, last_year in zip(periods, current, stly, strict=True)
    ]


async def _market_averages(
    db: AsyncSession,
    organization_id: uuid.UUID,
    periods: Sequence[Period],
    market_client: MarketDataClient,
) -> dict[str, MarketMetrics]:
    """Monthly market benchmarks, or an empty mapping when unavailable."""
    market_id = await get_organization_market_id(db, organization_id)
    if not market_id:
        logger.info("No market configured for organization %s", organization_id)
        return {}

    try:
        items = await market_client.get_market_breakdown(market_id, periods[0].start, periods[-1].last_day)
    except MarketDataError:
        logger.exception("Market data unavailable for market %s; returning portfolio figures only", market_id)
        return {}
    return monthly_market_averages(items, periods)


async def get_comprehensive_analytics(
    db: AsyncSession,
    organization_id: uuid.UUID,
    now: datetime | None = None,
    market_client: MarketDataClient | None = None,
) -> list[ComprehensiveAnalytics]:
    """Current and STLY ADR/occupancy/RevPAR alongside market averages.

    Market fields are ``None`` when the organization has no market or the
    market-data service fails; the portfolio figures are returned regardless.
    """
    periods, current, stly = await _current_and_stly(db, organization_id, _now(now))
    market = await _market_averages(db, organization_id, periods, market_client or MarketDataClient())

    rows = []
    for period, cur, last_year in zip(periods, current, stly, strict=True):
        benchmark = market.get(period.key, NO_MARKET_DATA)
        rows.append(
            ComprehensiveAnalytics(
                month=period.start,
                current_adr=_as_float(cur.adr),
                stly_adr=_as_float(last_year.adr),
                current_occupancy=_as_float(cur.occupancy),
                stly_occupancy=_as_float(last_year.occupancy),
                current_revpar=_as_float(cur.revpar),
                stly_revpar=_as_float(last_year.revpar),
                market_adr=benchmark.adr,
                market_occupancy=benchmark.occupancy,
                market_revpar=benchmark.revpar,
            )
        )
    return rows
