"""Period metrics aggregation — occupancy, ADR and RevPAR for one period."""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from staymetrics.metrics.allocation import ZERO, StayLike, allocate, stay_nights
from staymetrics.metrics.periods import Period
from staymetrics.metrics.rounding import RoundingPolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonthMetrics:
    """Headline metrics for one period and one inventory size.

    ``occupancy`` is a percentage (0-100). Ratios whose denominator is zero
    are ``None`` rather than NaN or infinity.
    """

    nights: int
    revenue: Decimal
    available_nights: int
    occupancy: Decimal | None
    adr: Decimal | None
    revpar: Decimal | None


def safe_ratio(numerator: Decimal | int, denominator: Decimal | int) -> Decimal | None:
    """Divide, returning ``None`` for a zero (or negative) denominator."""
    if denominator <= 0:
        return None
    return Decimal(numerator) / Decimal(denominator)


def available_room_nights(period_start: date, period_end: date, inventory_size: int) -> int:
    """Room-nights on offer: inventory size times calendar days in the period."""
    days = (period_end - period_start).days
    if days < 0:
        logger.warning("Period end %s precedes start %s; treating as empty", period_end, period_start)
        days = 0
    if inventory_size < 0:
        logger.warning("Negative inventory size %d; treating as zero", inventory_size)
        inventory_size = 0
    return inventory_size * days


def aggregate(
    stays: Iterable[StayLike],
    period_start: date,
    period_end: date,
    inventory_size: int,
    rounding: RoundingPolicy = RoundingPolicy.EXACT,
) -> MonthMetrics:
    """Sum allocated nights and revenue over ``stays`` and derive the headline metrics.

    The stays may be over-inclusive: anything that does not overlap the period
    simply allocates nothing. Never raises on empty input; with no stays the
    result has zero nights, zero revenue and ``adr`` of ``None``.
    """
    total_nights = 0
    total_revenue = ZERO
    degenerate = 0

    for stay in stays:
        if stay_nights(stay) <= 0:
            degenerate += 1
            continue
        allocation = allocate(stay, period_start, period_end, rounding)
        total_nights += allocation.nights
        total_revenue += allocation.revenue

    if degenerate:
        logger.warning(
            "Ignored %d zero-night or inverted reservations for period %s to %s",
            degenerate,
            period_start,
            period_end,
        )

    available = available_room_nights(period_start, period_end, inventory_size)
    return MonthMetrics(
        nights=total_nights,
        revenue=total_revenue,
        available_nights=available,
        occupancy=safe_ratio(total_nights * 100, available),
        adr=safe_ratio(total_revenue, total_nights),
        revpar=safe_ratio(total_revenue, available),
    )


def aggregate_periods(
    stays: Sequence[StayLike],
    periods: Sequence[Period],
    inventory_size: int,
    rounding: RoundingPolicy = RoundingPolicy.EXACT,
) -> list[MonthMetrics]:
    """Aggregate the same stays into each period independently, preserving order."""
    return [aggregate(stays, period.start, period.end, inventory_size, rounding) for period in periods]
