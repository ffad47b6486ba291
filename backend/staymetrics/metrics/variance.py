"""Metric comparisons — variance against STLY and week-over-week pickup.

One two-argument comparison serves every headline metric and every baseline:
variance against the same period last year and pickup against the snapshot
from a week ago are the same computation with different baselines.
"""

from dataclasses import dataclass
from decimal import Decimal

from staymetrics.metrics.aggregation import MonthMetrics

HEADLINE_METRICS = ("adr", "occupancy", "revpar")


@dataclass(frozen=True)
class Variance:
    absolute: Decimal | None
    percentage: Decimal | None


def absolute_change(current: Decimal | None, baseline: Decimal | None) -> Decimal | None:
    """``current - baseline``, or ``None`` if either side is missing."""
    if current is None or baseline is None:
        return None
    return current - baseline


def percentage_change(current: Decimal | None, baseline: Decimal | None) -> Decimal | None:
    """Relative change in percent; ``None`` if either side is missing or the baseline is zero."""
    if current is None or baseline is None or baseline == 0:
        return None
    return (current - baseline) / baseline * 100


def compare(current: Decimal | None, baseline: Decimal | None) -> Variance:
    return Variance(
        absolute=absolute_change(current, baseline),
        percentage=percentage_change(current, baseline),
    )


def pickup(current: Decimal | None, week_ago: Decimal | None) -> Decimal | None:
    """Week-over-week pickup: absolute change since the week-ago snapshot."""
    return absolute_change(current, week_ago)


def compare_metrics(current: MonthMetrics, baseline: MonthMetrics) -> dict[str, Variance]:
    """Compare ADR, occupancy and RevPAR of two snapshots of a period."""
    return {name: compare(getattr(current, name), getattr(baseline, name)) for name in HEADLINE_METRICS}
