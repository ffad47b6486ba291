"""Metrics engine — pure functions, no I/O.

Stays are allocated to periods (``allocation``), summed into headline metrics
(``aggregation``) and compared across snapshots (``variance``). Every call is
independent of every other, so periods may be computed in any order.
"""

from staymetrics.metrics.aggregation import MonthMetrics, aggregate, aggregate_periods
from staymetrics.metrics.allocation import Stay, StayAllocation, allocate, authoritative_revenue
from staymetrics.metrics.periods import Period, month_period, outlook_periods, same_time_last_year
from staymetrics.metrics.rounding import RoundingPolicy
from staymetrics.metrics.variance import Variance, compare, percentage_change, pickup

__all__ = [
    "MonthMetrics",
    "Period",
    "RoundingPolicy",
    "Stay",
    "StayAllocation",
    "Variance",
    "aggregate",
    "aggregate_periods",
    "allocate",
    "authoritative_revenue",
    "compare",
    "month_period",
    "outlook_periods",
    "percentage_change",
    "pickup",
    "same_time_last_year",
]
