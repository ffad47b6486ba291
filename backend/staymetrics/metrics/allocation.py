"""Reservation overlap allocation — nights and revenue a stay earns inside a period.

Periods and stays are half-open date ranges ``[start, end)``: the checkout day
is not a stay-night, so a stay ending on the first day of a period contributes
nothing to it. Revenue is prorated per night, which keeps a stay that spans
several periods from being counted in full in each of them.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Protocol

from staymetrics.metrics.rounding import RoundingPolicy, prorate

ZERO = Decimal("0")


class StayLike(Protocol):
    """Anything shaped like a priced reservation (ORM rows, request bodies, ``Stay``)."""

    start_date: date
    end_date: date
    gross_price: Decimal | None
    room_revenue: Decimal | None


@dataclass(frozen=True)
class Stay:
    """A priced reservation as the metrics engine sees it.

    ``gross_price`` covers the whole stay including taxes and fees;
    ``room_revenue`` covers room charges only and is the figure headline
    metrics are built from.
    """

    start_date: date
    end_date: date
    gross_price: Decimal | None = None
    room_revenue: Decimal | None = None


@dataclass(frozen=True)
class StayAllocation:
    """Nights and revenue of one stay that fall inside one period."""

    nights: int
    revenue: Decimal


NO_ALLOCATION = StayAllocation(nights=0, revenue=ZERO)


def to_decimal(value: Decimal | float | int | str | None) -> Decimal | None:
    """Coerce a money value to ``Decimal``, passing ``None`` through."""
    if value is None or isinstance(value, Decimal):
        return value
    # str() keeps the printed value of a float
    return Decimal(str(value))


def authoritative_revenue(stay: StayLike) -> Decimal | None:
    """Return the stay price every headline metric is computed from.

    Room revenue wins whenever it is present, even when it is zero. The gross
    price, which includes taxes and fees, is only a fallback for stays that
    carry no room revenue at all. ``None`` means the stay has no usable price.
    """
    room_revenue = to_decimal(stay.room_revenue)
    if room_revenue is not None:
        return room_revenue
    return to_decimal(stay.gross_price)


def stay_nights(stay: StayLike) -> int:
    """Number of nights the stay occupies a room (checkout day excluded)."""
    return (stay.end_date - stay.start_date).days


def allocate(
    stay: StayLike,
    period_start: date,
    period_end: date,
    rounding: RoundingPolicy = RoundingPolicy.EXACT,
) -> StayAllocation:
    """Allocate a stay's nights and revenue to the period ``[period_start, period_end)``.

    Stays that do not intersect the period, including stays that only touch
    one of its boundaries, allocate nothing. Revenue is the authoritative
    price divided by the stay's total nights, times the nights in the period.

    Examples:
        A Jan 15 → Feb 15 stay with 3100 room revenue (31 nights) allocates
        17 nights and 1700 to January.
    """
    overlap_start = max(stay.start_date, period_start)
    overlap_end = min(stay.end_date, period_end)
    if overlap_end <= overlap_start:
        return NO_ALLOCATION

    nights = (overlap_end - overlap_start).days
    total_nights = stay_nights(stay)
    price = authoritative_revenue(stay)
    if price is None or total_nights <= 0:
        return StayAllocation(nights=nights, revenue=ZERO)

    first_night = (overlap_start - stay.start_date).days
    revenue = prorate(price, total_nights, first_night, nights, rounding)
    return StayAllocation(nights=nights, revenue=revenue)
