"""Calendar periods — half-open date ranges, months and year-ago shifts."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import TypeVar

_D = TypeVar("_D", date, datetime)


@dataclass(frozen=True)
class Period:
    """A half-open date range ``[start, end)``."""

    start: date
    end: date

    @property
    def days(self) -> int:
        """Calendar days in the period (0 for empty or inverted ranges)."""
        return max((self.end - self.start).days, 0)

    @property
    def last_day(self) -> date:
        """The final calendar day inside the period."""
        return self.end - timedelta(days=1)

    @property
    def key(self) -> str:
        """``YYYY-MM`` key of the month the period starts in."""
        return month_key(self.start)

    @property
    def display(self) -> str:
        """Human label such as ``June 2025``."""
        return self.start.strftime("%B %Y")

    def overlaps(self, start: date, end: date) -> bool:
        """True if ``[start, end)`` shares at least one day with the period."""
        return start < self.end and end > self.start


def month_key(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def first_of_month(day: date) -> date:
    return date(day.year, day.month, 1)


def add_months(day: date, months: int) -> date:
    """Shift the first of ``day``'s month by ``months`` (may be negative)."""
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def month_period(day: date) -> Period:
    """The calendar month containing ``day``."""
    start = first_of_month(day)
    return Period(start, add_months(start, 1))


def years_before(value: _D, years: int = 1) -> _D:
    """Same calendar position ``years`` earlier; Feb 29 falls back to Feb 28."""
    try:
        return value.replace(year=value.year - years)
    except ValueError:
        return value.replace(year=value.year - years, day=28)


def same_time_last_year(period: Period) -> Period:
    """The period one year earlier.

    Whole calendar months map to whole calendar months, so a February
    period keeps the right length across leap years.
    """
    if period.start.day == 1 and period.end == add_months(period.start, 1):
        return month_period(years_before(period.start))
    return Period(years_before(period.start), years_before(period.end))


def outlook_periods(today: date, count: int) -> list[Period]:
    """``count`` consecutive calendar months starting with the month of ``today``."""
    start = first_of_month(today)
    return [Period(add_months(start, i), add_months(start, i + 1)) for i in range(count)]


def spanning_window(periods: Sequence[Period]) -> Period:
    """Smallest period covering every period given."""
    if not periods:
        raise ValueError("spanning_window needs at least one period")
    return Period(min(p.start for p in periods), max(p.end for p in periods))
