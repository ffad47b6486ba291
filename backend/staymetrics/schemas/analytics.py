"""Pydantic v2 request/response schemas for analytics endpoints.

Metric values are plain floats (``None`` renders as a dash on the dashboard);
the engine's Decimals are converted at this boundary.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Shared building blocks
# ---------------------------------------------------------------------------


class VarianceResponse(BaseModel):
    absolute: float | None = None
    percentage: float | None = None


class HeadlineValues(BaseModel):
    """ADR, occupancy (percent) and RevPAR, each nullable."""

    adr: float | None = None
    occupancy: float | None = None
    revpar: float | None = None


# ---------------------------------------------------------------------------
# Portfolio outlook
# ---------------------------------------------------------------------------


class OutlookMetric(BaseModel):
    """One metric of one month: projection, STLY actual, variance and pickup."""

    current_projection: float | None = None
    stly_actual: float | None = None
    variance_vs_stly: VarianceResponse
    wow_pickup: float | None = None


class OutlookMetrics(BaseModel):
    adr: OutlookMetric
    occupancy: OutlookMetric
    revpar: OutlookMetric


class PortfolioMonthlyOutlook(BaseModel):
    month: date
    month_display: str
    metrics: OutlookMetrics


# ---------------------------------------------------------------------------
# Weekly pacing
# ---------------------------------------------------------------------------


class WeeklyPacing(BaseModel):
    month: date
    month_display: str
    wow_pickup: HeadlineValues


# ---------------------------------------------------------------------------
# Current vs STLY (with and without market benchmarks)
# ---------------------------------------------------------------------------


class PropertyPerformance(BaseModel):
    """Current and STLY ADR and occupancy for one month."""

    month: date
    current_adr: float | None = None
    stly_adr: float | None = None
    current_occupancy: float | None = None
    stly_occupancy: float | None = None


class ComprehensiveAnalytics(PropertyPerformance):
    """Adds RevPAR and the market's averages for the month."""

    current_revpar: float | None = None
    stly_revpar: float | None = None
    market_adr: float | None = None
    market_occupancy: float | None = None
    market_revpar: float | None = None


# ---------------------------------------------------------------------------
# Stateless period calculator
# ---------------------------------------------------------------------------


class StayInput(BaseModel):
    """A reservation supplied directly by the caller."""

    start_date: date
    end_date: date
    gross_price: Decimal | None = Field(None, ge=0)
    room_revenue: Decimal | None = Field(None, ge=0)


class PeriodMetricsRequest(BaseModel):
    period_start: date
    period_end: date
    inventory_size: int = Field(..., ge=0)
    reservations: list[StayInput] = []
    rounding: str | None = Field(None, pattern="^(exact|cents|conserving)$")


class PeriodMetricsResponse(BaseModel):
    period_start: date
    period_end: date
    nights: int
    revenue: float
    available_nights: int
    occupancy: float | None = None
    adr: float | None = None
    revpar: float | None = None
