"""Analytics API router — portfolio outlook, pacing, STLY and market comparisons."""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from staymetrics.api.deps import ensure_organization_member, get_current_user, get_db, get_market_data_client
from staymetrics.clients.market_data import MarketDataClient
from staymetrics.config import settings
from staymetrics.metrics.aggregation import aggregate
from staymetrics.metrics.rounding import RoundingPolicy
from staymetrics.models.user import User
from staymetrics.schemas.analytics import (
    ComprehensiveAnalytics,
    PeriodMetricsRequest,
    PeriodMetricsResponse,
    PortfolioMonthlyOutlook,
    PropertyPerformance,
    WeeklyPacing,
)
from staymetrics.services.analytics_service import (
    get_comprehensive_analytics,
    get_portfolio_monthly_outlook,
    get_property_performance,
    get_weekly_pacing,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/analytics", tags=["analytics"])


@router.get("/portfolio-outlook", response_model=list[PortfolioMonthlyOutlook])
async def portfolio_outlook(
    organization_id: uuid.UUID = Query(..., description="Organization whose portfolio to analyse"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[PortfolioMonthlyOutlook]:
    """Monthly ADR, occupancy and RevPAR projections against STLY, with WoW pickup."""
    await ensure_organization_member(db, current_user, organization_id)
    return await get_portfolio_monthly_outlook(db, organization_id)


@router.get("/weekly-pacing", response_model=list[WeeklyPacing])
async def weekly_pacing(
    organization_id: uuid.UUID = Query(..., description="Organization whose portfolio to analyse"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[WeeklyPacing]:
    """Week-over-week pickup for each upcoming month."""
    await ensure_organization_member(db, current_user, organization_id)
    return await get_weekly_pacing(db, organization_id)


@router.get("/performance", response_model=list[PropertyPerformance])
async def property_performance(
    organization_id: uuid.UUID = Query(..., description="Organization whose portfolio to analyse"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[PropertyPerformance]:
    await ensure_organization_member(db, current_user, organization_id)
    return await get_property_performance(db, organization_id)


@router.get("/comprehensive", response_model=list[ComprehensiveAnalytics])
async def comprehensive_analytics(
    organization_id: uuid.UUID = Query(..., description="Organization whose portfolio to analyse"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    market_client: MarketDataClient = Depends(get_market_data_client),
) -> list[ComprehensiveAnalytics]:
    """Portfolio ADR, occupancy and RevPAR vs STLY, alongside market averages.

    Market figures are null when the organization has no market configured
    or the market-data service is unavailable.
    """
    await ensure_organization_member(db, current_user, organization_id)
    return await get_comprehensive_analytics(db, organization_id, market_client=market_client)


@router.post("/period-metrics", response_model=PeriodMetricsResponse)
async def period_metrics(
    body: PeriodMetricsRequest,
    current_user: User = Depends(get_current_user),
) -> PeriodMetricsResponse:
    """Compute metrics for caller-supplied reservations over one period.

    Nothing is read from the database; the reservations in the body are
    taken as already filtered by status and booking date.
    """
    if body.period_end <= body.period_start:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="period_end must be after period_start",
        )

    rounding = RoundingPolicy(body.rounding or settings.revenue_rounding)
    metrics = aggregate(body.reservations, body.period_start, body.period_end, body.inventory_size, rounding)
    logger.debug("User %s computed metrics for %d reservations", current_user.id, len(body.reservations))

    return PeriodMetricsResponse(
        period_start=body.period_start,
        period_end=body.period_end,
        nights=metrics.nights,
        revenue=float(metrics.revenue),
        available_nights=metrics.available_nights,
        occupancy=None if metrics.occupancy is None else float(metrics.occupancy),
        adr=None if metrics.adr is None else float(metrics.adr),
        revpar=None if metrics.revpar is None else float(metrics.revpar),
    )
