"""Portfolio queries — inventory, market and reservation snapshots.

Everything the metrics engine needs is fetched here, up front, and handed
over as plain ``Stay`` values. The engine itself never queries.
"""

import logging
import uuid
from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staymetrics.config import settings
from staymetrics.metrics.allocation import Stay
from staymetrics.metrics.periods import Period
from staymetrics.models.organization import Organization
from staymetrics.models.property import Property
from staymetrics.models.reservation import Reservation

logger = logging.getLogger(__name__)


async def get_active_property_ids(db: AsyncSession, organization_id: uuid.UUID) -> list[uuid.UUID]:
    """IDs of the organization's active properties; their count is the inventory size."""
    result = await db.execute(
        select(Property.id).where(
            Property.organization_id == organization_id,
            Property.is_active.is_(True),
        )
    )
    return list(result.scalars().all())


async def get_organization_market_id(db: AsyncSession, organization_id: uuid.UUID) -> str | None:
    result = await db.execute(select(Organization.market_id).where(Organization.id == organization_id))
    return result.scalar_one_or_none()


async def fetch_stays(
    db: AsyncSession,
    property_ids: Sequence[uuid.UUID],
    window: Period,
    booked_by: datetime,
    excluded_statuses: Sequence[str] | None = None,
) -> list[Stay]:
    """Reservations overlapping ``window`` that were booked by ``booked_by``.

    A reservation belongs to the window when its range intersects it
    (``start < window.end`` and ``end > window.start``), regardless of the
    month it starts in. Cancelled and declined stays are excluded here so the
    engine does not have to look at status.
    """
    if not property_ids:
        return []

    excluded = list(excluded_statuses if excluded_statuses is not None else settings.excluded_reservation_statuses)
    query = select(
        Reservation.start_date,
        Reservation.end_date,
        Reservation.gross_price,
        Reservation.room_revenue,
    ).where(
        Reservation.property_id.in_(property_ids),
        Reservation.booked_at <= booked_by,
        Reservation.status.not_in(excluded),
        Reservation.start_date < window.end,
        Reservation.end_date > window.start,
    )
    result = await db.execute(query)
    stays = [
        Stay(
            start_date=row.start_date,
            end_date=row.end_date,
            gross_price=row.gross_price,
            room_revenue=row.room_revenue,
        )
        for row in result.all()
    ]
    logger.debug(
        "Fetched %d stays for %d properties in %s..%s booked by %s",
        len(stays),
        len(property_ids),
        window.start,
        window.end,
        booked_by.isoformat(),
    )
    return stays
