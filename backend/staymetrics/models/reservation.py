"""Reservation model — a priced, date-ranged stay synced from the channel manager."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Date, DateTime, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staymetrics.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Reservation(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A stay over ``[start_date, end_date)``; the end date is the checkout day.

    ``gross_price`` is the whole-stay total including taxes and fees.
    ``room_revenue`` is the nightly subtotal (room charges only) summed over
    the stay, and is the figure analytics are computed from.
    """

    __tablename__ = "reservations"

    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    gross_price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    room_revenue: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    status: Mapped[str] = mapped_column(
        String(50),
        default="confirmed",
        nullable=False,
        index=True,
    )  # inquiry, confirmed, checked_in, checked_out, cancelled, declined
    booked_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    property: Mapped["Property"] = relationship(back_populates="reservations", lazy="selectin")  # type: ignore[name-defined]  # noqa: F821

    __table_args__ = (
        Index("ix_reservations_stay_range", "start_date", "end_date"),
        Index("ix_reservations_booked_at", "booked_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Reservation(id={self.id}, property_id={self.property_id}, "
            f"{self.start_date}..{self.end_date}, status={self.status})>"
        )
