"""Property model — one rentable unit in an organization's portfolio."""

import uuid

from sqlalchemy import Boolean, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staymetrics.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Property(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A unit counted in inventory while ``is_active`` is set."""

    __tablename__ = "properties"

    organization_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)

    organization: Mapped["Organization"] = relationship(back_populates="properties", lazy="selectin")  # type: ignore[name-defined]  # noqa: F821
    reservations: Mapped[list["Reservation"]] = relationship(  # type: ignore[name-defined]  # noqa: F821
        back_populates="property", lazy="selectin", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, name={self.name!r}, active={self.is_active})>"
