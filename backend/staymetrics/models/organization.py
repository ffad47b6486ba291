"""Organization model — a property-management company and its members."""

import uuid

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staymetrics.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Organization(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Owner of a property portfolio."""

    __tablename__ = "organizations"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # Key Data market the portfolio is benchmarked against
    market_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    properties: Mapped[list["Property"]] = relationship(back_populates="organization", lazy="selectin")  # type: ignore[name-defined]  # noqa: F821
    memberships: Mapped[list["UserOrganization"]] = relationship(back_populates="organization", lazy="selectin")

    def __repr__(self) -> str:
        return f"<Organization(id={self.id}, name={self.name!r}, market_id={self.market_id!r})>"


class UserOrganization(UUIDPrimaryKeyMixin, Base):
    """Membership of a user in an organization."""

    __tablename__ = "user_organizations"

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    organization_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    organization: Mapped[Organization] = relationship(back_populates="memberships", lazy="selectin")
    user: Mapped["User"] = relationship(back_populates="memberships", lazy="selectin")  # type: ignore[name-defined]  # noqa: F821

    __table_args__ = (UniqueConstraint("user_id", "organization_id", name="uq_user_organization"),)
