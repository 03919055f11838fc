"""Guest domain model."""

import uuid

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Guest(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Guest model: people who stay at the host's rental."""

    __tablename__ = "guests"

    owner_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255))
    email: Mapped[str] = mapped_column(String(255), index=True)  # unique per owner, not globally
    phone: Mapped[str] = mapped_column(String(50))
    notes: Mapped[str | None] = mapped_column(Text)

    # Relationships
    owner: Mapped["User"] = relationship(back_populates="guests", lazy="raise")  # type: ignore[name-defined]  # noqa: F821
    bookings: Mapped[list["Booking"]] = relationship(  # noqa: F821
        back_populates="guest", lazy="raise", cascade="all, delete-orphan", passive_deletes=True
    )

    __table_args__ = (UniqueConstraint("owner_id", "email", name="uq_guests_owner_email"),)

    def __repr__(self) -> str:
        return f"<Guest(id={self.id}, name={self.name!r})>"
