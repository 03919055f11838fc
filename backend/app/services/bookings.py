"""Booking storage: owner-scoped queries and mutations.

Ownership rule: a booking belongs to exactly one owner (``Booking.owner_id``)
and may only reference that owner's guests. Every function takes the owner
id as an explicit argument.
"""

import logging
import uuid
from datetime import date

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.booking import Booking
from app.models.guest import Guest

logger = logging.getLogger(__name__)


class GuestNotOwnedError(Exception):
    """The referenced guest does not exist or belongs to another owner."""


async def _ensure_guest_owned(db: AsyncSession, owner_id: uuid.UUID, guest_id: uuid.UUID) -> None:
    result = await db.execute(select(Guest.id).where(Guest.id == guest_id, Guest.owner_id == owner_id))
    if result.first() is None:
        raise GuestNotOwnedError(str(guest_id))


def _owner_query(owner_id: uuid.UUID):
    return (
        select(Booking)
        .options(selectinload(Booking.guest))
        .where(Booking.owner_id == owner_id)
    )


async def list_bookings(
    db: AsyncSession,
    owner_id: uuid.UUID,
    *,
    guest_id: uuid.UUID | None = None,
    check_in_from: date | None = None,
    check_in_to: date | None = None,
    search: str | None = None,
    skip: int = 0,
    limit: int | None = None,
) -> tuple[list[Booking], int]:
    """Return a page of the owner's bookings ordered by check-in, plus the total match count.

    ``search`` is a case-insensitive substring match over the guest's name,
    email and phone and the booking notes.
    """
    filters = [Booking.owner_id == owner_id]
    if guest_id is not None:
        filters.append(Booking.guest_id == guest_id)
    if check_in_from is not None:
        filters.append(Booking.check_in >= check_in_from)
    if check_in_to is not None:
        filters.append(Booking.check_in <= check_in_to)
    if search:
        # autoescape: "%" and "_" in the search term match literally
        filters.append(
            or_(
                Guest.name.icontains(search, autoescape=True),
                Guest.email.icontains(search, autoescape=True),
                Guest.phone.icontains(search, autoescape=True),
                Booking.notes.icontains(search, autoescape=True),
            )
        )

    count_query = (
        select(func.count())
        .select_from(Booking)
        .join(Guest, Booking.guest_id == Guest.id)
        .where(*filters)
    )
    total_result = await db.execute(count_query)
    total = total_result.scalar_one()

    items_query = (
        select(Booking)
        .options(selectinload(Booking.guest))
        .join(Guest, Booking.guest_id == Guest.id)
        .where(*filters)
        .order_by(Booking.check_in, Booking.created_at)
        .offset(skip)
    )
    if limit is not None:
        items_query = items_query.limit(limit)
    result = await db.execute(items_query)
    return list(result.scalars().all()), total


async def load_snapshot(db: AsyncSession, owner_id: uuid.UUID) -> list[Booking]:
    """Fetch every booking the owner has, for aggregation."""
    result = await db.execute(_owner_query(owner_id).order_by(Booking.check_in, Booking.created_at))
    return list(result.scalars().all())


async def recent_bookings(db: AsyncSession, owner_id: uuid.UUID, limit: int = 5) -> list[Booking]:
    """Return the owner's first ``limit`` bookings by check-in date."""
    result = await db.execute(_owner_query(owner_id).order_by(Booking.check_in, Booking.created_at).limit(limit))
    return list(result.scalars().all())


async def get_booking(db: AsyncSession, owner_id: uuid.UUID, booking_id: uuid.UUID) -> Booking | None:
    result = await db.execute(_owner_query(owner_id).where(Booking.id == booking_id))
    return result.scalar_one_or_none()


async def create_booking(db: AsyncSession, owner_id: uuid.UUID, data: dict) -> Booking:
    """Create a booking for the owner.

    Raises:
        GuestNotOwnedError: If ``data["guest_id"]`` is not one of the owner's guests.
    """
    await _ensure_guest_owned(db, owner_id, data["guest_id"])

    booking = Booking(owner_id=owner_id, **data)
    db.add(booking)
    await db.flush()
    await db.refresh(booking)
    logger.info("Created booking %s for owner %s", booking.id, owner_id)
    return booking


async def update_booking(db: AsyncSession, owner_id: uuid.UUID, booking: Booking, changes: dict) -> Booking:
    """Apply a partial update to a booking already loaded for this owner.

    Raises:
        GuestNotOwnedError: If the guest is being changed to one the owner does not have.
        ValueError: If the resulting dates would put check-out on or before check-in.
    """
    if "guest_id" in changes and changes["guest_id"] != booking.guest_id:
        await _ensure_guest_owned(db, owner_id, changes["guest_id"])

    effective_check_in = changes.get("check_in", booking.check_in)
    effective_check_out = changes.get("check_out", booking.check_out)
    if effective_check_out <= effective_check_in:
        raise ValueError("check_out must be after check_in")

    for field, value in changes.items():
        setattr(booking, field, value)

    db.add(booking)
    await db.flush()
    await db.refresh(booking)
    logger.info("Updated booking %s for owner %s", booking.id, owner_id)
    return booking


async def delete_booking(db: AsyncSession, owner_id: uuid.UUID, booking: Booking) -> None:
    await db.delete(booking)
    await db.flush()
    logger.info("Deleted booking %s for owner %s", booking.id, owner_id)
