"""Guest storage: owner-scoped queries and mutations.

Every function takes the owner's id explicitly; no query runs without it.
"""

import logging
import uuid

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.guest import Guest

logger = logging.getLogger(__name__)


class DuplicateGuestEmailError(Exception):
    """The owner already has a guest with this email."""


def _search_filter(search: str):
    """Case-insensitive literal substring match; ``%`` and ``_`` are not wildcards."""
    return or_(
        Guest.name.icontains(search, autoescape=True),
        Guest.email.icontains(search, autoescape=True),
        Guest.phone.icontains(search, autoescape=True),
        Guest.notes.icontains(search, autoescape=True),
    )


async def list_guests(
    db: AsyncSession,
    owner_id: uuid.UUID,
    *,
    search: str | None = None,
    skip: int = 0,
    limit: int | None = None,
) -> tuple[list[Guest], int]:
    """Return a page of the owner's guests ordered by name, plus the total match count."""
    filters = [Guest.owner_id == owner_id]
    if search:
        filters.append(_search_filter(search))

    total_result = await db.execute(select(func.count()).select_from(Guest).where(*filters))
    total = total_result.scalar_one()

    query = select(Guest).where(*filters).order_by(Guest.name, Guest.created_at).offset(skip)
    if limit is not None:
        query = query.limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all()), total


async def count_guests(db: AsyncSession, owner_id: uuid.UUID) -> int:
    result = await db.execute(select(func.count()).select_from(Guest).where(Guest.owner_id == owner_id))
    return result.scalar_one()


async def get_guest(db: AsyncSession, owner_id: uuid.UUID, guest_id: uuid.UUID) -> Guest | None:
    result = await db.execute(select(Guest).where(Guest.id == guest_id, Guest.owner_id == owner_id))
    return result.scalar_one_or_none()


async def _email_taken(
    db: AsyncSession,
    owner_id: uuid.UUID,
    email: str,
    exclude_guest_id: uuid.UUID | None = None,
) -> bool:
    query = select(Guest.id).where(Guest.owner_id == owner_id, func.lower(Guest.email) == email.lower())
    if exclude_guest_id is not None:
        query = query.where(Guest.id != exclude_guest_id)
    result = await db.execute(query)
    return result.first() is not None


async def create_guest(db: AsyncSession, owner_id: uuid.UUID, data: dict) -> Guest:
    """Create a guest for the owner.

    Raises:
        DuplicateGuestEmailError: If the owner already has a guest with this email.
    """
    if await _email_taken(db, owner_id, data["email"]):
        raise DuplicateGuestEmailError(data["email"])

    guest = Guest(owner_id=owner_id, **data)
    db.add(guest)
    await db.flush()
    await db.refresh(guest)
    logger.info("Created guest %s for owner %s", guest.id, owner_id)
    return guest


async def update_guest(db: AsyncSession, owner_id: uuid.UUID, guest: Guest, changes: dict) -> Guest:
    """Apply a partial update to a guest already loaded for this owner.

    Raises:
        DuplicateGuestEmailError: If the new email belongs to another of the owner's guests.
    """
    if "email" in changes and changes["email"] != guest.email:
        if await _email_taken(db, owner_id, changes["email"], exclude_guest_id=guest.id):
            raise DuplicateGuestEmailError(changes["email"])

    for field, value in changes.items():
        setattr(guest, field, value)

    db.add(guest)
    await db.flush()
    await db.refresh(guest)
    logger.info("Updated guest %s for owner %s", guest.id, owner_id)
    return guest


async def delete_guest(db: AsyncSession, owner_id: uuid.UUID, guest: Guest) -> None:
    """Delete a guest. Their bookings are removed by the database cascade."""
    await db.delete(guest)
    await db.flush()
    logger.info("Deleted guest %s for owner %s", guest.id, owner_id)
