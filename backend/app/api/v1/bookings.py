"""Bookings CRUD API router.

Ownership rule: a user can only access **their** bookings, and a booking can
only reference one of their guests.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_active_user, get_db
from app.models.booking import Booking
from app.models.user import User
from app.schemas.auth import MessageResponse
from app.schemas.booking import (
    BookingCreate,
    BookingDetailResponse,
    BookingListResponse,
    BookingResponse,
    BookingUpdate,
)
from app.services import bookings as booking_store
from app.services.bookings import GuestNotOwnedError
from app.services.notifications import send_booking_confirmation

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/bookings", tags=["bookings"])

# Fields that may be cleared with an explicit null
_NULLABLE_FIELDS = {"notes"}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _guest_not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Guest not found",
    )


async def _get_owned_booking(
    booking_id: uuid.UUID,
    current_user: User,
    db: AsyncSession,
) -> Booking:
    """Fetch a booking of the current user.

    Raises ``HTTPException 404`` when the booking does not exist or belongs to
    someone else.
    """
    booking = await booking_store.get_booking(db, current_user.id, booking_id)
    if booking is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Booking not found",
        )
    return booking


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.post(
    "",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new booking",
)
async def create_booking(
    body: BookingCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Booking:
    """Create a booking for one of the current user's guests.

    A booking confirmation is sent to the host afterwards; if sending fails
    the booking is still kept.
    """
    try:
        booking = await booking_store.create_booking(db, current_user.id, body.model_dump())
    except GuestNotOwnedError:
        raise _guest_not_found() from None

    send_booking_confirmation(booking, booking.guest, current_user.email)
    return booking


@router.get(
    "",
    response_model=BookingListResponse,
    summary="List the current user's bookings",
)
async def list_bookings(
    guest_id: uuid.UUID | None = Query(None, description="Filter by guest"),
    check_in_from: date | None = Query(None, description="Bookings with check_in >= this date"),
    check_in_to: date | None = Query(None, description="Bookings with check_in <= this date"),
    search: str | None = Query(None, description="Search guest name, email, phone or booking notes"),
    skip: int = Query(0, ge=0, description="Pagination offset"),
    limit: int = Query(50, ge=1, le=500, description="Pagination limit"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> dict:
    """Return the current user's bookings ordered by check-in date."""
    items, total = await booking_store.list_bookings(
        db,
        current_user.id,
        guest_id=guest_id,
        check_in_from=check_in_from,
        check_in_to=check_in_to,
        search=search,
        skip=skip,
        limit=limit,
    )
    return {"items": items, "total": total}


@router.get(
    "/recent",
    response_model=list[BookingResponse],
    summary="First bookings by check-in date, for the dashboard",
)
async def recent_bookings(
    limit: int = Query(5, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[Booking]:
    return await booking_store.recent_bookings(db, current_user.id, limit=limit)


@router.get(
    "/{booking_id}",
    response_model=BookingDetailResponse,
    summary="Get booking detail with the full guest record",
)
async def get_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Booking:
    """Retrieve a single booking. Returns 404 if it isn't the current user's."""
    return await _get_owned_booking(booking_id, current_user, db)


@router.put(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Update a booking",
)
async def update_booking(
    booking_id: uuid.UUID,
    body: BookingUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Booking:
    """Partially update a booking.

    Dates are re-validated against the stored values when only one of them
    changes. Moving the booking to another guest requires that guest to be
    the current user's.
    """
    booking = await _get_owned_booking(booking_id, current_user, db)
    changes = {
        field: value
        for field, value in body.model_dump(exclude_unset=True).items()
        if value is not None or field in _NULLABLE_FIELDS
    }

    try:
        return await booking_store.update_booking(db, current_user.id, booking, changes)
    except GuestNotOwnedError:
        raise _guest_not_found() from None
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from None


@router.delete(
    "/{booking_id}",
    response_model=MessageResponse,
    summary="Delete a booking",
)
async def delete_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> dict:
    """Delete one of the current user's bookings."""
    booking = await _get_owned_booking(booking_id, current_user, db)
    await booking_store.delete_booking(db, current_user.id, booking)
    return {"message": "Booking deleted"}
