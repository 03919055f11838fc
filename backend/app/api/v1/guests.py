"""Guests CRUD API router.

Guests are isolated per owner; each host can only see and manage their own guests.
"""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_active_user, get_db
from app.models.guest import Guest
from app.models.user import User
from app.schemas.auth import MessageResponse
from app.schemas.guest import (
    GuestCreate,
    GuestListResponse,
    GuestResponse,
    GuestUpdate,
)
from app.services import guests as guest_store
from app.services.guests import DuplicateGuestEmailError

router = APIRouter(prefix="/api/v1/guests", tags=["guests"])

# Fields that may be cleared with an explicit null
_NULLABLE_FIELDS = {"notes"}


def _duplicate_email() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail="Guest with this email already exists",
    )


async def _get_owned_guest(guest_id: uuid.UUID, current_user: User, db: AsyncSession) -> Guest:
    """Fetch a guest of the current user or raise 404."""
    guest = await guest_store.get_guest(db, current_user.id, guest_id)
    if guest is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Guest not found",
        )
    return guest


@router.post(
    "",
    response_model=GuestResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new guest",
)
async def create_guest(
    body: GuestCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Guest:
    """Create a new guest owned by the current user.

    Raises 409 if the current user already has a guest with the same email.
    """
    try:
        return await guest_store.create_guest(db, current_user.id, body.model_dump())
    except DuplicateGuestEmailError:
        raise _duplicate_email() from None


@router.get(
    "",
    response_model=GuestListResponse,
    summary="List guests with optional search",
)
async def list_guests(
    search: str | None = Query(None, description="Search name, email, phone or notes (case-insensitive)"),
    skip: int = Query(0, ge=0, description="Pagination offset"),
    limit: int = Query(50, ge=1, le=500, description="Pagination limit"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> dict:
    """Return the current user's guests ordered by name."""
    items, total = await guest_store.list_guests(db, current_user.id, search=search, skip=skip, limit=limit)
    return {"items": items, "total": total}


@router.get(
    "/{guest_id}",
    response_model=GuestResponse,
    summary="Get a guest by ID",
)
async def get_guest(
    guest_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Guest:
    """Return a single guest owned by the current user."""
    return await _get_owned_guest(guest_id, current_user, db)


@router.put(
    "/{guest_id}",
    response_model=GuestResponse,
    summary="Update a guest",
)
async def update_guest(
    guest_id: uuid.UUID,
    body: GuestUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Guest:
    """Partially update a guest. Only explicitly provided fields are changed.

    If the email is being changed, checks for uniqueness scoped to owner.
    """
    guest = await _get_owned_guest(guest_id, current_user, db)
    changes = {
        field: value
        for field, value in body.model_dump(exclude_unset=True).items()
        if value is not None or field in _NULLABLE_FIELDS
    }
    try:
        return await guest_store.update_guest(db, current_user.id, guest, changes)
    except DuplicateGuestEmailError:
        raise _duplicate_email() from None


@router.delete(
    "/{guest_id}",
    response_model=MessageResponse,
    summary="Delete a guest",
)
async def delete_guest(
    guest_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> dict:
    """Delete a guest and, with them, all of their bookings."""
    guest = await _get_owned_guest(guest_id, current_user, db)
    await guest_store.delete_guest(db, current_user.id, guest)
    return {"message": "Guest deleted"}
