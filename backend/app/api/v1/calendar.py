"""Calendar API router: bookings on a day and booked days in a range."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_active_user, get_db
from app.config import settings
from app.models.user import User
from app.schemas.statistics import BookedDaysResponse, DayBookingsResponse
from app.services import booking_stats
from app.services import bookings as booking_store

router = APIRouter(prefix="/api/v1/calendar", tags=["calendar"])


@router.get("/day", response_model=DayBookingsResponse)
async def bookings_for_day(
    day: date = Query(..., alias="date", description="Calendar day to inspect"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> DayBookingsResponse:
    """Return the bookings that cover ``date``, check-in and check-out days included."""
    snapshot = await booking_store.load_snapshot(db, current_user.id)
    items = booking_stats.bookings_on(day, snapshot)
    return DayBookingsResponse.model_validate(
        {"day": day, "items": items, "total": len(items)},
        from_attributes=True,
    )


@router.get("/booked-days", response_model=BookedDaysResponse)
async def booked_days(
    start: date = Query(..., description="First day of the range"),
    end: date = Query(..., description="Last day of the range (inclusive)"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> BookedDaysResponse:
    """Return the days in ``[start, end]`` that have at least one booking.

    Meant for decorating a month view without fetching every day separately.
    """
    if end < start:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="end must not be before start",
        )
    if (end - start).days + 1 > settings.calendar_max_range_days:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Range may span at most {settings.calendar_max_range_days} days",
        )

    snapshot = await booking_store.load_snapshot(db, current_user.id)
    return BookedDaysResponse(start=start, end=end, days=booking_stats.booked_days(start, end, snapshot))
