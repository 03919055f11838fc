"""Statistics API router: revenue, stay lengths and headline totals.

Each request loads the owner's bookings once and hands that snapshot to the
pure functions in ``app.services.booking_stats``.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_active_user, get_db
from app.models.user import User
from app.schemas.statistics import (
    DashboardResponse,
    MonthlyRevenueResponse,
    StatisticsReportResponse,
    StatisticsSummaryResponse,
    StayLengthBucketResponse,
)
from app.services import booking_stats
from app.services import bookings as booking_store
from app.services import guests as guest_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/statistics", tags=["statistics"])


@router.get("", response_model=StatisticsReportResponse)
async def get_statistics(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> StatisticsReportResponse:
    """Summary, monthly revenue and stay-length distribution in one response."""
    snapshot = await booking_store.load_snapshot(db, current_user.id)
    guest_count = await guest_store.count_guests(db, current_user.id)
    report = booking_stats.build_statistics(snapshot, guest_count)
    logger.debug("Built statistics for owner %s over %d bookings", current_user.id, len(snapshot))
    return StatisticsReportResponse.model_validate(report)


@router.get("/summary", response_model=StatisticsSummaryResponse)
async def get_summary(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> StatisticsSummaryResponse:
    snapshot = await booking_store.load_snapshot(db, current_user.id)
    guest_count = await guest_store.count_guests(db, current_user.id)
    return StatisticsSummaryResponse.model_validate(booking_stats.summarize(snapshot, guest_count))


@router.get("/monthly-revenue", response_model=list[MonthlyRevenueResponse])
async def get_monthly_revenue(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[MonthlyRevenueResponse]:
    """Bookings and revenue per check-in month, oldest month first."""
    snapshot = await booking_store.load_snapshot(db, current_user.id)
    return [MonthlyRevenueResponse.model_validate(m) for m in booking_stats.monthly_revenue(snapshot)]


@router.get("/stay-lengths", response_model=list[StayLengthBucketResponse])
async def get_stay_lengths(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[StayLengthBucketResponse]:
    """Booking counts for all five stay-length buckets."""
    snapshot = await booking_store.load_snapshot(db, current_user.id)
    return [StayLengthBucketResponse.model_validate(b) for b in booking_stats.length_distribution(snapshot)]


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> DashboardResponse:
    """Total bookings, guests and revenue."""
    snapshot = await booking_store.load_snapshot(db, current_user.id)
    guest_count = await guest_store.count_guests(db, current_user.id)
    return DashboardResponse(
        total_bookings=len(snapshot),
        total_guests=guest_count,
        total_revenue=booking_stats.total_revenue(snapshot),
    )
