"""Pydantic v2 schemas for calendar and statistics endpoints."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from app.schemas.booking import BookingResponse


class MonthlyRevenueResponse(BaseModel):
    """Bookings and revenue for one check-in month, e.g. ``"Mar 2024"``."""

    month: str
    bookings: int
    revenue: Decimal

    model_config = ConfigDict(from_attributes=True)


class StayLengthBucketResponse(BaseModel):
    """Booking count for one stay-length bucket."""

    duration: str
    count: int

    model_config = ConfigDict(from_attributes=True)


class StatisticsSummaryResponse(BaseModel):
    """Headline totals across all of the owner's bookings."""

    total_bookings: int
    total_guests: int
    total_revenue: Decimal
    average_stay_length: Decimal

    model_config = ConfigDict(from_attributes=True)


class StatisticsReportResponse(BaseModel):
    """Summary, monthly revenue series and stay-length distribution."""

    summary: StatisticsSummaryResponse
    monthly_revenue: list[MonthlyRevenueResponse]
    length_distribution: list[StayLengthBucketResponse]

    model_config = ConfigDict(from_attributes=True)


class DashboardResponse(BaseModel):
    """Dashboard counters."""

    total_bookings: int
    total_guests: int
    total_revenue: Decimal


class DayBookingsResponse(BaseModel):
    """Bookings active on a calendar day (check-in and check-out days included)."""

    day: date
    items: list[BookingResponse]
    total: int


class BookedDaysResponse(BaseModel):
    """Days within a range that have at least one booking."""

    start: date
    end: date
    days: list[date]
