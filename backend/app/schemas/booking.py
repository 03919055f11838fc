"""Pydantic v2 request/response schemas for booking endpoints."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.schemas.guest import GuestResponse, GuestSummary

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class BookingCreate(BaseModel):
    """Schema for creating a new booking."""

    guest_id: uuid.UUID
    check_in: date
    check_out: date
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    notes: str | None = None

    @model_validator(mode="after")
    def check_dates(self) -> "BookingCreate":
        """Validate that check_out is strictly after check_in."""
        if self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        return self


class BookingUpdate(BaseModel):
    """Schema for partially updating a booking. All fields optional."""

    guest_id: uuid.UUID | None = None
    check_in: date | None = None
    check_out: date | None = None
    price: Decimal | None = Field(None, gt=0, max_digits=10, decimal_places=2)
    notes: str | None = None

    @model_validator(mode="after")
    def check_dates(self) -> "BookingUpdate":
        """If both dates are provided, validate check_out > check_in."""
        if self.check_in is not None and self.check_out is not None and self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        return self


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BookingResponse(BaseModel):
    """Booking returned from list and CRUD operations, with the guest's contact fields."""

    id: uuid.UUID
    guest_id: uuid.UUID
    check_in: date
    check_out: date
    price: Decimal
    notes: str | None = None
    guest: GuestSummary | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BookingDetailResponse(BookingResponse):
    """Single-booking view with the full guest record."""

    guest: GuestResponse | None = None


class BookingListResponse(BaseModel):
    """Paginated list of bookings."""

    items: list[BookingResponse]
    total: int
