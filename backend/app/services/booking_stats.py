"""Booking statistics: pure aggregation over a snapshot of bookings.

Every function here takes an already-fetched, read-only collection of
bookings and returns plain values. Nothing in this module touches the
database or holds state between calls, so the same snapshot always yields
the same result.

A booking is anything exposing ``check_in``, ``check_out`` and ``price``.
``datetime`` values are reduced to their calendar date before any comparison.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import ROUND_FLOOR, Decimal
from typing import Any, Protocol

_ZERO = Decimal("0")
_ONE_DECIMAL = Decimal("0.1")
_HALF = Decimal("0.5")

# Fixed English abbreviations so labels do not depend on the process locale.
_MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


class BookingLike(Protocol):
    check_in: date
    check_out: date
    price: Any


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MonthlyRevenue:
    """Bookings and revenue for one check-in month."""

    month: str  # e.g. "Mar 2024"
    bookings: int
    revenue: Decimal


@dataclass(frozen=True)
class StayLengthBucket:
    """Number of bookings whose stay length falls in one duration bucket."""

    duration: str
    count: int


@dataclass(frozen=True)
class StatisticsSummary:
    """Headline totals for an owner's bookings."""

    total_bookings: int
    total_guests: int
    total_revenue: Decimal
    average_stay_length: Decimal  # days, one decimal place


@dataclass(frozen=True)
class StatisticsReport:
    """Everything the statistics page shows, computed from one snapshot."""

    summary: StatisticsSummary
    monthly_revenue: list[MonthlyRevenue] = field(default_factory=list)
    length_distribution: list[StayLengthBucket] = field(default_factory=list)


# Upper bound (inclusive, in days) -> label. Evaluated in order, first match wins;
# anything longer than the last bound goes to OPEN_ENDED_BUCKET.
STAY_LENGTH_BUCKETS: tuple[tuple[int, str], ...] = (
    (1, "1 day"),
    (3, "2-3 days"),
    (7, "4-7 days"),
    (14, "8-14 days"),
)
OPEN_ENDED_BUCKET = "15+ days"
BUCKET_LABELS: tuple[str, ...] = tuple(label for _, label in STAY_LENGTH_BUCKETS) + (OPEN_ENDED_BUCKET,)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def as_calendar_date(value: date | datetime) -> date:
    """Drop any time-of-day component."""
    if isinstance(value, datetime):
        return value.date()
    return value


def _price(booking: BookingLike) -> Decimal:
    price = booking.price
    if price is None:
        return _ZERO
    if isinstance(price, Decimal):
        return price
    return Decimal(str(price))


def month_label(month_start: date) -> str:
    """Format a month as ``"Mon YYYY"``."""
    return f"{_MONTH_ABBR[month_start.month - 1]} {month_start.year}"


# ---------------------------------------------------------------------------
# Date range matching and occupancy
# ---------------------------------------------------------------------------


def date_in_range(day: date | datetime, check_in: date | datetime, check_out: date | datetime) -> bool:
    """Return True if ``day`` lies within ``[check_in, check_out]``.

    Both ends are inclusive: a guest occupies their check-in and their
    check-out day for calendar display.
    """
    return as_calendar_date(check_in) <= as_calendar_date(day) <= as_calendar_date(check_out)


def bookings_on(day: date | datetime, bookings: Iterable[BookingLike]) -> list[BookingLike]:
    """Return the bookings active on ``day``, in snapshot order."""
    return [b for b in bookings if date_in_range(day, b.check_in, b.check_out)]


def has_booking_on(day: date | datetime, bookings: Iterable[BookingLike]) -> bool:
    """Return True if at least one booking covers ``day``."""
    return any(date_in_range(day, b.check_in, b.check_out) for b in bookings)


def booked_days(start: date | datetime, end: date | datetime, bookings: Sequence[BookingLike]) -> list[date]:
    """Return every day in ``[start, end]`` covered by at least one booking.

    Days come back in ascending order. An empty list is returned when
    ``end`` precedes ``start``.
    """
    first = as_calendar_date(start)
    last = as_calendar_date(end)
    days: list[date] = []
    day = first
    while day <= last:
        if has_booking_on(day, bookings):
            days.append(day)
        day += timedelta(days=1)
    return days


# ---------------------------------------------------------------------------
# Revenue
# ---------------------------------------------------------------------------


def monthly_revenue(bookings: Iterable[BookingLike]) -> list[MonthlyRevenue]:
    """Group bookings by check-in month and total their prices.

    Only the check-in date decides the month, so a stay that runs into the
    next month is counted once, in the month it started. Months are returned
    oldest first.
    """
    groups: dict[date, tuple[int, Decimal]] = {}
    for booking in bookings:
        check_in = as_calendar_date(booking.check_in)
        key = check_in.replace(day=1)
        count, revenue = groups.get(key, (0, _ZERO))
        groups[key] = (count + 1, revenue + _price(booking))

    return [
        MonthlyRevenue(month=month_label(month_start), bookings=count, revenue=revenue)
        for month_start, (count, revenue) in sorted(groups.items())
    ]


# ---------------------------------------------------------------------------
# Stay length
# ---------------------------------------------------------------------------


def stay_length(booking: BookingLike) -> int:
    """Whole days between check-in and check-out.

    Not clamped: a check-out before check-in gives a negative length.
    """
    return (as_calendar_date(booking.check_out) - as_calendar_date(booking.check_in)).days


def classify_stay(days: int) -> str:
    """Return the bucket label for a stay of ``days`` days."""
    for upper, label in STAY_LENGTH_BUCKETS:
        if days <= upper:
            return label
    return OPEN_ENDED_BUCKET


def length_distribution(bookings: Iterable[BookingLike]) -> list[StayLengthBucket]:
    """Count bookings per stay-length bucket.

    All five buckets are always present, in fixed order, with zero counts
    where nothing matched.
    """
    counts = dict.fromkeys(BUCKET_LABELS, 0)
    for booking in bookings:
        counts[classify_stay(stay_length(booking))] += 1
    return [StayLengthBucket(duration=label, count=counts[label]) for label in BUCKET_LABELS]


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------


def total_revenue(bookings: Iterable[BookingLike]) -> Decimal:
    return sum((_price(b) for b in bookings), _ZERO)


def average_stay_length(bookings: Sequence[BookingLike]) -> Decimal:
    """Mean stay length rounded to one decimal; 0 with no bookings.

    Halves round towards positive infinity: 1.25 -> 1.3, -0.25 -> -0.2.
    """
    if not bookings:
        return _ZERO
    total_days = sum(stay_length(b) for b in bookings)
    tenths = (Decimal(total_days) * 10 / Decimal(len(bookings)) + _HALF).to_integral_value(rounding=ROUND_FLOOR)
    return (tenths / 10).quantize(_ONE_DECIMAL)


def summarize(bookings: Sequence[BookingLike], guest_count: int) -> StatisticsSummary:
    """Compute headline totals.

    ``guest_count`` is the size of the owner's guest list and is passed
    through as is; it is not derived from the bookings.
    """
    return StatisticsSummary(
        total_bookings=len(bookings),
        total_guests=guest_count,
        total_revenue=total_revenue(bookings),
        average_stay_length=average_stay_length(bookings),
    )


def build_statistics(bookings: Sequence[BookingLike], guest_count: int) -> StatisticsReport:
    """Run every aggregation over the same snapshot."""
    return StatisticsReport(
        summary=summarize(bookings, guest_count),
        monthly_revenue=monthly_revenue(bookings),
        length_distribution=length_distribution(bookings),
    )
