"""Host dashboard views over booking records: filtered lists and stats."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Iterable, Literal, Optional

from pydantic import BaseModel

from stays.models import CANCELLED_STATUSES, BookingRecord, BookingStatus

RECENT_DAYS = 30


class BookingFilter(BaseModel):
    status: Literal["all", "pending", "confirmed", "completed", "cancelled", "rejected"] = "all"
    sort_by: Literal["newest", "oldest", "check_in", "check_out", "amount"] = "check_in"
    search: Optional[str] = None
    timeframe: Literal["upcoming", "past", "all"] = "upcoming"


class BookingStats(BaseModel):
    upcoming_bookings: int = 0
    current_guests: int = 0
    recent_completed_bookings: int = 0
    total_revenue: Decimal = Decimal("0")


def _matches_status(record: BookingRecord, status: str) -> bool:
    if status == "all":
        return True
    if status == "cancelled":
        return record.status in CANCELLED_STATUSES
    return record.status.value == status


def _matches_timeframe(record: BookingRecord, timeframe: str, today: date) -> bool:
    if timeframe == "upcoming":
        return record.check_out >= today
    if timeframe == "past":
        return record.check_out < today
    return True


def _matches_search(record: BookingRecord, search: Optional[str]) -> bool:
    if not search:
        return True
    needle = search.strip().lower()
    haystack = (
        record.property_title,
        record.property_city,
        record.property_address,
        record.guest_name,
        record.guest_email,
    )
    return any(needle in field.lower() for field in haystack)


_SORT_KEYS = {
    "newest": (lambda r: r.created_at, True),
    "oldest": (lambda r: r.created_at, False),
    "check_in": (lambda r: r.check_in, False),
    "check_out": (lambda r: r.check_out, False),
    "amount": (lambda r: r.total_amount, True),
}


def filter_bookings(
    records: Iterable[BookingRecord],
    filters: BookingFilter,
    *,
    today: date,
) -> list[BookingRecord]:
    """Apply status, timeframe and search filters, then sort."""
    kept = [
        r for r in records
        if _matches_status(r, filters.status)
        and _matches_timeframe(r, filters.timeframe, today)
        and _matches_search(r, filters.search)
    ]
    key, reverse = _SORT_KEYS[filters.sort_by]
    return sorted(kept, key=key, reverse=reverse)


def booking_stats(records: Iterable[BookingRecord], *, today: date) -> BookingStats:
    """Dashboard counters for one host's bookings as of ``today``.

    * upcoming: pending or confirmed, checking in today or later
    * current guests: confirmed and in residence today
    * recent completed: completed, checked out within the last 30 days
    * revenue: total of confirmed/completed bookings created in the last 30 days
    """
    window_start = today - timedelta(days=RECENT_DAYS)
    created_after = datetime.combine(window_start, time.min, tzinfo=timezone.utc)

    stats = BookingStats()
    revenue = Decimal("0")
    for r in records:
        if r.status in (BookingStatus.PENDING, BookingStatus.CONFIRMED) and r.check_in >= today:
            stats.upcoming_bookings += 1
        if r.status == BookingStatus.CONFIRMED and r.check_in <= today < r.check_out:
            stats.current_guests += 1
        if r.status == BookingStatus.COMPLETED and window_start <= r.check_out <= today:
            stats.recent_completed_bookings += 1
        if (
            r.status in (BookingStatus.CONFIRMED, BookingStatus.COMPLETED)
            and _aware(r.created_at) >= created_after
        ):
            revenue += r.total_amount
    stats.total_revenue = revenue
    return stats


def _aware(stamp: datetime) -> datetime:
    return stamp if stamp.tzinfo else stamp.replace(tzinfo=timezone.utc)
