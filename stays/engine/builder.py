"""Booking record builder: assemble a pending booking from a priced stay."""

from __future__ import annotations

import secrets
from datetime import datetime, timezone
from typing import Optional

from stays.errors import InvalidStayRange
from stays.models import (
    BookingParties,
    BookingRecord,
    BookingStatus,
    PaymentStatus,
    PriceBreakdown,
    StayRequest,
)


def new_booking_id() -> str:
    """24 hex chars, the same shape as a document-store object id."""
    return secrets.token_hex(12)


def build_booking(
    stay: StayRequest,
    breakdown: PriceBreakdown,
    parties: BookingParties,
    *,
    now: Optional[datetime] = None,
    booking_id: Optional[str] = None,
    currency: str = "INR",
    property_title: str = "",
    property_city: str = "",
    property_address: str = "",
    guest_name: str = "",
    guest_email: str = "",
    special_requests: Optional[str] = None,
) -> BookingRecord:
    """Return a new pending, unpaid ``BookingRecord``.

    ``breakdown`` is stored as-is; no amount is recomputed or rounded.
    Pure: nothing is persisted and nobody is notified.
    """
    if breakdown.nights != stay.nights:
        raise InvalidStayRange(
            f"Price breakdown covers {breakdown.nights} nights "
            f"but the stay is {stay.nights}."
        )

    stamp = now or datetime.now(tz=timezone.utc)

    return BookingRecord(
        id=booking_id or new_booking_id(),
        property_id=parties.property_id,
        guest_id=parties.guest_id,
        host_id=parties.host_id,
        check_in=stay.check_in,
        check_out=stay.check_out,
        guest_count=stay.guest_count,
        pricing=breakdown,
        currency=currency,
        status=BookingStatus.PENDING,
        payment_status=PaymentStatus.PENDING,
        property_title=property_title,
        property_city=property_city,
        property_address=property_address,
        guest_name=guest_name,
        guest_email=guest_email,
        special_requests=special_requests,
        created_at=stamp,
        updated_at=stamp,
    )
