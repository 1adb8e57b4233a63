"""Pydantic models for booking requests and booking records."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .pricing import PriceBreakdown


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED_BY_GUEST = "cancelled_by_guest"
    CANCELLED_BY_HOST = "cancelled_by_host"
    REJECTED = "rejected"


# Bookings that hold their dates against new requests.
ACTIVE_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED})

CANCELLED_STATUSES = frozenset(
    {BookingStatus.CANCELLED_BY_GUEST, BookingStatus.CANCELLED_BY_HOST}
)


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    REFUNDED = "refunded"
    PARTIALLY_REFUNDED = "partially_refunded"
    FAILED = "failed"


class BookingParties(BaseModel):
    """Identifiers of everyone a booking belongs to."""

    model_config = ConfigDict(frozen=True)

    property_id: str = Field(min_length=1)
    guest_id: str = Field(min_length=1)
    host_id: str = Field(min_length=1)


class BookingRequest(BaseModel):
    """What a guest submits to book a stay."""

    property_id: str = Field(min_length=1)
    check_in: date
    check_out: date
    guest_count: int = 1
    guest_name: str = ""
    guest_email: str = ""
    special_requests: Optional[str] = Field(default=None, max_length=500)


class BookingRecord(BaseModel):
    """A booking as persisted.

    Pricing is frozen at creation.  Only the lifecycle operations produce
    changed copies, and they never touch ``pricing``.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    property_id: str
    guest_id: str
    host_id: str
    check_in: date
    check_out: date
    guest_count: int = Field(ge=1)
    pricing: PriceBreakdown
    currency: str = "INR"

    status: BookingStatus = BookingStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_id: Optional[str] = None

    # Snapshot taken at booking time
    property_title: str = ""
    property_city: str = ""
    property_address: str = ""
    guest_name: str = ""
    guest_email: str = ""
    special_requests: Optional[str] = Field(default=None, max_length=500)

    cancellation_reason: Optional[str] = Field(default=None, max_length=500)
    cancellation_date: Optional[datetime] = None
    refund_amount: Optional[Decimal] = Field(default=None, ge=0)

    created_at: datetime
    updated_at: datetime

    @property
    def nights(self) -> int:
        return self.pricing.nights

    @property
    def total_amount(self) -> Decimal:
        return self.pricing.total_amount

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES
