"""Data models for the booking engine."""

from .actor import Actor, Role
from .booking import (
    ACTIVE_STATUSES,
    CANCELLED_STATUSES,
    BookingParties,
    BookingRecord,
    BookingRequest,
    BookingStatus,
    PaymentStatus,
)
from .pricing import AppliedDiscount, DiscountKind, PriceBreakdown, PricingConfig
from .property import Property, PropertyPricing, PropertyStatus
from .stay import AvailabilityWindow, BlockedRange, DateRange, StayRequest

__all__ = [
    "ACTIVE_STATUSES",
    "CANCELLED_STATUSES",
    "Actor",
    "AppliedDiscount",
    "AvailabilityWindow",
    "BlockedRange",
    "BookingParties",
    "BookingRecord",
    "BookingRequest",
    "BookingStatus",
    "DateRange",
    "DiscountKind",
    "PaymentStatus",
    "PriceBreakdown",
    "PricingConfig",
    "Property",
    "PropertyPricing",
    "PropertyStatus",
    "Role",
    "StayRequest",
]
