"""Booking error taxonomy.

Every failure the engine reports is a ``BookingError`` subclass carrying a
stable ``code`` and a message fit to show a guest or host.  They are
validation outcomes, not crashes: the HTTP layer maps each one to a status
code and callers of the service are expected to catch them.
"""

from __future__ import annotations


class BookingError(Exception):
    """Base class for recoverable booking failures."""

    code = "booking_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"error": self.code, "message": self.message}


class InvalidStayRange(BookingError):
    """Check-out not after check-in, or an impossible guest count."""

    code = "invalid_stay_range"


class StayUnavailable(BookingError):
    """The requested dates cannot be booked on this property."""

    code = "stay_unavailable"


class StayLengthOutOfBounds(BookingError):
    """Nights fall below the minimum or above the maximum stay."""

    code = "stay_length_out_of_bounds"


class InvalidPricingInput(BookingError):
    """Malformed price, fee, tax or discount configuration."""

    code = "invalid_pricing_input"


class NotFound(BookingError):
    code = "not_found"


class PermissionDenied(BookingError):
    code = "permission_denied"


class InvalidStatusTransition(BookingError):
    code = "invalid_status_transition"


class OverlappingRange(BookingError):
    """A calendar edit collides with an existing range."""

    code = "overlapping_range"
