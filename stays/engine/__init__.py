"""Pure booking computations: availability, pricing and record assembly."""

from .availability import ensure_stay_available, find_conflicting_bookings, is_stay_available
from .builder import build_booking
from .pricing import compute_pricing, select_discount

__all__ = [
    "build_booking",
    "compute_pricing",
    "ensure_stay_available",
    "find_conflicting_bookings",
    "is_stay_available",
    "select_discount",
]
