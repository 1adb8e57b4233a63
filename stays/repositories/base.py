"""Abstract base class for booking storage.

Defines the interface the booking service needs from persistence.  Any
backend (document store, SQL, in-memory) implements this ABC.
"""

from abc import ABC, abstractmethod
from typing import Optional

from stays.models import BookingRecord, Property


class BookingRepository(ABC):
    """Abstract store for properties and bookings.

    Subclasses must make ``insert_booking`` atomic with respect to other
    inserts on the same property: two overlapping active bookings must never
    both be stored.
    """

    @abstractmethod
    async def get_property(self, property_id: str) -> Optional[Property]:
        """Return the property, or None if it does not exist."""

    @abstractmethod
    async def save_property(self, prop: Property) -> None:
        """Create or replace a property.

        Calendar edits are read-modify-write of the whole document.  Backends
        shared between processes must serialize writes per property (a
        version check or a lock), or concurrent confirmations can drop a
        blocked range.
        """

    @abstractmethod
    async def get_booking(self, booking_id: str) -> Optional[BookingRecord]:
        """Return the booking, or None if it does not exist."""

    @abstractmethod
    async def list_bookings(
        self,
        *,
        property_id: Optional[str] = None,
        host_id: Optional[str] = None,
        guest_id: Optional[str] = None,
    ) -> list[BookingRecord]:
        """Return bookings matching every given identifier.

        Args:
            property_id: Only bookings of this property.
            host_id: Only bookings hosted by this user.
            guest_id: Only bookings made by this user.

        Returns:
            Matching records, most recently created first.
        """

    @abstractmethod
    async def insert_booking(self, record: BookingRecord) -> None:
        """Store a new booking.

        Raises:
            StayUnavailable: an active booking on the same property already
                holds overlapping dates.
        """

    @abstractmethod
    async def save_booking(self, record: BookingRecord) -> None:
        """Replace an existing booking (status changes)."""
