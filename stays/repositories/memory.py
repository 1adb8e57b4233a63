"""In-memory repository, used for development, demos and tests.

Properties can be seeded from a JSON file holding a list of property
documents (see ``stays/sample_data/properties.json``).
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

from stays.engine.availability import find_conflicting_bookings
from stays.errors import NotFound, StayUnavailable
from stays.models import BookingRecord, Property, StayRequest

from .base import BookingRepository

log = logging.getLogger("stays.repositories.memory")


def load_properties_json(path: str | Path) -> list[Property]:
    """Load and validate a JSON list of property documents."""
    path = Path(path)
    raw = json.loads(path.read_text(encoding="utf-8"))
    return [Property(**item) for item in raw]


class InMemoryRepository(BookingRepository):
    """Dict-backed store; an ``asyncio.Lock`` makes check-and-insert atomic."""

    def __init__(self, properties: Optional[list[Property]] = None) -> None:
        self._properties: dict[str, Property] = {p.id: p for p in properties or []}
        self._bookings: dict[str, BookingRecord] = {}
        self._lock = asyncio.Lock()

    @classmethod
    def from_json(cls, path: str | Path) -> "InMemoryRepository":
        properties = load_properties_json(path)
        log.info("Loaded %d properties from %s", len(properties), path)
        return cls(properties)

    async def get_property(self, property_id: str) -> Optional[Property]:
        return self._properties.get(property_id)

    async def save_property(self, prop: Property) -> None:
        self._properties[prop.id] = prop

    async def get_booking(self, booking_id: str) -> Optional[BookingRecord]:
        return self._bookings.get(booking_id)

    async def list_bookings(
        self,
        *,
        property_id: Optional[str] = None,
        host_id: Optional[str] = None,
        guest_id: Optional[str] = None,
    ) -> list[BookingRecord]:
        found = [
            b for b in self._bookings.values()
            if (property_id is None or b.property_id == property_id)
            and (host_id is None or b.host_id == host_id)
            and (guest_id is None or b.guest_id == guest_id)
        ]
        found.sort(key=lambda b: b.created_at, reverse=True)
        return found

    async def insert_booking(self, record: BookingRecord) -> None:
        stay = StayRequest(
            check_in=record.check_in,
            check_out=record.check_out,
            guest_count=record.guest_count,
        )
        async with self._lock:
            same_property = [
                b for b in self._bookings.values() if b.property_id == record.property_id
            ]
            if find_conflicting_bookings(same_property, stay):
                raise StayUnavailable("The selected dates are already booked.")
            self._bookings[record.id] = record
        log.info("Booking %s stored for property %s", record.id, record.property_id)

    async def save_booking(self, record: BookingRecord) -> None:
        async with self._lock:
            if record.id not in self._bookings:
                raise NotFound(f"Booking {record.id} not found.")
            self._bookings[record.id] = record
