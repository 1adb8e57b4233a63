"""Booking storage abstractions and implementations."""

from .base import BookingRepository
from .memory import InMemoryRepository, load_properties_json

__all__ = ["BookingRepository", "InMemoryRepository", "load_properties_json"]
