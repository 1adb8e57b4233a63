"""Booking confirmation notifications.

The service is handed a ``Notifier``; there is no module-level mail
transport.  ``HttpEmailNotifier`` posts to a transactional email API,
``LogNotifier`` just logs (development and tests).
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import httpx

from stays.models import BookingRecord, Property
from stays.models.pricing import format_amount

log = logging.getLogger("stays.notifications")


def redact_pii(value: str) -> str:
    """Mask PII for logging: show first 3 and last 2 chars only."""
    if not value or len(value) <= 5:
        return "***"
    return value[:3] + "***" + value[-2:]


def confirmation_subject(record: BookingRecord) -> str:
    return f"Booking request received: {record.property_title or record.property_id}"


def confirmation_text(record: BookingRecord, prop: Property | None = None) -> str:
    """Plain-text body of the booking confirmation email."""
    title = record.property_title or (prop.title if prop else record.property_id)
    lines = [
        f"Hi {record.guest_name or 'there'},",
        "",
        f"We have received your booking request for {title}.",
        f"  Booking ID: {record.id}",
        f"  Check-in:   {record.check_in.strftime('%A, %B %d, %Y')}",
        f"  Check-out:  {record.check_out.strftime('%A, %B %d, %Y')}",
        f"  Guests:     {record.guest_count}",
        f"  Nights:     {record.nights}",
        f"  Total:      {format_amount(record.total_amount, record.currency)}",
        f"  Status:     {record.status.value}",
        "",
        "The host will confirm your stay shortly.",
    ]
    return "\n".join(lines)


class Notifier(ABC):
    """Sends guest-facing booking messages."""

    @abstractmethod
    async def send_booking_confirmation(
        self, email: str, record: BookingRecord, prop: Property | None = None
    ) -> None:
        """Tell the guest their booking was received.

        Raises on delivery failure; the caller decides whether that matters.
        """


class LogNotifier(Notifier):
    """Logs the message instead of sending it."""

    async def send_booking_confirmation(
        self, email: str, record: BookingRecord, prop: Property | None = None
    ) -> None:
        log.info(
            "Confirmation for booking %s to %s: %s",
            record.id, redact_pii(email), confirmation_subject(record),
        )


class HttpEmailNotifier(Notifier):
    """Deliver through a JSON email API (``POST {api_url}``, bearer auth)."""

    def __init__(
        self,
        api_url: str,
        api_key: str = "",
        sender: str = "bookings@example.com",
        timeout: float = 15,
    ) -> None:
        self._api_url = api_url
        self._api_key = api_key
        self._sender = sender
        self._timeout = timeout

    async def send_booking_confirmation(
        self, email: str, record: BookingRecord, prop: Property | None = None
    ) -> None:
        payload = {
            "from": self._sender,
            "to": [email],
            "subject": confirmation_subject(record),
            "text": confirmation_text(record, prop),
        }
        headers = {"Authorization": f"Bearer {self._api_key}"} if self._api_key else {}

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            resp = await client.post(self._api_url, json=payload, headers=headers)
            resp.raise_for_status()

        log.info("Confirmation email for booking %s sent to %s", record.id, redact_pii(email))
