"""Booking service: runs a booking request through the engine and storage.

Flow for a new booking::

    request -> StayRequest.build            (InvalidStayRange)
            -> capacity / published checks
            -> ensure_stay_available        (StayUnavailable)
            -> PricingConfig via the property (InvalidPricingInput)
            -> compute_pricing             (StayLengthOutOfBounds)
            -> build_booking
            -> repository.insert_booking    (atomic double-booking guard)
            -> notifier                     (failures logged, never fatal)

The same steps minus persistence back ``quote``, the live price preview.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Callable, Optional

from pydantic import BaseModel

from stays.engine import (
    build_booking,
    compute_pricing,
    ensure_stay_available,
    find_conflicting_bookings,
    is_stay_available,
)
from stays.engine.availability import ranges_overlap
from stays.engine.calendar import add_range, remove_range
from stays.engine.lifecycle import blocked_range_for, transition_payment, transition_status
from stays.engine.reporting import BookingFilter, BookingStats, booking_stats, filter_bookings
from stays.errors import InvalidStayRange, NotFound, PermissionDenied, StayUnavailable
from stays.models import (
    CANCELLED_STATUSES,
    Actor,
    AvailabilityWindow,
    BlockedRange,
    BookingParties,
    BookingRecord,
    BookingRequest,
    BookingStatus,
    PaymentStatus,
    PriceBreakdown,
    Property,
    StayRequest,
)
from stays.notifications import LogNotifier, Notifier, redact_pii
from stays.repositories import BookingRepository

log = logging.getLogger("stays.service")


class StayQuote(BaseModel):
    """Price preview for a stay; nothing is stored."""

    property_id: str
    stay: StayRequest
    available: bool
    breakdown: PriceBreakdown
    currency: str
    display: dict[str, str]


class BookingService:
    """Booking operations over a repository.

    Typical use::

        service = BookingService(InMemoryRepository.from_json(path))
        quote = await service.quote("prop-1", "2026-06-10", "2026-06-15", 2)
        record = await service.create_booking(request, actor)
        record = await service.change_status(record.id, "confirmed", host)
    """

    def __init__(
        self,
        repository: BookingRepository,
        notifier: Optional[Notifier] = None,
        *,
        unrestricted_when_empty: bool = False,
        currency: str = "INR",
        today: Callable[[], date] = date.today,
    ) -> None:
        self._repo = repository
        self._notifier = notifier or LogNotifier()
        self._unrestricted_when_empty = unrestricted_when_empty
        self._currency = currency
        self._today = today

    # ── Helpers ────────────────────────────────────────────────

    async def _property(self, property_id: str) -> Property:
        prop = await self._repo.get_property(property_id)
        if prop is None:
            raise NotFound(f"Property {property_id} not found.")
        return prop

    async def _booking(self, booking_id: str) -> BookingRecord:
        record = await self._repo.get_booking(booking_id)
        if record is None:
            raise NotFound(f"Booking {booking_id} not found.")
        return record

    @staticmethod
    def _check_capacity(prop: Property, stay: StayRequest) -> None:
        if stay.guest_count > prop.max_guests:
            raise InvalidStayRange(
                f"{prop.title} accommodates at most {prop.max_guests} guests."
            )

    @staticmethod
    def _require_owner(prop: Property, actor: Actor) -> None:
        if not actor.is_admin and actor.user_id != prop.host_id:
            raise PermissionDenied("You do not have permission to manage this property.")

    @staticmethod
    def _require_self(user_id: str, actor: Actor) -> None:
        if not actor.is_admin and actor.user_id != user_id:
            raise PermissionDenied("You can only view your own bookings.")

    # ── Quotes and bookings ─────────────────────────────────────

    async def quote(
        self,
        property_id: str,
        check_in: date | str,
        check_out: date | str,
        guest_count: int = 1,
    ) -> StayQuote:
        """Price a stay and report whether its dates are free."""
        prop = await self._property(property_id)
        stay = StayRequest.build(check_in, check_out, guest_count)
        self._check_capacity(prop, stay)

        breakdown = compute_pricing(prop.pricing.to_config(), stay.nights)

        existing = await self._repo.list_bookings(property_id=property_id)
        available = (
            prop.is_bookable
            and is_stay_available(
                prop.availability,
                prop.blocked_dates,
                stay,
                unrestricted_when_empty=self._unrestricted_when_empty,
            )
            and not find_conflicting_bookings(existing, stay)
        )

        return StayQuote(
            property_id=property_id,
            stay=stay,
            available=available,
            breakdown=breakdown,
            currency=self._currency,
            display=breakdown.display(self._currency),
        )

    async def create_booking(
        self, request: BookingRequest, actor: Optional[Actor] = None
    ) -> BookingRecord:
        """Validate, price and store a new pending booking."""
        if actor is not None:
            guest_id = actor.user_id
        elif request.guest_email and request.guest_name:
            guest_id = f"guest:{request.guest_email.strip().lower()}"
        else:
            raise PermissionDenied("Sign in or provide your name and email to book.")

        prop = await self._property(request.property_id)
        stay = StayRequest.build(request.check_in, request.check_out, request.guest_count)
        self._check_capacity(prop, stay)
        if not prop.is_bookable:
            raise StayUnavailable(f"{prop.title} is not accepting bookings.")

        existing = await self._repo.list_bookings(property_id=prop.id)
        ensure_stay_available(
            prop.availability,
            prop.blocked_dates,
            stay,
            existing=existing,
            unrestricted_when_empty=self._unrestricted_when_empty,
        )

        breakdown = compute_pricing(prop.pricing.to_config(), stay.nights)

        record = build_booking(
            stay,
            breakdown,
            BookingParties(property_id=prop.id, guest_id=guest_id, host_id=prop.host_id),
            currency=self._currency,
            property_title=prop.title,
            property_city=prop.city,
            property_address=prop.address,
            guest_name=request.guest_name,
            guest_email=request.guest_email,
            special_requests=request.special_requests,
        )
        await self._repo.insert_booking(record)
        log.info(
            "Booking %s created: property=%s nights=%d total=%s guest=%s",
            record.id, prop.id, record.nights, record.total_amount, redact_pii(guest_id),
        )

        if request.guest_email:
            try:
                await self._notifier.send_booking_confirmation(
                    request.guest_email, record, prop
                )
            except Exception:
                # The booking stands even if the email does not go out.
                log.exception("Failed to send confirmation for booking %s", record.id)

        return record

    async def get_booking(self, booking_id: str, actor: Actor) -> BookingRecord:
        record = await self._booking(booking_id)
        if not actor.is_admin and actor.user_id not in (record.host_id, record.guest_id):
            raise PermissionDenied("Not authorized to view this booking.")
        return record

    async def guest_bookings(self, guest_id: str, actor: Actor) -> list[BookingRecord]:
        self._require_self(guest_id, actor)
        return await self._repo.list_bookings(guest_id=guest_id)

    # ── Lifecycle ──────────────────────────────────────────────

    async def change_status(
        self,
        booking_id: str,
        new_status: BookingStatus | str,
        actor: Actor,
        reason: Optional[str] = None,
    ) -> BookingRecord:
        """Apply a status transition and keep the property calendar in step.

        Confirming closes the booked dates on the property; cancelling or
        rejecting a confirmed booking reopens them.  The calendar is updated
        before the booking is saved, so a booking is never stored as
        confirmed without its hold.

        Raises:
            StayUnavailable: confirming over dates the host has since blocked.
        """
        record = await self._booking(booking_id)
        updated = transition_status(record, new_status, actor, reason=reason)

        if updated.status == BookingStatus.CONFIRMED:
            prop = await self._property(updated.property_id)
            hold = blocked_range_for(updated)
            for block in prop.blocked_dates:
                if ranges_overlap(block.start_date, block.end_date, hold.start_date, hold.end_date):
                    detail = f" ({block.reason})" if block.reason else ""
                    raise StayUnavailable(
                        f"Cannot confirm: the booked dates overlap a blocked period "
                        f"{block.start_date.isoformat()} to {block.end_date.isoformat()}{detail}."
                    )
            blocked = sorted([*prop.blocked_dates, hold], key=lambda r: r.start_date)
            await self._store(prop, blocked_dates=blocked)
        elif record.status == BookingStatus.CONFIRMED and (
            updated.status in CANCELLED_STATUSES or updated.status == BookingStatus.REJECTED
        ):
            prop = await self._property(updated.property_id)
            hold = blocked_range_for(updated)
            await self._store(prop, blocked_dates=[r for r in prop.blocked_dates if r != hold])

        await self._repo.save_booking(updated)
        return updated

    async def change_payment_status(
        self,
        booking_id: str,
        new_status: PaymentStatus | str,
        *,
        amount: Optional[Decimal] = None,
        payment_id: Optional[str] = None,
    ) -> BookingRecord:
        record = await self._booking(booking_id)
        updated = transition_payment(record, new_status, amount=amount, payment_id=payment_id)
        await self._repo.save_booking(updated)
        return updated

    # ── Host dashboard ─────────────────────────────────────────

    async def host_bookings(
        self,
        host_id: str,
        actor: Actor,
        filters: Optional[BookingFilter] = None,
    ) -> list[BookingRecord]:
        self._require_self(host_id, actor)
        records = await self._repo.list_bookings(host_id=host_id)
        return filter_bookings(records, filters or BookingFilter(), today=self._today())

    async def host_stats(self, host_id: str, actor: Actor) -> BookingStats:
        self._require_self(host_id, actor)
        records = await self._repo.list_bookings(host_id=host_id)
        return booking_stats(records, today=self._today())

    # ── Host calendar ──────────────────────────────────────────

    async def calendar(self, property_id: str, actor: Actor) -> Property:
        prop = await self._property(property_id)
        self._require_owner(prop, actor)
        return prop

    async def add_availability(
        self, property_id: str, window: AvailabilityWindow, actor: Actor
    ) -> Property:
        prop = await self.calendar(property_id, actor)
        windows = add_range(prop.availability, window, today=self._today())
        return await self._store(prop, availability=windows)

    async def remove_availability(
        self, property_id: str, start_date: date, end_date: date, actor: Actor
    ) -> Property:
        prop = await self.calendar(property_id, actor)
        windows = remove_range(prop.availability, start_date, end_date)
        return await self._store(prop, availability=windows)

    async def add_blocked_range(
        self, property_id: str, block: BlockedRange, actor: Actor
    ) -> Property:
        prop = await self.calendar(property_id, actor)
        blocked = add_range(prop.blocked_dates, block, today=self._today())
        return await self._store(prop, blocked_dates=blocked)

    async def remove_blocked_range(
        self, property_id: str, start_date: date, end_date: date, actor: Actor
    ) -> Property:
        prop = await self.calendar(property_id, actor)
        blocked = remove_range(prop.blocked_dates, start_date, end_date)
        return await self._store(prop, blocked_dates=blocked)

    async def _store(self, prop: Property, **changes) -> Property:
        updated = prop.model_copy(update=changes)
        await self._repo.save_property(updated)
        log.info("Property %s calendar updated: %s", prop.id, ", ".join(changes))
        return updated
