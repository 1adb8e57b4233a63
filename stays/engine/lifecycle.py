"""Booking and payment status transitions.

Records are immutable; every transition returns a changed copy and leaves
the frozen pricing alone.

Status graph::

    pending   -> confirmed | rejected | cancelled_by_guest | cancelled_by_host
    confirmed -> completed | cancelled_by_guest | cancelled_by_host

Everything else is terminal.  Hosts (of this booking) confirm, reject,
complete and cancel as host; the guest cancels as guest; admins may do
either.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Optional

from stays.errors import InvalidPricingInput, InvalidStatusTransition, PermissionDenied
from stays.models import (
    CANCELLED_STATUSES,
    Actor,
    BlockedRange,
    BookingRecord,
    BookingStatus,
    PaymentStatus,
)

log = logging.getLogger("stays.lifecycle")

MAX_REASON_LENGTH = 500

STATUS_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({
        BookingStatus.CONFIRMED,
        BookingStatus.REJECTED,
        BookingStatus.CANCELLED_BY_GUEST,
        BookingStatus.CANCELLED_BY_HOST,
    }),
    BookingStatus.CONFIRMED: frozenset({
        BookingStatus.COMPLETED,
        BookingStatus.CANCELLED_BY_GUEST,
        BookingStatus.CANCELLED_BY_HOST,
    }),
}

HOST_STATUSES = frozenset({
    BookingStatus.CONFIRMED,
    BookingStatus.REJECTED,
    BookingStatus.CANCELLED_BY_HOST,
    BookingStatus.COMPLETED,
})
GUEST_STATUSES = frozenset({BookingStatus.CANCELLED_BY_GUEST})

PAYMENT_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.COMPLETED, PaymentStatus.FAILED}),
    PaymentStatus.FAILED: frozenset({PaymentStatus.PENDING}),
    PaymentStatus.COMPLETED: frozenset(
        {PaymentStatus.REFUNDED, PaymentStatus.PARTIALLY_REFUNDED}
    ),
    PaymentStatus.PARTIALLY_REFUNDED: frozenset({PaymentStatus.REFUNDED}),
}


def _now(now: Optional[datetime]) -> datetime:
    return now or datetime.now(tz=timezone.utc)


def can_transition(current: BookingStatus, new: BookingStatus) -> bool:
    return new in STATUS_TRANSITIONS.get(current, frozenset())


def check_permission(record: BookingRecord, new: BookingStatus, actor: Actor) -> None:
    """Raise ``PermissionDenied`` unless ``actor`` may move ``record`` to ``new``."""
    if actor.is_admin:
        return
    if new in HOST_STATUSES and actor.user_id != record.host_id:
        raise PermissionDenied("Only the host can update this booking.")
    if new in GUEST_STATUSES and actor.user_id != record.guest_id:
        raise PermissionDenied("Only the guest can cancel this booking.")


def transition_status(
    record: BookingRecord,
    new_status: BookingStatus | str,
    actor: Actor,
    *,
    reason: Optional[str] = None,
    now: Optional[datetime] = None,
) -> BookingRecord:
    """Move ``record`` to ``new_status`` on behalf of ``actor``."""
    try:
        new = BookingStatus(new_status)
    except ValueError:
        raise InvalidStatusTransition(f"Unknown booking status {new_status!r}.") from None

    check_permission(record, new, actor)

    if not can_transition(record.status, new):
        raise InvalidStatusTransition(
            f"Cannot change a {record.status.value} booking to {new.value}."
        )
    if reason is not None and len(reason) > MAX_REASON_LENGTH:
        raise InvalidStatusTransition(
            f"Cancellation reason cannot exceed {MAX_REASON_LENGTH} characters."
        )

    stamp = _now(now)
    update: dict = {"status": new, "updated_at": stamp}

    if new in CANCELLED_STATUSES or new == BookingStatus.REJECTED:
        if not reason and new == BookingStatus.CANCELLED_BY_HOST:
            reason = "Cancelled by host"
        update["cancellation_reason"] = reason or ""
        update["cancellation_date"] = stamp

    log.info(
        "Booking %s: %s -> %s by %s (%s)",
        record.id, record.status.value, new.value, actor.user_id, actor.role.value,
    )
    return record.model_copy(update=update)


def transition_payment(
    record: BookingRecord,
    new_status: PaymentStatus | str,
    *,
    amount: Optional[Decimal] = None,
    payment_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> BookingRecord:
    """Move the payment of ``record`` to ``new_status``.

    ``amount`` is the refunded amount and is required for a partial refund,
    where it must lie strictly between zero and the booking total.
    """
    try:
        new = PaymentStatus(new_status)
    except ValueError:
        raise InvalidStatusTransition(f"Unknown payment status {new_status!r}.") from None

    if new not in PAYMENT_TRANSITIONS.get(record.payment_status, frozenset()):
        raise InvalidStatusTransition(
            f"Cannot change a {record.payment_status.value} payment to {new.value}."
        )

    update: dict = {"payment_status": new, "updated_at": _now(now)}
    if payment_id:
        update["payment_id"] = payment_id

    if new == PaymentStatus.PARTIALLY_REFUNDED:
        if amount is None:
            raise InvalidPricingInput("A partial refund needs a refund amount.")
        try:
            refund = Decimal(str(amount))
        except InvalidOperation:
            raise InvalidPricingInput(f"Invalid refund amount {amount!r}.") from None
        if not refund.is_finite() or not Decimal("0") < refund < record.total_amount:
            raise InvalidPricingInput(
                f"A partial refund must be between 0 and {record.total_amount}."
            )
        update["refund_amount"] = refund
    elif new == PaymentStatus.REFUNDED:
        update["refund_amount"] = record.total_amount

    log.info(
        "Booking %s payment: %s -> %s",
        record.id, record.payment_status.value, new.value,
    )
    return record.model_copy(update=update)


def blocked_range_for(record: BookingRecord) -> BlockedRange:
    """The range a confirmed booking closes on its property's calendar."""
    return BlockedRange(
        start_date=record.check_in,
        end_date=record.check_out,
        reason=f"Booking {record.id}",
    )
