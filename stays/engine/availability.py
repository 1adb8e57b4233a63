"""Availability validation for requested stays.

A stay ``[check_in, check_out)`` is available when it sits entirely inside
one declared availability window and touches no blocked range.  Windows are
never merged: a stay straddling two back-to-back windows is not contained.

The validator only judges the data it is handed.  Guarding against two
concurrent requests taking the same dates is the repository's job, see
``BookingRepository.insert_booking``.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Sequence

from stays.errors import StayUnavailable
from stays.models import (
    ACTIVE_STATUSES,
    AvailabilityWindow,
    BlockedRange,
    BookingRecord,
    StayRequest,
)

log = logging.getLogger("stays.availability")


def ranges_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """Half-open ``[a_start, a_end)`` and ``[b_start, b_end)`` share at least one night."""
    return a_start < b_end and b_start < a_end


def range_contains(outer_start: date, outer_end: date, start: date, end: date) -> bool:
    """``[start, end)`` lies within ``[outer_start, outer_end)``."""
    return start >= outer_start and end <= outer_end


def _within_windows(
    windows: Sequence[AvailabilityWindow],
    stay: StayRequest,
    unrestricted_when_empty: bool,
) -> bool:
    if not windows:
        return unrestricted_when_empty
    return any(
        range_contains(w.start_date, w.end_date, stay.check_in, stay.check_out)
        for w in windows
    )


def _first_blocking(
    blocked: Iterable[BlockedRange], stay: StayRequest
) -> BlockedRange | None:
    for block in blocked:
        if ranges_overlap(block.start_date, block.end_date, stay.check_in, stay.check_out):
            return block
    return None


def is_stay_available(
    windows: Sequence[AvailabilityWindow],
    blocked: Iterable[BlockedRange],
    stay: StayRequest,
    *,
    unrestricted_when_empty: bool = False,
) -> bool:
    """Return True if ``stay`` can be booked against these ranges.

    An empty ``windows`` list means no declared availability and yields
    False, unless ``unrestricted_when_empty`` opts into treating the property
    as open on every date that is not blocked.  Never raises.
    """
    if not _within_windows(windows, stay, unrestricted_when_empty):
        return False
    return _first_blocking(blocked, stay) is None


def find_conflicting_bookings(
    bookings: Iterable[BookingRecord], stay: StayRequest
) -> list[BookingRecord]:
    """Active bookings (pending or confirmed) whose dates overlap ``stay``."""
    return [
        b
        for b in bookings
        if b.status in ACTIVE_STATUSES
        and ranges_overlap(b.check_in, b.check_out, stay.check_in, stay.check_out)
    ]


def ensure_stay_available(
    windows: Sequence[AvailabilityWindow],
    blocked: Iterable[BlockedRange],
    stay: StayRequest,
    *,
    existing: Iterable[BookingRecord] = (),
    unrestricted_when_empty: bool = False,
) -> None:
    """Like ``is_stay_available`` but raise ``StayUnavailable`` naming the cause.

    Also rejects stays that collide with an active booking in ``existing``.
    """
    if not _within_windows(windows, stay, unrestricted_when_empty):
        raise StayUnavailable(
            f"The property is not available from {stay.check_in.isoformat()} "
            f"to {stay.check_out.isoformat()}."
        )

    block = _first_blocking(blocked, stay)
    if block is not None:
        detail = f" ({block.reason})" if block.reason else ""
        raise StayUnavailable(
            f"The selected dates overlap a blocked period "
            f"{block.start_date.isoformat()} to {block.end_date.isoformat()}{detail}."
        )

    conflicts = find_conflicting_bookings(existing, stay)
    if conflicts:
        log.info(
            "Stay %s..%s conflicts with %d active booking(s)",
            stay.check_in,
            stay.check_out,
            len(conflicts),
        )
        raise StayUnavailable("The selected dates are already booked.")
