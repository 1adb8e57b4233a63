"""Host calendar editing: adding and removing availability or blocked ranges.

Ranges of one kind on a property never overlap each other, and a new range
must end in the future.  Adding a range with the same bounds as an
existing one replaces it, reason included.  Lists are
treated as values; every edit returns a new list sorted by start date.
"""

from __future__ import annotations

from datetime import date
from typing import Sequence, TypeVar

from stays.errors import NotFound, OverlappingRange
from stays.models import DateRange

from .availability import ranges_overlap

R = TypeVar("R", bound=DateRange)


def add_range(ranges: Sequence[R], new: R, *, today: date) -> list[R]:
    """Return ``ranges`` plus ``new``; raise ``OverlappingRange`` on collision.

    A range spanning exactly ``new``'s dates is replaced rather than rejected.
    """
    if new.end_date <= today:
        raise OverlappingRange("End date must be in the future.")

    others = [
        r for r in ranges
        if not (r.start_date == new.start_date and r.end_date == new.end_date)
    ]
    for existing in others:
        if ranges_overlap(existing.start_date, existing.end_date, new.start_date, new.end_date):
            raise OverlappingRange(
                f"{new.start_date.isoformat()} to {new.end_date.isoformat()} overlaps "
                f"the existing range {existing.start_date.isoformat()} to "
                f"{existing.end_date.isoformat()}."
            )

    return sorted([*others, new], key=lambda r: r.start_date)


def remove_range(ranges: Sequence[R], start_date: date, end_date: date) -> list[R]:
    """Return ``ranges`` without the one spanning exactly ``start_date``..``end_date``."""
    kept = [
        r for r in ranges
        if not (r.start_date == start_date and r.end_date == end_date)
    ]
    if len(kept) == len(ranges):
        raise NotFound(
            f"No range from {start_date.isoformat()} to {end_date.isoformat()}."
        )
    return kept
