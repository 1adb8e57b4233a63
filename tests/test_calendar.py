"""Tests for host calendar editing."""

import os
import sys
from datetime import date

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from stays.engine.calendar import add_range, remove_range
from stays.errors import NotFound, OverlappingRange
from stays.models import AvailabilityWindow, BlockedRange

TODAY = date(2026, 5, 20)


def _w(start, end):
    return AvailabilityWindow.build(start, end)


class TestAddRange:
    def test_adds_and_sorts(self):
        ranges = [_w("2026-08-01", "2026-08-31")]
        result = add_range(ranges, _w("2026-06-01", "2026-06-30"), today=TODAY)
        assert [r.start_date.isoformat() for r in result] == ["2026-06-01", "2026-08-01"]
        assert len(ranges) == 1

    def test_adjacent_ranges_allowed(self):
        ranges = [_w("2026-06-01", "2026-06-10")]
        result = add_range(ranges, _w("2026-06-10", "2026-06-20"), today=TODAY)
        assert len(result) == 2

    def test_overlap_rejected(self):
        ranges = [_w("2026-06-01", "2026-06-10")]
        with pytest.raises(OverlappingRange, match="overlaps the existing range"):
            add_range(ranges, _w("2026-06-09", "2026-06-20"), today=TODAY)

    def test_end_must_be_in_future(self):
        with pytest.raises(OverlappingRange, match="End date must be in the future"):
            add_range([], _w("2026-05-01", "2026-05-20"), today=TODAY)

    def test_range_already_started_is_fine(self):
        result = add_range([], _w("2026-05-01", "2026-05-21"), today=TODAY)
        assert len(result) == 1

    def test_same_bounds_replace_existing(self):
        ranges = [
            BlockedRange.build("2026-06-01", "2026-06-05", reason="Painting"),
            BlockedRange.build("2026-06-10", "2026-06-12"),
        ]
        result = add_range(
            ranges, BlockedRange.build("2026-06-01", "2026-06-05", reason="Plumbing"), today=TODAY
        )
        assert [r.reason for r in result] == ["Plumbing", None]

    def test_same_bounds_still_checked_against_others(self):
        ranges = [_w("2026-06-01", "2026-06-05"), _w("2026-06-04", "2026-06-08")]
        with pytest.raises(OverlappingRange):
            add_range(ranges, _w("2026-06-01", "2026-06-05"), today=TODAY)

    def test_blocked_ranges_keep_reason(self):
        block = BlockedRange.build("2026-06-01", "2026-06-05", reason="Painting")
        result = add_range([], block, today=TODAY)
        assert result[0].reason == "Painting"


class TestRemoveRange:
    def test_removes_exact_match(self):
        ranges = [_w("2026-06-01", "2026-06-10"), _w("2026-07-01", "2026-07-10")]
        result = remove_range(ranges, date(2026, 6, 1), date(2026, 6, 10))
        assert [r.start_date.isoformat() for r in result] == ["2026-07-01"]

    def test_partial_match_not_removed(self):
        ranges = [_w("2026-06-01", "2026-06-10")]
        with pytest.raises(NotFound):
            remove_range(ranges, date(2026, 6, 1), date(2026, 6, 5))
