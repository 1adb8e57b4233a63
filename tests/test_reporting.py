"""Tests for host dashboard filtering and stats."""

import os
import sys
from datetime import date, datetime, timezone
from decimal import Decimal

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from pydantic import ValidationError

from stays.engine import build_booking, compute_pricing
from stays.engine.reporting import BookingFilter, booking_stats, filter_bookings
from stays.models import BookingParties, BookingStatus, PricingConfig, StayRequest

TODAY = date(2026, 6, 15)
CONFIG = PricingConfig.build(base_price_per_night=1000)
PARTIES = BookingParties(property_id="prop-1", guest_id="guest-1", host_id="host-1")


def _record(booking_id, check_in, check_out, status, *, created="2026-06-01", **extra):
    stay = StayRequest.build(check_in, check_out)
    record = build_booking(
        stay,
        compute_pricing(CONFIG, stay.nights),
        PARTIES,
        booking_id=booking_id,
        now=datetime.fromisoformat(created).replace(tzinfo=timezone.utc),
        **extra,
    )
    return record.model_copy(update={"status": status})


@pytest.fixture
def records():
    return [
        _record("upcoming", "2026-06-20", "2026-06-25", BookingStatus.CONFIRMED,
                created="2026-06-02", guest_name="Asha Rao", property_title="Goa Villa"),
        _record("pending", "2026-07-01", "2026-07-03", BookingStatus.PENDING,
                created="2026-06-10", guest_email="ben@example.com"),
        _record("in-house", "2026-06-12", "2026-06-18", BookingStatus.CONFIRMED,
                created="2026-05-01"),
        _record("done", "2026-06-01", "2026-06-05", BookingStatus.COMPLETED,
                created="2026-05-25", property_city="Goa",
                property_address="12 Beach Road, Candolim"),
        _record("old", "2026-03-01", "2026-03-05", BookingStatus.COMPLETED,
                created="2026-02-01"),
        _record("cancelled", "2026-06-22", "2026-06-24", BookingStatus.CANCELLED_BY_GUEST,
                created="2026-06-03"),
    ]


def _ids(found):
    return [r.id for r in found]


class TestFilterBookings:
    def test_defaults_upcoming_by_check_in(self, records):
        found = filter_bookings(records, BookingFilter(), today=TODAY)
        assert _ids(found) == ["in-house", "upcoming", "cancelled", "pending"]

    def test_past(self, records):
        found = filter_bookings(records, BookingFilter(timeframe="past"), today=TODAY)
        assert _ids(found) == ["old", "done"]

    def test_cancelled_covers_both_sides(self, records):
        filters = BookingFilter(status="cancelled", timeframe="all")
        assert _ids(filter_bookings(records, filters, today=TODAY)) == ["cancelled"]

    def test_status(self, records):
        filters = BookingFilter(status="completed", timeframe="all", sort_by="newest")
        assert _ids(filter_bookings(records, filters, today=TODAY)) == ["done", "old"]

    def test_search_name_and_email(self, records):
        by_name = BookingFilter(search="asha", timeframe="all")
        by_email = BookingFilter(search="BEN@", timeframe="all")
        assert _ids(filter_bookings(records, by_name, today=TODAY)) == ["upcoming"]
        assert _ids(filter_bookings(records, by_email, today=TODAY)) == ["pending"]

    def test_search_city_and_address(self, records):
        by_address = BookingFilter(search="candolim", timeframe="all")
        by_city = BookingFilter(search="goa", timeframe="all")
        assert _ids(filter_bookings(records, by_address, today=TODAY)) == ["done"]
        # "Goa Villa" title on one booking, city Goa on the other
        assert _ids(filter_bookings(records, by_city, today=TODAY)) == ["done", "upcoming"]

    def test_sort_by_amount(self, records):
        filters = BookingFilter(sort_by="amount", timeframe="all")
        found = filter_bookings(records, filters, today=TODAY)
        assert found[0].id == "in-house"
        assert found[0].total_amount == Decimal("6000")

    def test_rejects_unknown_sort(self):
        with pytest.raises(ValidationError):
            BookingFilter(sort_by="price")


class TestBookingStats:
    def test_counters(self, records):
        stats = booking_stats(records, today=TODAY)
        assert stats.upcoming_bookings == 2
        assert stats.current_guests == 1
        assert stats.recent_completed_bookings == 1
        # upcoming (5000) and done (4000); in-house was created 45 days ago
        assert stats.total_revenue == Decimal("9000")

    def test_empty(self):
        stats = booking_stats([], today=TODAY)
        assert stats.upcoming_bookings == 0
        assert stats.total_revenue == Decimal("0")
