"""Tests for booking confirmation notifiers."""

import logging
import os
import sys
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import httpx
import pytest

from stays.engine import build_booking, compute_pricing
from stays.notifications import (
    HttpEmailNotifier,
    LogNotifier,
    Notifier,
    confirmation_subject,
    confirmation_text,
    redact_pii,
)
from stays.models import BookingParties, PricingConfig, StayRequest


def _record():
    stay = StayRequest.build("2026-06-10", "2026-06-20", 2)
    config = PricingConfig.build(
        base_price_per_night=5000, cleaning_fee=500, service_fee=300,
        tax_rate_percent=18, weekly_discount_percent=10,
    )
    return build_booking(
        stay,
        compute_pricing(config, stay.nights),
        BookingParties(property_id="prop-1", guest_id="guest-1", host_id="host-1"),
        booking_id="b-42",
        now=datetime(2026, 5, 20, tzinfo=timezone.utc),
        property_title="Sea-view villa",
        guest_name="Asha",
        guest_email="asha@example.com",
    )


def _mock_client(post_side_effect=None):
    client = AsyncMock()
    response = MagicMock()
    if post_side_effect is not None:
        response.raise_for_status.side_effect = post_side_effect
    client.post.return_value = response
    factory = MagicMock()
    factory.return_value.__aenter__.return_value = client
    return factory, client


class TestRedactPII:
    def test_masks_middle(self):
        assert redact_pii("asha@example.com") == "ash***om"

    def test_short_values_fully_masked(self):
        assert redact_pii("a@b.c") == "***"
        assert redact_pii("") == "***"


class TestMessageContent:
    def test_subject(self):
        assert confirmation_subject(_record()) == "Booking request received: Sea-view villa"

    def test_text_lists_stay(self):
        text = confirmation_text(_record())
        assert "Hi Asha," in text
        assert "b-42" in text
        assert "Wednesday, June 10, 2026" in text
        assert "INR 54,044.00" in text
        assert "pending" in text


class TestNotifierABC:
    def test_cannot_instantiate(self):
        with pytest.raises(TypeError):
            Notifier()


class TestLogNotifier:
    async def test_logs_redacted(self, caplog):
        with caplog.at_level(logging.INFO, logger="stays.notifications"):
            await LogNotifier().send_booking_confirmation("asha@example.com", _record())
        assert "b-42" in caplog.text
        assert "asha@example.com" not in caplog.text


class TestHttpEmailNotifier:
    async def test_posts_message(self):
        factory, client = _mock_client()
        notifier = HttpEmailNotifier("https://mail.test/send", api_key="k", sender="s@x.test")
        with patch("stays.notifications.httpx.AsyncClient", factory):
            await notifier.send_booking_confirmation("asha@example.com", _record())

        url = client.post.await_args.args[0]
        kwargs = client.post.await_args.kwargs
        assert url == "https://mail.test/send"
        assert kwargs["json"]["to"] == ["asha@example.com"]
        assert kwargs["json"]["from"] == "s@x.test"
        assert "54,044.00" in kwargs["json"]["text"]
        assert kwargs["headers"] == {"Authorization": "Bearer k"}

    async def test_no_auth_header_without_key(self):
        factory, client = _mock_client()
        with patch("stays.notifications.httpx.AsyncClient", factory):
            await HttpEmailNotifier("https://mail.test/send").send_booking_confirmation(
                "asha@example.com", _record()
            )
        assert client.post.await_args.kwargs["headers"] == {}

    async def test_http_error_propagates(self):
        request = httpx.Request("POST", "https://mail.test/send")
        error = httpx.HTTPStatusError(
            "boom", request=request, response=httpx.Response(500, request=request)
        )
        factory, _ = _mock_client(post_side_effect=error)
        with patch("stays.notifications.httpx.AsyncClient", factory):
            with pytest.raises(httpx.HTTPStatusError):
                await HttpEmailNotifier("https://mail.test/send").send_booking_confirmation(
                    "asha@example.com", _record()
                )
