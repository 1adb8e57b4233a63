"""Tests for the stay pricing calculator and pricing configuration."""

import os
import sys
from decimal import Decimal

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from stays.engine.pricing import (
    MONTHLY_THRESHOLD_NIGHTS,
    WEEKLY_THRESHOLD_NIGHTS,
    check_stay_length,
    compute_pricing,
    select_discount,
)
from stays.errors import InvalidPricingInput, InvalidStayRange, StayLengthOutOfBounds
from stays.models import DiscountKind, PricingConfig, PropertyPricing
from stays.models.pricing import DEFAULT_TAX_RATE, format_amount


def _config(**overrides) -> PricingConfig:
    fields = dict(
        base_price_per_night=5000,
        cleaning_fee=500,
        service_fee=300,
        tax_rate_percent=18,
        weekly_discount_percent=10,
    )
    fields.update(overrides)
    return PricingConfig.build(**fields)


# ── Worked example ─────────────────────────────────────────────────


class TestComputePricing:
    def test_ten_night_weekly_stay(self):
        b = compute_pricing(_config(), 10)
        assert b.nights == 10
        assert b.base_total == Decimal("50000")
        assert b.discount.kind == DiscountKind.WEEKLY
        assert b.discount.percent == Decimal("10")
        assert b.discount.amount == Decimal("5000")
        assert b.subtotal == Decimal("45800")
        assert b.tax_amount == Decimal("8244")
        assert b.total_amount == Decimal("54044")

    def test_breakdown_identities_hold_exactly(self):
        b = compute_pricing(_config(base_price_per_night="3333.33", tax_rate_percent="12.5"), 9)
        assert b.subtotal == b.base_total - b.discount.amount + b.cleaning_fee + b.service_fee
        assert b.total_amount == b.subtotal + b.tax_amount

    def test_no_rounding_between_steps(self):
        b = compute_pricing(_config(base_price_per_night="999.99", tax_rate_percent="18"), 7)
        # 6999.93 * 10% = 699.993, kept to the mil
        assert b.discount.amount == Decimal("699.993")
        assert b.tax_amount == b.subtotal * Decimal("18") / Decimal("100")

    def test_same_inputs_same_breakdown(self):
        config = _config(monthly_discount_percent=20)
        assert compute_pricing(config, 30) == compute_pricing(config, 30)

    def test_zero_fees_and_tax(self):
        config = PricingConfig.build(base_price_per_night=1000)
        b = compute_pricing(config, 3)
        assert b.total_amount == Decimal("3000")
        assert b.discount.kind == DiscountKind.NONE

    def test_float_inputs_are_exact(self):
        config = PricingConfig.build(base_price_per_night=0.1, tax_rate_percent=0)
        b = compute_pricing(config, 3)
        assert b.base_total == Decimal("0.3")

    def test_total_covers_base_and_fees_for_every_length(self):
        config = _config(monthly_discount_percent=20, maximum_stay_nights=60)
        for nights in range(1, 61):
            b = compute_pricing(config, nights)
            assert b.total_amount >= (
                b.base_total + b.cleaning_fee + b.service_fee - b.discount.amount
            )


# ── Discount tiers ─────────────────────────────────────────────────


class TestDiscountTiers:
    @pytest.mark.parametrize("nights,kind", [
        (6, DiscountKind.NONE),
        (7, DiscountKind.WEEKLY),
        (27, DiscountKind.WEEKLY),
        (28, DiscountKind.MONTHLY),
    ])
    def test_boundaries(self, nights, kind):
        config = _config(monthly_discount_percent=20)
        assert select_discount(config, nights)[0] == kind

    def test_thresholds(self):
        assert WEEKLY_THRESHOLD_NIGHTS == 7
        assert MONTHLY_THRESHOLD_NIGHTS == 28

    def test_monthly_without_weekly(self):
        config = _config(weekly_discount_percent=None, monthly_discount_percent=15)
        assert select_discount(config, 10) == (DiscountKind.NONE, Decimal("0"))
        assert select_discount(config, 28) == (DiscountKind.MONTHLY, Decimal("15"))

    def test_long_stay_falls_back_to_weekly(self):
        config = _config(monthly_discount_percent=None)
        assert select_discount(config, 40) == (DiscountKind.WEEKLY, Decimal("10"))

    def test_zero_percent_counts_as_unset(self):
        config = _config(weekly_discount_percent=10, monthly_discount_percent=0)
        assert select_discount(config, 30)[0] == DiscountKind.WEEKLY

    def test_discounts_never_stack(self):
        b = compute_pricing(_config(monthly_discount_percent=20), 28)
        assert b.discount.amount == b.base_total * Decimal("20") / Decimal("100")


# ── Stay length ────────────────────────────────────────────────────


class TestStayLength:
    def test_minimum_is_inclusive(self):
        config = _config(minimum_stay_nights=3)
        assert compute_pricing(config, 3).nights == 3

    def test_below_minimum(self):
        config = _config(minimum_stay_nights=3)
        with pytest.raises(StayLengthOutOfBounds, match="Minimum stay is 3 nights"):
            compute_pricing(config, 2)

    def test_above_maximum(self):
        config = _config(maximum_stay_nights=14)
        assert compute_pricing(config, 14).nights == 14
        with pytest.raises(StayLengthOutOfBounds, match="Maximum stay is 14 nights"):
            compute_pricing(config, 15)

    @pytest.mark.parametrize("nights", [0, -1])
    def test_non_positive_nights(self, nights):
        with pytest.raises(InvalidStayRange):
            check_stay_length(_config(), nights)


# ── Configuration validation ───────────────────────────────────────


class TestPricingConfig:
    @pytest.mark.parametrize("fields", [
        {"base_price_per_night": 0},
        {"base_price_per_night": -100},
        {"cleaning_fee": -1},
        {"tax_rate_percent": 101},
        {"weekly_discount_percent": -5},
        {"monthly_discount_percent": 150},
        {"minimum_stay_nights": 0},
        {"minimum_stay_nights": 10, "maximum_stay_nights": 5},
        {"base_price_per_night": "abc"},
    ])
    def test_rejects_malformed_input(self, fields):
        with pytest.raises(InvalidPricingInput):
            _config(**fields)

    def test_missing_base_price(self):
        with pytest.raises(InvalidPricingInput, match="base_price_per_night"):
            PricingConfig.build()

    def test_is_immutable(self):
        config = _config()
        with pytest.raises(Exception):
            config.base_price_per_night = Decimal("1")

    def test_from_document_defaults(self):
        config = PricingConfig.from_document({"base_price": 2500})
        assert config.base_price_per_night == Decimal("2500")
        assert config.cleaning_fee == Decimal("0")
        assert config.service_fee == Decimal("0")
        assert config.tax_rate_percent == DEFAULT_TAX_RATE
        assert config.minimum_stay_nights == 1
        assert config.maximum_stay_nights is None
        assert config.weekly_discount_percent is None

    def test_from_document_full(self):
        config = PricingConfig.from_document({
            "base_price": 5000,
            "cleaning_fee": 500,
            "service_fee": 300,
            "tax_rate": 12,
            "minimum_stay": 2,
            "maximum_stay": 30,
            "discounts": {"weekly": 10, "monthly": 20},
        })
        assert config.minimum_stay_nights == 2
        assert config.maximum_stay_nights == 30
        assert config.monthly_discount_percent == Decimal("20")

    def test_property_pricing_to_config(self):
        pricing = PropertyPricing(base_price=4000.5, discounts={"weekly": 7.5})
        config = pricing.to_config()
        assert config.base_price_per_night == Decimal("4000.5")
        assert config.weekly_discount_percent == Decimal("7.5")

    def test_property_pricing_without_base_price(self):
        with pytest.raises(InvalidPricingInput):
            PropertyPricing().to_config()


# ── Display ────────────────────────────────────────────────────────


class TestDisplay:
    def test_format_amount_rounds_half_up(self):
        assert format_amount(Decimal("10.005"), "INR") == "INR 10.01"
        assert format_amount(Decimal("10.004"), "INR") == "INR 10.00"

    def test_format_amount_thousands(self):
        assert format_amount(Decimal("54044"), "INR") == "INR 54,044.00"

    def test_display_leaves_breakdown_exact(self):
        b = compute_pricing(_config(base_price_per_night="999.99"), 7)
        shown = b.display("USD")
        assert shown["discount"] == "USD 699.99"
        assert b.discount.amount == Decimal("699.993")
        assert shown["total_amount"].startswith("USD ")
