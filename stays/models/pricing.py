"""Pricing configuration and the itemized price breakdown.

Money and percentages are ``Decimal`` end to end.  ``PricingConfig`` is only
built through ``PricingConfig.build`` / ``PricingConfig.from_document``, which
turn every malformed value into ``InvalidPricingInput`` at one boundary so the
calculator never has to second-guess its inputs.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from stays.errors import InvalidPricingInput

from .base import build_validated, float_to_decimal

ZERO = Decimal("0")
CENT = Decimal("0.01")

# Stored property documents leave these out; these are the values the
# listing form fills in.
DEFAULT_TAX_RATE = Decimal("18")  # GST
DEFAULT_MINIMUM_STAY = 1


class PricingConfig(BaseModel):
    """A property's validated pricing, read-only input to the calculator."""

    model_config = ConfigDict(frozen=True)

    base_price_per_night: Decimal = Field(gt=0)
    cleaning_fee: Decimal = Field(default=ZERO, ge=0)
    service_fee: Decimal = Field(default=ZERO, ge=0)
    tax_rate_percent: Decimal = Field(default=ZERO, ge=0, le=100)
    minimum_stay_nights: int = Field(default=DEFAULT_MINIMUM_STAY, ge=1)
    maximum_stay_nights: Optional[int] = Field(default=None, ge=1)
    weekly_discount_percent: Optional[Decimal] = Field(default=None, ge=0, le=100)
    monthly_discount_percent: Optional[Decimal] = Field(default=None, ge=0, le=100)

    @field_validator(
        "base_price_per_night",
        "cleaning_fee",
        "service_fee",
        "tax_rate_percent",
        "weekly_discount_percent",
        "monthly_discount_percent",
        mode="before",
    )
    @classmethod
    def _float_via_str(cls, value: Any) -> Any:
        return float_to_decimal(value)

    @model_validator(mode="after")
    def _check_stay_bounds(self) -> "PricingConfig":
        if (
            self.maximum_stay_nights is not None
            and self.maximum_stay_nights < self.minimum_stay_nights
        ):
            raise ValueError(
                f"maximum stay ({self.maximum_stay_nights} nights) is shorter than "
                f"minimum stay ({self.minimum_stay_nights} nights)"
            )
        return self

    @classmethod
    def build(cls, **fields: Any) -> "PricingConfig":
        """Validate ``fields``, raising ``InvalidPricingInput`` on any violation."""
        return build_validated(cls, InvalidPricingInput, **fields)

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "PricingConfig":
        """Build from a stored property ``pricing`` document.

        Accepts the listing shape (``base_price``, ``cleaning_fee``,
        ``service_fee``, ``tax_rate``, ``minimum_stay``, ``maximum_stay`` and a
        ``discounts`` mapping with ``weekly`` / ``monthly``).  Missing fees are
        zero, a missing tax rate is the 18% default.
        """
        discounts = doc.get("discounts") or {}

        def _or(key: str, default: Any) -> Any:
            value = doc.get(key)
            return default if value is None else value

        return cls.build(
            base_price_per_night=doc.get("base_price"),
            cleaning_fee=_or("cleaning_fee", ZERO),
            service_fee=_or("service_fee", ZERO),
            tax_rate_percent=_or("tax_rate", DEFAULT_TAX_RATE),
            minimum_stay_nights=_or("minimum_stay", DEFAULT_MINIMUM_STAY),
            maximum_stay_nights=doc.get("maximum_stay"),
            weekly_discount_percent=discounts.get("weekly"),
            monthly_discount_percent=discounts.get("monthly"),
        )


class DiscountKind(str, Enum):
    NONE = "none"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class AppliedDiscount(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: DiscountKind = DiscountKind.NONE
    percent: Decimal = ZERO
    amount: Decimal = ZERO


class PriceBreakdown(BaseModel):
    """Itemized stay price.

    ``subtotal == base_total - discount.amount + cleaning_fee + service_fee``
    and ``total_amount == subtotal + tax_amount`` hold exactly; nothing is
    rounded until ``display``.
    """

    model_config = ConfigDict(frozen=True)

    nights: int = Field(ge=1)
    base_price_per_night: Decimal = Field(ge=0)
    base_total: Decimal = Field(ge=0)
    discount: AppliedDiscount = AppliedDiscount()
    cleaning_fee: Decimal = Field(ge=0)
    service_fee: Decimal = Field(ge=0)
    subtotal: Decimal = Field(ge=0)
    tax_rate_percent: Decimal = Field(ge=0)
    tax_amount: Decimal = Field(ge=0)
    total_amount: Decimal = Field(ge=0)

    def display(self, currency: str = "INR") -> dict[str, str]:
        """Amounts rounded to the currency's minor unit, for presentation only."""
        lines = {
            "base_price_per_night": self.base_price_per_night,
            "base_total": self.base_total,
            "discount": self.discount.amount,
            "cleaning_fee": self.cleaning_fee,
            "service_fee": self.service_fee,
            "subtotal": self.subtotal,
            "tax_amount": self.tax_amount,
            "total_amount": self.total_amount,
        }
        return {key: format_amount(value, currency) for key, value in lines.items()}


def format_amount(amount: Decimal, currency: str = "INR") -> str:
    """Round half-up to two places and format with thousands separators."""
    rounded = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    return f"{currency} {rounded:,.2f}"
