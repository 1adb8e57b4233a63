"""Pydantic model for a rental property as stored by the listing side."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from .base import float_to_decimal
from .pricing import PricingConfig
from .stay import AvailabilityWindow, BlockedRange


class PropertyStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class PricingDiscounts(BaseModel):
    weekly: Optional[Decimal] = None   # percent
    monthly: Optional[Decimal] = None  # percent

    @field_validator("weekly", "monthly", mode="before")
    @classmethod
    def _float_via_str(cls, value: Any) -> Any:
        return float_to_decimal(value)


class PropertyPricing(BaseModel):
    """Pricing exactly as the host saved it.

    Deliberately loose: values are only checked when turned into a
    ``PricingConfig`` by ``to_config``.
    """

    base_price: Optional[Decimal] = None   # per night
    cleaning_fee: Optional[Decimal] = None
    service_fee: Optional[Decimal] = None
    tax_rate: Optional[Decimal] = None     # percent
    minimum_stay: Optional[int] = None     # nights
    maximum_stay: Optional[int] = None     # nights
    discounts: PricingDiscounts = Field(default_factory=PricingDiscounts)

    @field_validator("base_price", "cleaning_fee", "service_fee", "tax_rate", mode="before")
    @classmethod
    def _float_via_str(cls, value: Any) -> Any:
        return float_to_decimal(value)

    def to_config(self) -> PricingConfig:
        """Validated calculator input; raises ``InvalidPricingInput``."""
        return PricingConfig.from_document(self.model_dump())


class Property(BaseModel):
    id: str
    host_id: str
    title: str
    city: str = ""
    address: str = ""
    max_guests: int = Field(default=1, ge=1)
    status: PropertyStatus = PropertyStatus.DRAFT
    pricing: PropertyPricing = Field(default_factory=PropertyPricing)
    availability: list[AvailabilityWindow] = []
    blocked_dates: list[BlockedRange] = []

    @property
    def is_bookable(self) -> bool:
        return self.status == PropertyStatus.PUBLISHED
