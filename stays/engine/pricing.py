"""Stay pricing calculator.

Turns a validated ``PricingConfig`` and a night count into an itemized
``PriceBreakdown``:

    base_total = base_price_per_night * nights
    discount   = base_total * tier percent / 100     (monthly beats weekly)
    subtotal   = base_total - discount + cleaning_fee + service_fee
    tax        = subtotal * tax_rate_percent / 100
    total      = subtotal + tax

Everything stays in ``Decimal`` and nothing is rounded between steps, so the
total is reproducible from the inputs.  Round only for display.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from stays.errors import InvalidStayRange, StayLengthOutOfBounds
from stays.models import AppliedDiscount, DiscountKind, PriceBreakdown, PricingConfig

log = logging.getLogger("stays.pricing")

WEEKLY_THRESHOLD_NIGHTS = 7
MONTHLY_THRESHOLD_NIGHTS = 28

HUNDRED = Decimal("100")


def check_stay_length(config: PricingConfig, nights: int) -> None:
    """Raise if ``nights`` is not a bookable length for this property."""
    if nights <= 0:
        raise InvalidStayRange("A stay must be at least one night.")
    if nights < config.minimum_stay_nights:
        raise StayLengthOutOfBounds(
            f"Minimum stay is {config.minimum_stay_nights} nights, "
            f"requested {nights}."
        )
    if config.maximum_stay_nights is not None and nights > config.maximum_stay_nights:
        raise StayLengthOutOfBounds(
            f"Maximum stay is {config.maximum_stay_nights} nights, "
            f"requested {nights}."
        )


def select_discount(config: PricingConfig, nights: int) -> tuple[DiscountKind, Decimal]:
    """Pick the single discount tier a stay of ``nights`` qualifies for."""
    monthly = config.monthly_discount_percent
    weekly = config.weekly_discount_percent
    if nights >= MONTHLY_THRESHOLD_NIGHTS and monthly:
        return DiscountKind.MONTHLY, monthly
    if nights >= WEEKLY_THRESHOLD_NIGHTS and weekly:
        return DiscountKind.WEEKLY, weekly
    return DiscountKind.NONE, Decimal("0")


def compute_pricing(config: PricingConfig, nights: int) -> PriceBreakdown:
    """Compute the itemized price of a ``nights``-long stay.

    Raises:
        InvalidStayRange: ``nights`` is zero or negative.
        StayLengthOutOfBounds: ``nights`` is outside the property's
            minimum/maximum stay.
    """
    check_stay_length(config, nights)

    base_total = config.base_price_per_night * nights

    kind, percent = select_discount(config, nights)
    discount_amount = base_total * percent / HUNDRED

    subtotal = base_total - discount_amount + config.cleaning_fee + config.service_fee
    tax_amount = subtotal * config.tax_rate_percent / HUNDRED
    total_amount = subtotal + tax_amount

    log.debug(
        "Priced %d nights: base=%s discount=%s(%s%%) tax=%s total=%s",
        nights, base_total, kind.value, percent, tax_amount, total_amount,
    )

    return PriceBreakdown(
        nights=nights,
        base_price_per_night=config.base_price_per_night,
        base_total=base_total,
        discount=AppliedDiscount(kind=kind, percent=percent, amount=discount_amount),
        cleaning_fee=config.cleaning_fee,
        service_fee=config.service_fee,
        subtotal=subtotal,
        tax_rate_percent=config.tax_rate_percent,
        tax_amount=tax_amount,
        total_amount=total_amount,
    )
