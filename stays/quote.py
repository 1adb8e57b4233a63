"""Price a stay from the command line.

Usage:
    python -m stays.quote --base-price 5000 --nights 10 \
        --weekly 10 --cleaning-fee 500 --service-fee 300 --tax-rate 18

    python -m stays.quote --base-price 5000 --nights 30 --monthly 20 --json
"""

import argparse
import json
import sys
from decimal import Decimal, InvalidOperation

from stays.engine.pricing import compute_pricing
from stays.errors import BookingError
from stays.models import DiscountKind, PriceBreakdown, PricingConfig
from stays.models.pricing import format_amount


def _decimal(raw: str) -> Decimal:
    try:
        return Decimal(raw)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"not a number: {raw!r}") from None


LABELS = [
    ("base_total", "Base"),
    ("discount", "Discount"),
    ("cleaning_fee", "Cleaning fee"),
    ("service_fee", "Service fee"),
    ("subtotal", "Subtotal"),
    ("tax_amount", "Tax"),
    ("total_amount", "Total"),
]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compute the itemized price of a stay",
        prog="python -m stays.quote",
    )
    parser.add_argument("--base-price", type=_decimal, required=True,
                        help="Price per night")
    parser.add_argument("--nights", type=int, required=True, help="Number of nights")
    parser.add_argument("--weekly", type=_decimal, help="Weekly discount percent (7+ nights)")
    parser.add_argument("--monthly", type=_decimal, help="Monthly discount percent (28+ nights)")
    parser.add_argument("--cleaning-fee", type=_decimal, default=Decimal("0"))
    parser.add_argument("--service-fee", type=_decimal, default=Decimal("0"))
    parser.add_argument("--tax-rate", type=_decimal, default=Decimal("0"),
                        help="Tax percent applied to the subtotal (default: 0)")
    parser.add_argument("--min-stay", type=int, default=1, help="Minimum nights")
    parser.add_argument("--max-stay", type=int, help="Maximum nights")
    parser.add_argument("--currency", default="INR")
    parser.add_argument("--json", action="store_true",
                        help="Print the exact breakdown as JSON")
    return parser


def render_text(breakdown: PriceBreakdown, currency: str) -> str:
    """Receipt-style listing of the breakdown, rounded for display."""
    display = breakdown.display(currency)
    lines = [
        f"{breakdown.nights} nights x "
        f"{display['base_price_per_night']}",
    ]
    for key, label in LABELS:
        if key == "discount":
            if breakdown.discount.kind == DiscountKind.NONE:
                continue
            label = f"{breakdown.discount.kind.value.title()} discount ({breakdown.discount.percent}%)"
            lines.append(f"  {label:<28} -{display['discount']}")
            continue
        if key == "tax_amount":
            label = f"Tax ({breakdown.tax_rate_percent}%)"
        lines.append(f"  {label:<28} {display[key]}")
    return "\n".join(lines)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = PricingConfig.build(
            base_price_per_night=args.base_price,
            cleaning_fee=args.cleaning_fee,
            service_fee=args.service_fee,
            tax_rate_percent=args.tax_rate,
            minimum_stay_nights=args.min_stay,
            maximum_stay_nights=args.max_stay,
            weekly_discount_percent=args.weekly,
            monthly_discount_percent=args.monthly,
        )
        breakdown = compute_pricing(config, args.nights)
    except BookingError as exc:
        print(f"error: {exc.message}", file=sys.stderr)
        return 2

    if args.json:
        json.dump(breakdown.model_dump(mode="json"), sys.stdout, indent=2)
        sys.stdout.write("\n")
    else:
        print(render_text(breakdown, args.currency))
        print(f"\n# total {format_amount(breakdown.total_amount, args.currency)}",
              file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
