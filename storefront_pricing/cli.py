"""Command line price quotes.

Prices a list of items the same way the storefront does and prints the
rounded totals as JSON.
"""

import argparse
import json
import sys
from typing import Optional

from .config import PricingConfig
from .errors import PricingError, ValidationError
from .log import configure_logging
from .models import DiscountSpec, LineItem
from .money import format_price


def parse_item(text: str) -> LineItem:
    """QTY:PRICE, e.g. ``2:10.00``"""
    parts = text.split(":")
    if len(parts) != 2:
        raise ValidationError("item", f"expected QTY:PRICE, got {text!r}")
    try:
        quantity = int(parts[0])
    except ValueError:
        raise ValidationError("quantity", f"not an integer: {parts[0]!r}")
    return LineItem(quantity=quantity, unit_price=parts[1])


def parse_discount(text: str) -> DiscountSpec:
    """TYPE:VALUE[:MAX], e.g. ``percentage:20:15`` or ``fixed:5``"""
    parts = text.split(":")
    if len(parts) not in (2, 3):
        raise ValidationError("discount", f"expected TYPE:VALUE[:MAX], got {text!r}")
    maximum = parts[2] if len(parts) == 3 else None
    return DiscountSpec(parts[0], parts[1], maximum)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="storefront-pricing",
        description="Price order and quotation line items",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s quote --item 2:10.00 --tax-rate 0.11
  %(prog)s quote --item 1:100 --discount percentage:20:15
  %(prog)s quote --item 3:5 --discount fixed:50 --tax-rate 0.10
        """,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    quote = sub.add_parser("quote", help="Price a set of line items")
    quote.add_argument(
        "--item",
        action="append",
        default=[],
        metavar="QTY:PRICE",
        help="Line item (repeatable)",
    )
    quote.add_argument(
        "--discount",
        metavar="TYPE:VALUE[:MAX]",
        help="percentage or fixed discount, optional cap for percentages",
    )
    quote.add_argument(
        "--tax-rate",
        default="0",
        help="Tax rate as a fraction, e.g. 0.11 (default: 0)",
    )
    return parser


def cmd_quote(args: argparse.Namespace, cfg: PricingConfig) -> int:
    items = [parse_item(text) for text in args.item]
    discount = parse_discount(args.discount) if args.discount else None
    result = cfg.calculator().calculate(items, discount, args.tax_rate).rounded()

    output = result.as_dict()
    output["currency"] = cfg.currency
    output["display"] = {
        key: format_price(value, cfg.currency) for key, value in result.as_dict().items()
    }
    print(json.dumps(output, indent=2))
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        cfg = PricingConfig.from_env()
        configure_logging(cfg.log_level_number, stream=sys.stderr)
        if args.command == "quote":
            return cmd_quote(args, cfg)
    except ValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except PricingError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 1


if __name__ == "__main__":
    sys.exit(main())
