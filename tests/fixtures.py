"""Shared test helpers for building line items and fixed clocks."""

from datetime import datetime, timezone
from decimal import Decimal

from storefront_pricing.models import LineItem

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


def item(quantity: int, price: str, product_id: str = "", category_id: str = "") -> LineItem:
    """Shorthand LineItem constructor."""
    return LineItem(
        quantity=quantity,
        unit_price=Decimal(price),
        product_id=product_id,
        category_id=category_id,
    )
