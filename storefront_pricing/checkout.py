"""Authoritative cart pricing.

Clients send product references and quantities. Prices come from the
catalog, the promo code is re-validated, and the tax rate comes from
settings. Totals a client submits are only compared against this result,
never used.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional, Protocol

import structlog

from .calculator import PriceCalculator
from .errors import ProductUnavailableError, PromoCodeRejectedError, TotalsMismatchError
from .models import LineItem, PricingResult
from .money import DEFAULT_CURRENCY, ZERO, to_decimal
from .promo import PromoCode, check_promo_code, eligible_items
from .tax import TaxSettings
from .validation import require_integer, require_positive

logger = structlog.get_logger()


@dataclass(frozen=True)
class CartItemInput:
    product_id: str
    quantity: int
    variant_id: str = ""


@dataclass(frozen=True)
class CatalogEntry:
    product_id: str
    name: str
    unit_price: Decimal
    sku: str = ""
    category_id: str = ""
    variant_id: str = ""
    stock_quantity: int = 0
    allow_backorder: bool = False
    is_active: bool = True

    def in_stock(self) -> bool:
        return self.stock_quantity > 0 or self.allow_backorder


class Catalog(Protocol):
    def lookup(self, product_id: str, variant_id: str = "") -> Optional[CatalogEntry]:
        ...


class InMemoryCatalog:
    """Catalog backed by a dict keyed on (product_id, variant_id)."""

    def __init__(self, entries: Iterable[CatalogEntry] = ()):
        self._entries: dict[tuple[str, str], CatalogEntry] = {}
        for entry in entries:
            self.add(entry)

    def add(self, entry: CatalogEntry) -> None:
        self._entries[(entry.product_id, entry.variant_id)] = entry

    def lookup(self, product_id: str, variant_id: str = "") -> Optional[CatalogEntry]:
        return self._entries.get((product_id, variant_id))


@dataclass(frozen=True)
class CartCalculation:
    items: tuple = ()
    item_count: int = 0
    tax_rate: Decimal = ZERO
    tax_label: str = ""
    pricing: PricingResult = field(default_factory=PricingResult)
    promo_code: str = ""
    promo_code_id: str = ""
    eligible_item_ids: tuple = ()
    currency: str = DEFAULT_CURRENCY

    @property
    def totals(self) -> PricingResult:
        """Rounded totals, the values persisted and charged."""
        return self.pricing.rounded()


def _resolve_line(item: CartItemInput, catalog: Catalog) -> LineItem:
    require_integer(item.quantity, "quantity")
    require_positive(item.quantity, "quantity")

    entry = catalog.lookup(item.product_id, item.variant_id)
    if entry is None:
        missing = item.variant_id or item.product_id
        raise ProductUnavailableError(f"Product not found: {missing}", item.product_id)
    if not entry.is_active:
        raise ProductUnavailableError(f"Product is not available: {entry.name}", item.product_id)
    if not entry.in_stock():
        raise ProductUnavailableError(f"Product is out of stock: {entry.name}", item.product_id)
    if item.quantity > entry.stock_quantity and not entry.allow_backorder:
        raise ProductUnavailableError(
            f"Not enough stock for {entry.name}. Available: {entry.stock_quantity}",
            item.product_id,
        )

    return LineItem(
        quantity=item.quantity,
        unit_price=entry.unit_price,
        product_id=entry.product_id,
        variant_id=entry.variant_id,
        category_id=entry.category_id,
        name=entry.name,
    )


def price_cart(
    items: Iterable[CartItemInput],
    catalog: Catalog,
    tax: TaxSettings,
    promo: Optional[PromoCode] = None,
    customer_id: str = "",
    customer_usage: int = 0,
    now: Optional[datetime] = None,
    calculator: Optional[PriceCalculator] = None,
    currency: str = DEFAULT_CURRENCY,
) -> CartCalculation:
    """Price a cart from catalog data.

    An invalid promo code is dropped rather than failing the cart; the
    storefront shows the cart without the discount.
    """
    items = list(items)
    calculator = calculator or PriceCalculator()
    log = logger.bind(customer_id=customer_id or None)

    if not items:
        return CartCalculation(tax_rate=tax.rate, tax_label=tax.label, currency=currency)

    lines = [_resolve_line(item, catalog) for item in items]
    base = calculator.calculate(lines)

    applied: Optional[PromoCode] = None
    if promo is not None:
        try:
            check_promo_code(promo, base.subtotal, now, customer_id, customer_usage)
            applied = promo
        except PromoCodeRejectedError as e:
            log.info("promo_code_dropped", code=promo.code, error_code=e.error_code.value)

    if applied is None:
        pricing = calculator.calculate(lines, tax_rate=tax.rate)
        eligible_ids: tuple = ()
    else:
        pricing = calculator.calculate(
            lines,
            applied.discount_spec(),
            tax.rate,
            eligible=applied.is_item_eligible,
            cap_fixed=True,
        )
        eligible_ids = tuple(dict.fromkeys(line.product_id for line in eligible_items(applied, lines)))

    calc = CartCalculation(
        items=tuple(lines),
        item_count=sum(line.quantity for line in lines),
        tax_rate=tax.rate,
        tax_label=tax.label,
        pricing=pricing,
        promo_code=applied.code if applied else "",
        promo_code_id=applied.id if applied else "",
        eligible_item_ids=eligible_ids,
        currency=currency,
    )

    log.info(
        "cart_priced",
        item_count=calc.item_count,
        promo_code=calc.promo_code or None,
        total=str(calc.totals.total),
    )
    return calc


SUBMITTED_FIELDS = {
    "subtotal": "subtotal",
    "discountAmount": "discount_amount",
    "taxableAmount": "taxable_amount",
    "taxAmount": "tax_amount",
    "total": "total",
}


def verify_submitted_totals(submitted: Mapping, calculation: CartCalculation) -> PricingResult:
    """Reject a submission whose totals disagree with the recomputation.

    Only fields present in ``submitted`` are compared, by numeric value and
    without rounding: ``"55.5"`` matches 55.50 but ``"55.495"`` does not.
    Returns the rounded totals to persist.
    """
    expected = calculation.totals
    for key, attr in SUBMITTED_FIELDS.items():
        if key not in submitted:
            continue
        value = to_decimal(submitted[key], key)
        want = getattr(expected, attr)
        if value != want:
            logger.warning("submitted_totals_mismatch", field=key, submitted=str(value), expected=str(want))
            raise TotalsMismatchError(key, value, want)
    return expected
