"""Quotation pricing and status workflow.

A quotation is priced when created and whenever its items change while it
is still a draft. Once sent, the customer can accept or reject it until
``valid_until``; after that it expires. Only accepted quotations convert
to orders, and the order is re-priced from the quotation items.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

import structlog

from .calculator import PriceCalculator
from .errors import CommandRejectedError, QuotationExpiredError, ValidationError
from .models import DiscountSpec, LineItem, PricingResult
from .money import DEFAULT_CURRENCY, ZERO, Amount, to_decimal
from .validation import require_not_empty, require_positive, require_status, require_utc

logger = structlog.get_logger()

DEFAULT_VALID_DAYS = 30
MAX_VALID_DAYS = 365


class QuotationStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    EXPIRED = "expired"


class errmsg:
    """Error message constants for quotations."""

    NOT_DRAFT = "Only draft quotations can be edited"
    NOT_SENT = "Quotation has not been sent"
    ALREADY_SENT = "Quotation has already been sent"
    EXPIRED = "Quotation has expired"
    NOT_ACCEPTED = "Only accepted quotations can be converted to orders"
    ALREADY_CONVERTED = "Quotation has already been converted to an order"


@dataclass(frozen=True)
class QuotationItem:
    product_id: str
    name: str
    quantity: int
    unit_price: Decimal
    # Admin override of the catalog price
    custom_price: Optional[Decimal] = None
    sku: str = ""

    def __post_init__(self):
        if self.custom_price is not None:
            price = to_decimal(self.custom_price, "custom price")
            require_positive(price, "custom price")
            object.__setattr__(self, "custom_price", price)

    @property
    def effective_price(self) -> Decimal:
        return self.custom_price if self.custom_price is not None else self.unit_price

    def to_line_item(self) -> LineItem:
        return LineItem(
            quantity=self.quantity,
            unit_price=self.effective_price,
            product_id=self.product_id,
            name=self.name,
        )


@dataclass(frozen=True)
class Quotation:
    number: str
    customer_name: str
    customer_email: str
    items: tuple
    pricing: PricingResult
    valid_until: datetime
    discount: Optional[DiscountSpec] = None
    tax_rate: Decimal = ZERO
    status: QuotationStatus = QuotationStatus.DRAFT
    currency: str = DEFAULT_CURRENCY
    converted_order_number: str = ""

    def __post_init__(self):
        object.__setattr__(self, "valid_until", require_utc(self.valid_until, "valid until"))

    def is_past_due(self, now: datetime) -> bool:
        return require_utc(now, "now") > self.valid_until


@dataclass(frozen=True)
class OrderDraft:
    order_number: str
    quotation_number: str
    customer_name: str
    customer_email: str
    items: tuple
    pricing: PricingResult
    currency: str = DEFAULT_CURRENCY
    discount: Optional[DiscountSpec] = field(default=None)


def generate_quotation_number(sequence: int, year: Optional[int] = None) -> str:
    """Format: QT-YYYY-NNNNN"""
    year = year or datetime.now(timezone.utc).year
    return f"QT-{year}-{sequence:05d}"


def generate_order_number(sequence: int, year: Optional[int] = None) -> str:
    """Format: LAB-YYYY-NNNN"""
    year = year or datetime.now(timezone.utc).year
    return f"LAB-{year}-{sequence:04d}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _price(
    items: Iterable[QuotationItem],
    discount: Optional[DiscountSpec],
    tax_rate: Amount,
    calculator: Optional[PriceCalculator],
) -> PricingResult:
    calculator = calculator or PriceCalculator()
    return calculator.calculate([item.to_line_item() for item in items], discount, tax_rate)


def create_quotation(
    number: str,
    customer_name: str,
    customer_email: str,
    items: Iterable[QuotationItem],
    discount: Optional[DiscountSpec] = None,
    tax_rate: Amount = ZERO,
    valid_days: int = DEFAULT_VALID_DAYS,
    now: Optional[datetime] = None,
    calculator: Optional[PriceCalculator] = None,
    currency: str = DEFAULT_CURRENCY,
) -> Quotation:
    items = tuple(items)
    require_not_empty(items, "items")
    if not customer_name:
        raise ValidationError("customer name", "is required")
    if isinstance(valid_days, bool) or not isinstance(valid_days, int) or not 1 <= valid_days <= MAX_VALID_DAYS:
        raise ValidationError("valid days", f"must be between 1 and {MAX_VALID_DAYS}")
    for item in items:
        require_positive(item.quantity, "quantity")

    now = require_utc(now, "now") or _utcnow()
    pricing = _price(items, discount, tax_rate, calculator)

    logger.info("quotation_created", number=number, item_count=len(items), total=str(pricing.rounded().total))

    return Quotation(
        number=number,
        customer_name=customer_name,
        customer_email=customer_email.lower(),
        items=items,
        pricing=pricing,
        valid_until=now + timedelta(days=valid_days),
        discount=discount,
        tax_rate=to_decimal(tax_rate, "tax rate"),
        currency=currency,
    )


def duplicate_quotation(
    quotation: Quotation,
    number: str,
    valid_days: int = DEFAULT_VALID_DAYS,
    now: Optional[datetime] = None,
    calculator: Optional[PriceCalculator] = None,
) -> Quotation:
    """Copy a quotation of any status into a new draft with a fresh validity."""
    copy = create_quotation(
        number,
        quotation.customer_name,
        quotation.customer_email,
        quotation.items,
        discount=quotation.discount,
        tax_rate=quotation.tax_rate,
        valid_days=valid_days,
        now=now,
        calculator=calculator,
        currency=quotation.currency,
    )
    logger.info("quotation_duplicated", number=number, duplicated_from=quotation.number)
    return copy


_KEEP = object()


def update_items(
    quotation: Quotation,
    items: Iterable[QuotationItem],
    discount: Any = _KEEP,
    calculator: Optional[PriceCalculator] = None,
) -> Quotation:
    """Replace the items of a draft and re-price it.

    The existing discount stays unless ``discount`` is given; pass ``None``
    to remove it.
    """
    require_status(quotation.status, QuotationStatus.DRAFT, errmsg.NOT_DRAFT)
    items = tuple(items)
    require_not_empty(items, "items")
    for item in items:
        require_positive(item.quantity, "quantity")
    if discount is _KEEP:
        discount = quotation.discount
    pricing = _price(items, discount, quotation.tax_rate, calculator)
    return replace(quotation, items=items, discount=discount, pricing=pricing)


def send(quotation: Quotation) -> Quotation:
    if quotation.status != QuotationStatus.DRAFT:
        raise CommandRejectedError(errmsg.ALREADY_SENT)
    logger.info("quotation_sent", number=quotation.number)
    return replace(quotation, status=QuotationStatus.SENT)


def expire_if_due(quotation: Quotation, now: Optional[datetime] = None) -> Quotation:
    """Sent quotations past their validity become expired; others are untouched."""
    now = require_utc(now, "now") or _utcnow()
    if quotation.status == QuotationStatus.SENT and quotation.is_past_due(now):
        logger.info("quotation_expired", number=quotation.number)
        return replace(quotation, status=QuotationStatus.EXPIRED)
    return quotation


def _respond(quotation: Quotation, outcome: QuotationStatus, now: Optional[datetime]) -> Quotation:
    require_status(quotation.status, QuotationStatus.SENT, errmsg.NOT_SENT)
    now = require_utc(now, "now") or _utcnow()
    if quotation.is_past_due(now):
        raise QuotationExpiredError(errmsg.EXPIRED, expire_if_due(quotation, now))
    logger.info("quotation_responded", number=quotation.number, outcome=outcome.value)
    return replace(quotation, status=outcome)


def accept(quotation: Quotation, now: Optional[datetime] = None) -> Quotation:
    """Customer acceptance.

    A late response raises QuotationExpiredError carrying the expired
    quotation.
    """
    return _respond(quotation, QuotationStatus.ACCEPTED, now)


def reject(quotation: Quotation, now: Optional[datetime] = None) -> Quotation:
    return _respond(quotation, QuotationStatus.REJECTED, now)


def convert_to_order(
    quotation: Quotation,
    order_number: str,
    calculator: Optional[PriceCalculator] = None,
) -> tuple[Quotation, OrderDraft]:
    """Turn an accepted quotation into an order draft.

    The order total is recomputed from the items rather than copied from the
    stored quotation totals.
    """
    require_status(quotation.status, QuotationStatus.ACCEPTED, errmsg.NOT_ACCEPTED)
    if quotation.converted_order_number:
        raise CommandRejectedError(errmsg.ALREADY_CONVERTED)

    pricing = _price(quotation.items, quotation.discount, quotation.tax_rate, calculator)
    order = OrderDraft(
        order_number=order_number,
        quotation_number=quotation.number,
        customer_name=quotation.customer_name,
        customer_email=quotation.customer_email,
        items=quotation.items,
        pricing=pricing,
        currency=quotation.currency,
        discount=quotation.discount,
    )

    logger.info("quotation_converted", number=quotation.number, order_number=order_number)
    return replace(quotation, converted_order_number=order_number), order
