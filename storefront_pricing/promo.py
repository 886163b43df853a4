"""Promo code rules.

A promo code is a DiscountSpec with conditions attached: an active flag, a
validity window, global and per-customer usage limits, a minimum order
amount, and optional product/category restrictions that narrow which cart
lines the discount is computed against.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional

import structlog

from .calculator import PriceCalculator, resolve_discount, subtotal_of
from .errors import PromoCodeRejectedError
from .models import DiscountSpec, DiscountType, LineItem
from .money import Amount, format_price, to_decimal
from .validation import require_utc

logger = structlog.get_logger()


class PromoCodeErrorCode(str, Enum):
    INVALID_CODE = "INVALID_CODE"
    EXPIRED = "EXPIRED"
    NOT_STARTED = "NOT_STARTED"
    USAGE_LIMIT = "USAGE_LIMIT"
    CUSTOMER_LIMIT = "CUSTOMER_LIMIT"
    MINIMUM_NOT_MET = "MINIMUM_NOT_MET"
    NOT_APPLICABLE = "NOT_APPLICABLE"
    INACTIVE = "INACTIVE"


class errmsg:
    """Error message constants for promo codes."""

    INVALID_CODE = "Promo code not found"
    EXPIRED = "Promo code has expired"
    NOT_STARTED = "Promo code is not active yet"
    USAGE_LIMIT = "Promo code usage limit reached"
    CUSTOMER_NOT_ALLOWED = "Promo code is not available for this customer"
    CUSTOMER_LIMIT = "Promo code already used the maximum number of times"
    MINIMUM_NOT_MET = "Order subtotal is below the minimum of {minimum}"
    NOT_APPLICABLE = "Promo code does not apply to any item in the cart"
    INACTIVE = "Promo code is inactive"


def normalize_code(code: str) -> str:
    return code.strip().upper()


@dataclass(frozen=True)
class PromoCode:
    code: str
    discount_type: DiscountType
    discount_value: Decimal
    minimum_order_amount: Optional[Decimal] = None
    maximum_discount_amount: Optional[Decimal] = None
    usage_limit: Optional[int] = None
    usage_count: int = 0
    usage_limit_per_customer: int = 1
    starts_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    is_active: bool = True
    applies_to_products: tuple = ()
    applies_to_categories: tuple = ()
    customer_ids: tuple = ()
    description: str = ""
    id: str = ""

    def __post_init__(self):
        object.__setattr__(self, "code", normalize_code(self.code))
        # Bad discount values fail at construction time
        spec = DiscountSpec(self.discount_type, self.discount_value, self.maximum_discount_amount)
        object.__setattr__(self, "discount_type", spec.type)
        object.__setattr__(self, "discount_value", spec.value)
        object.__setattr__(self, "maximum_discount_amount", spec.maximum_amount)
        if self.minimum_order_amount is not None:
            object.__setattr__(
                self,
                "minimum_order_amount",
                to_decimal(self.minimum_order_amount, "minimum order amount"),
            )
        for name in ("applies_to_products", "applies_to_categories", "customer_ids"):
            object.__setattr__(self, name, tuple(getattr(self, name) or ()))
        object.__setattr__(self, "starts_at", require_utc(self.starts_at, "starts at"))
        object.__setattr__(self, "expires_at", require_utc(self.expires_at, "expires at"))

    def discount_spec(self) -> DiscountSpec:
        return DiscountSpec(self.discount_type, self.discount_value, self.maximum_discount_amount)

    def has_restrictions(self) -> bool:
        return bool(self.applies_to_products or self.applies_to_categories)

    def is_item_eligible(self, item: LineItem) -> bool:
        """Unrestricted codes apply to everything; otherwise product or category must match."""
        if not self.has_restrictions():
            return True
        if self.applies_to_products and item.product_id in self.applies_to_products:
            return True
        if self.applies_to_categories and item.category_id and item.category_id in self.applies_to_categories:
            return True
        return False


@dataclass(frozen=True)
class PromoCodeValidation:
    is_valid: bool
    code: str
    discount_type: Optional[DiscountType] = None
    discount_value: Optional[Decimal] = None
    calculated_discount: Optional[Decimal] = None
    eligible_item_ids: tuple = field(default=())
    message: str = ""
    error_code: Optional[PromoCodeErrorCode] = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def lookup_promo_code(codes: Mapping[str, PromoCode], code: str) -> PromoCode:
    """Find a code case-insensitively."""
    promo = codes.get(normalize_code(code))
    if promo is None:
        raise PromoCodeRejectedError(PromoCodeErrorCode.INVALID_CODE, errmsg.INVALID_CODE)
    return promo


def check_promo_code(
    promo: PromoCode,
    subtotal: Amount,
    now: Optional[datetime] = None,
    customer_id: str = "",
    customer_usage: int = 0,
) -> None:
    """Raise PromoCodeRejectedError if the code cannot be used right now."""
    now = require_utc(now, "now") or _utcnow()
    subtotal = to_decimal(subtotal, "subtotal")

    if not promo.is_active:
        raise PromoCodeRejectedError(PromoCodeErrorCode.INACTIVE, errmsg.INACTIVE)
    if promo.starts_at is not None and promo.starts_at > now:
        raise PromoCodeRejectedError(PromoCodeErrorCode.NOT_STARTED, errmsg.NOT_STARTED)
    if promo.expires_at is not None and promo.expires_at < now:
        raise PromoCodeRejectedError(PromoCodeErrorCode.EXPIRED, errmsg.EXPIRED)
    if promo.usage_limit is not None and promo.usage_count >= promo.usage_limit:
        raise PromoCodeRejectedError(PromoCodeErrorCode.USAGE_LIMIT, errmsg.USAGE_LIMIT)
    if promo.customer_ids and customer_id not in promo.customer_ids:
        raise PromoCodeRejectedError(PromoCodeErrorCode.CUSTOMER_LIMIT, errmsg.CUSTOMER_NOT_ALLOWED)
    if customer_id and customer_usage >= promo.usage_limit_per_customer:
        raise PromoCodeRejectedError(PromoCodeErrorCode.CUSTOMER_LIMIT, errmsg.CUSTOMER_LIMIT)
    if promo.minimum_order_amount is not None and subtotal < promo.minimum_order_amount:
        raise PromoCodeRejectedError(
            PromoCodeErrorCode.MINIMUM_NOT_MET,
            errmsg.MINIMUM_NOT_MET.format(minimum=format_price(promo.minimum_order_amount)),
        )


def eligible_items(promo: PromoCode, items: Iterable[LineItem]) -> list[LineItem]:
    return [item for item in items if item.quantity > 0 and promo.is_item_eligible(item)]


def promo_discount(
    promo: PromoCode,
    items: Iterable[LineItem],
    calculator: Optional[PriceCalculator] = None,
) -> Decimal:
    """Discount a promo gives on these items, computed on the eligible subtotal."""
    policy = (calculator or PriceCalculator()).percentage_policy
    base = subtotal_of(eligible_items(promo, items))
    return resolve_discount(base, promo.discount_spec(), policy, cap_fixed=True)


def validate_promo_code(
    promo: PromoCode,
    items: Iterable[LineItem],
    now: Optional[datetime] = None,
    customer_id: str = "",
    customer_usage: int = 0,
    calculator: Optional[PriceCalculator] = None,
) -> PromoCodeValidation:
    """Check a promo against a cart without raising, for display to the user."""
    items = list(items)
    try:
        check_promo_code(promo, subtotal_of(items), now, customer_id, customer_usage)
    except PromoCodeRejectedError as e:
        logger.info("promo_code_rejected", code=promo.code, error_code=e.error_code.value)
        return PromoCodeValidation(
            is_valid=False,
            code=promo.code,
            message=e.message,
            error_code=e.error_code,
        )

    matched = eligible_items(promo, items)
    if not matched:
        return PromoCodeValidation(
            is_valid=False,
            code=promo.code,
            message=errmsg.NOT_APPLICABLE,
            error_code=PromoCodeErrorCode.NOT_APPLICABLE,
        )

    return PromoCodeValidation(
        is_valid=True,
        code=promo.code,
        discount_type=promo.discount_type,
        discount_value=promo.discount_value,
        calculated_discount=promo_discount(promo, matched, calculator),
        eligible_item_ids=tuple(dict.fromkeys(item.product_id for item in matched)),
    )
