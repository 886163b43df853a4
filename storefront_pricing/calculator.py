"""Order and quotation price calculation.

Business rules:
1. Subtotal is the sum of quantity x unit price; zero-quantity lines drop out
2. Discount is resolved against the subtotal (or the eligible subtotal for
   restricted promo codes) and never exceeds it
3. Tax applies to the discounted amount, never to the raw subtotal
4. Amounts keep full precision; rounding happens in PricingResult.rounded()
"""

from collections.abc import Callable, Iterable
from decimal import Decimal
from enum import Enum
from typing import Optional

import structlog

from .errors import ValidationError
from .models import DiscountSpec, DiscountType, LineItem, PricingResult
from .money import HUNDRED, ZERO, Amount, to_decimal
from .validation import require_fraction

logger = structlog.get_logger()

EligibilityFunc = Callable[[LineItem], bool]


class PercentagePolicy(str, Enum):
    """What to do with a percentage discount above 100."""

    CLAMP = "clamp"
    REJECT = "reject"


def subtotal_of(items: Iterable[LineItem]) -> Decimal:
    return sum((item.line_total for item in items if item.quantity > 0), ZERO)


def resolve_discount(
    base: Decimal,
    discount: Optional[DiscountSpec],
    policy: PercentagePolicy = PercentagePolicy.CLAMP,
    cap_fixed: bool = False,
) -> Decimal:
    """Compute the discount amount for a base amount.

    The maximum cap applies to percentage discounts; promo codes also cap
    fixed discounts, which ``cap_fixed`` enables.
    """
    if discount is None or discount.value <= 0 or base <= 0:
        return ZERO

    if discount.type == DiscountType.PERCENTAGE:
        percent = discount.value
        if percent > HUNDRED:
            if policy == PercentagePolicy.REJECT:
                raise ValidationError("discount value", "percentage must be 0-100")
            percent = HUNDRED
        amount = base * percent / HUNDRED
        cap = discount.cap
        if cap is not None:
            amount = min(amount, cap)
    else:
        amount = min(discount.value, base)
        if cap_fixed and discount.cap is not None:
            amount = min(amount, discount.cap)

    return min(amount, base)


class PriceCalculator:
    """Stateless calculator; the policy is the only configuration it holds."""

    def __init__(self, percentage_policy: PercentagePolicy = PercentagePolicy.CLAMP):
        self.percentage_policy = PercentagePolicy(percentage_policy)

    def calculate(
        self,
        items: Iterable[LineItem],
        discount: Optional[DiscountSpec] = None,
        tax_rate: Amount = ZERO,
        eligible: Optional[EligibilityFunc] = None,
        cap_fixed: bool = False,
    ) -> PricingResult:
        items = list(items)
        for item in items:
            if not isinstance(item, LineItem):
                raise ValidationError("items", f"expected LineItem, got {type(item).__name__}")
        rate = to_decimal(tax_rate, "tax rate")
        require_fraction(rate, "tax rate")

        subtotal = subtotal_of(items)
        if eligible is None:
            base = subtotal
        else:
            base = subtotal_of(item for item in items if eligible(item))

        discount_amount = resolve_discount(base, discount, self.percentage_policy, cap_fixed)
        taxable = subtotal - discount_amount
        tax_amount = taxable * rate
        total = taxable + tax_amount

        logger.debug(
            "price_calculated",
            item_count=len(items),
            subtotal=str(subtotal),
            discount=str(discount_amount),
            total=str(total),
        )

        return PricingResult(
            subtotal=subtotal,
            discount_amount=discount_amount,
            taxable_amount=taxable,
            tax_amount=tax_amount,
            total=total,
        )


_default = PriceCalculator()


def calculate(
    items: Iterable[LineItem],
    discount: Optional[DiscountSpec] = None,
    tax_rate: Amount = ZERO,
) -> PricingResult:
    """Price items with the default clamping policy."""
    return _default.calculate(items, discount, tax_rate)
