"""Pricing value types."""

from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum
from typing import Optional

from .errors import ValidationError
from .money import ZERO, Amount, round_money, to_decimal
from .validation import require_integer, require_non_negative


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"

    @classmethod
    def parse(cls, value: "DiscountType | str") -> "DiscountType":
        """Parse a discount type; promo codes spell fixed as ``fixed_amount``."""
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        if normalized == "fixed_amount":
            return cls.FIXED
        try:
            return cls(normalized)
        except ValueError:
            raise ValidationError("discount type", f"unknown discount type {value!r}")


@dataclass(frozen=True)
class LineItem:
    quantity: int
    unit_price: Decimal
    product_id: str = ""
    variant_id: str = ""
    category_id: str = ""
    name: str = ""

    def __post_init__(self):
        require_integer(self.quantity, "quantity")
        if self.quantity < 0:
            raise ValidationError("quantity", "must not be negative")
        price = to_decimal(self.unit_price, "unit price")
        require_non_negative(price, "unit price")
        object.__setattr__(self, "unit_price", price)

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class DiscountSpec:
    type: DiscountType
    value: Decimal
    # None or zero means uncapped
    maximum_amount: Optional[Decimal] = None

    def __post_init__(self):
        object.__setattr__(self, "type", DiscountType.parse(self.type))
        value = to_decimal(self.value, "discount value")
        require_non_negative(value, "discount value")
        object.__setattr__(self, "value", value)
        if self.maximum_amount is not None:
            cap = to_decimal(self.maximum_amount, "maximum discount amount")
            require_non_negative(cap, "maximum discount amount")
            object.__setattr__(self, "maximum_amount", cap)

    @classmethod
    def percentage(cls, value: Amount, maximum_amount: Optional[Amount] = None) -> "DiscountSpec":
        return cls(DiscountType.PERCENTAGE, value, maximum_amount)

    @classmethod
    def fixed(cls, value: Amount) -> "DiscountSpec":
        return cls(DiscountType.FIXED, value)

    @property
    def cap(self) -> Optional[Decimal]:
        if self.maximum_amount is None or self.maximum_amount <= 0:
            return None
        return self.maximum_amount


@dataclass(frozen=True)
class PricingResult:
    subtotal: Decimal = ZERO
    discount_amount: Decimal = ZERO
    taxable_amount: Decimal = ZERO
    tax_amount: Decimal = ZERO
    total: Decimal = ZERO
    is_rounded: bool = field(default=False, compare=False)

    def rounded(self) -> "PricingResult":
        """Round for display or submission.

        Taxable amount and total are rebuilt from the rounded parts, so a
        displayed summary always adds up.
        """
        if self.is_rounded:
            return self
        subtotal = round_money(self.subtotal)
        discount = round_money(self.discount_amount)
        taxable = subtotal - discount
        tax = round_money(self.tax_amount)
        return replace(
            self,
            subtotal=subtotal,
            discount_amount=discount,
            taxable_amount=taxable,
            tax_amount=tax,
            total=taxable + tax,
            is_rounded=True,
        )

    def as_dict(self) -> dict[str, str]:
        """Submission payload form: amounts as strings with two decimals."""
        r = self.rounded()
        return {
            "subtotal": str(r.subtotal),
            "discountAmount": str(r.discount_amount),
            "taxableAmount": str(r.taxable_amount),
            "taxAmount": str(r.tax_amount),
            "total": str(r.total),
        }
