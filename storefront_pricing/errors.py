"""Error types for the storefront pricing library."""

from decimal import Decimal
from typing import Any, Optional


class PricingError(Exception):
    """Base class for pricing errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message


class ValidationError(PricingError):
    """Input rejected at the boundary before any calculation runs."""

    def __init__(self, field: str, message: str, cause: Optional[Exception] = None):
        super().__init__(f"invalid {field}: {message}", cause)
        self.field = field


class PromoCodeRejectedError(PricingError):
    """Promo code cannot be applied to this cart."""

    def __init__(self, error_code: str, message: str):
        super().__init__(message)
        self.error_code = error_code


class ProductUnavailableError(PricingError):
    """Product is missing from the catalog, inactive, or out of stock."""

    def __init__(self, message: str, product_id: str = ""):
        super().__init__(message)
        self.product_id = product_id


class TotalsMismatchError(PricingError):
    """Client-submitted totals differ from the server recomputation."""

    def __init__(self, field: str, submitted: Decimal, expected: Decimal):
        super().__init__(f"submitted {field} {submitted} does not match {expected}")
        self.field = field
        self.submitted = submitted
        self.expected = expected


class CommandRejectedError(Exception):
    """Command was rejected due to business rule violation."""


class QuotationExpiredError(CommandRejectedError):
    """A response arrived after the quotation's validity.

    ``quotation`` is the quotation moved to the expired status, ready to be
    stored by the caller.
    """

    def __init__(self, message: str, quotation: Any):
        super().__init__(message)
        self.quotation = quotation
