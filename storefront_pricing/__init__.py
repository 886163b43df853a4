"""Storefront pricing: order, cart and quotation totals."""

from .errors import (
    PricingError,
    ValidationError,
    PromoCodeRejectedError,
    ProductUnavailableError,
    TotalsMismatchError,
    CommandRejectedError,
    QuotationExpiredError,
)
from .money import Amount, to_decimal, round_money, format_price
from .models import DiscountType, DiscountSpec, LineItem, PricingResult
from .calculator import (
    PercentagePolicy,
    PriceCalculator,
    calculate,
    resolve_discount,
    subtotal_of,
)
from .promo import (
    PromoCode,
    PromoCodeErrorCode,
    PromoCodeValidation,
    lookup_promo_code,
    check_promo_code,
    validate_promo_code,
    promo_discount,
)
from .tax import TaxSettings
from .checkout import (
    CartItemInput,
    CatalogEntry,
    Catalog,
    InMemoryCatalog,
    CartCalculation,
    price_cart,
    verify_submitted_totals,
)
from .quotation import (
    QuotationStatus,
    QuotationItem,
    Quotation,
    OrderDraft,
    generate_quotation_number,
    generate_order_number,
    create_quotation,
    duplicate_quotation,
    update_items,
    send,
    accept,
    reject,
    expire_if_due,
    convert_to_order,
)
from .config import PricingConfig
from .log import configure_logging

__all__ = [
    # Errors
    "PricingError",
    "ValidationError",
    "PromoCodeRejectedError",
    "ProductUnavailableError",
    "TotalsMismatchError",
    "CommandRejectedError",
    "QuotationExpiredError",
    # Money
    "Amount",
    "to_decimal",
    "round_money",
    "format_price",
    # Models
    "DiscountType",
    "DiscountSpec",
    "LineItem",
    "PricingResult",
    # Calculator
    "PercentagePolicy",
    "PriceCalculator",
    "calculate",
    "resolve_discount",
    "subtotal_of",
    # Promo codes
    "PromoCode",
    "PromoCodeErrorCode",
    "PromoCodeValidation",
    "lookup_promo_code",
    "check_promo_code",
    "validate_promo_code",
    "promo_discount",
    # Tax
    "TaxSettings",
    # Checkout
    "CartItemInput",
    "CatalogEntry",
    "Catalog",
    "InMemoryCatalog",
    "CartCalculation",
    "price_cart",
    "verify_submitted_totals",
    # Quotations
    "QuotationStatus",
    "QuotationItem",
    "Quotation",
    "OrderDraft",
    "generate_quotation_number",
    "generate_order_number",
    "create_quotation",
    "duplicate_quotation",
    "update_items",
    "send",
    "accept",
    "reject",
    "expire_if_due",
    "convert_to_order",
    # Config and logging
    "PricingConfig",
    "configure_logging",
]
