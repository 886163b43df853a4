"""Configuration from environment variables.

Environment variables:
    PRICING_PERCENTAGE_POLICY: "clamp" (default) or "reject" for percentage
        discounts above 100
    PRICING_CURRENCY: ISO currency code for display (default: USD)
    PRICING_QUOTATION_VALID_DAYS: default quotation validity (default: 30)
    LOG_LEVEL: debug, info (default), warning, error
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Optional

from .calculator import PercentagePolicy, PriceCalculator
from .errors import ValidationError
from .money import DEFAULT_CURRENCY
from .quotation import DEFAULT_VALID_DAYS, MAX_VALID_DAYS

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


@dataclass(frozen=True)
class PricingConfig:
    percentage_policy: PercentagePolicy = PercentagePolicy.CLAMP
    currency: str = DEFAULT_CURRENCY
    quotation_valid_days: int = DEFAULT_VALID_DAYS
    log_level: str = "info"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PricingConfig":
        env = os.environ if environ is None else environ

        policy = env.get("PRICING_PERCENTAGE_POLICY", PercentagePolicy.CLAMP.value).strip().lower()
        try:
            percentage_policy = PercentagePolicy(policy)
        except ValueError:
            raise ValidationError("PRICING_PERCENTAGE_POLICY", f"expected clamp or reject, got {policy!r}")

        currency = env.get("PRICING_CURRENCY", DEFAULT_CURRENCY).strip().upper()
        if len(currency) != 3 or not currency.isalpha():
            raise ValidationError("PRICING_CURRENCY", f"not an ISO currency code: {currency!r}")

        raw_days = env.get("PRICING_QUOTATION_VALID_DAYS", str(DEFAULT_VALID_DAYS))
        try:
            valid_days = int(raw_days)
        except ValueError:
            raise ValidationError("PRICING_QUOTATION_VALID_DAYS", f"not an integer: {raw_days!r}")
        if not 1 <= valid_days <= MAX_VALID_DAYS:
            raise ValidationError("PRICING_QUOTATION_VALID_DAYS", f"must be between 1 and {MAX_VALID_DAYS}")

        log_level = env.get("LOG_LEVEL", "info").strip().lower()
        if log_level not in LOG_LEVELS:
            raise ValidationError("LOG_LEVEL", f"unknown level {log_level!r}")

        return cls(
            percentage_policy=percentage_policy,
            currency=currency,
            quotation_valid_days=valid_days,
            log_level=log_level,
        )

    @property
    def log_level_number(self) -> int:
        return LOG_LEVELS[self.log_level]

    def calculator(self) -> PriceCalculator:
        return PriceCalculator(self.percentage_policy)
