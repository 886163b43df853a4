"""Tests for environment configuration."""

import logging

import pytest

from storefront_pricing.calculator import PercentagePolicy
from storefront_pricing.config import PricingConfig
from storefront_pricing.errors import ValidationError


class TestPricingConfig:
    """Tests for PricingConfig.from_env."""

    def test_defaults(self) -> None:
        cfg = PricingConfig.from_env({})
        assert cfg.percentage_policy is PercentagePolicy.CLAMP
        assert cfg.currency == "USD"
        assert cfg.quotation_valid_days == 30
        assert cfg.log_level_number == logging.INFO

    def test_reads_os_environ(self, monkeypatch) -> None:
        monkeypatch.setenv("PRICING_PERCENTAGE_POLICY", "Reject")
        monkeypatch.setenv("PRICING_CURRENCY", "eur")
        monkeypatch.setenv("PRICING_QUOTATION_VALID_DAYS", "14")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        cfg = PricingConfig.from_env()
        assert cfg.percentage_policy is PercentagePolicy.REJECT
        assert cfg.currency == "EUR"
        assert cfg.quotation_valid_days == 14
        assert cfg.log_level_number == logging.DEBUG

    def test_calculator_uses_policy(self) -> None:
        calc = PricingConfig.from_env({"PRICING_PERCENTAGE_POLICY": "reject"}).calculator()
        assert calc.percentage_policy is PercentagePolicy.REJECT

    @pytest.mark.parametrize(
        "env,field",
        [
            ({"PRICING_PERCENTAGE_POLICY": "ignore"}, "PRICING_PERCENTAGE_POLICY"),
            ({"PRICING_CURRENCY": "DOLLARS"}, "PRICING_CURRENCY"),
            ({"PRICING_QUOTATION_VALID_DAYS": "soon"}, "PRICING_QUOTATION_VALID_DAYS"),
            ({"PRICING_QUOTATION_VALID_DAYS": "0"}, "PRICING_QUOTATION_VALID_DAYS"),
            ({"LOG_LEVEL": "loud"}, "LOG_LEVEL"),
        ],
    )
    def test_invalid_values(self, env: dict, field: str) -> None:
        with pytest.raises(ValidationError) as exc:
            PricingConfig.from_env(env)
        assert exc.value.field == field
