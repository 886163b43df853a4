"""Tests for pricing value types."""

from decimal import Decimal

import pytest

from storefront_pricing.errors import ValidationError
from storefront_pricing.models import DiscountSpec, DiscountType, LineItem, PricingResult


class TestDiscountType:
    """Tests for DiscountType.parse."""

    def test_parses_names(self) -> None:
        assert DiscountType.parse("percentage") is DiscountType.PERCENTAGE
        assert DiscountType.parse("FIXED") is DiscountType.FIXED

    def test_fixed_amount_alias(self) -> None:
        assert DiscountType.parse("fixed_amount") is DiscountType.FIXED

    def test_unknown(self) -> None:
        with pytest.raises(ValidationError, match="unknown discount type"):
            DiscountType.parse("bogo")


class TestLineItem:
    """Tests for LineItem."""

    def test_line_total(self) -> None:
        line = LineItem(quantity=3, unit_price="4.50")
        assert line.unit_price == Decimal("4.50")
        assert line.line_total == Decimal("13.50")

    def test_zero_quantity_allowed(self) -> None:
        assert LineItem(quantity=0, unit_price="1").line_total == 0

    def test_negative_quantity_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc:
            LineItem(quantity=-1, unit_price="1")
        assert exc.value.field == "quantity"

    def test_fractional_quantity_rejected(self) -> None:
        with pytest.raises(ValidationError, match="integer"):
            LineItem(quantity=1.5, unit_price="1")

    def test_negative_price_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc:
            LineItem(quantity=1, unit_price="-0.01")
        assert exc.value.field == "unit price"

    def test_immutable(self) -> None:
        line = LineItem(quantity=1, unit_price="1")
        with pytest.raises(AttributeError):
            line.quantity = 2


class TestDiscountSpec:
    """Tests for DiscountSpec."""

    def test_percentage_constructor(self) -> None:
        spec = DiscountSpec.percentage(20, maximum_amount="15")
        assert spec.type is DiscountType.PERCENTAGE
        assert spec.value == Decimal("20")
        assert spec.cap == Decimal("15")

    def test_zero_cap_means_uncapped(self) -> None:
        assert DiscountSpec.percentage(20, maximum_amount=0).cap is None
        assert DiscountSpec.percentage(20).cap is None

    def test_string_type_parsed(self) -> None:
        assert DiscountSpec("fixed_amount", "5").type is DiscountType.FIXED

    def test_negative_value_rejected(self) -> None:
        with pytest.raises(ValidationError, match="discount value"):
            DiscountSpec.fixed("-5")

    def test_negative_cap_rejected(self) -> None:
        with pytest.raises(ValidationError, match="maximum discount amount"):
            DiscountSpec.percentage(10, maximum_amount="-1")


class TestPricingResult:
    """Tests for PricingResult rounding and serialization."""

    def test_rounded_parts_add_up(self) -> None:
        result = PricingResult(
            subtotal=Decimal("10.005"),
            discount_amount=Decimal("0"),
            taxable_amount=Decimal("10.005"),
            tax_amount=Decimal("1.10055"),
            total=Decimal("11.10555"),
        )
        r = result.rounded()
        assert r.subtotal == Decimal("10.01")
        assert r.tax_amount == Decimal("1.10")
        assert r.taxable_amount + r.tax_amount == r.total
        assert r.total == Decimal("11.11")
        assert r.is_rounded

    def test_rounded_is_idempotent(self) -> None:
        r = PricingResult(subtotal=Decimal("1.234")).rounded()
        assert r.rounded() is r

    def test_as_dict(self) -> None:
        result = PricingResult(
            subtotal=Decimal("20"),
            taxable_amount=Decimal("20"),
            tax_amount=Decimal("2.2"),
            total=Decimal("22.2"),
        )
        assert result.as_dict() == {
            "subtotal": "20.00",
            "discountAmount": "0.00",
            "taxableAmount": "20.00",
            "taxAmount": "2.20",
            "total": "22.20",
        }
