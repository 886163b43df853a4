"""Tests for validation helpers."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from storefront_pricing.errors import CommandRejectedError, ValidationError
from storefront_pricing.validation import (
    require_flag,
    require_fraction,
    require_integer,
    require_non_negative,
    require_not_empty,
    require_percentage,
    require_positive,
    require_status,
    require_status_not,
    require_utc,
)


class TestAmountChecks:
    """Checks that raise ValidationError."""

    def test_require_integer(self) -> None:
        assert require_integer(3, "quantity") == 3
        for bad in (True, 1.0, "1"):
            with pytest.raises(ValidationError):
                require_integer(bad, "quantity")

    def test_require_positive(self) -> None:
        require_positive(Decimal("0.01"), "price")
        with pytest.raises(ValidationError, match="must be positive"):
            require_positive(Decimal("0"), "price")

    def test_require_non_negative(self) -> None:
        require_non_negative(Decimal("0"), "price")
        with pytest.raises(ValidationError, match="must not be negative"):
            require_non_negative(Decimal("-1"), "price")

    def test_require_fraction(self) -> None:
        require_fraction(Decimal("0"), "rate")
        require_fraction(Decimal("1"), "rate")
        with pytest.raises(ValidationError):
            require_fraction(Decimal("1.5"), "rate")

    def test_require_percentage(self) -> None:
        require_percentage(Decimal("100"), "percent")
        with pytest.raises(ValidationError):
            require_percentage(Decimal("-0.5"), "percent")

    def test_require_not_empty(self) -> None:
        require_not_empty([1], "items")
        with pytest.raises(ValidationError, match="items"):
            require_not_empty([], "items")


class TestStatusChecks:
    """Checks that raise CommandRejectedError."""

    def test_require_status(self) -> None:
        require_status("draft", "draft", "must be draft")
        with pytest.raises(CommandRejectedError, match="must be draft"):
            require_status("sent", "draft", "must be draft")

    def test_require_status_not(self) -> None:
        require_status_not("draft", "expired", "expired")
        with pytest.raises(CommandRejectedError, match="is expired"):
            require_status_not("expired", "expired", "is expired")


class TestRequireUtc:
    """Datetimes coming from storage."""

    def test_naive_taken_as_utc(self) -> None:
        assert require_utc(datetime(2026, 6, 1), "at") == datetime(2026, 6, 1, tzinfo=timezone.utc)

    def test_aware_kept(self) -> None:
        plus_two = timezone(timedelta(hours=2))
        value = datetime(2026, 6, 1, 14, 0, tzinfo=plus_two)
        assert require_utc(value, "at") is value
        assert value == datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)

    def test_none_passes_through(self) -> None:
        assert require_utc(None, "at") is None

    def test_not_a_datetime(self) -> None:
        with pytest.raises(ValidationError, match="expected datetime"):
            require_utc("2026-06-01", "at")


class TestRequireFlag:
    """Stored on/off settings."""

    @pytest.mark.parametrize("value", [True, 1, "true", " Yes ", "on", "1"])
    def test_true(self, value) -> None:
        assert require_flag(value, "enabled") is True

    @pytest.mark.parametrize("value", [False, 0, "false", "No", "off", "0", ""])
    def test_false(self, value) -> None:
        assert require_flag(value, "enabled") is False

    @pytest.mark.parametrize("value", [None, 2, "enabled", 0.0])
    def test_unreadable(self, value) -> None:
        with pytest.raises(ValidationError, match="enabled"):
            require_flag(value, "enabled")
