"""Validation helpers for boundary checks and workflow preconditions.

Amount checks raise ValidationError naming the field; status checks raise
CommandRejectedError.
"""

from collections.abc import Sequence
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from .errors import CommandRejectedError, ValidationError
from .money import ZERO


def require_integer(value: Any, field: str) -> int:
    """Require a real int (bools are not quantities)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field, "must be an integer")
    return value


def require_positive(value: Decimal, field: str) -> None:
    """Require that a value is greater than zero."""
    if value <= 0:
        raise ValidationError(field, "must be positive")


def require_non_negative(value: Decimal, field: str) -> None:
    """Require that a value is zero or greater."""
    if value < 0:
        raise ValidationError(field, "must not be negative")


def require_fraction(value: Decimal, field: str) -> None:
    """Require 0 <= value <= 1."""
    if value < ZERO or value > 1:
        raise ValidationError(field, "must be between 0 and 1")


def require_percentage(value: Decimal, field: str) -> None:
    """Require 0 <= value <= 100."""
    if value < ZERO or value > 100:
        raise ValidationError(field, "must be between 0 and 100")


def require_not_empty(items: Sequence[Any], field: str) -> None:
    """Require that a sequence has at least one element."""
    if not items:
        raise ValidationError(field, "must not be empty")


def require_status(actual: str, expected: str, error_msg: str) -> None:
    """Require that the current status matches the expected value."""
    if actual != expected:
        raise CommandRejectedError(error_msg)


def require_status_not(actual: str, forbidden: str, error_msg: str) -> None:
    """Require that the current status is NOT the forbidden value."""
    if actual == forbidden:
        raise CommandRejectedError(error_msg)


def require_utc(value: Optional[datetime], field: str) -> Optional[datetime]:
    """Return an aware datetime; naive values are taken to be UTC."""
    if value is None:
        return None
    if not isinstance(value, datetime):
        raise ValidationError(field, f"expected datetime, got {type(value).__name__}")
    if value.utcoffset() is None:
        return value.replace(tzinfo=timezone.utc)
    return value


_TRUE_FLAGS = {"true", "1", "yes", "on"}
_FALSE_FLAGS = {"false", "0", "no", "off", ""}


def require_flag(value: Any, field: str) -> bool:
    """Parse a stored on/off setting: a bool, 0/1, or a string such as "false"."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_FLAGS:
            return True
        if text in _FALSE_FLAGS:
            return False
    raise ValidationError(field, f"expected true or false, got {value!r}")
