"""Monetary helpers: Decimal coercion, rounding and display formatting."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from .errors import ValidationError

ZERO = Decimal("0")
CENT = Decimal("0.01")
HUNDRED = Decimal("100")
DEFAULT_CURRENCY = "USD"

Amount = Decimal | int | str | float

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
}


def to_decimal(value: Amount, field: str = "amount") -> Decimal:
    """Coerce an amount to Decimal.

    Floats go through ``str()`` so that ``10.1`` becomes ``Decimal("10.1")``
    rather than its binary expansion. Booleans, NaN and infinities are rejected.
    """
    if isinstance(value, bool):
        raise ValidationError(field, "must be a number")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, str)):
        try:
            result = Decimal(value.strip() if isinstance(value, str) else value)
        except InvalidOperation as e:
            raise ValidationError(field, f"not a number: {value!r}", e)
    elif isinstance(value, float):
        result = Decimal(str(value))
    else:
        raise ValidationError(field, f"unsupported type {type(value).__name__}")

    if not result.is_finite():
        raise ValidationError(field, "must be finite")
    return result


def round_money(amount: Decimal, places: Decimal = CENT) -> Decimal:
    """Round half away from zero to two decimal places."""
    return amount.quantize(places, rounding=ROUND_HALF_UP)


def format_price(amount: Amount, currency: str = DEFAULT_CURRENCY) -> str:
    """Format an amount for display, e.g. ``$10.00`` or ``-$3.50``.

    Currencies without a known symbol render as ``12.00 JPY``.
    """
    value = round_money(to_decimal(amount))
    sign = "-" if value < 0 else ""
    body = f"{abs(value):,.2f}"
    symbol = CURRENCY_SYMBOLS.get(currency.upper())
    if symbol is None:
        return f"{sign}{body} {currency.upper()}"
    return f"{sign}{symbol}{body}"
