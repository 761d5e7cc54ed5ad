from decimal import Decimal, InvalidOperation
from typing import Any, Union

from fieldbook.config import settings

CENT = Decimal("0.01")
ZERO = Decimal("0")

Number = Union[Decimal, int, float, str]

def to_decimal(value: Number) -> Decimal:
    """
    Convert a number-like value to Decimal without going through binary floats.
    Raises ValueError for anything that is not a finite number.
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        # str() keeps 0.1 as 0.1 instead of 0.1000000000000000055511151231257827
        result = Decimal(str(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation:
            raise ValueError(f"Not a number: {value!r}")
    else:
        raise ValueError(f"Not a number: {value!r}")

    if not result.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return result

def quantize_money(value: Any) -> Decimal:
    """Round to cents. Only call this at presentation/persistence boundaries."""
    return to_decimal(value).quantize(CENT, rounding=settings.MONEY_ROUNDING)

def format_money_str(value: Any) -> str:
    """Two-decimal string as sent to the persistence API, e.g. '33.00'."""
    return f"{quantize_money(value):.2f}"

def format_currency(value: Any) -> str:
    """Display form with currency symbol and thousands separators, e.g. '$1,234.50'."""
    amount = quantize_money(value)
    sign = "-" if amount < 0 else ""
    return f"{sign}{settings.CURRENCY_SYMBOL}{abs(amount):,.2f}"
