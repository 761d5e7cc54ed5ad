"""
Parse-or-fallback coercion for values typed into line-item forms.

A half-typed or garbled entry must never block editing, so nothing in here
raises: a quantity that does not parse becomes 1, a price or markup becomes 0,
and out-of-range values are clamped to the field's limits.
"""
import logging
import re
from decimal import ROUND_DOWN, Decimal
from typing import Any, Optional

from fieldbook.config import settings
from fieldbook.tools.money import ZERO, to_decimal

logger = logging.getLogger(__name__)

DEFAULT_QUANTITY = Decimal("1")
DEFAULT_PRICE = ZERO
DEFAULT_MARKUP = ZERO

_FALSE_WORDS = {"false", "0", "no", "n", "off"}
_TRUE_WORDS = {"true", "1", "yes", "y", "on"}

# 1,250 or 12,345.60; a comma anywhere else is not a thousands separator
_GROUPED_NUMBER = re.compile(r"^[+-]?\d{1,3}(,\d{3})+(\.\d*)?$")

def parse_number(raw: Any) -> Optional[Decimal]:
    """Return the numeric value of raw, or None if it is not a finite number."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        cleaned = raw.strip().replace(settings.CURRENCY_SYMBOL, "").replace("$", "")
        cleaned = cleaned.replace(" ", "")
        if "," in cleaned:
            if not _GROUPED_NUMBER.match(cleaned):
                return None
            cleaned = cleaned.replace(",", "")
        if not cleaned:
            return None
        raw = cleaned
    try:
        return to_decimal(raw)
    except ValueError:
        return None

def _clamp(value: Decimal, minimum: Any, maximum: Any) -> Decimal:
    if value > maximum:
        logger.debug(f"Value {value} is above the limit, using {maximum}")
        return Decimal(maximum)
    if value < minimum:
        return Decimal(minimum)
    return value

def sanitize_quantity(raw: Any, minimum: Decimal = ZERO, whole: bool = False) -> Decimal:
    value = parse_number(raw)
    if value is None:
        logger.debug(f"Quantity {raw!r} is not numeric, using {DEFAULT_QUANTITY}")
        value = DEFAULT_QUANTITY
    value = _clamp(value, minimum, settings.MAX_LINE_VALUE)
    if whole:
        value = value.to_integral_value(rounding=ROUND_DOWN)
        if value < minimum:
            value = Decimal(minimum)
    return value

def sanitize_money(raw: Any) -> Decimal:
    value = parse_number(raw)
    if value is None:
        logger.debug(f"Amount {raw!r} is not numeric, using {DEFAULT_PRICE}")
        return DEFAULT_PRICE
    return _clamp(value, ZERO, settings.MAX_LINE_VALUE)

def sanitize_percent(raw: Any) -> Decimal:
    value = parse_number(raw)
    if value is None:
        logger.debug(f"Percent {raw!r} is not numeric, using {DEFAULT_MARKUP}")
        return DEFAULT_MARKUP
    return _clamp(value, ZERO, settings.MAX_MARKUP_PERCENT)

def sanitize_flag(raw: Any, default: bool = True) -> bool:
    if isinstance(raw, bool):
        return raw
    if raw is None:
        return default
    if isinstance(raw, str):
        word = raw.strip().lower()
        if word in _FALSE_WORDS:
            return False
        if word in _TRUE_WORDS:
            return True
        return default
    number = parse_number(raw)
    if number is None:
        return default
    return number != 0

def sanitize_text(raw: Any) -> str:
    if raw is None:
        return ""
    return str(raw)
