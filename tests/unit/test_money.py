from decimal import Decimal

import pytest

from fieldbook.tools.money import format_currency, format_money_str, quantize_money, to_decimal

def test_to_decimal_avoids_float_noise():
    assert to_decimal(0.1) == Decimal("0.1")
    assert to_decimal("2.50") == Decimal("2.50")
    assert to_decimal(7) == Decimal(7)

@pytest.mark.parametrize("raw", ["abc", float("inf"), "NaN", None, True])
def test_to_decimal_rejects_non_numbers(raw):
    with pytest.raises(ValueError):
        to_decimal(raw)

def test_quantize_rounds_half_up():
    assert quantize_money("0.125") == Decimal("0.13")
    assert quantize_money("2.644") == Decimal("2.64")
    assert quantize_money("0.005") == Decimal("0.01")

def test_format_money_str():
    assert format_money_str(33) == "33.00"
    assert format_money_str(Decimal("0.399999")) == "0.40"

def test_format_currency():
    assert format_currency(Decimal("1234.5")) == "$1,234.50"
    assert format_currency(-12) == "-$12.00"
