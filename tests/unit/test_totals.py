from decimal import Decimal

import pytest

from fieldbook.models.line_item import DocumentTotals, LineItem
from fieldbook.tools.totals import compute_totals

def test_empty_list_gives_zero_totals():
    totals = compute_totals([], Decimal("0.13"))
    assert totals.subtotal == 0
    assert totals.markup_amount == 0
    assert totals.taxable_base == 0
    assert totals.tax_amount == 0
    assert totals.grand_total == 0

def test_single_item(lumber_item):
    assert lumber_item.base_amount == Decimal("30.00")
    assert lumber_item.markup_amount == Decimal("3.00")
    assert lumber_item.extended_total == Decimal("33.00")

    totals = compute_totals([lumber_item], Decimal("0.08"))
    assert totals.subtotal == Decimal("33.00")
    assert totals.markup_amount == Decimal("3.00")
    assert totals.taxable_base == Decimal("33.00")
    assert totals.tax_amount == Decimal("2.64")
    assert totals.grand_total == Decimal("35.64")

def test_non_taxable_item_is_excluded_from_tax(sample_items):
    totals = compute_totals(sample_items, Decimal("0.08"))
    assert totals.subtotal == Decimal("83.00")
    assert totals.taxable_base == Decimal("33.00")
    assert totals.tax_amount == Decimal("2.64")
    assert totals.grand_total == Decimal("85.64")

def test_compute_totals_is_idempotent(sample_items):
    first = compute_totals(sample_items, Decimal("0.13"))
    second = compute_totals(sample_items, Decimal("0.13"))
    assert first == second

def test_compute_totals_accepts_float_rate(lumber_item):
    totals = compute_totals([lumber_item], 0.08)
    assert totals.tax_rate == Decimal("0.08")
    assert totals.tax_amount == Decimal("2.64")

def test_missing_markup_and_taxable_use_defaults():
    totals = compute_totals(
        [{"description": "Drywall", "quantity": 2, "unitPrice": "12.50", "markupPercent": None, "taxable": None}],
        Decimal("0.10"),
    )
    assert totals.markup_amount == 0
    assert totals.subtotal == Decimal("25.00")
    assert totals.taxable_base == Decimal("25.00")

    totals = compute_totals([{"description": "Drywall", "quantity": 2, "rate": "12.50"}], Decimal("0.10"))
    assert totals.taxable_base == Decimal("25.00")

def test_markup_applies_per_line():
    items = [
        LineItem(description="Labor", quantity=10, unit_price=40, markup_percent=25),
        LineItem(description="Materials", quantity=1, unit_price=200, markup_percent=0),
    ]
    totals = compute_totals(items, 0)
    assert totals.markup_amount == Decimal("100")
    assert totals.subtotal == Decimal("700")

def test_monotonic_in_quantity_and_price(lumber_item, permit_item):
    previous = None
    for quantity in range(0, 6):
        item = lumber_item.model_copy(update={"quantity": Decimal(quantity)})
        totals = compute_totals([item, permit_item], Decimal("0.13"))
        if previous is not None:
            assert totals.subtotal >= previous.subtotal
            assert totals.grand_total >= previous.grand_total
        previous = totals

    previous = None
    for price in ("0", "0.01", "9.99", "10", "125.50"):
        item = lumber_item.model_copy(update={"unit_price": Decimal(price)})
        totals = compute_totals([item, permit_item], Decimal("0.13"))
        if previous is not None:
            assert totals.subtotal >= previous.subtotal
            assert totals.grand_total >= previous.grand_total
        previous = totals

def test_no_rounding_before_aggregation():
    items = [LineItem(description=f"Fitting {n}", quantity=1, unit_price="0.10", markup_percent="33.333") for n in range(3)]

    # each line is 0.133333; rounding per line first would give 0.39
    assert items[0].extended_total == Decimal("0.133333")
    totals = compute_totals(items, 0)
    assert totals.subtotal == Decimal("0.399999")
    assert totals.rounded().subtotal == Decimal("0.40")
    assert totals.to_payload()["subtotal"] == "0.40"

def test_rounded_keeps_two_places(sample_items):
    totals = compute_totals(sample_items, Decimal("0.13")).rounded()
    assert totals.tax_amount == Decimal("4.29")
    assert totals.grand_total == Decimal("87.29")
    assert totals.grand_total.as_tuple().exponent == -2

def test_payload_uses_two_decimal_strings(sample_items):
    payload = compute_totals(sample_items, Decimal("0.08")).to_payload()
    assert payload == {
        "subtotal": "83.00",
        "markupAmount": "3.00",
        "taxableBase": "33.00",
        "taxRate": "0.08",
        "taxAmount": "2.64",
        "total": "85.64",
    }

def test_negative_tax_rate_is_rejected(lumber_item):
    with pytest.raises(ValueError):
        compute_totals([lumber_item], Decimal("-0.05"))

def test_totals_model_defaults_to_zero():
    assert DocumentTotals().grand_total == 0

@pytest.mark.parametrize("rate", ["1.5", "1e30"])
def test_tax_rate_above_one_is_rejected(lumber_item, rate):
    with pytest.raises(ValueError):
        compute_totals([lumber_item], rate)
