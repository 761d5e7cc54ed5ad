from decimal import Decimal
from typing import Any, Iterable, List, Mapping, Union

from fieldbook.models.line_item import DocumentTotals, LineItem
from fieldbook.tools.money import ZERO, Number, to_decimal

LineItemLike = Union[LineItem, Mapping[str, Any]]

def as_line_items(items: Iterable[LineItemLike]) -> List[LineItem]:
    """Accept LineItem instances or raw mappings coming from a form/JSON body."""
    return [item if isinstance(item, LineItem) else LineItem.model_validate(item) for item in items]

def compute_totals(items: Iterable[LineItemLike], tax_rate: Number) -> DocumentTotals:
    """
    Derive document totals from a line-item list.

    Markup is applied per line. Tax is charged once on the sum of the taxable
    lines' extended totals, not line by line. Nothing is rounded here.

    Raises ValueError if tax_rate is not a number between 0 and 1.
    """
    rate = to_decimal(tax_rate)
    if rate < 0 or rate > 1:
        raise ValueError(f"Tax rate must be between 0 and 1, got {tax_rate!r}")

    subtotal = ZERO
    markup_amount = ZERO
    taxable_base = ZERO
    for item in as_line_items(items):
        line_total = item.extended_total
        subtotal += line_total
        markup_amount += item.markup_amount
        if item.taxable:
            taxable_base += line_total

    tax_amount: Decimal = taxable_base * rate
    return DocumentTotals(
        subtotal=subtotal,
        markup_amount=markup_amount,
        taxable_base=taxable_base,
        tax_rate=rate,
        tax_amount=tax_amount,
        grand_total=subtotal + tax_amount,
    )
