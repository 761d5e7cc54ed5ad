import logging
from typing import Any, Callable, Dict, Iterable, List

from fieldbook.models.document import DocumentPolicy, DocumentType, policy_for
from fieldbook.models.line_item import LineItem
from fieldbook.tools.input_sanitizer import (
    sanitize_flag,
    sanitize_money,
    sanitize_percent,
    sanitize_quantity,
    sanitize_text,
)
from fieldbook.tools.totals import LineItemLike, as_line_items

logger = logging.getLogger(__name__)

# Form field name -> model field name
FIELD_NAMES: Dict[str, str] = {
    "description": "description",
    "quantity": "quantity",
    "unit_price": "unit_price",
    "unitPrice": "unit_price",
    "rate": "unit_price",
    "markup_percent": "markup_percent",
    "markupPercent": "markup_percent",
    "markup": "markup_percent",
    "taxable": "taxable",
    "tax": "taxable",
}

DERIVED_FIELDS = {"extended_total", "extendedTotal", "total"}

class UnknownLineItemField(ValueError):
    """Raised when an update names a field a line item does not have (or cannot set)."""

class LineItemEditor:
    """
    Add / update / remove rows of a line-item list under one document type's rules.

    Every method returns a new list; the list passed in is left untouched.
    """
    def __init__(self, policy: DocumentPolicy):
        self.policy = policy

    def new_list(self) -> List[LineItem]:
        """Rows a freshly opened form starts with."""
        return [LineItem()] if self.policy.seed_blank_row else []

    def add_line_item(self, items: Iterable[LineItemLike]) -> List[LineItem]:
        return as_line_items(items) + [LineItem()]

    def update_line_item(self, items: Iterable[LineItemLike], index: int, field: str, value: Any) -> List[LineItem]:
        """
        Set one field of the row at index. Numeric input that does not parse
        falls back to a default (quantity 1, price/markup 0) instead of failing,
        so the form stays usable while the user is still typing.

        An index outside the list is ignored. Raises UnknownLineItemField for
        a field name that is not editable.
        """
        name = self._resolve_field(field)
        current = as_line_items(items)
        if not self._in_bounds(current, index):
            logger.warning(f"Ignoring update of {field!r} at index {index}: list has {len(current)} item(s)")
            return current

        sanitized = self._sanitizers()[name](value)
        current[index] = current[index].model_copy(update={name: sanitized})
        return current

    def remove_line_item(self, items: Iterable[LineItemLike], index: int) -> List[LineItem]:
        current = as_line_items(items)
        if not self._in_bounds(current, index):
            logger.warning(f"Ignoring removal at index {index}: list has {len(current)} item(s)")
            return current
        if len(current) <= self.policy.min_items:
            logger.info(
                f"Keeping last {len(current)} item(s): a {self.policy.document_type.value} "
                f"needs at least {self.policy.min_items}"
            )
            return current
        del current[index]
        return current

    def _sanitizers(self) -> Dict[str, Callable[[Any], Any]]:
        return {
            "description": sanitize_text,
            "quantity": lambda v: sanitize_quantity(
                v, minimum=self.policy.min_quantity, whole=self.policy.whole_quantity
            ),
            "unit_price": sanitize_money,
            "markup_percent": sanitize_percent,
            "taxable": sanitize_flag,
        }

    @staticmethod
    def _resolve_field(field: str) -> str:
        if field in DERIVED_FIELDS:
            raise UnknownLineItemField(f"{field!r} is derived from quantity, unit price and markup")
        try:
            return FIELD_NAMES[field]
        except KeyError:
            raise UnknownLineItemField(f"Line items have no editable field {field!r}")

    @staticmethod
    def _in_bounds(items: List[LineItem], index: int) -> bool:
        return isinstance(index, int) and not isinstance(index, bool) and 0 <= index < len(items)

editors: Dict[DocumentType, LineItemEditor] = {
    document_type: LineItemEditor(policy_for(document_type)) for document_type in DocumentType
}

def editor_for(document_type: DocumentType) -> LineItemEditor:
    return editors[DocumentType(document_type)]

# Estimate rules are the least restrictive; used when no document type is given.
_default_editor = editors[DocumentType.ESTIMATE]

def add_line_item(items: Iterable[LineItemLike]) -> List[LineItem]:
    return _default_editor.add_line_item(items)

def update_line_item(items: Iterable[LineItemLike], index: int, field: str, value: Any) -> List[LineItem]:
    return _default_editor.update_line_item(items, index, field, value)

def remove_line_item(items: Iterable[LineItemLike], index: int) -> List[LineItem]:
    return _default_editor.remove_line_item(items, index)
