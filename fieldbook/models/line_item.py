from decimal import Decimal
from typing import Any, ClassVar, Dict, Tuple
from pydantic import AliasChoices, ConfigDict, Field, field_validator

from fieldbook.config import settings
from fieldbook.models.base import FieldbookModel
from fieldbook.tools.money import ZERO, format_money_str, quantize_money

HUNDRED = Decimal("100")

def _plain(value: Decimal) -> str:
    """Decimal as a plain string without exponent or trailing zeros."""
    text = format(value.normalize(), "f")
    return text if text != "-0" else "0"

class LineItem(FieldbookModel):
    """
    One row of an estimate, purchase order or invoice.

    The amounts are derived from quantity, unit price and markup on every
    access; there is no stored total that could drift from its inputs.
    """
    model_config = ConfigDict(frozen=True)

    description: str = ""
    quantity: Decimal = Field(Decimal("1"), ge=0, le=settings.MAX_LINE_VALUE)
    unit_price: Decimal = Field(
        ZERO, ge=0, le=settings.MAX_LINE_VALUE,
        validation_alias=AliasChoices("unit_price", "unitPrice", "rate"),
    )
    markup_percent: Decimal = Field(
        ZERO, ge=0, le=settings.MAX_MARKUP_PERCENT,
        validation_alias=AliasChoices("markup_percent", "markupPercent", "markup"),
    )
    taxable: bool = Field(
        True,
        validation_alias=AliasChoices("taxable", "tax"),
    )

    @field_validator("quantity", "unit_price", "markup_percent", mode="before")
    @classmethod
    def float_via_str(cls, v):
        # JSON numbers arrive as floats; 10.1 must stay 10.1, not its binary expansion
        return Decimal(str(v)) if isinstance(v, float) else v

    @field_validator("description", mode="before")
    @classmethod
    def default_description(cls, v):
        return "" if v is None else v

    @field_validator("markup_percent", mode="before")
    @classmethod
    def default_markup(cls, v):
        # Older forms omit markup entirely
        return ZERO if v is None or v == "" else v

    @field_validator("taxable", mode="before")
    @classmethod
    def default_taxable(cls, v):
        return True if v is None else v

    @property
    def base_amount(self) -> Decimal:
        return self.quantity * self.unit_price

    @property
    def markup_amount(self) -> Decimal:
        return self.base_amount * self.markup_percent / HUNDRED

    @property
    def extended_total(self) -> Decimal:
        return self.base_amount + self.markup_amount

    @property
    def is_blank(self) -> bool:
        return not self.description.strip()

    def to_payload(self) -> Dict[str, Any]:
        return {
            "description": self.description,
            "quantity": _plain(self.quantity),
            "unitPrice": format_money_str(self.unit_price),
            "markupPercent": _plain(self.markup_percent),
            "taxable": self.taxable,
            "extendedTotal": format_money_str(self.extended_total),
        }

class DocumentTotals(FieldbookModel):
    """
    Document-level aggregates of a line-item list at a given tax rate.
    Values keep full precision; use rounded() or to_payload() at the edge.
    """
    model_config = ConfigDict(frozen=True)

    subtotal: Decimal = ZERO
    markup_amount: Decimal = ZERO
    taxable_base: Decimal = ZERO
    tax_rate: Decimal = ZERO
    tax_amount: Decimal = ZERO
    grand_total: Decimal = ZERO

    MONEY_FIELDS: ClassVar[Tuple[str, ...]] = ("subtotal", "markup_amount", "taxable_base", "tax_amount", "grand_total")

    def rounded(self) -> "DocumentTotals":
        """Copy with every money field rounded to cents."""
        return self.model_copy(update={
            name: quantize_money(getattr(self, name)) for name in self.MONEY_FIELDS
        })

    def to_payload(self) -> Dict[str, Any]:
        return {
            "subtotal": format_money_str(self.subtotal),
            "markupAmount": format_money_str(self.markup_amount),
            "taxableBase": format_money_str(self.taxable_base),
            "taxRate": _plain(self.tax_rate),
            "taxAmount": format_money_str(self.tax_amount),
            "total": format_money_str(self.grand_total),
        }
