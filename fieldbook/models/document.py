from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import ConfigDict, Field

from fieldbook.config import settings
from fieldbook.models.base import FieldbookModel
from fieldbook.models.line_item import DocumentTotals, LineItem
from fieldbook.tools.money import ZERO, to_decimal

class DocumentType(str, Enum):
    ESTIMATE = "estimate"
    PURCHASE_ORDER = "purchase_order"
    INVOICE = "invoice"

class DocumentPolicy(FieldbookModel):
    """Editing and validation rules that differ between document types."""
    model_config = ConfigDict(frozen=True)

    document_type: DocumentType
    number_prefix: str
    min_items: int = 0
    min_quantity: Decimal = ZERO
    whole_quantity: bool = False
    seed_blank_row: bool = False
    tax_rate_setting: str
    validity_days_setting: Optional[str] = None

    @property
    def default_tax_rate(self) -> Decimal:
        return to_decimal(getattr(settings, self.tax_rate_setting))

    @property
    def validity_days(self) -> Optional[int]:
        if self.validity_days_setting is None:
            return None
        return getattr(settings, self.validity_days_setting)

POLICIES: Dict[DocumentType, DocumentPolicy] = {
    DocumentType.ESTIMATE: DocumentPolicy(
        document_type=DocumentType.ESTIMATE,
        number_prefix="EST",
        tax_rate_setting="ESTIMATE_TAX_RATE",
        validity_days_setting="ESTIMATE_EXPIRY_DAYS",
    ),
    DocumentType.PURCHASE_ORDER: DocumentPolicy(
        document_type=DocumentType.PURCHASE_ORDER,
        number_prefix="PO",
        min_items=1,
        min_quantity=Decimal("1"),
        whole_quantity=True,
        seed_blank_row=True,
        tax_rate_setting="PURCHASE_ORDER_TAX_RATE",
    ),
    DocumentType.INVOICE: DocumentPolicy(
        document_type=DocumentType.INVOICE,
        number_prefix="INV",
        tax_rate_setting="INVOICE_TAX_RATE",
        validity_days_setting="INVOICE_DUE_DAYS",
    ),
}

def policy_for(document_type: DocumentType) -> DocumentPolicy:
    return POLICIES[DocumentType(document_type)]

class DocumentDraft(FieldbookModel):
    """
    A document being edited. Totals are recomputed from the line items on
    every read.
    """
    document_type: DocumentType
    document_number: str
    issued_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    expires_at: Optional[datetime] = None
    tax_rate: Decimal = Field(..., ge=0, le=1)
    line_items: List[LineItem] = []

    @property
    def policy(self) -> DocumentPolicy:
        return policy_for(self.document_type)

    @property
    def totals(self) -> DocumentTotals:
        from fieldbook.tools.totals import compute_totals
        return compute_totals(self.line_items, self.tax_rate)

class FinalizedDocument(FieldbookModel):
    """Snapshot handed to the persistence API once a draft is submitted."""
    model_config = ConfigDict(frozen=True)

    document_type: DocumentType
    document_number: str
    issued_at: datetime
    expires_at: Optional[datetime] = None
    currency: str = Field(default_factory=lambda: settings.CURRENCY)
    line_items: List[LineItem]
    totals: DocumentTotals

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "documentType": self.document_type.value,
            "documentNumber": self.document_number,
            "issuedAt": self.issued_at.isoformat(),
            "expiresAt": self.expires_at.isoformat() if self.expires_at else None,
            "currency": self.currency,
            "lineItems": [item.to_payload() for item in self.line_items],
        }
        payload.update(self.totals.to_payload())
        return payload
