from decimal import Decimal
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import Field, field_validator

from fieldbook.agents.document_builder import DocumentValidationError, document_builder
from fieldbook.models.base import FieldbookModel
from fieldbook.models.document import DocumentType, policy_for
from fieldbook.models.line_item import LineItem
from fieldbook.tools.line_items import UnknownLineItemField, editor_for
from fieldbook.tools.totals import compute_totals

router = APIRouter(prefix="/api/documents", tags=["Documents"])

# Request Models
class LineItemsRequest(FieldbookModel):
    line_items: List[LineItem] = []
    tax_rate: Optional[Decimal] = Field(None, ge=0, le=1)

    @field_validator("tax_rate", mode="before")
    @classmethod
    def float_via_str(cls, v):
        return Decimal(str(v)) if isinstance(v, float) else v

class UpdateLineItemRequest(LineItemsRequest):
    index: int
    field: str
    value: Any = None

class RemoveLineItemRequest(LineItemsRequest):
    index: int

class FinalizeRequest(LineItemsRequest):
    document_number: Optional[str] = None

def _rate(document_type: DocumentType, requested: Optional[Decimal]) -> Decimal:
    return policy_for(document_type).default_tax_rate if requested is None else requested

def _editor_response(items: List[LineItem], tax_rate: Decimal) -> Dict[str, Any]:
    return {
        "lineItems": [item.to_payload() for item in items],
        "totals": compute_totals(items, tax_rate).to_payload(),
    }

@router.post("/{document_type}/draft")
async def open_draft(document_type: DocumentType):
    draft = document_builder.open_draft(document_type)
    return {
        "documentType": draft.document_type.value,
        "documentNumber": draft.document_number,
        "issuedAt": draft.issued_at.isoformat(),
        "expiresAt": draft.expires_at.isoformat() if draft.expires_at else None,
        **_editor_response(draft.line_items, draft.tax_rate),
    }

@router.post("/{document_type}/totals")
async def preview_totals(document_type: DocumentType, request: LineItemsRequest):
    totals = compute_totals(request.line_items, _rate(document_type, request.tax_rate))
    return totals.to_payload()

@router.post("/{document_type}/line-items/add")
async def add_line_item(document_type: DocumentType, request: LineItemsRequest):
    items = editor_for(document_type).add_line_item(request.line_items)
    return _editor_response(items, _rate(document_type, request.tax_rate))

@router.post("/{document_type}/line-items/update")
async def update_line_item(document_type: DocumentType, request: UpdateLineItemRequest):
    try:
        items = editor_for(document_type).update_line_item(
            request.line_items, request.index, request.field, request.value
        )
    except UnknownLineItemField as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _editor_response(items, _rate(document_type, request.tax_rate))

@router.post("/{document_type}/line-items/remove")
async def remove_line_item(document_type: DocumentType, request: RemoveLineItemRequest):
    items = editor_for(document_type).remove_line_item(request.line_items, request.index)
    return _editor_response(items, _rate(document_type, request.tax_rate))

@router.post("/{document_type}/finalize", status_code=201)
async def finalize_document(document_type: DocumentType, request: FinalizeRequest):
    draft = document_builder.open_draft(
        document_type,
        tax_rate=request.tax_rate,
        document_number=request.document_number,
    )
    draft = draft.model_copy(update={"line_items": request.line_items})
    try:
        document = document_builder.finalize(draft)
    except DocumentValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors)
    return document.to_payload()
