import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from fieldbook.models.document import DocumentDraft, DocumentPolicy, DocumentType, FinalizedDocument, policy_for
from fieldbook.models.line_item import LineItem
from fieldbook.tools.line_items import editor_for
from fieldbook.tools.money import Number, to_decimal
from fieldbook.tools.totals import compute_totals

logger = logging.getLogger(__name__)

class DocumentValidationError(Exception):
    """Raised when a draft cannot be submitted. `errors` holds one message per problem."""
    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__("; ".join(errors))

class DocumentBuilder:
    """
    Opens drafts for new estimates, purchase orders and invoices, and turns a
    finished draft into the snapshot the persistence API stores.
    """

    def generate_document_number(self, policy: DocumentPolicy, now: datetime) -> str:
        return f"{policy.number_prefix}-{int(now.timestamp() * 1000)}"

    def open_draft(self,
                   document_type: DocumentType,
                   tax_rate: Optional[Number] = None,
                   now: Optional[datetime] = None,
                   document_number: Optional[str] = None) -> DocumentDraft:
        """
        New draft with a generated number, the configured tax rate and, where
        the document type has one, a default expiry/due date.
        """
        policy = policy_for(document_type)
        now = now or datetime.now(timezone.utc)
        rate = policy.default_tax_rate if tax_rate is None else to_decimal(tax_rate)

        expires_at = None
        if policy.validity_days is not None:
            expires_at = now + timedelta(days=policy.validity_days)

        draft = DocumentDraft(
            document_type=policy.document_type,
            document_number=document_number or self.generate_document_number(policy, now),
            issued_at=now,
            expires_at=expires_at,
            tax_rate=rate,
            line_items=editor_for(policy.document_type).new_list(),
        )
        logger.debug(f"Opened {policy.document_type.value} draft {draft.document_number} at tax rate {rate}")
        return draft

    def validate_line_items(self, policy: DocumentPolicy, items: List[LineItem]) -> List[str]:
        errors = []
        if len(items) < policy.min_items:
            errors.append(f"At least {policy.min_items} line item(s) required")
        for position, item in enumerate(items, start=1):
            if item.is_blank:
                errors.append(f"Line {position}: description is required")
            if item.quantity < policy.min_quantity:
                errors.append(f"Line {position}: quantity must be at least {policy.min_quantity}")
            if policy.whole_quantity and item.quantity != item.quantity.to_integral_value():
                errors.append(f"Line {position}: quantity must be a whole number")
        return errors

    def finalize(self, draft: DocumentDraft) -> FinalizedDocument:
        """
        Drop untouched blank rows, validate what is left and snapshot the
        line items together with their totals.

        Raises DocumentValidationError listing every problem found.
        """
        policy = draft.policy
        # A row nobody filled in (no description, nothing to charge) is not an error
        items = [item for item in draft.line_items if not (item.is_blank and item.extended_total == 0)]

        errors = self.validate_line_items(policy, items)
        if errors:
            logger.warning(f"Rejected {policy.document_type.value} {draft.document_number}: {errors}")
            raise DocumentValidationError(errors)

        totals = compute_totals(items, draft.tax_rate)
        document = FinalizedDocument(
            document_type=draft.document_type,
            document_number=draft.document_number,
            issued_at=draft.issued_at,
            expires_at=draft.expires_at,
            line_items=items,
            totals=totals,
        )
        logger.info(
            f"Finalized {policy.document_type.value} {draft.document_number}: "
            f"{len(items)} item(s), total {totals.rounded().grand_total}"
        )
        return document

document_builder = DocumentBuilder()
