from fieldbook.models.base import FieldbookModel
from fieldbook.models.line_item import LineItem, DocumentTotals
from fieldbook.models.document import DocumentType, DocumentPolicy, DocumentDraft, FinalizedDocument, POLICIES, policy_for
