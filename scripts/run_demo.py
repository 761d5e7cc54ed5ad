import argparse
import json

from fieldbook.agents.document_builder import DocumentValidationError, document_builder
from fieldbook.models.document import DocumentType
from fieldbook.tools.line_items import editor_for
from fieldbook.tools.money import format_currency

SAMPLE_ROWS = [
    {"description": "Framing labor", "quantity": "16", "unitPrice": "65.00", "markupPercent": "0", "taxable": False},
    {"description": "2x4 studs", "quantity": "40", "unitPrice": "4.15", "markupPercent": "15", "taxable": True},
    {"description": "Drywall sheets", "quantity": "24", "unitPrice": "13.98", "markupPercent": "15", "taxable": True},
]

def run_demo(document_type: DocumentType):
    print(f"--- Building {document_type.value} ---")
    editor = editor_for(document_type)
    draft = document_builder.open_draft(document_type)

    # Type the sample rows in the way the form would, field by field
    items = [item for item in draft.line_items if not item.is_blank]
    for row in SAMPLE_ROWS:
        items = editor.add_line_item(items)
        index = len(items) - 1
        for field, value in row.items():
            items = editor.update_line_item(items, index, field, value)
    draft = draft.model_copy(update={"line_items": items})

    totals = draft.totals
    print(f"Subtotal:  {format_currency(totals.subtotal)}")
    print(f"Markup:    {format_currency(totals.markup_amount)}")
    print(f"Tax ({totals.tax_rate}): {format_currency(totals.tax_amount)}")
    print(f"Total:     {format_currency(totals.grand_total)}")

    try:
        document = document_builder.finalize(draft)
    except DocumentValidationError as e:
        print(f"Could not finalize: {e}")
        return
    print(json.dumps(document.to_payload(), indent=2))

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Build a sample document and print its totals")
    parser.add_argument("--document-type", type=DocumentType, default=DocumentType.ESTIMATE,
                        choices=list(DocumentType), help="estimate, purchase_order or invoice")
    args = parser.parse_args()

    run_demo(args.document_type)
