from fieldbook.models.line_item import LineItem, DocumentTotals
from fieldbook.tools.totals import compute_totals
from fieldbook.tools.line_items import add_line_item, update_line_item, remove_line_item, LineItemEditor, editor_for
