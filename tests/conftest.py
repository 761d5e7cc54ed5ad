from decimal import Decimal

import pytest

from fieldbook.models.line_item import LineItem

@pytest.fixture
def lumber_item():
    return LineItem(
        description="2x4 studs",
        quantity=3,
        unit_price=Decimal("10.00"),
        markup_percent=10,
        taxable=True,
    )

@pytest.fixture
def permit_item():
    return LineItem(
        description="Permit fee",
        quantity=1,
        unit_price=Decimal("50.00"),
        markup_percent=0,
        taxable=False,
    )

@pytest.fixture
def sample_items(lumber_item, permit_item):
    return [lumber_item, permit_item]
