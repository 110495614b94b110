"""
Shared fixtures.
"""

import pytest

from invoice_matcher.storage import InMemoryStorage

from factories import make_delivery, make_invoice, make_po


@pytest.fixture
def invoice():
    return make_invoice()


@pytest.fixture
def purchase_order():
    return make_po()


@pytest.fixture
def delivery():
    return make_delivery()


@pytest.fixture
def storage(purchase_order, delivery):
    return InMemoryStorage(purchase_orders=[purchase_order], deliveries=[delivery])
