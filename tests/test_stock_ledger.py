import pytest

from models import InventoryItem, Product
from services.exceptions import InsufficientStock, NotFound
from services.stock_ledger import StockKind, low_stock_items, try_decrement


def test_decrement_inventory_item(app, db_session, gloves):
    """Successful decrement reduces stock by exactly the quantity"""
    before = gloves.updated_at

    row = try_decrement(StockKind.INVENTORY, gloves.id, 3)
    db_session.commit()

    assert row.id == gloves.id
    assert db_session.get(InventoryItem, gloves.id).stock_quantity == 2
    assert db_session.get(InventoryItem, gloves.id).updated_at >= before


def test_decrement_product(app, db_session, toothbrush):
    try_decrement(StockKind.PRODUCT, toothbrush.id, 20)
    db_session.commit()

    assert db_session.get(Product, toothbrush.id).stock_quantity == 0


def test_insufficient_stock_leaves_row_untouched(app, db_session, gloves):
    with pytest.raises(InsufficientStock) as excinfo:
        try_decrement(StockKind.INVENTORY, gloves.id, 10)

    assert excinfo.value == InsufficientStock('Gloves', 5, 10)
    assert 'Available: 5, Required: 10' in str(excinfo.value)
    db_session.rollback()
    assert db_session.get(InventoryItem, gloves.id).stock_quantity == 5


def test_missing_row_is_not_found(app, db_session):
    with pytest.raises(NotFound) as excinfo:
        try_decrement(StockKind.PRODUCT, 999, 1)

    assert excinfo.value.entity_kind == 'Product'
    assert excinfo.value.entity_id == 999


def test_kinds_are_separate_stores(app, db_session, gloves):
    """An inventory id is not a product id"""
    with pytest.raises(NotFound):
        try_decrement(StockKind.PRODUCT, gloves.id, 1)


@pytest.mark.parametrize('quantity', [0, -1, 1.5, True])
def test_quantity_must_be_positive_integer(app, db_session, gloves, quantity):
    with pytest.raises(ValueError):
        try_decrement(StockKind.INVENTORY, gloves.id, quantity)


def test_low_stock_items(app, db_session, gloves, anaesthetic):
    gloves.stock_quantity = 2
    db_session.commit()

    low = low_stock_items(StockKind.INVENTORY)

    assert [item.name for item in low] == ['Gloves']
    assert gloves.is_low_stock
    assert not anaesthetic.is_low_stock


def test_low_stock_endpoints(authenticated_client, db_session, gloves, anaesthetic, toothbrush, mouthwash):
    gloves.stock_quantity = 1
    db_session.commit()

    inventory = authenticated_client.get('/api/inventory/low-stock')
    products = authenticated_client.get('/api/products/low-stock')

    assert inventory.status_code == 200
    assert [(i['name'], i['stock_quantity']) for i in inventory.get_json()] == [('Gloves', 1)]
    assert inventory.get_json()[0]['low_stock'] is True
    # Mouthwash (4) is under the default reorder level of 10; Toothbrush (20) is not
    assert [p['name'] for p in products.get_json()] == ['Mouthwash']


def test_low_stock_requires_login(client):
    assert client.get('/api/inventory/low-stock').status_code == 401
