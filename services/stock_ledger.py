"""
Stock Ledger - on-hand quantities for inventory items and retail products.

Both stores share the same semantics; StockKind picks the table.
Nothing here commits: callers own the transaction.
"""

import enum
import logging
from datetime import datetime

from sqlalchemy import select, update

from extensions import db
from models import InventoryItem, Product
from services.exceptions import InsufficientStock, NotFound

logger = logging.getLogger(__name__)


class StockKind(enum.Enum):
    INVENTORY = 'InventoryItem'
    PRODUCT = 'Product'


_MODELS = {
    StockKind.INVENTORY: InventoryItem,
    StockKind.PRODUCT: Product,
}


def model_for(kind):
    return _MODELS[StockKind(kind)]


def try_decrement(kind, item_id, quantity):
    """
    Check and decrement stock for one row in the current transaction.

    The row is locked for update (where the database supports it) and the
    write only applies while stock_quantity >= quantity, so two concurrent
    callers can never both spend the same units.

    Args:
        kind: StockKind.INVENTORY or StockKind.PRODUCT
        item_id: Primary key of the row
        quantity: Units to remove, must be positive

    Returns:
        The decremented InventoryItem/Product

    Raises:
        NotFound: No row with that id
        InsufficientStock: Fewer than `quantity` units on hand
    """
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValueError(f"quantity must be a positive integer, got {quantity!r}")

    kind = StockKind(kind)
    model = model_for(kind)

    row = db.session.execute(
        select(model)
        .where(model.id == item_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).scalar_one_or_none()

    if row is None:
        raise NotFound(kind.value, item_id)

    if row.stock_quantity < quantity:
        raise InsufficientStock(row.name, row.stock_quantity, quantity)

    result = db.session.execute(
        update(model)
        .where(model.id == item_id, model.stock_quantity >= quantity)
        .values(
            stock_quantity=model.stock_quantity - quantity,
            updated_at=datetime.utcnow(),
        )
        .execution_options(synchronize_session=False)
    )

    db.session.refresh(row)
    if result.rowcount != 1:
        # Someone spent the stock between our read and our write
        raise InsufficientStock(row.name, row.stock_quantity, quantity)

    logger.debug(f"{kind.value} #{item_id}: -{quantity} -> {row.stock_quantity}")
    return row


def low_stock_items(kind):
    """Rows at or below their reorder level, lowest stock first."""
    model = model_for(kind)
    return db.session.execute(
        select(model)
        .where(model.stock_quantity <= db.func.coalesce(model.reorder_level, 0))
        .order_by(model.stock_quantity.asc(), model.name.asc())
    ).scalars().all()
