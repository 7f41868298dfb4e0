"""
Sale Recorder - turns a sold product line into an immutable Sale row.
"""

import logging

from sqlalchemy import func, select

from extensions import db
from models import Sale

logger = logging.getLogger(__name__)


def record_sale(product, quantity, as_of_date):
    """
    Create the Sale for `quantity` units of `product`.

    Prices are captured from the product now and never recomputed. A missing
    cost price counts as 0; a selling price below cost gives a negative profit.
    Stock must already have been checked and decremented by the caller.

    Args:
        product: Product being sold
        quantity: Units sold, positive
        as_of_date: Business date of the sale (the day being closed)

    Returns:
        Sale: Added to the session, not committed
    """
    if quantity <= 0:
        raise ValueError(f"Sale quantity must be positive, got {quantity}")

    unit_price = product.price or 0
    cost_price = product.cost_price or 0

    sale = Sale(
        product_id=product.id,
        quantity=quantity,
        unit_price=unit_price,
        cost_price=cost_price,
        total_amount=unit_price * quantity,
        profit=(unit_price - cost_price) * quantity,
        sale_date=as_of_date,
    )
    db.session.add(sale)
    return sale


def sales_summary(start_date, end_date):
    """
    Totals for sales dated between start_date and end_date, inclusive.

    Returns:
        dict: sales, quantity, revenue, profit (money in minor units)
    """
    row = db.session.execute(
        select(
            func.count(Sale.id),
            func.coalesce(func.sum(Sale.quantity), 0),
            func.coalesce(func.sum(Sale.total_amount), 0),
            func.coalesce(func.sum(Sale.profit), 0),
        ).where(Sale.sale_date >= start_date, Sale.sale_date <= end_date)
    ).one()

    return {
        'sales': row[0],
        'quantity': int(row[1]),
        'revenue': int(row[2]),
        'profit': int(row[3]),
    }
