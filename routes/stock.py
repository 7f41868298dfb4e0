"""
Stock routes - low-stock lists for clinical inventory and retail products.
"""

from flask import Blueprint, jsonify

from routes.decorators import permission_required
from services.stock_ledger import StockKind, low_stock_items

stock_bp = Blueprint('stock', __name__)


def _serialize_stock_row(row):
    return {
        'id': row.id,
        'sku': row.sku,
        'name': row.name,
        'unit': row.unit,
        'stock_quantity': row.stock_quantity,
        'reorder_level': row.reorder_level,
        'low_stock': row.is_low_stock,
    }


@stock_bp.route('/inventory/low-stock')
@permission_required('inventory', 'read')
def inventory_low_stock():
    """Consumables at or below their reorder level, lowest first."""
    return jsonify([_serialize_stock_row(item) for item in low_stock_items(StockKind.INVENTORY)])


@stock_bp.route('/products/low-stock')
@permission_required('products', 'read')
def products_low_stock():
    return jsonify([_serialize_stock_row(product) for product in low_stock_items(StockKind.PRODUCT)])
