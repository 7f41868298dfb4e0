"""
Currency helpers. Amounts are stored as integer minor units (pesewas).
"""
from decimal import Decimal

from flask import current_app, has_app_context


def minor_to_major(amount):
    """900000 -> Decimal('9000.00')"""
    return (Decimal(amount or 0) / 100).quantize(Decimal('0.01'))


def format_amount(amount):
    """900000 -> '9,000.00'"""
    return f"{minor_to_major(amount):,.2f}"


def format_currency(amount):
    """900000 -> 'GHS 9,000.00'"""
    code = current_app.config.get('CURRENCY_CODE', 'GHS') if has_app_context() else 'GHS'
    return f"{code} {format_amount(amount)}"
