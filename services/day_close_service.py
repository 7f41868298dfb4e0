"""
Day-Close - commits a business day's inventory use, retail sales and
financial summary as one all-or-nothing unit.

Inventory lines are processed first, then product lines, each in the order
submitted. The first failing line aborts the whole day-close and nothing is
kept: no stock change, no Sale, no DailyReport.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models import DailyReport
from services.exceptions import InsufficientStock, NotFound, PersistenceFailure
from services.sales_service import record_sale
from services.stock_ledger import StockKind, try_decrement

logger = logging.getLogger(__name__)


def close_day(request, submitted_by):
    """
    Run the day-close for a validated request.

    Calling this twice with the same request decrements stock twice and
    stores two reports; callers must not double-submit.

    Args:
        request: schemas.DayCloseRequest
        submitted_by: User submitting the report

    Returns:
        DailyReport: The committed report

    Raises:
        NotFound: An inventory item or product id does not exist
        InsufficientStock: A line asks for more than is on hand
        PersistenceFailure: The database failed; everything was rolled back
    """
    sales_created = 0
    try:
        for line in request.inventory_used:
            if line.quantity == 0:
                continue
            try_decrement(StockKind.INVENTORY, line.item_id, line.quantity)

        for line in request.products_sold:
            if line.quantity == 0:
                continue
            product = try_decrement(StockKind.PRODUCT, line.product_id, line.quantity)
            record_sale(product, line.quantity, request.report_date)
            sales_created += 1

        report = DailyReport(
            report_date=request.report_date,
            checked_in_count=request.checked_in_count,
            new_patients_count=request.new_patients_count,
            total_payments=request.total_payments,
            total_expenses=request.total_expenses,
            balances=[entry.model_dump() for entry in request.balances],
            inventory_used=[line.model_dump() for line in request.inventory_used],
            products_sold=[line.model_dump() for line in request.products_sold],
            additional_note=request.additional_note,
            submitted_by_id=submitted_by.id,
        )
        db.session.add(report)
        db.session.commit()

    except (NotFound, InsufficientStock) as exc:
        db.session.rollback()
        logger.warning(f"Day-close for {request.report_date} rejected: {exc}")
        raise
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.error(f"Day-close for {request.report_date} failed: {exc}")
        raise PersistenceFailure(f"Failed to save daily report: {exc}") from exc
    except BaseException:
        # Cancelled or crashed mid-way: leave nothing behind
        db.session.rollback()
        raise

    logger.info(
        f"Daily report #{report.id} for {report.report_date} created by "
        f"'{submitted_by.username}': {len(request.inventory_used)} inventory lines, "
        f"{len(request.products_sold)} product lines, {sales_created} sales recorded"
    )
    return report
