"""
Daily report routes - day-close submission, report lookup and sales totals.
"""

import logging
from datetime import date

from flask import Blueprint, jsonify, request
from flask_login import current_user
from sqlalchemy import select

from extensions import db
from logging_config import audit_logger
from models import DailyReport
from routes.decorators import permission_required
from schemas import DayCloseRequest
from services.day_close_service import close_day
from services.sales_service import sales_summary
from utils.currency import format_currency
from utils.timezone_helper import get_today

logger = logging.getLogger(__name__)

reports_bp = Blueprint('reports', __name__)


def _serialize_report(report):
    """Serialize a DailyReport to dict."""
    return {
        'id': report.id,
        'report_date': report.report_date.isoformat(),
        'checked_in_count': report.checked_in_count,
        'new_patients_count': report.new_patients_count,
        'total_payments': report.total_payments,
        'total_expenses': report.total_expenses,
        'balances': [entry.model_dump() for entry in report.balance_entries],
        'inventory_used': [line.model_dump() for line in report.inventory_lines],
        'products_sold': [line.model_dump() for line in report.product_lines],
        'additional_note': report.additional_note,
        'submitted_by': {
            'id': report.submitted_by.id,
            'username': report.submitted_by.username,
        } if report.submitted_by else None,
        'created_at': report.created_at.isoformat() if report.created_at else None,
    }


@reports_bp.route('/daily-reports', methods=['POST'])
@permission_required('reports', 'create')
def create_daily_report():
    """
    Close the day: decrement stock, record sales and store the report.
    Input: DayCloseRequest JSON.
    """
    data = request.get_json(silent=True)
    if data is None:
        return jsonify({'error': 'JSON body required'}), 400

    day_close = DayCloseRequest.model_validate(data)
    report = close_day(day_close, current_user)
    audit_logger.log_day_close(report, user_id=current_user.id)

    return jsonify(_serialize_report(report)), 201


@reports_bp.route('/daily-reports', methods=['GET'])
@permission_required('reports', 'read')
def list_daily_reports():
    """Reports, newest business date first."""
    reports = db.session.execute(
        select(DailyReport).order_by(DailyReport.report_date.desc(), DailyReport.id.desc())
    ).scalars().all()
    return jsonify([_serialize_report(r) for r in reports])


@reports_bp.route('/daily-reports/<int:report_id>', methods=['GET'])
@permission_required('reports', 'read')
def get_daily_report(report_id):
    report = db.session.get(DailyReport, report_id)
    if not report:
        return jsonify({'error': 'Report not found'}), 404
    return jsonify(_serialize_report(report))


@reports_bp.route('/sales/summary', methods=['GET'])
@permission_required('reports', 'read')
def sales_summary_view():
    """
    Sales totals over ?start=&end= (ISO dates, inclusive).
    Defaults to the current month up to today, clinic time.
    """
    try:
        end = date.fromisoformat(request.args['end']) if request.args.get('end') else get_today()
        start = date.fromisoformat(request.args['start']) if request.args.get('start') else end.replace(day=1)
    except ValueError:
        return jsonify({'error': 'start and end must be ISO dates'}), 400

    if start > end:
        return jsonify({'error': 'start must not be after end'}), 400

    summary = sales_summary(start, end)
    return jsonify({
        'start': start.isoformat(),
        'end': end.isoformat(),
        **summary,
        'revenue_display': format_currency(summary['revenue']),
        'profit_display': format_currency(summary['profit']),
    })
