"""
Payment plan routes - overdue and outstanding plan lookups for dashboards.
"""

import logging
from datetime import datetime

from flask import Blueprint, jsonify, request

from extensions import db, cache
from models import PaymentPlan
from routes.decorators import permission_required
from services.payment_plan_service import (
    completed_payments, list_overdue_plans, list_outstanding_plans,
    outstanding_balance, overdue_amount, total_paid
)
from utils.timezone_helper import to_local_time

logger = logging.getLogger(__name__)

payment_plans_bp = Blueprint('payment_plans', __name__)


def _as_of_param():
    """Optional ?as_of=ISO date/datetime; None means now."""
    value = request.args.get('as_of')
    if not value:
        return None
    return to_local_time(datetime.fromisoformat(value))


def _serialize_plan(plan):
    patient = plan.patient
    return {
        'id': plan.id,
        'patient': {
            'id': patient.id,
            'name': patient.name,
            'patient_identifier': patient.patient_identifier,
            'phone': patient.phone,
        } if patient else None,
        'type': plan.type,
        'status': plan.status,
        'total_amount': plan.total_amount,
        'amount_per_installment': plan.amount_per_installment,
        'payment_frequency': plan.payment_frequency,
        'start_date': plan.start_date.isoformat(),
    }


@payment_plans_bp.route('/payment-plans/overdue')
@permission_required('patients', 'read')
@cache.cached(timeout=60, query_string=True)
def overdue_plans():
    """Fixed plans behind schedule, most overdue first (cached 60s)."""
    try:
        as_of = _as_of_param()
    except ValueError:
        return jsonify({'error': 'as_of must be an ISO date'}), 400

    entries = list_overdue_plans(as_of)
    return jsonify([
        {
            **_serialize_plan(entry.plan),
            'overdue_amount': entry.overdue_amount,
            'total_paid': entry.total_paid,
        }
        for entry in entries
    ])


@payment_plans_bp.route('/payment-plans/outstanding')
@permission_required('patients', 'read')
def outstanding_plans():
    return jsonify([
        {**_serialize_plan(plan), 'outstanding_balance': balance}
        for plan, balance in list_outstanding_plans()
    ])


@payment_plans_bp.route('/payment-plans/<int:plan_id>/overdue')
@permission_required('patients', 'read')
def plan_overdue(plan_id):
    """Overdue amount and balance for one plan, counting completed payments."""
    plan = db.session.get(PaymentPlan, plan_id)
    if not plan:
        return jsonify({'error': 'Payment plan not found'}), 404

    try:
        as_of = _as_of_param()
    except ValueError:
        return jsonify({'error': 'as_of must be an ISO date'}), 400

    payments = completed_payments(plan)
    return jsonify({
        **_serialize_plan(plan),
        'overdue_amount': overdue_amount(plan, payments, as_of),
        'outstanding_balance': outstanding_balance(plan, payments),
        'total_paid': total_paid(payments),
    })
