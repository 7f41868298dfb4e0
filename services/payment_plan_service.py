"""
Payment-Plan Aging - how far behind schedule an installment plan is.

overdue_amount() is a pure function of the plan, the payments handed to it
and "now"; the list_* helpers load plans and feed it completed payments.
"""

import logging
import math
from datetime import datetime, time
from typing import NamedTuple

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from extensions import db
from models import PaymentPlan
from utils.timezone_helper import now_local, to_local_time

logger = logging.getLogger(__name__)

# Fixed approximations; a "month" is always 30 days
PERIOD_DAYS = {
    'weekly': 7,
    'biweekly': 14,
    'monthly': 30,
}

OVERDUE_CANDIDATE_STATUSES = ('activated', 'overdue')
OUTSTANDING_CANDIDATE_STATUSES = ('outstanding', 'activated')


class OverduePlan(NamedTuple):
    plan: PaymentPlan
    overdue_amount: int
    total_paid: int


def _as_datetime(value):
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def elapsed_days(start, now):
    """
    Whole days between start and now, never negative.

    Two dates give their exact day difference. With datetimes any partial
    day counts as a full one.
    """
    if not isinstance(start, datetime) and not isinstance(now, datetime):
        return abs((now - start).days)

    delta = to_local_time(_as_datetime(now)) - to_local_time(_as_datetime(start))
    return math.ceil(abs(delta.total_seconds()) / 86400)


def total_paid(payments):
    return sum(payment.amount or 0 for payment in payments)


def overdue_amount(plan, payments, now=None):
    """
    Amount the plan's schedule says should have been paid by now, minus what
    the given payments add up to. Never negative.

    Every payment passed in counts, whatever its status; filter beforehand
    if only completed payments should reduce the amount.

    Plans without an installment amount or a fixed frequency (flexible or
    'custom' plans) are never overdue.

    Args:
        plan: PaymentPlan (or anything with the same attributes)
        payments: Iterable of objects with an `amount`
        now: Point in time to evaluate at, defaults to the clinic's current time

    Returns:
        int: Overdue amount in minor units
    """
    if not plan.amount_per_installment or not plan.payment_frequency:
        return 0

    period = PERIOD_DAYS.get(plan.payment_frequency)
    if period is None:
        return 0

    if now is None:
        now = now_local()

    elapsed_installments = elapsed_days(plan.start_date, now) // period
    expected = elapsed_installments * plan.amount_per_installment

    return max(0, expected - total_paid(payments))


def outstanding_balance(plan, payments):
    """What is left of the plan's total after the given payments."""
    return max(0, (plan.total_amount or 0) - total_paid(payments))


def completed_payments(plan):
    return [payment for payment in plan.payments if payment.status == 'completed']


def list_overdue_plans(now=None):
    """
    Fixed plans that are behind schedule, most overdue first.

    Only completed payments count towards what has been paid.

    Returns:
        list[OverduePlan]
    """
    if now is None:
        now = now_local()

    plans = db.session.execute(
        select(PaymentPlan).where(
            PaymentPlan.type == 'fixed',
            PaymentPlan.status.in_(OVERDUE_CANDIDATE_STATUSES),
        )
        .options(selectinload(PaymentPlan.payments), selectinload(PaymentPlan.patient))
    ).scalars().all()

    overdue = []
    for plan in plans:
        payments = completed_payments(plan)
        amount = overdue_amount(plan, payments, now)
        if amount > 0:
            overdue.append(OverduePlan(plan, amount, total_paid(payments)))

    overdue.sort(key=lambda entry: entry.overdue_amount, reverse=True)
    logger.debug(f"{len(overdue)} of {len(plans)} fixed plans overdue")
    return overdue


def list_outstanding_plans():
    """Plans with money still owed against their total, as (plan, balance) pairs."""
    plans = db.session.execute(
        select(PaymentPlan)
        .where(PaymentPlan.status.in_(OUTSTANDING_CANDIDATE_STATUSES))
        .options(selectinload(PaymentPlan.payments), selectinload(PaymentPlan.patient))
    ).scalars().all()

    outstanding = []
    for plan in plans:
        balance = outstanding_balance(plan, completed_payments(plan))
        if balance > 0:
            outstanding.append((plan, balance))
    return outstanding
