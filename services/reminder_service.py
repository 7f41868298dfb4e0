"""
Overdue payment reminders sent by email through Flask-Mail.
"""

import logging

from flask import render_template_string
from flask_mail import Message

from extensions import mail
from services.payment_plan_service import list_overdue_plans
from utils.currency import format_currency

logger = logging.getLogger(__name__)


class ReminderService:
    """Email reminders for patients behind on their payment plan."""

    TEMPLATES = {
        'overdue_payment': """
            <h2>Payment Reminder</h2>
            <p>Dear {{ patient_name }},</p>
            <p>Our records show that your payment plan ({{ patient_identifier }}) is behind schedule.</p>
            <ul>
                <li>Amount overdue: {{ overdue_amount }}</li>
                <li>Installment: {{ installment }} ({{ frequency }})</li>
            </ul>
            <p>Please contact the front desk if you have already paid.</p>
        """,
    }

    @staticmethod
    def send_email(subject, recipients, template_name, **kwargs):
        """
        Render a template and send it.

        Returns:
            bool: True if handed to the mail server, False if sending failed
        """
        html_body = render_template_string(ReminderService.TEMPLATES[template_name], **kwargs)
        msg = Message(
            subject=subject,
            recipients=recipients if isinstance(recipients, list) else [recipients],
            html=html_body
        )
        try:
            mail.send(msg)
        except OSError as e:
            logger.error(f"Error sending email to {recipients}: {e}")
            return False

        logger.info(f"Email sent to {recipients}: {subject}")
        return True

    @staticmethod
    def send_overdue_reminder(patient, plan, amount):
        """Send one overdue reminder for `plan` to `patient`."""
        return ReminderService.send_email(
            subject=f"Payment reminder - {format_currency(amount)} overdue",
            recipients=patient.email,
            template_name='overdue_payment',
            patient_name=patient.name,
            patient_identifier=patient.patient_identifier,
            overdue_amount=format_currency(amount),
            installment=format_currency(plan.amount_per_installment),
            frequency=plan.payment_frequency,
        )


def send_overdue_reminders(now=None):
    """
    Email every patient whose fixed plan is overdue.

    Returns:
        int: Number of reminders sent
    """
    sent = 0
    for entry in list_overdue_plans(now):
        patient = entry.plan.patient
        if not patient.email:
            logger.info(f"No email for {patient.patient_identifier}, reminder skipped")
            continue
        if ReminderService.send_overdue_reminder(patient, entry.plan, entry.overdue_amount):
            sent += 1

    logger.info(f"Overdue reminders sent: {sent}")
    return sent
