from datetime import datetime, timedelta

from extensions import mail
from models import Patient, Payment, PaymentPlan
from services.reminder_service import ReminderService, send_overdue_reminders

START = datetime(2024, 1, 1)


def _add_plan(db_session, identifier, name, email, paid=0):
    patient = Patient(patient_identifier=identifier, name=name, email=email)
    plan = PaymentPlan(
        patient=patient, type='fixed', status='activated', total_amount=60000,
        amount_per_installment=10000, payment_frequency='monthly', start_date=START,
    )
    db_session.add(plan)
    if paid:
        db_session.add(Payment(patient=patient, payment_plan=plan, amount=paid,
                               method='momo', status='completed'))
    db_session.commit()
    return plan


def test_reminders_sent_to_overdue_patients(app, db_session):
    _add_plan(db_session, '#FDM000001', 'Akosua Boateng', 'akosua@example.com', paid=5000)
    _add_plan(db_session, '#FDM000002', 'No Email', None)
    _add_plan(db_session, '#FDM000003', 'Up To Date', 'paid@example.com', paid=20000)

    with mail.record_messages() as outbox:
        sent = send_overdue_reminders(START + timedelta(days=65))

    assert sent == 1
    assert len(outbox) == 1
    message = outbox[0]
    assert message.recipients == ['akosua@example.com']
    assert 'GHS 150.00' in message.subject
    assert 'Akosua Boateng' in message.html
    assert '#FDM000001' in message.html


def test_send_email_reports_failure(app, monkeypatch):
    def refuse(message):
        raise ConnectionRefusedError('smtp down')

    monkeypatch.setattr(mail, 'send', refuse)

    ok = ReminderService.send_email(
        'Test', 'someone@example.com', 'overdue_payment',
        patient_name='X', patient_identifier='#FDM000009',
        overdue_amount='GHS 1.00', installment='GHS 1.00', frequency='weekly',
    )

    assert ok is False


def test_reminder_command(runner, db_session):
    _add_plan(db_session, '#FDM000001', 'Kojo', 'kojo@example.com')

    with mail.record_messages() as outbox:
        result = runner.invoke(args=['send-overdue-reminders'])

    assert result.exit_code == 0
    assert '1 reminder(s) sent' in result.output
    assert len(outbox) == 1
