from datetime import date

import pytest

from models import Sale
from services.sales_service import record_sale, sales_summary
from utils.timezone_helper import get_today


def test_sale_arithmetic(app, db_session, toothbrush, report_date):
    sale = record_sale(toothbrush, 3, report_date)
    db_session.commit()

    assert sale.unit_price == 1500
    assert sale.cost_price == 900
    assert sale.total_amount == 4500
    assert sale.profit == 1800
    assert sale.sale_date == report_date


def test_unknown_cost_counts_as_zero(app, db_session, mouthwash, report_date):
    sale = record_sale(mouthwash, 2, report_date)

    assert sale.cost_price == 0
    assert sale.profit == 5000


def test_loss_is_not_clamped(app, db_session, toothbrush, report_date):
    toothbrush.price = 700
    sale = record_sale(toothbrush, 4, report_date)

    assert sale.total_amount == 2800
    assert sale.profit == -800


def test_prices_are_captured_at_sale_time(app, db_session, toothbrush, report_date):
    sale = record_sale(toothbrush, 1, report_date)
    db_session.commit()

    toothbrush.price = 9999
    toothbrush.cost_price = 1
    db_session.commit()

    stored = db_session.get(Sale, sale.id)
    assert stored.unit_price == 1500
    assert stored.profit == 600


def test_record_sale_does_not_touch_stock(app, db_session, toothbrush, report_date):
    record_sale(toothbrush, 5, report_date)
    db_session.commit()
    assert toothbrush.stock_quantity == 20


def test_quantity_must_be_positive(app, db_session, toothbrush, report_date):
    with pytest.raises(ValueError):
        record_sale(toothbrush, 0, report_date)


def test_sales_summary(app, db_session, toothbrush, mouthwash):
    record_sale(toothbrush, 2, date(2024, 5, 1))
    record_sale(mouthwash, 1, date(2024, 5, 2))
    record_sale(toothbrush, 10, date(2024, 6, 1))
    db_session.commit()

    summary = sales_summary(date(2024, 5, 1), date(2024, 5, 31))

    assert summary == {'sales': 2, 'quantity': 3, 'revenue': 5500, 'profit': 3700}


def test_sales_summary_endpoint(authenticated_client, db_session, toothbrush, mouthwash):
    record_sale(toothbrush, 2, date(2024, 5, 3))
    record_sale(mouthwash, 1, date(2024, 4, 30))
    db_session.commit()

    response = authenticated_client.get('/api/sales/summary?start=2024-05-01&end=2024-05-31')

    assert response.status_code == 200
    body = response.get_json()
    assert body['start'] == '2024-05-01'
    assert body['end'] == '2024-05-31'
    assert body['sales'] == 1
    assert body['revenue'] == 3000
    assert body['profit'] == 1200
    assert body['revenue_display'] == 'GHS 30.00'


def test_sales_summary_defaults_to_current_month(authenticated_client, db_session, toothbrush):
    today = get_today()
    record_sale(toothbrush, 1, today)
    db_session.commit()

    body = authenticated_client.get('/api/sales/summary').get_json()

    assert body['end'] == today.isoformat()
    assert body['start'] == today.replace(day=1).isoformat()
    assert body['quantity'] == 1


@pytest.mark.parametrize('query', ['start=yesterday', 'start=2024-06-01&end=2024-05-01'])
def test_sales_summary_rejects_bad_ranges(authenticated_client, query):
    assert authenticated_client.get(f'/api/sales/summary?{query}').status_code == 400
