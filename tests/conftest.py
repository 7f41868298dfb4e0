"""
Pytest Configuration and Fixtures
"""

import pytest
import sys
import os
from datetime import date

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


@pytest.fixture(scope='function')
def app():
    """Application with a fresh in-memory database and a pushed app context."""
    from config import TestingConfig
    from app import create_app
    from extensions import db

    test_app = create_app(TestingConfig)

    with test_app.app_context():
        db.create_all()
        yield test_app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def file_app(tmp_path):
    """
    Application backed by a SQLite file, for tests that use several
    connections at once. No app context is pushed.
    """
    from config import TestingConfig
    from app import create_app
    from extensions import db

    class FileDatabaseConfig(TestingConfig):
        SQLALCHEMY_DATABASE_URI = 'sqlite:///' + str(tmp_path / 'clinic.db')
        SQLALCHEMY_ENGINE_OPTIONS = {
            'connect_args': {'timeout': 30, 'check_same_thread': False},
        }

    test_app = create_app(FileDatabaseConfig)

    with test_app.app_context():
        db.create_all()

    yield test_app

    with test_app.app_context():
        db.drop_all()
        db.engine.dispose()


@pytest.fixture(scope='function')
def client(app):
    """Create test client"""
    return app.test_client()


@pytest.fixture(scope='function')
def runner(app):
    """Create CLI test runner"""
    return app.test_cli_runner()


@pytest.fixture(scope='function')
def db_session(app):
    """Database session for the test's app context"""
    from extensions import db
    yield db.session


@pytest.fixture(scope='function')
def make_user(db_session):
    """Factory for staff users"""
    from models import User
    from werkzeug.security import generate_password_hash

    def _make_user(username='testuser', role='receptionist', password='Testpassword123'):
        user = User(
            username=username,
            password_hash=generate_password_hash(password),
            role=role
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


@pytest.fixture(scope='function')
def test_user(make_user):
    """Receptionist: may submit daily reports and create patients"""
    return make_user('testuser', 'receptionist')


@pytest.fixture(scope='function')
def authenticated_client(client, test_user):
    """Create authenticated test client"""
    with client.session_transaction() as session:
        session['_user_id'] = str(test_user.id)
        session['_fresh'] = True

    return client


@pytest.fixture(scope='function')
def gloves(db_session):
    from models import InventoryItem

    item = InventoryItem(name='Gloves', unit='box', stock_quantity=5, reorder_level=2)
    db_session.add(item)
    db_session.commit()
    return item


@pytest.fixture(scope='function')
def anaesthetic(db_session):
    from models import InventoryItem

    item = InventoryItem(name='Lidocaine Cartridge', unit='pcs', stock_quantity=50, reorder_level=10)
    db_session.add(item)
    db_session.commit()
    return item


@pytest.fixture(scope='function')
def toothbrush(db_session):
    from models import Product

    product = Product(name='Toothbrush', price=1500, cost_price=900, stock_quantity=20)
    db_session.add(product)
    db_session.commit()
    return product


@pytest.fixture(scope='function')
def mouthwash(db_session):
    """Product with no known cost price"""
    from models import Product

    product = Product(name='Mouthwash', price=2500, cost_price=None, stock_quantity=4)
    db_session.add(product)
    db_session.commit()
    return product


@pytest.fixture
def day_close_data():
    """Builds a DayCloseRequest payload; keyword arguments override fields"""
    def _data(**overrides):
        data = {
            'report_date': '2024-05-10',
            'checked_in_count': 14,
            'new_patients_count': 3,
            'total_payments': 450000,
            'total_expenses': 32000,
            'balances': [
                {'method': 'cash', 'amount': 250000},
                {'method': 'momo', 'amount': 200000},
            ],
            'inventory_used': [],
            'products_sold': [],
            'additional_note': None,
        }
        data.update(overrides)
        return data

    return _data


@pytest.fixture
def report_date():
    return date(2024, 5, 10)
