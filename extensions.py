"""
Flask Extensions
Centralizes all Flask extension instances for the application.
"""

import sqlite3

from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_migrate import Migrate
from flask_mail import Mail
from flask_caching import Cache
from flask_wtf.csrf import CSRFProtect
from sqlalchemy import event

# Database
db = SQLAlchemy()

# Authentication
login_manager = LoginManager()
login_manager.login_message = 'Please log in to access this page.'
login_manager.login_message_category = 'warning'

# Database migrations
migrate = Migrate()

# Email
mail = Mail()

# Caching
cache = Cache()

# CSRF Protection
csrf = CSRFProtect()


def _sqlite_manual_transactions(dbapi_connection, connection_record):
    """Let SQLAlchemy emit BEGIN itself instead of pysqlite."""
    if isinstance(dbapi_connection, sqlite3.Connection):
        dbapi_connection.isolation_level = None


def _sqlite_begin_immediate(conn):
    """
    Take the SQLite write lock when a transaction starts.

    With deferred transactions two writers can both read the same stock
    level before either writes; IMMEDIATE makes the second one wait.
    """
    conn.exec_driver_sql('BEGIN IMMEDIATE')


def _install_sqlite_locking(engine):
    """Serialize writers on this app's SQLite engine; other databases are left alone."""
    if engine.dialect.name != 'sqlite':
        return
    event.listen(engine, 'connect', _sqlite_manual_transactions)
    event.listen(engine, 'begin', _sqlite_begin_immediate)


def init_extensions(app):
    """
    Initialize all Flask extensions with the application instance.

    Args:
        app: Flask application instance
    """
    db.init_app(app)
    login_manager.init_app(app)
    migrate.init_app(app, db)
    mail.init_app(app)
    cache.init_app(app)
    csrf.init_app(app)

    with app.app_context():
        _install_sqlite_locking(db.engine)

    return app
