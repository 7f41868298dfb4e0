"""
Configuration for the clinic back-office application.
"""
import os
from datetime import timedelta

basedir = os.path.abspath(os.path.dirname(__file__))


class Config:
    """Base configuration"""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'

    # SQLite by default, any SQLAlchemy URL through DATABASE_URL
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'clinic.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {}

    # Flask-Login
    REMEMBER_COOKIE_DURATION = timedelta(days=7)

    # Caching
    CACHE_TYPE = 'SimpleCache'
    CACHE_DEFAULT_TIMEOUT = 60

    # Mail (overdue reminders)
    MAIL_SERVER = os.environ.get('MAIL_SERVER', 'localhost')
    MAIL_PORT = int(os.environ.get('MAIL_PORT', 25))
    MAIL_USE_TLS = os.environ.get('MAIL_USE_TLS', 'false').lower() == 'true'
    MAIL_USERNAME = os.environ.get('MAIL_USERNAME')
    MAIL_PASSWORD = os.environ.get('MAIL_PASSWORD')
    MAIL_DEFAULT_SENDER = os.environ.get('MAIL_DEFAULT_SENDER', 'noreply@clinic.local')

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_DIR = os.environ.get('LOG_DIR') or os.path.join(basedir, 'logs')

    # Timezone
    CLINIC_TIMEZONE = 'Africa/Accra'

    # Money is stored in minor units (pesewas)
    CURRENCY_CODE = 'GHS'

    # Patient identifiers: #FDM000001
    PATIENT_ID_PREFIX = 'FDM'
    PATIENT_ID_DIGITS = 6
    PATIENT_SEQUENCE_NAME = 'patient_id_seq'

    # Role -> module -> allowed actions. Admin is granted everything.
    ROLE_PERMISSIONS = {
        'doctor': {
            'patients': {'create', 'read', 'update'},
            'reports': {'read'},
            'inventory': {'read'},
            'products': {'read'},
        },
        'receptionist': {
            'patients': {'create', 'read', 'update'},
            'reports': {'create', 'read'},
            'inventory': {'read', 'update'},
            'products': {'read', 'update'},
            'payments': {'create', 'read'},
        },
    }


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    SQLALCHEMY_ECHO = False


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    SQLALCHEMY_ECHO = False

    def __init__(self):
        if not os.environ.get('SECRET_KEY'):
            raise ValueError("No SECRET_KEY set for Flask application in production")


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    WTF_CSRF_ENABLED = False
    CACHE_TYPE = 'NullCache'
    MAIL_SUPPRESS_SEND = True


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
