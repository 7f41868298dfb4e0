"""
Logging configuration for the clinic back-office.

Console logging always; rotating files for general and error logs outside of tests.
"""

import logging
import logging.handlers
import os
from datetime import datetime, timezone


def setup_logging(app):
    """
    Configure logging for the Flask application.

    Args:
        app: Flask application instance
    """
    # Get log level from config
    log_level = str(app.config.get('LOG_LEVEL', 'INFO')).upper()

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level, logging.INFO))

    # Clear existing handlers
    root_logger.handlers = []

    # Console handler (always active)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if app.debug else logging.INFO)
    console_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    root_logger.addHandler(console_handler)

    # File handlers stay off under tests
    if not app.config.get('TESTING', False):
        # Create logs directory if not exists
        logs_dir = app.config['LOG_DIR']
        os.makedirs(logs_dir, exist_ok=True)

        file_format = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        # File handler for general logs (rotating)
        file_handler = logging.handlers.RotatingFileHandler(
            os.path.join(logs_dir, 'clinic.log'),
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(file_format)
        root_logger.addHandler(file_handler)

        # Separate error log file
        error_handler = logging.handlers.RotatingFileHandler(
            os.path.join(logs_dir, 'errors.log'),
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding='utf-8'
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(file_format)
        root_logger.addHandler(error_handler)

    # Reduce noise from third-party libraries
    logging.getLogger('werkzeug').setLevel(logging.WARNING)
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)

    app.logger.info(f"Logging configured: level={log_level}")


class AuditLogger:
    """
    Audit trail for business-relevant actions.

    Usage:
        audit_logger.log_day_close(report, user_id=1)
    """

    def __init__(self):
        self.logger = logging.getLogger('audit')
        self.logger.setLevel(logging.INFO)

    def log_action(self, action: str, user_id: int = None, **kwargs):
        """
        Log an auditable action.

        Args:
            action: Action identifier (e.g., 'day_close', 'patient_created')
            user_id: ID of the user performing the action
            **kwargs: Additional context to log
        """
        context = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'action': action,
            'user_id': user_id,
            **kwargs
        }
        self.logger.info(f"AUDIT: {context}")

    def log_day_close(self, report, user_id: int):
        """Log a submitted daily report."""
        self.log_action(
            'day_close',
            user_id=user_id,
            report_id=report.id,
            report_date=report.report_date.isoformat(),
            total_payments=report.total_payments,
            total_expenses=report.total_expenses
        )

    def log_patient_created(self, patient, user_id: int):
        """Log a new patient and the identifier it received."""
        self.log_action(
            'patient_created',
            user_id=user_id,
            patient_id=patient.id,
            patient_identifier=patient.patient_identifier
        )


# Global audit logger instance
audit_logger = AuditLogger()
