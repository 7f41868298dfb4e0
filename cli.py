"""
CLI Commands for the clinic back-office

Usage:
    flask init-db                    # Create tables and the patient counter
    flask create-admin               # Create admin user (password generated)
    flask create-admin --password X  # Create admin with specific password
    flask sync-patient-sequence      # Align the counter with stored identifiers
    flask send-overdue-reminders     # Email patients with overdue plans
"""

import click
from flask.cli import with_appcontext
from werkzeug.security import generate_password_hash
import secrets
import string


def register_commands(app):
    """Register CLI commands with Flask app."""

    @app.cli.command('init-db')
    @with_appcontext
    def init_db():
        """Create all tables and make sure the patient counter exists."""
        from extensions import db
        from services.sequence_service import sync_patient_sequence

        db.create_all()

        # Counter starts past any identifiers already stored
        value = sync_patient_sequence()
        db.session.commit()
        click.echo(f"✓ Database initialized (patient counter at {value})")

    @app.cli.command('create-admin')
    @click.option('--username', default='admin', help='Admin username')
    @click.option('--password', default=None, help='Admin password (generated if not provided)')
    @click.option('--role', default='admin', type=click.Choice(['admin', 'doctor', 'receptionist']))
    @click.option('--force', is_flag=True, help='Overwrite existing user')
    @with_appcontext
    def create_admin(username, password, role, force):
        """Create a staff user for the application."""
        from extensions import db
        from models import User

        # Check for an existing user with that name
        existing = User.query.filter_by(username=username).first()

        if existing and not force:
            click.echo(f"Error: User '{username}' already exists. Use --force to overwrite.")
            return

        if existing and force:
            db.session.delete(existing)
            db.session.commit()
            click.echo(f"Deleted existing user '{username}'")

        # Generate secure password if not provided
        if not password:
            password = generate_secure_password()
            click.echo(f"\nGenerated secure password: {password}")
            click.echo("Save this password now! It won't be shown again.\n")

        # Validate password strength
        is_valid, message = validate_password_strength(password)
        if not is_valid:
            click.echo(f"Error: Password too weak - {message}")
            return

        user = User(
            username=username,
            password_hash=generate_password_hash(password),
            role=role
        )
        db.session.add(user)
        db.session.commit()

        click.echo(f"✓ User '{username}' ({role}) created successfully!")

    @app.cli.command('sync-patient-sequence')
    @with_appcontext
    def sync_sequence():
        """Move the patient counter past every stored #FDM identifier."""
        from extensions import db
        from services.sequence_service import (
            current_patient_number, format_patient_identifier, sync_patient_sequence
        )

        before = current_patient_number()
        value = sync_patient_sequence()
        db.session.commit()

        if value == before:
            click.echo(f"Patient counter already at {value}")
        else:
            click.echo(f"Patient counter moved from {before} to {value}")
        click.echo(f"✓ Next identifier {format_patient_identifier(value + 1)}")

    @app.cli.command('send-overdue-reminders')
    @with_appcontext
    def send_reminders():
        """Email every patient whose fixed payment plan is overdue."""
        from services.reminder_service import send_overdue_reminders

        sent = send_overdue_reminders()
        click.echo(f"✓ {sent} reminder(s) sent")


def generate_secure_password(length: int = 16) -> str:
    """Generate a cryptographically secure random password."""
    alphabet = string.ascii_letters + string.digits + "!@#$%^&*"
    # Ensure at least one of each required character type
    password = [
        secrets.choice(string.ascii_uppercase),
        secrets.choice(string.ascii_lowercase),
        secrets.choice(string.digits),
        secrets.choice("!@#$%^&*")
    ]
    # Fill remaining length
    password += [secrets.choice(alphabet) for _ in range(length - 4)]
    # Shuffle to avoid predictable positions
    secrets.SystemRandom().shuffle(password)
    return ''.join(password)


def validate_password_strength(password: str) -> tuple[bool, str | None]:
    """
    Validate password meets security requirements.

    Returns:
        tuple: (is_valid, error_message)
    """
    import re

    if len(password) < 8:
        return False, "Must be at least 8 characters"
    if not re.search(r'[A-Z]', password):
        return False, "Must contain at least one uppercase letter"
    if not re.search(r'[a-z]', password):
        return False, "Must contain at least one lowercase letter"
    if not re.search(r'[0-9]', password):
        return False, "Must contain at least one digit"

    return True, None
