"""
Timezone helper utilities.
All "now" and "today" values used by the clinic are taken in the clinic's timezone.
"""
from datetime import datetime
from zoneinfo import ZoneInfo

from flask import current_app, has_app_context

DEFAULT_TIMEZONE = 'Africa/Accra'


def clinic_timezone():
    """
    Get the configured clinic timezone.

    Returns:
        ZoneInfo: CLINIC_TIMEZONE from the app config, or Africa/Accra outside an app
    """
    if has_app_context():
        return ZoneInfo(current_app.config.get('CLINIC_TIMEZONE', DEFAULT_TIMEZONE))
    return ZoneInfo(DEFAULT_TIMEZONE)


def now_local():
    """
    Get current datetime in the clinic timezone.

    Returns:
        datetime: Current aware datetime
    """
    return datetime.now(clinic_timezone())


def to_local_time(dt):
    """
    Convert a datetime object to the clinic timezone.

    Args:
        dt: datetime object (naive or aware)

    Returns:
        datetime: Aware datetime in the clinic timezone
    """
    if dt is None:
        return None

    # Naive values are taken to already be clinic-local
    if dt.tzinfo is None:
        return dt.replace(tzinfo=clinic_timezone())

    return dt.astimezone(clinic_timezone())


def get_today():
    """Today's date in the clinic timezone."""
    return now_local().date()
