"""
Permission decorators for route access control.
"""
import logging
from functools import wraps

from flask import jsonify
from flask_login import current_user

logger = logging.getLogger(__name__)


def permission_required(module, action):
    """
    Require a logged-in user whose role allows `action` on `module`.

    Usage:
        @permission_required('reports', 'create')
        def create_report():
            ...
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_user.is_authenticated:
                return jsonify({'error': 'Not authenticated'}), 401

            if not current_user.has_permission(module, action):
                logger.warning(
                    f"User '{current_user.username}' (role: {current_user.role}) "
                    f"lacks permission: {module}.{action}"
                )
                return jsonify({'error': 'Unauthorized'}), 403

            return f(*args, **kwargs)
        return decorated_function
    return decorator
