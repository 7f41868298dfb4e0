"""
Authentication routes - session login and logout for the JSON API.
"""

import logging
from datetime import datetime

from flask import Blueprint, jsonify, request
from flask_login import login_user, logout_user, login_required, current_user
from flask_wtf.csrf import generate_csrf
from werkzeug.security import check_password_hash

from extensions import db
from models import User

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/login', methods=['POST'])
def login():
    """Authenticate with username and password."""
    data = request.get_json(silent=True) or request.form
    username = (data.get('username') or '').strip()
    password = data.get('password') or ''

    if not username or not password:
        return jsonify({'error': 'Username and password are required'}), 400

    user = User.query.filter_by(username=username).first()

    if not user or not check_password_hash(user.password_hash or '', password):
        logger.warning(f"Failed login attempt for username: {username}")
        return jsonify({'error': 'Invalid username or password'}), 401

    if not user.is_active:
        return jsonify({'error': 'Account disabled'}), 403

    login_user(user)
    user.last_login = datetime.utcnow()
    db.session.commit()
    logger.info(f"User '{username}' logged in successfully")

    return jsonify({
        'user': {'id': user.id, 'username': user.username, 'role': user.role},
        'csrf_token': generate_csrf(),
    })


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    """Log out the current user."""
    username = current_user.username
    logout_user()
    logger.info(f"User '{username}' logged out")
    return jsonify({'success': True})


@auth_bp.route('/api/csrf-token')
def csrf_token():
    """Token to send back in the X-CSRFToken header on writes."""
    return jsonify({'csrf_token': generate_csrf()})
