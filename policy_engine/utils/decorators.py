# policy_engine/utils/decorators.py
"""Authentication and rotation-enforcement decorators"""
from functools import wraps

from flask import g, jsonify, session

from policy_engine.extensions import db, get_policy_engine
from policy_engine.models.user import User


def login_required(f):
    """
    Decorator to ensure user is authenticated before accessing route
    The session user is re-loaded on every request and exposed as g.current_user
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if 'user_id' not in session:
            return jsonify({'error': 'authentication_required'}), 401

        user = db.session.get(User, session['user_id'])
        if not user or not user.is_active:
            session.clear()
            return jsonify({'error': 'session_invalid'}), 401

        g.current_user = user
        return f(*args, **kwargs)
    return decorated_function


def rotation_required(f):
    """
    Decorator blocking routes until an overdue password has been rotated
    Must be applied beneath login_required
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        user = g.current_user
        status = get_policy_engine().needs_rotation(user.history(), user.mode)
        if status.needs_update:
            return jsonify({'error': 'password_expired', 'status': status.value}), 403
        return f(*args, **kwargs)
    return decorated_function
