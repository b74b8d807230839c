# policy_engine/controllers/auth_controller.py
"""Session login for local-password accounts
Federated sign-in lives with the identity provider integration, not here
"""
from datetime import datetime

from flask import Blueprint, current_app, g, jsonify, request, session

from policy_engine.services import account_service
from policy_engine.utils.decorators import login_required, rotation_required
from policy_engine.utils.timeutils import utc_now

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/login', methods=['POST'])
def login():
    """Authenticate and report whether the password must be rotated first"""
    payload = request.get_json(silent=True) or {}
    username = (payload.get('username') or '').strip()
    password = payload.get('password') or ''

    if not username or not password:
        return jsonify({'error': 'credentials_required'}), 400

    user = account_service.authenticate(username, password)

    session.clear()
    session['user_id'] = user.id
    session['login_time'] = utc_now().isoformat()

    status = account_service.rotation_status(user.id)
    if status.needs_update:
        current_app.logger.info(f'User {user.id} logged in with an overdue password ({status.value})')

    return jsonify({
        'user_id': user.id,
        'password_status': status.value,
        'password_needs_update': status.needs_update
    })


@auth_bp.route('/logout', methods=['POST'])
def logout():
    session.clear()
    return jsonify({'logged_out': True})


@auth_bp.route('/me')
@login_required
@rotation_required
def me():
    user = g.current_user
    return jsonify({
        'user_id': user.id,
        'username': user.username,
        'auth_mode': user.auth_mode
    })


@auth_bp.before_app_request
def check_session_timeout():
    """Drop sessions older than PERMANENT_SESSION_LIFETIME"""
    if 'user_id' in session and 'login_time' in session:
        login_time = datetime.fromisoformat(session['login_time'])
        if utc_now() - login_time > current_app.permanent_session_lifetime:
            session.clear()
