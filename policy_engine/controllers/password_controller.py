# policy_engine/controllers/password_controller.py
"""Password rotation endpoints"""
from flask import Blueprint, g, jsonify, request

from policy_engine.extensions import get_policy_engine
from policy_engine.services import account_service
from policy_engine.utils.decorators import login_required

password_bp = Blueprint('password', __name__)


def _rejection(result):
    # One error per rejection, however many rules failed
    return jsonify({
        'error': result.verdict.value,
        'reasons': sorted(result.reasons),
        'requirements': get_policy_engine().strength_checker.requirements()
    }), 422


@password_bp.route('/status')
@login_required
def status():
    engine = get_policy_engine()
    user = g.current_user
    history = user.history()
    rotation = engine.needs_rotation(history, user.mode)

    body = {'status': rotation.value, 'needs_update': rotation.needs_update}
    latest = engine.history_store.latest(history)
    if latest is not None and not user.is_federated:
        body['expires_at'] = engine.expires_at(latest.created_at).isoformat()
    return jsonify(body)


@password_bp.route('', methods=['POST'])
@login_required
def change():
    """Rotate the session user's password"""
    payload = request.get_json(silent=True) or {}
    current_password = payload.get('current_password') or ''
    new_password = payload.get('new_password') or ''

    # A blank password reports only the presence error, not the format rules
    if not new_password:
        return jsonify({'error': 'password_required'}), 400

    result = account_service.change_password(g.current_user.id, current_password, new_password)
    if not result.is_accepted:
        return _rejection(result)
    return jsonify({'status': result.verdict.value})


@password_bp.route('/check', methods=['POST'])
@login_required
def check():
    """Validate a candidate without changing anything"""
    payload = request.get_json(silent=True) or {}
    result = account_service.check_candidate(g.current_user.id, payload.get('password'))
    if not result.is_accepted:
        return _rejection(result)
    return jsonify({'status': result.verdict.value})
