"""HTTP endpoints for login, rotation status and password changes"""
import pytest

from policy_engine.extensions import db
from policy_engine.models import User
from policy_engine.services import account_service
from policy_engine.services.password_policy import AuthMode


@pytest.fixture
def alice(app, clock):
    user, _ = account_service.create_account('alice', 'Password@1')
    clock.advance(minutes=1)
    return user


def login(client, username='alice', password='Password@1'):
    return client.post('/auth/login', json={'username': username, 'password': password})


def test_login_reports_fresh_password(client, alice):
    response = login(client)
    assert response.status_code == 200
    assert response.get_json()['password_needs_update'] is False


def test_login_with_wrong_password(client, alice):
    response = login(client, password='nope')
    assert response.status_code == 401
    assert response.get_json()['error'] == 'invalid_credentials'


def test_login_requires_credentials(client):
    assert client.post('/auth/login', json={}).status_code == 400


def test_login_flags_expired_password(client, alice, clock):
    clock.advance(days=370)
    body = login(client).get_json()
    assert body['password_needs_update'] is True
    assert body['password_status'] == 'needs_update'


def test_routes_require_login(client):
    assert client.get('/password/status').status_code == 401
    assert client.post('/password', json={}).status_code == 401


def test_status_includes_expiry(client, alice):
    login(client)
    body = client.get('/password/status').get_json()
    assert body == {
        'status': 'currently_valid',
        'needs_update': False,
        'expires_at': '2026-01-15T12:00:00'
    }


def test_change_password_success(client, alice):
    login(client)
    response = client.post('/password', json={'current_password': 'Password@1', 'new_password': 'Password@2'})
    assert response.status_code == 200
    assert response.get_json() == {'status': 'accepted'}

    client.post('/auth/logout')
    assert login(client, password='Password@2').status_code == 200


def test_weak_password_returns_single_error(client, alice):
    login(client)
    response = client.post('/password', json={'current_password': 'Password@1', 'new_password': 'abc'})
    body = response.get_json()
    assert response.status_code == 422
    assert body['error'] == 'weak_password'
    assert 'too_short' in body['reasons']


def test_reused_password_is_rejected(client, alice):
    login(client)
    response = client.post('/password', json={'current_password': 'Password@1', 'new_password': 'Password@1'})
    assert response.status_code == 422
    assert response.get_json()['error'] == 'reused_password'


def test_blank_password_reports_presence_only(client, alice):
    login(client)
    response = client.post('/password', json={'current_password': 'Password@1', 'new_password': ''})
    assert response.status_code == 400
    assert response.get_json() == {'error': 'password_required'}


def test_wrong_current_password(client, alice):
    login(client)
    response = client.post('/password', json={'current_password': 'bad', 'new_password': 'Password@2'})
    assert response.status_code == 401


def test_check_endpoint_is_dry_run(client, alice):
    login(client)
    assert client.post('/password/check', json={'password': 'Password@1'}).status_code == 422
    assert client.post('/password/check', json={'password': 'Password@2'}).status_code == 200
    assert len(db.session.get(User, alice.id).password_histories) == 1


def test_me_blocked_until_rotation(client, alice, clock):
    login(client)
    assert client.get('/auth/me').status_code == 200

    clock.advance(days=370)
    response = client.get('/auth/me')
    assert response.status_code == 403
    assert response.get_json()['error'] == 'password_expired'

    client.post('/password', json={'current_password': 'Password@1', 'new_password': 'Password@2'})
    assert client.get('/auth/me').status_code == 200


def test_federated_session_is_never_blocked(app, client):
    user, _ = account_service.create_account('gina', auth_mode=AuthMode.FEDERATED)
    with client.session_transaction() as session:
        session['user_id'] = user.id

    assert client.get('/auth/me').status_code == 200
    assert client.get('/password/status').get_json() == {'status': 'currently_valid', 'needs_update': False}


def test_session_for_deleted_user_is_cleared(app, client, alice):
    login(client)
    db.session.delete(db.session.get(User, alice.id))
    db.session.commit()
    assert client.get('/password/status').get_json()['error'] == 'session_invalid'
