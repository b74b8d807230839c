# policy_engine/services/account_service.py
"""Account-side caller of the policy engine
Loads history from the database, applies engine decisions and persists
accepted passwords together with their history entries
"""
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from policy_engine.exceptions import (AccountExists, AccountNotFound, HistoryPersistenceError,
                                      InvalidCredentials)
from policy_engine.extensions import db, get_policy_engine
from policy_engine.models.password_history import PasswordHistory
from policy_engine.models.user import User
from policy_engine.services.history_store import HistoryEntry
from policy_engine.services.password_policy import AuthMode


def _commit(action):
    try:
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception('Failed to %s', action)
        raise HistoryPersistenceError(f'Could not {action}') from exc


def _get_user(user_id, for_update=False):
    user = db.session.get(User, user_id, with_for_update=True if for_update else None)
    if user is None:
        raise AccountNotFound(f'No account with id {user_id}')
    return user


def create_account(username, password=None, auth_mode=AuthMode.LOCAL_PASSWORD):
    """
    Create an account and record its first password

    Federated accounts carry no local password and no history.

    Returns:
        Tuple of (user or None, ValidationResult)
    """
    auth_mode = AuthMode(auth_mode)
    engine = get_policy_engine()
    if User.query.filter_by(username=username).first() is not None:
        raise AccountExists(f"Username {username} is already taken")

    result = engine.validate(password, (), auth_mode)
    if not result.is_accepted:
        return None, result

    user = User(username=username, auth_mode=auth_mode.value)
    db.session.add(user)
    if auth_mode is AuthMode.LOCAL_PASSWORD:
        _store_password(user, engine, password, ())

    _commit('create account')
    current_app.logger.info(f'Created {auth_mode.value} account: {user.id} - {user.username}')
    return user, result


def _reuse_window(user):
    """
    History the reuse check runs against

    Accounts created before history was recorded still have a current
    credential; it stands in for the missing history so it cannot be reused.
    """
    history = user.history()
    if not history and user.fingerprint is not None:
        return (HistoryEntry(user.fingerprint, user.created_at),)
    return history


def _store_password(user, engine, password, history):
    """Point the account at a new password and sync history rows with the engine's view"""
    updated = engine.record_accepted(password, history)
    newest = updated[-1]
    user.set_fingerprint(newest.fingerprint)

    retained = {entry.fingerprint for entry in updated}
    for row in list(user.password_histories):
        if row.fingerprint not in retained:
            user.password_histories.remove(row)
    user.password_histories.append(PasswordHistory.from_entry(user.id, newest))
    return updated


def change_password(user_id, current_password, new_password):
    """
    Replace the password of a local account

    The user row is locked for the duration of the transaction so two
    concurrent changes cannot both pass the reuse check.

    Returns:
        ValidationResult for the new password
    """
    engine = get_policy_engine()
    user = _get_user(user_id, for_update=True)

    if user.is_federated:
        raise InvalidCredentials('Federated accounts have no local password')
    if user.fingerprint is None or not engine.fingerprinter.matches(current_password, user.fingerprint):
        raise InvalidCredentials('Current password is incorrect')

    history = user.history()
    result = engine.validate(new_password, _reuse_window(user), user.mode)
    if not result.is_accepted:
        current_app.logger.info(
            f'Password change rejected for user {user.id}: {result.verdict.value} {sorted(result.reasons)}'
        )
        db.session.rollback()  # release the row lock
        return result

    _store_password(user, engine, new_password, history)
    _commit('record password change')
    current_app.logger.info(f'Password changed for user {user.id}')
    return result


def check_candidate(user_id, candidate):
    """Dry-run validation of a candidate against the account's history"""
    user = _get_user(user_id)
    return get_policy_engine().validate(candidate, _reuse_window(user), user.mode)


def rotation_status(user_id):
    user = _get_user(user_id)
    return get_policy_engine().needs_rotation(user.history(), user.mode)


def authenticate(username, password):
    """Return the active local account matching the credentials"""
    user = User.query.filter_by(username=username).first()
    if user is None or not user.is_active or user.fingerprint is None:
        raise InvalidCredentials('Invalid credentials')
    if not get_policy_engine().fingerprinter.matches(password, user.fingerprint):
        raise InvalidCredentials('Invalid credentials')
    return user


def accounts_needing_rotation():
    """Active accounts whose password is overdue, with their status"""
    engine = get_policy_engine()
    overdue = []
    for user in User.query.filter_by(is_active=True).order_by(User.username).all():
        status = engine.needs_rotation(user.history(), user.mode)
        if status.needs_update:
            overdue.append((user, status))
    return overdue
