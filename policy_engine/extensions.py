# policy_engine/extensions.py
"""Flask extensions initialization"""
from flask import current_app
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

ENGINE_EXTENSION_KEY = 'password_policy'


def get_policy_engine():
    """The PasswordPolicyEngine bound to the current application"""
    return current_app.extensions[ENGINE_EXTENSION_KEY]
