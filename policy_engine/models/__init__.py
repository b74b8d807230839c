# policy_engine/models/__init__.py
"""Database models for the password policy engine"""
from .user import User
from .password_history import PasswordHistory

__all__ = ['User', 'PasswordHistory']
