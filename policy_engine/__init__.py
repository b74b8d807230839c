# policy_engine/__init__.py
"""Password policy engine - strength, reuse and rotation decisions"""
from policy_engine.config import PolicyConfig
from policy_engine.services.history_store import HistoryEntry, HistoryStore
from policy_engine.services.password_policy import (AuthMode, PasswordPolicyEngine, RotationStatus,
                                                     ValidationResult, Verdict)
from policy_engine.services.strength_checker import StrengthChecker

__version__ = "1.0.0"

__all__ = [
    'AuthMode', 'HistoryEntry', 'HistoryStore', 'PasswordPolicyEngine', 'PolicyConfig',
    'RotationStatus', 'StrengthChecker', 'ValidationResult', 'Verdict',
]
