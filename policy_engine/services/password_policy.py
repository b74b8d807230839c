# policy_engine/services/password_policy.py
"""Password policy engine
Decides whether a candidate password is acceptable and whether the
current password has aged past its validity period
"""
import enum
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, FrozenSet, Optional

from policy_engine.config import PolicyConfig
from policy_engine.services.history_store import History, HistoryStore
from policy_engine.services.strength_checker import StrengthChecker
from policy_engine.utils.security import Pbkdf2Fingerprinter
from policy_engine.utils.timeutils import add_months, utc_now

logger = logging.getLogger(__name__)


class AuthMode(str, enum.Enum):
    """How an account authenticates"""
    LOCAL_PASSWORD = 'local'
    FEDERATED = 'federated'  # external identity provider, no local secret


class Verdict(str, enum.Enum):
    ACCEPTED = 'accepted'
    REJECTED_WEAK = 'weak_password'
    REJECTED_REUSED = 'reused_password'


@dataclass(frozen=True)
class ValidationResult:
    verdict: Verdict
    reasons: FrozenSet[str] = frozenset()

    @classmethod
    def accepted(cls):
        return cls(Verdict.ACCEPTED)

    @classmethod
    def weak(cls, reasons):
        return cls(Verdict.REJECTED_WEAK, frozenset(reasons))

    @classmethod
    def reused(cls):
        return cls(Verdict.REJECTED_REUSED)

    @property
    def is_accepted(self) -> bool:
        return self.verdict is Verdict.ACCEPTED


class RotationStatus(str, enum.Enum):
    CURRENTLY_VALID = 'currently_valid'
    NEEDS_UPDATE = 'needs_update'
    # Account predates history tracking; treated as overdue
    MISSING_HISTORY = 'missing_history'

    @property
    def needs_update(self) -> bool:
        return self is not RotationStatus.CURRENTLY_VALID


class PasswordPolicyEngine:
    """
    Orchestrates the strength checker and the history store

    validate() and needs_rotation() are read-only. record_accepted() is
    the single path that produces a new history; call it only once the
    new password has been persisted.
    """

    def __init__(self, policy: Optional[PolicyConfig] = None, fingerprinter=None,
                 clock: Callable[[], datetime] = utc_now):
        self.policy = policy or PolicyConfig()
        self.fingerprinter = fingerprinter or Pbkdf2Fingerprinter()
        self.clock = clock
        self.strength_checker = StrengthChecker.from_policy(self.policy)
        self.history_store = HistoryStore(self.policy.retention_limit)

    def validate(self, candidate: Optional[str], history: History,
                 auth_mode: AuthMode = AuthMode.LOCAL_PASSWORD) -> ValidationResult:
        """Decide whether ``candidate`` may become the account's password"""
        if AuthMode(auth_mode) is AuthMode.FEDERATED:
            return ValidationResult.accepted()

        violations = self.strength_checker.check(candidate)
        if violations:
            logger.info('Candidate rejected as weak: %s', sorted(violations))
            return ValidationResult.weak(violations)

        if self.history_store.contains(
                history, lambda fingerprint: self.fingerprinter.matches(candidate, fingerprint)):
            logger.info('Candidate rejected as reused')
            return ValidationResult.reused()

        return ValidationResult.accepted()

    def needs_rotation(self, history: History, auth_mode: AuthMode = AuthMode.LOCAL_PASSWORD,
                       now: Optional[datetime] = None) -> RotationStatus:
        """Check whether the newest password is older than the validity period"""
        if AuthMode(auth_mode) is AuthMode.FEDERATED:
            return RotationStatus.CURRENTLY_VALID

        last = self.history_store.latest(history)
        if last is None:
            return RotationStatus.MISSING_HISTORY

        now = now or self.clock()
        # Reaching the period exactly is still valid; it must be exceeded
        if now > self.expires_at(last.created_at):
            return RotationStatus.NEEDS_UPDATE
        return RotationStatus.CURRENTLY_VALID

    def expires_at(self, accepted_at: datetime) -> datetime:
        return add_months(accepted_at, self.policy.validity_months)

    def record_accepted(self, candidate: str, history: History,
                        now: Optional[datetime] = None) -> History:
        """Fingerprint an accepted password and append it to the history"""
        fingerprint = self.fingerprinter.fingerprint(candidate)
        return self.history_store.append(history, fingerprint, now or self.clock())
