# policy_engine/services/strength_checker.py
"""Password complexity rules"""
from typing import FrozenSet, Optional

TOO_SHORT = 'too_short'
MISSING_LOWERCASE = 'missing_lowercase'
MISSING_UPPERCASE = 'missing_uppercase'
MISSING_DIGIT = 'missing_digit'
MISSING_SPECIAL = 'missing_special'

ALL_RULES = frozenset({TOO_SHORT, MISSING_LOWERCASE, MISSING_UPPERCASE, MISSING_DIGIT, MISSING_SPECIAL})


class StrengthChecker:
    """
    Evaluates a candidate against the complexity policy

    A password passes only when every rule passes. check() reports the
    set of violated rule ids; callers collapse any non-empty set into a
    single weak-password outcome.
    """

    def __init__(self, min_length: int = 8, special_characters: Optional[str] = None):
        self.min_length = min_length
        self.special_characters = frozenset(special_characters) if special_characters else None

    @classmethod
    def from_policy(cls, policy):
        return cls(policy.min_length, policy.special_characters)

    def _is_special(self, char: str) -> bool:
        if self.special_characters is None:
            return not char.isalnum()
        return char in self.special_characters

    def check(self, candidate: Optional[str]) -> FrozenSet[str]:
        """Return the ids of every violated rule (empty when the password is strong)"""
        candidate = candidate or ''
        violations = set()

        if len(candidate) < self.min_length:
            violations.add(TOO_SHORT)
        if not any(c.islower() for c in candidate):
            violations.add(MISSING_LOWERCASE)
        if not any(c.isupper() for c in candidate):
            violations.add(MISSING_UPPERCASE)
        if not any(c.isdigit() for c in candidate):
            violations.add(MISSING_DIGIT)
        if not any(self._is_special(c) for c in candidate):
            violations.add(MISSING_SPECIAL)

        return frozenset(violations)

    def is_strong(self, candidate: Optional[str]) -> bool:
        return not self.check(candidate)

    def requirements(self):
        """User-facing summary of the active rules"""
        special = ''.join(sorted(self.special_characters)) if self.special_characters else None
        return [
            f"At least {self.min_length} characters long",
            "Contains uppercase and lowercase letters",
            "Contains at least one number",
            f"Contains at least one special character ({special})" if special
            else "Contains at least one special character",
        ]
