# policy_engine/services/history_store.py
"""Bounded per-account password history

A history is an immutable tuple of HistoryEntry ordered oldest first.
append() is the only operation that produces a changed history, and it
returns a new tuple rather than touching its input.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Tuple

from policy_engine.utils.security import PasswordFingerprint


@dataclass(frozen=True)
class HistoryEntry:
    fingerprint: PasswordFingerprint
    created_at: datetime


History = Tuple[HistoryEntry, ...]


class HistoryStore:
    """Stores and looks up previously accepted password fingerprints"""

    def __init__(self, retention_limit: int = 3):
        if retention_limit < 1:
            raise ValueError('retention_limit must be positive')
        self.retention_limit = retention_limit

    @staticmethod
    def contains(history: History, matches: Callable[[PasswordFingerprint], bool]) -> bool:
        """
        True if any retained fingerprint satisfies ``matches``

        Salted fingerprints cannot be compared by value against a fresh
        digest, so the caller supplies the comparison (usually the
        fingerprinter's ``matches`` bound to the candidate).
        """
        return any(matches(entry.fingerprint) for entry in history)

    def append(self, history: History, fingerprint: PasswordFingerprint, now: datetime) -> History:
        """Add an entry stamped ``now``; evict the oldest ones beyond the retention limit"""
        updated = tuple(history) + (HistoryEntry(fingerprint, now),)
        if len(updated) > self.retention_limit:
            updated = updated[-self.retention_limit:]
        return updated

    @staticmethod
    def latest(history: History) -> Optional[HistoryEntry]:
        if not history:
            return None
        return max(history, key=lambda entry: entry.created_at)
