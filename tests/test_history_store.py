"""Bounded password history"""
from datetime import datetime, timedelta

import pytest

from policy_engine.services.history_store import HistoryEntry, HistoryStore
from policy_engine.utils.security import PasswordFingerprint

T0 = datetime(2025, 3, 1, 9, 0, 0)


def fp(name):
    return PasswordFingerprint('test', 'salt', name)


def build(store, names):
    history = ()
    for offset, name in enumerate(names):
        history = store.append(history, fp(name), T0 + timedelta(days=offset))
    return history


def test_append_returns_new_tuple_and_leaves_input_untouched():
    store = HistoryStore(3)
    original = build(store, ['p1'])
    updated = store.append(original, fp('p2'), T0 + timedelta(days=1))

    assert len(original) == 1
    assert [e.fingerprint.digest for e in updated] == ['p1', 'p2']


def test_retention_keeps_newest_three_fifo():
    store = HistoryStore(3)
    history = build(store, ['p1', 'p2', 'p3', 'p4', 'p5'])

    assert len(history) == 3
    assert [e.fingerprint.digest for e in history] == ['p3', 'p4', 'p5']


def test_contains_uses_predicate():
    store = HistoryStore(3)
    history = build(store, ['p1', 'p2'])

    assert store.contains(history, lambda f: f.digest == 'p2')
    assert not store.contains(history, lambda f: f.digest == 'p9')
    assert not store.contains((), lambda f: True)


def test_evicted_entries_cannot_match():
    store = HistoryStore(3)
    history = build(store, ['p1', 'p2', 'p3', 'p4'])
    assert not store.contains(history, lambda f: f.digest == 'p1')


def test_latest_returns_greatest_created_at():
    store = HistoryStore(3)
    history = build(store, ['p1', 'p2'])
    assert store.latest(history).fingerprint.digest == 'p2'
    assert store.latest(()) is None


def test_latest_ignores_tuple_order():
    older = HistoryEntry(fp('old'), T0)
    newer = HistoryEntry(fp('new'), T0 + timedelta(hours=1))
    assert HistoryStore.latest((newer, older)) is newer


def test_entries_are_immutable():
    entry = HistoryEntry(fp('p1'), T0)
    with pytest.raises(AttributeError):
        entry.created_at = T0 + timedelta(days=1)


def test_retention_limit_must_be_positive():
    with pytest.raises(ValueError):
        HistoryStore(0)
