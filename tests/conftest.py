"""Shared fixtures for the password policy engine tests"""
from datetime import datetime, timedelta

import pytest

from policy_engine.app import create_app
from policy_engine.extensions import db


class FakeClock:
    """Injectable clock that only moves when told to"""

    def __init__(self, start=datetime(2025, 1, 15, 12, 0, 0)):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def app(clock):
    app = create_app('testing', clock=clock)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def engine(app):
    return app.extensions['password_policy']
