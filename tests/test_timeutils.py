"""Calendar month arithmetic"""
from datetime import datetime

import pytest

from policy_engine.utils.timeutils import add_months, utc_now


@pytest.mark.parametrize("start,months,expected", [
    (datetime(2025, 1, 15, 12, 0), 12, datetime(2026, 1, 15, 12, 0)),
    (datetime(2025, 1, 31), 1, datetime(2025, 2, 28)),
    (datetime(2024, 1, 31), 1, datetime(2024, 2, 29)),
    (datetime(2025, 11, 30), 3, datetime(2026, 2, 28)),
    (datetime(2025, 3, 31), -1, datetime(2025, 2, 28)),
])
def test_add_months(start, months, expected):
    assert add_months(start, months) == expected


def test_utc_now_is_naive():
    assert utc_now().tzinfo is None
