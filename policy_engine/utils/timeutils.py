# policy_engine/utils/timeutils.py
"""Clock and calendar helpers

All timestamps are naive UTC datetimes, matching what the database columns store.
"""
import calendar
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current time as a naive UTC datetime"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def add_months(moment: datetime, months: int) -> datetime:
    """
    Shift a datetime by whole calendar months

    The day is clamped to the last day of the target month, so
    31 Jan + 1 month is 28/29 Feb.
    """
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)
