# habit_tracker/utils/core_utils.py
"""
Core utility functions that don't depend on config or models.
This module exists to break circular import dependencies.
"""

from datetime import date, datetime
from typing import Union
from dateutil import tz

from habit_tracker.utils.error_handler import InvalidDate

DATE_FORMAT = "%Y-%m-%d"


def now_local() -> datetime:
    """
    Return current time as a datetime aware of the local system timezone.
    """
    return datetime.now(tz.tzlocal())


def today_local() -> date:
    """
    Return today's calendar date in the local system timezone.
    """
    return now_local().date()


def parse_date(value: Union[str, date]) -> date:
    """
    Parse a YYYY-MM-DD string into a date.
    - date objects pass through unchanged (datetime is narrowed to its date).
    - Raises InvalidDate for anything else.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidDate(value)
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError:
        raise InvalidDate(value)


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)
