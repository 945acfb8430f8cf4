"""Bucketing of payments by how many days they are from today.

Every function skips payments without a due date and keeps the input order,
so report sections list payments in the order the sheets were read.
"""

from datetime import date, datetime
from typing import Iterable

from .calendar import Calendar
from .models import Payment


def _due(payments: Iterable[Payment]) -> Iterable[Payment]:
    return (p for p in payments if p.is_due())


def find_at(payments: Iterable[Payment], target_diff: int, now: date | datetime, calendar: Calendar) -> list[Payment]:
    """Payments due exactly `target_diff` days from `now`"""
    return [p for p in _due(payments) if p.diff_from_now_in_days(now, calendar) == target_diff]


def find_until(payments: Iterable[Payment], max_diff: int, now: date | datetime, calendar: Calendar) -> list[Payment]:
    """Payments due at most `max_diff` days from `now`; -1 gives the delayed ones"""
    return [p for p in _due(payments) if p.diff_from_now_in_days(now, calendar) <= max_diff]


def find_coming_up(
    payments: Iterable[Payment], window_days: int, now: date | datetime, calendar: Calendar
) -> list[Payment]:
    """Payments due from tomorrow up to `window_days` days ahead"""
    return [p for p in _due(payments) if 1 <= p.diff_from_now_in_days(now, calendar) <= window_days]


def count_pending_within(
    payments: Iterable[Payment], window_days: int, now: date | datetime, calendar: Calendar
) -> int:
    """Number of payments due within `window_days`, overdue and today included"""
    return len(find_until(payments, window_days, now, calendar))

