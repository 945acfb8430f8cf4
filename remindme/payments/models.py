from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional

from .calendar import Calendar


@dataclass(frozen=True)
class Payment:
    """A pending payment read from a sheet

    `due` is None for payments that are not date-scheduled, e.g. a
    recurring monthly obligation.
    """

    description: str
    due: Optional[datetime] = None

    def __post_init__(self):
        if not self.description:
            raise ValueError("Payment description cannot be empty")

    def with_due_date(self, due: date | datetime, calendar: Calendar) -> "Payment":
        """Return a copy due on the calendar day of `due`"""
        return replace(self, due=calendar.to_day(due))

    def is_due(self) -> bool:
        return self.due is not None

    def diff_from_now_in_days(self, now: date | datetime, calendar: Calendar) -> int:
        """Whole days from today until the due date, negative when overdue"""
        if self.due is None:
            raise ValueError(f"Payment {self.description!r} has no due date")
        # both sides are midnights, but an aware difference across a DST change is 23h or 25h
        return (calendar.to_day(self.due).date() - calendar.to_day(now).date()).days
