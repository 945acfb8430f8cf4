"""RemindMe - A payment reminder.

This package reads pending payments from Google Sheets, sorts them by how soon
they are due and pushes a short report to an ntfy topic.
"""

__version__ = "0.1.0"

from .payments.calendar import Calendar
from .payments.models import Payment
from .runner import PaymentReporter
from .sheets.client import GoogleSheetsClient


__all__ = [
    "Calendar",
    "GoogleSheetsClient",
    "Payment",
    "PaymentReporter",
]
