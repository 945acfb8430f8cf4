from .calendar import Calendar
from .classifier import count_pending_within, find_at, find_coming_up, find_until
from .ingest import HeaderIndex, ingest, ingest_monthly, ingest_sheet, month_of_interest
from .models import Payment
from .report import NOTHING_TO_REPORT, REPORT_TITLE, assemble, build_report


__all__ = [
    "NOTHING_TO_REPORT",
    "REPORT_TITLE",
    "Calendar",
    "HeaderIndex",
    "Payment",
    "assemble",
    "build_report",
    "count_pending_within",
    "find_at",
    "find_coming_up",
    "find_until",
    "ingest",
    "ingest_monthly",
    "ingest_sheet",
    "month_of_interest",
]
