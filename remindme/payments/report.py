from datetime import date, datetime
from typing import Iterable, Sequence

from .calendar import Calendar
from .classifier import count_pending_within, find_at, find_coming_up, find_until
from .models import Payment

REPORT_TITLE = "💸 💸 💸 Payment Report 💸 💸 💸"
NOTHING_TO_REPORT = "🕶  Nothing to report"
NOTHING_FOR_TODAY = "😎 Nothing for today"
NOTHING_COMING_UP = "🌴 Nothing coming up"

DEFAULT_WINDOW_DAYS = 2


def _join(payments: Iterable[Payment]) -> str:
    return ", ".join(p.description for p in payments)


def summarize_delayed(payments: Sequence[Payment], now: date | datetime, calendar: Calendar) -> str:
    delayed = find_until(payments, -1, now, calendar)
    if delayed:
        return f"⚠ Delayed: {_join(delayed)}"
    return ""


def summarize_today(
    payments: Sequence[Payment], now: date | datetime, calendar: Calendar, placeholders: bool = True
) -> str:
    today = find_at(payments, 0, now, calendar)
    if today:
        return f"💸 Today: {_join(today)}"
    return NOTHING_FOR_TODAY if placeholders else ""


def summarize_coming_up(
    payments: Sequence[Payment],
    window_days: int,
    now: date | datetime,
    calendar: Calendar,
    placeholders: bool = True,
) -> str:
    coming_up = find_coming_up(payments, window_days, now, calendar)
    if coming_up:
        descriptions = [f"{p.description} ({p.diff_from_now_in_days(now, calendar)}d)" for p in coming_up]
        return f"⏳ Coming Up: {', '.join(descriptions)}"
    return NOTHING_COMING_UP if placeholders else ""


def summarize_pending(payments: Sequence[Payment], window_days: int, now: date | datetime, calendar: Calendar) -> str:
    count = count_pending_within(payments, window_days, now, calendar)
    if count:
        return f"📌 Pending within {window_days}d: {count}"
    return ""


def summarize_monthly(monthly: Sequence[Payment]) -> str:
    """Count of recurring payments still open for the month"""
    if monthly:
        return f"🗓  Monthly: {len(monthly)} pending"
    return ""


def summarize_failed_sheets(failed_sheets: Sequence[str]) -> str:
    if failed_sheets:
        return f"❌ Could not read: {', '.join(failed_sheets)}"
    return ""


def assemble(sections: Iterable[str]) -> str:
    """Join the non-empty sections, one per line, or say there is nothing to report"""
    lines = [section for section in sections if section]
    if not lines:
        return NOTHING_TO_REPORT
    return "\n".join(lines)


def build_report(
    payments: Sequence[Payment],
    now: date | datetime,
    calendar: Calendar,
    window_days: int = DEFAULT_WINDOW_DAYS,
    placeholders: bool = True,
    failed_sheets: Sequence[str] = (),
    monthly: Sequence[Payment] = (),
) -> str:
    """Render the payment report for `now`

    Sections appear in a fixed order: delayed, today, coming up, total
    pending, monthly, and finally any sheets that could not be read.
    `monthly` holds the payments read from month-column sheets; they are
    only counted, never placed in a date bucket.
    """
    return assemble(
        [
            summarize_delayed(payments, now, calendar),
            summarize_today(payments, now, calendar, placeholders),
            summarize_coming_up(payments, window_days, now, calendar, placeholders),
            summarize_pending(payments, window_days, now, calendar),
            summarize_monthly(monthly),
            summarize_failed_sheets(failed_sheets),
        ]
    )
