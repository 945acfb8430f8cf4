import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from types import MappingProxyType
from typing import Mapping, Optional

from ..errors import DateParseError, MissingColumnError, NoDataError, RowShapeError
from ..sheets.models import Row, SheetKind, cell_text, is_blank
from .calendar import Calendar
from .models import Payment

logger = logging.getLogger(__name__)

DESCRIPTION = "Description"
DUE_DATE = "Due Date"
PAYMENT_DATE = "Payment Date"

# zero padded YYYY-MM-DD only
DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


@dataclass(frozen=True)
class HeaderIndex:
    """Column positions of a sheet, resolved once from its header row"""

    sheet: str
    columns: Mapping[str, int]

    @classmethod
    def from_row(cls, header: Row, sheet: str) -> "HeaderIndex":
        # a repeated header resolves to its last occurrence
        columns = {cell_text(cell, sheet): idx for idx, cell in enumerate(header)}
        columns.pop("", None)
        return cls(sheet=sheet, columns=MappingProxyType(columns))

    def find(self, label: str) -> Optional[int]:
        return self.columns.get(label)

    def require(self, label: str) -> int:
        idx = self.find(label)
        if idx is None:
            raise MissingColumnError(label, self.sheet)
        return idx


def _optional_text(row: Row, idx: Optional[int], sheet: str) -> str:
    """Text of an optional column, "" when the API trimmed it off the row"""
    if idx is None or idx >= len(row):
        return ""
    return cell_text(row[idx], sheet)


def _required_text(row: Row, idx: int, row_index: int, label: str, sheet: str) -> str:
    if idx >= len(row):
        raise RowShapeError(sheet, row_index, label)
    return cell_text(row[idx], sheet)


def parse_due_date(value: str, sheet: str) -> date:
    text = value.strip()
    if not DATE_PATTERN.fullmatch(text):
        raise DateParseError(sheet, value)
    try:
        return date.fromisoformat(text)
    except ValueError as e:
        raise DateParseError(sheet, value) from e


def ingest(
    rows: list[Row], sheet_name: str, calendar: Calendar, track_settlement: bool = True
) -> list[Payment]:
    """Read pending payments from a sheet with Description/Due Date/Payment Date columns

    Settled rows (non-empty Payment Date) are dropped. Rows without a due date,
    or sheets without a Due Date column, yield payments that are not
    date-scheduled.
    """
    if len(rows) <= 1:
        raise NoDataError(sheet_name)
    header = HeaderIndex.from_row(rows[0], sheet_name)
    description_idx = header.require(DESCRIPTION)
    payment_date_idx = header.require(PAYMENT_DATE) if track_settlement else header.find(PAYMENT_DATE)
    due_date_idx = header.find(DUE_DATE)

    payments = []
    for row_index, row in enumerate(rows[1:], start=1):
        if is_blank(row):
            continue

        description = _required_text(row, description_idx, row_index, DESCRIPTION, sheet_name)
        if _optional_text(row, payment_date_idx, sheet_name) != "":
            continue
        if not description:
            logger.warning(f"[{sheet_name}] skipping row {row_index + 1} with no description")
            continue

        payment = Payment(description)
        due_date = _optional_text(row, due_date_idx, sheet_name)
        if due_date != "":
            payment = payment.with_due_date(parse_due_date(due_date, sheet_name), calendar)
        payments.append(payment)

    return payments


def month_of_interest(today: date, offset: int = -1) -> int:
    """Calendar month (1-12) `offset` months away from `today`"""
    return (today.month - 1 + offset) % 12 + 1


def ingest_monthly(rows: list[Row], sheet_name: str, month: int) -> list[Payment]:
    """Read recurring payments still pending for `month`

    The sheet has one column per month, headed "1" to "12". A non-empty cell
    in the month's column marks the payment as paid for that month.
    """
    if len(rows) <= 1:
        raise NoDataError(sheet_name)
    header = HeaderIndex.from_row(rows[0], sheet_name)
    description_idx = header.require(DESCRIPTION)
    month_idx = header.require(str(month))

    payments = []
    for row_index, row in enumerate(rows[1:], start=1):
        if is_blank(row):
            continue

        description = _required_text(row, description_idx, row_index, DESCRIPTION, sheet_name)
        # a row that ends before the month column has nothing recorded for it
        if _optional_text(row, month_idx, sheet_name) != "":
            continue
        if not description:
            logger.warning(f"[{sheet_name}] skipping row {row_index + 1} with no description")
            continue
        payments.append(Payment(description))

    return payments


def ingest_sheet(rows: list[Row], descriptor, calendar: Calendar, today: datetime) -> list[Payment]:
    """Read a fetched sheet the way its descriptor's kind asks for"""
    if descriptor.kind == SheetKind.MONTHLY:
        month = month_of_interest(calendar.to_day(today), descriptor.month_offset)
        return ingest_monthly(rows, descriptor.sheet_name, month)
    return ingest(
        rows,
        descriptor.sheet_name,
        calendar,
        track_settlement=descriptor.kind == SheetKind.SCHEDULED,
    )
