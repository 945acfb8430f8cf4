"""
Shared fixtures for the remindme test suite.

Nothing here talks to Google or ntfy; the sheets service and the notifier
are mocks.
"""

from datetime import datetime
from unittest.mock import MagicMock

import pytest

from remindme.config import Settings
from remindme.payments.calendar import Calendar
from remindme.sheets.models import to_row


@pytest.fixture
def calendar():
    return Calendar.from_name("Europe/Athens")


@pytest.fixture
def now(calendar):
    """Mid-morning on 2023-11-05 in Athens"""
    return datetime(2023, 11, 5, 10, 0, tzinfo=calendar.tz)


@pytest.fixture
def make_rows():
    """Turn raw API style rows into typed rows"""

    def _make_rows(*raw_rows):
        return [to_row(list(row)) for row in raw_rows]

    return _make_rows


@pytest.fixture
def scheduled_rows():
    """Raw rows of a scheduled payments sheet as the Sheets API returns them"""
    return [
        ["Description", "Due Date", "Payment Date"],
        ["foo", "2023-11-04", ""],
        ["bar", "2023-11-05", ""],
        ["baz", "2023-11-06"],
        ["rent", "2023-11-07"],
        ["paid", "2023-11-05", "2023-11-01"],
        ["someday"],
    ]


@pytest.fixture
def monthly_rows():
    return [
        ["Description", "9", "10", "11"],
        ["internet", "x", "x"],
        ["phone", "x"],
        ["water", "x", "", "x"],
    ]


@pytest.fixture
def settings_data():
    return {
        "ntfy_topic": "payments",
        "credentials": '{"type": "service_account"}',
        "sheets": [
            {"spreadsheet_id": "sheet-1", "sheet_name": "Recurring", "kind": "monthly"},
            {"spreadsheet_id": "sheet-1", "sheet_name": "Scheduled", "kind": "scheduled"},
        ],
    }


@pytest.fixture
def settings(settings_data):
    return Settings.model_validate(settings_data)


@pytest.fixture
def mock_sheets_client(scheduled_rows, monthly_rows):
    """A sheets client serving the fixture rows by sheet name"""
    sheets = {"Scheduled": scheduled_rows, "Recurring": monthly_rows}
    client = MagicMock()
    client.get_rows.side_effect = lambda spreadsheet_id, sheet_name: [
        to_row(row) for row in sheets[sheet_name]
    ]
    return client


@pytest.fixture
def mock_notifier():
    return MagicMock()
