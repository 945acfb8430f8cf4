"""Tests for the report run across several sheets."""

import pytest

from remindme.errors import MissingColumnError, NoDataError, NotificationError
from remindme.payments.report import REPORT_TITLE
from remindme.runner import PaymentReporter
from remindme.sheets.client import SheetError


@pytest.fixture
def reporter(settings, mock_sheets_client, mock_notifier, calendar):
    return PaymentReporter(
        settings=settings,
        sheets_client=mock_sheets_client,
        notifier=mock_notifier,
        calendar=calendar,
    )


EXPECTED_REPORT = "\n".join(
    [
        "⚠ Delayed: foo",
        "💸 Today: bar",
        "⏳ Coming Up: baz (1d), rent (2d)",
        "📌 Pending within 2d: 4",
        "🗓  Monthly: 2 pending",
    ]
)


def test_collect_payments_in_sheet_order(reporter, now):
    collected = reporter.collect_payments(now)
    assert [p.description for p in collected.monthly] == ["phone", "water"]
    assert [p.description for p in collected.payments] == ["foo", "bar", "baz", "rent", "someday"]
    assert collected.failed_sheets == []


def test_run_sends_report(reporter, mock_notifier, now):
    report = reporter.run(now)
    assert report == EXPECTED_REPORT
    mock_notifier.send.assert_called_once_with("payments", REPORT_TITLE, EXPECTED_REPORT)


def test_run_echo_prints_report(reporter, now, capsys):
    reporter.run(now, echo=True)
    assert capsys.readouterr().out == EXPECTED_REPORT + "\n"


def test_abort_on_first_failing_sheet(reporter, mock_sheets_client, mock_notifier, now):
    mock_sheets_client.get_rows.side_effect = NoDataError("Recurring")

    with pytest.raises(NoDataError):
        reporter.run(now)

    assert mock_sheets_client.get_rows.call_count == 1
    (topic, title, body), _ = mock_notifier.send.call_args
    assert body == "❌ Payment report failed: [Recurring] no data found"


def test_skip_failing_sheet(settings, mock_sheets_client, mock_notifier, calendar, make_rows, scheduled_rows, now):
    settings.on_sheet_error = "skip"

    def get_rows(spreadsheet_id, sheet_name):
        if sheet_name == "Recurring":
            raise SheetError("403 forbidden")
        return make_rows(*scheduled_rows)

    mock_sheets_client.get_rows.side_effect = get_rows
    reporter = PaymentReporter(settings, mock_sheets_client, mock_notifier, calendar)

    report = reporter.run(now)
    assert report.split("\n")[-2:] == ["📌 Pending within 2d: 4", "❌ Could not read: Recurring"]
    assert "Monthly" not in report


def test_ingestion_error_aborts_run(reporter, mock_sheets_client, make_rows, now):
    mock_sheets_client.get_rows.side_effect = lambda spreadsheet_id, sheet_name: make_rows(["Notes"], ["x"])
    with pytest.raises(MissingColumnError):
        reporter.run(now)


def test_error_notification_failure_keeps_original_error(reporter, mock_sheets_client, mock_notifier, now):
    mock_sheets_client.get_rows.side_effect = NoDataError("Recurring")
    mock_notifier.send.side_effect = NotificationError("server responded with status=500")
    with pytest.raises(NoDataError):
        reporter.run(now)


def test_notification_failure_is_raised(reporter, mock_notifier, now):
    mock_notifier.send.side_effect = NotificationError("server responded with status=500")
    with pytest.raises(NotificationError):
        reporter.run(now)
    assert mock_notifier.send.call_count == 1


def test_monthly_line_counts_only_monthly_sheets(
    settings, mock_sheets_client, mock_notifier, calendar, make_rows, now
):
    sheets = {
        "Scheduled": [["Description", "Due Date", "Payment Date"], ["insurance", ""], ["gift"]],
        "Recurring": [["Description", "10"], ["internet", "x"]],
    }
    mock_sheets_client.get_rows.side_effect = lambda spreadsheet_id, sheet_name: make_rows(*sheets[sheet_name])
    reporter = PaymentReporter(settings, mock_sheets_client, mock_notifier, calendar)

    collected = reporter.collect_payments(now)
    assert [p.description for p in collected.payments] == ["insurance", "gift"]
    assert collected.monthly == []
    assert reporter.build_report(now) == "😎 Nothing for today\n🌴 Nothing coming up"
