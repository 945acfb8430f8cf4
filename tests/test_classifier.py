"""Tests for bucketing payments by day-delta."""

from datetime import date, datetime, timedelta

import pytest

from remindme.payments.classifier import (
    count_pending_within,
    find_at,
    find_coming_up,
    find_until,
)
from remindme.payments.ingest import ingest
from remindme.payments.models import Payment

TODAY = date(2023, 11, 5)


@pytest.fixture
def payments(calendar):
    """One payment per delta from -2 to 3, with unscheduled ones mixed in"""

    def due_in(description, days):
        return Payment(description).with_due_date(TODAY + timedelta(days=days), calendar)

    return [
        due_in("minus2", -2),
        Payment("monthly-a"),
        due_in("minus1", -1),
        due_in("zero", 0),
        due_in("plus1", 1),
        Payment("monthly-b"),
        due_in("plus2", 2),
        due_in("plus3", 3),
    ]


def descriptions(payments):
    return [p.description for p in payments]


def test_find_until_overdue(payments, calendar):
    assert descriptions(find_until(payments, -1, TODAY, calendar)) == ["minus2", "minus1"]


def test_find_at_today(payments, calendar):
    assert descriptions(find_at(payments, 0, TODAY, calendar)) == ["zero"]


def test_find_at_future(payments, calendar):
    assert descriptions(find_at(payments, 3, TODAY, calendar)) == ["plus3"]


def test_find_coming_up_window(payments, calendar):
    assert descriptions(find_coming_up(payments, 2, TODAY, calendar)) == ["plus1", "plus2"]


def test_count_pending_includes_overdue_and_today(payments, calendar):
    assert count_pending_within(payments, 2, TODAY, calendar) == 5
    assert count_pending_within(payments, 0, TODAY, calendar) == 3


@pytest.mark.parametrize(
    "now",
    [
        datetime(2023, 11, 5, 0, 0),
        datetime(2023, 11, 5, 23, 59),
        datetime(2020, 1, 1),
        datetime(2030, 12, 31),
    ],
)
def test_unscheduled_never_in_date_buckets(now, calendar):
    payments = [Payment("monthly-a"), Payment("monthly-b")]
    for max_diff in (-1000, -1, 0, 1, 1000):
        assert find_until(payments, max_diff, now, calendar) == []
        assert find_at(payments, max_diff, now, calendar) == []
        assert find_coming_up(payments, abs(max_diff), now, calendar) == []
    assert count_pending_within(payments, 1000, now, calendar) == 0


def test_same_day_gives_same_buckets(payments, calendar):
    morning = datetime(2023, 11, 5, 0, 1, tzinfo=calendar.tz)
    evening = datetime(2023, 11, 5, 23, 59, tzinfo=calendar.tz)
    assert find_until(payments, 0, morning, calendar) == find_until(payments, 0, evening, calendar)
    assert find_coming_up(payments, 2, morning, calendar) == find_coming_up(payments, 2, evening, calendar)


def test_results_keep_input_order(payments, calendar):
    shuffled = list(reversed(payments))
    assert descriptions(find_until(shuffled, 10, TODAY, calendar)) == [
        "plus3",
        "plus2",
        "plus1",
        "zero",
        "minus1",
        "minus2",
    ]


def test_ingested_sheet_scenario(make_rows, calendar):
    rows = make_rows(
        ["Description", "Due Date", "Payment Date"],
        ["foo", "2023-11-04", ""],
        ["bar", "2023-11-05", ""],
        ["baz", "2023-11-06", ""],
    )
    payments = ingest(rows, "Scheduled", calendar)
    assert descriptions(find_until(payments, 0, TODAY, calendar)) == ["foo", "bar"]
    assert descriptions(find_at(payments, 0, TODAY, calendar)) == ["bar"]
