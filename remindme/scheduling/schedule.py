import logging
import re
import time
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)

INTERVAL_PATTERN = re.compile(r"^@every\s+(\d+)\s*([smhd])$")
INTERVAL_UNITS = {"s": "seconds", "m": "minutes", "h": "hours", "d": "days"}

# cron weekdays start on Sunday
CRON_FIELDS = [("minute", 0, 59), ("hour", 0, 23), ("day of month", 1, 31), ("month", 1, 12), ("day of week", 0, 6)]


def add_elapsed(dt: datetime, delta: timedelta) -> datetime:
    """Move `dt` by `delta` of real time, keeping its timezone

    Plain addition on an aware datetime moves the wall clock instead, which is
    off by the DST shift when the interval crosses a clock change.
    """
    if dt.tzinfo is None:
        return dt + delta
    return (dt.astimezone(timezone.utc) + delta).astimezone(dt.tzinfo)


class Schedule(Protocol):
    def next_run(self, after: datetime) -> datetime: ...


class CronField:
    """One field of a cron expression: *, values, ranges (1-5), lists (1,3,5) and steps (*/15)"""

    def __init__(self, expression: str, name: str, min_val: int, max_val: int) -> None:
        self.expression = expression
        self.name = name
        self.min_val = min_val
        self.max_val = max_val
        self.values = self._parse(expression)

    def _parse(self, expr: str) -> frozenset[int]:
        values: set[int] = set()
        try:
            for part in expr.split(","):
                step = 1
                if "/" in part:
                    part, step_str = part.split("/", 1)
                    step = int(step_str)
                    if step < 1:
                        raise ValueError("step must be positive")

                if part == "*":
                    start, end = self.min_val, self.max_val
                elif "-" in part:
                    start_str, end_str = part.split("-", 1)
                    start, end = int(start_str), int(end_str)
                else:
                    start = end = int(part)

                if not self.min_val <= start <= end <= self.max_val:
                    raise ValueError(f"{part!r} is outside {self.min_val}-{self.max_val}")
                values.update(range(start, end + 1, step))
        except ValueError as e:
            raise ValueError(f"Invalid cron {self.name} field {expr!r}: {e}") from e
        return frozenset(values)

    def matches(self, value: int) -> bool:
        return value in self.values

    def __repr__(self) -> str:
        return f"CronField({self.expression!r}, values={sorted(self.values)})"


class CronSchedule:
    """A five field cron expression (minute hour day-of-month month day-of-week)

    Times are matched as wall clock time of the datetime passed in, so callers
    pass datetimes in the timezone the schedule is meant for.
    """

    def __init__(self, expression: str) -> None:
        self.expression = expression.strip()
        parts = self.expression.split()
        if len(parts) != len(CRON_FIELDS):
            raise ValueError(
                f"Cron expression must have exactly 5 fields "
                f"(minute hour dom month dow), got {len(parts)}: {self.expression!r}"
            )
        self.minute, self.hour, self.day_of_month, self.month, self.day_of_week = (
            CronField(part, name, lo, hi) for part, (name, lo, hi) in zip(parts, CRON_FIELDS)
        )

    def matches(self, dt: datetime) -> bool:
        cron_weekday = (dt.weekday() + 1) % 7
        return (
            self.minute.matches(dt.minute)
            and self.hour.matches(dt.hour)
            and self.day_of_month.matches(dt.day)
            and self.month.matches(dt.month)
            and self.day_of_week.matches(cron_weekday)
        )

    def next_run(self, after: datetime) -> datetime:
        """First matching minute strictly after `after`, searching up to a year ahead"""
        candidate = add_elapsed(after.replace(second=0, microsecond=0), timedelta(minutes=1))
        for _ in range(366 * 24 * 60):
            # wall clock times skipped by DST never come up; repeated ones match the first time only
            if candidate.fold == 0 and self.matches(candidate):
                return candidate
            candidate = add_elapsed(candidate, timedelta(minutes=1))
        raise ValueError(f"No matching time found for cron expression {self.expression!r} within 366 days")

    def __repr__(self) -> str:
        return f"CronSchedule({self.expression!r})"


class IntervalSchedule:
    """Runs every fixed interval, e.g. `@every 6h`"""

    def __init__(self, interval: timedelta) -> None:
        if interval <= timedelta(0):
            raise ValueError("Interval must be positive")
        self.interval = interval

    def next_run(self, after: datetime) -> datetime:
        return add_elapsed(after, self.interval)

    def __repr__(self) -> str:
        return f"IntervalSchedule({self.interval})"


def parse_schedule(expression: str) -> Schedule:
    """Parse `@every <N><s|m|h|d>` or a five field cron expression"""
    match = INTERVAL_PATTERN.match(expression.strip())
    if match:
        amount, unit = match.groups()
        return IntervalSchedule(timedelta(**{INTERVAL_UNITS[unit]: int(amount)}))
    return CronSchedule(expression)


class Scheduler:
    """Runs a job on a schedule, one run at a time, until stopped"""

    def __init__(
        self,
        schedule: Schedule,
        job: Callable[[], object],
        clock: Callable[[], datetime],
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.schedule = schedule
        self.job = job
        self.clock = clock
        self.sleep = sleep

    def run(self, max_runs: Optional[int] = None) -> None:
        """Wait for each scheduled time and run the job

        A failing run is logged and the loop goes on to the next slot. Slots
        that pass while a run is still going are skipped.
        """
        runs = 0
        while max_runs is None or runs < max_runs:
            next_time = self.schedule.next_run(self.clock())
            logger.info(f"Next run at {next_time.isoformat()}")
            self._sleep_until(next_time)

            try:
                self.job()
            except Exception:
                logger.exception("Scheduled run failed")
            runs += 1

    def _sleep_until(self, when: datetime) -> None:
        while True:
            remaining = when.timestamp() - self.clock().timestamp()
            if remaining <= 0:
                return
            self.sleep(remaining)
