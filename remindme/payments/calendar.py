from dataclasses import dataclass
from datetime import date, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..errors import TimezoneError

DEFAULT_TIMEZONE = "Europe/Athens"


@dataclass(frozen=True)
class Calendar:
    """The canonical calendar that all day arithmetic is anchored to.

    Built once at startup and passed to every component that needs to
    truncate timestamps to days, so nothing depends on the host's local
    timezone or on the time of day a run happens to execute.
    """

    tz: ZoneInfo

    @classmethod
    def from_name(cls, name: str = DEFAULT_TIMEZONE) -> "Calendar":
        """Load a named IANA timezone"""
        try:
            return cls(tz=ZoneInfo(name))
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise TimezoneError(f"error loading location {name!r}: {e}") from e

    @property
    def name(self) -> str:
        return self.tz.key

    def to_day(self, t: date | datetime) -> datetime:
        """Return midnight of the calendar day `t` falls on in this timezone

        Aware datetimes are converted first. Naive datetimes are read as wall
        clock time in this timezone and plain dates as that calendar day.
        """
        if isinstance(t, datetime):
            local = t.astimezone(self.tz) if t.tzinfo is not None else t
            day = local.date()
        else:
            day = t
        return datetime(day.year, day.month, day.day, tzinfo=self.tz)

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def today(self) -> datetime:
        return self.to_day(self.now())
