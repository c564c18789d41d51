"""Clock and calendar helpers shared by scheduling and statistics."""

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Protocol
from zoneinfo import ZoneInfo

ONE_DAY = timedelta(days=1)
NOON = 12


class Clock(Protocol):
    """Source of the current, timezone-aware time."""

    def now(self) -> datetime:
        """Return the current time."""


@dataclass(frozen=True)
class SystemClock:
    """Wall clock in a fixed IANA timezone."""

    timezone: ZoneInfo

    @classmethod
    def for_timezone(cls, name: str) -> "SystemClock":
        """Create a clock for a timezone name such as Europe/Berlin."""
        return cls(timezone=ZoneInfo(name))

    def now(self) -> datetime:
        """Return the current time in the configured timezone."""
        return datetime.now(tz=self.timezone)


def today(clock: Clock) -> date:
    """Return the clock's current calendar date."""
    return clock.now().date()


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every date from start to end inclusive."""
    current = start
    while current <= end:
        yield current
        current += ONE_DAY


def to_epoch_millis(moment: datetime) -> int:
    """Convert an aware datetime to epoch milliseconds."""
    return int(moment.timestamp() * 1000)


def format_meal_time(value: time) -> str:
    """Format a time of day as h:mm AM/PM."""
    suffix = "AM" if value.hour < NOON else "PM"
    hour = value.hour % NOON or NOON
    return f"{hour}:{value.minute:02d} {suffix}"
