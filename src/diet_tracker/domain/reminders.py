"""Domain models for meal reminders."""

from dataclasses import dataclass
from datetime import date, time
from enum import StrEnum

# Larger than any date ordinal (date.max.toordinal() == 3_652_059).
_KEY_STRIDE = 10_000_000


@dataclass(frozen=True)
class ReminderPayload:
    """Data carried by an armed reminder trigger."""

    meal_id: int
    meal_name: str
    meal_time: time
    day: date


class ReminderOutcome(StrEnum):
    """What happened when a reminder trigger fired."""

    SHOWN = "SHOWN"
    SUPPRESSED = "SUPPRESSED"
    REJECTED = "REJECTED"


def reminder_key(meal_id: int, day: date) -> int:
    """Return the trigger key for a meal on a date."""
    return meal_id * _KEY_STRIDE + day.toordinal()
