"""Domain models for the user profile and body weight."""

from dataclasses import dataclass
from datetime import date

PROFILE_ID = 1


@dataclass(frozen=True)
class UserProfile:
    """Singleton profile of the tracked user."""

    id: int = PROFILE_ID
    name: str = ""
    current_weight: float = 0.0
    goal_weight: float = 0.0
    height: float = 0.0
    age: int = 0
    gender: str = ""
    activity_level: str = ""


@dataclass(frozen=True)
class WeightEntry:
    """Body weight sample for a date."""

    id: int
    weight: float
    day: date
    notes: str = ""
