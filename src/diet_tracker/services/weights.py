"""Body weight tracking service."""

from dataclasses import dataclass
from datetime import date
from typing import Protocol

from diet_tracker.domain.models import WeightEntry
from diet_tracker.services.users import UserService


class WeightRepository(Protocol):
    """Persistence interface for weight entries."""

    def create_entry(self, weight: float, day: date, notes: str) -> WeightEntry:
        """Create a weight entry and return it."""

    def list_recent_entries(self, limit: int) -> list[WeightEntry]:
        """Return the newest entries first."""

    def list_entries_in_range(self, start: date, end: date) -> list[WeightEntry]:
        """Return entries between start and end inclusive, oldest first."""


@dataclass
class WeightService:
    """Service for recording and reading body weight."""

    repository: WeightRepository
    user_service: UserService

    def add_entry(self, weight: float, day: date, notes: str = "") -> WeightEntry:
        """Record a weight sample.

        The profile's current weight follows the entry unless an entry for a
        later date already exists. A missing profile is created on the way.
        """
        if weight <= 0:
            raise ValueError("Weight must be positive")
        latest = self.repository.list_recent_entries(1)
        entry = self.repository.create_entry(weight, day, notes)
        if not latest or day >= latest[0].day:
            self.user_service.update_profile({"current_weight": weight})
        return entry

    def list_recent(self, limit: int = 30) -> list[WeightEntry]:
        """Return recent weight entries, newest first."""
        return self.repository.list_recent_entries(limit)

    def entries_in_range(self, start: date, end: date) -> list[WeightEntry]:
        """Return weight entries for a date range, oldest first."""
        return self.repository.list_entries_in_range(start, end)
