"""Daily meal log service."""

from dataclasses import dataclass, replace
from datetime import date
from typing import Protocol

from diet_tracker.domain.meals import DailyLog, MealStatus


class LogStore(Protocol):
    """Persistence interface for daily meal logs keyed by (meal, date)."""

    def get_log(self, meal_id: int, day: date) -> DailyLog | None:
        """Return the log for a meal on a date."""

    def upsert_log(self, log: DailyLog) -> None:
        """Insert the log, replacing any log for the same meal and date."""

    def insert_if_absent(self, log: DailyLog) -> None:
        """Insert the log unless one already exists for its meal and date."""

    def get_logs_for_date(self, day: date) -> list[DailyLog]:
        """Return all logs for a date."""

    def get_logs_in_range(self, start: date, end: date) -> list[DailyLog]:
        """Return logs between start and end inclusive."""

    def delete_all_logs(self) -> None:
        """Delete every log."""


@dataclass
class DailyLogService:
    """Service for recording meal statuses and manual entries."""

    store: LogStore

    def get_log(self, meal_id: int, day: date) -> DailyLog | None:
        """Return the log for a meal on a date."""
        return self.store.get_log(meal_id, day)

    def logs_for_date(self, day: date) -> list[DailyLog]:
        """Return all logs for a date."""
        return self.store.get_logs_for_date(day)

    def set_status(
        self,
        meal_id: int,
        day: date,
        status: MealStatus,
        notes: str | None = None,
    ) -> DailyLog:
        """Set a meal's status for a date, keeping any manual entry."""
        existing = self.store.get_log(meal_id, day)
        if existing is None:
            log = DailyLog(meal_id=meal_id, day=day, status=status, notes=notes or "")
        else:
            log = replace(
                existing,
                status=status,
                notes=existing.notes if notes is None else notes,
            )
        self.store.upsert_log(log)
        return log

    def save_manual_entry(  # noqa: PLR0913
        self,
        meal_id: int,
        day: date,
        calories: int | None,
        protein: int | None,
        carbs: int | None,
        fats: int | None,
    ) -> DailyLog:
        """Record user-entered macros; the meal becomes MODIFIED."""
        existing = self.store.get_log(meal_id, day)
        if existing is None:
            existing = DailyLog(meal_id=meal_id, day=day)
        log = replace(
            existing,
            status=MealStatus.MODIFIED,
            manual_calories=calories,
            manual_protein=protein,
            manual_carbs=carbs,
            manual_fats=fats,
            has_manual_entry=any(
                value is not None for value in (calories, protein, carbs, fats)
            ),
        )
        self.store.upsert_log(log)
        return log

    def clear_manual_entry(self, meal_id: int, day: date) -> DailyLog | None:
        """Drop manual macros so the catalog values apply again."""
        existing = self.store.get_log(meal_id, day)
        if existing is None:
            return None
        log = replace(
            existing,
            manual_calories=None,
            manual_protein=None,
            manual_carbs=None,
            manual_fats=None,
            has_manual_entry=False,
        )
        self.store.upsert_log(log)
        return log

    def reset(self) -> None:
        """Delete all logs."""
        self.store.delete_all_logs()
