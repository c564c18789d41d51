"""Supabase repository for daily meal logs."""

from dataclasses import dataclass
from datetime import date

from supabase import Client

from diet_tracker.domain.meals import DailyLog, MealStatus
from diet_tracker.services.logs import LogStore

_COLUMNS = (
    "meal_id, date, status, notes, manual_calories, manual_protein, "
    "manual_carbs, manual_fats, has_manual_entry"
)
_CONFLICT_KEY = "meal_id,date"


@dataclass
class SupabaseDailyLogRepository(LogStore):
    """Supabase implementation for daily logs, unique per (meal_id, date)."""

    client: Client

    def get_log(self, meal_id: int, day: date) -> DailyLog | None:
        """Return the log for a meal on a date."""
        response = (
            self.client.table("daily_logs")
            .select(_COLUMNS)
            .eq("meal_id", meal_id)
            .eq("date", day.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def upsert_log(self, log: DailyLog) -> None:
        """Insert or replace the log for its meal and date."""
        self.client.table("daily_logs").upsert(
            _to_row(log), on_conflict=_CONFLICT_KEY
        ).execute()

    def insert_if_absent(self, log: DailyLog) -> None:
        """Insert the log, leaving an existing row for the key untouched."""
        self.client.table("daily_logs").upsert(
            _to_row(log), on_conflict=_CONFLICT_KEY, ignore_duplicates=True
        ).execute()

    def get_logs_for_date(self, day: date) -> list[DailyLog]:
        """Return all logs for a date."""
        response = (
            self.client.table("daily_logs")
            .select(_COLUMNS)
            .eq("date", day.isoformat())
            .order("id", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def get_logs_in_range(self, start: date, end: date) -> list[DailyLog]:
        """Return logs between two dates inclusive."""
        response = (
            self.client.table("daily_logs")
            .select(_COLUMNS)
            .gte("date", start.isoformat())
            .lte("date", end.isoformat())
            .order("date", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def delete_all_logs(self) -> None:
        """Delete every log row."""
        self.client.table("daily_logs").delete().gte("id", 0).execute()


def _to_row(log: DailyLog) -> dict[str, object]:
    return {
        "meal_id": log.meal_id,
        "date": log.day.isoformat(),
        "status": log.status.value,
        "notes": log.notes,
        "manual_calories": log.manual_calories,
        "manual_protein": log.manual_protein,
        "manual_carbs": log.manual_carbs,
        "manual_fats": log.manual_fats,
        "has_manual_entry": log.has_manual_entry,
    }


def _parse_row(row: dict[str, object]) -> DailyLog:
    return DailyLog(
        meal_id=int(row["meal_id"]),
        day=date.fromisoformat(str(row["date"])),
        status=MealStatus(str(row.get("status") or MealStatus.PENDING.value)),
        notes=str(row.get("notes") or ""),
        manual_calories=_optional_int(row.get("manual_calories")),
        manual_protein=_optional_int(row.get("manual_protein")),
        manual_carbs=_optional_int(row.get("manual_carbs")),
        manual_fats=_optional_int(row.get("manual_fats")),
        has_manual_entry=bool(row.get("has_manual_entry", False)),
    )


def _optional_int(value: object) -> int | None:
    if isinstance(value, int | float):
        return int(value)
    return None
