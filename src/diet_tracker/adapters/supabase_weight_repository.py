"""Supabase repository for weight entries."""

from dataclasses import dataclass
from datetime import date

from supabase import Client

from diet_tracker.domain.models import WeightEntry
from diet_tracker.services.weights import WeightRepository


@dataclass
class SupabaseWeightRepository(WeightRepository):
    """Supabase implementation for weight entries."""

    client: Client

    def create_entry(self, weight: float, day: date, notes: str) -> WeightEntry:
        """Create a weight entry row and return it."""
        response = (
            self.client.table("weight_entries")
            .insert({"weight": weight, "date": day.isoformat(), "notes": notes})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create weight entry")
        return _parse_row(response.data[0])

    def list_recent_entries(self, limit: int) -> list[WeightEntry]:
        """Return the newest entries first."""
        response = (
            self.client.table("weight_entries")
            .select("id, weight, date, notes")
            .order("date", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def list_entries_in_range(self, start: date, end: date) -> list[WeightEntry]:
        """Return entries in the date range, oldest first then by id."""
        response = (
            self.client.table("weight_entries")
            .select("id, weight, date, notes")
            .gte("date", start.isoformat())
            .lte("date", end.isoformat())
            .order("date", desc=False)
            .order("id", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]


def _parse_row(row: dict[str, object]) -> WeightEntry:
    return WeightEntry(
        id=int(row["id"]),
        weight=float(row.get("weight", 0.0)),
        day=date.fromisoformat(str(row["date"])),
        notes=str(row.get("notes") or ""),
    )
