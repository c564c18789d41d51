"""Supabase-backed user profile repository."""

from dataclasses import asdict, dataclass

from supabase import Client

from diet_tracker.domain.models import PROFILE_ID, UserProfile
from diet_tracker.services.users import UserRepository


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for the single profile row."""

    client: Client

    def get_profile(self) -> UserProfile | None:
        """Return the profile row, if present."""
        response = (
            self.client.table("user_profile")
            .select(
                "id, name, current_weight, goal_weight, height, age, gender, "
                "activity_level"
            )
            .eq("id", PROFILE_ID)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return UserProfile(
            id=int(row["id"]),
            name=str(row.get("name") or ""),
            current_weight=float(row.get("current_weight") or 0.0),
            goal_weight=float(row.get("goal_weight") or 0.0),
            height=float(row.get("height") or 0.0),
            age=int(row.get("age") or 0),
            gender=str(row.get("gender") or ""),
            activity_level=str(row.get("activity_level") or ""),
        )

    def upsert_profile(self, profile: UserProfile) -> None:
        """Insert or replace the profile row."""
        self.client.table("user_profile").upsert(
            {**asdict(profile), "id": PROFILE_ID}, on_conflict="id"
        ).execute()
