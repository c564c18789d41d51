"""User profile business logic."""

from dataclasses import dataclass, fields, replace
from typing import Protocol

from diet_tracker.domain.models import UserProfile


class UserRepository(Protocol):
    """Persistence interface for the profile row."""

    def get_profile(self) -> UserProfile | None:
        """Return the stored profile, if any."""

    def upsert_profile(self, profile: UserProfile) -> None:
        """Insert or replace the profile row."""


_EDITABLE_FIELDS = frozenset(field.name for field in fields(UserProfile)) - {"id"}


@dataclass
class UserService:
    """Application service for the single user profile."""

    repository: UserRepository

    def get_profile(self) -> UserProfile:
        """Return the profile, or defaults when none is stored."""
        return self.repository.get_profile() or UserProfile()

    def ensure_profile(self) -> UserProfile:
        """Ensure the profile row exists and return it."""
        existing = self.repository.get_profile()
        if existing:
            return existing
        created = UserProfile()
        self.repository.upsert_profile(created)
        return created

    def update_profile(self, payload: dict[str, object]) -> UserProfile:
        """Apply the given fields to the profile and persist it."""
        changes = {
            key: value
            for key, value in payload.items()
            if key in _EDITABLE_FIELDS and value is not None
        }
        updated = replace(self.get_profile(), **changes)
        self.repository.upsert_profile(updated)
        return updated
