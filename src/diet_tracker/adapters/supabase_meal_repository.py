"""Supabase repository for the meal catalog."""

from dataclasses import dataclass
from datetime import time

from supabase import Client

from diet_tracker.domain.meals import Meal, MealComponent
from diet_tracker.services.meals import MealRepository

_MEAL_COLUMNS = (
    "id, name, time_of_day, protein, carbs, fats, calories, description, is_default"
)
_COMPONENT_COLUMNS = "id, meal_id, name, quantity, protein, carbs, fats, is_default"


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for meals and meal components."""

    client: Client

    def list_meals(self) -> list[Meal]:
        """Return all meals ordered by time of day."""
        response = (
            self.client.table("meals")
            .select(_MEAL_COLUMNS)
            .order("time_of_day", desc=False)
            .execute()
        )
        return [_parse_meal(row) for row in response.data or []]

    def get_meal(self, meal_id: int) -> Meal | None:
        """Return a meal by id."""
        response = (
            self.client.table("meals")
            .select(_MEAL_COLUMNS)
            .eq("id", meal_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_meal(response.data[0])

    def create_meal(self, payload: dict[str, object]) -> Meal:
        """Create a meal row and return it."""
        response = self.client.table("meals").insert(_meal_row(payload)).execute()
        if not response.data:
            raise RuntimeError("Failed to create meal")
        return _parse_meal(response.data[0])

    def update_meal(self, meal: Meal) -> None:
        """Update every editable column of a meal."""
        self.client.table("meals").update(
            _meal_row(
                {
                    "name": meal.name,
                    "time_of_day": meal.time_of_day,
                    "protein": meal.protein,
                    "carbs": meal.carbs,
                    "fats": meal.fats,
                    "calories": meal.calories,
                    "description": meal.description,
                    "is_default": meal.is_default,
                }
            )
        ).eq("id", meal.id).execute()

    def delete_meal(self, meal_id: int) -> None:
        """Delete a meal; components and logs cascade in the database."""
        self.client.table("meals").delete().eq("id", meal_id).execute()

    def list_components(self, meal_id: int) -> list[MealComponent]:
        """Return components for a meal."""
        response = (
            self.client.table("meal_components")
            .select(_COMPONENT_COLUMNS)
            .eq("meal_id", meal_id)
            .order("id", desc=False)
            .execute()
        )
        return [_parse_component(row) for row in response.data or []]

    def get_component(self, component_id: int) -> MealComponent | None:
        """Return a component by id."""
        response = (
            self.client.table("meal_components")
            .select(_COMPONENT_COLUMNS)
            .eq("id", component_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_component(response.data[0])

    def create_component(
        self, meal_id: int, payload: dict[str, object]
    ) -> MealComponent:
        """Create a component row and return it."""
        response = (
            self.client.table("meal_components")
            .insert({"meal_id": meal_id, **payload})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal component")
        return _parse_component(response.data[0])

    def update_component(self, component: MealComponent) -> None:
        """Update every editable column of a component."""
        self.client.table("meal_components").update(
            {
                "name": component.name,
                "quantity": component.quantity,
                "protein": component.protein,
                "carbs": component.carbs,
                "fats": component.fats,
                "is_default": component.is_default,
            }
        ).eq("id", component.id).execute()

    def delete_component(self, component_id: int) -> None:
        """Delete a component row."""
        self.client.table("meal_components").delete().eq("id", component_id).execute()


def _meal_row(payload: dict[str, object]) -> dict[str, object]:
    row = dict(payload)
    value = row.get("time_of_day")
    if isinstance(value, time):
        row["time_of_day"] = value.isoformat(timespec="minutes")
    return row


def _parse_meal(row: dict[str, object]) -> Meal:
    return Meal(
        id=int(row["id"]),
        name=str(row.get("name", "")),
        time_of_day=time.fromisoformat(str(row["time_of_day"])),
        protein=int(row.get("protein") or 0),
        carbs=int(row.get("carbs") or 0),
        fats=int(row.get("fats") or 0),
        calories=int(row.get("calories") or 0),
        description=str(row.get("description") or ""),
        is_default=bool(row.get("is_default", True)),
    )


def _parse_component(row: dict[str, object]) -> MealComponent:
    return MealComponent(
        id=int(row["id"]),
        meal_id=int(row["meal_id"]),
        name=str(row.get("name", "")),
        quantity=str(row.get("quantity") or ""),
        protein=int(row.get("protein") or 0),
        carbs=int(row.get("carbs") or 0),
        fats=int(row.get("fats") or 0),
        is_default=bool(row.get("is_default", True)),
    )
