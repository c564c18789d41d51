"""Meal catalog service."""

import logging
from dataclasses import dataclass, replace
from typing import Protocol

from diet_tracker.domain.meals import DEFAULT_MEAL_PLAN, Meal, MealComponent

logger = logging.getLogger(__name__)


class MealRepository(Protocol):
    """Persistence interface for meals and their components."""

    def list_meals(self) -> list[Meal]:
        """Return all meals ordered by time of day."""

    def get_meal(self, meal_id: int) -> Meal | None:
        """Return a meal by id."""

    def create_meal(self, payload: dict[str, object]) -> Meal:
        """Create a meal and return it."""

    def update_meal(self, meal: Meal) -> None:
        """Persist all fields of an existing meal."""

    def delete_meal(self, meal_id: int) -> None:
        """Delete a meal together with its components and logs."""

    def list_components(self, meal_id: int) -> list[MealComponent]:
        """Return the components of a meal."""

    def get_component(self, component_id: int) -> MealComponent | None:
        """Return a component by id."""

    def create_component(
        self, meal_id: int, payload: dict[str, object]
    ) -> MealComponent:
        """Create a component for a meal and return it."""

    def update_component(self, component: MealComponent) -> None:
        """Persist all fields of an existing component."""

    def delete_component(self, component_id: int) -> None:
        """Delete a component."""


_MEAL_FIELDS = (
    "name",
    "time_of_day",
    "protein",
    "carbs",
    "fats",
    "calories",
    "description",
)
_COMPONENT_FIELDS = ("name", "quantity", "protein", "carbs", "fats")


@dataclass
class MealCatalogService:
    """Service for reading and editing the meal plan."""

    repository: MealRepository

    def get_all_meals(self) -> list[Meal]:
        """Return the catalog ordered by time of day."""
        return sorted(self.repository.list_meals(), key=lambda meal: meal.time_of_day)

    def get_meal(self, meal_id: int) -> Meal | None:
        """Return a meal by id."""
        return self.repository.get_meal(meal_id)

    def create_meal(self, payload: dict[str, object]) -> Meal:
        """Add a user-defined meal to the plan."""
        values = {key: payload[key] for key in _MEAL_FIELDS if key in payload}
        values["is_default"] = False
        meal = self.repository.create_meal(values)
        logger.info("Created meal %s (%s)", meal.id, meal.name)
        return meal

    def update_meal(self, meal_id: int, payload: dict[str, object]) -> Meal | None:
        """Update the editable fields of a meal."""
        meal = self.repository.get_meal(meal_id)
        if meal is None:
            return None
        changes = {
            key: payload[key]
            for key in _MEAL_FIELDS
            if key in payload and payload[key] is not None
        }
        updated = replace(meal, **changes)
        self.repository.update_meal(updated)
        return updated

    def delete_meal(self, meal_id: int) -> bool:
        """Delete a meal; return False when it does not exist."""
        if self.repository.get_meal(meal_id) is None:
            return False
        self.repository.delete_meal(meal_id)
        logger.info("Deleted meal %s", meal_id)
        return True

    def list_components(self, meal_id: int) -> list[MealComponent]:
        """Return the components of a meal."""
        return self.repository.list_components(meal_id)

    def add_component(
        self, meal_id: int, payload: dict[str, object]
    ) -> MealComponent | None:
        """Add a component and refresh the meal's macro totals."""
        if self.repository.get_meal(meal_id) is None:
            return None
        values = {key: payload[key] for key in _COMPONENT_FIELDS if key in payload}
        values["is_default"] = False
        component = self.repository.create_component(meal_id, values)
        self.recompute_totals(meal_id)
        return component

    def update_component(
        self, component_id: int, payload: dict[str, object]
    ) -> MealComponent | None:
        """Update a component and refresh the meal's macro totals."""
        component = self.repository.get_component(component_id)
        if component is None:
            return None
        changes = {
            key: payload[key]
            for key in _COMPONENT_FIELDS
            if key in payload and payload[key] is not None
        }
        updated = replace(component, **changes, is_default=False)
        self.repository.update_component(updated)
        self.recompute_totals(component.meal_id)
        return updated

    def remove_component(self, component_id: int) -> bool:
        """Remove a component and refresh the meal's macro totals."""
        component = self.repository.get_component(component_id)
        if component is None:
            return False
        self.repository.delete_component(component_id)
        self.recompute_totals(component.meal_id)
        return True

    def recompute_totals(self, meal_id: int) -> Meal | None:
        """Store the sum of component macros on the meal.

        Calories are not tracked per component and are left as entered. A meal
        without components keeps its stored totals.
        """
        meal = self.repository.get_meal(meal_id)
        if meal is None:
            return None
        components = self.repository.list_components(meal_id)
        if not components:
            return meal
        updated = replace(
            meal,
            protein=sum(component.protein for component in components),
            carbs=sum(component.carbs for component in components),
            fats=sum(component.fats for component in components),
        )
        if updated != meal:
            self.repository.update_meal(updated)
        return updated

    def seed_default_plan(self) -> int:
        """Insert the default plan when the catalog is empty."""
        if self.repository.list_meals():
            return 0
        for entry in DEFAULT_MEAL_PLAN:
            values = {key: entry[key] for key in _MEAL_FIELDS}
            values["is_default"] = True
            meal = self.repository.create_meal(values)
            components = entry.get("components")
            for component in components if isinstance(components, list) else []:
                self.repository.create_component(
                    meal.id, {**component, "is_default": True}
                )
        logger.info("Seeded default meal plan with %d meals", len(DEFAULT_MEAL_PLAN))
        return len(DEFAULT_MEAL_PLAN)
