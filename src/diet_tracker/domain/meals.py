"""Domain models for the meal plan and its daily logs."""

from dataclasses import dataclass
from datetime import date, time
from enum import StrEnum


class MealStatus(StrEnum):
    """Resolution status of a meal on a given date."""

    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    SKIPPED = "SKIPPED"
    MODIFIED = "MODIFIED"


EATEN_STATUSES = frozenset({MealStatus.COMPLETED, MealStatus.MODIFIED})


@dataclass(frozen=True)
class Meal:
    """Catalog entry for a planned meal."""

    id: int
    name: str
    time_of_day: time
    protein: int
    carbs: int
    fats: int
    calories: int
    description: str = ""
    is_default: bool = True


@dataclass(frozen=True)
class MealComponent:
    """Single food item that makes up a meal."""

    id: int
    meal_id: int
    name: str
    quantity: str
    protein: int
    carbs: int
    fats: int
    is_default: bool = True


@dataclass(frozen=True)
class DailyLog:
    """Status of one meal on one date, with optional manual macros."""

    meal_id: int
    day: date
    status: MealStatus = MealStatus.PENDING
    notes: str = ""
    manual_calories: int | None = None
    manual_protein: int | None = None
    manual_carbs: int | None = None
    manual_fats: int | None = None
    has_manual_entry: bool = False

    @property
    def is_eaten(self) -> bool:
        """Return True when the meal counts as consumed."""
        return self.status in EATEN_STATUSES


def _component(
    name: str, quantity: str, protein: int, carbs: int, fats: int
) -> dict[str, object]:
    return {
        "name": name,
        "quantity": quantity,
        "protein": protein,
        "carbs": carbs,
        "fats": fats,
    }


DEFAULT_MEAL_PLAN: list[dict[str, object]] = [
    {
        "name": "Lunch Block",
        "time_of_day": time(13, 0),
        "protein": 54,
        "carbs": 100,
        "fats": 20,
        "calories": 700,
        "description": "Main lunch meal with balanced macros",
        "components": [
            _component("Cooked white rice", "150g", 0, 100, 0),
            _component("Dal (cooked lentils)", "1 cup (200ml)", 12, 0, 6),
            _component(
                "Mixed veggies with sarso oil", "100g veggies + 1 tbsp oil", 0, 0, 14
            ),
            _component("Lassi", "200ml", 15, 0, 0),
            _component("Whey protein", "1 scoop in water", 27, 0, 0),
        ],
    },
    {
        "name": "Afternoon Snack",
        "time_of_day": time(16, 0),
        "protein": 15,
        "carbs": 70,
        "fats": 10,
        "calories": 350,
        "description": "Afternoon energy boost",
        "components": [
            _component("Oats (water-cooked)", "50g", 5, 30, 0),
            _component("Small banana", "1 banana", 0, 25, 0),
            _component("Peanut butter", "1 tbsp", 4, 0, 8),
            _component("Medjool dates", "3 dates", 0, 15, 0),
        ],
    },
    {
        "name": "Pre/Post Workout",
        "time_of_day": time(18, 15),
        "protein": 27,
        "carbs": 70,
        "fats": 1,
        "calories": 300,
        "description": "Pre: 6:15 PM, Post: 9:15 PM",
        "components": [
            _component(
                "Pre: Banana + dates + creatine + caffeine",
                "1 banana + 3 dates + 5g creatine + 200mg caffeine",
                0,
                40,
                0,
            ),
            _component(
                "Post: Whey protein + boiled potato",
                "1 scoop whey + 150g potato",
                27,
                30,
                1,
            ),
        ],
    },
    {
        "name": "Dinner",
        "time_of_day": time(22, 30),
        "protein": 55,
        "carbs": 100,
        "fats": 25,
        "calories": 650,
        "description": "Final meal of the day",
        "components": [
            _component("Cooked rice + chapati", "100g rice + 1 chapati", 3, 100, 0),
            _component(
                "Eggs scrambled or fish/tofu",
                "4 whole eggs OR 150g fish/tofu",
                24,
                0,
                20,
            ),
            _component("Greens with oil", "1 cup greens + 1 tsp oil", 0, 0, 5),
        ],
    },
]
