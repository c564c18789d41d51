"""Domain models for statistics."""

import math
from dataclasses import dataclass
from datetime import date


def progress_ratio(consumed: float, target: float) -> float:
    """Return consumed/target, or 0.0 when the ratio is undefined."""
    if target == 0:
        return 0.0
    ratio = consumed / target
    if math.isnan(ratio):
        return 0.0
    return ratio


@dataclass(frozen=True)
class DayTotals:
    """Consumed vs. target macros for a single day."""

    day: date
    consumed_calories: int
    consumed_protein: int
    consumed_carbs: int
    consumed_fats: int
    target_calories: int
    target_protein: int
    target_carbs: int
    target_fats: int
    completed_count: int
    total_count: int

    def progress(self) -> dict[str, float]:
        """Return consumed/target ratios per macro."""
        return {
            "calories": progress_ratio(self.consumed_calories, self.target_calories),
            "protein": progress_ratio(self.consumed_protein, self.target_protein),
            "carbs": progress_ratio(self.consumed_carbs, self.target_carbs),
            "fats": progress_ratio(self.consumed_fats, self.target_fats),
        }


@dataclass(frozen=True)
class DailyCompletion:
    """Number of eaten meals on a date."""

    day: date
    completed_count: int


@dataclass(frozen=True)
class StreakStats:
    """Current and longest runs of days with an eaten meal."""

    current_streak: int
    longest_streak: int


@dataclass(frozen=True)
class WeeklyStats:
    """Summary of the last seven days."""

    meal_completion_rate: float
    weight_change: float
    avg_daily_protein: int
    avg_daily_calories: int
