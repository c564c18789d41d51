"""Statistics over the meal plan, daily logs and weight entries."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, timedelta

from diet_tracker.domain.meals import DailyLog, Meal
from diet_tracker.domain.models import WeightEntry
from diet_tracker.domain.stats import (
    DailyCompletion,
    DayTotals,
    StreakStats,
    WeeklyStats,
)
from diet_tracker.services.logs import LogStore
from diet_tracker.services.meals import MealRepository
from diet_tracker.services.weights import WeightRepository
from diet_tracker.timeutil import ONE_DAY, iter_days

WEEK_DAYS = 7
MIN_WEIGHT_ENTRIES = 2


@dataclass
class StatsService:
    """Service that loads data and computes summaries."""

    meal_repository: MealRepository
    log_store: LogStore
    weight_repository: WeightRepository

    def get_day(self, day: date) -> DayTotals:
        """Return consumed vs. target totals for a date."""
        meals = self.meal_repository.list_meals()
        logs = self.log_store.get_logs_for_date(day)
        return day_totals(day, meals, logs)

    def get_streaks(self, today: date, window_start: date | None = None) -> StreakStats:
        """Return streaks up to today; the window defaults to this month."""
        start = window_start or today.replace(day=1)
        logs = self.log_store.get_logs_in_range(start, today)
        return streaks(completion_series(logs, start, today), today, start)

    def get_weekly(self, today: date) -> WeeklyStats | None:
        """Return last-seven-days stats, or None without enough weight data."""
        start = today - timedelta(days=WEEK_DAYS - 1)
        meals = self.meal_repository.list_meals()
        logs = self.log_store.get_logs_in_range(start, today)
        weights = self.weight_repository.list_entries_in_range(start, today)
        return weekly_stats(meals, logs, weights, today)


def day_totals(day: date, meals: Sequence[Meal], logs: Iterable[DailyLog]) -> DayTotals:
    """Aggregate one day's logs against the full catalog.

    Every catalog meal counts toward the targets and the denominator; only
    eaten logs count toward consumption. A manual value replaces the catalog
    value field by field, and only while the manual entry flag is set.
    """
    by_id = {meal.id: meal for meal in meals}
    calories = protein = carbs = fats = 0
    completed = 0
    for log in logs:
        if not log.is_eaten:
            continue
        completed += 1
        meal = by_id.get(log.meal_id)
        if meal is None:
            continue
        calories += _pick(log, log.manual_calories, meal.calories)
        protein += _pick(log, log.manual_protein, meal.protein)
        carbs += _pick(log, log.manual_carbs, meal.carbs)
        fats += _pick(log, log.manual_fats, meal.fats)
    return DayTotals(
        day=day,
        consumed_calories=calories,
        consumed_protein=protein,
        consumed_carbs=carbs,
        consumed_fats=fats,
        target_calories=sum(meal.calories for meal in meals),
        target_protein=sum(meal.protein for meal in meals),
        target_carbs=sum(meal.carbs for meal in meals),
        target_fats=sum(meal.fats for meal in meals),
        completed_count=completed,
        total_count=len(meals),
    )


def completion_series(
    logs: Iterable[DailyLog], start: date, end: date
) -> list[DailyCompletion]:
    """Return eaten-meal counts for every date in [start, end]."""
    counts: dict[date, int] = {}
    for log in logs:
        if log.is_eaten:
            counts[log.day] = counts.get(log.day, 0) + 1
    return [
        DailyCompletion(day=day, completed_count=counts.get(day, 0))
        for day in iter_days(start, end)
    ]


def streaks(
    series: Sequence[DailyCompletion],
    today: date,
    window_start: date | None = None,
) -> StreakStats:
    """Compute the current and longest streaks from a per-date series."""
    by_day = {entry.day: entry.completed_count for entry in series}

    current = 0
    cursor = today
    while by_day.get(cursor, 0) > 0:
        current += 1
        cursor -= ONE_DAY

    longest = 0
    run = 0
    previous: date | None = None
    for entry in sorted(series, key=lambda item: item.day):
        if entry.day > today:
            break
        if window_start is not None and entry.day < window_start:
            continue
        if previous is not None and entry.day - previous != ONE_DAY:
            run = 0
        previous = entry.day
        if entry.completed_count > 0:
            run += 1
            longest = max(longest, run)
        else:
            run = 0
    return StreakStats(current_streak=current, longest_streak=longest)


def weekly_stats(
    meals: Sequence[Meal],
    logs: Iterable[DailyLog],
    weights: Iterable[WeightEntry],
    today: date,
) -> WeeklyStats | None:
    """Summarize the seven days ending today.

    Returns None when fewer than two weight entries fall in the window. When
    several entries share the earliest or latest date, the first one in the
    given order is used.
    """
    start = today - timedelta(days=WEEK_DAYS - 1)
    window_weights = [entry for entry in weights if start <= entry.day <= today]
    if len(window_weights) < MIN_WEIGHT_ENTRIES:
        return None
    earliest = min(window_weights, key=lambda entry: entry.day)
    latest = max(window_weights, key=lambda entry: entry.day)

    window_logs = [log for log in logs if start <= log.day <= today]
    eaten = [log for log in window_logs if log.is_eaten]
    rate = len(eaten) / len(window_logs) if window_logs else 0.0

    by_id = {meal.id: meal for meal in meals}
    total_protein = 0
    total_calories = 0
    for log in eaten:
        meal = by_id.get(log.meal_id)
        if meal is None:
            continue
        total_protein += meal.protein
        total_calories += meal.calories

    return WeeklyStats(
        meal_completion_rate=rate,
        weight_change=latest.weight - earliest.weight,
        avg_daily_protein=total_protein // WEEK_DAYS,
        avg_daily_calories=total_calories // WEEK_DAYS,
    )


def _pick(log: DailyLog, manual: int | None, catalog: int) -> int:
    if log.has_manual_entry and manual is not None:
        return manual
    return catalog
