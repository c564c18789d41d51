"""JSON API endpoints with simple token auth."""

from __future__ import annotations

from dataclasses import asdict
from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from diet_tracker.api.schemas import (  # noqa: TC001
    ComponentCreate,
    ComponentUpdate,
    ManualEntry,
    MealCreate,
    MealUpdate,
    ProfileUpdate,
    StatusUpdate,
    WeightCreate,
)
from diet_tracker.timeutil import today

if TYPE_CHECKING:
    from diet_tracker.containers import AppContainer
    from diet_tracker.domain.meals import DailyLog, Meal, MealComponent
    from diet_tracker.domain.models import WeightEntry
    from diet_tracker.domain.stats import DayTotals

router = APIRouter(prefix="/api", tags=["api"])


def _get_api_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.api_token


async def require_token(
    x_api_token: str | None = Header(default=None),
    api_token: str = Depends(_get_api_token),
) -> None:
    """Ensure requests include a valid API token."""
    if not x_api_token or x_api_token != api_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.get("/meals", dependencies=[Depends(require_token)])
async def list_meals(request: Request) -> dict[str, object]:
    """Return the meal plan ordered by time of day."""
    meals = _container(request).meal_service.get_all_meals()
    return {"meals": [_meal_json(meal) for meal in meals]}


@router.post(
    "/meals",
    dependencies=[Depends(require_token)],
    status_code=status.HTTP_201_CREATED,
)
async def create_meal(body: MealCreate, request: Request) -> dict[str, object]:
    """Add a meal and re-arm reminders."""
    container = _container(request)
    meal = container.meal_service.create_meal(body.model_dump())
    container.reminder_dispatcher.refresh()
    return _meal_json(meal)


@router.get("/meals/{meal_id}", dependencies=[Depends(require_token)])
async def meal_detail(meal_id: int, request: Request) -> dict[str, object]:
    """Return a meal together with its components."""
    container = _container(request)
    meal = _require_meal(container, meal_id)
    components = container.meal_service.list_components(meal_id)
    return {
        **_meal_json(meal),
        "components": [_component_json(component) for component in components],
    }


@router.patch("/meals/{meal_id}", dependencies=[Depends(require_token)])
async def update_meal(
    meal_id: int, body: MealUpdate, request: Request
) -> dict[str, object]:
    """Edit a meal and re-arm reminders."""
    container = _container(request)
    meal = container.meal_service.update_meal(
        meal_id, body.model_dump(exclude_none=True)
    )
    if meal is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    container.reminder_dispatcher.refresh()
    return _meal_json(meal)


@router.delete("/meals/{meal_id}", dependencies=[Depends(require_token)])
async def delete_meal(meal_id: int, request: Request) -> dict[str, str]:
    """Delete a meal and cancel its reminders."""
    container = _container(request)
    meal = _require_meal(container, meal_id)
    container.reminder_dispatcher.forget(meal)
    container.meal_service.delete_meal(meal_id)
    container.reminder_dispatcher.refresh()
    return {"status": "deleted"}


@router.post(
    "/meals/{meal_id}/components",
    dependencies=[Depends(require_token)],
    status_code=status.HTTP_201_CREATED,
)
async def add_component(
    meal_id: int, body: ComponentCreate, request: Request
) -> dict[str, object]:
    """Add a component to a meal."""
    component = _container(request).meal_service.add_component(
        meal_id, body.model_dump()
    )
    if component is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return _component_json(component)


@router.patch("/components/{component_id}", dependencies=[Depends(require_token)])
async def update_component(
    component_id: int, body: ComponentUpdate, request: Request
) -> dict[str, object]:
    """Edit a component."""
    component = _container(request).meal_service.update_component(
        component_id, body.model_dump(exclude_none=True)
    )
    if component is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return _component_json(component)


@router.delete("/components/{component_id}", dependencies=[Depends(require_token)])
async def delete_component(component_id: int, request: Request) -> dict[str, str]:
    """Remove a component."""
    if not _container(request).meal_service.remove_component(component_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"status": "deleted"}


@router.get("/days/{day}", dependencies=[Depends(require_token)])
async def day_summary(day: date, request: Request) -> dict[str, object]:
    """Return consumed vs. target totals and per-meal statuses for a date."""
    container = _container(request)
    totals = container.stats_service.get_day(day)
    logs = container.log_service.logs_for_date(day)
    return {
        **_totals_json(totals),
        "logs": [_log_json(log) for log in logs],
    }


@router.put("/days/{day}/meals/{meal_id}/status", dependencies=[Depends(require_token)])
async def set_status(
    day: date, meal_id: int, body: StatusUpdate, request: Request
) -> dict[str, object]:
    """Set a meal's status for a date."""
    container = _container(request)
    _require_meal(container, meal_id)
    log = container.log_service.set_status(meal_id, day, body.status, body.notes)
    return _log_json(log)


@router.put("/days/{day}/meals/{meal_id}/manual", dependencies=[Depends(require_token)])
async def save_manual_entry(
    day: date, meal_id: int, body: ManualEntry, request: Request
) -> dict[str, object]:
    """Record manual macros for a meal on a date."""
    container = _container(request)
    _require_meal(container, meal_id)
    log = container.log_service.save_manual_entry(
        meal_id,
        day,
        calories=body.calories,
        protein=body.protein,
        carbs=body.carbs,
        fats=body.fats,
    )
    return _log_json(log)


@router.delete(
    "/days/{day}/meals/{meal_id}/manual", dependencies=[Depends(require_token)]
)
async def clear_manual_entry(
    day: date, meal_id: int, request: Request
) -> dict[str, object]:
    """Drop manual macros for a meal on a date."""
    log = _container(request).log_service.clear_manual_entry(meal_id, day)
    if log is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return _log_json(log)


@router.delete("/logs", dependencies=[Depends(require_token)])
async def reset_logs(request: Request) -> dict[str, str]:
    """Delete every daily log."""
    _container(request).log_service.reset()
    return {"status": "deleted"}


@router.get("/stats/weekly", dependencies=[Depends(require_token)])
async def weekly_stats(request: Request) -> dict[str, object]:
    """Return last-seven-days stats."""
    container = _container(request)
    stats = container.stats_service.get_weekly(today(container.clock))
    if stats is None:
        return {"status": "insufficient_data"}
    return {"status": "ok", **asdict(stats)}


@router.get("/stats/streaks", dependencies=[Depends(require_token)])
async def streak_stats(
    request: Request, since: date | None = None
) -> dict[str, object]:
    """Return current and longest streaks, by default within this month."""
    container = _container(request)
    stats = container.stats_service.get_streaks(today(container.clock), since)
    return asdict(stats)


@router.get("/weights", dependencies=[Depends(require_token)])
async def list_weights(request: Request, limit: int = 30) -> dict[str, object]:
    """Return recent weight entries, newest first."""
    entries = _container(request).weight_service.list_recent(limit)
    return {"weights": [_weight_json(entry) for entry in entries]}


@router.post(
    "/weights",
    dependencies=[Depends(require_token)],
    status_code=status.HTTP_201_CREATED,
)
async def add_weight(body: WeightCreate, request: Request) -> dict[str, object]:
    """Log a body weight sample, dated today unless given."""
    container = _container(request)
    entry = container.weight_service.add_entry(
        body.weight, body.day or today(container.clock), body.notes
    )
    return _weight_json(entry)


@router.get("/profile", dependencies=[Depends(require_token)])
async def get_profile(request: Request) -> dict[str, object]:
    """Return the user profile."""
    return asdict(_container(request).user_service.get_profile())


@router.patch("/profile", dependencies=[Depends(require_token)])
async def update_profile(body: ProfileUpdate, request: Request) -> dict[str, object]:
    """Update profile fields."""
    profile = _container(request).user_service.update_profile(
        body.model_dump(exclude_none=True)
    )
    return asdict(profile)


@router.post("/reminders/refresh", dependencies=[Depends(require_token)])
async def refresh_reminders(request: Request) -> dict[str, int]:
    """Re-arm today's remaining reminders."""
    return {"armed": _container(request).reminder_dispatcher.refresh()}


def _require_meal(container: AppContainer, meal_id: int) -> Meal:
    meal = container.meal_service.get_meal(meal_id)
    if meal is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return meal


def _meal_json(meal: Meal) -> dict[str, object]:
    return {**asdict(meal), "time_of_day": meal.time_of_day.strftime("%H:%M")}


def _component_json(component: MealComponent) -> dict[str, object]:
    return asdict(component)


def _log_json(log: DailyLog) -> dict[str, object]:
    payload = asdict(log)
    payload["day"] = log.day.isoformat()
    payload["status"] = log.status.value
    return payload


def _weight_json(entry: WeightEntry) -> dict[str, object]:
    return {**asdict(entry), "day": entry.day.isoformat()}


def _totals_json(totals: DayTotals) -> dict[str, object]:
    return {
        **asdict(totals),
        "day": totals.day.isoformat(),
        "progress": totals.progress(),
    }
