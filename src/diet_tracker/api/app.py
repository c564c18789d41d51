"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from diet_tracker.adapters.telegram_notification_presenter import parse_meal_callback
from diet_tracker.api.routes import router as api_router
from diet_tracker.api.telegram_models import TelegramUpdate
from diet_tracker.app_logging import configure_logging
from diet_tracker.config import parse_allowed_user_ids
from diet_tracker.containers import AppContainer
from diet_tracker.domain.meals import DailyLog, Meal, MealStatus
from diet_tracker.domain.stats import DayTotals, StreakStats, WeeklyStats
from diet_tracker.telegram_commands import (
    CHAT_MENU_BUTTON,
    BotCommand,
    parse_command,
    telegram_commands,
)
from diet_tracker.timeutil import format_meal_time, today

_STATUS_ICONS = {
    MealStatus.PENDING: "⏳",
    MealStatus.COMPLETED: "✅",
    MealStatus.SKIPPED: "⏭️",
    MealStatus.MODIFIED: "✏️",
}


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)
    allowed_user_ids = parse_allowed_user_ids(
        container.settings.telegram_allowed_user_ids
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        try:
            await state_container.telegram_client.set_my_commands(
                telegram_commands()
            )
            await state_container.telegram_client.set_chat_menu_button(
                CHAT_MENU_BUTTON
            )
        except Exception:
            logger.exception("Failed to sync Telegram bot commands")
        await state_container.start_background()
        yield
        await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(api_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/telegram/webhook")
    async def telegram_webhook(  # noqa: PLR0911, PLR0912
        update: TelegramUpdate, request: Request
    ) -> dict[str, str]:
        """Handle Telegram webhook updates."""
        state_container: AppContainer = request.app.state.container
        telegram_client = state_container.telegram_client
        user_id = _extract_user_id(update)
        if user_id is not None and not _is_user_allowed(user_id, allowed_user_ids):
            if update.callback_query:
                await telegram_client.answer_callback_query(
                    update.callback_query.id,
                    text="Not authorized.",
                )
                return {"status": "ok"}
            if update.message:
                await telegram_client.send_message(
                    chat_id=update.message.chat.id,
                    text="This bot is private.",
                )
                return {"status": "ok"}

        if update.callback_query:
            callback = update.callback_query
            parsed = parse_meal_callback(callback.data) if callback.data else None
            if parsed is None:
                await telegram_client.answer_callback_query(
                    callback.id, text="Unknown action."
                )
                return {"status": "ok"}
            meal_id, meal_day, meal_status = parsed
            meal = state_container.meal_service.get_meal(meal_id)
            if meal is None:
                await telegram_client.answer_callback_query(
                    callback.id, text="This meal is no longer in your plan."
                )
                return {"status": "ok"}
            state_container.log_service.set_status(meal_id, meal_day, meal_status)
            await telegram_client.answer_callback_query(
                callback.id,
                text=f"{meal.name} marked as {meal_status.value.lower()}.",
            )
            return {"status": "ok"}

        message = update.message
        if not message or not message.text:
            return {"status": "ok"}
        command = parse_command(message.text)
        if command is None:
            await telegram_client.send_message(
                chat_id=message.chat.id, text=_format_help()
            )
            return {"status": "ok"}

        entry, argument = command
        current_day = today(state_container.clock)
        if entry is BotCommand.START:
            await state_container.start_command_handler.handle(
                chat_id=message.chat.id
            )
            return {"status": "ok"}
        if entry is BotCommand.TODAY:
            text = _format_today(
                state_container.stats_service.get_day(current_day),
                state_container.meal_service.get_all_meals(),
                state_container.log_service.logs_for_date(current_day),
            )
        elif entry is BotCommand.WEEK:
            text = _format_weekly(state_container.stats_service.get_weekly(current_day))
        elif entry is BotCommand.STREAK:
            text = _format_streaks(
                state_container.stats_service.get_streaks(current_day)
            )
        elif entry is BotCommand.WEIGHT:
            weight = _parse_weight(argument)
            if weight is None:
                text = "Usage: /weight 72.5"
            else:
                logged = state_container.weight_service.add_entry(weight, current_day)
                text = f"Logged {logged.weight:.1f} kg for {logged.day.isoformat()}."
        else:
            text = _format_help()
        await telegram_client.send_message(chat_id=message.chat.id, text=text)
        return {"status": "ok"}

    return app


def _extract_user_id(update: TelegramUpdate) -> int | None:
    """Extract the Telegram user id from an update."""
    if update.callback_query:
        return update.callback_query.from_user.id
    if update.message:
        return update.message.from_user.id
    return None


def _is_user_allowed(user_id: int, allowed: set[int] | None) -> bool:
    """Return True if the user is allowed to access the bot."""
    return allowed is None or user_id in allowed


def _parse_weight(argument: str) -> float | None:
    try:
        weight = float(argument.replace(",", "."))
    except ValueError:
        return None
    if weight <= 0:
        return None
    return weight


def _format_today(totals: DayTotals, meals: list[Meal], logs: list[DailyLog]) -> str:
    """Format today's meal statuses and macro progress for Telegram."""
    statuses = {log.meal_id: log.status for log in logs}
    lines = [f"Today ({totals.completed_count}/{totals.total_count} meals):"]
    for meal in meals:
        meal_status = statuses.get(meal.id, MealStatus.PENDING)
        lines.append(
            f"{_STATUS_ICONS[meal_status]} {format_meal_time(meal.time_of_day)} "
            f"{meal.name}"
        )
    progress = totals.progress()
    lines.extend(
        [
            f"Calories: {totals.consumed_calories}/{totals.target_calories} "
            f"({progress['calories']:.0%})",
            f"Protein: {totals.consumed_protein}/{totals.target_protein} g",
            f"Carbs: {totals.consumed_carbs}/{totals.target_carbs} g",
            f"Fats: {totals.consumed_fats}/{totals.target_fats} g",
        ]
    )
    return "\n".join(lines)


def _format_weekly(stats: WeeklyStats | None) -> str:
    """Format last-seven-days stats for Telegram."""
    if stats is None:
        return (
            "Not enough data for weekly stats yet. "
            "Log your weight at least twice this week with /weight."
        )
    return "\n".join(
        [
            "Last 7 days:",
            f"Meals completed: {stats.meal_completion_rate:.0%}",
            f"Weight change: {stats.weight_change:+.1f} kg",
            f"Avg protein: {stats.avg_daily_protein} g/day",
            f"Avg calories: {stats.avg_daily_calories} kcal/day",
        ]
    )


def _format_streaks(stats: StreakStats) -> str:
    """Format streaks for Telegram."""
    return (
        f"Current streak: {stats.current_streak} days\n"
        f"Longest streak this month: {stats.longest_streak} days"
    )


def _format_help() -> str:
    lines = ["Commands:"]
    lines.extend(
        f"{entry.slash} - {entry.value.description}" for entry in BotCommand
    )
    lines.append("Tap Done or Skip on a reminder to record the meal.")
    return "\n".join(lines)
