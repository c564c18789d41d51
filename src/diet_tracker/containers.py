"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import timedelta

from supabase import create_client

from diet_tracker.adapters.apscheduler_trigger_registry import (
    ApschedulerTriggerRegistry,
)
from diet_tracker.adapters.supabase_daily_log_repository import (
    SupabaseDailyLogRepository,
)
from diet_tracker.adapters.supabase_meal_repository import SupabaseMealRepository
from diet_tracker.adapters.supabase_user_repository import SupabaseUserRepository
from diet_tracker.adapters.supabase_weight_repository import SupabaseWeightRepository
from diet_tracker.adapters.telegram_client import (
    HttpxTelegramClient,
    TelegramClient,
)
from diet_tracker.adapters.telegram_notification_presenter import (
    TelegramNotificationPresenter,
)
from diet_tracker.config import Settings
from diet_tracker.domain.reminders import ReminderOutcome, ReminderPayload
from diet_tracker.services.commands import StartCommandHandler
from diet_tracker.services.logs import DailyLogService
from diet_tracker.services.meals import MealCatalogService
from diet_tracker.services.reminders import ReminderDispatcher, ReminderScheduler
from diet_tracker.services.stats import StatsService
from diet_tracker.services.users import UserService
from diet_tracker.services.weights import WeightService
from diet_tracker.timeutil import Clock, SystemClock


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    clock: Clock
    telegram_client: TelegramClient
    user_service: UserService
    meal_service: MealCatalogService
    log_service: DailyLogService
    weight_service: WeightService
    stats_service: StatsService
    reminder_scheduler: ReminderScheduler
    reminder_dispatcher: ReminderDispatcher
    start_command_handler: StartCommandHandler
    start_background: Callable[[], Awaitable[None]]
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    clock = SystemClock.for_timezone(resolved_settings.timezone)
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    meal_repository = SupabaseMealRepository(supabase_client)
    log_repository = SupabaseDailyLogRepository(supabase_client)
    weight_repository = SupabaseWeightRepository(supabase_client)
    user_repository = SupabaseUserRepository(supabase_client)
    telegram_client = HttpxTelegramClient.create(resolved_settings.telegram_bot_token)

    user_service = UserService(user_repository)
    meal_service = MealCatalogService(meal_repository)
    log_service = DailyLogService(log_repository)
    weight_service = WeightService(weight_repository, user_service)
    stats_service = StatsService(
        meal_repository=meal_repository,
        log_store=log_repository,
        weight_repository=weight_repository,
    )

    async def on_reminder(payload: ReminderPayload) -> ReminderOutcome | None:
        return await reminder_dispatcher.dispatch(payload)

    trigger_registry = ApschedulerTriggerRegistry(
        callback=on_reminder,
        misfire_grace_seconds=resolved_settings.reminder_misfire_grace_seconds,
    )
    reminder_scheduler = ReminderScheduler(
        registry=trigger_registry,
        log_store=log_repository,
        presenter=TelegramNotificationPresenter(
            telegram_client=telegram_client,
            chat_id=resolved_settings.telegram_chat_id,
        ),
        clock=clock,
        lead_time=timedelta(minutes=resolved_settings.reminder_lead_minutes),
    )
    reminder_dispatcher = ReminderDispatcher(
        scheduler=reminder_scheduler,
        meal_service=meal_service,
        clock=clock,
    )
    start_handler = StartCommandHandler(
        user_service=user_service,
        meal_service=meal_service,
        telegram_client=telegram_client,
        reminder_lead_minutes=resolved_settings.reminder_lead_minutes,
    )

    async def start_background() -> None:
        if resolved_settings.seed_default_plan:
            meal_service.seed_default_plan()
        trigger_registry.start()
        reminder_dispatcher.refresh()
        trigger_registry.schedule_backup(
            reminder_dispatcher.refresh,
            interval_hours=resolved_settings.backup_interval_hours,
        )

    async def close_resources() -> None:
        trigger_registry.shutdown()
        await telegram_client.close()

    return AppContainer(
        settings=resolved_settings,
        clock=clock,
        telegram_client=telegram_client,
        user_service=user_service,
        meal_service=meal_service,
        log_service=log_service,
        weight_service=weight_service,
        stats_service=stats_service,
        reminder_scheduler=reminder_scheduler,
        reminder_dispatcher=reminder_dispatcher,
        start_command_handler=start_handler,
        start_background=start_background,
        close_resources=close_resources,
    )
