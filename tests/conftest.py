"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime, time

import pytest

from diet_tracker.adapters.telegram_client import TelegramClient
from diet_tracker.config import Settings
from diet_tracker.containers import AppContainer
from diet_tracker.domain.meals import DailyLog, Meal, MealComponent
from diet_tracker.domain.models import UserProfile, WeightEntry
from diet_tracker.domain.reminders import ReminderPayload
from diet_tracker.services.commands import StartCommandHandler
from diet_tracker.services.logs import DailyLogService, LogStore
from diet_tracker.services.meals import MealCatalogService, MealRepository
from diet_tracker.services.reminders import (
    NotificationPresenter,
    ReminderDispatcher,
    ReminderScheduler,
    TriggerRegistry,
)
from diet_tracker.services.stats import StatsService
from diet_tracker.services.users import UserRepository, UserService
from diet_tracker.services.weights import WeightRepository, WeightService

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=UTC)


def make_meal(  # noqa: PLR0913
    meal_id: int,
    name: str = "Lunch",
    at: time = time(13, 0),
    protein: int = 50,
    carbs: int = 100,
    fats: int = 20,
    calories: int = 700,
) -> Meal:
    return Meal(
        id=meal_id,
        name=name,
        time_of_day=at,
        protein=protein,
        carbs=carbs,
        fats=fats,
        calories=calories,
    )


@dataclass
class FixedClock:
    """Clock frozen at a given instant."""

    moment: datetime = NOW

    def now(self) -> datetime:
        return self.moment


@dataclass
class InMemoryMealRepository(MealRepository):
    """In-memory meal catalog for tests."""

    meals: dict[int, Meal] = field(default_factory=dict)
    components: dict[int, MealComponent] = field(default_factory=dict)
    next_id: int = 1

    def add(self, meal: Meal) -> Meal:
        self.meals[meal.id] = meal
        self.next_id = max(self.next_id, meal.id + 1)
        return meal

    def list_meals(self) -> list[Meal]:
        return sorted(self.meals.values(), key=lambda meal: meal.time_of_day)

    def get_meal(self, meal_id: int) -> Meal | None:
        return self.meals.get(meal_id)

    def create_meal(self, payload: dict[str, object]) -> Meal:
        raw_time = payload["time_of_day"]
        meal = Meal(
            id=self._allocate(),
            name=str(payload["name"]),
            time_of_day=(
                raw_time if isinstance(raw_time, time) else time.fromisoformat(raw_time)
            ),
            protein=int(payload.get("protein", 0)),
            carbs=int(payload.get("carbs", 0)),
            fats=int(payload.get("fats", 0)),
            calories=int(payload.get("calories", 0)),
            description=str(payload.get("description", "")),
            is_default=bool(payload.get("is_default", True)),
        )
        self.meals[meal.id] = meal
        return meal

    def update_meal(self, meal: Meal) -> None:
        self.meals[meal.id] = meal

    def delete_meal(self, meal_id: int) -> None:
        self.meals.pop(meal_id, None)
        self.components = {
            key: component
            for key, component in self.components.items()
            if component.meal_id != meal_id
        }

    def list_components(self, meal_id: int) -> list[MealComponent]:
        return [c for c in self.components.values() if c.meal_id == meal_id]

    def get_component(self, component_id: int) -> MealComponent | None:
        return self.components.get(component_id)

    def create_component(
        self, meal_id: int, payload: dict[str, object]
    ) -> MealComponent:
        component = MealComponent(
            id=self._allocate(),
            meal_id=meal_id,
            name=str(payload["name"]),
            quantity=str(payload.get("quantity", "")),
            protein=int(payload.get("protein", 0)),
            carbs=int(payload.get("carbs", 0)),
            fats=int(payload.get("fats", 0)),
            is_default=bool(payload.get("is_default", True)),
        )
        self.components[component.id] = component
        return component

    def update_component(self, component: MealComponent) -> None:
        self.components[component.id] = component

    def delete_component(self, component_id: int) -> None:
        self.components.pop(component_id, None)

    def _allocate(self) -> int:
        allocated = self.next_id
        self.next_id += 1
        return allocated


@dataclass
class InMemoryLogStore(LogStore):
    """In-memory daily log store keyed by (meal_id, date)."""

    logs: dict[tuple[int, date], DailyLog] = field(default_factory=dict)
    fail_reads: bool = False

    def get_log(self, meal_id: int, day: date) -> DailyLog | None:
        if self.fail_reads:
            raise RuntimeError("store unavailable")
        return self.logs.get((meal_id, day))

    def upsert_log(self, log: DailyLog) -> None:
        self.logs[(log.meal_id, log.day)] = log

    def insert_if_absent(self, log: DailyLog) -> None:
        self.logs.setdefault((log.meal_id, log.day), log)

    def get_logs_for_date(self, day: date) -> list[DailyLog]:
        return [log for log in self.logs.values() if log.day == day]

    def get_logs_in_range(self, start: date, end: date) -> list[DailyLog]:
        return sorted(
            (log for log in self.logs.values() if start <= log.day <= end),
            key=lambda log: log.day,
        )

    def delete_all_logs(self) -> None:
        self.logs.clear()


@dataclass
class InMemoryWeightRepository(WeightRepository):
    """In-memory weight entries for tests."""

    entries: list[WeightEntry] = field(default_factory=list)

    def create_entry(self, weight: float, day: date, notes: str) -> WeightEntry:
        entry = WeightEntry(
            id=len(self.entries) + 1, weight=weight, day=day, notes=notes
        )
        self.entries.append(entry)
        return entry

    def list_recent_entries(self, limit: int) -> list[WeightEntry]:
        ordered = sorted(self.entries, key=lambda entry: (entry.day, entry.id))
        return list(reversed(ordered))[:limit]

    def list_entries_in_range(self, start: date, end: date) -> list[WeightEntry]:
        return sorted(
            (entry for entry in self.entries if start <= entry.day <= end),
            key=lambda entry: (entry.day, entry.id),
        )


@dataclass
class InMemoryUserRepository(UserRepository):
    """In-memory profile storage for tests."""

    profile: UserProfile | None = None
    writes: int = 0

    def get_profile(self) -> UserProfile | None:
        return self.profile

    def upsert_profile(self, profile: UserProfile) -> None:
        self.profile = replace(profile, id=1)
        self.writes += 1


@dataclass
class FakeTelegramClient(TelegramClient):
    """Fake Telegram client that records messages."""

    messages: list[tuple[int, str]] = field(default_factory=list)
    reply_markups: list[dict | None] = field(default_factory=list)
    callbacks: list[tuple[str, str | None]] = field(default_factory=list)
    commands: list[dict[str, str]] | None = None
    menu_button: dict[str, object] | None = None

    async def send_message(
        self, chat_id: int, text: str, reply_markup: dict | None = None
    ) -> None:
        self.messages.append((chat_id, text))
        self.reply_markups.append(reply_markup)

    async def answer_callback_query(
        self, callback_query_id: str, text: str | None = None
    ) -> None:
        self.callbacks.append((callback_query_id, text))

    async def set_my_commands(self, commands: list[dict[str, str]]) -> None:
        self.commands = commands

    async def set_chat_menu_button(
        self, menu_button: dict[str, object] | None = None
    ) -> None:
        self.menu_button = menu_button


@dataclass
class FakeTriggerRegistry(TriggerRegistry):
    """Records armed triggers by key."""

    armed: dict[int, tuple[int, ReminderPayload]] = field(default_factory=dict)
    cancelled: list[int] = field(default_factory=list)
    failing_meal_ids: set[int] = field(default_factory=set)

    def arm(self, key: int, when_epoch_millis: int, payload: ReminderPayload) -> None:
        if payload.meal_id in self.failing_meal_ids:
            raise RuntimeError("alarm backend rejected trigger")
        self.armed[key] = (when_epoch_millis, payload)

    def cancel(self, key: int) -> None:
        self.cancelled.append(key)
        self.armed.pop(key, None)


@dataclass
class FakePresenter(NotificationPresenter):
    """Records presented reminders."""

    shown: list[tuple[int, str, str]] = field(default_factory=list)
    shown_days: list[date] = field(default_factory=list)
    fail: bool = False

    async def present(
        self, meal_id: int, meal_name: str, formatted_time: str, day: date
    ) -> None:
        # Yield so concurrent fires interleave.
        await asyncio.sleep(0)
        if self.fail:
            raise RuntimeError("notifications disabled")
        self.shown.append((meal_id, meal_name, formatted_time))
        self.shown_days.append(day)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        telegram_bot_token="test-token",
        telegram_chat_id=99,
        supabase_url="https://example.supabase.co",
        supabase_service_key="aaa.bbb.ccc",
        api_token="api-token",
        timezone="UTC",
    )


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def meal_repository() -> InMemoryMealRepository:
    return InMemoryMealRepository()


@pytest.fixture
def log_store() -> InMemoryLogStore:
    return InMemoryLogStore()


@pytest.fixture
def weight_repository() -> InMemoryWeightRepository:
    return InMemoryWeightRepository()


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def telegram_client() -> FakeTelegramClient:
    return FakeTelegramClient()


@pytest.fixture
def trigger_registry() -> FakeTriggerRegistry:
    return FakeTriggerRegistry()


@pytest.fixture
def presenter() -> FakePresenter:
    return FakePresenter()


@pytest.fixture
def reminder_scheduler(
    trigger_registry: FakeTriggerRegistry,
    log_store: InMemoryLogStore,
    presenter: FakePresenter,
    clock: FixedClock,
) -> ReminderScheduler:
    return ReminderScheduler(
        registry=trigger_registry,
        log_store=log_store,
        presenter=presenter,
        clock=clock,
    )


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    clock: FixedClock,
    meal_repository: InMemoryMealRepository,
    log_store: InMemoryLogStore,
    weight_repository: InMemoryWeightRepository,
    user_repository: InMemoryUserRepository,
    telegram_client: FakeTelegramClient,
    reminder_scheduler: ReminderScheduler,
) -> AppContainer:
    user_service = UserService(user_repository)
    meal_service = MealCatalogService(meal_repository)
    reminder_dispatcher = ReminderDispatcher(
        scheduler=reminder_scheduler,
        meal_service=meal_service,
        clock=clock,
    )

    async def start_background() -> None:
        reminder_dispatcher.refresh()

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        clock=clock,
        telegram_client=telegram_client,
        user_service=user_service,
        meal_service=meal_service,
        log_service=DailyLogService(log_store),
        weight_service=WeightService(weight_repository, user_service),
        stats_service=StatsService(
            meal_repository=meal_repository,
            log_store=log_store,
            weight_repository=weight_repository,
        ),
        reminder_scheduler=reminder_scheduler,
        reminder_dispatcher=reminder_dispatcher,
        start_command_handler=StartCommandHandler(
            user_service=user_service,
            meal_service=meal_service,
            telegram_client=telegram_client,
        ),
        start_background=start_background,
        close_resources=close_resources,
    )
