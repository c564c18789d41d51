"""Tests for Telegram webhook handling."""

from datetime import UTC, date, datetime, time, timedelta

from fastapi.testclient import TestClient

from diet_tracker.adapters.telegram_notification_presenter import (
    meal_callback_data,
    reminder_keyboard,
)
from diet_tracker.api.app import create_app
from diet_tracker.domain.meals import DailyLog, MealStatus
from tests.conftest import (
    FakeTelegramClient,
    FixedClock,
    InMemoryLogStore,
    InMemoryMealRepository,
    InMemoryUserRepository,
    InMemoryWeightRepository,
    make_meal,
)

TODAY = date(2024, 3, 15)


def _message(text: str, user_id: int = 123) -> dict[str, object]:
    return {
        "update_id": 1,
        "message": {
            "message_id": 10,
            "date": 1700000000,
            "chat": {"id": 99, "type": "private"},
            "from": {"id": user_id, "is_bot": False, "first_name": "Test"},
            "text": text,
        },
    }


def _callback(data: str, user_id: int = 123) -> dict[str, object]:
    return {
        "update_id": 2,
        "callback_query": {
            "id": "cbq-1",
            "from": {"id": user_id, "is_bot": False, "first_name": "Test"},
            "data": data,
        },
    }


def test_webhook_start_creates_profile_and_sends_plan(
    container,
    meal_repository: InMemoryMealRepository,
    user_repository: InMemoryUserRepository,
    telegram_client: FakeTelegramClient,
) -> None:
    meal_repository.add(make_meal(1, "Lunch"))
    client = TestClient(create_app(container))

    response = client.post("/telegram/webhook", json=_message("/start"))

    assert response.status_code == 200
    assert user_repository.profile is not None
    chat_id, text = telegram_client.messages[0]
    assert chat_id == 99
    assert "1:00 PM Lunch" in text
    assert "15 minutes" in text


def test_webhook_today_lists_statuses_and_totals(
    container,
    meal_repository: InMemoryMealRepository,
    log_store: InMemoryLogStore,
    telegram_client: FakeTelegramClient,
) -> None:
    meal_repository.add(make_meal(1, "Lunch", calories=700))
    meal_repository.add(make_meal(2, "Dinner", calories=650))
    log_store.upsert_log(DailyLog(meal_id=1, day=TODAY, status=MealStatus.COMPLETED))
    client = TestClient(create_app(container))

    client.post("/telegram/webhook", json=_message("/today"))

    _, text = telegram_client.messages[0]
    assert "Today (1/2 meals)" in text
    assert "✅ 1:00 PM Lunch" in text
    assert "Calories: 700/1350 (52%)" in text


def test_webhook_week_reports_insufficient_data(
    container, telegram_client: FakeTelegramClient
) -> None:
    client = TestClient(create_app(container))

    client.post("/telegram/webhook", json=_message("/week"))

    assert "Not enough data" in telegram_client.messages[0][1]


def test_webhook_week_summary(
    container,
    weight_repository: InMemoryWeightRepository,
    telegram_client: FakeTelegramClient,
) -> None:
    weight_repository.create_entry(80.0, TODAY - timedelta(days=4), "")
    weight_repository.create_entry(79.4, TODAY, "")
    client = TestClient(create_app(container))

    client.post("/telegram/webhook", json=_message("/week"))

    assert "Weight change: -0.6 kg" in telegram_client.messages[0][1]


def test_webhook_streak(
    container,
    log_store: InMemoryLogStore,
    telegram_client: FakeTelegramClient,
) -> None:
    for offset in range(2):
        log_store.upsert_log(
            DailyLog(
                meal_id=1,
                day=TODAY - timedelta(days=offset),
                status=MealStatus.COMPLETED,
            )
        )
    client = TestClient(create_app(container))

    client.post("/telegram/webhook", json=_message("/streak"))

    assert "Current streak: 2 days" in telegram_client.messages[0][1]


def test_webhook_weight_logs_entry(
    container,
    weight_repository: InMemoryWeightRepository,
    user_repository: InMemoryUserRepository,
    telegram_client: FakeTelegramClient,
) -> None:
    client = TestClient(create_app(container))

    client.post("/telegram/webhook", json=_message("/weight 72,5"))
    client.post("/telegram/webhook", json=_message("/weight heavy"))

    assert weight_repository.entries[0].weight == 72.5
    assert weight_repository.entries[0].day == TODAY
    assert user_repository.profile is not None
    assert user_repository.profile.current_weight == 72.5
    assert telegram_client.messages[0][1] == "Logged 72.5 kg for 2024-03-15."
    assert telegram_client.messages[1][1] == "Usage: /weight 72.5"


def test_webhook_unknown_text_sends_help(
    container, telegram_client: FakeTelegramClient
) -> None:
    client = TestClient(create_app(container))

    client.post("/telegram/webhook", json=_message("hello"))

    assert "/today" in telegram_client.messages[0][1]


def test_webhook_callback_marks_meal_for_reminder_day(
    container,
    clock: FixedClock,
    meal_repository: InMemoryMealRepository,
    log_store: InMemoryLogStore,
    telegram_client: FakeTelegramClient,
) -> None:
    meal_repository.add(make_meal(1, "Snack", at=time(0, 5)))
    clock.moment = datetime(2024, 3, 15, 23, 52, tzinfo=UTC)
    tomorrow = TODAY + timedelta(days=1)
    done = reminder_keyboard(1, tomorrow)["inline_keyboard"][0][0]["callback_data"]
    client = TestClient(create_app(container))

    response = client.post("/telegram/webhook", json=_callback(done))

    assert response.status_code == 200
    assert log_store.logs[(1, tomorrow)].status is MealStatus.COMPLETED
    assert (1, TODAY) not in log_store.logs
    assert telegram_client.callbacks == [("cbq-1", "Snack marked as completed.")]


def test_webhook_late_callback_leaves_today_untouched(
    container,
    meal_repository: InMemoryMealRepository,
    log_store: InMemoryLogStore,
) -> None:
    meal_repository.add(make_meal(1, "Dinner"))
    yesterday = TODAY - timedelta(days=1)
    client = TestClient(create_app(container))

    client.post(
        "/telegram/webhook",
        json=_callback(meal_callback_data(1, yesterday, MealStatus.SKIPPED)),
    )

    assert log_store.logs[(1, yesterday)].status is MealStatus.SKIPPED
    assert (1, TODAY) not in log_store.logs


def test_webhook_callback_for_unknown_meal(
    container,
    log_store: InMemoryLogStore,
    telegram_client: FakeTelegramClient,
) -> None:
    client = TestClient(create_app(container))

    client.post("/telegram/webhook", json=_callback("m:8:20240315:SKIPPED"))
    client.post("/telegram/webhook", json=_callback("garbage"))

    assert log_store.logs == {}
    assert telegram_client.callbacks[1] == ("cbq-1", "Unknown action.")


def test_webhook_rejects_disallowed_user(
    container, telegram_client: FakeTelegramClient
) -> None:
    container.settings.telegram_allowed_user_ids = "555"
    client = TestClient(create_app(container))

    client.post("/telegram/webhook", json=_message("/today", user_id=123))
    client.post(
        "/telegram/webhook", json=_callback("m:1:20240315:COMPLETED", user_id=123)
    )

    assert telegram_client.messages == [(99, "This bot is private.")]
    assert telegram_client.callbacks == [("cbq-1", "Not authorized.")]


def test_lifespan_syncs_commands_and_arms_reminders(
    container,
    meal_repository: InMemoryMealRepository,
    telegram_client: FakeTelegramClient,
    trigger_registry,
) -> None:
    meal_repository.add(make_meal(1, "Lunch"))

    with TestClient(create_app(container)) as client:
        assert client.get("/health").json() == {"status": "ok"}

    assert telegram_client.commands is not None
    assert telegram_client.commands[0]["command"] == "start"
    assert telegram_client.menu_button == {"type": "commands"}
    assert len(trigger_registry.armed) == 2
