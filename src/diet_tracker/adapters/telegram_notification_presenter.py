"""Reminder presenter that posts to a Telegram chat."""

import logging
from dataclasses import dataclass
from datetime import date, datetime

from diet_tracker.adapters.telegram_client import TelegramClient
from diet_tracker.domain.meals import MealStatus

logger = logging.getLogger(__name__)

MEAL_CALLBACK_PREFIX = "m"
CALLBACK_DATE_FORMAT = "%Y%m%d"


@dataclass
class TelegramNotificationPresenter:
    """Sends meal reminders with quick status buttons."""

    telegram_client: TelegramClient
    chat_id: int | None

    async def present(
        self, meal_id: int, meal_name: str, formatted_time: str, day: date
    ) -> None:
        """Send the reminder message to the configured chat."""
        if self.chat_id is None:
            logger.warning(
                "No Telegram chat configured, reminder for %s dropped", meal_name
            )
            return
        await self.telegram_client.send_message(
            chat_id=self.chat_id,
            text=(
                f"🍽️ {meal_name} Reminder\n"
                f"Your {meal_name} is scheduled at {formatted_time}. Time to prepare!"
            ),
            reply_markup=reminder_keyboard(meal_id, day),
        )


def reminder_keyboard(meal_id: int, day: date) -> dict:
    """Inline keyboard to resolve a meal straight from the reminder."""
    return {
        "inline_keyboard": [
            [
                {
                    "text": "Done",
                    "callback_data": meal_callback_data(
                        meal_id, day, MealStatus.COMPLETED
                    ),
                },
                {
                    "text": "Skip",
                    "callback_data": meal_callback_data(
                        meal_id, day, MealStatus.SKIPPED
                    ),
                },
            ]
        ]
    }


def meal_callback_data(meal_id: int, day: date, status: MealStatus) -> str:
    """Encode a meal status change for a date as callback data."""
    return (
        f"{MEAL_CALLBACK_PREFIX}:{meal_id}:"
        f"{day.strftime(CALLBACK_DATE_FORMAT)}:{status.value}"
    )


def parse_meal_callback(data: str) -> tuple[int, date, MealStatus] | None:
    """Parse callback data in the format m:<meal_id>:<YYYYMMDD>:<status>."""
    parts = data.split(":")
    if len(parts) != 4 or parts[0] != MEAL_CALLBACK_PREFIX:  # noqa: PLR2004
        return None
    _, raw_id, raw_day, raw_status = parts
    if not raw_id.isdigit() or len(raw_day) != 8:  # noqa: PLR2004
        return None
    try:
        day = datetime.strptime(raw_day, CALLBACK_DATE_FORMAT).date()
        return int(raw_id), day, MealStatus(raw_status)
    except ValueError:
        return None
