"""Command handlers for Telegram updates."""

from dataclasses import dataclass

from diet_tracker.adapters.telegram_client import TelegramClient
from diet_tracker.services.meals import MealCatalogService
from diet_tracker.services.users import UserService
from diet_tracker.timeutil import format_meal_time


@dataclass
class StartCommandHandler:
    """Handle the /start Telegram command."""

    user_service: UserService
    meal_service: MealCatalogService
    telegram_client: TelegramClient
    reminder_lead_minutes: int = 15

    async def handle(self, chat_id: int) -> None:
        """Create the profile if needed and send the daily plan."""
        profile = self.user_service.ensure_profile()
        greeting = f"Welcome back, {profile.name}!" if profile.name else "Welcome!"
        meals = self.meal_service.get_all_meals()
        if not meals:
            await self.telegram_client.send_message(
                chat_id=chat_id,
                text=f"{greeting} Your meal plan is empty.",
            )
            return
        lines = [greeting, "Your daily plan:"]
        for meal in meals:
            lines.append(
                f"- {format_meal_time(meal.time_of_day)} {meal.name}: "
                f"{meal.calories} kcal ({meal.protein}P/{meal.carbs}C/{meal.fats}F)"
            )
        lines.append(
            f"I'll remind you {self.reminder_lead_minutes} minutes before each meal."
        )
        await self.telegram_client.send_message(chat_id=chat_id, text="\n".join(lines))
