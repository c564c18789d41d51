"""Telegram bot command configuration."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class TelegramCommand:
    """Declarative bot command definition."""

    command: str
    description: str


class BotCommand(Enum):
    """Enum of bot commands (single source of truth)."""

    START = TelegramCommand("start", "Show today's meal plan")
    TODAY = TelegramCommand("today", "Today's meals and macro progress")
    WEEK = TelegramCommand("week", "Completion rate, weight change and averages")
    STREAK = TelegramCommand("streak", "Current and longest streaks this month")
    WEIGHT = TelegramCommand("weight", "Log body weight, e.g. /weight 72.5")
    HELP = TelegramCommand("help", "Quick guide")

    @property
    def slash(self) -> str:
        """Return the command as typed in chat."""
        return f"/{self.value.command}"


def telegram_commands() -> list[dict[str, str]]:
    """Return commands formatted for Telegram API."""
    return [
        {"command": entry.value.command, "description": entry.value.description}
        for entry in BotCommand
    ]


def parse_command(text: str) -> tuple[BotCommand, str] | None:
    """Split a message into a known command and its argument text."""
    head, _, rest = text.strip().partition(" ")
    name = head.removeprefix("/").split("@", maxsplit=1)[0].lower()
    if not head.startswith("/"):
        return None
    for entry in BotCommand:
        if entry.value.command == name:
            return entry, rest.strip()
    return None


CHAT_MENU_BUTTON: dict[str, object] = {"type": "commands"}
