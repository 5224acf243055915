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

    START = TelegramCommand("start", "Create or draw an omikuji slip")
    CURRENT = TelegramCommand("current", "Show the slip you are writing")
    CANCEL = TelegramCommand("cancel", "Drop the slip you are writing")
    ABOUT = TelegramCommand("about", "About this bot")
    DEBUG = TelegramCommand("debug", "Dump the raw draft state")


def parse_command(text: str) -> BotCommand | None:
    """Return the command for texts like ``/start`` or ``/start@omikuji_bot``."""
    if not text.startswith("/"):
        return None
    name = text[1:].split(" ", 1)[0].partition("@")[0]
    for entry in BotCommand:
        if entry.value.command == name:
            return entry
    return None


def telegram_commands() -> list[dict[str, str]]:
    """Return commands formatted for Telegram API."""
    return [
        {"command": entry.value.command, "description": entry.value.description}
        for entry in BotCommand
    ]


CHAT_MENU_BUTTON: dict[str, object] = {"type": "commands"}
