"""Telegram module - Bot API client and update listener."""

from alertrelay.telegram.client import TelegramBot
from alertrelay.telegram.listener import UpdateListener

__all__ = [
    "TelegramBot",
    "UpdateListener",
]
