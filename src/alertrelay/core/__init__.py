"""Core module - Configuration, logging and exceptions."""

from alertrelay.core.config import Settings, load_settings
from alertrelay.core.exceptions import (
    AlertRelayError,
    ConfigurationError,
    InvalidChatIdError,
    TelegramError,
    TemplateLoadError,
    TemplateRenderError,
)

__all__ = [
    # Config
    "Settings",
    "load_settings",
    # Exceptions
    "AlertRelayError",
    "ConfigurationError",
    "InvalidChatIdError",
    "TelegramError",
    "TemplateLoadError",
    "TemplateRenderError",
]
