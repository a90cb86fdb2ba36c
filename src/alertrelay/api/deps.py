"""
Alert Relay - API Dependencies
"""

import re

from fastapi import Request

from alertrelay.core.config import Settings
from alertrelay.core.exceptions import InvalidChatIdError
from alertrelay.delivery.coordinator import DeliveryCoordinator, MessageSender
from alertrelay.templating.renderer import TemplateRenderer
from alertrelay.templating.store import TemplateStore

_CHAT_ID_RE = re.compile(r"^[+-]?\d+$")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_template_store(request: Request) -> TemplateStore:
    return request.app.state.template_store


def get_renderer(request: Request) -> TemplateRenderer:
    return request.app.state.renderer


def get_bot(request: Request) -> MessageSender:
    return request.app.state.bot


def get_coordinator(request: Request) -> DeliveryCoordinator:
    """Dependency to get a coordinator bound to the application's bot."""
    return DeliveryCoordinator(request.app.state.bot)


def parse_chat_id(raw: str) -> int:
    """
    Parse a chat id path parameter.

    Telegram chat ids are signed 64-bit integers; group ids are negative.

    Raises:
        InvalidChatIdError: If the value is not a base 10 int64
    """
    if not _CHAT_ID_RE.match(raw):
        raise InvalidChatIdError(raw)

    value = int(raw)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise InvalidChatIdError(raw)
    return value
