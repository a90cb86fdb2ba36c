"""
Alert Relay - Test Fixtures
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, AsyncGenerator, Callable, Dict, Iterable, List, Optional

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from alertrelay.core.config import Settings
from alertrelay.core.exceptions import TelegramError
from alertrelay.main import create_app

DEFAULT_TEMPLATE_SOURCE = (
    "{{ status | upper }}: {{ commonLabels.alertname }}"
    "{% for alert in alerts %}\n- {{ alert.labels.instance }}{% endfor %}"
)


# =============================================================================
# Fakes
# =============================================================================

@dataclass
class SentMessage:
    """A message recorded by FakeSender."""
    chat_id: int
    text: str
    parse_mode: Optional[str]
    disable_web_page_preview: bool


class FakeSender:
    """
    Stand-in for the Telegram bot.

    Records every send, and fails sends whose text is in ``fail_texts``.
    """

    def __init__(self, fail_texts: Iterable[str] = ()):
        self.sent: List[SentMessage] = []
        self.fail_texts = set(fail_texts)

    async def send_message(
        self,
        chat_id: int,
        text: str,
        *,
        parse_mode: Optional[str] = None,
        disable_web_page_preview: bool = False,
    ) -> Dict[str, Any]:
        self.sent.append(SentMessage(chat_id, text, parse_mode, disable_web_page_preview))
        if text in self.fail_texts:
            raise TelegramError(
                "Telegram API error: 400 - Bad Request: can't parse entities",
                error_code=400,
                description="Bad Request: can't parse entities",
            )
        return {"message_id": len(self.sent), "chat": {"id": chat_id}, "text": text}

    def texts(self) -> List[str]:
        return [message.text for message in self.sent]


# =============================================================================
# Template & Settings Fixtures
# =============================================================================

@pytest.fixture
def write_template(tmp_path: Path) -> Callable[[str, str], str]:
    """Write a template file under tmp_path and return its path."""

    def _write(name: str, source: str) -> str:
        path = tmp_path / name
        path.write_text(source, encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def default_template_path(write_template) -> str:
    return write_template("default.tmpl", DEFAULT_TEMPLATE_SOURCE)


@pytest.fixture
def make_settings(default_template_path: str) -> Callable[..., Settings]:
    """Build settings without a configuration file."""

    def _make(**overrides: Any) -> Settings:
        values: Dict[str, Any] = {
            "telegram_token": "123:test-token",
            "template_path": default_template_path,
            "time_zone": "UTC",
            "listen_updates": False,
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def settings(make_settings) -> Settings:
    return make_settings()


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest.fixture
def make_sender() -> Callable[..., FakeSender]:
    return FakeSender


@pytest.fixture
def sender(make_sender) -> FakeSender:
    return make_sender()


@pytest.fixture
def app(settings: Settings, sender: FakeSender) -> FastAPI:
    return create_app(settings, bot=sender)


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client talking to the app in process."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def firing_payload() -> Dict[str, Any]:
    """Alertmanager webhook payload with one firing alert."""
    return {
        "version": "4",
        "status": "firing",
        "receiver": "telegram",
        "commonLabels": {"alertname": "InstanceDown"},
        "alerts": [
            {
                "status": "firing",
                "labels": {"alertname": "InstanceDown", "instance": "node-1:9100"},
                "annotations": {"summary": "node-1 is down"},
                "startsAt": "2024-03-01T12:00:00.123456789Z",
                "endsAt": "0001-01-01T00:00:00Z",
            },
        ],
    }
