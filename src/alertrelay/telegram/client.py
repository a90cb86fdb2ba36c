"""
Alert Relay - Telegram Bot API Client
"""

from typing import Any, Dict, List, Optional

import httpx
import structlog

from alertrelay.core.exceptions import TelegramError

logger = structlog.get_logger()

DEFAULT_API_URL = "https://api.telegram.org"


class TelegramBot:
    """
    Minimal asynchronous client for the Telegram Bot API.

    Wraps the handful of methods the relay needs. Every failure,
    transport or API level, is raised as ``TelegramError``.
    """

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.username: Optional[str] = None
        self._base_url = f"{api_url.rstrip('/')}/bot{token}"
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def close(self) -> None:
        await self._client.aclose()

    async def _call(
        self,
        method: str,
        payload: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """
        Invoke a Bot API method and return its ``result``.

        The request URL embeds the token, so it is never logged.
        """
        try:
            response = await self._client.post(
                f"{self._base_url}/{method}",
                json=payload or {},
                timeout=timeout or self.timeout,
            )
        except httpx.TimeoutException:
            logger.error("Telegram request timed out", method=method)
            raise TelegramError(f"Telegram {method} request timed out")
        except httpx.RequestError as e:
            logger.error("Telegram request failed", method=method, error=str(e))
            raise TelegramError(f"Telegram {method} request failed: {e}")

        try:
            data = response.json()
        except ValueError:
            raise TelegramError(
                f"Telegram API error: {response.status_code} - invalid response body",
                error_code=response.status_code,
            )

        if not data.get("ok"):
            error_code = data.get("error_code", response.status_code)
            description = data.get("description", "Unknown error")
            raise TelegramError(
                f"Telegram API error: {error_code} - {description}",
                error_code=error_code,
                description=description,
            )

        return data.get("result")

    async def get_me(self) -> Dict[str, Any]:
        """Check the token and remember the bot's username."""
        me = await self._call("getMe")
        self.username = me.get("username")
        return me

    async def send_message(
        self,
        chat_id: int,
        text: str,
        *,
        parse_mode: Optional[str] = None,
        disable_web_page_preview: bool = False,
    ) -> Dict[str, Any]:
        """
        Send a text message.

        Args:
            chat_id: Target chat
            text: Message body
            parse_mode: "HTML", "MarkdownV2" or None for plain text
            disable_web_page_preview: Suppress link previews

        Returns:
            The sent Message object
        """
        payload: Dict[str, Any] = {
            "chat_id": chat_id,
            "text": text,
            "disable_web_page_preview": disable_web_page_preview,
        }
        if parse_mode:
            payload["parse_mode"] = parse_mode

        return await self._call("sendMessage", payload)

    async def get_updates(
        self,
        offset: int = 0,
        timeout: int = 60,
    ) -> List[Dict[str, Any]]:
        """
        Long poll for inbound updates.

        The HTTP timeout is extended past the poll timeout so an empty
        poll is not reported as a failure.
        """
        return await self._call(
            "getUpdates",
            {"offset": offset, "timeout": timeout},
            timeout=timeout + self.timeout,
        )
