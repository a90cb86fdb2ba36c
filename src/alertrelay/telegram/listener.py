"""
Alert Relay - Telegram Update Listener

Answers anyone talking to the bot with the id of their chat, which is
what has to go into the alert webhook URL.
"""

import asyncio
from typing import Any, Dict, Optional

import structlog

from alertrelay.core.exceptions import TelegramError
from alertrelay.observability.metrics import record_update
from alertrelay.telegram.client import TelegramBot

logger = structlog.get_logger()


class UpdateListener:
    """
    Polls Telegram for updates and replies with the chat id.

    One task long-polls ``getUpdates`` into an unbounded queue, another
    drains the queue. Replies are cheap and idempotent, so there is no
    backpressure between the two.
    """

    def __init__(
        self,
        bot: TelegramBot,
        poll_timeout: int = 60,
        retry_delay: float = 5.0,
    ):
        self.bot = bot
        self.poll_timeout = poll_timeout
        self.retry_delay = retry_delay
        self.queue: "asyncio.Queue[Dict[str, Any]]" = asyncio.Queue()
        self._offset = 0
        self._tasks: list = []

    def start(self) -> None:
        """Start polling and answering in the background."""
        self._tasks = [
            asyncio.create_task(self._poll(), name="telegram-poll"),
            asyncio.create_task(self._consume(), name="telegram-updates"),
        ]
        logger.info("Telegram update listener started", bot=self.bot.username)

    async def stop(self) -> None:
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []
        logger.info("Telegram update listener stopped")

    async def poll_once(self) -> int:
        """Fetch one batch of updates onto the queue. Returns the batch size."""
        updates = await self.bot.get_updates(offset=self._offset, timeout=self.poll_timeout)
        for update in updates:
            self._offset = max(self._offset, update["update_id"] + 1)
            self.queue.put_nowait(update)
        return len(updates)

    async def _poll(self) -> None:
        while True:
            try:
                await self.poll_once()
            except TelegramError as e:
                logger.warning("Polling Telegram updates failed", error=e.message)
                await asyncio.sleep(self.retry_delay)
            except Exception as e:
                logger.exception("Unexpected getUpdates response", error=str(e))
                await asyncio.sleep(self.retry_delay)

    async def _consume(self) -> None:
        while True:
            update = await self.queue.get()
            try:
                await self.consume_one(update)
            finally:
                self.queue.task_done()

    async def consume_one(self, update: Dict[str, Any]) -> Optional[int]:
        """Handle one queued update; a malformed update is logged and dropped."""
        try:
            return await self.handle(update)
        except Exception as e:
            logger.exception("Cannot handle update", update=update, error=str(e))
            record_update("failed")
            return None

    async def handle(self, update: Dict[str, Any]) -> Optional[int]:
        """
        React to one update.

        Returns:
            The chat id replied to, or None when the update was ignored
        """
        message = update.get("message")
        if message is None:
            logger.debug("Unknown message", update=update)
            record_update("ignored")
            return None

        chat = message.get("chat", {})
        new_members = message.get("new_chat_members") or []

        if new_members:
            for member in new_members:
                if member.get("username") == self.bot.username and chat.get("type") == "group":
                    return await self._introduce(chat["id"])
            record_update("ignored")
            return None

        if message.get("text"):
            return await self._introduce(chat["id"])

        record_update("ignored")
        return None

    async def _introduce(self, chat_id: int) -> int:
        record_update("introduced")
        try:
            await self.bot.send_message(chat_id, f"Chat id is '{chat_id}'")
        except TelegramError as e:
            logger.warning("Could not reply with chat id", chat_id=chat_id, error=e.message)
        return chat_id
