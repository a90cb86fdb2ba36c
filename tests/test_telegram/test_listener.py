"""
Alert Relay - Telegram Update Listener Tests
"""

import asyncio
from typing import Any, Dict, List

import pytest

from alertrelay.core.exceptions import TelegramError
from alertrelay.telegram.listener import UpdateListener


class FakeBot:
    """Bot double serving canned updates."""

    def __init__(self, batches: List[List[Dict[str, Any]]] = None, fail_send: bool = False):
        self.username = "relay_bot"
        self.batches = list(batches or [])
        self.fail_send = fail_send
        self.offsets: List[int] = []
        self.sent: List[tuple] = []

    async def get_updates(self, offset: int = 0, timeout: int = 60):
        self.offsets.append(offset)
        await asyncio.sleep(0)
        return self.batches.pop(0) if self.batches else []

    async def send_message(self, chat_id: int, text: str, **kwargs):
        self.sent.append((chat_id, text))
        if self.fail_send:
            raise TelegramError("Telegram API error: 403 - Forbidden", error_code=403)
        return {"message_id": 1}


def text_update(update_id: int, chat_id: int, text: str = "hello") -> Dict[str, Any]:
    return {
        "update_id": update_id,
        "message": {"chat": {"id": chat_id, "type": "private"}, "text": text},
    }


class TestUpdateListener:
    """Tests for replying with chat ids."""

    @pytest.mark.asyncio
    async def test_text_message_gets_chat_id(self):
        bot = FakeBot()
        listener = UpdateListener(bot)

        replied = await listener.handle(text_update(1, 42))

        assert replied == 42
        assert bot.sent == [(42, "Chat id is '42'")]

    @pytest.mark.asyncio
    async def test_bot_added_to_group(self):
        bot = FakeBot()
        listener = UpdateListener(bot)
        update = {
            "update_id": 2,
            "message": {
                "chat": {"id": -100, "type": "group"},
                "new_chat_members": [{"username": "someone"}, {"username": "relay_bot"}],
            },
        }

        assert await listener.handle(update) == -100
        assert bot.sent == [(-100, "Chat id is '-100'")]

    @pytest.mark.asyncio
    async def test_other_member_joining_is_ignored(self):
        bot = FakeBot()
        listener = UpdateListener(bot)
        update = {
            "update_id": 3,
            "message": {
                "chat": {"id": -100, "type": "group"},
                "new_chat_members": [{"username": "someone"}],
            },
        }

        assert await listener.handle(update) is None
        assert bot.sent == []

    @pytest.mark.asyncio
    async def test_update_without_message_is_ignored(self):
        bot = FakeBot()
        listener = UpdateListener(bot)

        assert await listener.handle({"update_id": 4, "edited_message": {}}) is None
        assert bot.sent == []

    @pytest.mark.asyncio
    async def test_reply_failure_is_not_raised(self):
        bot = FakeBot(fail_send=True)
        listener = UpdateListener(bot)

        assert await listener.handle(text_update(1, 42)) == 42

    @pytest.mark.asyncio
    async def test_poll_queues_updates_and_advances_offset(self):
        bot = FakeBot(batches=[[text_update(7, 1), text_update(8, 2)], [text_update(9, 3)]])
        listener = UpdateListener(bot, poll_timeout=1)

        assert await listener.poll_once() == 2
        assert await listener.poll_once() == 1

        assert bot.offsets == [0, 9]
        assert listener.queue.qsize() == 3
        assert listener.queue.get_nowait()["update_id"] == 7

    @pytest.mark.asyncio
    async def test_malformed_update_is_dropped(self):
        bot = FakeBot()
        listener = UpdateListener(bot)

        assert await listener.consume_one({"update_id": 1, "message": {"text": "hi"}}) is None
        assert bot.sent == []

    @pytest.mark.asyncio
    async def test_consumer_survives_malformed_update(self):
        bot = FakeBot()
        listener = UpdateListener(bot)
        listener.queue.put_nowait({"update_id": 1, "message": {"text": "no chat"}})
        listener.queue.put_nowait(text_update(2, 42))

        task = asyncio.create_task(listener._consume())
        try:
            await asyncio.wait_for(listener.queue.join(), timeout=1)
        finally:
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

        assert bot.sent == [(42, "Chat id is '42'")]

    @pytest.mark.asyncio
    async def test_poller_survives_malformed_batch(self):
        bot = FakeBot(batches=[[{"message": {"text": "no update id"}}], [text_update(5, 1)]])
        listener = UpdateListener(bot, poll_timeout=1, retry_delay=0)

        task = asyncio.create_task(listener._poll())
        try:
            update = await asyncio.wait_for(listener.queue.get(), timeout=1)
        finally:
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

        assert update["update_id"] == 5
