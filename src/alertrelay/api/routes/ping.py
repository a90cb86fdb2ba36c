"""
Alert Relay - Ping Route
"""

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse, Response

from alertrelay.api.deps import get_bot, parse_chat_id
from alertrelay.api.schemas.responses import SendErrorResponse
from alertrelay.core.exceptions import InvalidChatIdError, TelegramError
from alertrelay.delivery.coordinator import MessageSender

logger = structlog.get_logger()
router = APIRouter()

PING_MESSAGE = "Some HTTP triggered notification by alert relay bot... {chat_id}"


@router.get("/ping/{chat_id}")
async def ping(
    chat_id: str,
    bot: MessageSender = Depends(get_bot),
) -> Response:
    """
    Send a test message to a chat.

    Useful to check that the bot was added to the chat and the id is right.
    """
    try:
        chat = parse_chat_id(chat_id)
    except InvalidChatIdError as e:
        logger.warning("Can't parse chat id", chat_id=chat_id)
        return SendErrorResponse(err=e.message).to_response(status.HTTP_503_SERVICE_UNAVAILABLE)

    logger.info("Bot test", chat_id=chat)
    text = PING_MESSAGE.format(chat_id=chat)

    try:
        await bot.send_message(chat, text)
    except TelegramError as e:
        logger.error("Ping message not delivered", chat_id=chat, error=e.message)
        return SendErrorResponse(err=e.message, message=text).to_response(
            status.HTTP_400_BAD_REQUEST
        )

    return PlainTextResponse(text)
