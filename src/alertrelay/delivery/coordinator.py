"""
Alert Relay - Delivery Coordinator

Sends the chunks of one rendered alert to a chat, in order, and reports
the outcome of each. A failed chunk does not stop the remaining ones.
"""

from typing import Any, Callable, Dict, List, Optional, Protocol

import structlog

from alertrelay.delivery.models import (
    FALLBACK_NOTICE,
    SENT_BODY,
    ChunkOutcome,
    ChunkResponse,
    DeliveryReport,
)
from alertrelay.observability.metrics import record_chunk, record_fallback_notice

logger = structlog.get_logger()

PARSE_MODE_HTML = "HTML"

Responder = Callable[[ChunkResponse], None]


class MessageSender(Protocol):
    """Anything able to post a text message to a chat."""

    async def send_message(
        self,
        chat_id: int,
        text: str,
        *,
        parse_mode: Optional[str] = None,
        disable_web_page_preview: bool = False,
    ) -> Dict[str, Any]:
        """Send a message. Returns the sent message, raises on failure."""
        ...


class DeliveryCoordinator:
    """
    Delivers rendered alerts chunk by chunk.

    Every chunk produces one ``ChunkResponse``, handed to the optional
    responder as soon as the chunk has been attempted. A failed chunk
    also triggers one best effort notice to the chat; that notice is
    never retried and its own failure is ignored.
    """

    def __init__(self, sender: MessageSender):
        self.sender = sender

    async def deliver(
        self,
        chat_id: int,
        chunks: List[str],
        source_text: str,
        respond: Optional[Responder] = None,
    ) -> DeliveryReport:
        """
        Send chunks to a chat in order.

        Args:
            chat_id: Target Telegram chat
            chunks: Pieces of the rendered alert
            source_text: The whole rendered alert, echoed back on failure
            respond: Called with the response for each chunk

        Returns:
            DeliveryReport with one outcome per chunk
        """
        report = DeliveryReport(chat_id=chat_id, source_text=source_text)

        for index, chunk in enumerate(chunks):
            logger.debug("Final message", chat_id=chat_id, chunk=index, text=chunk)

            try:
                ack = await self.sender.send_message(
                    chat_id,
                    chunk,
                    parse_mode=PARSE_MODE_HTML,
                    disable_web_page_preview=True,
                )
            except Exception as e:
                logger.error("Error sending message", chat_id=chat_id, chunk=index, error=str(e))
                record_chunk("failed")
                report.outcomes.append(ChunkOutcome(index=index, chunk=chunk, error=str(e)))
                response = ChunkResponse(
                    status_code=503,
                    body={
                        "err": str(e),
                        "message": chunk,
                        "srcmsg": source_text,
                    },
                )
                self._emit(report, response, respond)
                await self._send_notice(chat_id)
                report.notices_attempted += 1
                continue

            record_chunk("sent")
            report.outcomes.append(ChunkOutcome(index=index, chunk=chunk, ack=ack))
            self._emit(report, ChunkResponse(status_code=200, body=SENT_BODY), respond)

        logger.info(
            "Delivery complete",
            chat_id=chat_id,
            sent=report.success_count,
            failed=report.failure_count,
        )
        return report

    def _emit(
        self,
        report: DeliveryReport,
        response: ChunkResponse,
        respond: Optional[Responder],
    ) -> None:
        report.responses.append(response)
        if respond is not None:
            respond(response)

    async def _send_notice(self, chat_id: int) -> None:
        record_fallback_notice()
        try:
            await self.sender.send_message(chat_id, FALLBACK_NOTICE)
        except Exception as e:
            logger.debug("Fallback notice not delivered", chat_id=chat_id, error=str(e))
