"""
Alert Relay - Alert Routes
"""

from typing import Any, Dict

import structlog
from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.concurrency import run_in_threadpool

from alertrelay.api.deps import (
    get_coordinator,
    get_renderer,
    get_settings,
    get_template_store,
    parse_chat_id,
)
from alertrelay.api.schemas.responses import RenderErrorResponse, SendErrorResponse
from alertrelay.chunking import split_text
from alertrelay.core.config import Settings
from alertrelay.core.exceptions import InvalidChatIdError, TemplateRenderError
from alertrelay.delivery.coordinator import DeliveryCoordinator
from alertrelay.delivery.models import ChunkResponse
from alertrelay.observability.metrics import record_alert
from alertrelay.templating.renderer import TemplateRenderer
from alertrelay.templating.store import DEFAULT_TEMPLATE, TemplateStore

logger = structlog.get_logger()
router = APIRouter()

NOTHING_TO_SEND = "nothing to send."


async def read_payload(request: Request) -> Dict[str, Any]:
    """Decode the request body, anything but a JSON object becomes an empty payload."""
    try:
        payload = await request.json()
    except ValueError:
        payload = None

    if not isinstance(payload, dict):
        logger.warning("Alert body is not a JSON object, using an empty payload")
        return {}
    return payload


def chunk_response(response: ChunkResponse) -> Response:
    if isinstance(response.body, dict):
        return JSONResponse(status_code=response.status_code, content=response.body)
    return PlainTextResponse(response.body, status_code=response.status_code)


@router.post("/alert/{chat_id}")
async def post_alert(
    chat_id: str,
    request: Request,
    template: str = Query(""),
    settings: Settings = Depends(get_settings),
    store: TemplateStore = Depends(get_template_store),
    renderer: TemplateRenderer = Depends(get_renderer),
    coordinator: DeliveryCoordinator = Depends(get_coordinator),
) -> Response:
    """
    Render an Alertmanager notification and send it to a chat.

    The response mirrors the outcome of the first chunk; later chunks
    are still sent and their failures are reported to the chat.
    """
    logger.info("Bot alert post", chat_id=chat_id, template=template or DEFAULT_TEMPLATE)

    try:
        chat = parse_chat_id(chat_id)
    except InvalidChatIdError as e:
        logger.warning("Can't parse chat id", chat_id=chat_id)
        record_alert("invalid")
        return SendErrorResponse(err=e.message).to_response(status.HTTP_503_SERVICE_UNAVAILABLE)

    payload = await read_payload(request)
    logger.debug("Alert JSON", chat_id=chat, payload=payload)

    handle = await run_in_threadpool(store.resolve, template)

    try:
        text = renderer.render(handle, payload)
    except TemplateRenderError as e:
        record_alert("render_error")
        return RenderErrorResponse(
            err=e.message,
            template=template or DEFAULT_TEMPLATE,
        ).to_response()

    chunks = split_text(text, settings.split_msg_byte)
    if not chunks:
        logger.warning("Template rendered an empty message", chat_id=chat)
        record_alert("empty")
        return PlainTextResponse(NOTHING_TO_SEND)

    report = await coordinator.deliver(chat, chunks, text)
    record_alert("delivered" if report.delivered else "failed")

    return chunk_response(report.first_response)
