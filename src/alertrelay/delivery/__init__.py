"""Delivery module - Ordered chunk delivery with failure reporting."""

from alertrelay.delivery.coordinator import DeliveryCoordinator, MessageSender
from alertrelay.delivery.models import (
    FALLBACK_NOTICE,
    SENT_BODY,
    ChunkOutcome,
    ChunkResponse,
    DeliveryReport,
)

__all__ = [
    "FALLBACK_NOTICE",
    "SENT_BODY",
    "ChunkOutcome",
    "ChunkResponse",
    "DeliveryCoordinator",
    "DeliveryReport",
    "MessageSender",
]
