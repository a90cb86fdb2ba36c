"""Observability module - Prometheus metrics."""

from alertrelay.observability.metrics import (
    ALERTS_RECEIVED_TOTAL,
    CHUNKS_TOTAL,
    FALLBACK_NOTICES_TOTAL,
    TEMPLATE_LOADS_TOTAL,
    TEMPLATE_RENDERS_TOTAL,
    UPDATES_TOTAL,
    record_alert,
    record_chunk,
    record_fallback_notice,
    record_render,
    record_template_load,
    record_update,
)

__all__ = [
    "ALERTS_RECEIVED_TOTAL",
    "CHUNKS_TOTAL",
    "FALLBACK_NOTICES_TOTAL",
    "TEMPLATE_LOADS_TOTAL",
    "TEMPLATE_RENDERS_TOTAL",
    "UPDATES_TOTAL",
    "record_alert",
    "record_chunk",
    "record_fallback_notice",
    "record_render",
    "record_template_load",
    "record_update",
]
