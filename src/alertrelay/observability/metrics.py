"""
Alert Relay - Prometheus Metrics
"""

from prometheus_client import Counter, Info

from alertrelay import __version__

# Application info
APP_INFO = Info(
    "alertrelay_app",
    "Alert Relay application information",
)
APP_INFO.info({
    "version": __version__,
    "name": "alertrelay",
})

# Inbound alert metrics
ALERTS_RECEIVED_TOTAL = Counter(
    "alertrelay_alerts_received_total",
    "Total number of alert notifications received",
    ["status"],
)

# Template metrics
TEMPLATE_LOADS_TOTAL = Counter(
    "alertrelay_template_loads_total",
    "Total number of template loads from disk",
    ["status"],
)

TEMPLATE_RENDERS_TOTAL = Counter(
    "alertrelay_template_renders_total",
    "Total number of template executions",
    ["status"],
)

# Delivery metrics
CHUNKS_TOTAL = Counter(
    "alertrelay_chunks_total",
    "Total number of message chunks sent to Telegram",
    ["status"],
)

FALLBACK_NOTICES_TOTAL = Counter(
    "alertrelay_fallback_notices_total",
    "Total number of send failure notices attempted",
)

# Update listener metrics
UPDATES_TOTAL = Counter(
    "alertrelay_updates_total",
    "Total number of inbound Telegram updates handled",
    ["kind"],
)


def record_alert(status: str) -> None:
    """Record an inbound alert by outcome (delivered, failed, invalid, render_error)."""
    ALERTS_RECEIVED_TOTAL.labels(status=status).inc()


def record_template_load(status: str) -> None:
    TEMPLATE_LOADS_TOTAL.labels(status=status).inc()


def record_render(status: str) -> None:
    TEMPLATE_RENDERS_TOTAL.labels(status=status).inc()


def record_chunk(status: str) -> None:
    CHUNKS_TOTAL.labels(status=status).inc()


def record_fallback_notice() -> None:
    FALLBACK_NOTICES_TOTAL.inc()


def record_update(kind: str) -> None:
    UPDATES_TOTAL.labels(kind=kind).inc()
