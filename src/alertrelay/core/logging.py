"""
Alert Relay - Structured Logging Configuration
"""

import logging
import re
import sys
from typing import Any, Dict

import structlog

# Bot API URLs carry the token: https://api.telegram.org/bot<id>:<secret>/method
_BOT_TOKEN_RE = re.compile(r"bot\d+:[A-Za-z0-9_-]+")


def setup_logging(debug: bool = False) -> None:
    """Configure structured logging with structlog."""

    log_level = logging.DEBUG if debug else logging.INFO

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    # httpx logs every request line at INFO, which would leak the bot token
    logging.getLogger("httpx").setLevel(logging.WARNING)

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        token_filter_processor,
    ]

    # Debug: Pretty console output
    if debug:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=True),
        ]
    else:
        # Production: JSON output for log aggregation
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def token_filter_processor(
    logger: Any, method_name: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """Mask bot tokens in string values, e.g. URLs quoted in httpx errors."""
    for key, value in event_dict.items():
        if isinstance(value, str) and "bot" in value:
            event_dict[key] = _BOT_TOKEN_RE.sub("bot[REDACTED]", value)
    return event_dict
