"""
Alert Relay - Custom Exceptions
"""

from typing import Any, Dict, Optional


class AlertRelayError(Exception):
    """Base exception for Alert Relay."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(AlertRelayError):
    """Raised when the service cannot be configured."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="CONFIGURATION_ERROR", details=details)


class TemplateLoadError(AlertRelayError):
    """Raised when a template file cannot be read or compiled."""

    def __init__(self, message: str, path: str = "unknown"):
        super().__init__(
            message=message,
            code="TEMPLATE_LOAD_ERROR",
            details={"path": path},
        )


class TemplateRenderError(AlertRelayError):
    """Raised when a template fails against a payload."""

    def __init__(self, message: str, template: str = "unknown"):
        super().__init__(
            message=message,
            code="TEMPLATE_RENDER_ERROR",
            details={"template": template},
        )


class TelegramError(AlertRelayError):
    """Raised when a Telegram Bot API call fails."""

    def __init__(
        self,
        message: str,
        error_code: int = 0,
        description: Optional[str] = None,
    ):
        self.error_code = error_code
        self.description = description
        super().__init__(
            message=message,
            code="TELEGRAM_ERROR",
            details={"error_code": error_code, "description": description},
        )


class InvalidChatIdError(AlertRelayError):
    """Raised when a chat id path parameter is not an integer."""

    def __init__(self, raw: str):
        super().__init__(
            message=f"invalid chat id {raw!r}: must be a 64-bit integer",
            code="INVALID_CHAT_ID",
            details={"chat_id": raw},
        )
