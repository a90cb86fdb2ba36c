"""
Alert Relay - Delivery Models
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

SENT_BODY = "telegram msg sent."
FALLBACK_NOTICE = "Error sending message, checkout logs"


@dataclass
class ChunkResponse:
    """Response owed to the caller for one chunk."""
    status_code: int
    body: Union[str, Dict[str, Any]]

    @property
    def is_error(self) -> bool:
        return self.status_code >= 400


@dataclass
class ChunkOutcome:
    """Result of sending one chunk."""
    index: int
    chunk: str
    ack: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    @property
    def delivered(self) -> bool:
        return self.error is None


@dataclass
class DeliveryReport:
    """Outcome of delivering all chunks of one rendered alert."""

    chat_id: int
    source_text: str
    outcomes: List[ChunkOutcome] = field(default_factory=list)
    responses: List[ChunkResponse] = field(default_factory=list)
    notices_attempted: int = 0

    @property
    def delivered(self) -> bool:
        """Return True if every chunk was delivered."""
        return all(outcome.delivered for outcome in self.outcomes)

    @property
    def success_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.delivered)

    @property
    def failure_count(self) -> int:
        return len(self.outcomes) - self.success_count

    @property
    def first_response(self) -> Optional[ChunkResponse]:
        """Response emitted for the first chunk, if any chunk was sent."""
        return self.responses[0] if self.responses else None
