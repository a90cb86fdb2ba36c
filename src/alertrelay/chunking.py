"""
Alert Relay - Message Chunking

Telegram rejects messages over 4096 characters, so rendered alerts are
cut into pieces before sending. Pieces are cut on character boundaries,
never inside a multi-byte sequence.
"""

from typing import List

DEFAULT_CHUNK_SIZE = 4000


def split_text(text: str, size: int = DEFAULT_CHUNK_SIZE) -> List[str]:
    """
    Split text into consecutive pieces of at most ``size`` characters.

    Every piece but the last holds exactly ``size`` characters. Empty
    text gives no pieces at all.

    Args:
        text: Rendered message
        size: Maximum number of characters per piece

    Returns:
        The pieces, in original order

    Raises:
        ValueError: If size is not positive
    """
    if size <= 0:
        raise ValueError(f"chunk size must be positive, got {size}")

    return [text[start:start + size] for start in range(0, len(text), size)]
