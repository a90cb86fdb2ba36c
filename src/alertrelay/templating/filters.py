"""
Alert Relay - Template Filters

Helpers exposed to alert templates for dates, numbers and sizes.
"""

import re
from datetime import datetime, timezone, tzinfo
from typing import Any, Optional, Tuple

DEFAULT_DATE_FORMAT = "%d/%m/%Y %H:%M:%S"

BYTE_UNITS = ["B", "KB", "MB", "GB", "TB", "PB", "EB"]
BINARY_UNITS = ["B", "KiB", "MiB", "GiB", "TiB", "PiB", "EiB"]

# Alertmanager sends nanosecond precision, datetime keeps microseconds
_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


def parse_timestamp(value: Any) -> datetime:
    """
    Parse an RFC 3339 timestamp, a datetime or a unix epoch.

    Naive values are assumed to be UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        parsed = datetime.fromtimestamp(value, tz=timezone.utc)
    elif isinstance(value, str):
        text = _FRACTION_RE.sub(r"\1", value.strip())
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    else:
        raise ValueError(f"cannot parse timestamp from {type(value).__name__}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_date(
    value: Any,
    fmt: Optional[str] = None,
    *,
    zone: tzinfo = timezone.utc,
    default_format: str = DEFAULT_DATE_FORMAT,
) -> str:
    """
    Format a timestamp in the configured time zone.

    Args:
        value: RFC 3339 string, datetime or unix epoch
        fmt: strftime format overriding the configured one
        zone: Target time zone
        default_format: Format used when ``fmt`` is not given

    Returns:
        The formatted date
    """
    parsed = parse_timestamp(value)
    try:
        parsed = parsed.astimezone(zone)
    except OverflowError:
        # "0001-01-01T00:00:00Z" is Alertmanager's unset endsAt
        pass
    return parsed.strftime(fmt or default_format)


def format_float(value: Any, precision: int = 2) -> str:
    """Round a number (or numeric string) to ``precision`` decimals."""
    return f"{float(value):.{int(precision)}f}"


def _scale(amount: float, units: list, start: int = 0) -> Tuple[float, str]:
    index = start
    while abs(amount) >= 1024 and index < len(units) - 1:
        amount /= 1024
        index += 1
    return amount, units[index]


def format_bytes(value: Any, precision: int = 2) -> str:
    """Render a byte count with binary prefixes, e.g. ``1.50 KiB``."""
    amount, unit = _scale(float(value), BINARY_UNITS)
    return f"{amount:.{int(precision)}f} {unit}"


def format_measure_unit(value: Any, unit_format: str, *, split_token: str = "|") -> str:
    """
    Render a value expressed in a unit described by ``unit_format``.

    ``unit_format`` is ``<unit><split_token><precision>``, for instance ``kb|2``.
    Byte units are scaled up to the most readable multiple, any other
    unit is printed as is.
    """
    unit, _, precision_text = str(unit_format).partition(split_token)
    unit = unit.strip()
    precision = int(precision_text) if precision_text.strip() else 2
    amount = float(value)

    upper = unit.upper()
    if upper in BYTE_UNITS:
        amount, unit = _scale(amount, BYTE_UNITS, BYTE_UNITS.index(upper))

    if not unit:
        return f"{amount:.{precision}f}"
    return f"{amount:.{precision}f} {unit}"
