"""
UTC-first datetime utilities for the Medical Records Service.

- All datetimes are stored and processed in UTC
- Database storage: ISO 8601 strings with 'Z' suffix (SQLite stores as TEXT)
- Requests: hospitalization dates are accepted in common formats on save
  and only in exact ISO 8601 form on update (see ``parse_iso_strict``)

Usage:
    from core.datetime_utils import parse_datetime, format_iso

    dt = parse_datetime("2024-01-15T10:30:00+05:30")  # Converts to UTC
    iso_str = format_iso(dt)                            # "2024-01-15T05:00:00Z"
"""
import re
from datetime import datetime, timezone
from typing import Optional, Union

# YYYY-MM-DDTHH:MM:SS, optional fraction, then Z or a +hh:mm offset
STRICT_ISO_PATTERN = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:?\d{2})$"
)


def to_utc(dt: datetime) -> datetime:
    """
    Convert a datetime to UTC.

    - If datetime is naive (no timezone), assumes it's already UTC
    - If datetime has timezone, converts to UTC
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_datetime(value: Union[str, datetime]) -> datetime:
    """
    Parse a datetime value to UTC datetime.

    Accepts:
    - datetime object (returned after UTC conversion)
    - ISO 8601 string (with or without timezone)
    - Common date formats

    Raises:
        ValueError: If the value cannot be parsed.

    Examples:
        >>> parse_datetime("2024-01-15T10:30:00Z")
        datetime.datetime(2024, 1, 15, 10, 30, tzinfo=datetime.timezone.utc)

        >>> parse_datetime("15/01/2024")
        datetime.datetime(2024, 1, 15, 0, 0, tzinfo=datetime.timezone.utc)
    """
    if isinstance(value, datetime):
        return to_utc(value)

    if not isinstance(value, str):
        raise ValueError(f"Expected datetime or string, got {type(value).__name__}")

    value = value.strip()

    try:
        if value.endswith('Z'):
            value = value[:-1] + '+00:00'
        return to_utc(datetime.fromisoformat(value))
    except ValueError:
        pass

    formats = [
        "%Y-%m-%d %H:%M:%S",      # 2024-01-15 10:30:00
        "%Y-%m-%d %H:%M",         # 2024-01-15 10:30
        "%Y-%m-%d",               # 2024-01-15
        "%d/%m/%Y %H:%M:%S",      # 15/01/2024 10:30:00
        "%d/%m/%Y %H:%M",         # 15/01/2024 10:30
        "%d/%m/%Y",               # 15/01/2024
        "%d-%m-%Y",               # 15-01-2024
    ]

    for fmt in formats:
        try:
            return datetime.strptime(value, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue

    raise ValueError(f"Cannot parse datetime: '{value}'")


def parse_iso_strict(value: Union[str, datetime]) -> datetime:
    """
    Parse an exact ``YYYY-MM-DDTHH:MM:SS`` timestamp carrying ``Z`` or an offset.

    Raises:
        ValueError: If the value is not in that exact form or is not a real date.
    """
    if isinstance(value, datetime):
        return to_utc(value)
    if not isinstance(value, str) or not STRICT_ISO_PATTERN.match(value.strip()):
        raise ValueError(f"Not an ISO 8601 timestamp: '{value}'")
    return parse_datetime(value)


def format_iso(dt: datetime) -> str:
    """
    Format datetime to ISO 8601 string with UTC timezone.

    Example:
        >>> format_iso(datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc))
        '2024-01-15T10:30:00Z'
    """
    return to_utc(dt).strftime("%Y-%m-%dT%H:%M:%SZ")


def to_db_string(dt: Optional[datetime]) -> Optional[str]:
    """Convert an optional datetime to its canonical storage string."""
    return format_iso(dt) if dt is not None else None
