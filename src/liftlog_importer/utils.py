"""Utility functions."""
import math
from datetime import datetime, timezone
from typing import Iterable, Optional


ISO_FORMATS = (
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S",
)

STRONG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def to_int(s: Optional[str], default: int = 0) -> int:
    """Convert string to int, returning ``default`` if conversion fails."""
    try:
        return int(str(s).strip()) if s is not None else default
    except (TypeError, ValueError):
        return default


def to_float(s: Optional[str], default: float = 0.0) -> float:
    """Convert string to float, returning ``default`` if conversion fails or the value is nan/inf."""
    try:
        value = float(str(s).strip()) if s is not None else default
    except (TypeError, ValueError):
        return default
    return value if math.isfinite(value) else default


def as_utc(value: datetime) -> datetime:
    """Treat a naive datetime as UTC; convert an aware one to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_datetime(value: Optional[str], formats: Iterable[str] = ISO_FORMATS) -> Optional[datetime]:
    """Parse ``value`` with the first matching format, or return None."""
    if not value:
        return None
    text = value.strip()
    # strptime's %z does not accept a bare "Z" before Python 3.11
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    for fmt in formats:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp, with or without fractional seconds."""
    parsed = parse_datetime(value, ISO_FORMATS)
    if parsed is not None:
        return parsed
    try:
        return datetime.fromisoformat(value.strip()) if value else None
    except ValueError:
        return None
