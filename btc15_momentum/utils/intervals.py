"""
Interval arithmetic for UTC-aligned trading intervals.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

MINUTE_MS = 60_000
HOUR_MS = 60 * MINUTE_MS


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes, convert aware ones."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_epoch_ms(dt: Optional[datetime] = None) -> int:
    """Epoch milliseconds of dt (default: now)."""
    dt = as_utc(dt) if dt is not None else utc_now()
    return int(dt.timestamp() * 1000)


def next_boundary(now: datetime, interval_minutes: int = 15) -> datetime:
    """
    Next interval boundary strictly after the current minute.

    12:07:30 -> 12:15:00, 12:14:03 -> 12:15:00, 12:15:00 -> 12:30:00.
    """
    now = as_utc(now).replace(second=0, microsecond=0)
    remainder = now.minute % interval_minutes
    return now + timedelta(minutes=interval_minutes - remainder)


def interval_key(interval_start: datetime) -> str:
    """Identifier for one interval: its UTC start instant in ISO-8601."""
    return as_utc(interval_start).isoformat()


def seconds_until_next_minute(now: datetime) -> float:
    return 60.0 - (now.second + now.microsecond / 1_000_000)
