"""
kneeklinic/utils/time_utils.py

Purpose: Time helpers

- Session duration formatting
- ISO timestamps for the backend
"""

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def format_duration(seconds: int) -> str:
    """
    Formats elapsed seconds as HH:MM:SS.
    """
    seconds = max(0, int(seconds))
    hrs = seconds // 3600
    mins = (seconds % 3600) // 60
    secs = seconds % 60
    return f"{hrs:02d}:{mins:02d}:{secs:02d}"


def to_iso(dt: Optional[datetime]) -> Optional[str]:
    """
    Serializes a datetime the way the backend expects (ISO 8601, UTC, Z suffix).
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_appointment_date(dt: datetime) -> str:
    """
    Long date used on appointment cards, e.g. "Monday, March 2, 2026".
    """
    return f"{dt.strftime('%A')}, {dt.strftime('%B')} {dt.day}, {dt.year}"
