from __future__ import annotations

from datetime import datetime, time
from typing import Optional


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def to_local(value: datetime) -> datetime:
    """Interpret a timestamp as server-local wall-clock time.

    Naive values are already local; aware values are converted.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def minutes_since_midnight(value: datetime | time) -> int:
    return value.hour * 60 + value.minute


def parse_hhmm(value: Optional[str], fallback: time) -> time:
    """Parse "HH:MM" (or "HH:MM:SS"); blank values give the fallback."""
    v = (value or "").strip()
    if not v:
        return fallback
    parts = v.split(":")
    try:
        hh = int(parts[0])
        mm = int(parts[1]) if len(parts) > 1 else 0
        return time(hh, mm)
    except ValueError as exc:
        raise ValueError(f"Invalid time of day: {value!r}") from exc


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp; a trailing "Z" is accepted."""
    v = (value or "").strip()
    if not v:
        return None
    if v.endswith("Z"):
        v = v[:-1] + "+00:00"
    return datetime.fromisoformat(v)
