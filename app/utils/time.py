"""Time utility helpers."""

from __future__ import annotations

import re
from datetime import UTC, datetime, timedelta

_ELAPSED_RE = re.compile(r"^\s*(\d{1,3}):(\d{2})(?::(\d{2}))?\s*$")


def now_utc() -> datetime:
    """Return current timezone-aware UTC datetime."""
    return datetime.now(tz=UTC)


def parse_iso_datetime(value: str | datetime) -> datetime:
    """Parse a stored timestamp into an aware UTC datetime."""
    if isinstance(value, str):
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        parsed = value

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def expires_in(days: int = 0, minutes: int = 0) -> datetime:
    """Return an aware UTC timestamp ``days``/``minutes`` from now."""
    return now_utc() + timedelta(days=days, minutes=minutes)


def is_elapsed_time(value: str) -> bool:
    """Return True when ``value`` looks like ``HH:MM`` or ``HH:MM:SS``."""
    match = _ELAPSED_RE.match(value)
    if not match:
        return False
    minutes = int(match.group(2))
    seconds = int(match.group(3) or 0)
    return minutes < 60 and seconds < 60


def elapsed_seconds(value: str | None, include_seconds: bool = True) -> int | None:
    """Convert a free-text ``HH:MM[:SS]`` elapsed time into seconds.

    Returns ``None`` for missing, empty, or unparseable values. With
    ``include_seconds=False`` only hours and minutes are counted.
    """
    if not value or not value.strip():
        return None

    match = _ELAPSED_RE.match(value)
    if not match:
        return None

    hours = int(match.group(1))
    minutes = int(match.group(2))
    total = hours * 3600 + minutes * 60
    if include_seconds and match.group(3):
        total += int(match.group(3))
    return total


def calendar_stamp(value: datetime) -> str:
    """Format a datetime the way calendar template URLs expect (UTC, basic ISO)."""
    return parse_iso_datetime(value).strftime("%Y%m%dT%H%M%SZ")
