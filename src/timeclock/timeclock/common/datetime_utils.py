from __future__ import annotations

from datetime import datetime, timedelta


def now_local() -> datetime:
    """Current local time, truncated to whole seconds (DATETIME precision).

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now().replace(microsecond=0)


def format_duration(value: timedelta) -> str:
    """Format a duration as HH:MM."""
    total_minutes = int(value.total_seconds() // 60)
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def to_iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None
