from __future__ import annotations

from datetime import date, datetime, time
from typing import Any, Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_optional_date(value: Optional[str]) -> Optional[date]:
    """Empty form fields mean "no bound"."""
    if not value or not value.strip():
        return None
    return parse_iso_date(value.strip())


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today_local() -> date:
    return now_local().date()


def clock_time(now: datetime) -> time:
    """Wall-clock time of day truncated to minutes (HH:MM)."""
    return time(hour=now.hour, minute=now.minute)


def format_clock(value: Optional[time]) -> str:
    return value.strftime("%H:%M") if value else ""


def parse_backend_time(value: Any) -> Optional[time]:
    """Normalize TIME column values returned by the backend.

    PostgREST returns TIME as a string ('08:30:00' or '08:30'); fixtures may
    already hold datetime.time.
    """

    if value is None or value == "":
        return None

    if isinstance(value, time):
        return value

    if isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) < 2:
            raise ValueError(f"Invalid time string: {value!r}")
        hours = int(parts[0])
        minutes = int(parts[1])
        seconds = int(float(parts[2])) if len(parts) >= 3 and parts[2] else 0
        return time(hour=hours, minute=minutes, second=seconds)

    raise TypeError(f"Unsupported TIME value type: {type(value)!r}")


def parse_backend_timestamp(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    # fromisoformat does not accept a trailing 'Z' before Python 3.11
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def parse_backend_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_iso_date(str(value)[:10])
