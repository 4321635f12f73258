from __future__ import annotations

from datetime import date, datetime, time
from typing import Any, Callable, Optional
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_TIMEZONE

Clock = Callable[[], datetime]


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_time_of_day(value: Any) -> time:
    """Parse a slot boundary ('08:00', '08:00:00' or datetime.time)."""
    if isinstance(value, time):
        return value

    parts = str(value).strip().split(":")
    if len(parts) < 2:
        raise ValueError(f"Invalid time string: {value!r}")
    hours = int(parts[0])
    minutes = int(parts[1])
    seconds = int(parts[2]) if len(parts) >= 3 and parts[2] else 0
    return time(hour=hours, minute=minutes, second=seconds)


def now_local(tz_name: str = DEFAULT_TIMEZONE) -> datetime:
    """Current wall-clock time in the club's time zone (naive).

    Note: Wrapped so tests can patch/mocked easier. The host TZ is ignored.
    """
    return datetime.now(ZoneInfo(tz_name)).replace(tzinfo=None)


def zone_clock(tz_name: str = DEFAULT_TIMEZONE) -> Clock:
    return lambda: now_local(tz_name)


def to_local_naive(value: datetime, *, tz_name: str = DEFAULT_TIMEZONE) -> datetime:
    """Drop tzinfo after converting aware instants to the club's wall clock."""
    if value.tzinfo is None:
        return value
    return value.astimezone(ZoneInfo(tz_name)).replace(tzinfo=None)


def parse_check_in_time(value: Any, *, clock: Clock, tz_name: str = DEFAULT_TIMEZONE) -> datetime:
    """Resolve the submitted check-in instant.

    Accepts datetime objects or ISO-8601 strings (a trailing 'Z' means UTC).
    Missing or unparsable values fall back to ``clock()``.
    """

    parsed: Optional[datetime] = None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            parsed = None

    if parsed is None:
        parsed = clock()
    return to_local_naive(parsed, tz_name=tz_name)
