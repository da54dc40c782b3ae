"""Weekday anchors and wall-clock time parsing for the fixed meeting week."""

import re
from datetime import date, datetime, time, timedelta
from typing import get_args

from .types import Day

DAYS: tuple[str, ...] = get_args(Day)

# TPAC 2025 ran Monday 10 to Friday 14 November
DEFAULT_WEEK_START = date(2025, 11, 10)

_HHMM = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")
_RANGE_SEPARATOR = re.compile(r"\s*[-–]\s*")


def is_day(candidate: object) -> bool:
    return candidate in DAYS


def day_anchor(day: str | None, week_start: date = DEFAULT_WEEK_START) -> datetime | None:
    """Return midnight of *day* within the week starting on *week_start*."""
    if not day or day.lower() not in DAYS:
        return None
    offset = DAYS.index(day.lower())
    return datetime.combine(week_start + timedelta(days=offset), time())


def parse_clock(value: str | None) -> time | None:
    """Parse a 24-hour ``HH:MM`` string, or return ``None`` if malformed."""
    if value is None:
        return None
    match = _HHMM.match(value)
    if not match:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None
    return time(hours, minutes)


def time_string_to_datetime(anchor: datetime | None, value: str | None) -> datetime | None:
    """Combine a day anchor with an ``HH:MM`` string."""
    clock = parse_clock(value)
    if anchor is None or clock is None:
        return None
    return anchor + timedelta(hours=clock.hour, minutes=clock.minute)


def parse_time_range(
    anchor: datetime | None, value: str | None
) -> tuple[datetime | None, datetime | None]:
    """Parse ``"HH:MM - HH:MM"`` (hyphen or en-dash) against *anchor*.

    Returns ``(None, None)`` when the range cannot be split into two
    endpoints; an unparseable endpoint comes back as ``None`` on its own.
    """
    if anchor is None or not value:
        return None, None
    parts = _RANGE_SEPARATOR.split(value.strip())
    if len(parts) != 2:
        return None, None
    return (
        time_string_to_datetime(anchor, parts[0]),
        time_string_to_datetime(anchor, parts[1]),
    )


def pretty_day(day: str | None) -> str:
    return day.capitalize() if day else "???"


def format_clock(dt: datetime | None) -> str:
    """Format a datetime as ``HH:MM`` for display, ``??`` if missing."""
    return dt.strftime("%H:%M") if dt else "??"
