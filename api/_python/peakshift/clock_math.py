"""
Clock-time arithmetic.

Times of day are "HH:MM" strings (24-hour). Arithmetic wraps modulo 24 hours
and never tracks the day boundary, so callers that care about calendar dates
must carry them separately.
"""

import math
import re
from datetime import date, datetime, time, timedelta

import pytz

from .errors import MalformedInput, MalformedTime

MINUTES_PER_DAY = 24 * 60
HALF_DAY_MINUTES = 12 * 60

_CLOCK_PATTERN = re.compile(r"([0-9]{2}):([0-9]{2})")


def parse_time(time_str: str) -> time:
    """Parse "HH:MM" string to time object.

    Raises:
        MalformedTime: if the string is not a valid 24-hour clock time
    """
    if not isinstance(time_str, str):
        raise MalformedTime(f"Clock time must be a string, got {type(time_str).__name__}")
    match = _CLOCK_PATTERN.fullmatch(time_str)
    if not match:
        raise MalformedTime(f"Invalid clock time (expected HH:MM): {time_str!r}")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise MalformedTime(f"Clock time out of range: {time_str!r}")
    return time(hour, minute)


def time_to_minutes(t: time) -> int:
    """Convert time to minutes since midnight."""
    return t.hour * 60 + t.minute


def minutes_to_time(minutes: int) -> time:
    """Convert minutes since midnight to time (handles wrap-around)."""
    minutes = minutes % MINUTES_PER_DAY
    return time(minutes // 60, minutes % 60)


def format_time(t: time) -> str:
    """Format time as "HH:MM"."""
    return f"{t.hour:02d}:{t.minute:02d}"


def format_hour(hour: int) -> str:
    """Format an hour of day as "HH:00", wrapping negatives and values past 23."""
    return f"{hour % 24:02d}:00"


def clock_minutes(time_str: str) -> int:
    """Minutes since midnight for an "HH:MM" string."""
    return time_to_minutes(parse_time(time_str))


def _whole_minutes(delta_minutes: int | float) -> int:
    if isinstance(delta_minutes, bool) or not isinstance(delta_minutes, (int, float)):
        raise MalformedTime(f"Minute delta must be a number, got {delta_minutes!r}")
    if not math.isfinite(delta_minutes) or delta_minutes != int(delta_minutes):
        raise MalformedTime(f"Minute delta must be a finite whole number, got {delta_minutes!r}")
    return int(delta_minutes)


def add_minutes(time_str: str, delta_minutes: int | float) -> str:
    """
    Shift an "HH:MM" clock time by a number of minutes.

    Args:
        time_str: Starting time, "HH:MM"
        delta_minutes: Minutes to shift (positive = later, negative = earlier)

    Returns:
        Shifted time as "HH:MM" (wraps around midnight)

    Raises:
        MalformedTime: on a malformed clock time or a non-finite/fractional delta
    """
    delta = _whole_minutes(delta_minutes)
    return format_time(minutes_to_time(clock_minutes(time_str) + delta))


def signed_offset_minutes(from_time: str, to_time: str) -> int:
    """
    Shortest signed distance from one clock time to another.

    Result is canonicalized into (-720, 720]: negative means to_time is
    earlier on the clock, positive means later. Exactly 12h apart is +720.
    """
    diff = (clock_minutes(to_time) - clock_minutes(from_time)) % MINUTES_PER_DAY
    if diff > HALF_DAY_MINUTES:
        diff -= MINUTES_PER_DAY
    return diff


def get_current_datetime_in_tz(tz_name: str) -> datetime:
    """
    Get current datetime in the specified timezone.

    Server clocks run in UTC, but plan dates have to follow the user's own
    calendar day.

    Args:
        tz_name: IANA timezone name (e.g., "America/Los_Angeles")

    Returns:
        Current datetime in the specified timezone (naive, for local comparisons)

    Raises:
        MalformedInput: if the timezone name is unknown
    """
    tz = resolve_timezone(tz_name)
    now_utc = datetime.now(pytz.UTC)
    return now_utc.astimezone(tz).replace(tzinfo=None)


def resolve_timezone(tz_name: str) -> pytz.BaseTzInfo:
    """Look up an IANA timezone, raising MalformedInput for unknown names."""
    try:
        return pytz.timezone(tz_name)
    except (pytz.UnknownTimeZoneError, AttributeError) as exc:
        raise MalformedInput(f"Unknown timezone: {tz_name!r}") from exc


def date_labels(start: date, days: int) -> list[str]:
    """ISO date labels ("YYYY-MM-DD") for `days` consecutive days from start."""
    return [(start + timedelta(days=offset)).isoformat() for offset in range(days)]
