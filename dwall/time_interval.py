"""Time-of-day interval checks, including intervals that wrap past midnight."""

import re
from datetime import time
from typing import Union


MINUTES_PER_DAY = 24 * 60

_HHMM_RE = re.compile(r"^([0-9]{1,2}):([0-9]{2})$")

TimeLike = Union[time, str]


class TimeParseError(ValueError):
    """Raised when a value is not a valid HH:mm time of day."""


def parse_time(value: str) -> time:
    """
    Parse an "HH:mm" string into a time object.

    Args:
        value: Time string in 24-hour format (e.g., "22:30")

    Returns:
        datetime.time with hour and minute set

    Raises:
        TimeParseError: If the string is not a valid time of day
    """
    match = _HHMM_RE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise TimeParseError(f"Invalid time (expected HH:mm): {value!r}")

    hour, minute = int(match.group(1)), int(match.group(2))
    if not (0 <= hour < 24 and 0 <= minute < 60):
        raise TimeParseError(f"Time out of range: {value!r}")
    return time(hour, minute)


def to_minutes(value: TimeLike) -> int:
    """Convert a time (or HH:mm string) to minutes since midnight."""
    if not isinstance(value, time):
        value = parse_time(value)
    return value.hour * 60 + value.minute


def is_within_interval(start: TimeLike, end: TimeLike, now: TimeLike) -> bool:
    """
    Check whether `now` falls in the interval [start, end).

    The interval lives on a 24-hour clock, so `end` may be earlier than
    `start` to denote a span crossing midnight (e.g., 22:00-06:00).
    A zero-length interval (start == end) is never active.

    Args:
        start: Interval start (inclusive)
        end: Interval end (exclusive)
        now: Time of day to test

    Returns:
        True if now is inside the interval

    Raises:
        TimeParseError: If any string argument is not a valid HH:mm value
    """
    start_min = to_minutes(start)
    end_min = to_minutes(end)
    now_min = to_minutes(now)

    if start_min == end_min:
        return False

    # Early-morning part of a wrapped interval belongs to "tomorrow"
    if now_min < end_min:
        now_min += MINUTES_PER_DAY

    if start_min < end_min:
        start_min += MINUTES_PER_DAY

    if now_min < start_min:
        return False

    if now_min > end_min:
        end_min += MINUTES_PER_DAY

    return now_min < end_min
