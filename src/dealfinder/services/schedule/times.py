"""Time-of-day parsing and happy hour window membership."""

from __future__ import annotations

import logging
import re
from datetime import datetime, time
from typing import Optional

MINUTES_PER_DAY = 24 * 60
LAST_MINUTE = MINUTES_PER_DAY - 1

_COLON_TIME = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")
_COMPACT_TIME = re.compile(r"^\d{1,4}$")


def parse_time_of_day(value: Optional[str]) -> Optional[int]:
    """Parse ``"H:MM"``, ``"HH:MM"`` or compact ``"930"``/``"1700"``/``"9"`` into minute-of-day.

    Returns None when the value cannot be read as a clock time.
    ``"24:00"`` is read as the last minute of the day.
    """

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None

    match = _COLON_TIME.match(text)
    if match:
        hours, minutes = int(match.group(1)), int(match.group(2))
    elif _COMPACT_TIME.match(text):
        if len(text) <= 2:
            hours, minutes = int(text), 0
        else:
            hours, minutes = int(text[:-2]), int(text[-2:])
    else:
        logging.debug(f"Unparseable time of day '{value}'")
        return None

    if hours == 24 and minutes == 0:
        return LAST_MINUTE
    if hours > 23 or minutes > 59:
        logging.debug(f"Time of day out of range '{value}'")
        return None
    return hours * 60 + minutes


def minute_of_day(moment: datetime | time) -> int:
    return moment.hour * 60 + moment.minute


def minutes_in_window(start: Optional[int], end: Optional[int], now: int) -> bool:
    """Window membership on already-parsed minutes.

    Same-day windows are inclusive on both ends; a start later than the
    end means the window runs past midnight.
    """

    if start is None or end is None:
        return False
    if start <= end:
        return start <= now <= end
    return now >= start or now <= end


def in_window(start_time: Optional[str], end_time: Optional[str], now_minute: int) -> bool:
    """Return True when ``now_minute`` falls inside the ``start_time``-``end_time`` window."""

    return minutes_in_window(parse_time_of_day(start_time), parse_time_of_day(end_time), now_minute)


def minutes_until(target: int, now: int) -> int:
    """Minutes from ``now`` forward to ``target``, wrapping past midnight."""

    return (target - now) % MINUTES_PER_DAY


def format_time(value: Optional[str]) -> str:
    """12-hour display of a time string, e.g. ``"1700"`` -> ``"5:00 PM"``."""

    minutes = parse_time_of_day(value)
    if minutes is None:
        return (value or "").strip()
    hour, minute = divmod(minutes, 60)
    period = "PM" if hour >= 12 else "AM"
    hour = hour % 12 or 12
    return f"{hour}:{minute:02d} {period}"


def time_range_display(start_time: Optional[str], end_time: Optional[str]) -> str:
    return f"{format_time(start_time)} - {format_time(end_time)}"
