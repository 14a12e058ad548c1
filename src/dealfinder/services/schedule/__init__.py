"""Day pattern and time window helpers."""

from .days import day_included, describe_days, included_days
from .times import (
    format_time,
    in_window,
    minute_of_day,
    parse_time_of_day,
    time_range_display,
)

__all__ = [
    "day_included",
    "included_days",
    "describe_days",
    "parse_time_of_day",
    "in_window",
    "minute_of_day",
    "format_time",
    "time_range_display",
]
