"""Classify a deal window against a reference instant."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from ...models.domain import DealState, DealWindow, Weekday
from ..schedule.days import day_included
from ..schedule.times import (
    format_time,
    minute_of_day,
    minutes_in_window,
    minutes_until,
    parse_time_of_day,
)

DEFAULT_UPCOMING_WINDOW_MINUTES = 60


def _today(reference: datetime) -> Weekday:
    return Weekday(reference.weekday())


def _tomorrow(reference: datetime) -> Weekday:
    return Weekday((reference.date() + timedelta(days=1)).weekday())


def is_active(window: DealWindow, reference: datetime) -> bool:
    if not day_included(window.days, _today(reference)):
        return False
    start = parse_time_of_day(window.start_time)
    end = parse_time_of_day(window.end_time)
    return minutes_in_window(start, end, minute_of_day(reference))


def classify_deal(
    window: DealWindow,
    reference: datetime,
    *,
    upcoming_window_minutes: int = DEFAULT_UPCOMING_WINDOW_MINUTES,
) -> DealState:
    """Return the deal's state at ``reference``.

    Upcoming means the deal runs today and starts later today, at most
    ``upcoming_window_minutes`` ahead: the look-ahead is ``(0, n]``, so a
    17:00 start is upcoming at 16:00 and at 16:59 but not at 17:00.
    Future only asks whether tomorrow is one of the deal's days.
    """

    now = minute_of_day(reference)
    start = parse_time_of_day(window.start_time)
    end = parse_time_of_day(window.end_time)

    if day_included(window.days, _today(reference)):
        if minutes_in_window(start, end, now):
            return DealState.ACTIVE
        if start is not None and 0 < start - now <= upcoming_window_minutes:
            return DealState.UPCOMING

    if day_included(window.days, _tomorrow(reference)):
        return DealState.FUTURE
    return DealState.INACTIVE


def minutes_until_start(window: DealWindow, reference: datetime) -> Optional[int]:
    start = parse_time_of_day(window.start_time)
    if start is None:
        return None
    return minutes_until(start, minute_of_day(reference))


def minutes_until_end(window: DealWindow, reference: datetime) -> Optional[int]:
    end = parse_time_of_day(window.end_time)
    if end is None:
        return None
    return minutes_until(end, minute_of_day(reference))


def _hours_minutes(total: int) -> str:
    hours, minutes = divmod(total, 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def status_display(
    window: DealWindow,
    reference: datetime,
    state: Optional[DealState] = None,
    *,
    upcoming_window_minutes: int = DEFAULT_UPCOMING_WINDOW_MINUTES,
) -> str:
    """Short countdown label, e.g. "Ends in 1h 5m" or "Starts in 30m".

    Falls back to a plain label when the relevant time does not parse.
    """

    if state is None:
        state = classify_deal(window, reference, upcoming_window_minutes=upcoming_window_minutes)
    if state is DealState.ACTIVE:
        remaining = minutes_until_end(window, reference)
        return "Active" if remaining is None else f"Ends in {_hours_minutes(remaining)}"
    if state is DealState.UPCOMING:
        waiting = minutes_until_start(window, reference)
        return "Upcoming" if waiting is None else f"Starts in {_hours_minutes(waiting)}"
    if state is DealState.FUTURE:
        if parse_time_of_day(window.start_time) is None:
            return "Tomorrow"
        return f"Tomorrow at {format_time(window.start_time)}"
    return "Inactive"
