from datetime import datetime, time

import pytest

from src.dealfinder.services.schedule.times import (
    LAST_MINUTE,
    format_time,
    in_window,
    minute_of_day,
    minutes_until,
    parse_time_of_day,
    time_range_display,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("17:00", 17 * 60),
        ("9:30", 9 * 60 + 30),
        ("09:30", 9 * 60 + 30),
        ("930", 9 * 60 + 30),
        ("0930", 9 * 60 + 30),
        ("1700", 17 * 60),
        ("9", 9 * 60),
        ("0:00", 0),
        (" 23:59 ", 23 * 60 + 59),
        ("17:00:00", 17 * 60),
        ("24:00", LAST_MINUTE),
    ],
)
def test_parse_time_of_day(value, expected):
    assert parse_time_of_day(value) == expected


@pytest.mark.parametrize("value", [None, "", "abc", "25:00", "12:60", "1275", "5pm", "12345", "17.00"])
def test_parse_time_of_day_invalid(value):
    assert parse_time_of_day(value) is None


def test_same_day_window_is_inclusive():
    assert in_window("17:00", "19:00", 17 * 60)
    assert in_window("17:00", "19:00", 19 * 60)
    assert in_window("17:00", "19:00", 18 * 60)
    assert not in_window("17:00", "19:00", 17 * 60 - 1)
    assert not in_window("17:00", "19:00", 19 * 60 + 1)


def test_window_spanning_midnight():
    assert in_window("22:00", "02:00", 23 * 60 + 30)
    assert in_window("22:00", "02:00", 60)
    assert in_window("22:00", "02:00", 22 * 60)
    assert in_window("22:00", "02:00", 2 * 60)
    assert not in_window("22:00", "02:00", 12 * 60)


def test_compact_and_colon_forms_agree():
    assert in_window("1700", "1900", 18 * 60) == in_window("17:00", "19:00", 18 * 60)


def test_invalid_endpoint_never_matches():
    for minute in (0, 12 * 60, LAST_MINUTE):
        assert not in_window("late", "19:00", minute)
        assert not in_window("17:00", None, minute)


def test_minute_of_day_and_minutes_until():
    assert minute_of_day(datetime(2025, 10, 15, 18, 45)) == 18 * 60 + 45
    assert minute_of_day(time(0, 5)) == 5
    assert minutes_until(17 * 60, 16 * 60 + 30) == 30
    assert minutes_until(60, 23 * 60) == 120


def test_format_time():
    assert format_time("1700") == "5:00 PM"
    assert format_time("00:15") == "12:15 AM"
    assert format_time("12:00") == "12:00 PM"
    assert format_time("9:05") == "9:05 AM"
    assert format_time("bad") == "bad"
    assert time_range_display("17:00", "1900") == "5:00 PM - 7:00 PM"
