"""Day-of-week pattern matching for imported deal schedules.

Upstream sheets describe valid days in several free-form encodings
("All Days", "Weekdays", "mon, wed, fri", "thu-sun", "Saturday").
The encodings are never normalized and stored; each spec string is
interpreted on demand by running an ordered chain of matchers. The
first matcher that recognizes the form decides the answer, and a spec
no matcher recognizes includes no day at all.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ...models.domain import Weekday

DAY_ORDER: tuple[str, ...] = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")

_FULL_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

DAY_TOKENS: dict[str, Weekday] = {
    **{name: Weekday(index) for index, name in enumerate(DAY_ORDER)},
    **{name: Weekday(index) for index, name in enumerate(_FULL_NAMES)},
}

EVERY_DAY_KEYWORDS = frozenset({"all days", "daily", "everyday", "every day"})
WEEKDAYS = frozenset(Weekday(index) for index in range(5))
WEEKENDS = frozenset({Weekday.SAT, Weekday.SUN})

_RANGE_SEPARATOR = re.compile(r"\s*[-–]\s*")


def normalize_spec(spec: Optional[str]) -> str:
    """Lower-case, trim and collapse inner whitespace."""

    if not spec:
        return ""
    return " ".join(str(spec).split()).lower()


def lookup_day(token: str) -> Optional[Weekday]:
    return DAY_TOKENS.get(token.strip().lower())


class DayMatcher(ABC):
    """One recognized day-spec encoding.

    ``match`` returns True/False when the spec is in this matcher's form,
    or None to let the next matcher try.
    """

    @abstractmethod
    def match(self, spec: str, day: Weekday) -> Optional[bool]:
        raise NotImplementedError


class KeywordMatcher(DayMatcher):
    def __init__(self, keywords: frozenset[str], days: frozenset[Weekday]):
        self.keywords = keywords
        self.days = days

    def match(self, spec: str, day: Weekday) -> Optional[bool]:
        if spec in self.keywords:
            return day in self.days
        return None


class DayListMatcher(DayMatcher):
    """Comma-separated day names; unknown tokens are ignored."""

    def match(self, spec: str, day: Weekday) -> Optional[bool]:
        if "," not in spec:
            return None
        members = {lookup_day(token) for token in spec.split(",")}
        members.discard(None)
        return day in members


class DayRangeMatcher(DayMatcher):
    """``start-end`` ranges, wrapping past Sunday when start comes after end."""

    def match(self, spec: str, day: Weekday) -> Optional[bool]:
        parts = _RANGE_SEPARATOR.split(spec)
        if len(parts) < 2:
            return None
        if len(parts) != 2:
            return False
        start, end = lookup_day(parts[0]), lookup_day(parts[1])
        if start is None or end is None:
            logging.debug(f"Unrecognized day range '{spec}', treating as empty")
            return False
        if start <= end:
            return start <= day <= end
        return day >= start or day <= end


class SingleDayMatcher(DayMatcher):
    def match(self, spec: str, day: Weekday) -> Optional[bool]:
        single = lookup_day(spec)
        if single is None:
            return None
        return single == day


DEFAULT_MATCHERS: tuple[DayMatcher, ...] = (
    KeywordMatcher(EVERY_DAY_KEYWORDS, frozenset(Weekday)),
    KeywordMatcher(frozenset({"weekdays"}), WEEKDAYS),
    KeywordMatcher(frozenset({"weekends"}), WEEKENDS),
    DayListMatcher(),
    DayRangeMatcher(),
    SingleDayMatcher(),
)


def day_included(
    spec: Optional[str],
    day: Weekday | int,
    matchers: Sequence[DayMatcher] = DEFAULT_MATCHERS,
) -> bool:
    """Return True when ``day`` is covered by the free-form ``spec``."""

    normalized = normalize_spec(spec)
    if not normalized:
        return False
    weekday = Weekday(day)
    for matcher in matchers:
        decision = matcher.match(normalized, weekday)
        if decision is not None:
            return decision
    logging.debug(f"Unparseable day spec '{spec}', matching no day")
    return False


def included_days(spec: Optional[str]) -> frozenset[Weekday]:
    return frozenset(day for day in Weekday if day_included(spec, day))


def describe_days(spec: Optional[str]) -> str:
    """Short display label for a day spec."""

    normalized = normalize_spec(spec)
    if normalized in EVERY_DAY_KEYWORDS:
        return "Every day"
    if normalized == "weekdays":
        return "Mon-Fri"
    if normalized == "weekends":
        return "Sat-Sun"
    return (spec or "").strip()
