import pytest

from src.dealfinder.models.domain import Weekday
from src.dealfinder.services.schedule.days import day_included, describe_days, included_days

ALL_DAYS = set(Weekday)


@pytest.mark.parametrize("spec", ["all days", "Daily", "everyday", " EVERYDAY ", "All  Days"])
def test_every_day_keywords_match_all_days(spec):
    assert included_days(spec) == ALL_DAYS


def test_weekdays_and_weekends():
    assert included_days("Weekdays") == {Weekday.MON, Weekday.TUE, Weekday.WED, Weekday.THU, Weekday.FRI}
    assert included_days("weekends") == {Weekday.SAT, Weekday.SUN}


def test_comma_list_is_exact_membership():
    assert included_days("mon, wed, fri") == {Weekday.MON, Weekday.WED, Weekday.FRI}
    assert included_days("Tue,Thu") == {Weekday.TUE, Weekday.THU}


def test_comma_list_ignores_unknown_tokens():
    assert included_days("mon, funday, fri") == {Weekday.MON, Weekday.FRI}
    assert included_days("foo, bar") == set()


def test_plain_range():
    assert included_days("thu-sun") == {Weekday.THU, Weekday.FRI, Weekday.SAT, Weekday.SUN}
    assert included_days("Mon - Fri") == included_days("weekdays")


def test_range_wraps_across_week_boundary():
    for day in (Weekday.FRI, Weekday.SAT, Weekday.SUN, Weekday.MON):
        assert day_included("fri-mon", day)
    for day in (Weekday.TUE, Weekday.WED, Weekday.THU):
        assert not day_included("fri-mon", day)


@pytest.mark.parametrize("spec", ["fri-xyz", "abc-mon", "mon-tue-wed", "-"])
def test_range_with_unknown_endpoint_is_empty(spec):
    assert included_days(spec) == set()


def test_single_day_forms():
    assert included_days("Saturday") == {Weekday.SAT}
    assert included_days("sat") == {Weekday.SAT}
    assert day_included("SUN", 6)


@pytest.mark.parametrize("spec", [None, "", "   ", "whenever", "happy hour"])
def test_unparseable_specs_match_nothing(spec):
    for day in Weekday:
        assert day_included(spec, day) is False


def test_list_takes_precedence_over_range():
    # the comma form wins, so the hyphenated token is just an unknown list entry
    assert included_days("mon-wed, fri") == {Weekday.FRI}


def test_describe_days():
    assert describe_days("All Days") == "Every day"
    assert describe_days("weekdays") == "Mon-Fri"
    assert describe_days("Weekends") == "Sat-Sun"
    assert describe_days(" Thu-Sun ") == "Thu-Sun"
    assert describe_days(None) == ""
