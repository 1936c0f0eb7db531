# tests/test_zone.py

import pytest

import civcal
from civcal import (
    DayMode,
    DstSchedule,
    Era,
    Field,
    InvalidFieldError,
    InvalidRuleError,
    Month,
    TimeRef,
    Transition,
    Weekday,
    ZoneRule,
)
from civcal.core.time import MILLIS_PER_DAY, MILLIS_PER_HOUR, MILLIS_PER_MINUTE
from civcal.engines.zone import days_in_month, is_before

H = MILLIS_PER_HOUR


def local(year, month, day, hour=0, minute=0):
    """(year, month, day, weekday, millis) of a local standard date."""
    fs = civcal.decompose(civcal.compose(
        {Field.YEAR: year, Field.MONTH: month, Field.DAY_OF_MONTH: day, Field.HOUR_OF_DAY: hour, Field.MINUTE: minute}
    ))
    return fs.year, fs.month, fs.day_of_month, fs.day_of_week, fs.millis_of_day


def offset(zone, *args):
    return zone.offset(*local(*args))


def utc(year, month, day, hour=0):
    return civcal.compose({Field.YEAR: year, Field.MONTH: month, Field.DAY_OF_MONTH: day, Field.HOUR_OF_DAY: hour})


@pytest.fixture
def new_york():
    return civcal.get_zone("America/New_York")


# --- Northern hemisphere ---

def test_us_spring_forward(new_york):
    assert offset(new_york, 2024, Month.MARCH, 10, 3) == -4 * H
    assert new_york.offset(*local(2024, Month.MARCH, 10, 2)) == -4 * H
    assert new_york.offset(2024, Month.MARCH, 10, Weekday.SUNDAY, 2 * H - 1) == -5 * H
    assert offset(new_york, 2024, Month.MARCH, 9, 12) == -5 * H


def test_us_fall_back(new_york):
    assert offset(new_york, 2024, Month.NOVEMBER, 3, 3) == -5 * H
    # 00:30 standard is 01:30 daylight, before the 02:00 wall-clock change.
    assert offset(new_york, 2024, Month.NOVEMBER, 3, 0, 30) == -4 * H
    assert offset(new_york, 2024, Month.NOVEMBER, 3, 1) == -5 * H
    assert offset(new_york, 2024, Month.JULY, 4, 12) == -4 * H
    assert offset(new_york, 2024, Month.DECEMBER, 25, 12) == -5 * H


def test_us_transitions_as_utc_instants(new_york):
    start = utc(2024, Month.MARCH, 10, 7)
    assert new_york.offset_at(start) == -4 * H
    assert new_york.offset_at(start - 1) == -5 * H
    end = utc(2024, Month.NOVEMBER, 3, 6)
    assert new_york.offset_at(end) == -5 * H
    assert new_york.offset_at(end - 1) == -4 * H
    assert new_york.in_daylight_time(utc(2024, Month.JULY, 1))
    assert not new_york.in_daylight_time(utc(2024, Month.JANUARY, 1))


def test_start_year(new_york):
    assert offset(new_york, 2006, Month.JULY, 15, 12) == -5 * H
    assert offset(new_york, 2007, Month.JULY, 15, 12) == -4 * H


def test_bc_dates_never_use_daylight_time(new_york):
    assert new_york.offset(2024, Month.JULY, 15, Weekday.MONDAY, 12 * H, era=Era.BC) == -5 * H


def test_last_sunday_rules_with_utc_times():
    berlin = civcal.get_zone("Europe/Berlin")
    # 01:00 UTC is 02:00 standard in Berlin.
    assert berlin.start_time == 2 * H
    assert berlin.end_time == 3 * H
    assert offset(berlin, 2024, Month.MARCH, 31, 2) == 2 * H
    assert offset(berlin, 2024, Month.MARCH, 31, 1, 59) == 1 * H
    assert offset(berlin, 2024, Month.MARCH, 24, 12) == 1 * H
    assert offset(berlin, 2024, Month.OCTOBER, 27, 1, 59) == 2 * H
    assert offset(berlin, 2024, Month.OCTOBER, 27, 2) == 1 * H
    assert offset(berlin, 2024, Month.OCTOBER, 20, 12) == 2 * H

    london = civcal.get_zone("Europe/London")
    assert london.offset_at(utc(2024, Month.MARCH, 31, 1)) == 1 * H
    assert london.offset_at(utc(2024, Month.MARCH, 31, 1) - 1) == 0


# --- Southern hemisphere ---

def test_southern_hemisphere_spans_new_year():
    sydney = civcal.get_zone("Australia/Sydney")
    assert offset(sydney, 2024, Month.DECEMBER, 15, 12) == 11 * H
    assert offset(sydney, 2024, Month.FEBRUARY, 1, 12) == 11 * H
    assert offset(sydney, 2024, Month.JUNE, 15, 12) == 10 * H
    # First Sunday of April 2024 is the 7th; 02:00 standard ends daylight time.
    assert offset(sydney, 2024, Month.APRIL, 7, 1, 59) == 11 * H
    assert offset(sydney, 2024, Month.APRIL, 7, 2) == 10 * H
    # First Sunday of October 2024 is the 6th.
    assert offset(sydney, 2024, Month.OCTOBER, 6, 1, 59) == 10 * H
    assert offset(sydney, 2024, Month.OCTOBER, 6, 2) == 11 * H


def test_half_hour_savings():
    lord_howe = civcal.get_zone("Australia/Lord_Howe")
    assert lord_howe.dst_savings == 30 * MILLIS_PER_MINUTE
    assert offset(lord_howe, 2024, Month.JANUARY, 15, 12) == 11 * H
    assert offset(lord_howe, 2024, Month.JULY, 15, 12) == 10 * H + 30 * MILLIS_PER_MINUTE


def test_fixed_offset_zones():
    tokyo = civcal.get_zone("Asia/Tokyo")
    assert not tokyo.has_dst
    assert offset(tokyo, 2024, Month.JULY, 1) == 9 * H
    assert tokyo.dst_offset(*local(2024, Month.JULY, 1)) == 0
    assert not tokyo.in_daylight_time(utc(2024, Month.JULY, 1))


# --- Time reference normalisation ---

def test_time_reference_normalisation():
    start = Transition(Month.MARCH, DayMode.DAY_OF_MONTH, 10, time=1 * H, time_ref=TimeRef.UTC)
    end = Transition(Month.OCTOBER, DayMode.DAY_OF_MONTH, 10, time=1 * H, time_ref=TimeRef.UTC)
    zone = ZoneRule("x", 2 * H).with_dst(start, end)
    assert zone.start_time == 3 * H
    assert zone.end_time == 4 * H

    zone = zone.with_dst(
        Transition(Month.MARCH, DayMode.DAY_OF_MONTH, 10, time=1 * H, time_ref=TimeRef.STANDARD),
        Transition(Month.OCTOBER, DayMode.DAY_OF_MONTH, 10, time=1 * H, time_ref=TimeRef.STANDARD),
        savings=30 * MILLIS_PER_MINUTE,
    )
    assert zone.start_time == 1 * H
    assert zone.end_time == 1 * H + 30 * MILLIS_PER_MINUTE

    zone = zone.with_dst(
        Transition(Month.MARCH, DayMode.DAY_OF_MONTH, 10, time=1 * H),
        Transition(Month.OCTOBER, DayMode.DAY_OF_MONTH, 10, time=1 * H),
    )
    assert zone.start_time == 1 * H
    assert zone.end_time == 1 * H

    with pytest.raises(InvalidRuleError):
        ZoneRule("y", 0).start_time


# --- Day modes ---

def test_day_of_month_rule():
    rule = Transition(Month.MARCH, DayMode.DAY_OF_MONTH, 15, time=2 * H)
    assert is_before(*local(2024, Month.MARCH, 14, 12), rule, 2 * H)
    assert is_before(*local(2024, Month.MARCH, 15, 1), rule, 2 * H)
    assert not is_before(*local(2024, Month.MARCH, 15, 2), rule, 2 * H)
    assert not is_before(*local(2024, Month.MARCH, 16), rule, 2 * H)
    assert is_before(*local(2024, Month.FEBRUARY, 28), rule, 2 * H)
    assert not is_before(*local(2024, Month.APRIL, 1), rule, 2 * H)


def test_on_or_after_rule():
    # First Sunday on or after March 8th; in 2024 that is March 10.
    rule = Transition(Month.MARCH, DayMode.ON_OR_AFTER_DAY, 8, Weekday.SUNDAY, 0)
    assert is_before(*local(2024, Month.MARCH, 9), rule, 0)
    assert not is_before(*local(2024, Month.MARCH, 10), rule, 0)
    assert not is_before(*local(2024, Month.MARCH, 11), rule, 0)
    # March 3 is a Sunday, but before the anchor.
    assert is_before(*local(2024, Month.MARCH, 3, 12), rule, 0)


def test_on_or_before_rule():
    # Last Sunday on or before March 14th; in 2024 that is March 10.
    rule = Transition(Month.MARCH, DayMode.ON_OR_BEFORE_DAY, 14, Weekday.SUNDAY, 2 * H)
    assert is_before(*local(2024, Month.MARCH, 9), rule, 2 * H)
    assert is_before(*local(2024, Month.MARCH, 10, 1), rule, 2 * H)
    assert not is_before(*local(2024, Month.MARCH, 10, 3), rule, 2 * H)
    assert not is_before(*local(2024, Month.MARCH, 12), rule, 2 * H)
    assert not is_before(*local(2024, Month.MARCH, 17), rule, 2 * H)


def test_nth_weekday_rules():
    second_sunday = Transition(Month.MARCH, DayMode.NTH_WEEKDAY_IN_MONTH, 2, Weekday.SUNDAY)
    assert is_before(*local(2024, Month.MARCH, 3), second_sunday, 0)
    assert not is_before(*local(2024, Month.MARCH, 10), second_sunday, 0)
    assert not is_before(*local(2024, Month.MARCH, 12), second_sunday, 0)

    last_sunday = Transition(Month.MARCH, DayMode.NTH_WEEKDAY_IN_MONTH, -1, Weekday.SUNDAY)
    assert is_before(*local(2024, Month.MARCH, 30), last_sunday, 0)
    assert not is_before(*local(2024, Month.MARCH, 31), last_sunday, 0)
    # 2023: March 26 is the last Sunday.
    assert is_before(*local(2023, Month.MARCH, 25), last_sunday, 0)
    assert not is_before(*local(2023, Month.MARCH, 26), last_sunday, 0)
    assert not is_before(*local(2023, Month.MARCH, 29), last_sunday, 0)


def test_change_in_following_month_is_not_detected():
    # First Sunday on or after March 29th, 2022 is April 3rd. Days of April
    # before it already compare as after the change.
    rule = Transition(Month.MARCH, DayMode.ON_OR_AFTER_DAY, 29, Weekday.SUNDAY, 0)
    assert is_before(*local(2022, Month.MARCH, 31), rule, 0)
    assert not is_before(*local(2022, Month.APRIL, 1), rule, 0)


# --- Rule construction ---

def test_encoded_transitions():
    t = Transition.encoded(Month.MARCH, 8, -Weekday.SUNDAY, 0)
    assert (t.mode, t.day, t.weekday) == (DayMode.ON_OR_AFTER_DAY, 8, Weekday.SUNDAY)
    t = Transition.encoded(Month.MARCH, -14, -Weekday.SUNDAY, 0)
    assert (t.mode, t.day, t.weekday) == (DayMode.ON_OR_BEFORE_DAY, 14, Weekday.SUNDAY)
    t = Transition.encoded(Month.MARCH, -1, Weekday.SUNDAY, 0)
    assert (t.mode, t.day, t.weekday) == (DayMode.NTH_WEEKDAY_IN_MONTH, -1, Weekday.SUNDAY)
    t = Transition.encoded(Month.MARCH, 15, 0, 0)
    assert (t.mode, t.day, t.weekday) == (DayMode.DAY_OF_MONTH, 15, 0)
    t = Transition.encoded(Month.MARCH, 14, Weekday.SUNDAY, 0, after=False)
    assert (t.mode, t.day, t.weekday) == (DayMode.ON_OR_BEFORE_DAY, 14, Weekday.SUNDAY)
    t = Transition.encoded(Month.MARCH, 8, Weekday.SUNDAY, 0, after=True, time_ref=TimeRef.UTC)
    assert (t.mode, t.day, t.time_ref) == (DayMode.ON_OR_AFTER_DAY, 8, TimeRef.UTC)
    with pytest.raises(InvalidRuleError):
        Transition.encoded(Month.MARCH, 0, -Weekday.SUNDAY, 0)


@pytest.mark.parametrize(
    "args",
    [
        (12, DayMode.DAY_OF_MONTH, 1),
        (-1, DayMode.DAY_OF_MONTH, 1),
        (Month.FEBRUARY, DayMode.DAY_OF_MONTH, 30),
        (Month.APRIL, DayMode.DAY_OF_MONTH, 31),
        (Month.APRIL, DayMode.DAY_OF_MONTH, 0),
        (Month.MARCH, DayMode.DAY_OF_MONTH, 1, Weekday.SUNDAY),
        (Month.MARCH, DayMode.NTH_WEEKDAY_IN_MONTH, 0, Weekday.SUNDAY),
        (Month.MARCH, DayMode.NTH_WEEKDAY_IN_MONTH, 6, Weekday.SUNDAY),
        (Month.MARCH, DayMode.NTH_WEEKDAY_IN_MONTH, -6, Weekday.SUNDAY),
        (Month.MARCH, DayMode.NTH_WEEKDAY_IN_MONTH, 1, 0),
        (Month.MARCH, DayMode.ON_OR_AFTER_DAY, 32, Weekday.SUNDAY),
        (Month.MARCH, DayMode.ON_OR_BEFORE_DAY, 0, Weekday.SUNDAY),
        (Month.MARCH, DayMode.ON_OR_AFTER_DAY, 1, 8),
        (Month.MARCH, DayMode.DAY_OF_MONTH, 1, 0, -1),
        (Month.MARCH, DayMode.DAY_OF_MONTH, 1, 0, MILLIS_PER_DAY + 1),
        (Month.MARCH, "dom", 1),
        (Month.MARCH, DayMode.DAY_OF_MONTH, 1, 0, 0, "w"),
    ],
)
def test_invalid_transitions(args):
    with pytest.raises(InvalidRuleError):
        Transition(*args)


def test_valid_edge_transitions():
    Transition(Month.FEBRUARY, DayMode.DAY_OF_MONTH, 28)
    Transition(Month.FEBRUARY, DayMode.NTH_WEEKDAY_IN_MONTH, -4, Weekday.SUNDAY)
    Transition(Month.FEBRUARY, DayMode.ON_OR_BEFORE_DAY, 28, Weekday.SUNDAY)
    Transition(Month.MARCH, DayMode.NTH_WEEKDAY_IN_MONTH, 5, Weekday.SUNDAY)
    Transition(Month.MARCH, DayMode.NTH_WEEKDAY_IN_MONTH, -5, Weekday.SUNDAY)
    Transition(Month.MARCH, DayMode.DAY_OF_MONTH, 1, 0, MILLIS_PER_DAY)


@pytest.mark.parametrize(
    "args",
    [
        (Month.FEBRUARY, DayMode.DAY_OF_MONTH, 29),
        (Month.FEBRUARY, DayMode.NTH_WEEKDAY_IN_MONTH, 5, Weekday.SUNDAY),
        (Month.FEBRUARY, DayMode.NTH_WEEKDAY_IN_MONTH, -5, Weekday.SUNDAY),
        (Month.FEBRUARY, DayMode.ON_OR_AFTER_DAY, 29, Weekday.SUNDAY),
        (Month.FEBRUARY, DayMode.ON_OR_BEFORE_DAY, 29, Weekday.SUNDAY),
    ],
)
def test_february_rules_cannot_rely_on_a_leap_day(args):
    # Yearly rules are checked against a common year.
    with pytest.raises(InvalidRuleError):
        Transition(*args)


def test_invalid_zones_and_schedules():
    start = Transition(Month.MARCH, DayMode.DAY_OF_MONTH, 1)
    end = Transition(Month.OCTOBER, DayMode.DAY_OF_MONTH, 1)
    with pytest.raises(InvalidRuleError):
        ZoneRule("x", MILLIS_PER_DAY)
    with pytest.raises(InvalidRuleError):
        ZoneRule("x", -MILLIS_PER_DAY)
    with pytest.raises(InvalidRuleError):
        DstSchedule(start, end, savings=0)
    with pytest.raises(InvalidRuleError):
        DstSchedule(start, None)
    with pytest.raises(InvalidRuleError):
        ZoneRule("x", 0, schedule="dst")


def test_invalid_offset_arguments(new_york):
    with pytest.raises(InvalidFieldError):
        new_york.offset(2024, 12, 1, Weekday.SUNDAY, 0)
    with pytest.raises(InvalidFieldError):
        new_york.offset(2023, Month.FEBRUARY, 29, Weekday.SUNDAY, 0)
    with pytest.raises(InvalidFieldError):
        new_york.offset(2024, Month.APRIL, 31, Weekday.SUNDAY, 0)
    with pytest.raises(InvalidFieldError):
        new_york.offset(2024, Month.APRIL, 1, 0, 0)
    with pytest.raises(InvalidFieldError):
        new_york.offset(2024, Month.APRIL, 1, 8, 0)
    # 1 BC is a leap year.
    assert new_york.offset(1, Month.FEBRUARY, 29, Weekday.SUNDAY, 0, era=Era.BC) == -5 * H


def test_reconfigured_copies(new_york):
    eastern = new_york.with_raw_offset(-4 * H)
    assert eastern.raw_offset == -4 * H
    assert new_york.raw_offset == -5 * H
    assert eastern.schedule == new_york.schedule

    plain = new_york.without_dst()
    assert not plain.has_dst
    assert plain.dst_savings == 0
    assert offset(plain, 2024, Month.JULY, 4) == -5 * H
    assert new_york.has_dst


def test_zone_info(new_york):
    info = new_york.info()
    assert info["id"] == "America/New_York"
    assert info["raw_offset"] == -5 * H
    assert info["has_dst"] is True
    assert info["savings"] == H
    assert info["start_year"] == 2007
    assert info["start"]["month"] == "March"
    assert info["start"]["mode"] == "nth_weekday_in_month"
    assert info["start"]["weekday"] == "Sunday"
    assert info["end"]["normalised_time"] == 2 * H


def test_days_in_month_uses_julian_rules_before_1582():
    assert days_in_month(Month.FEBRUARY, 1500) == 29
    assert days_in_month(Month.FEBRUARY, 1700) == 28
    assert days_in_month(Month.FEBRUARY, 2000) == 29
    assert days_in_month(Month.FEBRUARY, 2023) == 28
    assert days_in_month(Month.APRIL, 2023) == 30


def test_anonymous_zone_offset(new_york):
    from civcal.engines.zone import zone_offset

    args = local(2024, Month.JULY, 4, 12)
    assert zone_offset(-5 * H, new_york.schedule, *args) == new_york.offset(*args)
    assert zone_offset(3 * H, None, *args) == 3 * H


# --- Scenarios with hand-built rules ---

def test_wall_clock_rule_built_by_hand():
    start = Transition(Month.MARCH, DayMode.NTH_WEEKDAY_IN_MONTH, 2, Weekday.SUNDAY, 2 * H, TimeRef.WALL)
    end = Transition(Month.NOVEMBER, DayMode.NTH_WEEKDAY_IN_MONTH, 1, Weekday.SUNDAY, 2 * H, TimeRef.WALL)
    zone = ZoneRule("Test/Eastern", -18000000).with_dst(start, end, savings=3600000)
    assert offset(zone, 2024, Month.MARCH, 10, 3) == -14400000
    assert offset(zone, 2024, Month.NOVEMBER, 3, 3) == -18000000
    # No start year: the rule applies to every AD year.
    assert offset(zone, 1900, Month.JULY, 1) == -14400000


def test_november_to_march_schedule():
    start = Transition(Month.NOVEMBER, DayMode.NTH_WEEKDAY_IN_MONTH, 1, Weekday.SUNDAY, 2 * H)
    end = Transition(Month.MARCH, DayMode.NTH_WEEKDAY_IN_MONTH, 1, Weekday.SUNDAY, 2 * H)
    zone = ZoneRule("Test/South", -3 * H, DstSchedule(start, end))
    assert offset(zone, 2024, Month.DECEMBER, 15) == -2 * H
    assert offset(zone, 2024, Month.FEBRUARY, 15) == -2 * H
    assert offset(zone, 2024, Month.JUNE, 15) == -3 * H
