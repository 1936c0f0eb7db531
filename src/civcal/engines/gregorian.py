"""
civcal.engines.gregorian
------------------------
Julian/Gregorian civil calendar arithmetic.

Converts between a linear time (milliseconds since 1970-01-01T00:00:00, may be
negative) and decomposed civil fields. Dates whose day starts before the
cutover instant are Julian (a leap year every 4th year); from the cutover on
they are Gregorian (except centuries not divisible by 400).

The intermediate currency is the day number, days since the epoch:
  day_number * MILLIS_PER_DAY + millis_of_day == time,  0 <= millis_of_day < MILLIS_PER_DAY
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cached_property
from typing import List, Mapping, Sequence, Tuple, Union

from ..core.errors import ArithmeticRangeError, InvalidFieldError
from ..core.time import (
    DAYS_BEFORE_MONTH,
    DEFAULT_CUTOVER,
    EPOCH_DAYS,
    EPOCH_YEAR,
    GREGORIAN_CYCLE_DAYS,
    JULIAN_CYCLE_DAYS,
    MAX_TIME,
    MILLIS_PER_DAY,
    MILLIS_PER_HOUR,
    MILLIS_PER_MINUTE,
    MILLIS_PER_SECOND,
    MIN_TIME,
    MONTH_LENGTHS,
    in_time_range,
    split_time,
    tdiv,
)
from ..core.types import AM, EPOCH_FIELDS, FIELD_COUNT, PM, Era, Field, FieldSet, Weekday

log = logging.getLogger(__name__)

FieldValues = Union[FieldSet, Mapping[Field, int]]

# Zero-based day of year of February 29.
_LEAP_DAY = 31 + 29 - 1


def as_field(field: int) -> Field:
    try:
        return Field(field)
    except (ValueError, TypeError) as e:
        raise InvalidFieldError(f"Unknown field {field!r}. Valid fields: 0..{FIELD_COUNT - 1}") from e


def _gregorian_correction(year: int) -> int:
    return (year - 1) // 400 - (year - 1) // 100


def _julian_days(year: int, day_of_year0: int) -> int:
    """Days from the epoch before any calendar correction (day_of_year0 is zero-based)."""
    return (year - 1) * 365 + (year - 1) // 4 + day_of_year0 - EPOCH_DAYS


def day_of_week(day_number: int) -> int:
    """Weekday 1..7 (SUNDAY..SATURDAY) of a day number. The epoch was a Thursday."""
    weekday = (day_number + Weekday.THURSDAY) % 7
    return weekday if weekday > 0 else 7


@dataclass(frozen=True)
class CalendarSystem:
    """
    A Julian/Gregorian calendar with a configurable cutover.

    Only one calendar variant exists; the cutover selects its leap-year policy:
    the proleptic Gregorian and proleptic Julian calendars are the two extremes.
    """
    cutover: int = DEFAULT_CUTOVER

    def __post_init__(self) -> None:
        if not in_time_range(self.cutover):
            raise ArithmeticRangeError(f"cutover {self.cutover} is outside the 64-bit time range")

    @staticmethod
    def julian_gregorian(cutover: int = DEFAULT_CUTOVER) -> "CalendarSystem":
        return CalendarSystem(cutover)

    @staticmethod
    def proleptic_gregorian() -> "CalendarSystem":
        return CalendarSystem(MIN_TIME)

    @staticmethod
    def proleptic_julian() -> "CalendarSystem":
        return CalendarSystem(MAX_TIME)

    # ---------------------------------------------------------
    # Leap years and day numbers
    # ---------------------------------------------------------
    def _is_gregorian(self, year: int, day_of_year0: int) -> bool:
        days = _julian_days(year, day_of_year0) + _gregorian_correction(year)
        return days * MILLIS_PER_DAY >= self.cutover

    @cached_property
    def gregorian_year(self) -> int:
        """Smallest year whose February 29 falls under the Gregorian rules."""
        lo = hi = EPOCH_YEAR + self.cutover // (MILLIS_PER_DAY * 366)
        step = 1
        while self._is_gregorian(lo, _LEAP_DAY):
            lo -= step
            step *= 2
        step = 1
        while not self._is_gregorian(hi, _LEAP_DAY):
            hi += step
            step *= 2
        # not gregorian at lo, gregorian at hi
        while hi - lo > 1:
            mid = (lo + hi) // 2
            if self._is_gregorian(mid, _LEAP_DAY):
                hi = mid
            else:
                lo = mid
        return hi

    def is_leap_year(self, year: int) -> bool:
        """
        Leap year test for an astronomical year (0 is 1 BC).

        The century rule only applies when February 29 of that year lies on or
        after the cutover.
        """
        if year % 4 != 0:
            return False
        if not self._is_gregorian(year, _LEAP_DAY):
            return True
        return year % 100 != 0 or year % 400 == 0

    def days_in_month(self, year: int, month: int) -> int:
        if not 0 <= month <= 11:
            raise InvalidFieldError(f"month must be 0..11, got {month}")
        if month == 1:
            return 29 if self.is_leap_year(year) else 28
        return MONTH_LENGTHS[month]

    def linear_day(self, year: int, day_of_year: int, gregorian: bool) -> int:
        """
        Day number of a (one-based) day of year, using Julian or Gregorian rules.

        Nonpositive years are BC: 0 is 1 BC, -1 is 2 BC and so on.
        """
        days = _julian_days(year, day_of_year - 1)
        if gregorian:
            return days + _gregorian_correction(year)
        return days - 2

    # ---------------------------------------------------------
    # Fields -> time
    # ---------------------------------------------------------
    def compose(self, values: FieldValues) -> int:
        """
        Linear time of a field set. Slots missing from a mapping take the
        epoch's values. Out-of-range values carry into the next larger unit.
        """
        if isinstance(values, FieldSet):
            return self.compose_array(values.as_tuple(), (True,) * FIELD_COUNT)
        arr = list(EPOCH_FIELDS)
        is_set = [False] * FIELD_COUNT
        for key, value in values.items():
            f = as_field(key)
            arr[f] = int(value)
            is_set[f] = True
        return self.compose_array(arr, is_set)

    def compose_array(self, fields: Sequence[int], is_set: Sequence[bool]) -> int:
        year = fields[Field.YEAR]
        if fields[Field.ERA] == Era.BC:
            year = 1 - year
        month = fields[Field.MONTH]
        day = fields[Field.DAY_OF_MONTH]

        # The 12-hour clock is only consulted when the 24-hour one is not set.
        if is_set[Field.HOUR] and not is_set[Field.HOUR_OF_DAY]:
            hour = fields[Field.HOUR]
            if fields[Field.AM_PM] == PM:
                hour += 12
        else:
            hour = fields[Field.HOUR_OF_DAY]

        all_millis = (
            hour * MILLIS_PER_HOUR
            + fields[Field.MINUTE] * MILLIS_PER_MINUTE
            + fields[Field.SECOND] * MILLIS_PER_SECOND
            + fields[Field.MILLISECOND]
        )
        carry, millis_in_day = divmod(all_millis, MILLIS_PER_DAY)
        day += carry

        carry, month = divmod(month, 12)
        year += carry

        year, month, day = self._normalize_day(year, month, day)

        day_of_year = DAYS_BEFORE_MONTH[month] + day
        if month > 1 and self.is_leap_year(year):
            day_of_year += 1

        day_number = _julian_days(year, day_of_year - 1)
        correction = _gregorian_correction(year)
        if (day_number + correction) * MILLIS_PER_DAY >= self.cutover:
            day_number += correction
        else:
            day_number -= 2

        t = day_number * MILLIS_PER_DAY + millis_in_day
        if not in_time_range(t):
            raise ArithmeticRangeError(
                f"year={year} month={month} day={day} does not fit in a 64-bit millisecond time"
            )
        return t

    def _normalize_day(self, year: int, month: int, day: int) -> Tuple[int, int, int]:
        """
        Carry a day-of-month outside its month into neighbouring months.

        February is re-evaluated whenever the year changes. Whole 400-year
        (Gregorian) and 4-year (Julian) cycles are skipped at once when every
        February 29 in the skipped span is under one rule set.
        """
        greg_year = self.gregorian_year
        lengths: List[int] = list(MONTH_LENGTHS)
        lengths[1] = 29 if self.is_leap_year(year) else 28

        while day <= 0:
            if -day >= GREGORIAN_CYCLE_DAYS and year - 400 >= greg_year:
                k = min(-day // GREGORIAN_CYCLE_DAYS, (year - greg_year) // 400)
                year -= 400 * k
                day += GREGORIAN_CYCLE_DAYS * k
                log.debug("skipped %d gregorian cycles backward to year %d", k, year)
                continue
            if -day >= JULIAN_CYCLE_DAYS and year < greg_year:
                k = -day // JULIAN_CYCLE_DAYS
                year -= 4 * k
                day += JULIAN_CYCLE_DAYS * k
                lengths[1] = 29 if self.is_leap_year(year) else 28
                log.debug("skipped %d julian cycles backward to year %d", k, year)
                continue
            if month == 0:
                year -= 1
                lengths[1] = 29 if self.is_leap_year(year) else 28
            month = (month + 11) % 12
            day += lengths[month]

        while day > lengths[month]:
            if day > GREGORIAN_CYCLE_DAYS and year >= greg_year:
                k = (day - 1) // GREGORIAN_CYCLE_DAYS
                year += 400 * k
                day -= GREGORIAN_CYCLE_DAYS * k
                log.debug("skipped %d gregorian cycles forward to year %d", k, year)
                continue
            if day > JULIAN_CYCLE_DAYS and year + 4 < greg_year:
                k = min((day - 1) // JULIAN_CYCLE_DAYS, (greg_year - 1 - year) // 4)
                year += 4 * k
                day -= JULIAN_CYCLE_DAYS * k
                lengths[1] = 29 if self.is_leap_year(year) else 28
                log.debug("skipped %d julian cycles forward to year %d", k, year)
                continue
            day -= lengths[month]
            month = (month + 1) % 12
            if month == 0:
                year += 1
                lengths[1] = 29 if self.is_leap_year(year) else 28

        return year, month, day

    # ---------------------------------------------------------
    # Time -> fields
    # ---------------------------------------------------------
    def year_and_day(self, day_number: int, gregorian: bool) -> Tuple[int, int]:
        """(astronomical year, one-based day of year) of a day number."""
        # First approximation of the year; this may be one year too big.
        if gregorian:
            estimate = tdiv((day_number - 100) * 400, GREGORIAN_CYCLE_DAYS)
        else:
            estimate = tdiv((day_number - 100) * 4, JULIAN_CYCLE_DAYS)
        year = EPOCH_YEAR + estimate
        if day_number >= 0:
            year += 1

        first = self.linear_day(year, 1, gregorian)
        while day_number < first:
            year -= 1
            first = self.linear_day(year, 1, gregorian)
        while day_number >= self.linear_day(year + 1, 1, gregorian):
            year += 1
            first = self.linear_day(year, 1, gregorian)

        return year, day_number - first + 1

    def decompose(self, t: int) -> FieldSet:
        """Civil fields of a linear time."""
        if not in_time_range(t):
            raise ArithmeticRangeError(f"time {t} is outside the 64-bit range")

        gregorian = t >= self.cutover
        day_number, millis_in_day = split_time(t)
        year, day_of_year = self.year_and_day(day_number, gregorian)

        leap_day = 1 if self.is_leap_year(year) else 0
        if day_of_year <= 31 + 28 + leap_day:
            month = day_of_year // 32  # 31 -> JANUARY, 32 -> FEBRUARY
            day_of_month = day_of_year - 31 * month
        else:
            scaled = (day_of_year - leap_day) * 5 + 8
            month = scaled // (31 + 30 + 31 + 30 + 31)
            day_of_month = (scaled % (31 + 30 + 31 + 30 + 31)) // 5 + 1

        if year <= 0:
            era, year_of_era = Era.BC, 1 - year
        else:
            era, year_of_era = Era.AD, year

        hour_of_day, rest = divmod(millis_in_day, MILLIS_PER_HOUR)
        minute, rest = divmod(rest, MILLIS_PER_MINUTE)
        second, millisecond = divmod(rest, MILLIS_PER_SECOND)

        return FieldSet(
            era=int(era),
            year=year_of_era,
            month=month,
            day_of_month=day_of_month,
            day_of_year=day_of_year,
            day_of_week=day_of_week(day_number),
            am_pm=AM if hour_of_day < 12 else PM,
            hour=hour_of_day % 12,
            hour_of_day=hour_of_day,
            minute=minute,
            second=second,
            millisecond=millisecond,
        )


DEFAULT_SYSTEM = CalendarSystem()


def system_for(cutover: int | None = None) -> CalendarSystem:
    if cutover is None or cutover == DEFAULT_CUTOVER:
        return DEFAULT_SYSTEM
    return CalendarSystem.julian_gregorian(cutover)


def compose(values: FieldValues, cutover: int | None = None) -> int:
    return system_for(cutover).compose(values)


def decompose(t: int, cutover: int | None = None) -> FieldSet:
    return system_for(cutover).decompose(t)


def is_leap_year(year: int, cutover: int | None = None) -> bool:
    return system_for(cutover).is_leap_year(year)
