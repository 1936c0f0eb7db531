"""
civcal.engines.zone
-------------------
Fixed-offset time zones with an optional yearly daylight-saving schedule.

A ZoneRule is a pure function of civil fields (year, month, day of month,
weekday, millis of day in local standard time) to the offset from UTC. It
does not use the calendar engine; it only shares its field conventions
(months 0..11, weekdays 1..7 starting on Sunday).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional

from ..core.errors import InvalidFieldError, InvalidRuleError
from ..core.time import MILLIS_PER_DAY, MILLIS_PER_HOUR, MONTH_LENGTHS, tdiv
from ..core.types import Era, Month, Weekday
from .gregorian import CalendarSystem, DEFAULT_SYSTEM


class DayMode(Enum):
    """How a transition selects its day within the month."""
    DAY_OF_MONTH = "dom"              # a fixed day of month
    NTH_WEEKDAY_IN_MONTH = "nth"      # 2nd Sunday; negative counts from the end (-1 = last)
    ON_OR_AFTER_DAY = ">="            # first weekday on or after a day of month
    ON_OR_BEFORE_DAY = "<="           # last weekday on or before a day of month


class TimeRef(Enum):
    """Clock a transition's time of day is given in."""
    WALL = "w"
    STANDARD = "s"
    UTC = "u"


def days_in_month(month: int, year: int) -> int:
    """
    Month length for zone arithmetic.

    Assumes the default cutover: every year before 1582 is Julian.
    """
    if month == Month.FEBRUARY:
        if year % 4 != 0:
            return 28
        if year < 1582:
            return 29
        return 29 if (year % 100 != 0 or year % 400 == 0) else 28
    return MONTH_LENGTHS[month]


def _rule_days_in_month(month: int) -> int:
    """Month length a yearly rule may rely on: February has 28 days."""
    return days_in_month(month, 1)


@dataclass(frozen=True)
class Transition:
    """
    The moment daylight saving starts or ends, repeated every year.

    `day` depends on `mode`: the day of month (DAY_OF_MONTH), the signed
    occurrence of `weekday` (NTH_WEEKDAY_IN_MONTH), or the anchor day of
    month (ON_OR_AFTER_DAY / ON_OR_BEFORE_DAY). `weekday` is 0 for
    DAY_OF_MONTH and 1..7 otherwise. `time` is milliseconds after midnight
    in the clock named by `time_ref`.
    """
    month: int
    mode: DayMode
    day: int
    weekday: int = 0
    time: int = 0
    time_ref: TimeRef = TimeRef.WALL

    def __post_init__(self) -> None:
        if not isinstance(self.mode, DayMode):
            raise InvalidRuleError(f"mode must be a DayMode, got {self.mode!r}")
        if not isinstance(self.time_ref, TimeRef):
            raise InvalidRuleError(f"time_ref must be a TimeRef, got {self.time_ref!r}")
        if not Month.JANUARY <= self.month <= Month.DECEMBER:
            raise InvalidRuleError(f"month must be 0..11, got {self.month}")
        if not 0 <= self.time <= MILLIS_PER_DAY:
            raise InvalidRuleError(f"time must be 0..{MILLIS_PER_DAY} ms after midnight, got {self.time}")

        max_days = _rule_days_in_month(self.month)
        if self.mode is DayMode.DAY_OF_MONTH:
            if self.weekday != 0:
                raise InvalidRuleError("weekday must be 0 for a day-of-month rule")
            if not 1 <= self.day <= max_days:
                raise InvalidRuleError(f"day must be 1..{max_days} in month {self.month}, got {self.day}")
            return

        if not Weekday.SUNDAY <= self.weekday <= Weekday.SATURDAY:
            raise InvalidRuleError(f"weekday must be 1..7, got {self.weekday}")
        if self.mode is DayMode.NTH_WEEKDAY_IN_MONTH:
            max_weeks = (max_days + 6) // 7
            if self.day == 0 or abs(self.day) > max_weeks:
                raise InvalidRuleError(
                    f"occurrence must be 1..{max_weeks} or -1..-{max_weeks} in month {self.month}, got {self.day}"
                )
        elif not 1 <= self.day <= max_days:
            raise InvalidRuleError(f"anchor day must be 1..{max_days} in month {self.month}, got {self.day}")

    @classmethod
    def encoded(
        cls,
        month: int,
        day: int,
        day_of_week: int,
        time: int,
        *,
        after: Optional[bool] = None,
        time_ref: TimeRef = TimeRef.WALL,
    ) -> "Transition":
        """
        Build a transition from the signed (day, day_of_week) encoding:

        - day_of_week == 0: `day` is a day of month
        - day_of_week > 0:  `day` is the nth `day_of_week`, negative from the end
        - day_of_week < 0:  first `-day_of_week` on or after `day` when day > 0,
                            on or before `-day` when day < 0

        When `after` is given and day_of_week is not 0, it selects on-or-after
        (True) or on-or-before (False) regardless of the signs.
        """
        if day_of_week != 0 and after is not None:
            mode = DayMode.ON_OR_AFTER_DAY if after else DayMode.ON_OR_BEFORE_DAY
            return cls(month, mode, abs(day), abs(day_of_week), time, time_ref)
        if day_of_week == 0:
            return cls(month, DayMode.DAY_OF_MONTH, day, 0, time, time_ref)
        if day_of_week > 0:
            return cls(month, DayMode.NTH_WEEKDAY_IN_MONTH, day, day_of_week, time, time_ref)
        if day == 0:
            raise InvalidRuleError("day must not be 0")
        mode = DayMode.ON_OR_BEFORE_DAY if day < 0 else DayMode.ON_OR_AFTER_DAY
        return cls(month, mode, abs(day), -day_of_week, time, time_ref)


@dataclass(frozen=True)
class DstSchedule:
    """Yearly daylight-saving schedule applying from `start_year` on."""
    start: Transition
    end: Transition
    savings: int = MILLIS_PER_HOUR
    start_year: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.start, Transition) or not isinstance(self.end, Transition):
            raise InvalidRuleError("start and end must both be Transition rules")
        if self.savings <= 0:
            raise InvalidRuleError(f"daylight savings must be positive, got {self.savings}")


def is_before(
    cal_year: int,
    cal_month: int,
    cal_day: int,
    cal_weekday: int,
    cal_millis: int,
    rule: Transition,
    rule_time: int,
) -> bool:
    """
    True if the given date is before the rule's change in that year, False if
    it is on or after it. `rule_time` is the rule's time normalised to the
    clock `cal_millis` is expressed in.
    """
    # Months are compared first. For the on-or-after/on-or-before modes the
    # change may fall in a neighbouring month, which this does not detect.
    if cal_month != rule.month:
        return cal_month < rule.month

    mode = rule.mode
    if mode is DayMode.DAY_OF_MONTH:
        if cal_day != rule.day:
            return cal_day < rule.day

    elif mode is DayMode.NTH_WEEKDAY_IN_MONTH:
        # Day of month of the rule's weekday in the same (Sunday based) week.
        day = cal_day + (rule.weekday - cal_weekday)
        # Shift to a 7-based count, or a -7-based one counting from month end.
        if rule.day < 0:
            day -= days_in_month(cal_month, cal_year) + 7
        else:
            day += 6
        #  rule.day > 0                rule.day < 0
        #  S  M  T  W  T  F  S        S  M  T  W  T  F  S
        #     7  8  9 10 11 12         -36-35-34-33-32-31
        # 13 14 15 16 17 18 19      -30-29-28-27-26-25-24
        # 20 21 22 23 24 25 26      -23-22-21-20-19-18-17
        # 27 28 29 30 31 32 33      -16-15-14-13-12-11-10
        # 34 35 36                   -9 -8 -7
        week = tdiv(day, 7)
        if week != rule.day:
            return week < rule.day
        if cal_weekday != rule.weekday:
            return cal_weekday < rule.weekday

    elif mode is DayMode.ON_OR_AFTER_DAY or mode is DayMode.ON_OR_BEFORE_DAY:
        # The last Sunday on or before the 12th is the first Sunday on or after the 6th.
        anchor = rule.day if mode is DayMode.ON_OR_AFTER_DAY else rule.day - 6
        # Day of month of the latest rule weekday on or before the given date.
        day = cal_day - ((7 if cal_weekday < rule.weekday else 0) + cal_weekday - rule.weekday)
        if day < anchor:
            return True
        if cal_weekday != rule.weekday or day >= anchor + 7:
            return False

    else:
        raise InvalidRuleError(f"unknown day mode {mode!r}")

    return cal_millis < rule_time


@dataclass(frozen=True)
class ZoneRule:
    """
    A time zone: a raw offset from UTC plus an optional DST schedule.

    Immutable once built; the `with_*` helpers return reconfigured copies.
    Safe to share between threads.
    """
    id: str
    raw_offset: int
    schedule: Optional[DstSchedule] = None

    def __post_init__(self) -> None:
        if not -MILLIS_PER_DAY < self.raw_offset < MILLIS_PER_DAY:
            raise InvalidRuleError(f"raw offset must be less than a day, got {self.raw_offset}")
        if self.schedule is not None and not isinstance(self.schedule, DstSchedule):
            raise InvalidRuleError("schedule must be a DstSchedule")

    # ---------------------------------------------------------
    # Configuration
    # ---------------------------------------------------------
    def with_raw_offset(self, raw_offset: int) -> "ZoneRule":
        return replace(self, raw_offset=raw_offset)

    def with_dst(
        self,
        start: Transition,
        end: Transition,
        *,
        savings: int = MILLIS_PER_HOUR,
        start_year: int = 0,
    ) -> "ZoneRule":
        return replace(self, schedule=DstSchedule(start, end, savings, start_year))

    def without_dst(self) -> "ZoneRule":
        return replace(self, schedule=None)

    @property
    def has_dst(self) -> bool:
        return self.schedule is not None

    @property
    def dst_savings(self) -> int:
        return self.schedule.savings if self.schedule is not None else 0

    @property
    def start_time(self) -> int:
        """Start time of day in local standard time."""
        start = self._require_schedule().start
        if start.time_ref is TimeRef.UTC:
            return start.time + self.raw_offset
        return start.time

    @property
    def end_time(self) -> int:
        """End time of day in local daylight time."""
        sched = self._require_schedule()
        end = sched.end
        if end.time_ref is TimeRef.WALL:
            return end.time
        if end.time_ref is TimeRef.STANDARD:
            return end.time + sched.savings
        return end.time + self.raw_offset + sched.savings

    def _require_schedule(self) -> DstSchedule:
        if self.schedule is None:
            raise InvalidRuleError(f"zone '{self.id}' has no daylight-saving schedule")
        return self.schedule

    # ---------------------------------------------------------
    # Queries
    # ---------------------------------------------------------
    def offset(
        self,
        year: int,
        month: int,
        day: int,
        weekday: int,
        millis: int,
        *,
        era: int = Era.AD,
    ) -> int:
        """
        Offset from UTC in milliseconds for a local standard date and time.

        `weekday` is redundant with the date but must match it. Daylight
        saving never applies to BC dates or before the schedule's start year.
        """
        if not Month.JANUARY <= month <= Month.DECEMBER:
            raise InvalidFieldError(f"month must be 0..11, got {month}")
        astro_year = year if era == Era.AD else 1 - year
        if not 1 <= day <= days_in_month(month, astro_year):
            raise InvalidFieldError(f"day {day} is not in month {month} of year {year}")
        if not Weekday.SUNDAY <= weekday <= Weekday.SATURDAY:
            raise InvalidFieldError(f"weekday must be 1..7, got {weekday}")

        sched = self.schedule
        if sched is None or era != Era.AD or year < sched.start_year:
            return self.raw_offset

        after_start = not is_before(year, month, day, weekday, millis, sched.start, self.start_time)
        before_end = is_before(year, month, day, weekday, millis + sched.savings, sched.end, self.end_time)

        if sched.start.month < sched.end.month:
            # Daylight time within the year.
            in_dst = after_start and before_end
        else:
            # Daylight time across the new year (southern hemisphere).
            in_dst = before_end or after_start
        return self.raw_offset + (sched.savings if in_dst else 0)

    def dst_offset(self, year: int, month: int, day: int, weekday: int, millis: int, *, era: int = Era.AD) -> int:
        return self.offset(year, month, day, weekday, millis, era=era) - self.raw_offset

    def offset_at(self, t: int, system: Optional[CalendarSystem] = None) -> int:
        """Offset from UTC in effect at the linear (UTC) time `t`."""
        system = system if system is not None else DEFAULT_SYSTEM
        fs = system.decompose(t + self.raw_offset)
        return self.offset(fs.year, fs.month, fs.day_of_month, fs.day_of_week, fs.millis_of_day, era=fs.era)

    def in_daylight_time(self, t: int, system: Optional[CalendarSystem] = None) -> bool:
        return self.has_dst and self.offset_at(t, system) != self.raw_offset

    def info(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"id": self.id, "raw_offset": self.raw_offset, "has_dst": self.has_dst}
        if self.schedule is not None:
            sched = self.schedule
            out.update(
                savings=sched.savings,
                start_year=sched.start_year,
                start=_transition_info(sched.start, self.start_time),
                end=_transition_info(sched.end, self.end_time),
            )
        return out


def _transition_info(rule: Transition, normalised_time: int) -> Dict[str, Any]:
    return {
        "month": Month(rule.month).name.capitalize(),
        "mode": rule.mode.name.lower(),
        "day": rule.day,
        "weekday": Weekday(rule.weekday).name.capitalize() if rule.weekday else None,
        "time": rule.time,
        "time_ref": rule.time_ref.name.lower(),
        "normalised_time": normalised_time,
    }


def zone_offset(
    raw_offset: int,
    dst_rules: Optional[DstSchedule],
    year: int,
    month: int,
    day_of_month: int,
    weekday: int,
    millis_of_day: int,
    *,
    era: int = Era.AD,
) -> int:
    """Offset from UTC of an anonymous zone; see ZoneRule.offset."""
    return ZoneRule("", raw_offset, dst_rules).offset(year, month, day_of_month, weekday, millis_of_day, era=era)
