from __future__ import annotations
from dataclasses import dataclass, field as dc_field, fields as dc_fields
from enum import IntEnum
from typing import Any, Dict, Optional, Tuple


class Field(IntEnum):
    """Slots of a calendar field array."""
    ERA = 0
    YEAR = 1
    MONTH = 2
    DAY_OF_MONTH = 3
    DAY_OF_YEAR = 4
    DAY_OF_WEEK = 5
    AM_PM = 6
    HOUR = 7
    HOUR_OF_DAY = 8
    MINUTE = 9
    SECOND = 10
    MILLISECOND = 11

FIELD_COUNT = len(Field)


class Era(IntEnum):
    BC = 0
    AD = 1


class Weekday(IntEnum):
    SUNDAY = 1
    MONDAY = 2
    TUESDAY = 3
    WEDNESDAY = 4
    THURSDAY = 5
    FRIDAY = 6
    SATURDAY = 7


class Month(IntEnum):
    JANUARY = 0
    FEBRUARY = 1
    MARCH = 2
    APRIL = 3
    MAY = 4
    JUNE = 5
    JULY = 6
    AUGUST = 7
    SEPTEMBER = 8
    OCTOBER = 9
    NOVEMBER = 10
    DECEMBER = 11


AM = 0
PM = 1

# Values of an unset field: 1970-01-01T00:00:00.000 AD, a Thursday.
EPOCH_FIELDS: Tuple[int, ...] = (
    Era.AD, 1970, Month.JANUARY, 1, 1, Weekday.THURSDAY, AM, 0, 0, 0, 0, 0,
)

# Legal (inclusive) ranges used when a calendar validates eagerly.
FIELD_RANGES: Dict[Field, Tuple[int, Optional[int]]] = {
    Field.ERA: (Era.BC, Era.AD),
    Field.YEAR: (1, None),
    Field.MONTH: (Month.JANUARY, Month.DECEMBER),
    Field.DAY_OF_MONTH: (1, 31),
    Field.DAY_OF_YEAR: (1, 366),
    Field.DAY_OF_WEEK: (Weekday.SUNDAY, Weekday.SATURDAY),
    Field.AM_PM: (AM, PM),
    Field.HOUR: (0, 11),
    Field.HOUR_OF_DAY: (0, 23),
    Field.MINUTE: (0, 59),
    Field.SECOND: (0, 59),
    Field.MILLISECOND: (0, 999),
}


@dataclass(frozen=True)
class FieldSet:
    """A fully decomposed civil date and time. Every slot is set."""
    era: int
    year: int
    month: int
    day_of_month: int
    day_of_year: int
    day_of_week: int
    am_pm: int
    hour: int
    hour_of_day: int
    minute: int
    second: int
    millisecond: int

    def get(self, field: Field) -> int:
        return getattr(self, Field(field).name.lower())

    def as_tuple(self) -> Tuple[int, ...]:
        return tuple(getattr(self, f.name) for f in dc_fields(self))

    @property
    def astronomical_year(self) -> int:
        """Year with 1 BC as 0, 2 BC as -1, ..."""
        return self.year if self.era == Era.AD else 1 - self.year

    @property
    def millis_of_day(self) -> int:
        return ((self.hour_of_day * 60 + self.minute) * 60 + self.second) * 1000 + self.millisecond

    def __str__(self) -> str:
        era = "" if self.era == Era.AD else " BC"
        return (
            f"{self.year:04d}-{self.month + 1:02d}-{self.day_of_month:02d}{era} "
            f"{self.hour_of_day:02d}:{self.minute:02d}:{self.second:02d}.{self.millisecond:03d} "
            f"({Weekday(self.day_of_week).name.capitalize()})"
        )


@dataclass(frozen=True)
class TransitionSpec:
    """
    Pure data for a DST transition in the signed encoding of
    `Transition.encoded` (day, day_of_week, optional `after` flag).
    time_ref: "w" (wall), "s" (standard) or "u" (UTC).
    """
    month: int
    day: int
    day_of_week: int
    time: int
    after: Optional[bool] = None
    time_ref: str = "w"


@dataclass(frozen=True)
class ZoneSpec:
    """Pure data payload for constructing a ZoneRule."""
    id: str
    raw_offset: int
    start: Optional[TransitionSpec] = None
    end: Optional[TransitionSpec] = None
    savings: int = 60 * 60 * 1000
    start_year: int = 0
    meta: Dict[str, Any] = dc_field(default_factory=dict)


@dataclass(frozen=True)
class LocalTime:
    """A UTC instant seen on a zone's wall clock."""
    utc: int
    zone: str
    zone_offset: int
    dst_offset: int
    fields: FieldSet

    @property
    def offset(self) -> int:
        return self.zone_offset + self.dst_offset
