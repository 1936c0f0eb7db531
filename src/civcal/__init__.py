"""civcal public API.

Keep this surface small: users should mostly interact with functions re-exported here.
"""

# Initialize registry on import
from . import api_init as _api_init  # noqa: F401

from .api import (
    compose,
    decompose,
    is_leap_year,
    now,
    list_zones,
    get_zone,
    zone_info,
    make_zone,
    register_zone,
    zone_offset,
    local_fields,
    to_utc,
)
from .core.errors import ArithmeticRangeError, CivcalError, InvalidFieldError, InvalidRuleError
from .core.time import DEFAULT_CUTOVER
from .core.types import Era, Field, FieldSet, LocalTime, Month, Weekday, ZoneSpec, TransitionSpec
from .engines.calendar import Calendar
from .engines.gregorian import CalendarSystem
from .engines.zone import DayMode, DstSchedule, TimeRef, Transition, ZoneRule

__all__ = [
    "compose",
    "decompose",
    "is_leap_year",
    "now",
    "list_zones",
    "get_zone",
    "zone_info",
    "make_zone",
    "register_zone",
    "zone_offset",
    "local_fields",
    "to_utc",
    "ArithmeticRangeError",
    "CivcalError",
    "InvalidFieldError",
    "InvalidRuleError",
    "DEFAULT_CUTOVER",
    "Era",
    "Field",
    "FieldSet",
    "LocalTime",
    "Month",
    "Weekday",
    "ZoneSpec",
    "TransitionSpec",
    "Calendar",
    "CalendarSystem",
    "DayMode",
    "DstSchedule",
    "TimeRef",
    "Transition",
    "ZoneRule",
]
