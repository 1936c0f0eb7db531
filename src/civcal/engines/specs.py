from __future__ import annotations

from typing import Dict

from ..core.time import MILLIS_PER_HOUR, MILLIS_PER_MINUTE
from ..core.types import Month, TransitionSpec, Weekday, ZoneSpec


H = MILLIS_PER_HOUR
SUN = Weekday.SUNDAY


# ============================================================
# FIXED OFFSETS
# ============================================================

UTC = ZoneSpec("UTC", 0, meta={"description": "Coordinated Universal Time"})
GMT = ZoneSpec("GMT", 0, meta={"description": "Greenwich Mean Time, no daylight saving"})
TOKYO = ZoneSpec("Asia/Tokyo", 9 * H, meta={"description": "Japan Standard Time"})
KOLKATA = ZoneSpec("Asia/Kolkata", 5 * H + 30 * MILLIS_PER_MINUTE, meta={"description": "India Standard Time"})
PHOENIX = ZoneSpec("America/Phoenix", -7 * H, meta={"description": "Mountain Standard Time, no daylight saving"})


# ============================================================
# NORTH AMERICA (since 2007)
#   2nd Sunday of March 02:00 wall -> 1st Sunday of November 02:00 wall
# ============================================================

US_START = TransitionSpec(Month.MARCH, 2, SUN, 2 * H)
US_END = TransitionSpec(Month.NOVEMBER, 1, SUN, 2 * H)


def _us(zone_id: str, hours: int, description: str) -> ZoneSpec:
    return ZoneSpec(zone_id, hours * H, US_START, US_END, start_year=2007, meta={"description": description})


NEW_YORK = _us("America/New_York", -5, "US Eastern")
CHICAGO = _us("America/Chicago", -6, "US Central")
DENVER = _us("America/Denver", -7, "US Mountain")
LOS_ANGELES = _us("America/Los_Angeles", -8, "US Pacific")


# ============================================================
# EUROPE (since 1996)
#   last Sunday of March 01:00 UTC -> last Sunday of October 01:00 UTC
# ============================================================

EU_START = TransitionSpec(Month.MARCH, -1, SUN, 1 * H, time_ref="u")
EU_END = TransitionSpec(Month.OCTOBER, -1, SUN, 1 * H, time_ref="u")


def _eu(zone_id: str, hours: int, description: str) -> ZoneSpec:
    return ZoneSpec(zone_id, hours * H, EU_START, EU_END, start_year=1996, meta={"description": description})


LONDON = _eu("Europe/London", 0, "Greenwich Mean Time / British Summer Time")
BERLIN = _eu("Europe/Berlin", 1, "Central European Time")
HELSINKI = _eu("Europe/Helsinki", 2, "Eastern European Time")


# ============================================================
# SOUTHERN HEMISPHERE (daylight time spans the new year)
# ============================================================

SYDNEY = ZoneSpec(
    "Australia/Sydney",
    10 * H,
    start=TransitionSpec(Month.OCTOBER, 1, SUN, 2 * H, time_ref="s"),
    end=TransitionSpec(Month.APRIL, 1, SUN, 2 * H, time_ref="s"),
    start_year=2008,
    meta={"description": "Australian Eastern Time"},
)

LORD_HOWE = ZoneSpec(
    "Australia/Lord_Howe",
    10 * H + 30 * MILLIS_PER_MINUTE,
    start=TransitionSpec(Month.OCTOBER, 1, SUN, 2 * H),
    end=TransitionSpec(Month.APRIL, 1, SUN, 2 * H),
    savings=30 * MILLIS_PER_MINUTE,
    start_year=2008,
    meta={"description": "Lord Howe Island, half-hour daylight saving"},
)

AUCKLAND = ZoneSpec(
    "Pacific/Auckland",
    12 * H,
    start=TransitionSpec(Month.SEPTEMBER, -1, SUN, 2 * H, time_ref="s"),
    end=TransitionSpec(Month.APRIL, 1, SUN, 2 * H, time_ref="s"),
    start_year=2008,
    meta={"description": "New Zealand Time"},
)


ZONE_SPECS: Dict[str, ZoneSpec] = {
    spec.id: spec
    for spec in (
        UTC, GMT, TOKYO, KOLKATA, PHOENIX,
        NEW_YORK, CHICAGO, DENVER, LOS_ANGELES,
        LONDON, BERLIN, HELSINKI,
        SYDNEY, LORD_HOWE, AUCKLAND,
    )
}
