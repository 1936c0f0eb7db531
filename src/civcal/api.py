from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from .core.engine import ZoneRegistry
from .core.types import Field, FieldSet, LocalTime, ZoneSpec
from .engines import gregorian
from .engines.calendar import Calendar
from .engines.factory import make_zone as _make_zone
from .engines.zone import DstSchedule, ZoneRule, zone_offset as _zone_offset

FieldValues = Union[FieldSet, Mapping[Field, int]]
ZoneLike = Union[str, ZoneRule]

_registry: Optional[ZoneRegistry] = None

def set_registry(reg: ZoneRegistry) -> None:
    global _registry
    _registry = reg

def _reg() -> ZoneRegistry:
    if _registry is None:
        raise RuntimeError("Zone registry not initialized")
    return _registry

def _zone(zone: ZoneLike) -> ZoneRule:
    return zone if isinstance(zone, ZoneRule) else _reg().get(zone)

# ============================================================
# Calendar arithmetic
# ============================================================

def compose(fields: FieldValues, cutover: Optional[int] = None) -> int:
    """Fields -> milliseconds since 1970-01-01T00:00:00 UTC."""
    return gregorian.compose(fields, cutover)

def decompose(t: int, cutover: Optional[int] = None) -> FieldSet:
    """Milliseconds since the epoch -> civil fields."""
    return gregorian.decompose(t, cutover)

def is_leap_year(year: int, cutover: Optional[int] = None) -> bool:
    return gregorian.is_leap_year(year, cutover)

def now(*, clock: Optional[Callable[[], int]] = None, cutover: Optional[int] = None) -> Calendar:
    """A calendar set to the current time (or to `clock()` milliseconds)."""
    return Calendar.now(clock, system=gregorian.system_for(cutover))

# ============================================================
# Zones
# ============================================================

def list_zones() -> List[str]:
    return _reg().list()

def get_zone(zone: str) -> ZoneRule:
    return _reg().get(zone)

def zone_info(zone: str) -> Dict[str, Any]:
    return _reg().get(zone).info()

def make_zone(spec: ZoneSpec) -> ZoneRule:
    return _make_zone(spec)

def register_zone(name: str, zone: Union[ZoneRule, ZoneSpec], *, overwrite: bool = False) -> None:
    if isinstance(zone, ZoneSpec):
        zone = _make_zone(zone)
    _reg().register(name, zone, overwrite=overwrite)

def zone_offset(
    raw_offset_ms: int,
    dst_rules: Optional[DstSchedule],
    year: int,
    month: int,
    day_of_month: int,
    weekday: int,
    millis_of_day: int,
) -> int:
    return _zone_offset(raw_offset_ms, dst_rules, year, month, day_of_month, weekday, millis_of_day)

def local_fields(t: int, zone: ZoneLike = "UTC", *, cutover: Optional[int] = None) -> LocalTime:
    """Wall-clock fields of the UTC instant `t` in `zone`."""
    z = _zone(zone)
    system = gregorian.system_for(cutover)
    offset = z.offset_at(t, system)
    return LocalTime(
        utc=t,
        zone=z.id,
        zone_offset=z.raw_offset,
        dst_offset=offset - z.raw_offset,
        fields=system.decompose(t + offset),
    )

def to_utc(fields: FieldValues, zone: ZoneLike = "UTC", *, cutover: Optional[int] = None) -> int:
    """
    UTC instant of wall-clock fields in `zone`.

    Wall times skipped or repeated at a DST change resolve to the offset in
    effect at the corresponding standard time.
    """
    z = _zone(zone)
    system = gregorian.system_for(cutover)
    local = system.compose(fields)
    return local - z.offset_at(local - z.raw_offset, system)
