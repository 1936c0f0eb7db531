"""
civcal.engines.factory
----------------------
Transforms pure data zone specifications into live ZoneRule objects.
"""

from __future__ import annotations

import logging
from typing import Optional

from civcal.core.errors import InvalidRuleError
from civcal.core.types import TransitionSpec, ZoneSpec
from civcal.engines.zone import DstSchedule, TimeRef, Transition, ZoneRule

log = logging.getLogger(__name__)


def build_transition(spec: TransitionSpec) -> Transition:
    try:
        time_ref = TimeRef(spec.time_ref)
    except ValueError as e:
        raise InvalidRuleError(f"time_ref must be one of 'w', 's', 'u', got {spec.time_ref!r}") from e
    return Transition.encoded(
        spec.month, spec.day, spec.day_of_week, spec.time, after=spec.after, time_ref=time_ref
    )


def make_zone(spec: ZoneSpec) -> ZoneRule:
    """The universal entry point."""
    if (spec.start is None) != (spec.end is None):
        raise InvalidRuleError(f"zone '{spec.id}': a DST start rule needs an end rule and vice versa")

    schedule: Optional[DstSchedule] = None
    if spec.start is not None and spec.end is not None:
        schedule = DstSchedule(
            start=build_transition(spec.start),
            end=build_transition(spec.end),
            savings=spec.savings,
            start_year=spec.start_year,
        )

    zone = ZoneRule(spec.id, spec.raw_offset, schedule)
    log.debug("built zone %s (raw offset %d ms, dst=%s)", zone.id, zone.raw_offset, zone.has_dst)
    return zone
