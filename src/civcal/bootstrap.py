from __future__ import annotations
import logging
from civcal.core.engine import ZoneRegistry
from civcal.engines.specs import ZONE_SPECS
from civcal.engines.factory import make_zone

log = logging.getLogger(__name__)

def build_registry() -> ZoneRegistry:
    zones = {}
    for name, spec in ZONE_SPECS.items():
        zones[name] = make_zone(spec)
    log.debug("zone registry built with %d zones", len(zones))
    return ZoneRegistry(zones)
