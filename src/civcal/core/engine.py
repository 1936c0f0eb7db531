from __future__ import annotations
import difflib
import logging
from dataclasses import dataclass
from typing import Dict, List, Protocol

log = logging.getLogger(__name__)

class Zone(Protocol):
    id: str
    raw_offset: int
    def offset(self, year: int, month: int, day: int, weekday: int, millis: int, *, era: int = ...) -> int: ...
    def offset_at(self, t: int) -> int: ...

@dataclass
class ZoneRegistry:
    _zones: Dict[str, Zone]

    def get(self, name: str) -> Zone:
        zone = self._zones.get(name)
        if zone is None:
            raise KeyError(self._miss_message(name))
        return zone

    def list(self) -> List[str]:
        return sorted(self._zones.keys())

    def register(self, name: str, zone: Zone, *, overwrite: bool = False) -> None:
        if name in self._zones:
            if not overwrite:
                raise KeyError(f"Zone '{name}' already exists. Use overwrite=True to replace.")
            log.debug("replacing zone %s", name)
        self._zones[name] = zone

    def _miss_message(self, name: str) -> str:
        # Zone ids are compared case-insensitively when suggesting.
        by_fold = {k.casefold(): k for k in self._zones}
        close = difflib.get_close_matches(name.casefold(), list(by_fold), n=3, cutoff=0.6)
        msg = f"Unknown zone '{name}'."
        if close:
            msg += " Did you mean: " + ", ".join(by_fold[c] for c in close) + "?"
        return msg + f" {len(self._zones)} zones available (see `civcal zones`)."
