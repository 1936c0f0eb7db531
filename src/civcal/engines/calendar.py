"""
civcal.engines.calendar
-----------------------
A mutable calendar holding a civil date both as a field array and as a
linear time, recomputing whichever side is stale on access.

Every `set()` invalidates the cached time (and the derived fields); every
`set_time()` recomputes all fields. Accessors and mutators of one instance
are serialised by an internal lock; share a calendar across threads by
`copy()` rather than by concurrent mutation.
"""

from __future__ import annotations

import operator
import threading
from typing import Callable, List, Optional

from ..core.errors import ArithmeticRangeError, InvalidFieldError
from ..core.time import MILLIS_PER_DAY, in_time_range, wall_clock_millis
from ..core.types import EPOCH_FIELDS, FIELD_COUNT, FIELD_RANGES, Field, FieldSet
from .gregorian import DEFAULT_SYSTEM, CalendarSystem, as_field, day_of_week


class Calendar:
    def __init__(
        self,
        time: Optional[int] = None,
        *,
        system: Optional[CalendarSystem] = None,
        lenient: bool = True,
    ):
        self.system = system if system is not None else DEFAULT_SYSTEM
        self.lenient = lenient
        self._lock = threading.RLock()
        self._fields: List[int] = []
        self._is_set: List[bool] = []
        self._time = 0
        self._time_valid = False
        self._fields_valid = False
        self.clear()
        if time is not None:
            self.set_time(time)

    @classmethod
    def now(
        cls,
        clock: Optional[Callable[[], int]] = None,
        *,
        system: Optional[CalendarSystem] = None,
        lenient: bool = True,
    ) -> "Calendar":
        """A calendar seeded from a clock returning milliseconds since the epoch."""
        clock = clock if clock is not None else wall_clock_millis
        return cls(clock(), system=system, lenient=lenient)

    # ---------------------------------------------------------
    # State
    # ---------------------------------------------------------
    @property
    def time_valid(self) -> bool:
        with self._lock:
            return self._time_valid

    @property
    def fields_valid(self) -> bool:
        with self._lock:
            return self._fields_valid

    def is_set(self, field: int) -> bool:
        f = as_field(field)
        with self._lock:
            return self._is_set[f]

    def clear(self) -> None:
        """Reset to the epoch with every field unset."""
        with self._lock:
            self._fields = list(EPOCH_FIELDS)
            self._is_set = [False] * FIELD_COUNT
            self._time = 0
            self._time_valid = False
            self._fields_valid = False

    # ---------------------------------------------------------
    # Time
    # ---------------------------------------------------------
    def get_time(self) -> int:
        with self._lock:
            if not self._time_valid:
                self._compute_time()
            return self._time

    def set_time(self, t: int) -> None:
        t = operator.index(t)
        if not in_time_range(t):
            raise ArithmeticRangeError(f"time {t} is outside the 64-bit range")
        with self._lock:
            self.clear()
            self._time = t
            self._time_valid = True
            self._compute_fields()

    # ---------------------------------------------------------
    # Fields
    # ---------------------------------------------------------
    def get(self, field: int) -> int:
        f = as_field(field)
        with self._lock:
            # A field that is not set may be stale even if the others are valid.
            if not self._is_set[f]:
                self._fields_valid = False
            self.complete()
            return self._fields[f]

    def set(self, field: int, value: int) -> None:
        f = as_field(field)
        try:
            value = operator.index(value)
        except TypeError as e:
            raise InvalidFieldError(f"{f.name} must be an integer, got {value!r}") from e
        if not self.lenient:
            _check_range(f, value)
        with self._lock:
            if self._time_valid:
                self._is_set = [False] * FIELD_COUNT
            self._time_valid = False
            self._fields_valid = False
            self._fields[f] = value
            self._is_set[f] = True

    def fields(self) -> FieldSet:
        with self._lock:
            self.complete()
            return FieldSet(*self._fields)

    def complete(self) -> None:
        with self._lock:
            if not self._time_valid:
                self._compute_time()
            if not self._fields_valid:
                self._compute_fields()

    def _compute_time(self) -> None:
        self._time = self.system.compose_array(self._fields, self._is_set)
        self._fields[Field.DAY_OF_WEEK] = day_of_week(self._time // MILLIS_PER_DAY)
        self._time_valid = True

    def _compute_fields(self) -> None:
        self._fields = list(self.system.decompose(self._time).as_tuple())
        self._is_set = [True] * FIELD_COUNT
        self._fields_valid = True

    # ---------------------------------------------------------
    # Comparison
    # ---------------------------------------------------------
    def copy(self) -> "Calendar":
        with self._lock:
            other = Calendar(system=self.system, lenient=self.lenient)
            other._fields = list(self._fields)
            other._is_set = list(self._is_set)
            other._time = self._time
            other._time_valid = self._time_valid
            other._fields_valid = self._fields_valid
            return other

    def before(self, other: object) -> bool:
        """True when `other` is a Calendar with a later time."""
        if not isinstance(other, Calendar):
            return False
        return self.get_time() < other.get_time()

    def after(self, other: object) -> bool:
        if not isinstance(other, Calendar):
            return False
        return self.get_time() > other.get_time()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Calendar):
            return NotImplemented
        return self.get_time() == other.get_time() and self.system == other.system

    def __repr__(self) -> str:
        return f"Calendar({self.fields()}, cutover={self.system.cutover})"


def _check_range(field: Field, value: int) -> None:
    lo, hi = FIELD_RANGES[field]
    if value < lo or (hi is not None and value > hi):
        bound = f"{lo}.." + ("" if hi is None else str(hi))
        raise InvalidFieldError(f"{field.name} must be in {bound}, got {value}")
