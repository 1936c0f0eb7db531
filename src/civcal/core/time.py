from __future__ import annotations

import time as _time


MILLIS_PER_SECOND = 1000
MILLIS_PER_MINUTE = 60 * MILLIS_PER_SECOND
MILLIS_PER_HOUR = 60 * MILLIS_PER_MINUTE
MILLIS_PER_DAY = 24 * MILLIS_PER_HOUR

# Signed 64-bit range of a linear time.
MIN_TIME = -(2 ** 63)
MAX_TIME = 2 ** 63 - 1

# Days from Jan 1 of year '0' (not a leap year) to the epoch, counted with
# (year-1)*365 + floor((year-1)/4).  The Gregorian correction is
# floor((year-1)/400) - floor((year-1)/100); for a Julian date it is -2.
EPOCH_DAYS = 719162

EPOCH_YEAR = 1970

# Midnight UTC, 1582-10-15 (Gregorian) == 1582-10-05 (Julian).
DEFAULT_CUTOVER = -141427 * MILLIS_PER_DAY

# Cumulative day counts before each month of a common year.
DAYS_BEFORE_MONTH = (0, 31, 59, 90, 120, 151, 181, 212, 243, 273, 304, 334)
MONTH_LENGTHS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)

# Average year lengths used for the first estimate of a year from a day number.
GREGORIAN_CYCLE_DAYS = 365 * 400 + 100 - 4 + 1
JULIAN_CYCLE_DAYS = 365 * 4 + 1


def tdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def split_time(t: int) -> tuple[int, int]:
    """
    Split a linear time into (day_number, millis_of_day).

    Uses floor semantics so that millis_of_day is always in [0, MILLIS_PER_DAY),
    including for times before the epoch:
      day_number * MILLIS_PER_DAY + millis_of_day == t
    """
    return divmod(t, MILLIS_PER_DAY)


def in_time_range(t: int) -> bool:
    return MIN_TIME <= t <= MAX_TIME


def wall_clock_millis() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return _time.time_ns() // 1_000_000
