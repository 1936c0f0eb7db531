"""Diagnostics package.

- round_trip, month_grid: always available, text output
- dst_curve: plotting needs the diagnostics extras (numpy, matplotlib)
"""

__all__ = ["round_trip", "month_grid", "dst_curve"]
