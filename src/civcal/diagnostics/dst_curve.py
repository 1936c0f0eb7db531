#!/usr/bin/env python3
from __future__ import annotations

import argparse
from typing import List, Optional, Tuple

import civcal
from civcal.core.time import MILLIS_PER_HOUR, MILLIS_PER_MINUTE
from civcal.core.types import Field


def _need_numpy():
    try:
        import numpy as np
        return np
    except ImportError as e:
        raise RuntimeError('Need numpy. Install: pip install "civcal[diagnostics]"') from e


def _need_matplotlib():
    try:
        import matplotlib.pyplot as plt
        return plt
    except ImportError as e:
        raise RuntimeError('Need matplotlib. Install: pip install "civcal[diagnostics]"') from e


def sample_offsets(zone: str, year: int, step_minutes: int) -> Tuple[List[int], List[int]]:
    """(UTC instants, offsets) for every `step_minutes` of a civil year."""
    t0 = civcal.compose({Field.YEAR: year}) - civcal.get_zone(zone).raw_offset
    t1 = civcal.compose({Field.YEAR: year + 1}) - civcal.get_zone(zone).raw_offset
    step = step_minutes * MILLIS_PER_MINUTE
    times = list(range(t0, t1, step))
    offsets = [civcal.local_fields(t, zone).offset for t in times]
    return times, offsets


def transitions(times: List[int], offsets: List[int]) -> List[Tuple[int, int, int]]:
    """(instant, old offset, new offset) wherever consecutive samples differ."""
    out = []
    for i in range(1, len(offsets)):
        if offsets[i] != offsets[i - 1]:
            out.append((times[i], offsets[i - 1], offsets[i]))
    return out


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Plot a zone's UTC offset over one civil year.")
    p.add_argument("--zones", default="America/New_York,Europe/Berlin,Australia/Sydney",
                   help="Comma-separated zone ids.")
    p.add_argument("--year", type=int, default=2024)
    p.add_argument("--step", type=int, default=30, help="Sampling step in minutes.")
    p.add_argument("--out", default="dst_curve.png", help="Output image path.")
    p.add_argument("--no-plot", action="store_true", help="Only print the detected transitions.")
    args = p.parse_args(argv)

    zones = [z.strip() for z in args.zones.split(",") if z.strip()]
    series = {}
    for z in zones:
        times, offsets = sample_offsets(z, args.year, args.step)
        series[z] = (times, offsets)
        print(f"{z}:")
        for t, old, new in transitions(times, offsets):
            print(f"  {civcal.local_fields(t, z).fields}  {old / MILLIS_PER_HOUR:+.2f}h -> {new / MILLIS_PER_HOUR:+.2f}h")

    if args.no_plot:
        return 0

    np = _need_numpy()
    plt = _need_matplotlib()

    fig, ax = plt.subplots(figsize=(12, 4))
    for z, (times, offsets) in series.items():
        t = np.asarray(times, dtype=float)
        days = (t - t[0]) / (24 * MILLIS_PER_HOUR)
        hours = np.asarray(offsets, dtype=float) / MILLIS_PER_HOUR
        ax.step(days, hours, where="post", label=z, lw=1.4)

    ax.set_xlim(0, 366)
    ax.set_xlabel(f"Day of {args.year} (local standard time)")
    ax.set_ylabel("UTC offset (hours)")
    ax.grid(True, alpha=0.3)
    ax.set_title(f"UTC offsets through {args.year}")
    ax.legend(loc="center left", bbox_to_anchor=(1.01, 0.5), frameon=False)
    fig.tight_layout()
    fig.savefig(args.out, dpi=200)
    print(f"Saved: {args.out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
