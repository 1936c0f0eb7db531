from __future__ import annotations

import argparse
import importlib
import logging
import re
import sys
from typing import Dict


_DATETIME_RE = re.compile(
    r"^(-?\d{1,9})-(\d{1,2})-(\d{1,2})"
    r"(?:[T ](\d{1,2}):(\d{1,2})(?::(\d{1,2})(?:\.(\d{1,3}))?)?)?$"
)


def _parse_datetime(s: str) -> Dict[int, int]:
    """
    'YYYY-MM-DD[THH:MM[:SS[.mmm]]]' -> field mapping (month converted to 0-based).
    Values are not range checked; the calendar carries overflows.
    """
    from civcal.core.types import Field

    m = _DATETIME_RE.match(s)
    if not m:
        raise SystemExit(f"Bad date/time '{s}'. Expected YYYY-MM-DD[THH:MM[:SS[.mmm]]]")
    y, mo, d, hh, mm, ss, ms = m.groups()
    out = {
        Field.YEAR: int(y),
        Field.MONTH: int(mo) - 1,
        Field.DAY_OF_MONTH: int(d),
        Field.HOUR_OF_DAY: int(hh or 0),
        Field.MINUTE: int(mm or 0),
        Field.SECOND: int(ss or 0),
        Field.MILLISECOND: int((ms or "0").ljust(3, "0")),
    }
    return out


def _fmt_offset(ms: int) -> str:
    sign = "-" if ms < 0 else "+"
    minutes = abs(ms) // 60000
    return f"{sign}{minutes // 60:02d}:{minutes % 60:02d}"


# Command name -> diagnostics module; imported on demand so the plotting
# extras stay optional.
_DIAGNOSTICS = {
    "month": "month_grid",
    "round-trip": "round_trip",
    "dst-curve": "dst_curve",
}


def _run_diagnostic(name: str, argv: list[str]) -> int:
    mod = importlib.import_module(f"civcal.diagnostics.{_DIAGNOSTICS[name]}")
    return int(mod.main(argv) or 0)


def cmd_decompose(argv: list[str]) -> int:
    import civcal
    from civcal.core.types import Field

    p = argparse.ArgumentParser(prog="civcal decompose", description="Milliseconds since the epoch -> civil fields")
    p.add_argument("millis", type=int, help="milliseconds since 1970-01-01T00:00:00 UTC (may be negative)")
    p.add_argument("--cutover", type=int, default=None, help="Julian->Gregorian cutover in epoch milliseconds")
    p.add_argument("--fields", action="store_true", help="print every field slot")
    args = p.parse_args(argv)

    fs = civcal.decompose(args.millis, args.cutover)
    print(fs)
    if args.fields:
        for f in Field:
            print(f"  {f.name:<13} = {fs.get(f)}")
    return 0


def cmd_compose(argv: list[str]) -> int:
    import civcal
    from civcal.core.types import Era, Field

    p = argparse.ArgumentParser(prog="civcal compose", description="Civil date/time -> milliseconds since the epoch")
    p.add_argument("datetime", help="YYYY-MM-DD[THH:MM[:SS[.mmm]]] (out-of-range values carry)")
    p.add_argument("--era", choices=["AD", "BC"], default="AD")
    p.add_argument("--cutover", type=int, default=None, help="Julian->Gregorian cutover in epoch milliseconds")
    args = p.parse_args(argv)

    values = _parse_datetime(args.datetime)
    values[Field.ERA] = Era[args.era]
    t = civcal.compose(values, args.cutover)
    print(t)
    print(civcal.decompose(t, args.cutover))
    return 0


def cmd_leap(argv: list[str]) -> int:
    import civcal

    p = argparse.ArgumentParser(prog="civcal leap", description="Leap year test (Julian before the cutover, Gregorian after)")
    p.add_argument("year", type=int, help="astronomical year (0 = 1 BC)")
    p.add_argument("--cutover", type=int, default=None)
    args = p.parse_args(argv)

    leap = civcal.is_leap_year(args.year, args.cutover)
    print(f"{args.year}: {'leap' if leap else 'common'} year")
    return 0


def cmd_offset(argv: list[str]) -> int:
    import civcal

    p = argparse.ArgumentParser(prog="civcal offset", description="Zone offset for a local standard date/time")
    p.add_argument("zone", help="zone id (see `civcal zones`)")
    p.add_argument("datetime", help="YYYY-MM-DD[THH:MM[:SS[.mmm]]] in local standard time")
    args = p.parse_args(argv)

    zone = civcal.get_zone(args.zone)
    fs = civcal.decompose(civcal.compose(_parse_datetime(args.datetime)))
    off = zone.offset(fs.year, fs.month, fs.day_of_month, fs.day_of_week, fs.millis_of_day, era=fs.era)
    dst = "daylight" if off != zone.raw_offset else "standard"
    print(f"{zone.id} {fs}: {off} ms (UTC{_fmt_offset(off)}, {dst})")
    return 0


def cmd_zones(argv: list[str]) -> int:
    import civcal

    p = argparse.ArgumentParser(prog="civcal zones", description="List built-in zones")
    p.add_argument("--debug", action="store_true", help="print the full rule of each zone")
    args = p.parse_args(argv)

    for name in civcal.list_zones():
        info = civcal.zone_info(name)
        dst = f"  dst +{info['savings'] // 60000}m from {info['start_year']}" if info["has_dst"] else ""
        print(f"{name:<22} UTC{_fmt_offset(info['raw_offset'])}{dst}")
        if args.debug and info["has_dst"]:
            print(f"    start: {info['start']}")
            print(f"    end:   {info['end']}")
    return 0


def cmd_now(argv: list[str]) -> int:
    import civcal

    p = argparse.ArgumentParser(prog="civcal now", description="Current time as civil fields")
    p.add_argument("--zone", default="UTC")
    args = p.parse_args(argv)

    t = civcal.now().get_time()
    lt = civcal.local_fields(t, args.zone)
    print(f"{t}  {lt.fields}  {lt.zone} UTC{_fmt_offset(lt.offset)}")
    return 0


def main(argv: list[str] | None = None) -> int:
    from civcal.core.errors import CivcalError

    if argv is None:
        argv = sys.argv[1:]

    p = argparse.ArgumentParser(prog="civcal", description="Julian/Gregorian civil calendar and DST zone toolkit.")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("decompose", help="Milliseconds since the epoch -> civil fields")
    sub.add_parser("compose", help="Civil date/time -> milliseconds since the epoch")
    sub.add_parser("leap", help="Leap year test")
    sub.add_parser("offset", help="Zone offset for a local standard date/time")
    sub.add_parser("zones", help="List built-in zones")
    sub.add_parser("now", help="Current time as civil fields")
    sub.add_parser("month", help="Print a civil month as a weekday grid (diagnostics)")

    p_diag = sub.add_parser("diag", help="Diagnostics tools")
    p_diag.add_argument(
        "tool",
        choices=[k for k in _DIAGNOSTICS if k != "month"],
        help="Which diagnostic to run",
    )

    args, rest = p.parse_known_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    commands = {
        "decompose": cmd_decompose,
        "compose": cmd_compose,
        "leap": cmd_leap,
        "offset": cmd_offset,
        "zones": cmd_zones,
        "now": cmd_now,
    }

    try:
        if args.cmd in commands:
            return commands[args.cmd](rest)

        if args.cmd == "month":
            return _run_diagnostic("month", rest)

        if args.cmd == "diag":
            return _run_diagnostic(args.tool, rest)
    except (CivcalError, KeyError) as e:
        raise SystemExit(f"civcal {args.cmd}: {e}") from e

    raise RuntimeError("unreachable")


if __name__ == "__main__":
    raise SystemExit(main())
