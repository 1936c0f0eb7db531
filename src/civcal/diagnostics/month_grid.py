from __future__ import annotations

import argparse
from typing import List, Optional

import civcal
from civcal.core.time import MILLIS_PER_DAY
from civcal.core.types import Era, Field, Month, Weekday


def dow_header() -> str:
    return "Su Mo Tu We Th Fr Sa"


def month_days(year: int, month: int, *, era: int = Era.AD, cutover: Optional[int] = None) -> List[civcal.FieldSet]:
    """
    Every civil day of a month, walking day numbers from its first day.

    Around the cutover a month can be short (October 1582 has 21 days).
    """
    t = civcal.compose({Field.ERA: era, Field.YEAR: year, Field.MONTH: month, Field.DAY_OF_MONTH: 1}, cutover)
    days = []
    fs = civcal.decompose(t, cutover)
    while fs.month == month:
        days.append(fs)
        t += MILLIS_PER_DAY
        fs = civcal.decompose(t, cutover)
    return days


def month_grid(days: List[civcal.FieldSet]) -> List[List[str]]:
    weeks: List[List[str]] = []
    wk: List[str] = ["  "] * (days[0].day_of_week - Weekday.SUNDAY)
    for fs in days:
        wk.append(f"{fs.day_of_month:2d}")
        if len(wk) == 7:
            weeks.append(wk)
            wk = []
    if wk:
        weeks.append(wk + ["  "] * (7 - len(wk)))
    return weeks


def print_month(year: int, month: int, *, era: int = Era.AD, cutover: Optional[int] = None) -> None:
    days = month_days(year, month, era=era, cutover=cutover)
    era_tag = " BC" if era == Era.BC else ""
    print(f"{Month(month).name.capitalize()} {year}{era_tag}  ({len(days)} days)")
    print(dow_header())
    for wk in month_grid(days):
        print(" ".join(wk))
    print()


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Print a civil month as a weekday grid.")
    p.add_argument("year", nargs="?", type=int, default=1582, help="year of era (default: 1582)")
    p.add_argument("month", nargs="?", type=int, default=10, help="month 1..12 (default: 10)")
    p.add_argument("--bc", action="store_true", help="year is BC")
    p.add_argument("--cutover", type=int, default=None, help="Julian->Gregorian cutover in epoch milliseconds")
    args = p.parse_args(argv)

    if not 1 <= args.month <= 12:
        raise SystemExit("month must be 1..12")
    print_month(args.year, args.month - 1, era=Era.BC if args.bc else Era.AD, cutover=args.cutover)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
