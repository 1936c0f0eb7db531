from __future__ import annotations

import argparse
import random

import civcal
from civcal.core.time import MAX_TIME, MILLIS_PER_DAY, MIN_TIME


def roundtrip_test(
    N: int,
    lo: int,
    hi: int,
    seed: int,
    *,
    cutover: int | None = None,
    max_failures: int,
) -> int:
    random.seed(seed)
    failures = 0

    for _ in range(N):
        t0 = random.randint(lo, hi)
        fs = civcal.decompose(t0, cutover)
        back = civcal.compose(fs, cutover)
        if back != t0:
            failures += 1
            print("\nFAIL")
            print("t0:    ", t0)
            print("fields:", fs)
            print("back:  ", back, f"({back - t0:+d} ms)")
            if failures >= max_failures:
                return failures

    return failures


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Random round-trip tests: time -> fields -> time.")
    p.add_argument("--N", type=int, default=20000, help="Trials.")
    p.add_argument("--years", type=int, default=50000, help="Sample within +/- this many years of the epoch.")
    p.add_argument("--full-range", action="store_true", help="Sample the whole signed 64-bit range instead.")
    p.add_argument("--cutover", type=int, default=None, help="Julian->Gregorian cutover in epoch milliseconds.")
    p.add_argument("--seed", type=int, default=123, help="RNG seed.")
    p.add_argument("--max-failures", type=int, default=5, help="Stop after this many failures.")
    args = p.parse_args(argv)

    if args.full_range:
        lo, hi = MIN_TIME, MAX_TIME
    else:
        span = args.years * 366 * MILLIS_PER_DAY
        lo, hi = max(MIN_TIME, -span), min(MAX_TIME, span)

    print(f"Testing {args.N} times in [{lo}, {hi}] ...")
    failures = roundtrip_test(
        args.N, lo, hi, args.seed, cutover=args.cutover, max_failures=args.max_failures
    )

    if failures == 0:
        print("All round-trip tests passed.")
        return 0

    print(f"Round-trip failures: {failures}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
