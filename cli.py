#!/usr/bin/env python3
"""CLI for AlphaDec.

Usage examples:
  - Encode now / a given instant:
      python3 cli.py encode
      python3 cli.py encode 2024-03-01T12:00:00Z --debug
      python3 cli.py encode --epoch-ms 1709294400000

  - Decode a canonical label:
      python3 cli.py decode 2024_E3K7_123456

  - Self-check a whole year (round-trip + invariants):
      python3 cli.py sweep 2024 --preset fine
"""

from __future__ import annotations

import argparse
from datetime import datetime, timedelta
from itertools import islice

from ad_model import AlphaDecError, format_utc_iso, start_of_year, to_utc, utc_now
from alphadec import (
    ARCS_PER_PERIOD,
    BARS_PER_ARC,
    BEATS_PER_BAR,
    CANONICAL_RE,
    MS_PER_DAY,
    PERIODS_PER_YEAR,
    decode,
    decode_epoch_ms,
    days_in_year,
    encode,
    encode_epoch_ms,
)

DEFAULT_SWEEP_PRESET = "coarse"
MAX_REPORTED_FAILURES = 10


def resolve_sweep_strategy(
    *,
    preset: str | None,
    step_ms: int | None,
    limit: int | None,
) -> tuple[str, int, int]:
    """Resolve preset + overrides.

    Returns: (preset_effective, step_ms, limit)
    """
    presets: dict[str, tuple[int, int]] = {
        # roughly hourly, odd step so samples drift across unit boundaries
        "coarse": (3_600_007, 10_000),
        # about a minute
        "fine": (60_013, 100_000),
        # about a second, for spot checks on a slice of the year
        "dense": (1_009, 1_000_000),
    }

    preset_eff = DEFAULT_SWEEP_PRESET if preset is None else preset
    if preset_eff not in presets:
        raise ValueError(f"Unknown preset: {preset_eff!r}")

    step, lim = presets[preset_eff]

    # Explicit overrides always win
    if step_ms is not None:
        step = int(step_ms)
    if limit is not None:
        lim = int(limit)

    if step <= 0:
        raise ValueError("step_ms must be positive")
    if lim <= 0:
        raise ValueError("limit must be positive")

    return preset_eff, step, lim


def parse_instant(s: str) -> datetime:
    """ISO-8601 instant; a trailing 'Z' is accepted, naive means UTC."""
    s = s.strip()
    if s.endswith(("Z", "z")):
        s = s[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(s)
    except ValueError as e:
        raise ValueError(f"Bad ISO-8601 instant: {s!r}") from e


def check_instant(d: datetime) -> list[str]:
    """Problems found encoding d (empty list = all invariants hold)."""
    try:
        rec = encode(d)
    except AlphaDecError as e:
        return [f"encode: {e}"]

    problems: list[str] = []
    if not 0 <= rec.period < PERIODS_PER_YEAR:
        problems.append(f"period={rec.period}")
    if not 0 <= rec.arc < ARCS_PER_PERIOD:
        problems.append(f"arc={rec.arc}")
    if not 0 <= rec.bar < BARS_PER_ARC:
        problems.append(f"bar={rec.bar}")
    if not 0 <= rec.beat < BEATS_PER_BAR:
        problems.append(f"beat={rec.beat}")
    if rec.ms_offset_in_beat < 0:
        problems.append(f"ms_offset_in_beat={rec.ms_offset_in_beat}")
    if CANONICAL_RE.fullmatch(rec.canonical) is None:
        problems.append(f"canonical={rec.canonical!r}")
    back = decode(rec.canonical)
    expected = to_utc(d)
    expected = expected.replace(microsecond=expected.microsecond - expected.microsecond % 1000)
    if back != expected:
        problems.append(f"roundtrip {rec.canonical} -> {format_utc_iso(back)}")
    return problems


def sweep_year(year: int, *, step_ms: int, limit: int) -> tuple[int, list[tuple[str, list[str]]]]:
    """Walk `year` every step_ms (plus its last millisecond).

    Returns: (checked, [(instant_iso, problems), ...])
    """
    start = start_of_year(year)
    last_ms = days_in_year(year) * MS_PER_DAY - 1

    offsets = list(islice(range(0, last_ms + 1, step_ms), limit))
    if offsets[-1] != last_ms:
        offsets.append(last_ms)

    failures: list[tuple[str, list[str]]] = []
    for off in offsets:
        d = start + timedelta(milliseconds=off)
        problems = check_instant(d)
        if problems:
            failures.append((format_utc_iso(d), problems))
    return len(offsets), failures


def build_argparser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="AlphaDec — UTC instant <-> YYYY_PaBt_MMMMMM label.")
    sub = ap.add_subparsers(dest="cmd", required=True)

    enc = sub.add_parser("encode", help="Encode an instant (default: now).")
    enc.add_argument("instant", nargs="?", help="ISO-8601 instant, e.g. 2024-03-01T12:00:00Z.")
    enc.add_argument("--epoch-ms", type=int, default=None, help="Unix timestamp in milliseconds.")
    enc.add_argument("--debug", action="store_true", help="Also print the scaled integer trace.")

    dec = sub.add_parser("decode", help="Decode a canonical label.")
    dec.add_argument("canonical", help="Label in the form YYYY_PaBt_MMMMMM.")

    sw = sub.add_parser("sweep", help="Check round-trip and invariants across a year.")
    sw.add_argument("year", type=int)
    sw.add_argument(
        "--preset",
        choices=["coarse", "fine", "dense"],
        default=DEFAULT_SWEEP_PRESET,
        help=(
            "Sampling preset: coarse (~1h step), fine (~1min step), dense (~1s step). "
            "The flags --step-ms/--limit always win."
        ),
    )
    sw.add_argument("--step-ms", type=int, default=None, help="Override: sampling step in ms.")
    sw.add_argument("--limit", type=int, default=None, help="Override: maximum number of samples.")

    return ap


def _cmd_encode(args: argparse.Namespace) -> int:
    if args.instant is not None and args.epoch_ms is not None:
        raise ValueError("Pass either an instant or --epoch-ms, not both.")

    if args.epoch_ms is not None:
        rec = encode_epoch_ms(args.epoch_ms)
    elif args.instant is not None:
        rec = encode(parse_instant(args.instant))
    else:
        rec = encode(utc_now())

    arc_start, arc_end = rec.arc_bounds_utc()
    print(f"[alphadec] canonical={rec.canonical}  readable={rec.readable}")
    print(
        f"[alphadec] year={rec.year}  period={rec.period}({rec.period_letter})  arc={rec.arc}"
        f"  bar={rec.bar}({rec.bar_letter})  beat={rec.beat}  ms_offset_in_beat={rec.ms_offset_in_beat}"
    )
    print(f"[arc] start={format_utc_iso(arc_start)}  end={format_utc_iso(arc_end)}")
    if args.debug and rec.int_math is not None:
        for k, v in rec.int_math.as_dict().items():
            print(f"[int] {k}={v}")
    return 0


def _cmd_decode(args: argparse.Namespace) -> int:
    d = decode(args.canonical)
    print(f"[alphadec] instant={format_utc_iso(d)}  epoch_ms={decode_epoch_ms(args.canonical)}")
    return 0


def _cmd_sweep(args: argparse.Namespace) -> int:
    preset_eff, step_ms, limit = resolve_sweep_strategy(
        preset=args.preset,
        step_ms=args.step_ms,
        limit=args.limit,
    )
    print(f"[sweep] year={args.year}  preset={preset_eff}  step_ms={step_ms}  limit={limit}")

    checked, failures = sweep_year(args.year, step_ms=step_ms, limit=limit)
    for instant, problems in failures[:MAX_REPORTED_FAILURES]:
        print(f"[sweep] FAIL {instant}: {'; '.join(problems)}")
    print(f"[sweep] checked={checked}  failures={len(failures)}")
    return 1 if failures else 0


def main(argv: list[str] | None = None) -> int:
    ap = build_argparser()
    args = ap.parse_args(argv)

    try:
        if args.cmd == "encode":
            return _cmd_encode(args)
        if args.cmd == "decode":
            return _cmd_decode(args)
        if args.cmd == "sweep":
            return _cmd_sweep(args)
        ap.error("unknown command")
        return 2
    except (AlphaDecError, ValueError) as e:
        print(f"[error] {e}")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
