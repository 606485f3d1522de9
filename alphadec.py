#!/usr/bin/env python3
"""
alphadec.py — AlphaDec: a UTC instant inside its calendar year as a
hierarchical label, and back.

Idea (summary):
- The year is split into 26 periods (A..Z), each period into 10 arcs (0..9),
  each arc into 26 bars (A..Z), each bar into 10 beats (0..9). What is left
  inside the beat is kept as whole milliseconds.
- Canonical label:  YYYY_PaBt_MMMMMM   e.g. 2024_A0A0_000000
- All sizes are computed on ms * SCALE as Python ints, with floor division
  at every level. The truncated remainder is never carried: the last unit of
  each level is a few scaled units longer than the others, and existing
  labels depend on exactly this truncation.

CLI:
  python3 alphadec.py encode 2024-03-01T12:00:00Z
  python3 alphadec.py decode 2024_E3K7_123456
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta

from ad_model import (
    EPOCH_UTC,
    AlphaDecRecord,
    CanonicalParts,
    IntMathTrace,
    InvalidInstantError,
    InvalidRangeError,
    MalformedCanonicalError,
    UnitSizes,
    from_epoch_ms,
    start_of_year,
    timedelta_to_ms,
    to_utc,
)

# --- Config -----------------------------------------------------------------

PERIODS_PER_YEAR = 26
ARCS_PER_PERIOD = 10
BARS_PER_ARC = 26
BEATS_PER_BAR = 10

MS_PER_DAY = 86_400_000

LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"

CANONICAL_RE = re.compile(r"(\d{4})_([A-Z])(\d)([A-Z])(\d)_(\d{6})", re.ASCII)


def is_leap_year(year: int) -> bool:
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def days_in_year(year: int) -> int:
    return 366 if is_leap_year(year) else 365


# --- Scaled arithmetic ------------------------------------------------------

SCALE = 1_000_000


def to_scaled(ms: int) -> int:
    return ms * SCALE


def from_scaled(scaled: int) -> int:
    """Floor: whole milliseconds contained in a scaled quantity."""
    return scaled // SCALE


def from_scaled_ceil(scaled: int) -> int:
    """Ceiling: smallest whole millisecond not below a scaled quantity."""
    return -(-scaled // SCALE)


def unit_sizes(year: int) -> UnitSizes:
    """
    Scaled size of every level for `year`.
    Each step is a floor division of the previous one (no remainder carry).
    """
    year_total = to_scaled(days_in_year(year) * MS_PER_DAY)
    period = year_total // PERIODS_PER_YEAR
    arc = period // ARCS_PER_PERIOD
    bar = arc // BARS_PER_ARC
    beat = bar // BEATS_PER_BAR
    return UnitSizes(year_total=year_total, period=period, arc=arc, bar=bar, beat=beat)


def units_to_scaled(sizes: UnitSizes, period: int, arc: int, bar: int, beat: int) -> int:
    return period * sizes.period + arc * sizes.arc + bar * sizes.bar + beat * sizes.beat


# --- Letter codec -----------------------------------------------------------


def index_to_letter(n: int) -> str:
    """0 -> 'A' ... 25 -> 'Z'."""
    if not isinstance(n, int) or isinstance(n, bool) or not 0 <= n < len(LETTERS):
        raise InvalidRangeError(f"Letter index must be 0-{len(LETTERS) - 1}, got {n!r}")
    return LETTERS[n]


def letter_to_index(ch: str) -> int:
    """'A' -> 0 ... 'Z' -> 25. Only a single uppercase ASCII letter."""
    if not isinstance(ch, str) or len(ch) != 1 or ch not in LETTERS:
        raise InvalidRangeError(f"Expected one letter A-Z, got {ch!r}")
    return ord(ch) - ord("A")


def index_to_digit(n: int) -> str:
    """Arc and beat are written as one decimal digit."""
    if not isinstance(n, int) or isinstance(n, bool) or not 0 <= n <= 9:
        raise InvalidRangeError(f"Digit index must be 0-9, got {n!r}")
    return str(n)


# --- Core API ---------------------------------------------------------------


def encode(d: datetime) -> AlphaDecRecord:
    """
    Encode a datetime (naive = UTC) into its AlphaDec record.
    Sub-millisecond precision is truncated.
    """
    d = to_utc(d)
    y = d.year
    ms_since_year_start = timedelta_to_ms(d - start_of_year(y))
    total_scaled = to_scaled(ms_since_year_start)

    sizes = unit_sizes(y)
    remaining = total_scaled

    p_idx = remaining // sizes.period
    remaining -= p_idx * sizes.period

    a_val = remaining // sizes.arc
    remaining -= a_val * sizes.arc

    b_idx = remaining // sizes.bar
    remaining -= b_idx * sizes.bar

    t_val = remaining // sizes.beat
    remaining -= t_val * sizes.beat

    ms_offset_in_beat = from_scaled(remaining)

    period_letter = index_to_letter(p_idx)
    bar_letter = index_to_letter(b_idx)
    arc_digit = index_to_digit(a_val)
    beat_digit = index_to_digit(t_val)

    arc_start_ms = from_scaled(p_idx * sizes.period + a_val * sizes.arc)
    arc_end_ms = arc_start_ms + from_scaled(sizes.arc)

    canonical = f"{y:04d}_{period_letter}{arc_digit}{bar_letter}{beat_digit}_{ms_offset_in_beat:06d}"

    return AlphaDecRecord(
        year=y,
        period=p_idx,
        arc=a_val,
        bar=b_idx,
        beat=t_val,
        ms_offset_in_beat=ms_offset_in_beat,
        period_letter=period_letter,
        bar_letter=bar_letter,
        canonical=canonical,
        readable=f"{period_letter}{arc_digit}:{bar_letter}{beat_digit}",
        arc_start_ms_in_year=arc_start_ms,
        arc_end_ms_in_year=arc_end_ms,
        int_math=IntMathTrace(total_scaled=total_scaled, sizes=sizes, remaining_scaled=remaining),
    )


def encode_epoch_ms(ms: int) -> AlphaDecRecord:
    """Encode a Unix timestamp in milliseconds."""
    return encode(from_epoch_ms(ms))


def parse_canonical(canon: str) -> CanonicalParts:
    """Validate YYYY_PaBt_MMMMMM and split it into its fields (no range checks)."""
    m = CANONICAL_RE.fullmatch(canon) if isinstance(canon, str) else None
    if m is None:
        raise MalformedCanonicalError(f"Bad AlphaDec canonical string (format YYYY_PaBt_MMMMMM): {canon!r}")
    yyyy, p_ltr, arc_s, bar_ltr, beat_s, ms_s = m.groups()
    return CanonicalParts(
        year=int(yyyy),
        period=letter_to_index(p_ltr),
        arc=int(arc_s),
        bar=letter_to_index(bar_ltr),
        beat=int(beat_s),
        ms_offset_in_beat=int(ms_s),
    )


def ms_in_year_from_parts(parts: CanonicalParts) -> int:
    """
    Milliseconds since the start of the year for a parsed label.

    The encoder floors (total - units) / SCALE, so the encoded millisecond is
    the ceiling of (units + offset * SCALE) / SCALE: that is the earliest
    whole millisecond whose encoding is this label.
    """
    sizes = unit_sizes(parts.year)
    total_scaled = units_to_scaled(sizes, parts.period, parts.arc, parts.bar, parts.beat)
    total_scaled += to_scaled(parts.ms_offset_in_beat)
    return from_scaled_ceil(total_scaled)


def decode(canon: str) -> datetime:
    """Reconstruct the UTC instant (aware datetime) of a canonical string."""
    parts = parse_canonical(canon)
    start = start_of_year(parts.year)
    try:
        return start + timedelta(milliseconds=ms_in_year_from_parts(parts))
    except OverflowError as e:
        raise InvalidInstantError(f"{canon!r} lies outside the datetime range") from e


def decode_epoch_ms(canon: str) -> int:
    """Like decode(), returning a Unix timestamp in milliseconds."""
    parts = parse_canonical(canon)
    start = start_of_year(parts.year)
    return timedelta_to_ms(start - EPOCH_UTC) + ms_in_year_from_parts(parts)


if __name__ == "__main__":
    from cli import main

    raise SystemExit(main())
