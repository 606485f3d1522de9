"""AlphaDec core data model (format-agnostic).

This module contains only the dataclasses, the error types and the UTC
helpers shared by the codec and the CLI. No arithmetic lives here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

EPOCH_UTC = datetime(1970, 1, 1, tzinfo=timezone.utc)


# --- Errors -----------------------------------------------------------------


class AlphaDecError(ValueError):
    pass


class InvalidRangeError(AlphaDecError):
    """Index/letter/digit conversion outside the allowed range."""


class MalformedCanonicalError(AlphaDecError):
    """Decoder input does not match YYYY_PaBt_MMMMMM."""


class InvalidInstantError(AlphaDecError):
    """The instant (or year) cannot be represented by datetime."""


# --- Records ----------------------------------------------------------------


@dataclass(frozen=True)
class UnitSizes:
    """Scaled (ms * SCALE) sizes of every hierarchy level for one year."""

    year_total: int
    period: int
    arc: int
    bar: int
    beat: int


@dataclass(frozen=True)
class IntMathTrace:
    """Scaled integers seen while encoding (debug only)."""

    total_scaled: int
    sizes: UnitSizes
    remaining_scaled: int

    def as_dict(self) -> dict[str, str]:
        # strings, so big ints survive any JSON consumer
        return {
            "total_scaled": str(self.total_scaled),
            "year_total_scaled": str(self.sizes.year_total),
            "period_size_scaled": str(self.sizes.period),
            "arc_size_scaled": str(self.sizes.arc),
            "bar_size_scaled": str(self.sizes.bar),
            "beat_size_scaled": str(self.sizes.beat),
            "remaining_scaled": str(self.remaining_scaled),
        }


@dataclass(frozen=True)
class CanonicalParts:
    """Fields of a syntactically valid canonical string."""

    year: int
    period: int
    arc: int
    bar: int
    beat: int
    ms_offset_in_beat: int


@dataclass(frozen=True)
class AlphaDecRecord:
    """One encoded instant.

    arc_start_ms_in_year / arc_end_ms_in_year are offsets from the start of
    the year bounding the current arc.
    """

    year: int
    period: int
    arc: int
    bar: int
    beat: int
    ms_offset_in_beat: int
    period_letter: str
    bar_letter: str
    canonical: str
    readable: str
    arc_start_ms_in_year: int
    arc_end_ms_in_year: int
    int_math: IntMathTrace | None = field(default=None, compare=False, repr=False)

    def arc_bounds_utc(self) -> tuple[datetime, datetime]:
        start = start_of_year(self.year)
        return (
            start + timedelta(milliseconds=self.arc_start_ms_in_year),
            start + timedelta(milliseconds=self.arc_end_ms_in_year),
        )


# --- UTC helpers ------------------------------------------------------------


def start_of_year(year: int) -> datetime:
    """YYYY-01-01T00:00:00Z as an aware datetime."""
    try:
        return datetime(year, 1, 1, tzinfo=timezone.utc)
    except (ValueError, OverflowError, TypeError) as e:
        raise InvalidInstantError(f"year {year!r} not representable: {e}") from e


def to_utc(d: datetime) -> datetime:
    """Naive datetimes are taken as UTC; aware ones are moved to UTC."""
    if d.tzinfo is None:
        return d.replace(tzinfo=timezone.utc)
    try:
        return d.astimezone(timezone.utc)
    except (ValueError, OverflowError) as e:
        raise InvalidInstantError(f"instant {d!r} has no UTC year: {e}") from e


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def timedelta_to_ms(delta: timedelta) -> int:
    """Whole milliseconds in delta (microseconds truncated toward -inf)."""
    return (delta.days * 86_400 + delta.seconds) * 1000 + delta.microseconds // 1000


def from_epoch_ms(ms: int) -> datetime:
    try:
        return EPOCH_UTC + timedelta(milliseconds=int(ms))
    except (ValueError, OverflowError) as e:
        raise InvalidInstantError(f"epoch ms {ms!r} out of range: {e}") from e


def format_utc_iso(d: datetime) -> str:
    """UTC ISO format with millisecond precision, suffixed with 'Z'."""
    return to_utc(d).isoformat(timespec="milliseconds").replace("+00:00", "Z")


__all__ = [
    "AlphaDecError",
    "InvalidRangeError",
    "MalformedCanonicalError",
    "InvalidInstantError",
    "UnitSizes",
    "IntMathTrace",
    "CanonicalParts",
    "AlphaDecRecord",
    "EPOCH_UTC",
    "start_of_year",
    "to_utc",
    "utc_now",
    "timedelta_to_ms",
    "from_epoch_ms",
    "format_utc_iso",
]
