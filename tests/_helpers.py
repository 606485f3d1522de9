from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone

import alphadec as ad
from ad_model import start_of_year


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def at_ms(year: int, ms: int) -> datetime:
    """Instant `ms` milliseconds after the start of `year` (UTC)."""
    return start_of_year(year) + timedelta(milliseconds=ms)


def truncate_ms(d: datetime) -> datetime:
    return d.replace(microsecond=d.microsecond - d.microsecond % 1000)


def year_ms(year: int) -> int:
    return ad.days_in_year(year) * ad.MS_PER_DAY


def random_instants(k: int, *, seed: int = 1234, years: tuple[int, int] = (1, 9999)) -> list[datetime]:
    """
    k instants with microsecond noise, spread over the whole datetime range.
    Always includes the first and last microsecond of a leap and a common year.
    """
    rng = random.Random(seed)
    out = [
        utc(2023, 1, 1),
        utc(2023, 12, 31, 23, 59, 59, 999_999),
        utc(2024, 1, 1),
        utc(2024, 12, 31, 23, 59, 59, 999_999),
    ]
    for _ in range(k):
        y = rng.randint(*years)
        us = rng.randrange(year_ms(y) * 1000)
        out.append(start_of_year(y) + timedelta(microseconds=us))
    return out
