"""
Daily challenge seed and set selection.

Both are pure functions of the UTC calendar date, so any client can derive
today's challenge without talking to the server.
"""

from collections.abc import Sequence
from datetime import UTC, datetime

from poolbuilder.config import DAILY_SET_CUTOFF
from poolbuilder.generation.rng import fold_string
from poolbuilder.models.failure import NoEligibleSetsError
from poolbuilder.models.mtg_set import SetInfo

DAILY_SEED_PREFIX = "daily-"


def today_utc(now: datetime | None = None) -> str:
    """Current UTC date as YYYY-MM-DD."""
    if now is None:
        now = datetime.now(UTC)
    elif now.tzinfo is not None:
        now = now.astimezone(UTC)
    return now.strftime("%Y-%m-%d")


def daily_seed(now: datetime | None = None) -> str:
    """Seed for today's challenge, e.g. "daily-2024-01-01"."""
    return DAILY_SEED_PREFIX + today_utc(now)


def hash_date(date_str: str) -> int:
    """Non-negative hash of a date string."""
    return abs(fold_string(date_str))


def recent_sets(sets: Sequence[SetInfo], cutoff: str = DAILY_SET_CUTOFF) -> list[SetInfo]:
    """Sets released on or after the cutoff, in catalog order."""
    return [s for s in sets if s.released and s.released >= cutoff]


def pick_daily_set(sets: Sequence[SetInfo], seed: str) -> SetInfo:
    """
    Choose the set for a daily seed.

    Args:
        sets: Set catalog in its published order
        seed: Daily seed ("daily-YYYY-MM-DD"); a bare date is accepted too

    Returns:
        The selected set

    Raises:
        NoEligibleSetsError: If no set was released after the cutoff
    """
    candidates = recent_sets(sets)
    if not candidates:
        raise NoEligibleSetsError(DAILY_SET_CUTOFF)

    date_str = seed.removeprefix(DAILY_SEED_PREFIX)
    return candidates[hash_date(date_str) % len(candidates)]
