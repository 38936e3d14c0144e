"""
Deterministic sealed pool generation.

Everything here is a pure function of its inputs: the same cards, booster
definition and seed always produce the same pool.
"""

from poolbuilder.generation.daily import daily_seed, hash_date, pick_daily_set, today_utc
from poolbuilder.generation.pool import (
    GeneratedPool,
    GenerationMode,
    generate_pool,
    generate_sealed_pool,
)
from poolbuilder.generation.rng import SeededRandom, fold_string
from poolbuilder.generation.slots import filter_booster_cards, is_in_range

__all__ = [
    "GeneratedPool",
    "GenerationMode",
    "SeededRandom",
    "daily_seed",
    "filter_booster_cards",
    "fold_string",
    "generate_pool",
    "generate_sealed_pool",
    "hash_date",
    "is_in_range",
    "pick_daily_set",
    "today_utc",
]
