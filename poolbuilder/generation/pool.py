"""
Sealed pool generation.

Two schemes exist and both must stay reproducible:

- Structured: driven by a set's booster definition (slots, rarities,
  collector number ranges, mythic rates).
- Legacy: 1 rare/mythic, 3 uncommons and 10 commons per booster, used
  when a set has no booster definition.

The order in which random values are drawn is part of the output contract.
Draws happen pack by pack, then slot by slot, then card by card. Slots
without a pool or count draw nothing, and a rare/mythic slot only rolls for
mythic when the set has mythics.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from poolbuilder.config import DEFAULT_BOOSTER_COUNT, DEFAULT_MYTHIC_RATE
from poolbuilder.generation.rng import SeededRandom
from poolbuilder.generation.slots import cards_by_rarity, in_any_range
from poolbuilder.models.booster import BoosterDefinition
from poolbuilder.models.card import Card

logger = logging.getLogger(__name__)

LEGACY_UNCOMMONS_PER_BOOSTER = 3
LEGACY_COMMONS_PER_BOOSTER = 10
LEGACY_CARDS_PER_BOOSTER = 1 + LEGACY_UNCOMMONS_PER_BOOSTER + LEGACY_COMMONS_PER_BOOSTER


class GenerationMode(str, Enum):
    STRUCTURED = "structured"
    LEGACY = "legacy"


@dataclass(frozen=True, slots=True)
class GeneratedPool:
    """A sealed pool plus the inputs needed to reproduce it."""

    cards: tuple[Card, ...]
    seed: str | int
    mode: GenerationMode
    booster_count: int

    def __len__(self) -> int:
        return len(self.cards)


def _pick_rarity(
    rarities: tuple[str, ...],
    mythic_rate: float,
    pools: dict[str, list[Card]],
    random: SeededRandom,
) -> str:
    if "rare" in rarities and "mythic" in rarities:
        # No value is drawn when the set has no eligible mythics
        if pools.get("mythic") and random() < mythic_rate:
            return "mythic"
        return "rare"
    index = int(random() * len(rarities))
    return rarities[index] if rarities else ""


def generate_structured_pool(
    cards: Sequence[Card],
    definition: BoosterDefinition,
    random: SeededRandom,
    booster_count: int = DEFAULT_BOOSTER_COUNT,
) -> list[Card]:
    """
    Open boosters following a booster definition.

    Slots whose chosen pool is empty contribute no card, so the pool shrinks
    instead of failing for incomplete catalogs.
    """
    rarity_pools = cards_by_rarity(cards, definition)
    range_pools = {
        index: [card for card in cards if in_any_range(card, slot.ranges)]
        for index, slot in enumerate(definition.slots)
        if slot.is_drawable and slot.rarities is None
    }

    pool: list[Card] = []
    skipped = 0
    for _pack in range(booster_count):
        for index, slot in enumerate(definition.slots):
            if not slot.is_drawable:
                continue
            for _draw in range(slot.count):
                if slot.rarities is not None:
                    rarity = _pick_rarity(slot.rarities, slot.mythic_rate, rarity_pools, random)
                    candidates = rarity_pools.get(rarity, [])
                else:
                    candidates = range_pools[index]

                if candidates:
                    pool.append(random.pick(candidates))
                else:
                    skipped += 1

    if skipped:
        logger.warning("Skipped %d unfillable slot draws", skipped)
    return pool


def generate_legacy_pool(
    cards: Sequence[Card],
    random: SeededRandom,
    booster_count: int = DEFAULT_BOOSTER_COUNT,
) -> list[Card]:
    """Open fixed-ratio boosters: 1 rare or mythic, 3 uncommons, 10 commons."""
    by_rarity: dict[str, list[Card]] = {
        rarity: [card for card in cards if card.rarity == rarity]
        for rarity in ("common", "uncommon", "rare", "mythic")
    }

    pool: list[Card] = []

    def draw(rarity: str) -> None:
        candidates = by_rarity[rarity]
        if candidates:
            pool.append(random.pick(candidates))

    for _pack in range(booster_count):
        # The mythic roll is drawn even when the set has no mythics
        is_mythic = random() < DEFAULT_MYTHIC_RATE and len(by_rarity["mythic"]) > 0
        draw("mythic" if is_mythic else "rare")
        for _ in range(LEGACY_UNCOMMONS_PER_BOOSTER):
            draw("uncommon")
        for _ in range(LEGACY_COMMONS_PER_BOOSTER):
            draw("common")

    return pool


def generate_pool(
    cards: Sequence[Card],
    definition: BoosterDefinition | None,
    seed: str | int,
    booster_count: int = DEFAULT_BOOSTER_COUNT,
) -> list[Card]:
    """
    Generate a sealed pool.

    Args:
        cards: Booster-eligible cards for the set, in catalog order
        definition: Booster definition, or None for legacy generation
        seed: Seed for the generator
        booster_count: Number of boosters to open

    Returns:
        Cards in pack order, then slot order, then draw order.
    """
    return list(generate_sealed_pool(cards, definition, seed, booster_count).cards)


def generate_sealed_pool(
    cards: Sequence[Card],
    definition: BoosterDefinition | None,
    seed: str | int,
    booster_count: int = DEFAULT_BOOSTER_COUNT,
) -> GeneratedPool:
    """Same as generate_pool, but also reports which scheme produced the pool."""
    random = SeededRandom(seed)

    if definition is None:
        mode = GenerationMode.LEGACY
        cards_out = generate_legacy_pool(cards, random, booster_count)
    else:
        mode = GenerationMode.STRUCTURED
        cards_out = generate_structured_pool(cards, definition, random, booster_count)

    logger.info("Generated %s pool of %d cards (seed=%s)", mode.value, len(cards_out), seed)
    return GeneratedPool(
        cards=tuple(cards_out),
        seed=seed,
        mode=mode,
        booster_count=booster_count,
    )
