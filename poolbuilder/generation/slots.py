"""
Booster slot resolution.

Maps booster definitions onto a set's card catalog: which printings can
appear in a booster at all, and which can fill a given slot.
"""

import re
from collections.abc import Iterable, Sequence

from poolbuilder.models.booster import BoosterDefinition, Slot
from poolbuilder.models.card import Card

# Print treatments that only appear in collector boosters
COLLECTOR_EXCLUSIVE_PROMOS = frozenset(
    {
        "fracturefoil",
        "texturedfoil",
        "ripplefoil",
        "halofoil",
        "confettifoil",
        "galaxyfoil",
        "surgefoil",
        "raisedfoil",
        "headliner",
    }
)
COLLECTOR_EXCLUSIVE_FRAMES = frozenset({"inverted", "extendedart"})

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)", re.ASCII)


def parse_collector_number(value: str) -> int | None:
    """
    Read the leading integer of a collector number.

    "15" -> 15, "15a" -> 15, "★15" -> None.
    """
    match = _LEADING_INT.match(value)
    if match is None:
        return None
    return int(match.group(1))


def is_in_range(collector_number: str, range_spec: str) -> bool:
    """
    Check a collector number against "N" or an inclusive "start-end" range.

    Collector numbers without a leading integer never match.
    """
    number = parse_collector_number(collector_number)
    if number is None:
        return False

    if "-" in range_spec:
        parts = range_spec.split("-")
        start = parse_collector_number(parts[0])
        end = parse_collector_number(parts[1])
        if start is None or end is None:
            return False
        return start <= number <= end

    target = parse_collector_number(range_spec)
    return target is not None and number == target


def in_any_range(card: Card, ranges: Iterable[str]) -> bool:
    return any(is_in_range(card.collector_number, r) for r in ranges)


def is_collector_exclusive(card: Card) -> bool:
    """True for printings that never show up in play or draft boosters."""
    return bool(
        card.promo_types & COLLECTOR_EXCLUSIVE_PROMOS
        or card.frame_effects & COLLECTOR_EXCLUSIVE_FRAMES
    )


def _unique_by_id(cards: Iterable[Card]) -> list[Card]:
    seen: set[str] = set()
    unique: list[Card] = []
    for card in cards:
        if card.id not in seen:
            seen.add(card.id)
            unique.append(card)
    return unique


def cards_for_slot(cards: Sequence[Card], slot: Slot) -> list[Card]:
    """
    Cards that can fill a single slot.

    Matches the slot's rarities (when declared) and any of its collector
    number ranges across all finishes. Deduplicated by id.
    """
    ranges = slot.ranges
    return _unique_by_id(
        card
        for card in cards
        if (slot.rarities is None or card.rarity in slot.rarities) and in_any_range(card, ranges)
    )


def cards_by_rarity(cards: Sequence[Card], definition: BoosterDefinition) -> dict[str, list[Card]]:
    """
    Build the per-rarity sampling pools for a booster definition.

    A rarity's pool is the union of matching cards over every slot that
    declares that rarity, in slot order and then catalog order.
    """
    pools: dict[str, list[Card]] = {}
    seen: dict[str, set[str]] = {}

    for slot in definition.slots:
        if slot.pool is None or slot.rarities is None:
            continue
        ranges = slot.ranges
        for rarity in slot.rarities:
            pool = pools.setdefault(rarity, [])
            pool_ids = seen.setdefault(rarity, set())
            for card in cards:
                if card.rarity == rarity and card.id not in pool_ids and in_any_range(card, ranges):
                    pool_ids.add(card.id)
                    pool.append(card)

    return pools


def cards_in_definition(cards: Sequence[Card], definition: BoosterDefinition) -> list[Card]:
    """Cards whose collector number falls in any slot's ranges."""
    all_ranges = [r for slot in definition.slots for r in slot.ranges]
    return [card for card in cards if in_any_range(card, all_ranges)]


def filter_booster_cards(
    cards: Sequence[Card], definition: BoosterDefinition | None
) -> list[Card]:
    """
    Drop everything that can never be opened in a booster.

    With a definition, keeps cards inside the declared ranges. Without one,
    trusts the catalog's booster flag. Collector exclusives are always removed.
    """
    if definition is not None:
        eligible = cards_in_definition(cards, definition)
    else:
        eligible = [card for card in cards if card.booster]
    return [card for card in eligible if not is_collector_exclusive(card)]
