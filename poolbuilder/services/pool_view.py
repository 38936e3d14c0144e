"""
Sorting and grouping of sealed pools for display.
"""

from collections.abc import Iterable, Sequence
from typing import Literal

from poolbuilder.models.card import Card

SortKey = Literal["color", "rarity", "cmc"]

# Display order of color categories
COLOR_CATEGORY_ORDER = ("W", "U", "B", "R", "G", "multi", "colorless", "land")

_CATEGORY_RANK = {category: rank for rank, category in enumerate(COLOR_CATEGORY_ORDER)}

RARITY_ORDER = {"mythic": 0, "rare": 1, "uncommon": 2, "common": 3}

CMC_COLUMNS = ("0-1", "2", "3", "4", "5", "6", "7+", "lands")


def color_category(card: Card) -> str:
    """Lands first, then colorless, multicolor, or the single color."""
    if card.is_land:
        return "land"
    if not card.colors:
        return "colorless"
    if len(card.colors) > 1:
        return "multi"
    return card.colors[0]


def cmc_key(card: Card) -> str:
    """Deck column for a card: "lands", "0-1", "2" ... "6", or "7+"."""
    if card.is_land:
        return "lands"
    cmc = card.cmc or 0
    if cmc <= 1:
        return "0-1"
    if cmc >= 7:
        return "7+"
    return str(int(cmc)) if float(cmc).is_integer() else str(cmc)


def sort_cards(cards: Iterable[Card], by: SortKey = "color") -> list[Card]:
    """
    Sort a pool for display. The sort is stable.

    - color: color category, then mana value
    - rarity: mythic to common, then name
    - cmc: mana value, then name
    """
    if by == "color":
        return sorted(
            cards,
            key=lambda c: (_CATEGORY_RANK.get(color_category(c), len(_CATEGORY_RANK)), c.cmc),
        )
    if by == "rarity":
        return sorted(cards, key=lambda c: (RARITY_ORDER.get(c.rarity, len(RARITY_ORDER)), c.name))
    if by == "cmc":
        return sorted(cards, key=lambda c: (c.cmc, c.name))
    raise ValueError(f"Unknown sort key: {by}")


def group_by_color(cards: Sequence[Card]) -> dict[str, list[Card]]:
    """Cards by color category, in display order, sorted by mana value."""
    groups: dict[str, list[Card]] = {category: [] for category in COLOR_CATEGORY_ORDER}
    for card in sort_cards(cards, "color"):
        groups.setdefault(color_category(card), []).append(card)
    return groups


def group_by_cmc(cards: Sequence[Card]) -> dict[str, list[Card]]:
    """Cards by deck column, in column order, keeping input order within a column."""
    groups: dict[str, list[Card]] = {column: [] for column in CMC_COLUMNS}
    for card in cards:
        groups.setdefault(cmc_key(card), []).append(card)
    return groups
