"""
Aggregate comparison of a day's submissions ("the field").

Only ever called on an unlocked day, i.e. after the caller has submitted.
"""

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass

from poolbuilder.models.card import COLOR_ORDER, Card
from poolbuilder.models.submission import Submission
from poolbuilder.services.pool_view import COLOR_CATEGORY_ORDER, color_category


@dataclass(frozen=True, slots=True)
class CardInclusion:
    """How many submissions played a pool card at least once."""

    card: Card
    count: int
    pct: int


@dataclass(frozen=True, slots=True)
class DeckDiff:
    """Card-by-card overlap between two decks, counting copies."""

    shared: int
    only_mine: int
    only_theirs: int


def _round_half_up(value: float) -> int:
    # Halves round up, unlike round()
    return int(value + 0.5)


def inclusion_counts(submissions: Sequence[Submission]) -> Counter[str]:
    """Number of submissions that play each card id at least once."""
    counts: Counter[str] = Counter()
    for submission in submissions:
        counts.update(set(submission.card_ids))
    return counts


def inclusion_rates(
    pool: Sequence[Card], submissions: Sequence[Submission]
) -> dict[str, list[CardInclusion]]:
    """
    Inclusion rate of every unique pool card, grouped by color category.

    Groups come in display order and are sorted by descending percentage.
    Empty groups are omitted.
    """
    total = len(submissions)
    if total == 0 or not pool:
        return {}

    unique: dict[str, Card] = {}
    for card in pool:
        unique.setdefault(card.id, card)

    counts = inclusion_counts(submissions)

    groups: dict[str, list[CardInclusion]] = {category: [] for category in COLOR_CATEGORY_ORDER}
    for card_id, card in unique.items():
        count = counts[card_id]
        groups.setdefault(color_category(card), []).append(
            CardInclusion(card=card, count=count, pct=_round_half_up(count / total * 100))
        )

    return {
        category: sorted(entries, key=lambda e: e.pct, reverse=True)
        for category, entries in groups.items()
        if entries
    }


def average_basics(submissions: Sequence[Submission]) -> dict[str, float]:
    """Mean basic land count per color, rounded to one decimal."""
    if not submissions:
        return dict.fromkeys(COLOR_ORDER, 0.0)
    totals: Counter[str] = Counter()
    for submission in submissions:
        for color in COLOR_ORDER:
            totals[color] += submission.basics.get(color, 0)
    return {color: round(totals[color] / len(submissions), 1) for color in COLOR_ORDER}


def color_combos(submissions: Sequence[Submission]) -> list[tuple[str, int]]:
    """
    Deck color combinations by popularity.

    A combination is the sorted color symbols joined ("BR"); colorless decks
    are "".
    """
    combos = Counter("".join(sorted(s.colors)) for s in submissions)
    return sorted(combos.items(), key=lambda item: item[1], reverse=True)


def compare_decks(mine: Sequence[str], theirs: Sequence[str]) -> DeckDiff:
    """Shared copies plus the copies unique to each side."""
    my_counts = Counter(mine)
    their_counts = Counter(theirs)

    shared = sum((my_counts & their_counts).values())
    only_mine = sum((my_counts - their_counts).values())
    only_theirs = sum((their_counts - my_counts).values())
    return DeckDiff(shared=shared, only_mine=only_mine, only_theirs=only_theirs)
