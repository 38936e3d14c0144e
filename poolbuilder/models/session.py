from collections import Counter
from dataclasses import dataclass, field
from typing import Any

from poolbuilder.config import MIN_DECK_SIZE
from poolbuilder.models.card import COLOR_ORDER, Card


@dataclass
class DeckSession:
    """
    Deck building state for one sealed pool.

    A card can be added to the deck only as many times as it appears in the
    pool. Basic lands are unlimited and tracked as per-color counts.

    Attributes:
        pool: The sealed pool, in generation order
        basic_lands: One representative basic land per color
        deck: Non-basic cards added so far, in the order they were added
        basics: Basic land counts by color
    """

    pool: list[Card]
    basic_lands: dict[str, Card] = field(default_factory=dict)
    deck: list[Card] = field(default_factory=list)
    basics: dict[str, int] = field(default_factory=lambda: dict.fromkeys(COLOR_ORDER, 0))

    @classmethod
    def from_snapshot(cls, data: dict[str, Any]) -> "DeckSession":
        """Start a session from a daily snapshot or pool response."""
        return cls(
            pool=[Card.from_scryfall(card) for card in data.get("pool") or []],
            basic_lands={
                color: Card.from_scryfall(card)
                for color, card in (data.get("basicLands") or {}).items()
            },
        )

    def pool_count(self, card_id: str) -> int:
        return sum(1 for card in self.pool if card.id == card_id)

    def deck_count(self, card_id: str) -> int:
        return sum(1 for card in self.deck if card.id == card_id)

    def add_card(self, card: Card) -> bool:
        """Add a pool card to the deck. Returns False when no copies are left."""
        if self.deck_count(card.id) >= self.pool_count(card.id):
            return False
        self.deck.append(card)
        return True

    def remove_card(self, card_id: str) -> bool:
        """Remove one copy of a card from the deck. Returns False if absent."""
        for index, card in enumerate(self.deck):
            if card.id == card_id:
                del self.deck[index]
                return True
        return False

    def add_basic(self, color: str) -> int:
        if color not in COLOR_ORDER:
            raise ValueError(f"Unknown basic land color: {color}")
        self.basics[color] = self.basics.get(color, 0) + 1
        return self.basics[color]

    def remove_basic(self, color: str) -> int:
        if self.basics.get(color, 0) > 0:
            self.basics[color] -= 1
        return self.basics.get(color, 0)

    def clear(self) -> None:
        self.deck.clear()
        self.basics = dict.fromkeys(COLOR_ORDER, 0)

    @property
    def total_cards(self) -> int:
        return len(self.deck) + sum(self.basics.values())

    @property
    def can_submit(self) -> bool:
        return self.total_cards >= MIN_DECK_SIZE

    def colors(self) -> list[str]:
        """Colors of the non-basic cards in the deck, sorted alphabetically."""
        return sorted({color for card in self.deck for color in card.colors})

    def card_ids(self) -> list[str]:
        return [card.id for card in self.deck]

    def remaining(self) -> Counter[str]:
        """Copies of each pool card not yet in the deck."""
        left = Counter(card.id for card in self.pool)
        left.subtract(card.id for card in self.deck)
        return +left

    def to_submission_payload(self, date: str, fingerprint: str, name: str | None = None) -> dict:
        """Request body for POST /submit."""
        payload: dict[str, Any] = {
            "date": date,
            "fingerprint": fingerprint,
            "cardIds": self.card_ids(),
            "basics": dict(self.basics),
            "colors": self.colors(),
        }
        if name is not None:
            payload["name"] = name
        return payload
