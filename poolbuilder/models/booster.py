from dataclasses import dataclass, field
from typing import Any

from poolbuilder.config import DEFAULT_MYTHIC_RATE


@dataclass(frozen=True, slots=True)
class Slot:
    """
    One rule in a booster definition.

    Attributes:
        rarities: Rarities this slot draws from. None means any card in range.
        count: Cards drawn per booster
        mythic_rate: Chance of upgrading to mythic when rarities cover rare and mythic
        pool: Finish name -> collector number ranges ("7" or "1-20").
            None means the slot has no printed range and contributes nothing.
    """

    rarities: tuple[str, ...] | None = None
    count: int = 0
    mythic_rate: float = DEFAULT_MYTHIC_RATE
    pool: dict[str, tuple[str, ...]] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Slot":
        rarities = data.get("rarities")
        raw_pool = data.get("pool")
        pool = None
        if raw_pool is not None:
            pool = {finish: tuple(str(r) for r in ranges) for finish, ranges in raw_pool.items()}

        mythic_rate = data.get("mythicRate")
        return cls(
            rarities=tuple(rarities) if rarities is not None else None,
            count=int(data.get("count") or 0),
            mythic_rate=DEFAULT_MYTHIC_RATE if mythic_rate is None else float(mythic_rate),
            pool=pool,
        )

    @property
    def ranges(self) -> list[str]:
        """All collector number ranges across every finish."""
        if not self.pool:
            return []
        return [r for finish_ranges in self.pool.values() for r in finish_ranges]

    @property
    def is_rare_mythic(self) -> bool:
        """True when the slot is a rare slot that can upgrade to mythic."""
        return self.rarities is not None and "rare" in self.rarities and "mythic" in self.rarities

    @property
    def is_drawable(self) -> bool:
        # An empty pool map still occupies the slot
        return self.pool is not None and self.count > 0


@dataclass(frozen=True, slots=True)
class BoosterDefinition:
    """Ordered slot structure for one product (play, draft, ...) of one set."""

    slots: tuple[Slot, ...] = field(default_factory=tuple)
    set_code: str | None = None
    product: str | None = None

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        set_code: str | None = None,
        product: str | None = None,
    ) -> "BoosterDefinition":
        return cls(
            slots=tuple(Slot.from_dict(slot) for slot in data.get("slots") or []),
            set_code=set_code,
            product=product,
        )

    @property
    def cards_per_booster(self) -> int:
        return sum(slot.count for slot in self.slots if slot.is_drawable)
