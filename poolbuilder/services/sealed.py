"""
Sealed pool assembly.

Glues the catalog to the generator: picks the set, loads its booster
structure and cards, opens the boosters and attaches basic land art.
"""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from poolbuilder.config import DEFAULT_BOOSTER_COUNT
from poolbuilder.generation.daily import daily_seed, pick_daily_set, today_utc
from poolbuilder.generation.pool import GeneratedPool, generate_sealed_pool
from poolbuilder.generation.slots import filter_booster_cards
from poolbuilder.models.card import Card
from poolbuilder.models.mtg_set import SetInfo
from poolbuilder.services.catalog import CatalogProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PoolSnapshot:
    """A generated pool with everything a client needs to build a deck."""

    set_info: SetInfo
    seed: str
    pool: GeneratedPool
    basic_lands: dict[str, Card] = field(default_factory=dict)
    date: str | None = None

    def to_dict(self, include_mode: bool = False) -> dict[str, Any]:
        """Portable JSON form with trimmed cards."""
        data: dict[str, Any] = {}
        if self.date is not None:
            data["date"] = self.date
        data["seed"] = self.seed
        data["set"] = self.set_info.to_dict()
        if include_mode:
            data["mode"] = self.pool.mode.value
        data["pool"] = [card.trim() for card in self.pool.cards]
        data["basicLands"] = {color: card.trim() for color, card in self.basic_lands.items()}
        return data


async def resolve_set(catalog: CatalogProvider, set_code: str) -> SetInfo:
    """Look up a set by code, falling back to a bare entry for unknown codes."""
    for set_info in await catalog.fetch_sets():
        if set_info.code.lower() == set_code.lower():
            return set_info
    return SetInfo(code=set_code, name=set_code.upper())


async def resolve_daily_set(catalog: CatalogProvider, seed: str) -> SetInfo:
    """
    Today's set for a daily seed.

    Raises:
        NoEligibleSetsError: If the set catalog has no recent sets
    """
    return pick_daily_set(await catalog.fetch_sets(), seed)


async def build_pool_snapshot(
    catalog: CatalogProvider,
    set_info: SetInfo,
    seed: str,
    booster_count: int = DEFAULT_BOOSTER_COUNT,
    date: str | None = None,
) -> PoolSnapshot:
    """
    Generate a pool for a set.

    Falls back to legacy generation when the set has no booster definition.

    Raises:
        CatalogError: If the set's cards cannot be fetched
    """
    definition = await catalog.fetch_booster_definition(set_info.code)
    cards = filter_booster_cards(await catalog.fetch_set_cards(set_info.code), definition)
    logger.info("%d booster-eligible cards in %s", len(cards), set_info.code)

    pool = generate_sealed_pool(cards, definition, seed, booster_count)
    basic_lands = await catalog.fetch_basic_lands(set_info.code)

    return PoolSnapshot(
        set_info=set_info,
        seed=seed,
        pool=pool,
        basic_lands=basic_lands,
        date=date,
    )


async def build_daily_snapshot(catalog: CatalogProvider) -> PoolSnapshot:
    """Generate today's daily challenge pool."""
    now = datetime.now(UTC)
    seed = daily_seed(now)
    date = today_utc(now)
    logger.info("Generating daily pool for %s (seed: %s)", date, seed)

    set_info = await resolve_daily_set(catalog, seed)
    logger.info("Daily set: %s (%s)", set_info.name, set_info.code)

    return await build_pool_snapshot(catalog, set_info, seed, date=date)
