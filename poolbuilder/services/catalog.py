"""
Card catalog access.

Fetches set lists, booster definitions, set cards and basic lands over
HTTP. Pool generation only sees the CatalogProvider interface, so it can be
tested without network access.

Respects Scryfall rate limits: pages are fetched with a short delay and
HTTP 429 responses are retried after a fixed pause.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncGenerator
from typing import Any

import httpx

from poolbuilder.config import settings
from poolbuilder.models.booster import BoosterDefinition
from poolbuilder.models.card import Card
from poolbuilder.models.failure import FailureKind, KnownError
from poolbuilder.models.mtg_set import SetInfo

logger = logging.getLogger(__name__)

USER_AGENT = "PoolBuilder/1.0"

BASIC_LAND_NAMES: dict[str, str] = {
    "W": "Plains",
    "U": "Island",
    "B": "Swamp",
    "R": "Mountain",
    "G": "Forest",
}

# Booster products in order of preference
PREFERRED_BOOSTER_TYPES = ("play", "draft")


class CatalogError(KnownError):
    """Raised when the card catalog cannot be reached or returns garbage."""

    def __init__(self, detail: str):
        super().__init__(
            kind=FailureKind.EXTERNAL_API_ERROR,
            message="failed to fetch cards, please try again",
            detail=detail,
            status_code=502,
        )


class CatalogProvider(ABC):
    """Source of set and card data for pool generation."""

    @abstractmethod
    async def fetch_sets(self) -> list[SetInfo]:
        """Set catalog in published order."""

    @abstractmethod
    async def fetch_booster_definition(self, set_code: str) -> BoosterDefinition | None:
        """Booster structure for a set, or None when the set has none."""

    @abstractmethod
    async def fetch_set_cards(self, set_code: str) -> list[Card]:
        """Every English printing in a set, in catalog order."""

    @abstractmethod
    async def fetch_basic_lands(self, set_code: str) -> dict[str, Card]:
        """One basic land per color, preferring the set's own printings."""


class HttpCatalog(CatalogProvider):
    """CatalogProvider backed by the Scryfall API and static booster data files."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        scryfall_api_url: str | None = None,
        sets_url: str | None = None,
        booster_data_url: str | None = None,
        max_retries: int | None = None,
        retry_delay: float | None = None,
        page_delay: float | None = None,
    ) -> None:
        self._client = client
        self.scryfall_api_url = (scryfall_api_url or settings.scryfall_api_url).rstrip("/")
        self.sets_url = sets_url or settings.sets_url
        self.booster_data_url = (booster_data_url or settings.booster_data_url).rstrip("/")
        self.max_retries = settings.catalog_max_retries if max_retries is None else max_retries
        self.retry_delay = settings.catalog_retry_delay if retry_delay is None else retry_delay
        self.page_delay = settings.catalog_page_delay if page_delay is None else page_delay

    async def get_json(self, url: str, params: dict[str, str] | None = None) -> Any:
        """
        GET a JSON document, retrying rate-limited responses.

        Raises:
            CatalogError: On HTTP errors, invalid JSON, or when every attempt
                was rate limited
        """
        for attempt in range(1, self.max_retries + 1):
            try:
                response = await self._client.get(url, params=params)
            except httpx.RequestError as e:
                raise CatalogError(f"Request to {url} failed: {e}") from e

            if response.status_code == 429:
                logger.warning(
                    "Rate limited by %s (attempt %d/%d)", url, attempt, self.max_retries
                )
                await asyncio.sleep(self.retry_delay)
                continue

            if response.is_error:
                raise CatalogError(f"HTTP {response.status_code} for {url}")

            try:
                return response.json()
            except ValueError as e:
                raise CatalogError(f"Invalid JSON from {url}") from e

        raise CatalogError(f"Still rate limited after {self.max_retries} attempts: {url}")

    async def fetch_sets(self) -> list[SetInfo]:
        data = await self.get_json(self.sets_url)
        if isinstance(data, dict):
            data = data.get("data", [])
        return [SetInfo.from_dict(entry) for entry in data if entry.get("code")]

    async def fetch_booster_definition(self, set_code: str) -> BoosterDefinition | None:
        try:
            index = await self.get_json(f"{self.booster_data_url}/index.json")
            types = (index.get("boosters") or {}).get(set_code) or []
            product = next((t for t in PREFERRED_BOOSTER_TYPES if t in types), None)
            if product is None:
                logger.info("No play or draft booster data for %s", set_code)
                return None

            url = f"{self.booster_data_url}/boosters/{set_code}-{product}.json"
            data = await self.get_json(url)
        except (CatalogError, AttributeError) as e:
            logger.info("No booster data for %s, using legacy generation: %s", set_code, e)
            return None

        if not isinstance(data, dict) or not isinstance(data.get("slots"), list):
            logger.info(
                "Booster data for %s-%s has no slots, using legacy generation", set_code, product
            )
            return None

        logger.info("Loaded booster data: %s-%s", set_code, product)
        return BoosterDefinition.from_dict(data, set_code=set_code, product=product)

    async def _search(self, query: str, unique: str) -> list[dict[str, Any]]:
        url = f"{self.scryfall_api_url}/cards/search"
        data = await self.get_json(url, params={"q": query, "unique": unique})
        if not isinstance(data, dict):
            raise CatalogError(f"Unexpected search response for {query!r}")
        results: list[dict[str, Any]] = list(data.get("data") or [])

        while data.get("has_more") and data.get("next_page"):
            await asyncio.sleep(self.page_delay)
            # Next page URL includes params
            data = await self.get_json(data["next_page"])
            results.extend(data.get("data") or [])

        return results

    async def fetch_set_cards(self, set_code: str) -> list[Card]:
        raw = await self._search(f"set:{set_code} lang:en", unique="prints")
        logger.info("Fetched %d printings for %s", len(raw), set_code)
        try:
            return [Card.from_scryfall(card) for card in raw]
        except (KeyError, TypeError, ValueError) as e:
            raise CatalogError(f"Malformed card data for {set_code}: {e}") from e

    async def fetch_basic_lands(self, set_code: str) -> dict[str, Card]:
        names = " or ".join(f'!"{name}"' for name in BASIC_LAND_NAMES.values())
        query = f"set:{set_code} ({names}) type:basic"
        color_by_name = {name: color for color, name in BASIC_LAND_NAMES.items()}

        lands: dict[str, Card] = {}
        try:
            for raw in await self._search(query, unique="cards"):
                color = color_by_name.get(raw.get("name", ""))
                if color and color not in lands:
                    lands[color] = Card.from_scryfall(raw)
        except CatalogError as e:
            logger.info("No basic lands in %s, using defaults: %s", set_code, e)

        for color, name in BASIC_LAND_NAMES.items():
            if color in lands:
                continue
            try:
                raw = await self.get_json(
                    f"{self.scryfall_api_url}/cards/named", params={"exact": name}
                )
            except CatalogError as e:
                logger.warning("Could not fetch default %s: %s", name, e)
                continue
            lands[color] = Card.from_scryfall(raw)

        return lands


def create_catalog_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
        follow_redirects=True,
        timeout=30.0,
    )


async def get_catalog() -> AsyncGenerator[CatalogProvider, None]:
    """Dependency that provides an HTTP catalog for the duration of a request."""
    async with create_catalog_client() as client:
        yield HttpCatalog(client)
