"""
Pool endpoints.

Generates sealed pools on demand. The daily pool itself is normally served
as a static file written by the generate_daily job.
"""

from datetime import UTC, datetime
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query

from poolbuilder.config import DEFAULT_BOOSTER_COUNT
from poolbuilder.generation.daily import daily_seed, today_utc
from poolbuilder.services.catalog import CatalogProvider, get_catalog
from poolbuilder.services.sealed import build_pool_snapshot, resolve_daily_set, resolve_set

router = APIRouter(tags=["pools"])


@router.get("/daily")
async def get_daily(
    catalog: Annotated[CatalogProvider, Depends(get_catalog)],
) -> dict[str, Any]:
    """Today's date, seed and set."""
    now = datetime.now(UTC)
    seed = daily_seed(now)
    set_info = await resolve_daily_set(catalog, seed)
    return {"date": today_utc(now), "seed": seed, "set": set_info.to_dict()}


@router.get("/pools/{set_code}")
async def get_pool(
    set_code: str,
    catalog: Annotated[CatalogProvider, Depends(get_catalog)],
    seed: str | None = None,
    boosters: Annotated[int, Query(ge=1, le=24)] = DEFAULT_BOOSTER_COUNT,
) -> dict[str, Any]:
    """
    Open boosters of a set.

    The same set, seed and booster count always yield the same pool. Without
    a seed, today's daily seed is used.
    """
    set_info = await resolve_set(catalog, set_code)
    snapshot = await build_pool_snapshot(catalog, set_info, seed or daily_seed(), boosters)
    return snapshot.to_dict(include_mode=True)
