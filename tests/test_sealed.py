"""Tests for sealed pool assembly."""

import pytest

from poolbuilder.generation.daily import today_utc
from poolbuilder.models.failure import NoEligibleSetsError
from poolbuilder.models.mtg_set import SetInfo
from poolbuilder.services.sealed import (
    build_daily_snapshot,
    build_pool_snapshot,
    resolve_set,
)


async def test_resolve_known_set(fake_catalog) -> None:
    set_info = await resolve_set(fake_catalog, "ZNR")
    assert set_info.code == "znr"


async def test_resolve_unknown_set(fake_catalog) -> None:
    assert await resolve_set(fake_catalog, "abc") == SetInfo("abc", "ABC")


async def test_snapshot_matches_generator(fake_catalog) -> None:
    snapshot = await build_pool_snapshot(
        fake_catalog, SetInfo("tst", "Test"), "daily-2024-01-01", booster_count=1
    )
    data = snapshot.to_dict(include_mode=True)

    assert data["mode"] == "structured"
    assert data["set"] == {"code": "tst", "name": "Test"}
    assert [c["id"] for c in data["pool"]] == ["r1", "u2", "u2", "c4", "c1", "c4"]
    assert set(data["basicLands"]) == {"W", "U", "B", "R", "G"}
    assert "date" not in data


async def test_legacy_when_no_definition(fake_catalog, card_factory) -> None:
    fake_catalog.definition = None
    fake_catalog.cards = [
        *fake_catalog.cards,
        card_factory("b1", "common", "9", booster=True),
        card_factory("b2", "rare", "10", booster=True),
    ]
    snapshot = await build_pool_snapshot(fake_catalog, SetInfo("tst", "Test"), "seed", 2)

    # Only the two booster-flagged printings survive the filter
    assert snapshot.pool.mode.value == "legacy"
    assert {c.id for c in snapshot.pool.cards} == {"b1", "b2"}
    assert len(snapshot.pool) == 2 * (1 + 10)


async def test_daily_snapshot(fake_catalog) -> None:
    snapshot = await build_daily_snapshot(fake_catalog)
    data = snapshot.to_dict()

    assert data["date"] == today_utc()
    assert data["seed"] == f"daily-{today_utc()}"
    assert "mode" not in data
    assert len(data["pool"]) == 36
    assert fake_catalog.requested_cards == [data["set"]["code"]]


async def test_daily_snapshot_without_sets(fake_catalog) -> None:
    fake_catalog.sets = []
    with pytest.raises(NoEligibleSetsError):
        await build_daily_snapshot(fake_catalog)
