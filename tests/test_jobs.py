"""Tests for the daily pre-generation job."""

import json
from unittest.mock import AsyncMock, patch

import pytest

from poolbuilder.jobs.generate_daily import main, run_generate_daily, write_snapshot
from poolbuilder.services.catalog import CatalogError
from poolbuilder.services.sealed import build_daily_snapshot


@pytest.fixture
async def snapshot(fake_catalog):
    return await build_daily_snapshot(fake_catalog)


class TestWriteSnapshot:
    async def test_writes_compact_json(self, tmp_path, snapshot) -> None:
        output = tmp_path / "out" / "daily.json"

        size = write_snapshot(snapshot, output)

        raw = output.read_text(encoding="utf-8")
        assert size == len(raw.encode("utf-8"))
        assert ": " not in raw
        data = json.loads(raw)
        assert list(data) == ["date", "seed", "set", "pool", "basicLands"]
        assert data["basicLands"]["G"]["type_line"] == "Basic Land — Forest"


class TestRunGenerateDaily:
    async def test_success(self, tmp_path, snapshot) -> None:
        output = tmp_path / "daily.json"
        with patch(
            "poolbuilder.jobs.generate_daily.build_daily_snapshot",
            new_callable=AsyncMock,
            return_value=snapshot,
        ):
            result = await run_generate_daily(output)

        assert result is snapshot
        assert json.loads(output.read_text(encoding="utf-8"))["seed"] == snapshot.seed

    async def test_failure_is_reraised(self, tmp_path) -> None:
        output = tmp_path / "daily.json"
        with (
            patch(
                "poolbuilder.jobs.generate_daily.build_daily_snapshot",
                new_callable=AsyncMock,
                side_effect=CatalogError("HTTP 500"),
            ),
            pytest.raises(CatalogError),
        ):
            await run_generate_daily(output)

        assert not output.exists()


class TestMain:
    def test_exits_non_zero_on_failure(self, tmp_path) -> None:
        with (
            patch(
                "poolbuilder.jobs.generate_daily.build_daily_snapshot",
                new_callable=AsyncMock,
                side_effect=CatalogError("HTTP 500"),
            ),
            pytest.raises(SystemExit) as exc_info,
        ):
            main(["--output", str(tmp_path / "daily.json")])

        assert exc_info.value.code == 1
