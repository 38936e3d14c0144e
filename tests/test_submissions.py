"""Tests for the daily challenge submission service."""

from typing import Any

import pytest

from poolbuilder.db.blob_store import BlobStore, SqlBlobStore, StoredBlob, WriteConflictError
from poolbuilder.models.failure import FailureKind
from poolbuilder.services import submissions
from poolbuilder.services.submissions import clean_name, meta_key, subs_key

TODAY = "2024-01-01"


class MemoryBlobStore(BlobStore):
    """Dict-backed store whose first N writes lose the race."""

    def __init__(self, conflicts: int = 0) -> None:
        self.committed: dict[str, StoredBlob] = {}
        self.pending: dict[str, StoredBlob] = {}
        self.conflicts = conflicts
        self.discards = 0

    async def get(self, key: str) -> StoredBlob | None:
        return self.pending.get(key) or self.committed.get(key)

    async def put(self, key: str, value: Any, expected_version: int | None) -> int:
        if self.conflicts > 0:
            self.conflicts -= 1
            raise WriteConflictError(key)
        current = await self.get(key)
        if (current.version if current else None) != expected_version:
            raise WriteConflictError(key)
        version = (expected_version or 0) + 1
        self.pending[key] = StoredBlob(value=value, version=version)
        return version

    async def discard(self) -> None:
        self.discards += 1
        self.pending.clear()


class RacingBlobStore(MemoryBlobStore):
    """Another request commits a submission just before our first write."""

    def __init__(self, rival: dict[str, Any]) -> None:
        super().__init__()
        self.rival: dict[str, Any] | None = rival

    async def put(self, key: str, value: Any, expected_version: int | None) -> int:
        if self.rival is not None:
            self.committed[subs_key(TODAY)] = StoredBlob(value=[self.rival], version=1)
            self.committed[meta_key(TODAY)] = StoredBlob(
                value={"count": 1, "featured": []}, version=1
            )
            self.rival = None
        return await super().put(key, value, expected_version)


@pytest.fixture
def store(db_session) -> SqlBlobStore:
    return SqlBlobStore(db_session)


def deck_payload(fingerprint: str = "fp-1", size: int = 40, **overrides) -> dict[str, Any]:
    card_ids = [f"c{i % 4 + 1}" for i in range(23)]
    payload = {
        "date": TODAY,
        "name": "Ann",
        "fingerprint": fingerprint,
        "card_ids": card_ids,
        "basics": {"W": size - len(card_ids)},
        "colors": ["W"],
        "today": TODAY,
    }
    payload.update(overrides)
    return payload


class TestSubmit:
    async def test_accepts_forty_cards(self, store) -> None:
        result = await submissions.submit(store, **deck_payload())

        assert result.status == 200
        assert len(result.body["id"]) == 8
        assert result.body["meta"] == {"count": 1, "featured": []}
        [entry] = result.body["submissions"]
        assert entry["name"] == "Ann"
        assert entry["submittedAt"].endswith("Z")
        assert "fingerprint" not in entry

    async def test_rejects_thirty_nine(self, store) -> None:
        result = await submissions.submit(store, **deck_payload(size=39))
        assert result.status == 400
        assert result.body == {"error": "deck must have at least 40 cards"}
        assert await store.get(subs_key(TODAY)) is None

    async def test_missing_fields(self, store) -> None:
        result = await submissions.submit(store, **deck_payload(card_ids=None))
        assert result.status == 400
        assert result.kind is FailureKind.MISSING_REQUIRED

    async def test_empty_fingerprint_is_missing(self, store) -> None:
        result = await submissions.submit(store, **deck_payload(fingerprint=""))
        assert result.body == {"error": "missing required fields"}

    @pytest.mark.parametrize("date", ["2023-12-31", "2024-01-02"])
    async def test_only_today(self, store, date: str) -> None:
        result = await submissions.submit(store, **deck_payload(date=date))
        assert result.status == 400
        assert result.body == {"error": "submissions only accepted for today"}

    async def test_duplicate_fingerprint_returns_existing(self, store) -> None:
        first = await submissions.submit(store, **deck_payload())
        second = await submissions.submit(store, **deck_payload(name="Someone else"))
        third = await submissions.submit(store, **deck_payload(size=10))

        assert second.status == 409
        assert second.body["id"] == first.body["id"]
        assert second.body["meta"]["count"] == 1
        # Dedup wins over size validation
        assert third.status == 409
        assert third.kind is FailureKind.DUPLICATE_SUBMISSION

    async def test_count_tracks_submissions(self, store) -> None:
        for i in range(3):
            result = await submissions.submit(store, **deck_payload(fingerprint=f"fp-{i}"))
        assert result.body["meta"]["count"] == 3
        assert [s["name"] for s in result.body["submissions"]] == ["Ann"] * 3
        assert len({s["id"] for s in result.body["submissions"]}) == 3

    async def test_negative_basics_rejected(self, store) -> None:
        result = await submissions.submit(store, **deck_payload(basics={"W": 50, "U": -1}))
        assert result.status == 400
        assert result.kind is FailureKind.INVALID_INPUT

    async def test_retries_on_conflict(self) -> None:
        store = MemoryBlobStore(conflicts=2)
        result = await submissions.submit(store, **deck_payload())
        assert result.status == 200
        assert store.discards == 2
        assert store.pending[meta_key(TODAY)].value["count"] == 1

    async def test_gives_up_after_repeated_conflicts(self) -> None:
        store = MemoryBlobStore(conflicts=10)
        result = await submissions.submit(store, **deck_payload())
        assert result.status == 503
        assert result.body == {"error": "storage busy, retry"}
        assert store.pending == {}

    async def test_concurrent_writer_is_not_lost(self) -> None:
        store = RacingBlobStore(
            {
                "id": "rival001",
                "name": "Bob",
                "fingerprint": "fp-rival",
                "submittedAt": "2024-01-01T00:00:00.000Z",
                "cardIds": [],
                "basics": {"G": 40},
                "colors": [],
            }
        )
        result = await submissions.submit(store, **deck_payload(fingerprint="fp-a"))

        assert result.status == 200
        assert store.discards == 1
        assert result.body["meta"]["count"] == 2
        assert result.body["submissions"][0]["id"] == "rival001"


class TestCleanName:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (None, "anonymous"),
            ("", "anonymous"),
            ("   ", "anonymous"),
            ("  Ann  ", "Ann"),
            ("a" * 30, "a" * 20),
            ("Ann\x00\n", "Ann"),
            ("x" * 19 + " y", "x" * 19),
        ],
    )
    def test_clean_name(self, raw, expected) -> None:
        assert clean_name(raw) == expected


class TestGetSubmissions:
    async def test_locked_until_submitted(self, store) -> None:
        await submissions.submit(store, **deck_payload(fingerprint="fp-a"))

        locked = await submissions.get_submissions(store, TODAY, "fp-b")
        anonymous = await submissions.get_submissions(store, TODAY)

        assert locked.status == 403
        assert locked.body == {"count": 1}
        assert anonymous.status == 403

    async def test_unlocked_for_submitter(self, store) -> None:
        await submissions.submit(store, **deck_payload(fingerprint="fp-a"))
        result = await submissions.get_submissions(store, TODAY, "fp-a")
        assert result.status == 200
        assert result.body["meta"]["count"] == 1
        assert len(result.body["submissions"]) == 1

    async def test_empty_day(self, store) -> None:
        result = await submissions.get_submissions(store, "2023-05-05", "fp")
        assert result.status == 403
        assert result.body == {"count": 0}

    @pytest.mark.parametrize("date", [None, "", "2024-1-1", "yesterday", "2024-01-01x"])
    async def test_invalid_date(self, store, date) -> None:
        result = await submissions.get_submissions(store, date, "fp")
        assert result.status == 400
        assert result.body == {"error": "invalid date"}


class TestSetFeatured:
    async def test_feature_and_unfeature(self, store) -> None:
        submitted = await submissions.submit(store, **deck_payload())
        sub_id = submitted.body["id"]

        first = await submissions.set_featured(store, TODAY, sub_id, True)
        again = await submissions.set_featured(store, TODAY, sub_id, True)
        assert first.body == {"meta": {"count": 1, "featured": [sub_id]}}
        assert again.body == first.body

        removed = await submissions.set_featured(store, TODAY, sub_id, False)
        assert removed.body["meta"]["featured"] == []

    async def test_feature_on_empty_day(self, store) -> None:
        result = await submissions.set_featured(store, "2023-05-05", "abc", True)
        assert result.body == {"meta": {"count": 0, "featured": ["abc"]}}

    async def test_missing_fields(self, store) -> None:
        result = await submissions.set_featured(store, TODAY, None, True)
        assert result.status == 400
        assert result.body == {"error": "missing date or submissionId"}


class TestFieldSummary:
    async def test_summary_for_submitter(self, store) -> None:
        await submissions.submit(store, **deck_payload(fingerprint="fp-a"))
        await submissions.submit(
            store, **deck_payload(fingerprint="fp-b", card_ids=["c1"] * 23, colors=["W", "U"])
        )

        result = await submissions.get_field_summary(store, TODAY, "fp-a")
        assert result.status == 200
        assert result.body["count"] == 2
        assert result.body["cardCounts"]["c1"] == 2
        assert result.body["cardCounts"]["c2"] == 1
        assert result.body["averageBasics"]["W"] == 17.0
        assert {"colors": "UW", "count": 1} in result.body["colorCombos"]

    async def test_summary_locked(self, store) -> None:
        await submissions.submit(store, **deck_payload(fingerprint="fp-a"))
        result = await submissions.get_field_summary(store, TODAY, "fp-x")
        assert result.status == 403
        assert result.body == {"count": 1}
