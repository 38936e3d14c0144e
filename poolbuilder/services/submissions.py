"""
Daily challenge submissions.

Each day has two blobs: "subs:<date>" (append-only list of submissions)
and "meta:<date>" (count plus the moderated featured list). A missing
blob is the empty day, not an error.

Every operation returns a ServiceResult; validation never raises past this
module. Writes are compare-and-swap and the whole read-modify-write is
retried when another request wins the race.
"""

import logging
import re
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from poolbuilder.config import DEFAULT_NAME, MAX_NAME_LENGTH, MIN_DECK_SIZE, settings
from poolbuilder.db.blob_store import BlobStore, WriteConflictError
from poolbuilder.generation.daily import today_utc
from poolbuilder.models.failure import FailureKind, ServiceResult
from poolbuilder.models.submission import DayMeta, Submission
from poolbuilder.services.field_report import average_basics, color_combos, inclusion_counts

logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


def subs_key(date: str) -> str:
    return f"subs:{date}"


def meta_key(date: str) -> str:
    return f"meta:{date}"


@dataclass
class DayState:
    """Everything stored for one challenge day, with the versions it was read at."""

    date: str
    submissions: list[Submission] = field(default_factory=list)
    meta: DayMeta = field(default_factory=DayMeta)
    subs_version: int | None = None
    meta_version: int | None = None

    def find(self, fingerprint: str) -> Submission | None:
        for submission in self.submissions:
            if submission.fingerprint == fingerprint:
                return submission
        return None

    def snapshot(self) -> dict[str, Any]:
        """Public view of the day. Fingerprints stay server-side."""
        return {
            "submissions": [s.to_dict(include_fingerprint=False) for s in self.submissions],
            "meta": self.meta.to_dict(),
        }


async def load_day(store: BlobStore, date: str) -> DayState:
    subs_blob = await store.get(subs_key(date))
    meta_blob = await store.get(meta_key(date))

    submissions = [Submission.from_dict(s) for s in (subs_blob.value if subs_blob else None) or []]
    meta = DayMeta.from_dict(meta_blob.value if meta_blob else None)

    return DayState(
        date=date,
        submissions=submissions,
        meta=meta,
        subs_version=subs_blob.version if subs_blob else None,
        meta_version=meta_blob.version if meta_blob else None,
    )


def clean_name(name: str | None) -> str:
    """Printable characters only, at most MAX_NAME_LENGTH, never blank."""
    printable = "".join(ch for ch in (name or "") if ch.isprintable())
    return printable[:MAX_NAME_LENGTH].strip() or DEFAULT_NAME


def generate_submission_id() -> str:
    return uuid.uuid4().hex[:8]


async def _with_retries(
    store: BlobStore,
    operation: Callable[[], Awaitable[ServiceResult]],
    description: str,
) -> ServiceResult:
    attempts = max(1, settings.submit_max_attempts)
    for attempt in range(1, attempts + 1):
        try:
            return await operation()
        except WriteConflictError as e:
            logger.warning(
                "%s: write conflict on %s (attempt %d/%d)", description, e.key, attempt, attempts
            )
            await store.discard()

    logger.error("%s: giving up after %d conflicting attempts", description, attempts)
    return ServiceResult.failure(FailureKind.STORAGE_CONFLICT, "storage busy, retry", status=503)


async def submit(
    store: BlobStore,
    *,
    date: str | None,
    name: str | None,
    fingerprint: str | None,
    card_ids: list[str] | None,
    basics: dict[str, int] | None,
    colors: list[str] | None,
    today: str | None = None,
) -> ServiceResult:
    """
    Record a deck for today's challenge.

    Checks run in a fixed order: required fields, date, duplicate
    fingerprint, deck size. A returning player gets the current state with a
    409 even if the new payload is otherwise invalid.

    Returns:
        200 {id, submissions, meta} on success
        409 {id, submissions, meta} if the fingerprint already submitted today
        400 {error} on validation failure
        503 {error} if concurrent writers kept winning the race
    """
    if not date or not fingerprint or card_ids is None or basics is None or colors is None:
        return ServiceResult.failure(FailureKind.MISSING_REQUIRED, "missing required fields")

    if date != (today or today_utc()):
        return ServiceResult.failure(
            FailureKind.DATE_NOT_TODAY, "submissions only accepted for today"
        )

    async def attempt() -> ServiceResult:
        day = await load_day(store, date)

        existing = day.find(fingerprint)
        if existing is not None:
            logger.info("Duplicate submission for %s, returning %s", date, existing.id)
            return ServiceResult(
                status=409,
                body={"id": existing.id, **day.snapshot()},
                kind=FailureKind.DUPLICATE_SUBMISSION,
            )

        if any(count < 0 for count in basics.values()):
            return ServiceResult.failure(
                FailureKind.INVALID_INPUT, "basic land counts cannot be negative"
            )

        if len(card_ids) + sum(basics.values()) < MIN_DECK_SIZE:
            return ServiceResult.failure(
                FailureKind.DECK_SIZE_VIOLATION,
                f"deck must have at least {MIN_DECK_SIZE} cards",
            )

        submitted_at = datetime.now(UTC).isoformat(timespec="milliseconds")
        submission = Submission(
            id=generate_submission_id(),
            name=clean_name(name),
            fingerprint=fingerprint,
            submitted_at=submitted_at.replace("+00:00", "Z"),
            card_ids=list(card_ids),
            basics=dict(basics),
            colors=list(colors),
        )
        day.submissions.append(submission)
        day.meta.count = len(day.submissions)

        await store.put(subs_key(date), [s.to_dict() for s in day.submissions], day.subs_version)
        await store.put(meta_key(date), day.meta.to_dict(), day.meta_version)

        logger.info("Accepted submission %s for %s (%d today)", submission.id, date, day.meta.count)
        return ServiceResult.ok({"id": submission.id, **day.snapshot()})

    return await _with_retries(store, attempt, f"submit {date}")


def _locked(day: DayState) -> ServiceResult:
    return ServiceResult(
        status=403,
        body={"count": day.meta.count or len(day.submissions)},
        kind=FailureKind.LOCKED,
    )


async def get_submissions(
    store: BlobStore, date: str | None, fingerprint: str | None = None
) -> ServiceResult:
    """
    Read a day's submissions.

    The full list is only revealed to fingerprints that submitted that day;
    everyone else gets the count with a 403.
    """
    if not date or not DATE_PATTERN.fullmatch(date):
        return ServiceResult.failure(FailureKind.INVALID_INPUT, "invalid date")

    day = await load_day(store, date)

    if fingerprint and day.find(fingerprint) is not None:
        return ServiceResult.ok(day.snapshot())

    return _locked(day)


async def set_featured(
    store: BlobStore,
    date: str | None,
    submission_id: str | None,
    featured: bool,
) -> ServiceResult:
    """
    Add or remove a submission from a day's featured list.

    Idempotent in both directions. Authorization is the caller's job.
    """
    if not date or not submission_id:
        return ServiceResult.failure(FailureKind.MISSING_REQUIRED, "missing date or submissionId")

    async def attempt() -> ServiceResult:
        blob = await store.get(meta_key(date))
        meta = DayMeta.from_dict(blob.value if blob else None)
        meta.set_featured(submission_id, featured)
        await store.put(meta_key(date), meta.to_dict(), blob.version if blob else None)

        logger.info("Set featured=%s for %s on %s", featured, submission_id, date)
        return ServiceResult.ok({"meta": meta.to_dict()})

    return await _with_retries(store, attempt, f"feature {date}")


async def get_field_summary(
    store: BlobStore, date: str | None, fingerprint: str | None = None
) -> ServiceResult:
    """
    Aggregate view of a day's decks, gated like get_submissions.

    Per-card counts are keyed by card id; clients join them to their pool.
    """
    if not date or not DATE_PATTERN.fullmatch(date):
        return ServiceResult.failure(FailureKind.INVALID_INPUT, "invalid date")

    day = await load_day(store, date)
    if not fingerprint or day.find(fingerprint) is None:
        return _locked(day)

    return ServiceResult.ok(
        {
            "count": len(day.submissions),
            "cardCounts": dict(inclusion_counts(day.submissions)),
            "averageBasics": average_basics(day.submissions),
            "colorCombos": [
                {"colors": combo, "count": count}
                for combo, count in color_combos(day.submissions)
            ],
        }
    )
