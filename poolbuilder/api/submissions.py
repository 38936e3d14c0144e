"""
Daily challenge submission endpoints.

Anyone may submit one deck per day. A day's decks are revealed only to
fingerprints that have submitted for that day.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from poolbuilder.api.dependencies import get_blob_store, to_response
from poolbuilder.db import BlobStore
from poolbuilder.services import submissions

router = APIRouter(tags=["submissions"])


class SubmitRequest(BaseModel):
    """
    Body of POST /submit.

    Every field is optional here so that missing fields produce the
    service's own 400 instead of a schema error.
    """

    date: str | None = None
    name: str | None = None
    fingerprint: str | None = None
    card_ids: list[str] | None = Field(default=None, alias="cardIds")
    basics: dict[str, int] | None = None
    colors: list[str] | None = None


@router.post("/submit")
async def submit_deck(
    request: SubmitRequest,
    store: Annotated[BlobStore, Depends(get_blob_store)],
) -> JSONResponse:
    """
    Submit today's deck.

    Returns the new id with the day's snapshot. Resubmitting returns 409 with
    the existing id and the same snapshot.
    """
    result = await submissions.submit(
        store,
        date=request.date,
        name=request.name,
        fingerprint=request.fingerprint,
        card_ids=request.card_ids,
        basics=request.basics,
        colors=request.colors,
    )
    return to_response(result)


@router.get("/submissions/{date}")
async def get_day_submissions(
    date: str,
    store: Annotated[BlobStore, Depends(get_blob_store)],
    fingerprint: str | None = None,
) -> JSONResponse:
    """A day's submissions and metadata, or 403 with the count while locked."""
    return to_response(await submissions.get_submissions(store, date, fingerprint))


@router.get("/submissions/{date}/summary")
async def get_day_summary(
    date: str,
    store: Annotated[BlobStore, Depends(get_blob_store)],
    fingerprint: str | None = None,
) -> JSONResponse:
    """Card inclusion counts, average basics and color combinations for a day."""
    return to_response(await submissions.get_field_summary(store, date, fingerprint))
