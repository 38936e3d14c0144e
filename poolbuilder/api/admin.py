"""
Admin endpoints.

Guarded by a shared bearer secret. An unset secret locks the endpoints.
"""

import hmac
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError

from poolbuilder.api.dependencies import get_blob_store, invalid_body_response, to_response
from poolbuilder.config import settings
from poolbuilder.db import BlobStore
from poolbuilder.models.failure import FailureKind, ServiceResult
from poolbuilder.services import submissions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


class FeatureRequest(BaseModel):
    """Body of POST /admin/feature."""

    date: str | None = None
    submission_id: str | None = Field(default=None, alias="submissionId")
    featured: bool = False


def is_authorized(authorization: str | None, secret: str) -> bool:
    """True when the header is exactly "Bearer <secret>" and a secret is set."""
    if not secret or not authorization:
        return False
    return hmac.compare_digest(authorization.encode(), f"Bearer {secret}".encode())


@router.post("/feature")
async def feature_submission(
    request: Request,
    store: Annotated[BlobStore, Depends(get_blob_store)],
    authorization: Annotated[str | None, Header()] = None,
) -> JSONResponse:
    """
    Add or remove a submission from a day's featured list.

    The body is only read once the caller is authorized.
    """
    if not is_authorized(authorization, settings.admin_secret):
        logger.warning("Rejected admin request to /admin/feature")
        return to_response(
            ServiceResult.failure(FailureKind.UNAUTHORIZED, "unauthorized", status=401)
        )

    try:
        body = FeatureRequest.model_validate_json(await request.body())
    except ValidationError as e:
        return invalid_body_response(e.errors())

    result = await submissions.set_featured(store, body.date, body.submission_id, body.featured)
    return to_response(result)
