from collections.abc import Sequence
from typing import Annotated, Any

from fastapi import Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from poolbuilder.db import BlobStore, SqlBlobStore, get_session
from poolbuilder.models.failure import ServiceResult


async def get_blob_store(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> BlobStore:
    """Submission storage bound to the request's session."""
    return SqlBlobStore(session)


def to_response(result: ServiceResult) -> JSONResponse:
    return JSONResponse(status_code=result.status, content=result.body)


def invalid_body_response(errors: Sequence[Any]) -> JSONResponse:
    """400 for a rejected request body, naming unparseable JSON apart from bad fields."""
    reason = (
        "invalid json"
        if any(error.get("type") == "json_invalid" for error in errors)
        else "invalid request"
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": reason})
