import logging
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from poolbuilder.api import admin_router, health_router, pools_router, submissions_router
from poolbuilder.api.dependencies import invalid_body_response
from poolbuilder.config import settings
from poolbuilder.db.database import init_db
from poolbuilder.models.failure import KnownError

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    await init_db()
    yield


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("poolbuilder"),
    lifespan=lifespan,
)

app.include_router(admin_router)
app.include_router(health_router)
app.include_router(pools_router)
app.include_router(submissions_router)


@app.middleware("http")
async def cors(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    """Answer preflight requests and tag every response for the allowed origin."""
    if request.method == "OPTIONS":
        response = Response(status_code=status.HTTP_204_NO_CONTENT)
    else:
        response = await call_next(request)
    response.headers["Access-Control-Allow-Origin"] = settings.allowed_origin
    response.headers.update(CORS_HEADERS)
    return response


@app.exception_handler(KnownError)
async def known_error_handler(_request: Request, exc: KnownError) -> JSONResponse:
    logger.warning("%s: %s", exc.kind.value, exc.detail or exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    return invalid_body_response(exc.errors())


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = "not found" if exc.status_code == 404 else str(exc.detail).lower()
    return JSONResponse(status_code=exc.status_code, content={"error": message})
