import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from songstore.auth.admin import AdminAuthError
from songstore.db.client import DbClient
from songstore.routers import collections, fingerprints, health, songs
from songstore.settings import settings
from songstore.store.errors import InvalidInputError, StoreConnectionError, StoreError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # 1. Open and verify the database
    try:
        db = DbClient.open(settings.database_url)
    except StoreConnectionError as exc:
        raise SystemExit(
            "FATAL: Cannot open the song database. Check DATABASE_URL."
        ) from exc

    try:
        await db.ping()
        await db.create_schema()
    except StoreConnectionError as exc:
        logger.debug("Database connection error: %s", exc)
        await db.close()
        raise SystemExit(
            "FATAL: Cannot reach the song database. "
            "Check DATABASE_URL and ensure the server is running."
        ) from exc
    logger.info("Database connection verified")

    app.state.db = db

    yield

    # Shutdown
    await db.close()


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code, "message": message, "details": None}},
    )


def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    application.include_router(health.router)
    application.include_router(songs.router, prefix="/api/v1")
    application.include_router(fingerprints.router, prefix="/api/v1")
    application.include_router(collections.router, prefix="/api/v1")

    @application.exception_handler(AdminAuthError)
    async def admin_auth_error_handler(request: Request, exc: AdminAuthError) -> JSONResponse:
        return _error_response(403, exc.code, exc.message)

    @application.exception_handler(InvalidInputError)
    async def invalid_input_handler(request: Request, exc: InvalidInputError) -> JSONResponse:
        return _error_response(422, "INVALID_INPUT", str(exc))

    @application.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
        logger.error("Storage error on %s %s: %s", request.method, request.url.path, exc)
        return _error_response(503, "STORAGE_ERROR", "The song database rejected the request.")

    @application.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        return _error_response(500, "INTERNAL_ERROR", "An unexpected error occurred.")

    return application


app = create_app()
