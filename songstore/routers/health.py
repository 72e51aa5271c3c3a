import logging

from fastapi import APIRouter, Depends

from songstore.db.client import DbClient
from songstore.db.session import get_db
from songstore.schemas.health import HealthResponse
from songstore.settings import settings
from songstore.store.errors import StoreConnectionError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(db: DbClient = Depends(get_db)) -> HealthResponse:  # noqa: B008
    try:
        await db.ping()
        database = "ok"
    except StoreConnectionError as exc:
        logger.warning("Health check could not reach the database: %s", exc)
        database = "unavailable"
    return HealthResponse(
        status="ok" if database == "ok" else "degraded",
        version=settings.app_version,
        database=database,
    )
