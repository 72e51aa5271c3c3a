import logging

from fastapi import APIRouter, Depends

from songstore.auth.admin import require_admin_key
from songstore.db.session import get_maintenance
from songstore.schemas.collection import Collection, CollectionDeleteResponse
from songstore.schemas.errors import ErrorResponse
from songstore.store.maintenance import CollectionMaintenance

logger = logging.getLogger(__name__)

router = APIRouter(tags=["collections"])


@router.delete(
    "/collections/{name}",
    response_model=CollectionDeleteResponse,
    dependencies=[Depends(require_admin_key)],
    responses={403: {"description": "Admin key missing or invalid", "model": ErrorResponse}},
)
async def delete_collection(
    name: Collection,
    maintenance: CollectionMaintenance = Depends(get_maintenance),  # noqa: B008
) -> CollectionDeleteResponse:
    deleted = await maintenance.delete_collection(name)
    logger.warning("Collection %s wiped via API (%d rows)", name.value, deleted)
    return CollectionDeleteResponse(collection=name, deleted=deleted)
