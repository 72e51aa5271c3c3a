from fastapi import Depends, Request

from songstore.db.client import DbClient
from songstore.store.catalog import SongCatalog
from songstore.store.index import FingerprintIndex
from songstore.store.maintenance import CollectionMaintenance


def get_db(request: Request) -> DbClient:
    """Return the client opened by the application lifespan."""
    return request.app.state.db


def get_catalog(db: DbClient = Depends(get_db)) -> SongCatalog:  # noqa: B008
    return SongCatalog(db)


def get_index(db: DbClient = Depends(get_db)) -> FingerprintIndex:  # noqa: B008
    return FingerprintIndex(db)


def get_maintenance(db: DbClient = Depends(get_db)) -> CollectionMaintenance:  # noqa: B008
    return CollectionMaintenance(db)
