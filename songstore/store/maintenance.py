"""Bulk reset of whole collections."""

from __future__ import annotations

import logging

from sqlalchemy import Table, delete
from sqlalchemy.exc import SQLAlchemyError

from songstore.db.client import DbClient
from songstore.models.fingerprint import Fingerprint
from songstore.models.song import Song
from songstore.schemas.collection import Collection
from songstore.store.errors import InvalidInputError, QueryError

logger = logging.getLogger(__name__)

_COLLECTION_TABLES: dict[Collection, Table] = {
    Collection.SONGS: Song.__table__,  # type: ignore[dict-item]
    Collection.FINGERPRINTS: Fingerprint.__table__,  # type: ignore[dict-item]
}


class CollectionMaintenance:
    def __init__(self, db: DbClient) -> None:
        self._db = db

    async def delete_collection(self, name: Collection | str) -> int:
        """Delete every row of a collection, keeping the table itself.

        Only the tables listed in :class:`Collection` are accepted; the
        name never reaches SQL as text.

        Returns:
            Number of rows deleted, as reported by the driver.

        Raises:
            InvalidInputError: If ``name`` is not a known collection.
            QueryError: If the delete fails.
        """
        try:
            collection = Collection(name)
        except ValueError:
            raise InvalidInputError(f"unknown collection {name!r}") from None

        table = _COLLECTION_TABLES[collection]
        try:
            async with self._db.session() as session, session.begin():
                result = await session.execute(delete(table))
        except SQLAlchemyError as exc:
            raise QueryError(f"error deleting collection {collection.value}: {exc}") from exc

        deleted = result.rowcount or 0
        logger.info("Deleted %d rows from %s", deleted, collection.value)
        return deleted
