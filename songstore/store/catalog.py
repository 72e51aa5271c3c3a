"""Song catalog: registration, deduplication by song key, lookup, deletion."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError

from songstore.db.client import DbClient
from songstore.identity import generate_song_key, generate_unique_id
from songstore.models.song import Song
from songstore.schemas.fingerprint import UINT32_MAX
from songstore.schemas.song import SongFilter, SongInfo
from songstore.store.errors import InvalidInputError, QueryError
from songstore.store.validation import check_uint32

logger = logging.getLogger(__name__)

_FILTER_COLUMNS = {
    SongFilter.ID: Song.id,
    SongFilter.YT_ID: Song.yt_id,
    SongFilter.KEY: Song.key,
}


def _song_to_info(song: Song) -> SongInfo:
    """Map a Song ORM model to a SongInfo schema."""
    return SongInfo(
        id=song.id,
        title=song.title,
        artist=song.artist,
        yt_id=song.yt_id,
        key=song.key,
    )


def _resolve_filter(filter_key: SongFilter | str) -> SongFilter:
    try:
        return SongFilter(filter_key)
    except ValueError:
        allowed = ", ".join(f.value for f in SongFilter)
        raise InvalidInputError(
            f"invalid filter key {filter_key!r}; expected one of: {allowed}"
        ) from None


class SongCatalog:
    """Owns song identity.

    Args:
        db: Open database client.
        id_factory: Produces a candidate uint32 id for each registration.
        key_factory: Derives the deduplication key from ``(title, artist)``.
    """

    def __init__(
        self,
        db: DbClient,
        *,
        id_factory: Callable[[], int] = generate_unique_id,
        key_factory: Callable[[str, str], str] = generate_song_key,
    ) -> None:
        self._db = db
        self._id_factory = id_factory
        self._key_factory = key_factory

    async def register_song(self, title: str, artist: str, yt_id: str) -> int:
        """Register a song unless its key is already in the catalog.

        Registration is idempotent per key. When the key exists the insert
        is skipped and the id of the song already stored under that key is
        returned, so callers always receive an id that exists in the catalog.

        Returns:
            The id of the song stored under ``(title, artist)``'s key.

        Raises:
            InvalidInputError: If the id factory produced a non-uint32 id.
            QueryError: If the insert or the follow-up lookup fails.
        """
        song_id = self._id_factory()
        if not 0 < song_id <= UINT32_MAX:
            raise InvalidInputError(f"generated song id {song_id} is not a non-zero uint32")
        key = self._key_factory(title, artist)

        stmt = (
            self._db.insert(Song)
            .values(
                {
                    Song.id: song_id,
                    Song.title: title,
                    Song.artist: artist,
                    Song.yt_id: yt_id,
                    Song.key: key,
                }
            )
            .on_conflict_do_nothing(index_elements=[Song.key])
            .returning(Song.id)
        )

        try:
            async with self._db.session() as session, session.begin():
                result = await session.execute(stmt)
                inserted_id = result.scalar_one_or_none()
                if inserted_id is not None:
                    logger.info("Registered song %d (key: %s)", inserted_id, key)
                    return inserted_id

                existing = await session.execute(select(Song.id).where(Song.key == key))
                existing_id = existing.scalar_one()
        except SQLAlchemyError as exc:
            raise QueryError(f"failed to register song: {exc}") from exc

        logger.info("Song key already registered: %s (id %d)", key, existing_id)
        return existing_id

    async def total_songs(self) -> int:
        try:
            async with self._db.session() as session:
                result = await session.execute(select(func.count()).select_from(Song))
                return result.scalar_one()
        except SQLAlchemyError as exc:
            raise QueryError(f"error counting songs: {exc}") from exc

    async def get_song(self, filter_key: SongFilter | str, value: Any) -> tuple[SongInfo, bool]:
        """Look up one song by ``id``, ``ytID`` or ``key``.

        Returns:
            ``(song, True)`` on a hit, ``(SongInfo(), False)`` on a miss.

        Raises:
            InvalidInputError: If ``filter_key`` is not a :class:`SongFilter`
                value, or an ``id`` value is not a uint32. Raised before the
                database is touched.
            QueryError: If the query fails.
        """
        resolved = _resolve_filter(filter_key)
        if resolved is SongFilter.ID:
            check_uint32(value, "song id")
        column = _FILTER_COLUMNS[resolved]

        try:
            async with self._db.session() as session:
                result = await session.execute(select(Song).where(column == value).limit(1))
                song = result.scalars().first()
        except SQLAlchemyError as exc:
            raise QueryError(f"failed to retrieve song: {exc}") from exc

        if song is None:
            logger.debug("No song with %s=%r", filter_key, value)
            return SongInfo(), False
        return _song_to_info(song), True

    async def get_song_by_id(self, song_id: int) -> tuple[SongInfo, bool]:
        return await self.get_song(SongFilter.ID, song_id)

    async def get_song_by_yt_id(self, yt_id: str) -> tuple[SongInfo, bool]:
        return await self.get_song(SongFilter.YT_ID, yt_id)

    async def get_song_by_key(self, key: str) -> tuple[SongInfo, bool]:
        return await self.get_song(SongFilter.KEY, key)

    async def delete_song_by_id(self, song_id: int) -> None:
        """Delete a song. Deleting an unknown id is not an error.

        Couples referencing the song stay in the fingerprint index; use
        :meth:`FingerprintIndex.delete_fingerprints_by_song_id` to drop them.
        """
        check_uint32(song_id, "song id")
        stmt = delete(Song).where(Song.id == song_id).execution_options(synchronize_session=False)
        try:
            async with self._db.session() as session, session.begin():
                result = await session.execute(stmt)
        except SQLAlchemyError as exc:
            raise QueryError(f"failed to delete song: {exc}") from exc

        if result.rowcount:
            logger.info("Deleted song %d", song_id)
