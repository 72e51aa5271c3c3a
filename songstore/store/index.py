"""Inverted fingerprint index: address -> couples (anchor time, song id).

Writes go through one transaction per batch. Reads resolve a batch of
addresses with chunked ``IN`` queries; chunks do not share a snapshot,
so a concurrent write may be visible to later chunks only.

Two address policies are supported:

- ``accumulate``: an address keeps every distinct couple written to it,
  across songs and across time offsets. A repeated identical couple is
  stored once.
- ``replace``: writing an address first removes whatever couples it
  held, so only the most recent write survives. On PostgreSQL the batch
  holds advisory locks on its addresses until commit, so concurrent
  batches touching the same address apply one after the other.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import TypeVar

from sqlalchemy import delete, func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from songstore.db.client import DbClient
from songstore.models.fingerprint import Fingerprint
from songstore.schemas.fingerprint import AddressPolicy, Couple
from songstore.settings import settings
from songstore.store.errors import InvalidInputError, QueryError, TransactionError
from songstore.store.validation import check_uint32

logger = logging.getLogger(__name__)

T = TypeVar("T")

FingerprintEntries = Mapping[int, Couple] | Iterable[tuple[int, Couple]]

# Serialises replace-mode writers per address on PostgreSQL. SQLite takes a
# database-wide write lock for the whole transaction, so it needs no extra lock.
_ADDRESS_LOCK = text(
    "SELECT pg_advisory_xact_lock(a) "
    "FROM (SELECT unnest(CAST(:addresses AS BIGINT[])) AS a ORDER BY a) AS ordered"
)


def _chunked(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    for start in range(0, len(items), size):
        yield items[start : start + size]


async def _lock_addresses(
    session: AsyncSession, addresses: Iterable[int], chunk_size: int
) -> None:
    """Take PostgreSQL transaction-level advisory locks on ``addresses``.

    Locks are taken in ascending order so two batches sharing addresses
    cannot deadlock. They are released at commit or rollback.
    """
    for chunk in _chunked(sorted(addresses), chunk_size):
        await session.execute(_ADDRESS_LOCK, {"addresses": list(chunk)})


def _normalize_entries(entries: FingerprintEntries) -> list[tuple[int, Couple]]:
    pairs = list(entries.items()) if isinstance(entries, Mapping) else list(entries)
    for address, couple in pairs:
        check_uint32(address, "address")
        if not isinstance(couple, Couple):
            raise InvalidInputError(f"expected a Couple for address {address}, got {couple!r}")
    return pairs


class FingerprintIndex:
    """Bulk writes and batch lookups against the ``fingerprints`` table.

    Args:
        db: Open database client.
        policy: Address policy; defaults to ``settings.fingerprint_address_policy``.
        chunk_size: Addresses per lookup/delete statement; defaults to
            ``settings.lookup_chunk_size``.
    """

    def __init__(
        self,
        db: DbClient,
        *,
        policy: AddressPolicy | str | None = None,
        chunk_size: int | None = None,
    ) -> None:
        self._db = db
        try:
            self.policy = AddressPolicy(policy or settings.fingerprint_address_policy)
        except ValueError:
            raise InvalidInputError(f"unknown address policy {policy!r}") from None
        self._chunk_size = settings.lookup_chunk_size if chunk_size is None else chunk_size
        if self._chunk_size < 1:
            raise InvalidInputError("chunk_size must be at least 1")

    async def store_fingerprints(self, entries: FingerprintEntries) -> int:
        """Write a batch of couples atomically.

        Args:
            entries: ``{address: couple}``, or ``(address, couple)`` pairs
                when one address carries several couples.

        Returns:
            Number of entries submitted.

        Raises:
            InvalidInputError: On a malformed entry; nothing is written.
            TransactionError: If any write fails. The batch is rolled back.
        """
        pairs = _normalize_entries(entries)
        if not pairs:
            return 0

        if self.policy is AddressPolicy.REPLACE:
            # Latest couple per address wins, within the batch as well
            latest = dict(pairs)
            rows = [_row(address, couple) for address, couple in latest.items()]
        else:
            rows = [_row(address, couple) for address, couple in dict.fromkeys(pairs)]

        try:
            async with self._db.session() as session, session.begin():
                if self.policy is AddressPolicy.REPLACE:
                    addresses = [row["address"] for row in rows]
                    if self._db.engine.dialect.name == "postgresql":
                        await _lock_addresses(session, addresses, self._chunk_size)
                    for chunk in _chunked(addresses, self._chunk_size):
                        await session.execute(
                            delete(Fingerprint)
                            .where(Fingerprint.address.in_(chunk))
                            .execution_options(synchronize_session=False)
                        )
                stmt = self._db.insert(Fingerprint).on_conflict_do_nothing()
                for chunk in _chunked(rows, self._chunk_size):
                    await session.execute(stmt, list(chunk))
        except SQLAlchemyError as exc:
            logger.warning("Fingerprint batch of %d entries rolled back: %s", len(pairs), exc)
            raise TransactionError(f"error inserting/updating fingerprints: {exc}") from exc

        logger.info(
            "Stored %d fingerprint entries (%d rows, policy: %s)",
            len(pairs),
            len(rows),
            self.policy.value,
        )
        return len(pairs)

    async def get_couples(self, addresses: Iterable[int]) -> dict[int, list[Couple]]:
        """Resolve addresses to the couples stored under them.

        Every requested address is a key of the result; an address with no
        couples maps to an empty list. Duplicate addresses are looked up once.

        Raises:
            InvalidInputError: If an address is not a uint32.
            QueryError: If any lookup fails. No partial result is returned.
        """
        requested = list(dict.fromkeys(addresses))
        for address in requested:
            check_uint32(address, "address")

        couples: dict[int, list[Couple]] = {address: [] for address in requested}
        if not requested:
            return couples

        try:
            async with self._db.session() as session:
                for chunk in _chunked(requested, self._chunk_size):
                    stmt = (
                        select(Fingerprint.address, Fingerprint.anchor_time_ms, Fingerprint.song_id)
                        .where(Fingerprint.address.in_(chunk))
                        .order_by(
                            Fingerprint.address, Fingerprint.anchor_time_ms, Fingerprint.song_id
                        )
                    )
                    result = await session.execute(stmt)
                    for address, anchor_time_ms, song_id in result.all():
                        couples[address].append(
                            Couple(anchor_time_ms=anchor_time_ms, song_id=song_id)
                        )
                    # End the read transaction between chunks
                    await session.commit()
        except SQLAlchemyError as exc:
            raise QueryError(f"error querying fingerprints: {exc}") from exc

        logger.debug(
            "Looked up %d addresses, %d with couples",
            len(requested),
            sum(1 for found in couples.values() if found),
        )
        return couples

    async def total_fingerprints(self) -> int:
        try:
            async with self._db.session() as session:
                result = await session.execute(select(func.count()).select_from(Fingerprint))
                return result.scalar_one()
        except SQLAlchemyError as exc:
            raise QueryError(f"error counting fingerprints: {exc}") from exc

    async def delete_fingerprints_by_song_id(self, song_id: int) -> int:
        """Remove every couple that references ``song_id``.

        Returns:
            Number of rows deleted.
        """
        check_uint32(song_id, "song id")
        stmt = (
            delete(Fingerprint)
            .where(Fingerprint.song_id == song_id)
            .execution_options(synchronize_session=False)
        )
        try:
            async with self._db.session() as session, session.begin():
                result = await session.execute(stmt)
        except SQLAlchemyError as exc:
            raise QueryError(f"error deleting fingerprints for song {song_id}: {exc}") from exc

        deleted = result.rowcount or 0
        logger.info("Deleted %d fingerprints for song %d", deleted, song_id)
        return deleted


def _row(address: int, couple: Couple) -> dict[str, int]:
    return {
        "address": address,
        "anchor_time_ms": couple.anchor_time_ms,
        "song_id": couple.song_id,
    }
