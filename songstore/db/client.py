"""Process-wide database handle.

A single :class:`DbClient` is opened at startup and passed to every
component that needs storage. It is closed once at shutdown.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy import text
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from songstore.db.engine import create_engine
from songstore.models import Base
from songstore.models.fingerprint import Fingerprint  # noqa: F401
from songstore.models.song import Song  # noqa: F401
from songstore.settings import settings
from songstore.store.errors import StoreConnectionError

logger = logging.getLogger(__name__)

# Dialect-specific INSERT constructs; both support ON CONFLICT clauses.
_INSERT_BY_DIALECT: dict[str, Callable[..., Any]] = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


class DbClient:
    """Owns the async engine and session factory for one process."""

    def __init__(self, engine: AsyncEngine) -> None:
        if engine.dialect.name not in _INSERT_BY_DIALECT:
            raise StoreConnectionError(f"Unsupported database dialect: {engine.dialect.name}")
        self._engine: AsyncEngine | None = engine
        self._session_factory = async_sessionmaker(engine, expire_on_commit=False)
        self._insert = _INSERT_BY_DIALECT[engine.dialect.name]

    @classmethod
    def open(cls, database_url: str | None = None) -> DbClient:
        """Create a client for ``database_url`` (defaults to ``settings.database_url``).

        Raises:
            StoreConnectionError: If the URL is malformed, names a driver
                that is not installed, or uses an unsupported dialect.
        """
        url = database_url or settings.database_url
        try:
            engine = create_engine(
                url,
                echo=settings.database_echo,
                busy_timeout_s=settings.sqlite_busy_timeout_s,
            )
        except (SQLAlchemyError, ImportError) as exc:
            raise StoreConnectionError(f"error opening database: {exc}") from exc

        client = cls(engine)
        logger.info("Database client opened (dialect: %s)", engine.dialect.name)
        return client

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise StoreConnectionError("Database client is closed")
        return self._engine

    @property
    def closed(self) -> bool:
        return self._engine is None

    def session(self) -> AsyncSession:
        """Return a new session; use it as an async context manager."""
        if self._engine is None:
            raise StoreConnectionError("Database client is closed")
        return self._session_factory()

    def insert(self, entity: Any) -> Any:
        """Build an INSERT for ``entity`` that supports ``on_conflict_*``."""
        return self._insert(entity)

    async def ping(self) -> None:
        """Verify the database is reachable.

        Raises:
            StoreConnectionError: If a connection cannot be established.
        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as exc:
            raise StoreConnectionError(f"error connecting to database: {exc}") from exc

    async def create_schema(self) -> None:
        """Create the ``songs`` and ``fingerprints`` tables if missing."""
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except (SQLAlchemyError, OSError) as exc:
            raise StoreConnectionError(f"error creating schema: {exc}") from exc
        logger.info("Database schema ready")

    async def close(self) -> None:
        """Dispose the engine. Call once at shutdown."""
        if self._engine is None:
            logger.warning("Database client closed more than once")
            return
        engine, self._engine = self._engine, None
        await engine.dispose()
        logger.info("Database client closed")
