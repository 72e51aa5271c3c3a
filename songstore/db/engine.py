from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool


def _is_memory_sqlite(url: str) -> bool:
    return url.startswith("sqlite") and (url.endswith("://") or ":memory:" in url)


def create_engine(url: str, *, echo: bool = False, busy_timeout_s: float = 5.0) -> AsyncEngine:
    """Create the async engine for ``url``.

    SQLite connections get a busy timeout so concurrent writers wait on
    the database lock for a bounded time instead of failing at once.
    An in-memory SQLite database is pinned to a single connection so all
    sessions see the same data.
    """
    kwargs: dict[str, Any] = {"echo": echo}
    if _is_memory_sqlite(url):
        kwargs["poolclass"] = StaticPool
    elif not url.startswith("sqlite"):
        kwargs["pool_pre_ping"] = True

    engine = create_async_engine(url, **kwargs)

    if engine.dialect.name == "sqlite":
        busy_timeout_ms = int(busy_timeout_s * 1000)

        @event.listens_for(engine.sync_engine, "connect")
        def _set_sqlite_pragma(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute(f"PRAGMA busy_timeout={busy_timeout_ms}")
            cursor.close()

    return engine
