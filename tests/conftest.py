"""Shared fixtures.

Every test gets its own SQLite database file (via aiosqlite) under
``tmp_path``, so no external database server is needed.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from songstore.db.client import DbClient
from songstore.main import create_app
from songstore.schemas.fingerprint import AddressPolicy
from songstore.settings import settings
from songstore.store.catalog import SongCatalog
from songstore.store.index import FingerprintIndex
from songstore.store.maintenance import CollectionMaintenance

TEST_ADMIN_KEY = "test-admin-key-12345"


def sqlite_url(path: Path) -> str:
    return f"sqlite+aiosqlite:///{path}"


@pytest.fixture
async def db(tmp_path: Path) -> AsyncIterator[DbClient]:
    client = DbClient.open(sqlite_url(tmp_path / "songs.db"))
    await client.create_schema()
    yield client
    if not client.closed:
        await client.close()


@pytest.fixture
def catalog(db: DbClient) -> SongCatalog:
    return SongCatalog(db)


@pytest.fixture
def index(db: DbClient) -> FingerprintIndex:
    return FingerprintIndex(db, policy=AddressPolicy.ACCUMULATE)


@pytest.fixture
def replace_index(db: DbClient) -> FingerprintIndex:
    return FingerprintIndex(db, policy=AddressPolicy.REPLACE)


@pytest.fixture
def maintenance(db: DbClient) -> CollectionMaintenance:
    return CollectionMaintenance(db)


@pytest.fixture
def admin_headers(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    monkeypatch.setattr(settings, "admin_api_key", TEST_ADMIN_KEY)
    return {"X-Admin-Key": TEST_ADMIN_KEY}


@pytest.fixture
def app(db: DbClient) -> FastAPI:
    """Application wired to the test database (lifespan is not run)."""
    application = create_app()
    application.state.db = db
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
