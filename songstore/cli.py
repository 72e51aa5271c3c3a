"""Maintenance CLI for the song store.

Usage:
    python -m songstore init
    python -m songstore stats
    python -m songstore clear <songs|fingerprints>
    python -m songstore serve
"""

import asyncio
import logging
import sys

from songstore.db.client import DbClient
from songstore.schemas.collection import Collection
from songstore.settings import settings
from songstore.store.catalog import SongCatalog
from songstore.store.errors import StoreError
from songstore.store.index import FingerprintIndex
from songstore.store.maintenance import CollectionMaintenance

USAGE = "Usage: python -m songstore <init|stats|clear <collection>|serve>"


def main() -> None:
    """Main entry point for the maintenance CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if len(sys.argv) < 2:
        print(USAGE, file=sys.stderr)  # noqa: T201
        sys.exit(1)

    command, args = sys.argv[1], sys.argv[2:]

    if command == "serve":
        import uvicorn

        uvicorn.run("songstore.main:app", host=settings.service_host, port=settings.service_port)
        return

    if command == "clear":
        if len(args) != 1 or args[0] not in {c.value for c in Collection}:
            choices = ", ".join(c.value for c in Collection)
            print(f"Error: clear takes one of: {choices}", file=sys.stderr)  # noqa: T201
            sys.exit(1)
    elif command not in {"init", "stats"}:
        print(USAGE, file=sys.stderr)  # noqa: T201
        sys.exit(1)

    try:
        asyncio.run(_run(command, args))
    except StoreError as exc:
        print(f"Error: {exc}", file=sys.stderr)  # noqa: T201
        sys.exit(1)


async def _run(command: str, args: list[str]) -> None:
    log = logging.getLogger(__name__)

    db = DbClient.open(settings.database_url)
    try:
        await db.create_schema()

        if command == "stats":
            songs = await SongCatalog(db).total_songs()
            fingerprints = await FingerprintIndex(db).total_fingerprints()
            print(f"Songs:         {songs}")  # noqa: T201
            print(f"Fingerprints:  {fingerprints}")  # noqa: T201
        elif command == "clear":
            deleted = await CollectionMaintenance(db).delete_collection(args[0])
            print(f"Deleted {deleted} rows from {args[0]}")  # noqa: T201
        else:
            log.info("Schema initialised (dialect: %s)", db.engine.dialect.name)
    finally:
        await db.close()


if __name__ == "__main__":
    main()
