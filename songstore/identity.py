"""Default song identity functions.

The catalog takes its id generator and key function as constructor
arguments; these are the implementations used when none are supplied.
"""

import secrets

from songstore.schemas.fingerprint import UINT32_MAX

SONG_KEY_SEPARATOR = "---"


def generate_unique_id() -> int:
    """Return a random non-zero unsigned 32-bit song id."""
    return secrets.randbelow(UINT32_MAX) + 1


def generate_song_key(title: str, artist: str) -> str:
    """Derive the deduplication key for a song from its title and artist.

    The key is deterministic: the same pair always maps to the same key,
    so registering a song twice resolves to one catalog row.
    """
    return f"{title}{SONG_KEY_SEPARATOR}{artist}"
