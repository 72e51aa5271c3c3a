from enum import StrEnum

from pydantic import BaseModel


class Collection(StrEnum):
    """Tables that may be wiped wholesale."""

    SONGS = "songs"
    FINGERPRINTS = "fingerprints"


class CollectionDeleteResponse(BaseModel):
    collection: Collection
    deleted: int
