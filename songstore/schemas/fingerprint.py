from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

UINT32_MAX = 2**32 - 1


class AddressPolicy(StrEnum):
    """How a write treats couples already stored at the same address."""

    ACCUMULATE = "accumulate"
    REPLACE = "replace"


class Couple(BaseModel):
    """An (anchor time, song) occurrence of a fingerprint address."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    anchor_time_ms: int = Field(alias="anchorTimeMs", ge=0, le=UINT32_MAX)
    song_id: int = Field(alias="songID", ge=0, le=UINT32_MAX)


class FingerprintEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    address: int = Field(ge=0, le=UINT32_MAX)
    anchor_time_ms: int = Field(alias="anchorTimeMs", ge=0, le=UINT32_MAX)
    song_id: int = Field(alias="songID", ge=0, le=UINT32_MAX)

    def to_couple(self) -> Couple:
        return Couple(anchor_time_ms=self.anchor_time_ms, song_id=self.song_id)


class FingerprintBatchRequest(BaseModel):
    entries: list[FingerprintEntry]


class FingerprintBatchResponse(BaseModel):
    stored: int


class CoupleLookupRequest(BaseModel):
    addresses: list[int] = Field(max_length=100_000)


class CoupleLookupResponse(BaseModel):
    couples: dict[int, list[Couple]]
