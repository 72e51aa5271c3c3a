from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class SongFilter(StrEnum):
    """Columns a single song may be looked up by."""

    ID = "id"
    YT_ID = "ytID"
    KEY = "key"


class SongInfo(BaseModel):
    """A catalog song. The all-default instance stands for "no such song"."""

    model_config = ConfigDict(populate_by_name=True)

    id: int = 0
    title: str = ""
    artist: str = ""
    yt_id: str = Field(default="", alias="ytID")
    key: str = ""


class RegisterSongRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1, max_length=500)
    artist: str = Field(min_length=1, max_length=500)
    yt_id: str = Field(default="", alias="ytID", max_length=64)


class SongCountResponse(BaseModel):
    total: int
