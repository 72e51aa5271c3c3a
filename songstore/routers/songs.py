"""Song catalog endpoints: registration, lookups, deletion."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Path
from fastapi.responses import JSONResponse, Response

from songstore.auth.admin import require_admin_key
from songstore.db.session import get_catalog
from songstore.schemas.errors import ErrorDetail, ErrorResponse
from songstore.schemas.fingerprint import UINT32_MAX
from songstore.schemas.song import (
    RegisterSongRequest,
    SongCountResponse,
    SongFilter,
    SongInfo,
)
from songstore.store.catalog import SongCatalog

logger = logging.getLogger(__name__)

router = APIRouter(tags=["songs"])

_NOT_FOUND_RESPONSES = {
    404: {"description": "Song not found", "model": ErrorResponse},
    422: {"description": "Validation error"},
}


def _not_found(filter_key: SongFilter, value: object) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content=ErrorResponse(
            error=ErrorDetail(
                code="NOT_FOUND",
                message=f"No song found with {filter_key.value} {value}",
            )
        ).model_dump(),
    )


async def _lookup(
    catalog: SongCatalog, filter_key: SongFilter, value: object
) -> SongInfo | JSONResponse:
    song, exists = await catalog.get_song(filter_key, value)
    if not exists:
        return _not_found(filter_key, value)
    return song


@router.get("/songs/count", response_model=SongCountResponse)
async def count_songs(
    catalog: SongCatalog = Depends(get_catalog),  # noqa: B008
) -> SongCountResponse:
    return SongCountResponse(total=await catalog.total_songs())


@router.get("/songs/by-yt-id/{yt_id}", response_model=SongInfo, responses=_NOT_FOUND_RESPONSES)
async def get_song_by_yt_id(
    yt_id: str,
    catalog: SongCatalog = Depends(get_catalog),  # noqa: B008
) -> SongInfo | JSONResponse:
    return await _lookup(catalog, SongFilter.YT_ID, yt_id)


@router.get("/songs/by-key/{key:path}", response_model=SongInfo, responses=_NOT_FOUND_RESPONSES)
async def get_song_by_key(
    key: str,
    catalog: SongCatalog = Depends(get_catalog),  # noqa: B008
) -> SongInfo | JSONResponse:
    return await _lookup(catalog, SongFilter.KEY, key)


@router.get("/songs/{song_id}", response_model=SongInfo, responses=_NOT_FOUND_RESPONSES)
async def get_song(
    song_id: int = Path(ge=0, le=UINT32_MAX),
    catalog: SongCatalog = Depends(get_catalog),  # noqa: B008
) -> SongInfo | JSONResponse:
    return await _lookup(catalog, SongFilter.ID, song_id)


@router.post(
    "/songs",
    response_model=SongInfo,
    dependencies=[Depends(require_admin_key)],
    responses={403: {"description": "Admin key missing or invalid", "model": ErrorResponse}},
)
async def register_song(
    body: RegisterSongRequest,
    catalog: SongCatalog = Depends(get_catalog),  # noqa: B008
) -> SongInfo:
    """Register a song; re-registering the same title and artist is a no-op.

    Returns the stored song, which for a repeat registration is the one
    created by the first call.
    """
    song_id = await catalog.register_song(body.title, body.artist, body.yt_id)
    song, _ = await catalog.get_song_by_id(song_id)
    return song


@router.delete(
    "/songs/{song_id}",
    status_code=204,
    dependencies=[Depends(require_admin_key)],
    responses={403: {"description": "Admin key missing or invalid", "model": ErrorResponse}},
)
async def delete_song(
    song_id: int = Path(ge=0, le=UINT32_MAX),
    catalog: SongCatalog = Depends(get_catalog),  # noqa: B008
) -> Response:
    await catalog.delete_song_by_id(song_id)
    return Response(status_code=204)
