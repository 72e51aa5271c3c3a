"""Fingerprint index endpoints: batch write and batch address lookup."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from songstore.auth.admin import require_admin_key
from songstore.db.session import get_index
from songstore.schemas.errors import ErrorResponse
from songstore.schemas.fingerprint import (
    CoupleLookupRequest,
    CoupleLookupResponse,
    FingerprintBatchRequest,
    FingerprintBatchResponse,
)
from songstore.store.index import FingerprintIndex

logger = logging.getLogger(__name__)

router = APIRouter(tags=["fingerprints"])


@router.post(
    "/fingerprints",
    response_model=FingerprintBatchResponse,
    dependencies=[Depends(require_admin_key)],
    responses={
        403: {"description": "Admin key missing or invalid", "model": ErrorResponse},
        503: {"description": "Batch rolled back", "model": ErrorResponse},
    },
)
async def store_fingerprints(
    body: FingerprintBatchRequest,
    index: FingerprintIndex = Depends(get_index),  # noqa: B008
) -> FingerprintBatchResponse:
    """Store a batch of fingerprint entries in one transaction."""
    stored = await index.store_fingerprints(
        [(entry.address, entry.to_couple()) for entry in body.entries]
    )
    return FingerprintBatchResponse(stored=stored)


@router.post("/fingerprints/lookup", response_model=CoupleLookupResponse)
async def lookup_couples(
    body: CoupleLookupRequest,
    index: FingerprintIndex = Depends(get_index),  # noqa: B008
) -> CoupleLookupResponse:
    """Return the couples stored under each requested address."""
    couples = await index.get_couples(body.addresses)
    return CoupleLookupResponse(couples=couples)
