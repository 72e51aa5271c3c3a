"""Argument checks shared by the catalog and the fingerprint index."""

from __future__ import annotations

from songstore.schemas.fingerprint import UINT32_MAX
from songstore.store.errors import InvalidInputError


def check_uint32(value: object, name: str) -> int:
    """Return ``value`` if it is an int in ``[0, UINT32_MAX]``.

    Raises:
        InvalidInputError: For bools, non-integers and out-of-range values.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"{name} must be an integer, got {value!r}")
    if not 0 <= value <= UINT32_MAX:
        raise InvalidInputError(f"{name} {value} is outside the uint32 range")
    return value
