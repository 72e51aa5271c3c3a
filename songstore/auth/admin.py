"""Admin key check for endpoints that write to or wipe the store.

Song registration, fingerprint batches, deletes and collection wipes
require ``X-Admin-Key`` to match ``settings.admin_api_key``. While no key
is configured these endpoints refuse every request; lookups stay open.
"""

from __future__ import annotations

import hmac
import logging

from fastapi import Header, Request

from songstore.settings import settings

logger = logging.getLogger(__name__)

WRITES_DISABLED = "AUTH_NOT_CONFIGURED"
FORBIDDEN = "FORBIDDEN"


class AdminAuthError(Exception):
    """A store mutation was refused; rendered as a 403 error envelope."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(message)


async def require_admin_key(
    request: Request,
    x_admin_key: str | None = Header(default=None, alias="X-Admin-Key"),
) -> None:
    target = f"{request.method} {request.url.path}"
    if not settings.admin_api_key:
        logger.warning("Refused %s: ADMIN_API_KEY is not set", target)
        raise AdminAuthError(
            WRITES_DISABLED,
            "Store writes are disabled until ADMIN_API_KEY is set.",
        )

    if not hmac.compare_digest(x_admin_key or "", settings.admin_api_key):
        logger.warning("Refused %s: %s admin key", target, "wrong" if x_admin_key else "missing")
        raise AdminAuthError(FORBIDDEN, "Store writes need a valid X-Admin-Key header.")
