"""API-key gate for protected routes.

Used as a route dependency: ``dependencies=[Depends(auth_gate)]``. The gate
runs before any validation gate on the same route, so an unauthenticated
request never learns anything about the expected payload.
"""

import hmac
import logging

from fastapi import Request

from app.domain.exceptions import AuthError, ConfigurationError

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-api-key"


class AuthGate:
    """Compares the ``x-api-key`` header against the process-wide secret."""

    def __init__(self, secret: str | None):
        if not secret:
            raise ConfigurationError("API_KEY_SECRET is not configured")
        self._secret = secret.encode("utf-8")

    async def __call__(self, request: Request) -> None:
        provided = request.headers.get(API_KEY_HEADER)
        client = request.client.host if request.client else None

        if not provided:
            logger.warning(
                "Unauthorized access attempt: missing API key (%s %s, client=%s)",
                request.method, request.url.path, client,
            )
            raise AuthError("missing")

        if not hmac.compare_digest(provided.encode("utf-8"), self._secret):
            logger.warning(
                "Unauthorized access attempt: invalid API key (%s %s, client=%s)",
                request.method, request.url.path, client,
            )
            raise AuthError("invalid")
