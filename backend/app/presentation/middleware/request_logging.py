"""Inbound request logging, active only in development mode."""

import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: object, enabled: bool = False) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self._enabled = enabled

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not self._enabled:
            return await call_next(request)

        response = await call_next(request)
        # path_params are filled into the shared scope by the router
        logger.info(
            "Incoming request: %s %s (params=%s, query=%s) -> %d",
            request.method,
            request.url,
            dict(request.path_params),
            dict(request.query_params),
            response.status_code,
        )
        return response
