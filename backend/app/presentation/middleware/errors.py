"""Error handling for the HTTP surface.

Two kinds of failure exist here:

* Gate rejections (``AuthError``, ``RequestRejected``) are answered by their
  own handlers with a fixed shape and never reach the normalizer.
* Everything else ends up in ``ErrorNormalizerMiddleware``, the single place
  where an internal failure becomes a client-safe JSON body.
"""

import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from app.domain.exceptions import AuthError, RequestRejected

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE = "Internal Server Error"


def resolve_status(exc: BaseException) -> int:
    """Use the error's own status code when it is a valid HTTP error code."""
    status = getattr(exc, "status_code", None)
    if isinstance(status, int) and not isinstance(status, bool) and 400 <= status < 600:
        return status
    return 500


def resolve_message(exc: BaseException) -> str:
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(exc) or DEFAULT_MESSAGE


class ErrorNormalizerMiddleware(BaseHTTPMiddleware):
    """Terminal handler: any unhandled exception becomes ``{"message", "stack"?}``.

    Parameters
    ----------
    expose_stack:
        Include the formatted traceback in the body. Off in production.
    """

    def __init__(self, app: object, expose_stack: bool = False) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self._expose_stack = expose_stack

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return self.normalize(request, exc)

    def normalize(self, request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled API error on %s %s (client=%s): %s",
            request.method,
            request.url.path,
            request.client.host if request.client else None,
            exc,
            exc_info=exc,
        )

        body: dict = {"message": resolve_message(exc)}
        if self._expose_stack:
            body["stack"] = "".join(traceback.format_exception(exc))
        return JSONResponse(status_code=resolve_status(exc), content=body)


def register_error_handlers(app: FastAPI) -> None:
    """Register the local handlers for gate rejections and routing errors."""

    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestRejected)
    async def rejected_handler(request: Request, exc: RequestRejected) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.message, "errors": exc.errors},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )
