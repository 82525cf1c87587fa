"""Schema-driven request gate.

``ValidationGate(schema, target)`` is a route dependency that parses one part
of the request (body, path parameters or query string) and hands the coerced
model to the handler. Schema violations are answered directly with a 400 and
never reach the handler; anything else raised while reading the request is
passed on to the terminal error handler.
"""

import json
import logging
from typing import Any, Generic, Literal

from fastapi import Request

from app.application.validation import Invalid, ModelT, validate
from app.domain.exceptions import MalformedRequestError, RequestRejected

logger = logging.getLogger(__name__)

ValidationTarget = Literal["body", "params", "query"]


class ValidationGate(Generic[ModelT]):
    def __init__(self, schema: type[ModelT], target: ValidationTarget = "body"):
        self._schema = schema
        self._target = target

    async def _extract(self, request: Request) -> Any:
        if self._target == "params":
            return dict(request.path_params)
        if self._target == "query":
            return dict(request.query_params)

        raw = await request.body()
        if not raw.strip():
            return {}
        try:
            return json.loads(raw)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise MalformedRequestError(f"Malformed JSON body: {exc}") from exc

    async def __call__(self, request: Request) -> ModelT:
        try:
            data = await self._extract(request)
            outcome = validate(self._schema, data)
        except MalformedRequestError:
            raise
        except Exception:
            logger.error(
                "Unexpected error validating %s on %s", self._target, request.url.path,
                exc_info=True,
            )
            raise

        if isinstance(outcome, Invalid):
            errors = [violation.to_dict() for violation in outcome.violations]
            logger.warning(
                "Validation failed for %s on %s %s (client=%s): %s",
                self._target, request.method, request.url.path,
                request.client.host if request.client else None, errors,
            )
            raise RequestRejected(self._target, errors)

        return outcome.value
