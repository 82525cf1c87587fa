"""Domain-specific exceptions: framework-independent.

Every request-time error carries the HTTP status it should surface as, so the
terminal error handler never has to guess.
"""

from typing import Any


class ArticleApiError(Exception):
    """Base class for all errors raised by the article API."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ConfigurationError(ArticleApiError):
    """Raised at startup when required configuration is missing.

    Never raised per request: the process must refuse to start instead.
    """


class PersistenceError(ArticleApiError):
    """Raised on store-level failures and consistency violations."""

    status_code = 500


class PoolClosedError(PersistenceError):
    """Raised when a connection is requested after the pool was shut down."""

    status_code = 503

    def __init__(self) -> None:
        super().__init__("Connection pool is shut down")


class AuthError(ArticleApiError):
    """Raised when the x-api-key credential is missing or invalid."""

    status_code = 401

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__("Unauthorized: missing or invalid API key.")


class RequestRejected(ArticleApiError):
    """Raised when a request fragment does not satisfy its schema."""

    status_code = 400

    def __init__(self, target: str, errors: list[dict[str, Any]]):
        self.target = target
        self.errors = errors
        super().__init__("Validation failed")


class MalformedRequestError(ArticleApiError):
    """Raised when the request body cannot be decoded as JSON."""

    status_code = 400
