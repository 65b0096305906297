"""Domain error hierarchy.

Services raise these; the API layer maps them to HTTP responses in one place
(apps/api/error_handlers.py). Messages are safe to show to the caller.
"""

from typing import Any


class SparkError(Exception):
    """Base exception for all domain errors."""

    def __init__(self, message: str, code: str, http_status: int = 500, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.http_status = http_status
        self.field = field

    def to_response(self) -> dict[str, Any]:
        """Convert to the REST error envelope."""
        body: dict[str, Any] = {"message": self.message, "code": self.code}
        if self.field:
            body["field"] = self.field
        return body


class ValidationError(SparkError):
    """Malformed or self-referential input."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, "VALIDATION_ERROR", 400, field)


class NotFoundError(SparkError):
    """Reference to a profile or match that does not exist."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "NOT_FOUND", 404)


class AuthorizationError(SparkError):
    """Caller is not allowed to touch the resource (e.g. not a match participant)."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "FORBIDDEN", 403)


class RateLimitedError(SparkError):
    def __init__(self, message: str, retry_after: int) -> None:
        super().__init__(message, "RATE_LIMITED", 429)
        self.retry_after = retry_after


class ServiceUnavailableError(SparkError):
    """An optional feature is switched off or not configured."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "SERVICE_UNAVAILABLE", 503)


class UpstreamError(SparkError):
    """A third-party provider failed; its detail stays in the logs."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "UPSTREAM_ERROR", 502)
