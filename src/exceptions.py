"""Application error taxonomy.

Services raise these; the handlers in ``src.api.errors`` turn them into
``{"error": ..., "details": ...}`` JSON responses with the matching status.
"""

from fastapi import status


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal Server Error"

    def __init__(self, message: str | None = None, details: dict | None = None):
        self.message = message or self.message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body: dict = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(AppError):
    """Malformed or missing request fields."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Validation failed"


class AuthenticationError(AppError):
    """Bad credentials. The message never says which check failed."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid credentials"


class ConflictError(AppError):
    """The resource already exists."""

    status_code = status.HTTP_409_CONFLICT
    message = "Conflict"


class InternalError(AppError):
    """Unexpected storage or runtime failure."""
