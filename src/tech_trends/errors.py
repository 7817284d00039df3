"""Client-facing error types.

Handlers and validation helpers raise these; the dispatcher turns them into
uniform JSON error responses.
"""
from typing import Any


class ApiError(Exception):
    """An error that maps directly onto an HTTP error response."""

    status_code: int = 400
    default_message: str = "Bad Request"

    def __init__(self, message: str | None = None, details: dict[str, Any] | None = None) -> None:
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)


class BadRequestError(ApiError):
    status_code = 400
    default_message = "Bad Request"


class NotFoundError(ApiError):
    status_code = 404
    default_message = "Not Found"
