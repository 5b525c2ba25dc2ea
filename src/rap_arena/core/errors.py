"""Domain exceptions raised by services and mapped to HTTP responses."""

from __future__ import annotations

from fastapi import status


class RapArenaError(RuntimeError):
    """Base class for errors that carry an HTTP status code.

    Services raise subclasses of this error; the API layer translates them
    into JSON responses without inspecting the message.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Internal server error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class UnauthorizedError(RapArenaError):
    """Raised when the caller has no valid identity."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Unauthorized"


class ForbiddenError(RapArenaError):
    """Raised when the caller does not own the resource being changed."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Forbidden"


class NotFoundError(RapArenaError):
    """Raised when an entity or relation does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ConflictError(RapArenaError):
    """Raised when a uniqueness constraint rejects a create."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "Already exists"


class ValidationError(RapArenaError):
    """Raised for malformed or out-of-range input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"


class StorageError(RapArenaError):
    """Raised when the object store rejects an operation."""

    default_detail = "Storage operation failed"
