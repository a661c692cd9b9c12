"""Service error taxonomy shared by services and the HTTP layer."""

from __future__ import annotations


class ServiceError(Exception):
    """Base class for failures surfaced to API callers."""

    status_code = 500

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class UnauthorizedError(ServiceError):
    """No session, or the session token failed verification."""

    status_code = 401


class ForbiddenError(ServiceError):
    """Authenticated, but the caller lacks the required role."""

    status_code = 403


class NotFoundError(ServiceError):
    """A referenced record does not exist."""

    status_code = 404


class ValidationError(ServiceError):
    """Malformed input such as empty text or an unknown vote choice."""

    status_code = 400


class ConflictError(ServiceError):
    """A state precondition failed: wrong status, locked meeting, stale version."""

    status_code = 409


class StoreError(ServiceError):
    """Backing store failure; the message stays opaque to callers."""

    status_code = 500


class InvalidStateError(StoreError):
    """Stored rows violate an invariant and cannot be used safely."""
