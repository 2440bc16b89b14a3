from __future__ import annotations


class LifelineError(Exception):
    """Base class for errors surfaced to the caller as a user-visible message."""

    kind = "error"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(LifelineError):
    """Bad input: non-positive units, missing selection, unsupported status."""

    kind = "validation_error"
    status_code = 422


class ConflictError(LifelineError):
    """A precondition does not hold (already scheduled, already assigned, wrong status)."""

    kind = "conflict"
    status_code = 409


class AuthenticationError(LifelineError):
    kind = "unauthorized"
    status_code = 401


class NotFoundError(LifelineError):
    kind = "not_found"
    status_code = 404


class PermissionDeniedError(LifelineError):
    kind = "permission_denied"
    status_code = 403


class DependencyError(LifelineError):
    """The store or the notification endpoint failed."""

    kind = "dependency_error"
    status_code = 502
