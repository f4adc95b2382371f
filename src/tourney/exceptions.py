"""Domain exceptions shared by services and mapped to HTTP responses by the error handlers."""

from __future__ import annotations


class TourneyError(Exception):
    """Base class for all domain errors."""

    status_code = 500

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class NotFoundError(TourneyError):
    status_code = 404


class PermissionDeniedError(TourneyError):
    status_code = 403


class ValidationError(TourneyError):
    status_code = 400


class ConflictError(TourneyError):
    """A versioned write lost against a concurrent writer."""

    status_code = 409


class StoreError(TourneyError):
    """The key-value store failed to read or write."""

    status_code = 503


class IdentityError(TourneyError):
    """The identity provider rejected a request."""

    status_code = 400


class IdentityUnavailableError(IdentityError):
    status_code = 503


class AuthenticationError(TourneyError):
    status_code = 401
