class DomainError(Exception):
    """Base exception for business rule violations.

    ``status_code`` is the HTTP status the API layer answers with.
    """

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when the session is missing or does not resolve to an employee."""

    status_code = 401


class ForbiddenError(DomainError):
    """Raised when a caller acts outside its tenant or role."""

    status_code = 403


AuthorizationError = ForbiddenError


class NotFoundError(DomainError):
    status_code = 404


class ConflictError(DomainError):
    """Raised when a uniqueness constraint rejects a write."""

    status_code = 409


class InvalidTransitionError(DomainError):
    """Raised when a manual mark targets a day that is not absent."""


class FutureDateError(DomainError):
    """Raised when a manual mark targets a date after today."""


class StorageError(DomainError):
    """Raised when the database fails; never retried internally."""

    status_code = 500
