from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base exception for business rule violations.

    ``status_code`` is what the HTTP boundary answers with; ``extra`` is merged
    into the JSON error body.
    """

    status_code = 400

    def __init__(self, message: str, *, extra: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.extra = dict(extra or {})


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when the bearer token or login credentials are invalid."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    status_code = 404


class DuplicateImportError(DomainError):
    """Raised when the same time-clock content was already imported."""

    status_code = 409


class ImportPersistenceError(DomainError):
    """Raised when a punch could not be saved in the middle of an import."""

    status_code = 500
