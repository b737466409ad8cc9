"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic**: they never import Flask or
SQLAlchemy sessions. Each carries a stable ``status_code``, ``code`` and
client-safe ``message``; the translation to the HTTP envelope happens in
``taskmanager/core/errors.py``.
"""

from __future__ import annotations

from typing import ClassVar

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        The name of the database constraint to match (e.g., 'uq_users_email').

    Returns
    -------
    bool
        True if the IntegrityError mentions the constraint. SQLite reports
        the column instead of the constraint name, so ``users.email`` style
        messages are matched as a fallback.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    if constraint_name.lower() in message:
        return True
    # uq_<table>_<column> -> "<table>.<column>" as reported by SQLite
    parts = constraint_name.lower().split("_", 2)
    if len(parts) == 3 and parts[0] == "uq":
        return f"{parts[1]}.{parts[2]}" in message
    return False


# --------------------------------------------------------------------------- #
# Base type
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Subclasses override the class attributes; instances may override the
    message for operation-specific wording.
    """

    status_code: ClassVar[int] = 500
    code: ClassVar[str] = "internal_server_error"
    default_message: ClassVar[str] = "Internal Server Error!"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


# --------------------------------------------------------------------------- #
# Authentication
# --------------------------------------------------------------------------- #


class DuplicateEmailError(ServiceError):
    """Registration with an email that already exists."""

    status_code = 400
    code = "duplicate_email"
    default_message = "Oops! This email is taken. Try a different email address."


class InvalidCredentialsError(ServiceError):
    """Unknown email or wrong password; both share one message."""

    status_code = 401
    code = "invalid_credentials"
    default_message = "Invalid email or password"


class MissingInputError(ServiceError):
    status_code = 400
    code = "missing_input"
    default_message = "Refresh token is required"


class InvalidRefreshTokenError(ServiceError):
    status_code = 401
    code = "invalid_refresh_token"
    default_message = "Invalid or expired refresh token"


class SessionNotFoundError(ServiceError):
    status_code = 401
    code = "session_not_found"
    default_message = "Session not found. Please log in again."


class TokenMismatchError(ServiceError):
    """The presented refresh token is not the one held by the session."""

    status_code = 401
    code = "token_mismatch"
    default_message = "Refresh token does not match the active session"


class UnauthorizedError(ServiceError):
    status_code = 401
    code = "unauthorized"
    default_message = "Unauthorized"


class ForbiddenError(ServiceError):
    status_code = 403
    code = "forbidden"
    default_message = "Forbidden"


# --------------------------------------------------------------------------- #
# Resources
# --------------------------------------------------------------------------- #


class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "Task").
    :type entity: str
    :param key: Identifier or search key, kept for logging only.
    :type key: str | int | None
    """

    status_code = 404
    code = "not_found"
    default_message = "Resource not found"

    def __init__(self, entity: str, key: str | int | None = None) -> None:
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found")


class InvalidFilterError(ServiceError):
    """Unknown value for a list filter such as ``priority`` or ``status``."""

    status_code = 400
    code = "invalid_filter"
    default_message = "Invalid filter"

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Invalid {field}")


__all__ = [
    "ServiceError",
    "DuplicateEmailError",
    "InvalidCredentialsError",
    "MissingInputError",
    "InvalidRefreshTokenError",
    "SessionNotFoundError",
    "TokenMismatchError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "InvalidFilterError",
    "violates",
]
