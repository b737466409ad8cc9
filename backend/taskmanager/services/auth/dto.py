# taskmanager/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for registration.

    :param name: Display name (trimmed by the service).
    :type name: str
    :param email: Email (normalized by the service).
    :type email: str
    :param password: Raw password, hashed before persistence.
    :type password: str
    """

    name: str
    email: str
    password: str


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email; trimmed and lower-cased before lookup.
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    refresh_token: str | None


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """Public projection of a user; never carries the password hash."""

    id: int
    name: str
    email: str
    created_at: datetime


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class AccessTokenOut:
    access_token: str
