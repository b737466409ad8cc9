from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class TokenKind(str, Enum):
    """Token families; each is signed with its own secret."""

    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """
    Verified token payload.

    :ivar user_id: Numeric user id (``userId`` claim).
    :ivar email: Email at issuance time.
    :ivar kind: Token family (``type`` claim).
    :ivar jti: Unique token identifier.
    :ivar issued_at: ``iat`` as UNIX seconds.
    :ivar expires_at: ``exp`` as UNIX seconds.
    """

    user_id: int
    email: str
    kind: TokenKind
    jti: str
    issued_at: int
    expires_at: int


class TokenError(Exception):
    """Base class for token verification failures."""


class TokenExpiredError(TokenError):
    """Signature is valid but ``exp`` is in the past."""


class TokenInvalidError(TokenError):
    """Bad signature, malformed payload or wrong token kind."""


class TokenService(Protocol):
    """Port for issuing and verifying signed, time-bounded tokens."""

    def issue_access_token(self, *, user_id: int, email: str) -> str: ...

    def issue_refresh_token(self, *, user_id: int, email: str) -> str: ...

    def verify(self, token: str, kind: TokenKind) -> TokenClaims: ...
