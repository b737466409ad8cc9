"""Access gate for protected endpoints.

The gate is a strict linear sequence of checks; the first failing step is
terminal and reported as an explicit :class:`GateOutcome`. It knows nothing
about Flask: the HTTP decorator in ``taskmanager.api.deps`` maps outcomes to
responses.
"""

from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass
from enum import Enum

from taskmanager.services._shared.dto import Actor
from taskmanager.services._shared.ports import (
    SessionStore,
    TokenError,
    TokenKind,
    TokenService,
)

log = logging.getLogger(__name__)

BEARER_SCHEME = "Bearer"


class GateOutcome(Enum):
    """Result of running the access gate; every non-OK value means 401."""

    OK = "ok"
    MISSING_TOKEN = "missing_token"
    MALFORMED_HEADER = "malformed_header"
    INVALID_TOKEN = "invalid_token"
    SESSION_EXPIRED = "session_expired"
    STALE_TOKEN = "stale_token"

    @property
    def message(self) -> str:
        return GATE_MESSAGES[self]


GATE_MESSAGES: dict[GateOutcome, str] = {
    GateOutcome.OK: "OK",
    GateOutcome.MISSING_TOKEN: "Access denied. No token provided.",
    GateOutcome.MALFORMED_HEADER: "Invalid token format. Use Bearer token.",
    GateOutcome.INVALID_TOKEN: "Invalid token.",
    GateOutcome.SESSION_EXPIRED: "Session expired. Please log in again.",
    GateOutcome.STALE_TOKEN: "Token is no longer valid. Please log in again.",
}


@dataclass(frozen=True, slots=True)
class GateResult:
    outcome: GateOutcome
    actor: Actor | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is GateOutcome.OK


def parse_bearer(header: str) -> str | None:
    """Return the token of a ``Bearer <token>`` header, or ``None``."""
    scheme, _, token = header.partition(" ")
    token = token.strip()
    if scheme != BEARER_SCHEME or not token or " " in token:
        return None
    return token


class AccessGuard:
    """
    Validate an ``Authorization`` header against signature, expiry and the
    live session record.

    :param token_service: Verifies access tokens.
    :param session_store: Holds the access token currently honored per user.
    """

    def __init__(self, *, token_service: TokenService, session_store: SessionStore) -> None:
        self.tokens = token_service
        self.sessions = session_store

    def check(self, authorization: str | None) -> GateResult:
        if not authorization:
            return self._reject(GateOutcome.MISSING_TOKEN)

        token = parse_bearer(authorization)
        if token is None:
            return self._reject(GateOutcome.MALFORMED_HEADER)

        try:
            claims = self.tokens.verify(token, TokenKind.ACCESS)
        except TokenError:
            return self._reject(GateOutcome.INVALID_TOKEN)

        session = self.sessions.get(claims.user_id)
        if session is None:
            return self._reject(GateOutcome.SESSION_EXPIRED, claims.user_id)

        if not hmac.compare_digest(session.access_token.encode(), token.encode()):
            return self._reject(GateOutcome.STALE_TOKEN, claims.user_id)

        return GateResult(GateOutcome.OK, Actor(user_id=claims.user_id, email=claims.email))

    @staticmethod
    def _reject(outcome: GateOutcome, user_id: int | None = None) -> GateResult:
        log.warning("auth.gate rejected", extra={"outcome": outcome.value, "user_id": user_id})
        return GateResult(outcome)
