"""
taskmanager.services._shared.ports
==================================

Hexagonal interfaces the service layer depends on.

- :mod:`token_provider`: :class:`~.TokenService` for issuing and verifying
  access/refresh tokens, plus the token error types.
- :mod:`session_store`: :class:`~.SessionStore` holding the currently honored
  token pair per user, with :class:`~.InMemorySessionStore` for tests and
  single-process runs.

Concrete adapters (PyJWT, Redis) live under ``taskmanager.infra``.
"""

from __future__ import annotations

from .session_store import InMemorySessionStore, SessionPair, SessionStore
from .token_provider import (
    TokenClaims,
    TokenError,
    TokenExpiredError,
    TokenInvalidError,
    TokenKind,
    TokenService,
)

__all__ = [
    "SessionPair",
    "SessionStore",
    "InMemorySessionStore",
    "TokenClaims",
    "TokenError",
    "TokenExpiredError",
    "TokenInvalidError",
    "TokenKind",
    "TokenService",
]
