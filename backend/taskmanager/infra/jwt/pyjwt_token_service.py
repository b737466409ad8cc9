# taskmanager/infra/jwt/pyjwt_token_service.py
from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

import jwt

from taskmanager.core.config import ACCESS_TOKEN_SECONDS, REFRESH_TOKEN_SECONDS
from taskmanager.services._shared.ports import (
    TokenClaims,
    TokenExpiredError,
    TokenInvalidError,
    TokenKind,
    TokenService,
)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class JWTTokenService(TokenService):
    """
    PyJWT adapter signing access and refresh tokens with distinct secrets.

    :param access_secret: HMAC key for access tokens.
    :param refresh_secret: HMAC key for refresh tokens.
    :param algorithm: JWS algorithm, ``HS256`` by default.
    :param access_ttl: Access token lifetime in seconds.
    :param refresh_ttl: Refresh token lifetime in seconds.
    :param clock: Returns the current aware UTC datetime; used both for
        ``iat``/``exp`` at issuance and for the expiry check on verify.
    """

    access_secret: str
    refresh_secret: str
    algorithm: str = "HS256"
    access_ttl: int = ACCESS_TOKEN_SECONDS
    refresh_ttl: int = REFRESH_TOKEN_SECONDS
    clock: Callable[[], datetime] = field(default=_utcnow)

    def __post_init__(self) -> None:
        if self.access_secret == self.refresh_secret:
            raise ValueError("Access and refresh secrets must differ.")

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> JWTTokenService:
        """Build the service from Flask configuration keys."""
        return cls(
            access_secret=config["JWT_SECRET_KEY"],
            refresh_secret=config["JWT_REFRESH_SECRET_KEY"],
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
            access_ttl=int(config.get("ACCESS_TOKEN_EXPIRES", ACCESS_TOKEN_SECONDS)),
            refresh_ttl=int(config.get("REFRESH_TOKEN_EXPIRES", REFRESH_TOKEN_SECONDS)),
        )

    # -------------------- helpers --------------------

    def _secret(self, kind: TokenKind) -> str:
        return self.access_secret if kind is TokenKind.ACCESS else self.refresh_secret

    def _ttl(self, kind: TokenKind) -> int:
        return self.access_ttl if kind is TokenKind.ACCESS else self.refresh_ttl

    def _issue(self, *, user_id: int, email: str, kind: TokenKind) -> str:
        iat = int(self.clock().timestamp())
        payload = {
            "userId": int(user_id),
            "email": email,
            "type": kind.value,
            "jti": uuid4().hex,
            "iat": iat,
            "exp": iat + self._ttl(kind),
        }
        return jwt.encode(payload, self._secret(kind), algorithm=self.algorithm)

    # -------------------- API ------------------------

    def issue_access_token(self, *, user_id: int, email: str) -> str:
        return self._issue(user_id=user_id, email=email, kind=TokenKind.ACCESS)

    def issue_refresh_token(self, *, user_id: int, email: str) -> str:
        return self._issue(user_id=user_id, email=email, kind=TokenKind.REFRESH)

    def verify(self, token: str, kind: TokenKind) -> TokenClaims:
        """
        Verify signature, expiry and token kind.

        :raises TokenExpiredError: ``exp`` is not after the current clock.
        :raises TokenInvalidError: bad signature, malformed or wrong-kind token.
        """
        try:
            # Time claims are checked below against ``clock``
            payload = jwt.decode(
                token,
                self._secret(kind),
                algorithms=[self.algorithm],
                options={
                    "require": ["exp", "iat", "jti"],
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.InvalidTokenError as exc:
            raise TokenInvalidError(str(exc)) from exc

        if payload.get("type") != kind.value:
            raise TokenInvalidError(f"Expected a {kind.value} token.")

        user_id = payload.get("userId")
        email = payload.get("email")
        exp = payload.get("exp")
        iat = payload.get("iat")
        if (
            not isinstance(user_id, int)
            or isinstance(user_id, bool)
            or not isinstance(email, str)
            or not isinstance(exp, int)
            or not isinstance(iat, int)
        ):
            raise TokenInvalidError("Malformed token payload.")

        if exp <= int(self.clock().timestamp()):
            raise TokenExpiredError("Token has expired.")

        return TokenClaims(
            user_id=user_id,
            email=email,
            kind=kind,
            jti=str(payload["jti"]),
            issued_at=iat,
            expires_at=exp,
        )
