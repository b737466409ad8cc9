# taskmanager/services/auth/service.py
from __future__ import annotations

import hmac
import logging

from sqlalchemy.exc import IntegrityError

from taskmanager.core.config import SESSION_TTL_SECONDS
from taskmanager.models.user import User, normalize_email
from taskmanager.services._shared.base import BaseService
from taskmanager.services._shared.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    MissingInputError,
    SessionNotFoundError,
    TokenMismatchError,
    violates,
)
from taskmanager.services._shared.ports import (
    SessionPair,
    SessionStore,
    TokenError,
    TokenKind,
    TokenService,
)
from taskmanager.services.auth.dto import (
    AccessTokenOut,
    LoginIn,
    RefreshIn,
    RegisterIn,
    TokenPairOut,
    UserPublicOut,
)

log = logging.getLogger(__name__)

EMAIL_CONSTRAINT = "uq_users_email"


def to_public(user: User) -> UserPublicOut:
    return UserPublicOut(
        id=user.id, name=user.name, email=user.email, created_at=user.created_at
    )


class AuthService(BaseService):
    """
    Authentication lifecycle service (register / login / refresh / logout).

    Tokens are issued by a :class:`TokenService`; the pair currently honored
    for each user is kept in a :class:`SessionStore`. A token is only usable
    while it matches the stored session, so logging in again or logging out
    invalidates earlier tokens before their expiry.
    """

    def __init__(
        self,
        *,
        token_service: TokenService,
        session_store: SessionStore,
        session_ttl: int = SESSION_TTL_SECONDS,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param token_service: Adapter for issuing/verifying JWTs.
        :param session_store: Per-user session record store.
        :param session_ttl: Session record lifetime in seconds.
        """
        self.tokens = token_service
        self.sessions = session_store
        self.session_ttl = int(session_ttl)

    # ------------------------------------------------------------------ #
    # Register
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> UserPublicOut:
        """
        Create a user with a hashed password.

        :raises DuplicateEmailError: When the normalized email is taken.
        """
        email = normalize_email(dto.email)
        try:
            with self.rw_uow() as uow:
                if uow.users.exists_by_email(email):
                    raise DuplicateEmailError()
                user = User(name=dto.name.strip(), email=email)
                user.password = dto.password
                uow.users.add(user)
                out = to_public(user)
        except IntegrityError as exc:
            # Concurrent registration passed the existence check
            if violates(exc, EMAIL_CONSTRAINT):
                raise DuplicateEmailError() from exc
            raise

        log.info("auth.register", extra={"user_id": out.id, "outcome": "ok"})
        return out

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> TokenPairOut:
        """
        Authenticate credentials, issue a fresh pair and overwrite the session.

        :raises InvalidCredentialsError: Unknown email or wrong password.
        """
        with self.ro_uow() as uow:
            user = uow.users.authenticate(dto.email, dto.password)
            if user is None:
                log.info("auth.login", extra={"outcome": "invalid_credentials"})
                raise InvalidCredentialsError()
            user_id, email = user.id, user.email

        access = self.tokens.issue_access_token(user_id=user_id, email=email)
        refresh = self.tokens.issue_refresh_token(user_id=user_id, email=email)
        self.sessions.put(user_id, SessionPair(access, refresh), self.session_ttl)

        log.info("auth.login", extra={"user_id": user_id, "outcome": "ok"})
        return TokenPairOut(access_token=access, refresh_token=refresh)

    # ------------------------------------------------------------------ #
    # Refresh
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> AccessTokenOut:
        """
        Issue a new access token for the refresh token held by the session.

        The refresh token itself is carried over. The session record is
        rewritten with a compare-and-swap against the pair read above so that,
        of two concurrent refreshes with the same token, exactly one succeeds.

        :raises MissingInputError: No refresh token supplied.
        :raises InvalidRefreshTokenError: Bad signature, expired or wrong kind.
        :raises SessionNotFoundError: No live session for the user.
        :raises TokenMismatchError: The session holds a different refresh token.
        """
        token = (dto.refresh_token or "").strip()
        if not token:
            raise MissingInputError()

        try:
            claims = self.tokens.verify(token, TokenKind.REFRESH)
        except TokenError as exc:
            log.info("auth.refresh", extra={"outcome": "invalid_token"})
            raise InvalidRefreshTokenError() from exc

        current = self.sessions.get(claims.user_id)
        if current is None:
            log.info("auth.refresh", extra={"user_id": claims.user_id, "outcome": "no_session"})
            raise SessionNotFoundError()

        if not hmac.compare_digest(current.refresh_token.encode(), token.encode()):
            log.info("auth.refresh", extra={"user_id": claims.user_id, "outcome": "mismatch"})
            raise TokenMismatchError()

        access = self.tokens.issue_access_token(user_id=claims.user_id, email=claims.email)
        swapped = self.sessions.replace(
            claims.user_id, current, SessionPair(access, token), self.session_ttl
        )
        if not swapped:
            log.info("auth.refresh", extra={"user_id": claims.user_id, "outcome": "lost_race"})
            raise TokenMismatchError()

        log.info("auth.refresh", extra={"user_id": claims.user_id, "outcome": "ok"})
        return AccessTokenOut(access_token=access)

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, user_id: int) -> None:
        """Delete the user's session record. Idempotent."""
        existed = self.sessions.delete(user_id)
        log.info(
            "auth.logout",
            extra={"user_id": user_id, "outcome": "ok" if existed else "no_session"},
        )
