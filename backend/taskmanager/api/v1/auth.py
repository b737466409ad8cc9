"""Authentication endpoints."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app

from taskmanager.api.deps import (
    auth_service,
    current_actor,
    json_body,
    require_auth,
    success_response,
    timing,
)
from taskmanager.core.extensions import limiter
from taskmanager.schemas import (
    AccessTokenSchema,
    LoginSchema,
    RefreshTokenSchema,
    RegisterSchema,
    TokenPairSchema,
    UserPublicSchema,
)
from taskmanager.services.auth.dto import LoginIn, RefreshIn, RegisterIn

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshTokenSchema()
user_schema = UserPublicSchema()
token_pair_schema = TokenPairSchema()
access_token_schema = AccessTokenSchema()


def _login_rate_limit() -> str:
    return str(current_app.config.get("AUTH_LOGIN_RATE_LIMIT", "10 per minute"))


@bp.post("/register")
@timing
def register():
    """Create an account and return its public projection."""
    data = register_schema.load(json_body())
    user = auth_service().register(RegisterIn(**data))
    return success_response(
        user_schema.dump(user), "User Registered successfully!", status=HTTPStatus.CREATED
    )


@bp.post("/login")
@limiter.limit(_login_rate_limit)
@timing
def login():
    """Authenticate credentials and issue an access/refresh pair."""
    data = login_schema.load(json_body())
    pair = auth_service().login(LoginIn(**data))
    return success_response(token_pair_schema.dump(pair), "User Logged in successfully!")


@bp.post("/refresh-token")
@timing
def refresh_token():
    """Issue a new access token for the session's refresh token."""
    data = refresh_schema.load(json_body())
    out = auth_service().refresh(RefreshIn(refresh_token=data["refresh_token"]))
    return success_response(access_token_schema.dump(out), "Token refreshed successfully!")


@bp.post("/logout")
@require_auth
@timing
def logout():
    """Revoke the caller's session."""
    auth_service().logout(current_actor().user_id)
    return success_response(None, "User Logged out successfully!")
