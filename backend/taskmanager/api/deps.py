"""Shared API helpers: response envelope, auth gate decorator, timing."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from http import HTTPStatus
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request

from taskmanager.core.errors import APIError
from taskmanager.core.extensions import get_session_store, get_token_service
from taskmanager.services._shared.dto import Actor
from taskmanager.services.auth.guard import AccessGuard
from taskmanager.services.auth.service import AuthService
from taskmanager.services.tasks.service import TaskService
from taskmanager.services.users.service import UserService

F = TypeVar("F", bound=Callable[..., Any])


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""
    response = jsonify(payload)
    response.status_code = status
    return response


def success_response(data: Any, message: str, *, status: int = HTTPStatus.OK) -> Response:
    """Wrap ``data`` in the ``{status, message, data}`` success envelope."""
    return json_response(
        {"status": int(status), "message": message, "data": data}, status=int(status)
    )


def json_body() -> dict[str, Any]:
    """Return the request JSON object, or ``{}`` when absent or not an object."""
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


# ------------------------------- Services -----------------------------------


def access_guard() -> AccessGuard:
    return AccessGuard(token_service=get_token_service(), session_store=get_session_store())


def auth_service() -> AuthService:
    return AuthService(
        token_service=get_token_service(),
        session_store=get_session_store(),
        session_ttl=int(current_app.config["SESSION_TTL"]),
    )


def task_service() -> TaskService:
    return TaskService()


def user_service() -> UserService:
    return UserService()


# ------------------------------- Auth gate ----------------------------------


def current_actor() -> Actor | None:
    """Return the caller attached by :func:`require_auth`, if any."""
    return g.get("current_user")


def require_auth(func: F) -> F:
    """Run the access gate before the handler.

    On success the caller is stored as ``g.current_user``; any failed step
    ends the request with 401 and the step's message.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        result = access_guard().check(request.headers.get("Authorization"))
        if not result.ok:
            raise APIError(
                result.outcome.message,
                status_code=HTTPStatus.UNAUTHORIZED,
                code=result.outcome.value,
            )
        g.current_user = result.actor
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request.endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
