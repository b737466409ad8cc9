"""Centralized JSON error handling for the API.

Every error leaves the application in the same envelope::

    {"status": <http status>, "message": <stable text>[, "errors": {...}][, "error": ...]}

``errors`` carries field-level validation messages. ``error`` carries internal
detail and is only emitted when ``EXPOSE_ERROR_DETAILS`` is enabled, which is
never the case in production.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, current_app, jsonify, request
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from taskmanager.core.logger import ensure_request_id
from taskmanager.services._shared.errors import ServiceError

log = logging.getLogger(__name__)

VALIDATION_MESSAGE = "Validation failed!"
INTERNAL_MESSAGE = "Internal Server Error!"
RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."


def _http_status_to_code(status_code: int) -> str:
    """Map common HTTP status codes to canonical, stable error codes."""
    mapping = {
        400: "bad_request",
        401: "unauthorized",
        403: "forbidden",
        404: "not_found",
        405: "method_not_allowed",
        409: "conflict",
        413: "payload_too_large",
        415: "unsupported_media_type",
        429: "too_many_requests",
        500: "internal_server_error",
        503: "service_unavailable",
    }
    return mapping.get(status_code, "error")


def build_error_body(
    *,
    status: int,
    message: str,
    errors: dict[str, Any] | None = None,
    detail: Any = None,
) -> dict[str, Any]:
    """
    Build the error envelope.

    :param status: HTTP status code.
    :param message: Client-safe, stable message used for assertions.
    :param errors: Optional field -> messages mapping.
    :param detail: Internal detail, dropped unless ``EXPOSE_ERROR_DETAILS``.
    :returns: JSON-serializable dictionary.
    :rtype: dict
    """
    body: dict[str, Any] = {"status": int(status), "message": message}
    if errors:
        body["errors"] = errors
    if detail is not None and current_app.config.get("EXPOSE_ERROR_DETAILS", False):
        body["error"] = detail
    return body


def _error_response(body: dict[str, Any]) -> tuple[Response, int]:
    return jsonify(body), int(body["status"])


class APIError(Exception):
    """
    Represent a JSON-serializable API error raised from the HTTP layer.

    Parameters
    ----------
    message : str
        Human-readable description presented to clients.
    status_code : int, optional
        HTTP status code to return. Defaults to ``400``.
    code : str, optional
        Machine-readable identifier, typically snake_case.
    errors : dict[str, Any] | None, optional
        Optional field-level messages included in the response body.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        code: str = "bad_request",
        errors: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.code = code
        self.errors = errors or {}

    def to_body(self) -> dict[str, Any]:
        return build_error_body(
            status=self.status_code,
            message=self.message,
            errors=self.errors or None,
            detail=self.code,
        )


def from_service_error(exc: ServiceError) -> APIError:
    """Translate a domain error into its HTTP representation."""
    return APIError(exc.message, status_code=exc.status_code, code=exc.code)


def init_app(app: Flask) -> None:
    """
    Attach JSON error handlers to the Flask app.

    Notes
    -----
    - Domain errors are translated through :func:`from_service_error`.
    - 5xx are logged with ``exc_info``; 4xx as warnings without traceback.
    """

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        level = log.error if err.status_code >= 500 else log.warning
        level(
            "APIError: code=%s status=%s msg=%s request_id=%s",
            err.code,
            err.status_code,
            err.message,
            ensure_request_id(),
        )
        return _error_response(err.to_body())

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        return handle_api_error(from_service_error(err))

    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        messages = err.messages if isinstance(err.messages, dict) else {"_schema": err.messages}
        log.warning("ValidationError: fields=%s request_id=%s", sorted(messages), ensure_request_id())
        body = build_error_body(
            status=HTTPStatus.BAD_REQUEST,
            message=VALIDATION_MESSAGE,
            errors=messages,
        )
        return _error_response(body)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        error_code = _http_status_to_code(status)
        message = (err.description or error_code.replace("_", " ").capitalize()).strip()
        detail: Any = error_code
        if status == HTTPStatus.NOT_FOUND:
            message = "Endpoint not found"
            detail = f"The requested endpoint {request.method} {request.path} does not exist"
        elif status == HTTPStatus.TOO_MANY_REQUESTS:
            detail = f"limit: {message}"
            message = RATE_LIMIT_MESSAGE
        level = log.error if status >= 500 else log.warning
        level(
            "HTTPException: code=%s status=%s detail=%s request_id=%s",
            error_code,
            status,
            message,
            ensure_request_id(),
        )
        return _error_response(build_error_body(status=status, message=message, detail=detail))

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        # Do not leak raw DB error to clients
        log.error("IntegrityError: request_id=%s", ensure_request_id(), exc_info=True)
        body = build_error_body(
            status=HTTPStatus.CONFLICT,
            message="Resource conflict",
            detail=str(err.orig) if err.orig else None,
        )
        return _error_response(body)

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        log.error("OperationalError: request_id=%s", ensure_request_id(), exc_info=True)
        body = build_error_body(
            status=HTTPStatus.SERVICE_UNAVAILABLE,
            message="Service temporarily unavailable",
        )
        return _error_response(body)

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        # Unexpected server-side error; never leak internal details in production
        log.error("Unhandled exception: request_id=%s", ensure_request_id(), exc_info=True)
        body = build_error_body(
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            message=INTERNAL_MESSAGE,
            detail=f"{type(err).__name__}: {err}",
        )
        return _error_response(body)


__all__ = ["APIError", "build_error_body", "from_service_error", "init_app"]
