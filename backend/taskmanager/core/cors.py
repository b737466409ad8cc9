"""CORS policy for the ``/api`` routes."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS


def parse_origins(raw: str | None) -> list[str]:
    """Split a comma-separated ``CORS_ORIGINS`` value into clean entries."""
    return [o.strip() for o in (raw or "").split(",") if o.strip()]


def init_app(app: Flask) -> None:
    """Enable CORS on API endpoints.

    A blank or ``"*"`` origin list allows any origin; credentials are only
    supported when an explicit allow-list is configured. The
    ``Authorization`` and ``X-Request-ID`` headers are always allowed and the
    request id is exposed to browsers.
    """
    origins = parse_origins(app.config.get("CORS_ORIGINS"))
    wildcard = not origins or origins == ["*"]

    CORS(
        app,
        resources={r"/api/*": {"origins": "*" if wildcard else origins}},
        supports_credentials=not wildcard,
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
