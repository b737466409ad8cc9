"""JSON logging for the API with per-request correlation ids.

Every record emitted while a request is active carries ``request_id``. The
id is taken from ``X-Request-ID`` (or ``X-Correlation-ID``) when the caller
sends a well-formed one and generated otherwise, then echoed back on the
response. Each request also produces one ``http.request`` access record.
"""

from __future__ import annotations

import json
import logging
import re
import sys
import time
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from flask import Flask, Response, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
CORRELATION_HEADERS = ("X-Request-ID", "X-Correlation-ID")

# Inbound ids are echoed into headers and logs; anything else is replaced.
_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

# Attributes every LogRecord has; anything outside this set came from ``extra=``.
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime", "request_id", "taskName"}

access_log = logging.getLogger("taskmanager.access")


class JSONFormatter(logging.Formatter):
    """Render a record as one JSON object per line.

    Fields passed through ``extra=`` are merged into the payload as-is, so
    call sites decide their own keys (``user_id``, ``outcome``...).
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
            payload["where"] = f"{record.module}:{record.lineno}"
        return json.dumps(payload, default=str)


class RequestIdFilter(logging.Filter):
    """Stamp ``request_id`` on every record (``None`` outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = ensure_request_id() if has_request_context() else None
        return True


_request_id_filter = RequestIdFilter()


def _inbound_request_id() -> str | None:
    for header in CORRELATION_HEADERS:
        value = (request.headers.get(header) or "").strip()
        if _REQUEST_ID_RE.match(value):
            return value
    return None


def ensure_request_id() -> str:
    """Return the id of the current request, assigning one on first use.

    Outside a request context a fresh id is returned each call.
    """
    if not has_request_context():
        return uuid4().hex
    request_id = g.get("request_id")
    if request_id is None:
        request_id = _inbound_request_id() or uuid4().hex
        g.request_id = request_id
    return request_id


def configure_logging(level: str | int = "INFO") -> None:
    """Send the root logger to stdout as JSON at ``level``.

    Unknown level names fall back to ``INFO``.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(_request_id_filter)
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        level = resolved if isinstance(resolved, int) else logging.INFO
    root.setLevel(level)


def init_app(app: Flask) -> None:
    """Assign request ids, echo them back and write one access record per request."""

    app.logger.addFilter(_request_id_filter)
    access_log.addFilter(_request_id_filter)

    @app.before_request
    def _start_request() -> None:
        ensure_request_id()
        g.request_started = time.perf_counter()

    @app.after_request
    def _finish_request(response: Response) -> Response:
        response.headers[REQUEST_ID_HEADER] = ensure_request_id()
        started = g.get("request_started")
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2) if started else None
        access_log.info(
            "http.request",
            extra={
                "method": request.method,
                "path": request.path,
                "status": response.status_code,
                "elapsed_ms": elapsed_ms,
            },
        )
        return response


__all__ = ["JSONFormatter", "configure_logging", "ensure_request_id", "init_app"]
