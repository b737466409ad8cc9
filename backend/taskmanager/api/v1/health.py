"""Health check endpoint."""

from __future__ import annotations

from flask import Blueprint, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from taskmanager.api.deps import json_response, timing
from taskmanager.core.extensions import db, get_session_store

bp = Blueprint("health", __name__)


@bp.get("/health")
@timing
def healthcheck():
    """Report database and session store reachability."""
    db_status = "ok"
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        current_app.logger.exception("healthcheck.db_error")
        db_status = "fail"
    finally:
        db.session.rollback()

    store_status = "ok" if get_session_store().ping() else "fail"
    healthy = db_status == "ok" and store_status == "ok"
    payload = {
        "status": "ok" if healthy else "degraded",
        "db": db_status,
        "sessionStore": store_status,
    }
    return json_response(payload)
