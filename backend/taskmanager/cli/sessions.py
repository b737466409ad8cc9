"""Operator commands for the session store."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from taskmanager.core.extensions import get_session_store

LOGGER = logging.getLogger(__name__)


@click.group("sessions")
def sessions_cli() -> None:
    """Inspect and revoke user sessions."""


@sessions_cli.command("revoke")
@click.argument("user_id", type=int)
@with_appcontext
def revoke_command(user_id: int) -> None:
    """Force-logout USER_ID by deleting its session record."""
    existed = get_session_store().delete(user_id)
    LOGGER.info("sessions.revoke", extra={"user_id": user_id, "outcome": "ok" if existed else "none"})
    click.echo(f"Session for user {user_id} {'revoked' if existed else 'not found'}.")


@sessions_cli.command("show")
@click.argument("user_id", type=int)
@with_appcontext
def show_command(user_id: int) -> None:
    """Report whether USER_ID currently has a live session."""
    pair = get_session_store().get(user_id)
    click.echo(f"User {user_id}: {'active session' if pair else 'no session'}")
