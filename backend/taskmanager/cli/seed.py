"""Flask CLI commands for development data."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta

import click
from flask import current_app
from flask.cli import with_appcontext

from taskmanager.core.extensions import db
from taskmanager.models import Task, User

LOGGER = logging.getLogger(__name__)

DEMO_NAME = "Demo User"
DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "demo-password"

DEMO_TASKS = (
    ("Write project report", "Draft and submit the quarterly report", "high", 3),
    ("Review pull requests", "Go through the open review queue", "medium", 1),
    ("Plan next sprint", "Collect estimates from the team", "low", 7),
)


def _ensure_non_production() -> None:
    if str(current_app.config.get("APP_ENV", "")).lower() == "production":
        raise click.UsageError("Seeding is restricted to non-production environments.")


def seed_demo() -> dict[str, dict[str, int]]:
    """Create the demo user and its tasks if missing.

    :returns: ``{table: {"created": n, "existing": m}}`` counters.
    """
    summary = {"users": {"created": 0, "existing": 0}, "tasks": {"created": 0, "existing": 0}}

    user = db.session.execute(db.select(User).filter_by(email=DEMO_EMAIL)).scalar_one_or_none()
    if user is None:
        user = User(name=DEMO_NAME, email=DEMO_EMAIL)
        user.password = DEMO_PASSWORD
        db.session.add(user)
        db.session.flush()
        summary["users"]["created"] += 1
    else:
        summary["users"]["existing"] += 1

    now = datetime.now(UTC)
    for title, description, priority, days in DEMO_TASKS:
        exists = db.session.execute(
            db.select(Task.id).filter_by(owner_id=user.id, title=title)
        ).first()
        if exists:
            summary["tasks"]["existing"] += 1
            continue
        db.session.add(
            Task(
                title=title,
                description=description,
                due_date=now + timedelta(days=days),
                priority=priority,
                status="pending",
                owner_id=user.id,
                owner_name=user.name,
                owner_email=user.email,
            )
        )
        summary["tasks"]["created"] += 1

    db.session.commit()
    return summary


def _echo_summary(summary: dict[str, dict[str, int]]) -> None:
    click.echo("Seed summary:")
    width = max(len(name) for name in summary)
    for table, counters in sorted(summary.items()):
        created = counters.get("created", 0)
        existing = counters.get("existing", 0)
        click.echo(f"  {table.ljust(width)}  created={created:>2}  existing={existing:>2}")


@click.group("seed")
def seed_cli() -> None:
    """Database seeding commands."""


@seed_cli.command("demo")
@with_appcontext
def demo_command() -> None:
    """Create an idempotent demo account with sample tasks."""
    _ensure_non_production()
    try:
        summary = seed_demo()
    except Exception as exc:  # pragma: no cover - CLI safeguard
        db.session.rollback()
        raise click.ClickException(f"Seeding failed: {exc}") from exc
    LOGGER.info("seed.demo", extra={"outcome": "ok"})
    _echo_summary(summary)
    click.echo(f"Login with {DEMO_EMAIL} / {DEMO_PASSWORD}")
