"""Command-line interface registration for the Flask application."""

from __future__ import annotations

from flask import Flask

from .seed import seed_cli
from .sessions import sessions_cli


def init_app(app: Flask) -> None:
    """Register the ``seed`` and ``sessions`` command groups."""
    app.cli.add_command(seed_cli)
    app.cli.add_command(sessions_cli)
