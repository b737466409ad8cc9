"""Application factory for the task manager API."""

from __future__ import annotations

from flask import Flask

from taskmanager.core.config import BaseConfig, get_config
from taskmanager.core.logger import configure_logging
from taskmanager.core.logger import init_app as init_logging


def create_app(config: str | type[BaseConfig] | object | None = None) -> Flask:
    """Build and configure the Flask application.

    Parameters
    ----------
    config:
        Config class, object or import path. Defaults to the class selected
        by ``APP_ENV`` (see :func:`taskmanager.core.config.get_config`).

    Returns
    -------
    flask.Flask
        Application with extensions, blueprints, error handlers and CLI
        commands registered.
    """
    app = Flask(__name__)
    app.config.from_object(get_config() if config is None else config)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from taskmanager.core import proxy

    proxy.init_app(app)

    from taskmanager.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from taskmanager.core import cors

    cors.init_app(app)

    from taskmanager.api import init_app as init_api

    init_api(app)

    from taskmanager.core import errors

    errors.init_app(app)

    from taskmanager import cli

    cli.init_app(app)

    return app
