"""Reverse-proxy awareness for the WSGI pipeline."""

from __future__ import annotations

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix


def init_app(app: Flask) -> None:
    """Wrap the WSGI app in :class:`ProxyFix` when ``USE_PROXYFIX`` is set.

    Rate limiting keys on the client address, so behind a load balancer the
    ``X-Forwarded-For`` hop must be trusted. ``PROXY_HOPS`` controls how many
    hops are trusted (one by default).
    """
    if not app.config.get("USE_PROXYFIX", True):
        return
    hops = int(app.config.get("PROXY_HOPS", 1))
    app.wsgi_app = ProxyFix(  # type: ignore[method-assign]
        app.wsgi_app, x_for=hops, x_proto=hops, x_host=hops
    )
