"""WSGI entry point (``gunicorn wsgi:app`` / ``FLASK_APP=wsgi``)."""

from taskmanager import create_app

app = create_app()
