"""HTTP helpers for authenticating the Flask test client."""

from __future__ import annotations

from typing import Any

API = "/api/v1"


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def register(client, *, name: str = "Jane Doe", email: str, password: str = "secret1!"):
    return client.post(
        f"{API}/auth/register", json={"name": name, "email": email, "password": password}
    )


def login(client, *, email: str, password: str = "secret1!") -> dict[str, Any]:
    """Log in and return the ``data`` object (``accessToken``/``refreshToken``)."""
    resp = client.post(f"{API}/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()["data"]


def register_and_login(
    client, *, name: str = "Jane Doe", email: str = "jane@example.com", password: str = "secret1!"
) -> tuple[int, dict[str, Any]]:
    """Register a user, log in, and return ``(user_id, tokens)``."""
    resp = register(client, name=name, email=email, password=password)
    assert resp.status_code == 201, resp.get_json()
    user_id = resp.get_json()["data"]["id"]
    return user_id, login(client, email=email, password=password)
