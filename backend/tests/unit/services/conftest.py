"""Shared doubles for service-level tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from taskmanager.infra.jwt.pyjwt_token_service import JWTTokenService
from taskmanager.services._shared.ports import InMemorySessionStore


class MutableClock:
    """Clock shared by the token service under test."""

    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture()
def clock() -> MutableClock:
    return MutableClock()


@pytest.fixture()
def tokens(clock) -> JWTTokenService:
    return JWTTokenService(
        access_secret="svc-access-secret-0123456789abcdef",
        refresh_secret="svc-refresh-secret-0123456789abcdef",
        clock=clock,
    )


@pytest.fixture()
def sessions() -> InMemorySessionStore:
    return InMemorySessionStore()
