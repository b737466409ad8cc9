"""Port for the per-user session record and an in-memory implementation."""

from __future__ import annotations

import json
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True, slots=True)
class SessionPair:
    """
    The token pair currently honored for a user.

    :ivar access_token: Last access token issued for the user.
    :ivar refresh_token: Refresh token issued at login.
    """

    access_token: str
    refresh_token: str

    def to_dict(self) -> dict[str, str]:
        return {"accessToken": self.access_token, "refreshToken": self.refresh_token}

    def dumps(self) -> str:
        """Serialize to the JSON stored under ``session:<user id>``."""
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SessionPair:
        return cls(access_token=str(data["accessToken"]), refresh_token=str(data["refreshToken"]))

    @classmethod
    def loads(cls, raw: str | bytes) -> SessionPair:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        return cls.from_dict(json.loads(raw))


class SessionStore(Protocol):
    """
    Expiring store holding at most one :class:`SessionPair` per user.

    Implementations must provide read-your-writes for a single caller and
    per-key atomicity for :meth:`replace`.
    """

    def put(self, user_id: int, pair: SessionPair, ttl: int) -> None:
        """Overwrite the user's session and reset its TTL (seconds)."""

    def get(self, user_id: int) -> SessionPair | None:
        """Return the live session or ``None`` when absent or expired."""

    def delete(self, user_id: int) -> bool:
        """Remove the session. :returns: True if a record existed."""

    def replace(self, user_id: int, expected: SessionPair, pair: SessionPair, ttl: int) -> bool:
        """
        Compare-and-swap write.

        Store ``pair`` only if the live session still equals ``expected``
        (both tokens). :returns: False when the record is gone or was changed
        by someone else since ``expected`` was read.
        """

    def ping(self) -> bool:
        """Return True when the backend is reachable."""


class InMemorySessionStore(SessionStore):
    """
    Process-local session store.

    .. note::
       Uses a lock so ``replace`` is atomic across threads of one process.
       Expired entries are dropped when read and swept on every ``put``,
       so records of users who never return do not accumulate.
    """

    def __init__(self, clock: Callable[[], float] | None = None) -> None:
        self._entries: dict[int, tuple[SessionPair, float]] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def _now(self) -> float:
        return self._clock() if self._clock is not None else time.time()

    def _live(self, user_id: int) -> SessionPair | None:
        entry = self._entries.get(user_id)
        if entry is None:
            return None
        pair, expires_at = entry
        if expires_at <= self._now():
            del self._entries[user_id]
            return None
        return pair

    def _sweep(self) -> None:
        now = self._now()
        expired = [uid for uid, (_, expires_at) in self._entries.items() if expires_at <= now]
        for uid in expired:
            del self._entries[uid]

    def put(self, user_id: int, pair: SessionPair, ttl: int) -> None:
        with self._lock:
            self._sweep()
            self._entries[user_id] = (pair, self._now() + ttl)

    def get(self, user_id: int) -> SessionPair | None:
        with self._lock:
            return self._live(user_id)

    def delete(self, user_id: int) -> bool:
        with self._lock:
            return self._entries.pop(user_id, None) is not None

    def replace(self, user_id: int, expected: SessionPair, pair: SessionPair, ttl: int) -> bool:
        with self._lock:
            if self._live(user_id) != expected:
                return False
            self._entries[user_id] = (pair, self._now() + ttl)
            return True

    def ping(self) -> bool:
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
