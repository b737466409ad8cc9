# comments in English; reST docstrings
from __future__ import annotations

import logging
from dataclasses import dataclass

import redis  # type: ignore[import-untyped]
from redis.exceptions import RedisError, WatchError  # type: ignore[import-untyped]

from taskmanager.services._shared.ports import SessionPair, SessionStore

log = logging.getLogger(__name__)


@dataclass(slots=True)
class RedisSessionStore(SessionStore):
    """
    Redis-backed session store.

    Each user has a single string key ``<prefix><user id>`` holding the JSON
    ``{"accessToken": ..., "refreshToken": ...}`` with a TTL.

    :param r: A Redis client (already connected).
    :param prefix: Key namespace, ``session:`` by default.
    """

    r: redis.Redis
    prefix: str = "session:"

    # -------------------- helpers --------------------

    def _k(self, user_id: int) -> str:
        return f"{self.prefix}{user_id}"

    def _decode(self, user_id: int, raw: str | bytes | None) -> SessionPair | None:
        if raw is None:
            return None
        try:
            return SessionPair.loads(raw)
        except (ValueError, KeyError, TypeError):
            # Unreadable records behave like a missing session
            log.warning("Discarding malformed session record", extra={"user_id": user_id})
            return None

    # -------------------- API ------------------------

    def put(self, user_id: int, pair: SessionPair, ttl: int) -> None:
        self.r.set(self._k(user_id), pair.dumps(), ex=max(1, int(ttl)))

    def get(self, user_id: int) -> SessionPair | None:
        return self._decode(user_id, self.r.get(self._k(user_id)))

    def delete(self, user_id: int) -> bool:
        return bool(self.r.delete(self._k(user_id)))

    def replace(self, user_id: int, expected: SessionPair, pair: SessionPair, ttl: int) -> bool:
        """
        Compare-and-swap using WATCH/MULTI/EXEC.

        ``expected`` is the pair the caller read earlier; both tokens must still
        match under WATCH. The write is aborted when the key changes between
        the read and EXEC; that case is reported as ``False`` without retrying,
        since the concurrent writer already rotated the session.
        """
        key = self._k(user_id)
        try:
            with self.r.pipeline() as p:
                p.watch(key)
                current = self._decode(user_id, p.get(key))
                if current != expected:
                    p.unwatch()
                    return False
                p.multi()
                p.set(key, pair.dumps(), ex=max(1, int(ttl)))
                p.execute()
                return True
        except WatchError:
            log.info("Concurrent session update detected", extra={"user_id": user_id})
            return False

    def ping(self) -> bool:
        try:
            return bool(self.r.ping())
        except RedisError:
            log.warning("Session store ping failed", exc_info=True)
            return False
