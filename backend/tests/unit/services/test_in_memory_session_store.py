"""Unit tests for the process-local session store."""

from __future__ import annotations

from taskmanager.services._shared.ports import InMemorySessionStore, SessionPair


class Clock:
    def __init__(self) -> None:
        self.now = 1_000.0

    def __call__(self) -> float:
        return self.now


def test_put_get_delete():
    store = InMemorySessionStore()
    store.put(1, SessionPair("a", "r"), 60)

    assert store.get(1) == SessionPair("a", "r")
    assert len(store) == 1
    assert store.delete(1) is True
    assert store.delete(1) is False
    assert store.get(1) is None


def test_entries_expire_after_ttl():
    clock = Clock()
    store = InMemorySessionStore(clock=clock)
    store.put(1, SessionPair("a", "r"), 60)

    clock.now += 59
    assert store.get(1) is not None
    clock.now += 1
    assert store.get(1) is None
    assert len(store) == 0


def test_replace_is_compare_and_swap():
    store = InMemorySessionStore()
    store.put(1, SessionPair("a1", "r1"), 60)

    assert store.replace(1, SessionPair("a1", "r1"), SessionPair("a2", "r1"), 60) is True
    # Same refresh token, but the access token moved on.
    assert store.replace(1, SessionPair("a1", "r1"), SessionPair("a3", "r1"), 60) is False
    assert store.replace(1, SessionPair("a2", "other"), SessionPair("a3", "other"), 60) is False
    assert store.get(1) == SessionPair("a2", "r1")


def test_replace_does_not_resurrect_expired_session():
    clock = Clock()
    store = InMemorySessionStore(clock=clock)
    store.put(1, SessionPair("a1", "r1"), 10)
    clock.now += 10

    assert store.replace(1, SessionPair("a1", "r1"), SessionPair("a2", "r1"), 10) is False
    assert store.get(1) is None


def test_put_sweeps_sessions_of_users_who_never_return():
    clock = Clock()
    store = InMemorySessionStore(clock=clock)
    store.put(1, SessionPair("a1", "r1"), 10)
    store.put(2, SessionPair("a2", "r2"), 60)
    clock.now += 10

    store.put(3, SessionPair("a3", "r3"), 60)

    assert len(store) == 2
    assert store.get(2) == SessionPair("a2", "r2")


def test_session_pair_serialization():
    pair = SessionPair("acc", "ref")
    assert pair.dumps() == '{"accessToken":"acc","refreshToken":"ref"}'
    assert SessionPair.loads(pair.dumps().encode()) == pair
