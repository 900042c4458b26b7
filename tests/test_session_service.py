from __future__ import annotations

import time

import pytest

import vitrine.services.session_service as session_service
from vitrine.core.security import hash_password
from vitrine.services.session_service import (
    InMemorySessionStore,
    InvalidCredentials,
    MissingPassword,
    RedisSessionStore,
    SessionGate,
    SessionHandle,
    Unauthenticated,
)


@pytest.fixture()
def gate():
    return SessionGate(InMemorySessionStore(), admin_secret="topsecret", ttl_seconds=7200)


def test_open_creates_unauthenticated_session(gate):
    session = gate.open(None)
    assert session.token
    assert session.authenticated is False
    assert gate.check_status(session) is False
    with pytest.raises(Unauthenticated):
        gate.require_authenticated(session)


def test_open_does_not_persist_anonymous_sessions(gate):
    gate.open(None)
    gate.open(None)
    assert gate.store.items == {}


def test_open_reuses_logged_in_token(gate):
    first = gate.open(None)
    gate.login(first, "topsecret")
    again = gate.open(first.token)
    assert again.token == first.token
    assert again.authenticated is True


def test_open_unknown_token_starts_fresh(gate):
    session = gate.open("forged-token")
    assert session.token != "forged-token"


def test_login_requires_password(gate):
    session = gate.open(None)
    with pytest.raises(MissingPassword):
        gate.login(session, "")
    with pytest.raises(MissingPassword):
        gate.login(session, None)


def test_login_rejects_wrong_password(gate):
    session = gate.open(None)
    with pytest.raises(InvalidCredentials):
        gate.login(session, "wrong")
    assert gate.check_status(session) is False


def test_login_marks_session_and_rotates_token(gate):
    session = gate.open(None)
    old_token = session.token

    gate.login(session, "topsecret")

    assert session.token != old_token
    assert gate.check_status(session) is True
    gate.require_authenticated(session)
    assert gate.store.get(old_token) is None
    assert gate.store.get(session.token).authenticated is True


def test_logout_is_idempotent(gate):
    session = gate.open(None)
    gate.login(session, "topsecret")
    gate.logout(session)
    gate.logout(session)

    assert gate.check_status(session) is False
    assert gate.store.get(session.token) is None


def test_expired_session_is_dropped():
    store = InMemorySessionStore()
    store.save(SessionHandle(token="tok", authenticated=True, expires_at=time.time() - 1))
    assert store.get("tok") is None

    gate = SessionGate(store, admin_secret="topsecret")
    session = gate.open("tok")
    assert session.token != "tok"
    assert session.authenticated is False


def test_login_with_argon2_secret():
    gate = SessionGate(InMemorySessionStore(), admin_secret=hash_password("hashed-secret"))
    session = gate.open(None)
    with pytest.raises(InvalidCredentials):
        gate.login(session, "argon2$whatever")
    gate.login(session, "hashed-secret")
    assert gate.check_status(session) is True


class FakeRedis:
    def __init__(self):
        self.data: dict[str, bytes] = {}
        self.ttls: dict[str, int] = {}

    def get(self, key):
        return self.data.get(key)

    def setex(self, key, ttl, value):
        self.data[key] = value.encode("utf-8") if isinstance(value, str) else value
        self.ttls[key] = ttl

    def delete(self, key):
        self.data.pop(key, None)


def test_redis_store_round_trip(monkeypatch):
    fake = FakeRedis()
    monkeypatch.setattr(session_service.redis.Redis, "from_url", lambda url: fake)
    store = RedisSessionStore(url="redis://localhost:6379/0")
    gate = SessionGate(store, admin_secret="topsecret", ttl_seconds=600)

    session = gate.open(None)
    gate.login(session, "topsecret")

    key = f"sess:{session.token}"
    assert key in fake.data
    assert 0 < fake.ttls[key] <= 600
    assert store.get(session.token).authenticated is True

    gate.logout(session)
    assert key not in fake.data


def test_redis_store_drops_garbage(monkeypatch):
    fake = FakeRedis()
    fake.data["sess:bad"] = b"not json"
    monkeypatch.setattr(session_service.redis.Redis, "from_url", lambda url: fake)
    store = RedisSessionStore(url="redis://localhost:6379/0")

    assert store.get("bad") is None
    assert "sess:bad" not in fake.data
