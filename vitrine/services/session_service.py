"""Session helpers (issue tokens, persist the authenticated flag, gate access)."""

from __future__ import annotations

import json
import logging
import secrets
import threading
import time
from dataclasses import dataclass, field
from typing import Optional, Protocol

import redis

from vitrine.core.security import verify_password

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "vitrine_sid"


class SessionError(Exception):
    """Base class for session gate failures."""


class Unauthenticated(SessionError):
    pass


class MissingPassword(SessionError):
    pass


class InvalidCredentials(SessionError):
    pass


@dataclass
class SessionHandle:
    """Per-request view of one client session."""

    token: str
    authenticated: bool = False
    expires_at: float = 0.0
    destroyed: bool = False

    def to_json(self) -> str:
        return json.dumps({"authenticated": self.authenticated, "expires_at": self.expires_at})

    @classmethod
    def from_json(cls, token: str, raw: str | bytes) -> "SessionHandle":
        data = json.loads(raw)
        return cls(
            token=token,
            authenticated=bool(data.get("authenticated")),
            expires_at=float(data.get("expires_at") or 0),
        )


class SessionStore(Protocol):
    """Minimal persistence interface for session handles."""

    def get(self, token: str) -> Optional[SessionHandle]:
        ...

    def save(self, handle: SessionHandle) -> None:
        ...

    def delete(self, token: str) -> None:
        ...


@dataclass
class InMemorySessionStore:
    """Process-local sessions; expired entries are purged lazily."""

    items: dict[str, SessionHandle] = field(default_factory=dict)

    def __post_init__(self):
        self._lock = threading.Lock()

    def get(self, token: str) -> Optional[SessionHandle]:
        now = time.time()
        with self._lock:
            handle = self.items.get(token)
            if handle and handle.expires_at < now:
                del self.items[token]
                return None
            if handle is None:
                return None
            return SessionHandle(token=handle.token, authenticated=handle.authenticated, expires_at=handle.expires_at)

    def save(self, handle: SessionHandle) -> None:
        now = time.time()
        with self._lock:
            for token in [t for t, h in self.items.items() if h.expires_at < now]:
                del self.items[token]
            self.items[handle.token] = SessionHandle(
                token=handle.token,
                authenticated=handle.authenticated,
                expires_at=handle.expires_at,
            )

    def delete(self, token: str) -> None:
        with self._lock:
            self.items.pop(token, None)


@dataclass
class RedisSessionStore:
    """Redis-backed sessions so several server processes share login state."""

    url: str
    prefix: str = "sess:"

    def __post_init__(self):
        self.client = redis.Redis.from_url(self.url)

    def _key(self, token: str) -> str:
        return f"{self.prefix}{token}"

    def get(self, token: str) -> Optional[SessionHandle]:
        raw = self.client.get(self._key(token))
        if raw is None:
            return None
        try:
            return SessionHandle.from_json(token, raw)
        except ValueError:
            self.client.delete(self._key(token))
            return None

    def save(self, handle: SessionHandle) -> None:
        ttl = max(1, int(handle.expires_at - time.time()))
        self.client.setex(self._key(handle.token), ttl, handle.to_json())

    def delete(self, token: str) -> None:
        self.client.delete(self._key(token))


class SessionGate:
    """Login/logout and the authenticated check used before protected operations."""

    def __init__(self, store: SessionStore, *, admin_secret: str, ttl_seconds: int = 7200) -> None:
        self.store = store
        self.admin_secret = admin_secret
        self.ttl_seconds = ttl_seconds

    def _expiry(self) -> float:
        return time.time() + self.ttl_seconds

    def open(self, token: str | None) -> SessionHandle:
        """
        Load the session behind ``token`` or start a fresh unauthenticated one.

        Fresh sessions are not written to the store; login() persists them.
        """
        if token:
            handle = self.store.get(token)
            if handle:
                return handle
        return SessionHandle(token=secrets.token_urlsafe(32), expires_at=self._expiry())

    def login(self, session: SessionHandle, password: str | None) -> SessionHandle:
        if not password:
            raise MissingPassword("Mot de passe manquant")
        if not verify_password(password, self.admin_secret):
            logger.info("Rejected admin login attempt")
            raise InvalidCredentials("Mot de passe incorrect")
        # new token on privilege change
        self.store.delete(session.token)
        session.token = secrets.token_urlsafe(32)
        session.authenticated = True
        session.expires_at = self._expiry()
        self.store.save(session)
        return session

    def require_authenticated(self, session: SessionHandle) -> None:
        if not session.authenticated or session.destroyed:
            raise Unauthenticated("Non authentifié")

    def logout(self, session: SessionHandle) -> None:
        self.store.delete(session.token)
        session.authenticated = False
        session.destroyed = True

    def check_status(self, session: SessionHandle) -> bool:
        return session.authenticated and not session.destroyed
