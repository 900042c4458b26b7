"""
Dependency wiring for the FastAPI routers.

Everything lives on ``app.state`` (built by create_app) so tests can build
isolated apps over temporary directories.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request

from vitrine.core.config import Settings
from vitrine.core.rate_limiter import RateLimiter
from vitrine.services.article_service import ArticleService
from vitrine.services.background_service import BackgroundService
from vitrine.services.session_service import SessionGate, SessionHandle, Unauthenticated


def _state_attr(request: Request, name: str):
    value = getattr(getattr(request.app, "state", None), name, None)
    if value is None:
        raise RuntimeError(f"{name} not configured")
    return value


def get_session_gate(request: Request) -> SessionGate:
    return _state_attr(request, "session_gate")


def get_rate_limiter(request: Request) -> RateLimiter:
    return _state_attr(request, "rate_limiter")


def get_article_service(request: Request) -> ArticleService:
    return _state_attr(request, "article_service")


def get_background_service(request: Request) -> BackgroundService:
    return _state_attr(request, "background_service")


def current_session(request: Request) -> SessionHandle:
    session = getattr(request.state, "session", None)
    if session is None:
        raise RuntimeError("SessionMiddleware not installed")
    return session


def require_session(
    session: SessionHandle = Depends(current_session),
    gate: SessionGate = Depends(get_session_gate),
) -> SessionHandle:
    """Reject the request before any store is touched when the session is not logged in."""
    try:
        gate.require_authenticated(session)
    except Unauthenticated as exc:
        raise HTTPException(401, str(exc))
    return session


def get_app_settings(request: Request) -> Settings:
    return _state_attr(request, "settings")
