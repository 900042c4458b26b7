from __future__ import annotations

from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware

from vitrine.services.session_service import SESSION_COOKIE_NAME


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (CSP, anti clickjacking, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault(
            "Content-Security-Policy",
            "default-src 'self'; "
            "img-src 'self' data:; "
            "style-src 'self' 'unsafe-inline'; "
            "script-src 'self' 'unsafe-inline'; "
            "object-src 'none'",
        )
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


class SessionMiddleware(BaseHTTPMiddleware):
    """
    Attach a SessionHandle to ``request.state.session`` for every request.

    The cookie is issued when a login produced a new token and cleared once
    the session was destroyed or the client sent an unknown token.
    Anonymous visitors get no cookie.
    """

    def __init__(self, app, *, secure_cookie: bool, max_age: int) -> None:
        super().__init__(app)
        self._secure_cookie = secure_cookie
        self._max_age = max_age

    async def dispatch(self, request, call_next):
        gate = request.app.state.session_gate
        incoming = request.cookies.get(SESSION_COOKIE_NAME)
        session = await run_in_threadpool(gate.open, incoming)
        request.state.session = session
        response = await call_next(request)
        if session.destroyed or (incoming and session.token != incoming and not session.authenticated):
            response.delete_cookie(SESSION_COOKIE_NAME, path="/")
        elif session.authenticated and session.token != incoming:
            response.set_cookie(
                SESSION_COOKIE_NAME,
                session.token,
                httponly=True,
                secure=self._secure_cookie,
                samesite="lax",
                max_age=self._max_age,
                path="/",
            )
        return response
