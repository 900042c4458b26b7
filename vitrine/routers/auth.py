from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import HTMLResponse, RedirectResponse
from starlette.concurrency import run_in_threadpool

from vitrine.core.config import Settings
from vitrine.core.rate_limiter import RateLimiter, rate_limit_ip
from vitrine.dependencies import current_session, get_app_settings, get_rate_limiter, get_session_gate
from vitrine.services.session_service import (
    InvalidCredentials,
    MissingPassword,
    SessionGate,
    SessionHandle,
)

router = APIRouter(tags=["auth"])


def _templates(request: Request):
    tpl = getattr(getattr(request.app, "state", None), "templates", None)
    if tpl:
        return tpl
    raise RuntimeError("Templates not configured")


async def _submitted_password(request: Request) -> str | None:
    """Accept both JSON bodies (admin front-end) and classic form posts."""
    ctype = (request.headers.get("content-type") or "").lower()
    if ctype.startswith("application/json"):
        try:
            payload = await request.json()
        except ValueError:
            return None
        value = payload.get("password") if isinstance(payload, dict) else None
    else:
        form = await request.form()
        value = form.get("password")
    return value if isinstance(value, str) else None


@router.get("/login", response_class=HTMLResponse)
def login_page(request: Request):
    return _templates(request).TemplateResponse(request, "login.html", {})


@router.post("/login")
async def do_login(
    request: Request,
    session: SessionHandle = Depends(current_session),
    gate: SessionGate = Depends(get_session_gate),
    limiter: RateLimiter = Depends(get_rate_limiter),
    settings: Settings = Depends(get_app_settings),
):
    rate_limit_ip(
        limiter,
        request,
        "login",
        limit=settings.login_rate_limit,
        window_seconds=settings.login_rate_window_seconds,
        trust_proxy=settings.trust_proxy,
    )
    password = await _submitted_password(request)
    try:
        await run_in_threadpool(gate.login, session, password)
    except MissingPassword as exc:
        raise HTTPException(400, str(exc))
    except InvalidCredentials as exc:
        raise HTTPException(401, str(exc))
    return Response(status_code=200)


@router.post("/logout")
def logout(
    session: SessionHandle = Depends(current_session),
    gate: SessionGate = Depends(get_session_gate),
):
    gate.logout(session)
    return RedirectResponse("/login", status_code=303)


@router.get("/check-session")
def check_session(
    session: SessionHandle = Depends(current_session),
    gate: SessionGate = Depends(get_session_gate),
):
    return Response(status_code=200 if gate.check_status(session) else 401)
