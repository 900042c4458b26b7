"""Application factory for the Vitrine admin panel."""

from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from vitrine.core.config import Settings, get_settings
from vitrine.core.middleware import SecurityHeadersMiddleware, SessionMiddleware
from vitrine.core.rate_limiter import RateLimiter
from vitrine.repositories.record_store import RecordStore
from vitrine.repositories.setting_store import SettingStore
from vitrine.routers import articles as articles_router
from vitrine.routers import auth as auth_router
from vitrine.routers import fond as fond_router
from vitrine.services.article_service import ArticleService
from vitrine.services.background_service import BackgroundService
from vitrine.services.blob_service import BlobConstraints, BlobIntake
from vitrine.services.session_service import (
    InMemorySessionStore,
    RedisSessionStore,
    SessionGate,
    SessionStore,
)

logger = logging.getLogger(__name__)

BASE = os.path.dirname(__file__)


def _validation_errors(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())[1:]),
            "message": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    return JSONResponse({"errors": errors}, status_code=400)


def _session_store(settings: Settings) -> SessionStore:
    if settings.redis_url:
        logger.info("Using Redis session store")
        return RedisSessionStore(url=settings.redis_url)
    return InMemorySessionStore()


def create_app(settings: Settings | None = None, *, session_store: SessionStore | None = None) -> FastAPI:
    """Factory compatible with ``uvicorn --factory vitrine.app:create_app``."""
    settings = settings or get_settings()
    if not settings.admin_password:
        raise RuntimeError("ADMIN_PASSWORD must be configured.")

    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.uploads_dir.mkdir(parents=True, exist_ok=True)

    app = FastAPI(title="Vitrine Admin")
    app.state.settings = settings
    app.state.templates = Jinja2Templates(directory=os.path.join(BASE, "templates"))
    app.state.rate_limiter = RateLimiter()
    app.state.session_gate = SessionGate(
        session_store or _session_store(settings),
        admin_secret=settings.admin_password,
        ttl_seconds=settings.session_ttl_seconds,
    )
    app.state.article_service = ArticleService(RecordStore(settings.articles_file))
    app.state.background_service = BackgroundService(
        SettingStore(settings.fond_file),
        BlobIntake(
            settings.uploads_dir,
            url_prefix="/fonds",
            constraints=BlobConstraints(max_bytes=settings.upload_max_bytes),
        ),
    )

    app.add_exception_handler(RequestValidationError, _validation_errors)
    app.add_middleware(
        SessionMiddleware,
        secure_cookie=settings.app_env == "prod",
        max_age=settings.session_ttl_seconds,
    )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")

    app.mount("/fonds", StaticFiles(directory=str(settings.uploads_dir)), name="fonds")
    app.include_router(auth_router.router)
    app.include_router(articles_router.router)
    app.include_router(fond_router.router)
    return app
