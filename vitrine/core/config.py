"""
Configuration helpers for the Vitrine admin panel.

Routers/services never read os.environ directly; they receive a Settings
instance built here.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    admin_password: str
    data_dir: Path
    session_ttl_seconds: int
    redis_url: str
    login_rate_limit: int
    login_rate_window_seconds: int
    upload_max_bytes: int
    trust_proxy: bool = False

    @property
    def articles_file(self) -> Path:
        return self.data_dir / "articles.json"

    @property
    def fond_file(self) -> Path:
        return self.data_dir / "fond.json"

    @property
    def uploads_dir(self) -> Path:
        return self.data_dir / "fonds"


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str | None, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        admin_password=os.getenv("ADMIN_PASSWORD", ""),
        data_dir=Path(os.getenv("DATA_DIR") or "data").resolve(),
        session_ttl_seconds=max(60, _int(os.getenv("SESSION_TTL_SECONDS"), 7200)),
        redis_url=(os.getenv("REDIS_URL") or "").strip(),
        login_rate_limit=_int(os.getenv("LOGIN_RATE_LIMIT"), 5),
        login_rate_window_seconds=_int(os.getenv("LOGIN_RATE_WINDOW_SECONDS"), 15 * 60),
        upload_max_bytes=_int(os.getenv("UPLOAD_MAX_BYTES"), 2 * 1024 * 1024),
        trust_proxy=_bool(os.getenv("TRUST_PROXY")),
    )
