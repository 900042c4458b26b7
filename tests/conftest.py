from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the vitrine package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fastapi.testclient import TestClient  # noqa: E402

from vitrine.app import create_app  # noqa: E402
from vitrine.core.config import Settings  # noqa: E402

ADMIN_PASSWORD = "s3cret-admin"


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        app_env="test",
        admin_password=ADMIN_PASSWORD,
        data_dir=tmp_path / "data",
        session_ttl_seconds=7200,
        redis_url="",
        login_rate_limit=5,
        login_rate_window_seconds=900,
        upload_max_bytes=1024,
    )


@pytest.fixture()
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture()
def admin(client):
    """Client whose session is already logged in."""
    resp = client.post("/login", json={"password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    return client
