from __future__ import annotations

import io

import pytest
from pydantic import ValidationError

from vitrine.repositories.json_storage import StorageIOError
from vitrine.repositories.setting_store import SettingStore
from vitrine.services.background_service import BackgroundService, FondIn
from vitrine.services.blob_service import BlobIntake

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


@pytest.fixture()
def svc(tmp_path):
    return BackgroundService(SettingStore(tmp_path / "fond.json"), BlobIntake(tmp_path / "fonds"))


def test_upload_links_blob_into_setting(svc):
    ref = svc.upload(io.BytesIO(PNG_BYTES), "image/png")
    assert svc.current() == {"background": f"url({ref.url_path})"}


def test_upload_drops_blob_when_setting_write_fails(svc, monkeypatch):
    def failing_write(document):
        raise StorageIOError("disk full")

    monkeypatch.setattr(svc.store, "write", failing_write)

    with pytest.raises(StorageIOError):
        svc.upload(io.BytesIO(PNG_BYTES), "image/png")

    assert list(svc.intake.directory.iterdir()) == []


def test_fond_in_rejects_nested_non_finite_values():
    with pytest.raises(ValidationError):
        FondIn.model_validate({"background": "#000", "layers": [{"alpha": float("nan")}]})
    assert FondIn.model_validate({"background": "#000", "alpha": 0.5}).model_dump() == {
        "background": "#000",
        "alpha": 0.5,
    }
