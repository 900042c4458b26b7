from __future__ import annotations

import io

import pytest

from vitrine.services.blob_service import (
    BlobConstraints,
    BlobIntake,
    PayloadTooLarge,
    UnsupportedMediaType,
)

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture()
def intake(tmp_path):
    return BlobIntake(tmp_path / "fonds", constraints=BlobConstraints(max_bytes=128))


def test_accept_stores_blob_under_generated_name(intake):
    ref = intake.accept(io.BytesIO(PNG_BYTES), "image/png")

    assert ref.filename.endswith(".png")
    assert ref.path.read_bytes() == PNG_BYTES
    assert ref.url_path == f"/fonds/{ref.filename}"


def test_generated_names_are_unique(intake):
    a = intake.accept(io.BytesIO(PNG_BYTES), "image/png")
    b = intake.accept(io.BytesIO(PNG_BYTES), "image/png")
    assert a.filename != b.filename


def test_content_type_parameters_are_ignored(intake):
    ref = intake.accept(io.BytesIO(b"GIF89a"), "Image/GIF; charset=binary")
    assert ref.filename.endswith(".gif")


@pytest.mark.parametrize("ctype", ["text/plain", "image/svg+xml", "", None])
def test_rejects_unsupported_type(intake, ctype):
    with pytest.raises(UnsupportedMediaType):
        intake.accept(io.BytesIO(PNG_BYTES), ctype)
    assert not intake.directory.exists() or list(intake.directory.iterdir()) == []


def test_rejects_oversized_blob_without_leftovers(intake):
    with pytest.raises(PayloadTooLarge):
        intake.accept(io.BytesIO(b"x" * 129), "image/jpeg")
    assert list(intake.directory.iterdir()) == []


def test_accepts_blob_at_exact_limit(intake):
    ref = intake.accept(io.BytesIO(b"x" * 128), "image/jpeg")
    assert ref.path.stat().st_size == 128
