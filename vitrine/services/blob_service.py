"""Uploaded blob intake (background images)."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


class BlobError(Exception):
    """Base exception for blob intake."""


class UnsupportedMediaType(BlobError):
    pass


class PayloadTooLarge(BlobError):
    pass


@dataclass(frozen=True)
class BlobConstraints:
    max_bytes: int = 2 * 1024 * 1024
    allowed_types: dict[str, str] = field(
        default_factory=lambda: {
            "image/jpeg": ".jpg",
            "image/png": ".png",
            "image/gif": ".gif",
        }
    )


@dataclass(frozen=True)
class BlobRef:
    filename: str
    path: Path
    url_path: str


class BlobIntake:
    """Stores uploaded binaries under generated names in one directory."""

    def __init__(self, directory: Path, *, url_prefix: str = "/fonds", constraints: BlobConstraints | None = None) -> None:
        self.directory = Path(directory)
        self.url_prefix = url_prefix.rstrip("/")
        self.constraints = constraints or BlobConstraints()

    def accept(self, stream: BinaryIO, content_type: str | None) -> BlobRef:
        ctype = (content_type or "").split(";", 1)[0].strip().lower()
        ext = self.constraints.allowed_types.get(ctype)
        if not ext:
            raise UnsupportedMediaType("Seulement les images jpg, png, gif sont acceptées")
        self.directory.mkdir(parents=True, exist_ok=True)
        filename = f"{secrets.token_hex(16)}{ext}"
        target = self.directory / filename
        written = 0
        try:
            with target.open("wb") as out:
                while True:
                    chunk = stream.read(_CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self.constraints.max_bytes:
                        raise PayloadTooLarge("Fichier trop volumineux")
                    out.write(chunk)
        except BaseException:
            target.unlink(missing_ok=True)
            raise
        logger.info("Stored blob %s (%d bytes)", filename, written)
        return BlobRef(filename=filename, path=target, url_path=f"{self.url_prefix}/{filename}")
