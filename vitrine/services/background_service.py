"""Background ("fond") setting use cases."""

from __future__ import annotations

import logging
import math
from typing import Any, BinaryIO

from pydantic import BaseModel, ConfigDict, Field, model_validator

from vitrine.repositories.json_storage import StorageError
from vitrine.repositories.setting_store import SettingStore
from vitrine.services.blob_service import BlobIntake, BlobRef

logger = logging.getLogger(__name__)


def _finite(value: Any) -> bool:
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, dict):
        return all(_finite(v) for v in value.values())
    if isinstance(value, list):
        return all(_finite(v) for v in value)
    return True


class FondIn(BaseModel):
    """Setting document accepted by POST /fond."""

    model_config = ConfigDict(extra="allow")

    background: str = Field(min_length=1)

    @model_validator(mode="after")
    def _finite_extras(self) -> "FondIn":
        for key, value in (self.model_extra or {}).items():
            if not _finite(value):
                raise ValueError(f"nombre invalide pour {key!r}")
        return self


class BackgroundService:
    def __init__(self, store: SettingStore, intake: BlobIntake) -> None:
        self.store = store
        self.intake = intake

    def current(self) -> dict[str, Any]:
        return self.store.read()

    def replace(self, payload: FondIn) -> dict[str, Any]:
        document = payload.model_dump()
        self.store.write(document)
        return document

    def upload(self, stream: BinaryIO, content_type: str | None) -> BlobRef:
        """Store the image, then point the background at it."""
        ref = self.intake.accept(stream, content_type)
        try:
            self.store.write({"background": f"url({ref.url_path})"})
        except StorageError:
            logger.error("Dropping blob %s, background not updated", ref.filename)
            ref.path.unlink(missing_ok=True)
            raise
        return ref
