"""Single JSON document store (fond.json)."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from vitrine.repositories.json_storage import file_lock, read_json, write_json

DEFAULT_SETTING: dict[str, Any] = {"background": "#f2f2f2"}


class SettingStore:
    """Holds one JSON object; every write replaces it entirely."""

    def __init__(self, path: Path, default: dict[str, Any] | None = None) -> None:
        self.path = Path(path)
        self.default = dict(default if default is not None else DEFAULT_SETTING)

    def read(self) -> dict[str, Any]:
        with file_lock(self.path):
            data = read_json(self.path, default=None)
        if not isinstance(data, dict):
            return dict(self.default)
        return data

    def write(self, document: dict[str, Any]) -> None:
        with file_lock(self.path):
            write_json(self.path, document)
