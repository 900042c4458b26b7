"""JSON-array backed record collection (articles.json)."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Any, Callable

from vitrine.repositories.json_storage import (
    StorageCorrupt,
    file_lock,
    read_json,
    write_json,
)

Record = dict[str, Any]


class RecordNotFound(Exception):
    """Raised when no record carries the requested id."""

    def __init__(self, record_id: int):
        super().__init__(f"Record {record_id} not found")
        self.record_id = record_id


def _now_ms() -> int:
    return int(time.time() * 1000)


class RecordStore:
    """CRUD over a JSON array of records identified by an integer ``id``."""

    def __init__(self, path: Path, *, clock: Callable[[], int] = _now_ms) -> None:
        self.path = Path(path)
        self._clock = clock

    @property
    def lock(self):
        return file_lock(self.path)

    # -------------------------- reads --------------------------
    def list(self) -> list[Record]:
        """Current records; a missing or corrupt file reads as an empty collection."""
        with self.lock:
            data = read_json(self.path, default=[])
        if not isinstance(data, list):
            return []
        return [r for r in data if isinstance(r, dict)]

    def get(self, record_id: int) -> Record:
        for record in self.list():
            if record.get("id") == record_id:
                return record
        raise RecordNotFound(record_id)

    # -------------------------- mutations --------------------------
    def _load_for_update(self) -> list[Record]:
        data = read_json(self.path)
        if data is None:
            return []
        if not isinstance(data, list) or not all(isinstance(r, dict) for r in data):
            raise StorageCorrupt(f"Collection attendue dans {self.path}")
        return data

    def _next_id(self, records: list[Record]) -> int:
        # Timestamp-shaped ids, bumped past the highest one so that two
        # creations within the same millisecond never collide.
        highest = max((r["id"] for r in records if isinstance(r.get("id"), int)), default=0)
        return max(self._clock(), highest + 1)

    def create(self, attrs: Record) -> Record:
        with self.lock:
            records = self._load_for_update()
            record = {**attrs, "id": self._next_id(records)}
            records.append(record)
            write_json(self.path, records)
        return record

    def update(self, record_id: int, attrs: Record) -> Record:
        with self.lock:
            records = self._load_for_update()
            for index, current in enumerate(records):
                if current.get("id") == record_id:
                    break
            else:
                raise RecordNotFound(record_id)
            record = {**attrs, "id": record_id}
            records[index] = record
            write_json(self.path, records)
        return record

    def delete(self, record_id: int) -> None:
        with self.lock:
            records = self._load_for_update()
            remaining = [r for r in records if r.get("id") != record_id]
            if len(remaining) == len(records):
                raise RecordNotFound(record_id)
            write_json(self.path, remaining)
