"""
JSON file persistence primitives.

Every backing file is read and rewritten as a whole. Callers that perform a
read-modify-write cycle must hold the lock returned by file_lock() for the
whole cycle; the lock is shared by every store pointing at the same path.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

_MISSING = object()

_locks: dict[str, threading.Lock] = {}
_locks_guard = threading.Lock()


class StorageError(Exception):
    """Base class for persistence failures."""


class StorageIOError(StorageError):
    """Raised when the backing file cannot be read or written."""


class StorageCorrupt(StorageError):
    """Raised when the backing file exists but does not hold the expected JSON."""


def file_lock(path: Path) -> threading.Lock:
    """Return the process-wide lock guarding ``path``."""
    key = str(Path(path).resolve())
    with _locks_guard:
        lock = _locks.get(key)
        if lock is None:
            lock = threading.Lock()
            _locks[key] = lock
        return lock


def _reject_constant(token: str) -> Any:
    raise ValueError(f"non-standard JSON constant {token}")


def read_json(path: Path, default: Any = _MISSING) -> Any:
    """
    Load the JSON stored at ``path``.

    A missing file yields ``default``. An unparsable file raises
    StorageCorrupt unless a default was given, in which case it degrades to
    the default.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        if default is _MISSING:
            return None
        return default
    except OSError as exc:
        raise StorageIOError(f"Lecture impossible: {path}") from exc
    try:
        return json.loads(raw, parse_constant=_reject_constant)
    except ValueError as exc:
        if default is _MISSING:
            raise StorageCorrupt(f"JSON invalide: {path}") from exc
        logger.warning("Ignoring unparsable JSON in %s", path)
        return default


def write_json(path: Path, data: Any) -> None:
    """Overwrite ``path`` with pretty-printed JSON through a temporary sibling file."""
    try:
        payload = json.dumps(data, ensure_ascii=False, indent=2, allow_nan=False)
    except ValueError as exc:
        # output stays strict JSON: no NaN or Infinity
        raise StorageIOError(f"Valeur non serialisable: {path}") from exc
    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
        os.replace(tmp_name, path)
    except OSError as exc:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        logger.error("Failed to write %s: %s", path, exc)
        raise StorageIOError(f"Ecriture impossible: {path}") from exc
