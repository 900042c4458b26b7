"""
Persistence adapters.

Articles and the background setting live in flat JSON files. Services
depend on RecordStore / SettingStore rather than touching the files.
"""

from vitrine.repositories.json_storage import StorageCorrupt, StorageError, StorageIOError
from vitrine.repositories.record_store import RecordNotFound, RecordStore
from vitrine.repositories.setting_store import DEFAULT_SETTING, SettingStore

__all__ = [
    "DEFAULT_SETTING",
    "RecordNotFound",
    "RecordStore",
    "SettingStore",
    "StorageCorrupt",
    "StorageError",
    "StorageIOError",
]
