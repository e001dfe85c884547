"""Snapshot storage layer -- pluggable key-value backends for the record collections.

Provides the abstract SnapshotStorage interface with concrete implementations:
- InMemorySnapshotStorage: process-local, for tests and throwaway runs
- JsonFileSnapshotStorage: one JSON file per collection on local disk
- RedisSnapshotStorage: one Redis string key per collection
"""

from src.hookline.config import Settings, StorageBackend
from src.hookline.storage.base import Collection, SnapshotStorage
from src.hookline.storage.json_file import JsonFileSnapshotStorage
from src.hookline.storage.memory import InMemorySnapshotStorage
from src.hookline.storage.redis_store import RedisSnapshotStorage


def build_storage(settings: Settings) -> SnapshotStorage:
    """Create the backend selected by ``settings.STORAGE_BACKEND``."""
    if settings.STORAGE_BACKEND == StorageBackend.redis:
        return RedisSnapshotStorage.from_url(settings.REDIS_URL)
    if settings.STORAGE_BACKEND == StorageBackend.json:
        return JsonFileSnapshotStorage(settings.STORAGE_DIR)
    return InMemorySnapshotStorage()


__all__ = [
    "Collection",
    "SnapshotStorage",
    "InMemorySnapshotStorage",
    "JsonFileSnapshotStorage",
    "RedisSnapshotStorage",
    "build_storage",
]
