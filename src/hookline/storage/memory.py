"""In-process snapshot storage for tests and throwaway runs."""

from __future__ import annotations

import json
from typing import Any

from src.hookline.records.exceptions import StorageReadError, StorageWriteError
from src.hookline.storage.base import Collection, SnapshotStorage


class InMemorySnapshotStorage(SnapshotStorage):
    """Keeps each collection as an encoded JSON string in a dict.

    Encoding on save means later mutation of the saved list cannot leak into
    storage, and a non-serializable record fails the same way it would with
    the durable backends.
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def _read(self, key: str) -> Any:
        raw = self._data.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as exc:
            raise StorageReadError(key, str(exc)) from exc

    def save(self, key: str, collection: Collection) -> None:
        try:
            self._data[key] = json.dumps(collection)
        except (TypeError, ValueError) as exc:
            raise StorageWriteError(key, str(exc)) from exc

    def raw(self, key: str) -> str | None:
        """Return the encoded content stored under ``key``."""
        return self._data.get(key)
