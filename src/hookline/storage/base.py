"""Snapshot storage abstract base class -- the key-value contract every backend implements.

The RecordStore persists each record collection (contacts, deals, activities)
under its own key as a list of JSON-compatible dicts. Backends only move those
lists in and out of durable storage; schema validation stays in the store.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import structlog

from src.hookline.records.exceptions import StorageReadError

logger = structlog.get_logger(__name__)

Collection = list[dict[str, Any]]


class SnapshotStorage(ABC):
    """Abstract interface for durable collection storage.

    Subclasses implement ``_read`` and ``save``. ``load`` wraps ``_read`` so
    that a missing key or unreadable content always yields the caller's
    default instead of an exception.

    Methods:
        load: Return the stored collection for a key, or the default.
        save: Replace the stored collection for a key (full list, not a delta).
    """

    def load(self, key: str, default: Collection) -> Collection:
        """Return the collection stored under ``key``, or ``default``."""
        try:
            value = self._read(key)
        except StorageReadError as exc:
            logger.warning("snapshot_unreadable", key=key, reason=exc.reason)
            return default
        if value is None:
            return default
        if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
            logger.warning("snapshot_unreadable", key=key, reason="not a list of records")
            return default
        return value

    @abstractmethod
    def _read(self, key: str) -> Any:
        """Return the decoded value under ``key``, None if missing.

        Raises:
            StorageReadError: If the stored content cannot be read or decoded.
        """
        ...

    @abstractmethod
    def save(self, key: str, collection: Collection) -> None:
        """Store the complete collection under ``key``.

        Raises:
            StorageWriteError: If the backend could not persist the data.
        """
        ...
