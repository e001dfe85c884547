"""Redis-backed snapshot storage.

Each collection lives under a single string key holding its JSON encoding.
Uses the synchronous redis client: the record store is synchronous and every
mutation persists before returning.
"""

from __future__ import annotations

import json
from typing import Any

import redis
import structlog

from src.hookline.records.exceptions import StorageReadError, StorageWriteError
from src.hookline.storage.base import Collection, SnapshotStorage

logger = structlog.get_logger(__name__)


class RedisSnapshotStorage(SnapshotStorage):
    """Snapshot storage over a Redis connection.

    Args:
        client: A ``redis.Redis`` client created with ``decode_responses=True``.
    """

    def __init__(self, client: redis.Redis) -> None:
        self._redis = client

    @classmethod
    def from_url(cls, url: str) -> RedisSnapshotStorage:
        """Create storage from a Redis URL (e.g. ``redis://localhost:6379/0``)."""
        return cls(redis.Redis.from_url(url, decode_responses=True))

    def _read(self, key: str) -> Any:
        try:
            raw = self._redis.get(key)
        except redis.RedisError as exc:
            raise StorageReadError(key, str(exc)) from exc
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as exc:
            raise StorageReadError(key, str(exc)) from exc

    def save(self, key: str, collection: Collection) -> None:
        try:
            self._redis.set(key, json.dumps(collection))
        except (redis.RedisError, TypeError, ValueError) as exc:
            raise StorageWriteError(key, str(exc)) from exc
        logger.debug("snapshot_saved", key=key, records=len(collection))

    def close(self) -> None:
        """Close the underlying connection pool."""
        self._redis.close()
