"""JSON-file snapshot storage -- one ``<key>.json`` file per collection.

Writes go to a temporary sibling file that is then renamed over the target,
so a crash mid-write leaves the previous snapshot intact.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import structlog

from src.hookline.records.exceptions import StorageReadError, StorageWriteError
from src.hookline.storage.base import Collection, SnapshotStorage

logger = structlog.get_logger(__name__)


class JsonFileSnapshotStorage(SnapshotStorage):
    """Stores each collection as a JSON document inside ``directory``.

    Args:
        directory: Folder holding the snapshot files. Created on first save.
    """

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)

    def path_for(self, key: str) -> Path:
        """Return the file path backing ``key``."""
        return self._directory / f"{key}.json"

    def _read(self, key: str) -> Any:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            with path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as exc:
            raise StorageReadError(key, str(exc)) from exc

    def save(self, key: str, collection: Collection) -> None:
        path = self.path_for(key)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as f:
                json.dump(collection, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as exc:
            raise StorageWriteError(key, str(exc)) from exc
        logger.debug("snapshot_saved", key=key, path=str(path), records=len(collection))
