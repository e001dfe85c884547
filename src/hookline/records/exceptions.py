"""Error taxonomy for the record store and its storage collaborator."""

from __future__ import annotations


class RecordStoreError(Exception):
    """Base class for every error raised by the records layer."""


class RecordValidationError(RecordStoreError, ValueError):
    """Raised when a payload is missing a required field or is malformed.

    ``errors`` holds the per-field details when the failure came from schema
    validation (same shape as pydantic's ``ValidationError.errors()``).
    """

    def __init__(self, message: str, errors: list[dict] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)


class RecordNotFoundError(RecordStoreError, LookupError):
    """Raised when an operation references an id that does not exist."""

    def __init__(self, kind: str, record_id: str | None) -> None:
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} not found: {record_id}")


class StorageReadError(RecordStoreError):
    """Raised when a persisted collection cannot be read or decoded.

    Never escapes ``SnapshotStorage.load`` or ``RecordStore.load``: both
    substitute the default collection.
    """

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        self.reason = reason
        super().__init__(f"Unreadable snapshot for {key}: {reason}")


class StorageWriteError(RecordStoreError):
    """Raised by a storage backend when a collection could not be saved."""

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        self.reason = reason
        super().__init__(f"Failed to save snapshot for {key}: {reason}")
