"""Identifier and clock collaborators injected into the RecordStore."""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import datetime, timezone

IdSupplier = Callable[[], str]
Clock = Callable[[], datetime]


def new_id() -> str:
    """Return a fresh opaque identifier."""
    return uuid.uuid4().hex


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)
