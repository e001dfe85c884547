"""Shared fixtures for the record store, views and API tests.

Provides:
- Deterministic id supplier and ticking clock
- In-memory snapshot storage
- Empty and sample-seeded RecordStore instances
- httpx AsyncClient over the FastAPI app with a seeded store
"""

from __future__ import annotations

import itertools
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.hookline.records.seed import sample_snapshot
from src.hookline.records.store import RecordStore
from src.hookline.storage.memory import InMemorySnapshotStorage

START = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


class TickingClock:
    """Clock returning START, then one minute later on every call."""

    def __init__(self, start: datetime = START) -> None:
        self._next = start

    def __call__(self) -> datetime:
        now = self._next
        self._next = now + timedelta(minutes=1)
        return now


def sequential_ids(prefix: str = "id"):
    counter = itertools.count(1)
    return lambda: f"{prefix}-{next(counter)}"


@pytest.fixture
def storage() -> InMemorySnapshotStorage:
    """Fresh in-memory snapshot storage."""
    return InMemorySnapshotStorage()


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def store(storage, clock) -> RecordStore:
    """Empty RecordStore over in-memory storage."""
    return RecordStore(storage, id_supplier=sequential_ids(), clock=clock)


@pytest.fixture
def seeded_store(storage, clock) -> RecordStore:
    """RecordStore loaded with the sample contacts, deals and activities."""
    store = RecordStore(
        storage,
        id_supplier=sequential_ids(),
        clock=clock,
        defaults=sample_snapshot(),
    )
    store.load()
    return store


@pytest_asyncio.fixture
async def client(seeded_store) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for the API, backed by the seeded store."""
    from src.hookline.main import create_app

    app = create_app()
    app.state.record_store = seeded_store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
