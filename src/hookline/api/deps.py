"""FastAPI dependencies shared by the v1 routers."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import HTTPException, Request, status

from src.hookline.records.exceptions import RecordNotFoundError, RecordValidationError
from src.hookline.records.store import RecordStore


def get_record_store(request: Request) -> RecordStore:
    """Retrieve the RecordStore from app.state, 503 if not available."""
    store = getattr(request.app.state, "record_store", None)
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Record store not initialized",
        )
    return store


@contextmanager
def record_errors() -> Iterator[None]:
    """Translate record store errors raised inside the block into HTTP errors."""
    try:
        yield
    except RecordNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except RecordValidationError as exc:
        raise HTTPException(
            status_code=422,
            detail=str(exc),
        ) from exc
