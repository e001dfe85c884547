"""Health check endpoint.

Reports liveness plus the size of each record collection, so a quick curl
shows whether the store loaded the expected snapshot.
"""

from __future__ import annotations

from fastapi import APIRouter, Request

from src.hookline.config import get_settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(request: Request):
    """Basic liveness check.

    No storage backend is contacted -- only the in-memory store is inspected.
    """
    settings = get_settings()
    body: dict = {
        "status": "ok",
        "environment": settings.ENVIRONMENT.value,
        "storage_backend": settings.STORAGE_BACKEND.value,
    }
    store = getattr(request.app.state, "record_store", None)
    if store is None:
        body["status"] = "starting"
        return body
    body["records"] = {
        "contacts": len(store.contacts),
        "deals": len(store.deals),
        "activities": len(store.activities),
    }
    return body
