"""FastAPI application factory.

Creates the app with logging middleware, CORS, the health route, the v1 API
router, and a lifespan that owns the RecordStore: loaded from snapshot
storage at startup, flushed back at shutdown.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.requests import Request
from fastapi.responses import Response

from src.hookline.api.middleware.logging import LoggingMiddleware, configure_structlog
from src.hookline.api.v1 import health
from src.hookline.api.v1.router import router as v1_router
from src.hookline.config import Settings, get_settings
from src.hookline.core.monitoring import get_metrics_response
from src.hookline.records.seed import sample_snapshot
from src.hookline.records.store import RecordStore
from src.hookline.storage import SnapshotStorage, build_storage

logger = structlog.get_logger(__name__)


def build_record_store(settings: Settings, storage: SnapshotStorage) -> RecordStore:
    """Create the RecordStore for ``storage`` and load its collections."""
    store = RecordStore(
        storage,
        key_prefix=settings.STORAGE_KEY_PREFIX,
        defaults=sample_snapshot() if settings.SEED_SAMPLE_DATA else None,
    )
    store.load()
    return store


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: load the record store on startup, flush it on shutdown."""
    settings = get_settings()
    configure_structlog()

    storage = build_storage(settings)
    store = build_record_store(settings, storage)
    app.state.record_store = store
    logger.info(
        "application_started",
        environment=settings.ENVIRONMENT.value,
        storage_backend=settings.STORAGE_BACKEND.value,
    )

    yield

    store.flush()
    close = getattr(storage, "close", None)
    if close is not None:
        close()
    app.state.record_store = None
    logger.info("application_stopped")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Hook & Line CRM API",
        version="0.1.0",
        description="Contacts, deals and activities with pipeline and dashboard views",
        lifespan=lifespan,
    )

    # Middleware is added in reverse order (last added = outermost)

    # CORS middleware
    if settings.CORS_ALLOWED_ORIGINS == "*":
        origins = ["*"]
    else:
        origins = [o.strip() for o in settings.CORS_ALLOWED_ORIGINS.split(",")]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Logging middleware (logs every request with timing)
    app.add_middleware(LoggingMiddleware)

    app.include_router(health.router)
    app.include_router(v1_router)

    # Prometheus metrics endpoint (infrastructure route, outside v1 router)
    @app.get("/metrics", include_in_schema=False)
    async def metrics(request: Request) -> Response:
        """Prometheus metrics endpoint."""
        return get_metrics_response()

    return app


# Module-level app for uvicorn
app = create_app()
