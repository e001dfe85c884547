"""V1 API router -- aggregates all v1 endpoint routers."""

from __future__ import annotations

from fastapi import APIRouter

from src.hookline.api.v1 import activities, contacts, dashboard, deals

router = APIRouter(prefix="/api/v1")

router.include_router(contacts.router)
router.include_router(deals.router)
router.include_router(activities.router)
router.include_router(dashboard.router)
