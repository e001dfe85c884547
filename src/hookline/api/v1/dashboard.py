"""Dashboard endpoint -- KPIs, recent activity and the open pipeline."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from src.hookline.api.deps import get_record_store
from src.hookline.config import get_settings
from src.hookline.records import views
from src.hookline.records.schemas import ActivityFeedItem, KPISummary, StageSummary
from src.hookline.records.store import RecordStore

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


class DashboardResponse(BaseModel):
    """Everything the dashboard page shows."""

    kpis: KPISummary
    recent_activities: list[ActivityFeedItem] = Field(default_factory=list)
    pipeline: list[StageSummary] = Field(default_factory=list)


@router.get("", response_model=DashboardResponse)
async def get_dashboard(store: RecordStore = Depends(get_record_store)) -> DashboardResponse:
    """Headline KPIs, the latest activities and deal totals per open stage."""
    snapshot = store.snapshot()
    kpis = views.compute_kpis(snapshot, recent_limit=get_settings().RECENT_ACTIVITY_LIMIT)
    return DashboardResponse(
        kpis=kpis,
        recent_activities=views.activity_feed(snapshot, kpis.recent_activities),
        pipeline=views.pipeline_by_stage(snapshot),
    )
