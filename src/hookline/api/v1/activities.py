"""REST API endpoints for activities (append-only, newest first)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from src.hookline.api.deps import get_record_store, record_errors
from src.hookline.records import views
from src.hookline.records.schemas import Activity, ActivityCreate, ActivityFeedItem
from src.hookline.records.store import RecordStore

router = APIRouter(prefix="/activities", tags=["activities"])


@router.get("", response_model=list[ActivityFeedItem])
async def list_activities(
    contact_id: str | None = Query(default=None, description="Only this contact's activities"),
    deal_id: str | None = Query(default=None, description="Only activities logged on this deal"),
    store: RecordStore = Depends(get_record_store),
) -> list[ActivityFeedItem]:
    """Activity timeline, newest first, labelled with contact name and deal title."""
    snapshot = store.snapshot()
    if contact_id is not None:
        activities = views.activities_for_contact(snapshot, contact_id, deal_id)
    elif deal_id is not None:
        activities = views.activities_for_deal(snapshot, deal_id)
    else:
        activities = snapshot.activities
    return views.activity_feed(snapshot, activities)


@router.post("", response_model=Activity, status_code=201)
async def create_activity(
    body: ActivityCreate,
    store: RecordStore = Depends(get_record_store),
) -> Activity:
    """Log an activity against a contact and, optionally, one of its deals."""
    with record_errors():
        return store.create_activity(body)
