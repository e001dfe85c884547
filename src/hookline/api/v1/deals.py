"""REST API endpoints for deals.

Provides CRUD endpoints, the deal board (deals grouped by every stage), and
the stage transition used when a deal card is dropped on another column.
Direct edits through PUT accept any stage/probability pair; the transition
endpoint pins probability for WON (100) and LOST (0).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field

from src.hookline.api.deps import get_record_store, record_errors
from src.hookline.records import views
from src.hookline.records.schemas import (
    ActivityFeedItem,
    Deal,
    DealCreate,
    DealStage,
    StageColumn,
)
from src.hookline.records.stages import StageTransitionEngine
from src.hookline.records.store import RecordStore

router = APIRouter(prefix="/deals", tags=["deals"])


# ── Response Schemas ─────────────────────────────────────────────────────────


class DealDetailResponse(BaseModel):
    """A deal with its contact's name and the activities logged against it."""

    deal: Deal
    contact_name: str
    activities: list[ActivityFeedItem] = Field(default_factory=list)


# ── Request Schemas ──────────────────────────────────────────────────────────


class StageTransitionRequest(BaseModel):
    """Request body for moving a deal to another stage."""

    stage: DealStage


# ── Endpoints ────────────────────────────────────────────────────────────────


@router.get("", response_model=list[Deal])
async def list_deals(store: RecordStore = Depends(get_record_store)) -> list[Deal]:
    """List all deals in stored order."""
    return store.deals


@router.get("/board", response_model=list[StageColumn])
async def get_board(store: RecordStore = Depends(get_record_store)) -> list[StageColumn]:
    """Deal board: one column per stage, in pipeline order."""
    return views.deals_by_stage(store.snapshot())


@router.post("", response_model=Deal, status_code=201)
async def create_deal(
    body: DealCreate,
    store: RecordStore = Depends(get_record_store),
) -> Deal:
    """Create a new deal for an existing contact."""
    with record_errors():
        return store.create_deal(body)


@router.get("/{deal_id}", response_model=DealDetailResponse)
async def get_deal(
    deal_id: str,
    store: RecordStore = Depends(get_record_store),
) -> DealDetailResponse:
    """Get a deal with its activities."""
    with record_errors():
        deal = store.get_deal(deal_id)
    snapshot = store.snapshot()
    return DealDetailResponse(
        deal=deal,
        contact_name=views.contact_name(snapshot, deal.contact_id),
        activities=views.activity_feed(snapshot, views.activities_for_deal(snapshot, deal_id)),
    )


@router.put("/{deal_id}", response_model=Deal)
async def update_deal(
    deal_id: str,
    body: DealCreate,
    store: RecordStore = Depends(get_record_store),
) -> Deal:
    """Replace a deal's fields (stage and probability are taken as given)."""
    with record_errors():
        return store.update_deal({**body.model_dump(), "id": deal_id})


@router.post("/{deal_id}/stage", response_model=Deal)
async def transition_deal(
    deal_id: str,
    body: StageTransitionRequest,
    store: RecordStore = Depends(get_record_store),
) -> Deal:
    """Move a deal to another stage, applying the WON/LOST probability rule."""
    with record_errors():
        return StageTransitionEngine(store).transition(deal_id, body.stage)


@router.delete("/{deal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_deal(
    deal_id: str,
    store: RecordStore = Depends(get_record_store),
) -> Response:
    """Delete a deal together with the activities logged against it."""
    with record_errors():
        store.delete_deal(deal_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
