"""REST API endpoints for contacts.

Contact deletion cascades to the contact's deals and activities.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel, Field

from src.hookline.api.deps import get_record_store, record_errors
from src.hookline.records import views
from src.hookline.records.schemas import (
    ActivityFeedItem,
    Contact,
    ContactCreate,
    ContactListItem,
    ContactTypeFilter,
    Deal,
)
from src.hookline.records.store import RecordStore

router = APIRouter(prefix="/contacts", tags=["contacts"])


# ── Response Schemas ─────────────────────────────────────────────────────────


class ContactDetailResponse(BaseModel):
    """A contact with its deals and activity timeline."""

    contact: Contact
    deals: list[Deal] = Field(default_factory=list)
    activities: list[ActivityFeedItem] = Field(default_factory=list)


# ── Endpoints ────────────────────────────────────────────────────────────────


@router.get("", response_model=list[ContactListItem])
async def list_contacts(
    q: str = Query(default="", description="Case-insensitive text in name, email or company"),
    type_filter: ContactTypeFilter = Query(
        default=ContactTypeFilter.ALL, alias="type", description="Contact type filter"
    ),
    store: RecordStore = Depends(get_record_store),
) -> list[ContactListItem]:
    """List contacts matching the search query and type filter, with deal counts."""
    return views.contact_list(store.snapshot(), q, type_filter)


@router.post("", response_model=Contact, status_code=201)
async def create_contact(
    body: ContactCreate,
    store: RecordStore = Depends(get_record_store),
) -> Contact:
    """Create a new contact."""
    with record_errors():
        return store.create_contact(body)


@router.get("/{contact_id}", response_model=ContactDetailResponse)
async def get_contact(
    contact_id: str,
    store: RecordStore = Depends(get_record_store),
) -> ContactDetailResponse:
    """Get a contact with its deals and activities."""
    with record_errors():
        contact = store.get_contact(contact_id)
    snapshot = store.snapshot()
    return ContactDetailResponse(
        contact=contact,
        deals=views.deals_for_contact(snapshot, contact_id),
        activities=views.activity_feed(
            snapshot, views.activities_for_contact(snapshot, contact_id)
        ),
    )


@router.put("/{contact_id}", response_model=Contact)
async def update_contact(
    contact_id: str,
    body: ContactCreate,
    store: RecordStore = Depends(get_record_store),
) -> Contact:
    """Replace a contact's fields. The creation date is kept."""
    with record_errors():
        return store.update_contact({**body.model_dump(), "id": contact_id})


@router.delete("/{contact_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contact(
    contact_id: str,
    store: RecordStore = Depends(get_record_store),
) -> Response:
    """Delete a contact together with its deals and activities."""
    with record_errors():
        store.delete_contact(contact_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
