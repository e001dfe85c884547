"""Pydantic schemas for contacts, deals, activities and the derived views.

Defines all structured types for the record lifecycle:
- Enums: ContactType, ContactTypeFilter, DealStage, ActivityType
- Create payloads: ContactCreate, DealCreate, ActivityCreate
- Stored records: Contact, Deal, Activity, and the Snapshot holding them
- View results: KPISummary, StageSummary, StageColumn, ActivityFeedItem,
  ContactListItem

Create payloads carry the defaults of the "new record" forms. Stored records
extend them with the system-assigned identity and timestamps.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ── Enums ───────────────────────────────────────────────────────────────────


class ContactType(str, Enum):
    """Whether a contact is a private person or a company."""

    INDIVIDUAL = "individual"
    BUSINESS = "business"


class ContactTypeFilter(str, Enum):
    """Type filter accepted by the contact search."""

    ALL = "all"
    INDIVIDUAL = "individual"
    BUSINESS = "business"


class DealStage(str, Enum):
    """Sales pipeline stage for a deal, in canonical order."""

    LEAD = "lead"
    QUALIFIED = "qualified"
    PROPOSAL = "proposal"
    NEGOTIATION = "negotiation"
    WON = "won"
    LOST = "lost"


class ActivityType(str, Enum):
    """Kind of interaction logged against a contact."""

    CALL = "call"
    EMAIL = "email"
    MEETING = "meeting"
    NOTE = "note"


def _strip_required(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


# ── Contacts ────────────────────────────────────────────────────────────────


class ContactCreate(BaseModel):
    """Schema for creating a new contact."""

    name: str
    email: str
    phone: str = ""
    company: str = ""
    type: ContactType = ContactType.INDIVIDUAL
    notes: str = ""

    @field_validator("name", "email")
    @classmethod
    def _required_text(cls, value: str) -> str:
        return _strip_required(value)

    @field_validator("company", "phone", "notes", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class Contact(ContactCreate):
    """A stored contact. ``created_at`` is set once by the store."""

    model_config = ConfigDict(frozen=True)

    id: str
    created_at: date


# ── Deals ───────────────────────────────────────────────────────────────────


class DealCreate(BaseModel):
    """Schema for creating a new deal."""

    title: str
    contact_id: str
    value: float = Field(default=0.0, ge=0.0)
    stage: DealStage = DealStage.LEAD
    probability: int = Field(default=30, ge=0, le=100)
    expected_close: date | None = None
    notes: str = ""

    @field_validator("title", "contact_id")
    @classmethod
    def _required_text(cls, value: str) -> str:
        return _strip_required(value)

    @field_validator("expected_close", mode="before")
    @classmethod
    def _blank_as_none(cls, value: Any) -> Any:
        return None if value == "" else value

    @field_validator("notes", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class Deal(DealCreate):
    """A stored deal. Changed only by replacing it through the store."""

    model_config = ConfigDict(frozen=True)

    id: str


# ── Activities ──────────────────────────────────────────────────────────────


class ActivityCreate(BaseModel):
    """Schema for logging a new activity."""

    type: ActivityType = ActivityType.CALL
    contact_id: str
    deal_id: str | None = None
    description: str

    @field_validator("contact_id", "description")
    @classmethod
    def _required_text(cls, value: str) -> str:
        return _strip_required(value)

    @field_validator("deal_id", mode="before")
    @classmethod
    def _blank_as_none(cls, value: Any) -> Any:
        return None if value == "" else value


class Activity(ActivityCreate):
    """A stored activity. Immutable once logged."""

    model_config = ConfigDict(frozen=True)

    id: str
    date: datetime


# ── Snapshot ────────────────────────────────────────────────────────────────


class Snapshot(BaseModel):
    """The complete record set at one point in time.

    Contacts and deals are kept in insertion order; activities are kept
    newest first.
    """

    contacts: list[Contact] = Field(default_factory=list)
    deals: list[Deal] = Field(default_factory=list)
    activities: list[Activity] = Field(default_factory=list)


# ── View Schemas ────────────────────────────────────────────────────────────


class KPISummary(BaseModel):
    """Dashboard headline figures."""

    total_contacts: int = 0
    active_deals: int = 0
    pipeline_value: float = 0.0
    won_value: float = 0.0
    recent_activities: list[Activity] = Field(default_factory=list)


class StageSummary(BaseModel):
    """Count and summed value of the deals in one pipeline stage."""

    stage: DealStage
    count: int = 0
    total_value: float = 0.0


class StageColumn(BaseModel):
    """One column of the deal board: a stage and its deals in stored order."""

    stage: DealStage
    deals: list[Deal] = Field(default_factory=list)


class ActivityFeedItem(BaseModel):
    """An activity joined with the labels of the records it points at."""

    activity: Activity
    contact_name: str
    deal_title: str = ""


class ContactListItem(BaseModel):
    """A contact row for the contacts table."""

    contact: Contact
    deal_count: int = 0
