"""Sample record set loaded when no collection has been saved yet."""

from __future__ import annotations

from datetime import date, datetime, timezone

from src.hookline.records.schemas import (
    Activity,
    ActivityType,
    Contact,
    ContactType,
    Deal,
    DealStage,
    Snapshot,
)


def _at(year: int, month: int, day: int, hour: int, minute: int) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


SAMPLE_CONTACTS: list[Contact] = [
    Contact(
        id="1",
        name="James Wilson",
        email="james.w@email.com",
        phone="07700 123456",
        company="Wilson Angling Club",
        type=ContactType.BUSINESS,
        notes="Bulk buyer, interested in carp equipment",
        created_at=date(2025, 11, 15),
    ),
    Contact(
        id="2",
        name="Sarah Chen",
        email="s.chen@email.com",
        phone="07700 234567",
        company="",
        type=ContactType.INDIVIDUAL,
        notes="Fly fishing enthusiast",
        created_at=date(2025, 12, 1),
    ),
    Contact(
        id="3",
        name="Mike Thompson",
        email="mike.t@email.com",
        phone="07700 345678",
        company="Lakeside Tackle Shop",
        type=ContactType.BUSINESS,
        notes="Potential wholesale partner",
        created_at=date(2026, 1, 10),
    ),
    Contact(
        id="4",
        name="Emma Davies",
        email="emma.d@email.com",
        phone="07700 456789",
        company="",
        type=ContactType.INDIVIDUAL,
        notes="Regular customer, pike fishing specialist",
        created_at=date(2025, 10, 20),
    ),
    Contact(
        id="5",
        name="Tom Richards",
        email="tom.r@email.com",
        phone="07700 567890",
        company="Sea Breeze Charters",
        type=ContactType.BUSINESS,
        notes="Charter boat operator, needs saltwater gear",
        created_at=date(2026, 1, 25),
    ),
]

SAMPLE_DEALS: list[Deal] = [
    Deal(
        id="1",
        title="Wilson Club Equipment Order",
        value=2500,
        stage=DealStage.PROPOSAL,
        contact_id="1",
        probability=70,
        expected_close=date(2026, 2, 28),
        notes="Annual equipment refresh",
    ),
    Deal(
        id="2",
        title="Fly Fishing Starter Kit",
        value=350,
        stage=DealStage.QUALIFIED,
        contact_id="2",
        probability=80,
        expected_close=date(2026, 2, 15),
        notes="Complete beginner setup",
    ),
    Deal(
        id="3",
        title="Lakeside Wholesale Partnership",
        value=15000,
        stage=DealStage.NEGOTIATION,
        contact_id="3",
        probability=50,
        expected_close=date(2026, 3, 31),
        notes="Monthly supply agreement",
    ),
    Deal(
        id="4",
        title="Pike Lure Collection",
        value=180,
        stage=DealStage.WON,
        contact_id="4",
        probability=100,
        expected_close=date(2026, 1, 20),
        notes="Premium lure set",
    ),
    Deal(
        id="5",
        title="Charter Saltwater Package",
        value=4200,
        stage=DealStage.LEAD,
        contact_id="5",
        probability=30,
        expected_close=date(2026, 4, 15),
        notes="Full charter boat equipment",
    ),
    Deal(
        id="6",
        title="Budget Rod Bundle",
        value=120,
        stage=DealStage.LOST,
        contact_id="2",
        probability=0,
        expected_close=date(2026, 1, 10),
        notes="Customer went with competitor",
    ),
]

# Stored newest first, as the store keeps them.
SAMPLE_ACTIVITIES: list[Activity] = [
    Activity(
        id="1",
        type=ActivityType.CALL,
        contact_id="1",
        deal_id="1",
        description="Discussed equipment needs for upcoming season",
        date=_at(2026, 2, 1, 10, 30),
    ),
    Activity(
        id="2",
        type=ActivityType.EMAIL,
        contact_id="3",
        deal_id="3",
        description="Sent wholesale pricing proposal",
        date=_at(2026, 2, 1, 14, 0),
    ),
    Activity(
        id="3",
        type=ActivityType.MEETING,
        contact_id="5",
        deal_id="5",
        description="On-site visit to Sea Breeze marina",
        date=_at(2026, 1, 30, 9, 0),
    ),
    Activity(
        id="4",
        type=ActivityType.NOTE,
        contact_id="2",
        deal_id="2",
        description="Customer confirmed budget of £400",
        date=_at(2026, 1, 29, 16, 45),
    ),
    Activity(
        id="5",
        type=ActivityType.CALL,
        contact_id="4",
        deal_id="4",
        description="Follow-up on delivered pike lures - very satisfied",
        date=_at(2026, 1, 25, 11, 0),
    ),
    Activity(
        id="6",
        type=ActivityType.EMAIL,
        contact_id="1",
        deal_id="1",
        description="Sent updated quote with volume discount",
        date=_at(2026, 1, 28, 13, 30),
    ),
]


def sample_snapshot() -> Snapshot:
    """Return an independent copy of the sample record set."""
    return Snapshot(
        contacts=[c.model_copy() for c in SAMPLE_CONTACTS],
        deals=[d.model_copy() for d in SAMPLE_DEALS],
        activities=[a.model_copy() for a in SAMPLE_ACTIVITIES],
    )
