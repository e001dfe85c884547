"""Derived views over a record snapshot -- KPIs, pipeline, board, search, projections.

Every function here is pure: it reads the records it is given and returns new
objects. Filters are stable, so results keep the stored order (contacts and
deals by insertion, activities newest first).
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from src.hookline.records.schemas import (
    Activity,
    ActivityFeedItem,
    Contact,
    ContactListItem,
    ContactTypeFilter,
    Deal,
    DealStage,
    KPISummary,
    Snapshot,
    StageColumn,
    StageSummary,
)
from src.hookline.records.stages import PIPELINE_STAGES, STAGES, is_active

UNKNOWN_CONTACT = "Unknown"


# ── Dashboard ───────────────────────────────────────────────────────────────


def compute_kpis(snapshot: Snapshot, recent_limit: int = 5) -> KPISummary:
    """Compute the dashboard headline figures.

    ``pipeline_value`` weights each open deal's value by its probability and
    is not rounded. ``won_value`` sums every WON deal regardless of date.
    ``recent_activities`` is the head of the activity list as stored, which
    the store keeps newest first.
    """
    active = [d for d in snapshot.deals if is_active(d)]
    return KPISummary(
        total_contacts=len(snapshot.contacts),
        active_deals=len(active),
        pipeline_value=sum(d.value * (d.probability / 100) for d in active),
        won_value=sum(d.value for d in snapshot.deals if d.stage == DealStage.WON),
        recent_activities=list(snapshot.activities[:recent_limit]),
    )


def pipeline_by_stage(snapshot: Snapshot) -> list[StageSummary]:
    """Deal count and total value for each open stage, in pipeline order."""
    summaries = []
    for stage in PIPELINE_STAGES:
        stage_deals = [d for d in snapshot.deals if d.stage == stage]
        summaries.append(
            StageSummary(
                stage=stage,
                count=len(stage_deals),
                total_value=sum(d.value for d in stage_deals),
            )
        )
    return summaries


def deals_by_stage(snapshot: Snapshot) -> list[StageColumn]:
    """Deal board: every stage, WON and LOST included, with its deals."""
    return [
        StageColumn(stage=stage, deals=[d for d in snapshot.deals if d.stage == stage])
        for stage in STAGES
    ]


# ── Contact Search ──────────────────────────────────────────────────────────


def _matches_query(contact: Contact, needle: str) -> bool:
    return any(
        needle in field.lower()
        for field in (contact.name, contact.email, contact.company or "")
    )


def filter_contacts(
    contacts: Iterable[Contact],
    query: str = "",
    type_filter: ContactTypeFilter | str = ContactTypeFilter.ALL,
) -> list[Contact]:
    """Contacts matching a free-text query and a type filter.

    The query matches as a case-insensitive substring of name, email or
    company; an empty query matches everything.

    Raises:
        ValueError: If ``type_filter`` is not all/individual/business.
    """
    type_filter = ContactTypeFilter(type_filter)
    needle = query.lower()
    return [
        c
        for c in contacts
        if (not needle or _matches_query(c, needle))
        and (type_filter == ContactTypeFilter.ALL or c.type.value == type_filter.value)
    ]


def deal_counts_by_contact(snapshot: Snapshot) -> dict[str, int]:
    """Number of deals per contact id (contacts without deals are absent)."""
    return dict(Counter(d.contact_id for d in snapshot.deals))


def contact_list(
    snapshot: Snapshot,
    query: str = "",
    type_filter: ContactTypeFilter | str = ContactTypeFilter.ALL,
) -> list[ContactListItem]:
    """Filtered contacts paired with their deal counts, for the contacts table."""
    counts = deal_counts_by_contact(snapshot)
    return [
        ContactListItem(contact=c, deal_count=counts.get(c.id, 0))
        for c in filter_contacts(snapshot.contacts, query, type_filter)
    ]


# ── Per-Record Projections ──────────────────────────────────────────────────


def deals_for_contact(snapshot: Snapshot, contact_id: str) -> list[Deal]:
    return [d for d in snapshot.deals if d.contact_id == contact_id]


def activities_for_contact(
    snapshot: Snapshot, contact_id: str, deal_id: str | None = None
) -> list[Activity]:
    """Activities of a contact, optionally narrowed to one of its deals."""
    return [
        a
        for a in snapshot.activities
        if a.contact_id == contact_id and (deal_id is None or a.deal_id == deal_id)
    ]


def activities_for_deal(snapshot: Snapshot, deal_id: str) -> list[Activity]:
    return [a for a in snapshot.activities if a.deal_id == deal_id]


# ── Labels ──────────────────────────────────────────────────────────────────


def contact_name(snapshot: Snapshot, contact_id: str) -> str:
    return next((c.name for c in snapshot.contacts if c.id == contact_id), UNKNOWN_CONTACT)


def deal_title(snapshot: Snapshot, deal_id: str | None) -> str:
    if deal_id is None:
        return ""
    return next((d.title for d in snapshot.deals if d.id == deal_id), "")


def activity_feed(
    snapshot: Snapshot, activities: Iterable[Activity] | None = None
) -> list[ActivityFeedItem]:
    """Activities (all of them by default) labelled with contact name and deal title."""
    names = {c.id: c.name for c in snapshot.contacts}
    titles = {d.id: d.title for d in snapshot.deals}
    source = snapshot.activities if activities is None else activities
    return [
        ActivityFeedItem(
            activity=a,
            contact_name=names.get(a.contact_id, UNKNOWN_CONTACT),
            deal_title=titles.get(a.deal_id, "") if a.deal_id else "",
        )
        for a in source
    ]
