"""Unit tests for the derived views -- KPIs, pipeline, board, search, projections.

All view functions are pure, so most tests build a Snapshot directly.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from src.hookline.records import views
from src.hookline.records.schemas import (
    Activity,
    ActivityType,
    Contact,
    ContactType,
    ContactTypeFilter,
    Deal,
    DealStage,
    Snapshot,
)
from src.hookline.records.seed import sample_snapshot


# ── Helpers ────────────────────────────────────────────────────────────────


def _contact(contact_id: str = "c1", **overrides) -> Contact:
    defaults = {
        "id": contact_id,
        "name": "Test Contact",
        "email": f"{contact_id}@example.com",
        "created_at": date(2026, 1, 1),
    }
    defaults.update(overrides)
    return Contact(**defaults)


def _deal(deal_id: str, stage: DealStage, value: float, probability: int, contact_id: str = "c1") -> Deal:
    return Deal(
        id=deal_id,
        title=f"Deal {deal_id}",
        contact_id=contact_id,
        stage=stage,
        value=value,
        probability=probability,
    )


def _activity(activity_id: str, contact_id: str = "c1", deal_id: str | None = None) -> Activity:
    return Activity(
        id=activity_id,
        type=ActivityType.NOTE,
        contact_id=contact_id,
        deal_id=deal_id,
        description=f"activity {activity_id}",
        date=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def seed() -> Snapshot:
    return sample_snapshot()


# ── KPIs ───────────────────────────────────────────────────────────────────


class TestComputeKpis:
    """Tests for compute_kpis."""

    def test_seed_figures(self, seed: Snapshot) -> None:
        kpis = views.compute_kpis(seed)

        assert kpis.total_contacts == 5
        assert kpis.active_deals == 4
        # 2500*0.7 + 350*0.8 + 15000*0.5 + 4200*0.3
        assert kpis.pipeline_value == pytest.approx(1750 + 280 + 7500 + 1260)
        assert kpis.won_value == 180
        assert [a.id for a in kpis.recent_activities] == ["1", "2", "3", "4", "5"]

    def test_single_lead_deal(self) -> None:
        snapshot = Snapshot(contacts=[_contact()], deals=[_deal("d1", DealStage.LEAD, 1000, 25)])
        assert views.compute_kpis(snapshot).pipeline_value == 250

    def test_terminal_deals_excluded_from_pipeline(self) -> None:
        snapshot = Snapshot(
            contacts=[_contact()],
            deals=[
                _deal("d1", DealStage.LEAD, 1000, 25),
                _deal("d2", DealStage.WON, 5000, 100),
                _deal("d3", DealStage.LOST, 7000, 0),
                # Manual override: still excluded because the stage is terminal
                _deal("d4", DealStage.WON, 300, 40),
            ],
        )
        kpis = views.compute_kpis(snapshot)
        assert kpis.active_deals == 1
        assert kpis.pipeline_value == 250
        assert kpis.won_value == 5300

    def test_pipeline_value_is_not_rounded(self) -> None:
        snapshot = Snapshot(
            contacts=[_contact()], deals=[_deal("d1", DealStage.PROPOSAL, 333, 33)]
        )
        assert views.compute_kpis(snapshot).pipeline_value == pytest.approx(109.89)

    def test_recent_activities_follow_stored_order(self) -> None:
        activities = [_activity(str(n)) for n in range(8)]
        snapshot = Snapshot(contacts=[_contact()], activities=activities)

        assert views.compute_kpis(snapshot).recent_activities == activities[:5]
        assert views.compute_kpis(snapshot, recent_limit=2).recent_activities == activities[:2]

    def test_empty_snapshot(self) -> None:
        kpis = views.compute_kpis(Snapshot())
        assert kpis.total_contacts == 0
        assert kpis.active_deals == 0
        assert kpis.pipeline_value == 0
        assert kpis.won_value == 0
        assert kpis.recent_activities == []

    def test_reflects_store_activity_order(self, seeded_store) -> None:
        created = [
            seeded_store.create_activity({"contact_id": "1", "description": f"touch {n}"})
            for n in range(6)
        ]
        recent = views.compute_kpis(seeded_store.snapshot()).recent_activities
        assert recent == list(reversed(created))[:5]


# ── Pipeline / Board ───────────────────────────────────────────────────────


class TestPipelineByStage:
    """Tests for pipeline_by_stage and deals_by_stage."""

    def test_seed_pipeline(self, seed: Snapshot) -> None:
        pipeline = views.pipeline_by_stage(seed)
        assert [(p.stage.value, p.count, p.total_value) for p in pipeline] == [
            ("lead", 1, 4200),
            ("qualified", 1, 350),
            ("proposal", 1, 2500),
            ("negotiation", 1, 15000),
        ]

    def test_canonical_order_not_discovery_order(self) -> None:
        snapshot = Snapshot(
            contacts=[_contact()],
            deals=[
                _deal("d1", DealStage.NEGOTIATION, 10, 50),
                _deal("d2", DealStage.LEAD, 20, 50),
                _deal("d3", DealStage.NEGOTIATION, 30, 50),
            ],
        )
        pipeline = views.pipeline_by_stage(snapshot)
        assert [p.stage for p in pipeline] == [
            DealStage.LEAD, DealStage.QUALIFIED, DealStage.PROPOSAL, DealStage.NEGOTIATION,
        ]
        assert pipeline[0].count == 1
        assert pipeline[1].count == 0
        assert pipeline[3].count == 2
        assert pipeline[3].total_value == 40

    def test_idempotent(self, seed: Snapshot) -> None:
        assert views.pipeline_by_stage(seed) == views.pipeline_by_stage(seed)
        assert seed == sample_snapshot()

    def test_board_covers_every_stage(self, seed: Snapshot) -> None:
        board = views.deals_by_stage(seed)
        assert [column.stage.value for column in board] == [
            "lead", "qualified", "proposal", "negotiation", "won", "lost",
        ]
        assert [d.id for d in board[4].deals] == ["4"]
        assert [d.id for d in board[5].deals] == ["6"]
        assert sum(len(column.deals) for column in board) == len(seed.deals)


# ── Contact Search ─────────────────────────────────────────────────────────


class TestFilterContacts:
    """Tests for filter_contacts and contact_list."""

    def test_query_chen_matches_only_sarah(self, seed: Snapshot) -> None:
        result = views.filter_contacts(seed.contacts, "chen", "all")
        assert [c.name for c in result] == ["Sarah Chen"]

    def test_business_filter_ignores_query_scope(self, seed: Snapshot) -> None:
        result = views.filter_contacts(seed.contacts, "", ContactTypeFilter.BUSINESS)
        assert [c.name for c in result] == ["James Wilson", "Mike Thompson", "Tom Richards"]
        assert all(c.type == ContactType.BUSINESS for c in result)

    def test_query_and_type_combine(self, seed: Snapshot) -> None:
        assert views.filter_contacts(seed.contacts, "email.com", "individual") == [
            seed.contacts[1],
            seed.contacts[3],
        ]
        assert views.filter_contacts(seed.contacts, "chen", "business") == []

    def test_case_insensitive_across_fields(self, seed: Snapshot) -> None:
        assert [c.id for c in views.filter_contacts(seed.contacts, "LAKESIDE")] == ["3"]
        assert [c.id for c in views.filter_contacts(seed.contacts, "Tom.R@")] == ["5"]

    def test_empty_query_keeps_stored_order(self, seed: Snapshot) -> None:
        assert views.filter_contacts(seed.contacts) == seed.contacts

    def test_substring_not_tokenized(self, seed: Snapshot) -> None:
        assert views.filter_contacts(seed.contacts, "sarah chen") == [seed.contacts[1]]
        assert views.filter_contacts(seed.contacts, "chen sarah") == []

    def test_unknown_type_filter(self, seed: Snapshot) -> None:
        with pytest.raises(ValueError):
            views.filter_contacts(seed.contacts, "", "vip")

    def test_contact_list_counts_deals(self, seed: Snapshot) -> None:
        rows = views.contact_list(seed)
        assert {row.contact.id: row.deal_count for row in rows} == {
            "1": 1, "2": 2, "3": 1, "4": 1, "5": 1,
        }


# ── Projections ────────────────────────────────────────────────────────────


class TestProjections:
    """Tests for per-contact and per-deal projections and labels."""

    def test_deals_for_contact(self, seed: Snapshot) -> None:
        assert [d.id for d in views.deals_for_contact(seed, "2")] == ["2", "6"]

    def test_activities_for_contact_keeps_order(self, seed: Snapshot) -> None:
        assert [a.id for a in views.activities_for_contact(seed, "1")] == ["1", "6"]
        assert [a.id for a in views.activities_for_contact(seed, "1", deal_id="1")] == ["1", "6"]
        assert views.activities_for_contact(seed, "1", deal_id="3") == []

    def test_activities_for_deal(self, seed: Snapshot) -> None:
        assert [a.id for a in views.activities_for_deal(seed, "3")] == ["2"]

    def test_contact_without_records_has_empty_projections(self) -> None:
        snapshot = Snapshot(contacts=[_contact("lonely")])
        assert views.deals_for_contact(snapshot, "lonely") == []
        assert views.activities_for_contact(snapshot, "lonely") == []
        assert views.contact_list(snapshot)[0].deal_count == 0

    def test_labels(self, seed: Snapshot) -> None:
        assert views.contact_name(seed, "3") == "Mike Thompson"
        assert views.contact_name(seed, "missing") == "Unknown"
        assert views.deal_title(seed, "5") == "Charter Saltwater Package"
        assert views.deal_title(seed, None) == ""
        assert views.deal_title(seed, "missing") == ""

    def test_activity_feed(self, seed: Snapshot) -> None:
        feed = views.activity_feed(seed)
        assert len(feed) == 6
        assert feed[0].contact_name == "James Wilson"
        assert feed[0].deal_title == "Wilson Club Equipment Order"

        loose = _activity("x", contact_id="gone")
        item = views.activity_feed(seed, [loose])[0]
        assert item.contact_name == "Unknown"
        assert item.deal_title == ""
