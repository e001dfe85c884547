"""Unit tests for the deal stage engine.

Tests cover:
- probability_for_stage: WON pins 100, LOST pins 0, open stages keep the estimate
- StageTransitionEngine.transition: any-to-any moves, write-back, unknown deals and stages
- Stage constants: canonical order and the open pipeline subset
"""

from __future__ import annotations

import pytest

from src.hookline.records.exceptions import RecordNotFoundError, RecordValidationError
from src.hookline.records.schemas import DealStage
from src.hookline.records.stages import (
    PIPELINE_STAGES,
    STAGES,
    TERMINAL_STAGES,
    StageTransitionEngine,
    breaks_terminal_probability,
    parse_stage,
    probability_for_stage,
    transition_deal,
)
from src.hookline.records.store import RecordStore


@pytest.fixture
def engine(seeded_store: RecordStore) -> StageTransitionEngine:
    return StageTransitionEngine(seeded_store)


class TestStageOrder:
    """Tests for the stage constants."""

    def test_canonical_order(self) -> None:
        assert [s.value for s in STAGES] == [
            "lead", "qualified", "proposal", "negotiation", "won", "lost",
        ]

    def test_pipeline_excludes_terminal_stages(self) -> None:
        assert PIPELINE_STAGES == [
            DealStage.LEAD, DealStage.QUALIFIED, DealStage.PROPOSAL, DealStage.NEGOTIATION,
        ]
        assert TERMINAL_STAGES == {DealStage.WON, DealStage.LOST}


class TestProbabilityForStage:
    """Tests for the (probability, target) -> probability mapping."""

    @pytest.mark.parametrize("current", [0, 30, 99, 100])
    def test_won_is_certain(self, current: int) -> None:
        assert probability_for_stage(current, DealStage.WON) == 100

    @pytest.mark.parametrize("current", [0, 30, 100])
    def test_lost_is_zero(self, current: int) -> None:
        assert probability_for_stage(current, DealStage.LOST) == 0

    @pytest.mark.parametrize("target", PIPELINE_STAGES)
    def test_open_stage_keeps_estimate(self, target: DealStage) -> None:
        assert probability_for_stage(45, target) == 45

    def test_breaks_terminal_probability(self) -> None:
        assert breaks_terminal_probability(DealStage.WON, 40)
        assert breaks_terminal_probability(DealStage.LOST, 10)
        assert not breaks_terminal_probability(DealStage.WON, 100)
        assert not breaks_terminal_probability(DealStage.LEAD, 0)


class TestTransition:
    """Tests for StageTransitionEngine.transition."""

    def test_to_won_sets_probability_100(self, engine, seeded_store) -> None:
        deal = engine.transition("3", DealStage.WON)  # negotiation at 50%
        assert deal.stage == DealStage.WON
        assert deal.probability == 100
        assert seeded_store.get_deal("3") == deal

    def test_to_lost_sets_probability_0(self, engine, seeded_store) -> None:
        deal = engine.transition("1", "lost")
        assert deal.stage == DealStage.LOST
        assert deal.probability == 0

    def test_open_stage_keeps_probability(self, engine) -> None:
        deal = engine.transition("5", DealStage.PROPOSAL)  # lead at 30%
        assert deal.stage == DealStage.PROPOSAL
        assert deal.probability == 30

    def test_can_skip_stages_and_leave_terminal(self, engine) -> None:
        """No transition graph: lead -> won and won -> lead are both allowed."""
        assert engine.transition("5", DealStage.WON).probability == 100
        reopened = engine.transition("5", DealStage.LEAD)
        assert reopened.stage == DealStage.LEAD
        assert reopened.probability == 100  # keeps the value WON pinned

    def test_preserves_other_fields_and_position(self, engine, seeded_store) -> None:
        before = seeded_store.get_deal("2")
        after = engine.transition("2", DealStage.NEGOTIATION)
        assert after.model_dump(exclude={"stage"}) == before.model_dump(exclude={"stage"})
        assert [d.id for d in seeded_store.deals] == ["1", "2", "3", "4", "5", "6"]

    def test_unknown_deal_is_reported(self, engine, seeded_store) -> None:
        before = seeded_store.snapshot()
        with pytest.raises(RecordNotFoundError) as exc_info:
            engine.transition("missing", DealStage.WON)
        assert exc_info.value.kind == "deal"
        assert seeded_store.snapshot() == before

    def test_unknown_stage_is_rejected(self, engine) -> None:
        with pytest.raises(RecordValidationError, match="Unknown deal stage"):
            engine.transition("1", "closed_won")

    def test_transition_after_manual_override(self, seeded_store) -> None:
        """A WON deal edited down to 40% returns to 100% only via a transition."""
        deal = seeded_store.get_deal("4")
        seeded_store.update_deal(deal.model_copy(update={"probability": 40}))
        assert seeded_store.get_deal("4").probability == 40

        moved = transition_deal(seeded_store, "4", DealStage.WON)
        assert moved.probability == 100

    def test_persists_through_update(self, engine, storage) -> None:
        engine.transition("1", DealStage.WON)
        assert '"stage": "won"' in storage.raw("hl_deals")


def test_parse_stage_accepts_enum_and_label() -> None:
    assert parse_stage(DealStage.LOST) is DealStage.LOST
    assert parse_stage("qualified") is DealStage.QUALIFIED
