"""Deal stage engine -- stage order and the stage/probability rule.

A deal's stage can be changed two ways:

- direct edit through ``RecordStore.update_deal``, which accepts any
  stage/probability combination (a raw override), and
- a stage transition (dragging a card to another board column), which
  pins probability to 100 for WON and 0 for LOST and otherwise keeps the
  deal's current estimate.

There are no transition restrictions: any stage may move to any other,
including back out of WON or LOST.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from src.hookline.core.monitoring import record_mutations_total
from src.hookline.records.exceptions import RecordValidationError
from src.hookline.records.schemas import Deal, DealStage

if TYPE_CHECKING:
    from src.hookline.records.store import RecordStore

logger = structlog.get_logger(__name__)

# ── Stage Order ─────────────────────────────────────────────────────────────

STAGES: list[DealStage] = list(DealStage)

TERMINAL_STAGES: frozenset[DealStage] = frozenset({DealStage.WON, DealStage.LOST})

# Open stages in board order; the dashboard pipeline only covers these.
PIPELINE_STAGES: list[DealStage] = [s for s in STAGES if s not in TERMINAL_STAGES]

_TERMINAL_PROBABILITY: dict[DealStage, int] = {
    DealStage.WON: 100,
    DealStage.LOST: 0,
}


def probability_for_stage(current_probability: int, target: DealStage) -> int:
    """Return the probability a deal gets when moved to ``target``."""
    return _TERMINAL_PROBABILITY.get(target, current_probability)


def is_active(deal: Deal) -> bool:
    """True while the deal is still open (not WON or LOST)."""
    return deal.stage not in TERMINAL_STAGES


def breaks_terminal_probability(stage: DealStage, probability: int) -> bool:
    """True for a WON/LOST deal whose probability disagrees with its stage."""
    expected = _TERMINAL_PROBABILITY.get(stage)
    return expected is not None and probability != expected


def parse_stage(value: DealStage | str) -> DealStage:
    """Coerce a stage label, raising RecordValidationError for unknown labels."""
    try:
        return DealStage(value)
    except ValueError as exc:
        allowed = ", ".join(s.value for s in STAGES)
        raise RecordValidationError(
            f"Unknown deal stage: {value!r}. Allowed stages: {allowed}"
        ) from exc


# ── Transition Engine ───────────────────────────────────────────────────────


class StageTransitionEngine:
    """Moves deals between stages, keeping probability consistent with WON/LOST.

    Args:
        store: The RecordStore holding the deals.
    """

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    def transition(self, deal_id: str, target: DealStage | str) -> Deal:
        """Move a deal to ``target`` and write it back through ``update_deal``.

        Args:
            deal_id: ID of the deal to move.
            target: Destination stage.

        Returns:
            The updated deal.

        Raises:
            RecordNotFoundError: If no deal has ``deal_id``.
            RecordValidationError: If ``target`` is not a known stage.
        """
        target_stage = parse_stage(target)
        deal = self._store.get_deal(deal_id)
        probability = probability_for_stage(deal.probability, target_stage)

        updated = self._store.update_deal(
            deal.model_copy(update={"stage": target_stage, "probability": probability})
        )
        record_mutations_total.labels(kind="deal", operation="transition").inc()
        logger.info(
            "deal_stage_transition",
            deal_id=deal_id,
            from_stage=deal.stage.value,
            to_stage=target_stage.value,
            probability=probability,
        )
        return updated


def transition_deal(store: RecordStore, deal_id: str, target: DealStage | str) -> Deal:
    """Shorthand for ``StageTransitionEngine(store).transition(deal_id, target)``."""
    return StageTransitionEngine(store).transition(deal_id, target)
