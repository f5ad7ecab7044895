from __future__ import annotations

from typing import Iterable, Optional

from ..config import COMPLEXITY_CEILING, COMPLEXITY_HIGH, COMPLEXITY_MEDIUM
from ..planner.recipe import normalize_selection
from .schedule import FeeSchedule, load_fee_schedule


def complexity_score(
    selection: Iterable[object],
    schedule: Optional[FeeSchedule] = None,
    ceiling: Optional[int] = None,
) -> int:
    """Sum of per-item weights, clamped to the ceiling (<= 0 disables the clamp).

    Weights are non-negative, so adding an item never lowers the score.
    """
    schedule = schedule or load_fee_schedule()
    ceiling = COMPLEXITY_CEILING if ceiling is None else ceiling
    known, _dropped = normalize_selection(selection)
    score = sum(schedule.complexity_weights.get(item_id, 0) for item_id in known)
    if ceiling > 0:
        score = min(score, ceiling)
    return score


def complexity_label(score: int) -> str:
    if score >= COMPLEXITY_HIGH:
        return "High"
    if score >= COMPLEXITY_MEDIUM:
        return "Medium"
    return "Low"


__all__ = ["complexity_label", "complexity_score"]
