"""Provider fee estimate (flat per-item table) plus the AWS usage estimate.

Breakdown order: tier base, selected items in selection order (zero-fee
items omitted), CI/CD addon, support addon. One-time and monthly totals are
plain sums over the breakdown, split by the recurring flag.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from ..catalog import ItemId, Region, coerce_region, region_multiplier
from ..planner.recipe import Addons, Tier, coerce_tier, normalize_selection
from .complexity import complexity_label, complexity_score
from .schedule import FeeSchedule, load_fee_schedule
from .usage import aws_usage_estimate

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class PriceLine:
    label: str
    amount: int
    recurring: bool
    item_id: str = ""


@dataclass(frozen=True)
class StartsFrom:
    setup_fee: int
    monthly_fee: int
    note: str = ""


@dataclass(frozen=True)
class PriceEstimate:
    tier: Tier
    region: Region
    setup_fee: int
    monthly_fee: int
    breakdown: Tuple[PriceLine, ...]
    complexity_score: int
    complexity_label: str
    aws_monthly_estimate: int
    region_multiplier: float
    starts_from: StartsFrom
    schedule_id: str = ""

    @property
    def one_time_lines(self) -> Tuple[PriceLine, ...]:
        return tuple(line for line in self.breakdown if not line.recurring)

    @property
    def recurring_lines(self) -> Tuple[PriceLine, ...]:
        return tuple(line for line in self.breakdown if line.recurring)


def starts_from(tier: Tier | int, schedule: Optional[FeeSchedule] = None) -> StartsFrom:
    """Floor price shown on the tier cards: the bare tier base fee."""
    schedule = schedule or load_fee_schedule()
    base = schedule.base_fees[coerce_tier(tier)]
    if base.recurring:
        return StartsFrom(setup_fee=0, monthly_fee=base.amount, note=base.starting_note)
    return StartsFrom(setup_fee=base.amount, monthly_fee=0, note=base.starting_note)


def _breakdown(
    tier: Tier,
    selection: Tuple[ItemId, ...],
    addons: Addons,
    schedule: FeeSchedule,
) -> List[PriceLine]:
    base = schedule.base_fees[tier]
    lines: List[PriceLine] = [PriceLine(label=base.label, amount=base.amount, recurring=base.recurring)]

    for item_id in selection:
        fee = schedule.item_fees.get(item_id)
        if fee is None:
            continue
        amount = fee.for_tier(tier)
        if amount > 0:
            lines.append(PriceLine(label=fee.label, amount=amount, recurring=tier.recurring, item_id=item_id.value))

    if addons.cicd:
        cicd = schedule.cicd_fees.get(tier)
        if cicd is not None:
            lines.append(PriceLine(label=cicd.label, amount=cicd.amount, recurring=cicd.recurring, item_id="cicd-addon"))

    if addons.effective_support(tier):
        support = schedule.support_fees.get(tier)
        if support is not None:
            lines.append(
                PriceLine(label=support.label, amount=support.amount, recurring=support.recurring, item_id="support-addon")
            )
    elif addons.support:
        _LOGGER.debug("Support addon ignored for tier %s", int(tier))

    return lines


def calculate_estimate(
    tier: Tier | int,
    selection: Iterable[ItemId | str],
    addons: Optional[Addons] = None,
    region: Region | str | None = None,
    *,
    schedule: Optional[FeeSchedule] = None,
) -> PriceEstimate:
    """Price a recipe. Unknown ids contribute zero everywhere; never raises for them."""
    schedule = schedule or load_fee_schedule()
    tier = coerce_tier(tier)
    region = coerce_region(region)
    addons = addons or Addons()
    known, _dropped = normalize_selection(selection)

    lines = _breakdown(tier, known, addons, schedule)
    score = complexity_score(known, schedule)

    estimate = PriceEstimate(
        tier=tier,
        region=region,
        setup_fee=sum(line.amount for line in lines if not line.recurring),
        monthly_fee=sum(line.amount for line in lines if line.recurring),
        breakdown=tuple(lines),
        complexity_score=score,
        complexity_label=complexity_label(score),
        aws_monthly_estimate=aws_usage_estimate(score, known, region, schedule),
        region_multiplier=region_multiplier(region),
        starts_from=starts_from(tier, schedule),
        schedule_id=schedule.id,
    )
    _LOGGER.debug(
        "Estimate tier=%s setup=%s monthly=%s aws=%s score=%s",
        int(tier),
        estimate.setup_fee,
        estimate.monthly_fee,
        estimate.aws_monthly_estimate,
        score,
    )
    return estimate


__all__ = ["PriceEstimate", "PriceLine", "StartsFrom", "calculate_estimate", "starts_from"]
