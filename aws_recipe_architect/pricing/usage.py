"""Placeholder AWS usage estimate.

This is not a real AWS price lookup: it is a linear model calibrated for
us-east-1 and scaled by a per-region multiplier. It is billed by Amazon, not
by the provider, and is reported separately from the provider fee.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from ..catalog import ItemId, Region, coerce_region, region_multiplier
from .schedule import FeeSchedule, load_fee_schedule


def round_dollars(value: Decimal | float | int) -> int:
    """Round to the nearest whole dollar, halves away from zero."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def aws_usage_estimate(
    score: int,
    selection: Iterable[ItemId],
    region: Region | str,
    schedule: Optional[FeeSchedule] = None,
) -> int:
    schedule = schedule or load_fee_schedule()
    model = schedule.usage
    selected = set(selection)
    surcharges = sum(amount for item_id, amount in model.surcharges.items() if item_id in selected)
    raw = model.baseline + score * model.per_point + surcharges
    multiplier = Decimal(str(region_multiplier(coerce_region(region))))
    return round_dollars(Decimal(raw) * multiplier)


__all__ = ["aws_usage_estimate", "round_dollars"]
