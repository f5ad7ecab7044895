"""Fee schedule loader.

Loads the YAML (or JSON) fee schedule bundled in pricing/definitions, or the
file named by AWSRECIPE_FEE_SCHEDULE.

The loader is strict:
- it validates required keys, tier coverage and column counts
- it rejects item ids that are not in the catalog
- it normalizes everything into frozen dataclasses

An invalid schedule raises ValueError with the file and key in the message.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Tuple

import yaml

from ..catalog import ItemId
from ..config import FEE_SCHEDULE_FILE
from ..planner.recipe import Tier

_LOGGER = logging.getLogger(__name__)

DEFAULT_SCHEDULE_PATH = Path(__file__).resolve().parent / "definitions" / "fee_schedule.yaml"


@dataclass(frozen=True)
class FeeLine:
    label: str
    amount: int
    recurring: bool = False
    starting_note: str = ""


@dataclass(frozen=True)
class ItemFee:
    label: str
    fees: Tuple[int, int, int]

    def for_tier(self, tier: Tier) -> int:
        return self.fees[int(tier) - 1]


@dataclass(frozen=True)
class UsageModel:
    baseline: int
    per_point: int
    surcharges: Dict[ItemId, int] = field(default_factory=dict)


@dataclass(frozen=True)
class FeeSchedule:
    id: str
    base_fees: Dict[Tier, FeeLine]
    item_fees: Dict[ItemId, ItemFee]
    cicd_fees: Dict[Tier, FeeLine]
    support_fees: Dict[Tier, FeeLine]
    complexity_weights: Dict[ItemId, int]
    usage: UsageModel
    description: str = ""
    source_file: str = ""


def _require(obj: Dict[str, Any], key: str, *, ctx: str) -> Any:
    if key not in obj:
        raise ValueError(f"Missing required key '{key}' in {ctx}")
    return obj[key]


def _mapping(obj: Any, *, ctx: str) -> Dict[Any, Any]:
    if not isinstance(obj, dict):
        raise ValueError(f"Expected a mapping in {ctx}")
    return obj


def _money(value: Any, *, ctx: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"Amount must be a non-negative whole number in {ctx} (got {value!r})")
    return value


def _tier(key: Any, *, ctx: str) -> Tier:
    try:
        return Tier(int(key))
    except (TypeError, ValueError):
        raise ValueError(f"Unknown tier {key!r} in {ctx}") from None


def _item_id(key: Any, *, ctx: str) -> ItemId:
    try:
        return ItemId(str(key))
    except ValueError:
        raise ValueError(f"Unknown item id {key!r} in {ctx}") from None


def _load_raw(path: Path) -> Dict[str, Any]:
    raw = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        data = yaml.safe_load(raw) or {}
    elif path.suffix.lower() == ".json":
        data = json.loads(raw)
    else:
        raise ValueError(f"Unsupported fee schedule file type: {path}")
    if not isinstance(data, dict):
        raise ValueError(f"Top-level fee schedule must be a mapping in {path}")
    return data


def _parse_fee_lines(obj: Any, *, ctx: str) -> Dict[Tier, FeeLine]:
    out: Dict[Tier, FeeLine] = {}
    for key, entry in _mapping(obj, ctx=ctx).items():
        lctx = f"{ctx}[{key}]"
        entry = _mapping(entry, ctx=lctx)
        out[_tier(key, ctx=ctx)] = FeeLine(
            label=str(_require(entry, "label", ctx=lctx)),
            amount=_money(_require(entry, "amount", ctx=lctx), ctx=lctx),
            recurring=bool(entry.get("recurring", False)),
            starting_note=str(entry.get("starting_note") or ""),
        )
    return out


def _parse_item_fees(obj: Any, *, ctx: str) -> Dict[ItemId, ItemFee]:
    out: Dict[ItemId, ItemFee] = {}
    for key, entry in _mapping(obj, ctx=ctx).items():
        ictx = f"{ctx}[{key}]"
        entry = _mapping(entry, ctx=ictx)
        fees = _require(entry, "fees", ctx=ictx)
        if not isinstance(fees, list) or len(fees) != len(Tier):
            raise ValueError(f"fees must list exactly {len(Tier)} amounts in {ictx}")
        out[_item_id(key, ctx=ctx)] = ItemFee(
            label=str(entry.get("label") or key),
            fees=tuple(_money(f, ctx=ictx) for f in fees),
        )
    return out


def _parse_weights(obj: Any, *, ctx: str) -> Dict[ItemId, int]:
    return {
        _item_id(key, ctx=ctx): _money(value, ctx=f"{ctx}[{key}]")
        for key, value in _mapping(obj, ctx=ctx).items()
    }


def parse_fee_schedule(data: Dict[str, Any], *, source: str = "<memory>") -> FeeSchedule:
    ctx = f"fee_schedule({source})"
    base_fees = _parse_fee_lines(_require(data, "base_fees", ctx=ctx), ctx=f"{ctx}.base_fees")
    missing = [t for t in Tier if t not in base_fees]
    if missing:
        raise ValueError(f"base_fees must cover every tier in {ctx} (missing {[int(t) for t in missing]})")

    addons = _mapping(data.get("addons") or {}, ctx=f"{ctx}.addons")
    cicd_fees = _parse_fee_lines(addons.get("cicd") or {}, ctx=f"{ctx}.addons.cicd")
    support_fees = _parse_fee_lines(addons.get("support") or {}, ctx=f"{ctx}.addons.support")

    usage_raw = _mapping(_require(data, "aws_usage", ctx=ctx), ctx=f"{ctx}.aws_usage")
    uctx = f"{ctx}.aws_usage"
    usage = UsageModel(
        baseline=_money(_require(usage_raw, "baseline", ctx=uctx), ctx=uctx),
        per_point=_money(_require(usage_raw, "per_point", ctx=uctx), ctx=uctx),
        surcharges=_parse_weights(usage_raw.get("surcharges") or {}, ctx=f"{uctx}.surcharges"),
    )

    return FeeSchedule(
        id=str(_require(data, "id", ctx=ctx)).strip(),
        description=str(data.get("description") or "").strip(),
        base_fees=base_fees,
        item_fees=_parse_item_fees(data.get("item_fees") or {}, ctx=f"{ctx}.item_fees"),
        cicd_fees=cicd_fees,
        support_fees=support_fees,
        complexity_weights=_parse_weights(data.get("complexity_weights") or {}, ctx=f"{ctx}.complexity_weights"),
        usage=usage,
        source_file=source,
    )


@lru_cache(maxsize=None)
def load_fee_schedule(path: str = "") -> FeeSchedule:
    """Load and memoize a fee schedule. Empty path means the configured default."""
    resolved = Path(path or FEE_SCHEDULE_FILE or DEFAULT_SCHEDULE_PATH)
    if not resolved.exists():
        raise ValueError(f"Fee schedule file not found: {resolved}")
    schedule = parse_fee_schedule(_load_raw(resolved), source=resolved.name)
    _LOGGER.debug("Loaded fee schedule %s from %s", schedule.id, resolved)
    return schedule


__all__ = [
    "DEFAULT_SCHEDULE_PATH",
    "FeeLine",
    "FeeSchedule",
    "ItemFee",
    "UsageModel",
    "load_fee_schedule",
    "parse_fee_schedule",
]
