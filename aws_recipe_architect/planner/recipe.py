"""Recipe (selection set) value objects and coercion of raw builder input.

The builder UI owns and mutates the selection; the compiler only reads an
immutable Recipe snapshot. Coercion happens once, here, so every downstream
function can work with closed enums instead of loose strings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Iterable, Tuple

from ..catalog import ItemId, Region, coerce_item_id, coerce_region


class Tier(IntEnum):
    DEPLOY_AND_OWN = 1
    MANAGED = 2
    TERRAFORM_KIT = 3

    @property
    def title(self) -> str:
        return _TIER_INFO[self][0]

    @property
    def description(self) -> str:
        return _TIER_INFO[self][1]

    @property
    def recurring(self) -> bool:
        return self is Tier.MANAGED


_TIER_INFO: Dict[Tier, Tuple[str, str]] = {
    Tier.DEPLOY_AND_OWN: (
        "Deploy & Own",
        "One-time setup: the provider deploys everything, then transfers full AWS account ownership to you.",
    ),
    Tier.MANAGED: (
        "Managed Cloud",
        "The provider manages your infrastructure month-to-month. No DevOps required on your end.",
    ),
    Tier.TERRAFORM_KIT: (
        "Terraform Kit",
        "Receive production-ready Terraform files and deploy into your own AWS account yourself.",
    ),
}


def coerce_tier(raw: Any) -> Tier:
    if isinstance(raw, Tier):
        return raw
    # bool is an int subclass; fractional floats must not truncate to a tier.
    if isinstance(raw, bool) or (isinstance(raw, float) and not raw.is_integer()):
        raise ValueError(f"Tier must be 1, 2 or 3 (got {raw!r})")
    try:
        return Tier(int(raw))
    except (TypeError, ValueError):
        raise ValueError(f"Tier must be 1, 2 or 3 (got {raw!r})") from None


@dataclass(frozen=True)
class Addons:
    cicd: bool = False
    # Only has an effect under Tier 2.
    support: bool = False

    def effective_support(self, tier: Tier) -> bool:
        return self.support and tier is Tier.MANAGED


def normalize_selection(raw_ids: Iterable[Any]) -> Tuple[Tuple[ItemId, ...], Tuple[str, ...]]:
    """Deduplicate and coerce raw ids, keeping first-seen order.

    Returns (known ids, dropped raw tokens).
    """
    seen: set[ItemId] = set()
    known: list[ItemId] = []
    dropped: list[str] = []
    for raw in raw_ids or ():
        item_id = coerce_item_id(raw)
        if item_id is None:
            dropped.append(str(raw))
            continue
        if item_id in seen:
            continue
        seen.add(item_id)
        known.append(item_id)
    return tuple(known), tuple(dropped)


@dataclass(frozen=True)
class Recipe:
    tier: Tier
    region: Region
    selection: Tuple[ItemId, ...] = ()
    addons: Addons = field(default_factory=Addons)
    aws_account_id: str = ""
    # Raw tokens dropped during coercion (stale ids from older catalogs).
    unknown_items: Tuple[str, ...] = ()

    @classmethod
    def build(
        cls,
        tier: Any,
        items: Iterable[Any] = (),
        *,
        region: Region | str | None = None,
        cicd: bool = False,
        support: bool = False,
        aws_account_id: Any = None,
    ) -> "Recipe":
        known, dropped = normalize_selection(items)
        return cls(
            tier=coerce_tier(tier),
            region=coerce_region(region),
            selection=known,
            addons=Addons(cicd=bool(cicd), support=bool(support)),
            aws_account_id="" if aws_account_id is None else str(aws_account_id).strip(),
            unknown_items=dropped,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Recipe":
        """Build a Recipe from the builder's persisted state shape.

        Accepts either ``selections`` (list of ids or of item objects with an
        ``id`` key) or ``items``; ``addons`` is ``{"cicd": bool, "support": bool}``.
        """
        if not isinstance(data, dict):
            raise ValueError("Recipe must be a mapping")
        raw_items = data.get("selections", data.get("items")) or []
        if not isinstance(raw_items, list):
            raise ValueError("Recipe selections must be a list")
        items = [it.get("id") if isinstance(it, dict) else it for it in raw_items]
        addons = data.get("addons") if isinstance(data.get("addons"), dict) else {}
        if "tier" not in data or data.get("tier") is None:
            raise ValueError("Missing required key 'tier' in recipe")
        return cls.build(
            data.get("tier"),
            items,
            region=data.get("region"),
            cicd=bool(addons.get("cicd")),
            support=bool(addons.get("support")),
            aws_account_id=data.get("awsAccountId") or data.get("aws_account_id"),
        )

    @property
    def selected(self) -> frozenset[ItemId]:
        return frozenset(self.selection)

    def has(self, item_id: ItemId) -> bool:
        return item_id in self.selection


__all__ = ["Addons", "Recipe", "Tier", "coerce_tier", "normalize_selection"]
