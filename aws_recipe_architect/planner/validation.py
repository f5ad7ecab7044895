"""Advisory recipe validation.

The derivation functions accept any selection; this step is what a caller
runs beforehand to surface business-rule problems (missing traffic tier,
conflicting exclusive items, support addon outside Tier 2, ...). Nothing
here raises; every problem becomes a RecipeIssue.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List

from ..catalog import CATALOG, ItemId, TopicCategory
from .recipe import Recipe, Tier

_AWS_ACCOUNT_RE = re.compile(r"^\d{12}$")


@dataclass(frozen=True)
class RecipeIssue:
    code: str
    message: str
    severity: str = "warning"  # "warning" | "error"

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


def _by_category(selection: List[ItemId]) -> Dict[TopicCategory, List[ItemId]]:
    grouped: Dict[TopicCategory, List[ItemId]] = {}
    for item_id in selection:
        item = CATALOG.get(item_id)
        if item is None:
            continue
        grouped.setdefault(item.category, []).append(item_id)
    return grouped


def validate_recipe(recipe: Recipe) -> List[RecipeIssue]:
    issues: List[RecipeIssue] = []
    grouped = _by_category(list(recipe.selection))

    if not grouped.get(TopicCategory.TRAFFIC):
        issues.append(
            RecipeIssue("no_traffic", 'No traffic scale selected; pick one from "Traffic & scale"')
        )
    if not grouped.get(TopicCategory.APP_STYLE):
        issues.append(
            RecipeIssue("no_app_style", 'No app style selected; pick at least one from "App style"')
        )

    for topic in CATALOG.topics:
        picked = grouped.get(topic.id) or []
        if topic.exclusive and len(picked) > 1:
            issues.append(
                RecipeIssue(
                    "exclusive_conflict",
                    f'Only one item from "{topic.label}" may be selected (got {", ".join(i.value for i in picked)}); '
                    "all of them are priced",
                    severity="error",
                )
            )

    if recipe.addons.support and recipe.tier is not Tier.MANAGED:
        issues.append(
            RecipeIssue(
                "support_requires_tier2",
                f"Support addon is only available on Tier 2 and is ignored for Tier {int(recipe.tier)}",
            )
        )

    if recipe.tier is Tier.DEPLOY_AND_OWN:
        if not recipe.aws_account_id:
            issues.append(
                RecipeIssue("aws_account_missing", "Tier 1 needs the AWS account id that will receive ownership")
            )
        elif not _AWS_ACCOUNT_RE.match(recipe.aws_account_id):
            issues.append(
                RecipeIssue(
                    "aws_account_invalid",
                    f"AWS account id must be 12 digits (got {recipe.aws_account_id!r})",
                    severity="error",
                )
            )

    if recipe.unknown_items:
        issues.append(
            RecipeIssue(
                "unknown_items",
                "Ignored item ids not in the catalog: " + ", ".join(sorted(set(recipe.unknown_items))),
            )
        )

    return issues


__all__ = ["RecipeIssue", "validate_recipe"]
