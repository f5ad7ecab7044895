"""
compiler.py

Single entry point that turns a Recipe into a DeploymentPlan and a
PriceEstimate.

Stages:
- features: boolean predicates from the selection
- vpc: network shape from the multi-AZ flag and region
- components: ordered BOM from the rule table
- flows: narratives over the components that exist
- pricing: provider fee and the AWS usage estimate (independent of the plan)

Every stage is a pure function of its inputs; compiling the same recipe
twice yields equal results.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .catalog import ItemId, Region
from .planner import FeatureFlags, check_plan_contract, derive_flows, derive_vpc, validate_recipe
from .planner.recipe import Addons, Recipe, Tier
from .planner.rules import components_for_flags
from .planner.types import DeploymentPlan
from .planner.validation import RecipeIssue
from .pricing import PriceEstimate, calculate_estimate
from .pricing.schedule import FeeSchedule

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompiledRecipe:
    recipe: Recipe
    plan: DeploymentPlan
    estimate: PriceEstimate
    issues: Tuple[RecipeIssue, ...] = ()
    contract_errors: Tuple[Dict[str, Any], ...] = ()

    @property
    def has_errors(self) -> bool:
        return bool(self.contract_errors) or any(i.severity == "error" for i in self.issues)


def build_deployment_plan(
    tier: Tier | int,
    selection: Iterable[ItemId | str],
    addons: Optional[Addons] = None,
    region: Region | str | None = None,
) -> DeploymentPlan:
    flags = FeatureFlags.from_selection(tier, selection, addons, region)
    vpc = derive_vpc(flags.is_multi_az, flags.region)
    components = components_for_flags(flags, vpc)
    flows = derive_flows(components, flags)
    return DeploymentPlan(
        tier=flags.tier,
        region=flags.region,
        vpc=vpc,
        components=components,
        flows=flows,
    )


def compile_recipe(recipe: Recipe, *, schedule: Optional[FeeSchedule] = None) -> CompiledRecipe:
    issues = validate_recipe(recipe)
    for issue in issues:
        if issue.severity == "error":
            _LOGGER.warning("Recipe issue %s", issue)
        else:
            _LOGGER.info("Recipe issue %s", issue)

    plan = build_deployment_plan(recipe.tier, recipe.selection, recipe.addons, recipe.region)
    estimate = calculate_estimate(
        recipe.tier,
        recipe.selection,
        recipe.addons,
        recipe.region,
        schedule=schedule,
    )

    contract_errors: List[Dict[str, Any]] = check_plan_contract(plan)
    for err in contract_errors:
        _LOGGER.error("Plan contract violation: %s", err)

    _LOGGER.info(
        "Compiled tier %s recipe in %s: %d components, %d flows, setup=%s monthly=%s",
        int(recipe.tier),
        recipe.region.value,
        len(plan.components),
        len(plan.flows),
        estimate.setup_fee,
        estimate.monthly_fee,
    )
    return CompiledRecipe(
        recipe=recipe,
        plan=plan,
        estimate=estimate,
        issues=tuple(issues),
        contract_errors=tuple(contract_errors),
    )


__all__ = ["CompiledRecipe", "build_deployment_plan", "compile_recipe"]
