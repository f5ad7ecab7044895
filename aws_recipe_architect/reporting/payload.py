"""JSON-ready views of plans and estimates, and the checkout request body.

Keys follow the builder's wire format (camelCase) because these dicts are
written to disk next to the UI's persisted state and posted to the payment
backend unchanged.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from ..catalog import region_label
from ..planner.recipe import Recipe, Tier
from ..planner.types import DeploymentPlan, PlanComponent, PlanFlow, VpcPlan
from ..pricing.estimate import PriceEstimate


def _component_to_dict(component: PlanComponent) -> Dict[str, Any]:
    return {
        "id": component.id,
        "name": component.name,
        "sub": component.sub,
        "category": component.category.value,
        "awsServices": list(component.aws_services),
        "details": list(component.details),
        "drivenBy": list(component.driven_by),
        "diagramGroup": component.diagram_group.value,
        "accent": component.accent,
    }


def _vpc_to_dict(vpc: VpcPlan) -> Dict[str, Any]:
    return {
        "cidr": vpc.cidr,
        "multiAz": vpc.multi_az,
        "azs": list(vpc.azs),
        "subnets": [{"az": s.az, "type": s.role.value, "cidr": s.cidr} for s in vpc.subnets],
    }


def _flow_to_dict(flow: PlanFlow) -> Dict[str, Any]:
    return {
        "id": flow.id,
        "name": flow.name,
        "type": flow.type.value,
        "steps": list(flow.steps),
        "touches": list(flow.touches),
    }


def plan_to_dict(plan: DeploymentPlan) -> Dict[str, Any]:
    return {
        "tier": int(plan.tier),
        "region": plan.region.value,
        "regionLabel": region_label(plan.region),
        "vpc": _vpc_to_dict(plan.vpc),
        "components": [_component_to_dict(c) for c in plan.components],
        "flows": [_flow_to_dict(f) for f in plan.flows],
    }


def estimate_to_dict(estimate: PriceEstimate) -> Dict[str, Any]:
    return {
        "provider": {
            "setupFee": estimate.setup_fee,
            "monthlyFee": estimate.monthly_fee,
        },
        "awsEstimate": {
            "monthly": estimate.aws_monthly_estimate,
            "regionMultiplier": estimate.region_multiplier,
        },
        "complexityScore": estimate.complexity_score,
        "complexityLabel": estimate.complexity_label,
        # isSetup mirrors the builder's flag: true means one-time.
        "breakdown": [
            {"label": line.label, "amount": line.amount, "isSetup": not line.recurring}
            for line in estimate.breakdown
        ],
        "startsFrom": {
            "setupFee": estimate.starts_from.setup_fee,
            "monthlyFee": estimate.starts_from.monthly_fee,
        },
        "feeSchedule": estimate.schedule_id,
    }


def build_checkout_payload(
    recipe: Recipe,
    estimate: PriceEstimate,
    user_email: Optional[str] = None,
) -> Dict[str, Any]:
    """Body of the create-checkout-session request.

    Only assembled here; sending it is the caller's business.
    """
    payload: Dict[str, Any] = {
        "tier": int(recipe.tier),
        "region": recipe.region.value,
        "selections": [item_id.value for item_id in recipe.selection],
        "addons": {"cicd": recipe.addons.cicd, "support": recipe.addons.support},
        "aspenxPrice": {
            "setupFee": estimate.setup_fee,
            "monthlyFee": estimate.monthly_fee,
        },
        "awsEstimate": estimate.aws_monthly_estimate,
    }
    if user_email:
        payload["userEmail"] = user_email
    if recipe.tier is Tier.DEPLOY_AND_OWN:
        payload["awsAccountId"] = recipe.aws_account_id
    return payload


__all__ = ["build_checkout_payload", "estimate_to_dict", "plan_to_dict"]
