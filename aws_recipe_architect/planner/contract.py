"""Internal consistency contract between the BOM, the VPC and the flows."""

from __future__ import annotations

from collections import Counter
from typing import Dict, List

from .network import subnets_overlap
from .types import DeploymentPlan


def check_plan_contract(plan: DeploymentPlan) -> List[Dict[str, object]]:
    errors: List[Dict[str, object]] = []
    ids = plan.component_ids
    present = set(ids)

    for cid, count in Counter(ids).items():
        if count > 1:
            errors.append({"type": "duplicate_component", "component_id": cid, "count": count})

    for flow in plan.flows:
        for cid in flow.touches:
            if cid not in present:
                errors.append(
                    {
                        "type": "flow_references_missing_component",
                        "flow_id": flow.id,
                        "component_id": cid,
                    }
                )
        if not flow.steps:
            errors.append({"type": "empty_flow", "flow_id": flow.id})

    if ("queue" in present) != ("worker" in present):
        errors.append({"type": "unpaired_async", "message": "queue and worker must be deployed together"})

    if "alb" in present and "wsapi" in present:
        errors.append({"type": "conflicting_entrypoints", "message": "ALB and WebSocket API are mutually exclusive"})

    expected_azs = 2 if plan.vpc.multi_az else 1
    if len(plan.vpc.azs) != expected_azs or len(plan.vpc.subnets) != 3 * expected_azs:
        errors.append(
            {
                "type": "vpc_shape",
                "multi_az": plan.vpc.multi_az,
                "azs": list(plan.vpc.azs),
                "subnet_count": len(plan.vpc.subnets),
            }
        )

    for left, right in subnets_overlap(plan.vpc.subnets):
        errors.append({"type": "subnet_overlap", "left": left, "right": right})

    return errors


__all__ = ["check_plan_contract"]
