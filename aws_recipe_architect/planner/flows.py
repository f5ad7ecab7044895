"""Step-by-step traffic narratives for a derived component list.

A step names the components it talks about. It is emitted only when all of
them are in the plan, which keeps flows consistent with the BOM by
construction; check_plan_contract() re-verifies it on the finished plan.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple

from .features import FeatureFlags
from .types import FlowType, PlanComponent, PlanFlow


@dataclass(frozen=True)
class FlowStep:
    text: str
    touches: Tuple[str, ...] = ()
    when: Optional[Callable[[FeatureFlags], bool]] = None


@dataclass(frozen=True)
class FlowSpec:
    id: str
    name: str
    type: FlowType
    requires: Tuple[str, ...]
    steps: Tuple[FlowStep, ...]


def _adv_mon(flags: FeatureFlags) -> bool:
    return flags.has_advanced_monitoring


FLOW_SPECS: Tuple[FlowSpec, ...] = (
    FlowSpec(
        id="request",
        name="Request path",
        type=FlowType.REQUEST,
        requires=(),
        steps=(
            FlowStep("WAF evaluates request against rate-limit and managed rule groups", ("waf",)),
            FlowStep("CloudFront checks edge cache; a cache hit returns immediately", ("cdn",)),
            FlowStep("ALB terminates TLS and routes to healthy compute target", ("alb",)),
            FlowStep("API Gateway upgrades HTTP to WebSocket (WSS)", ("wsapi",)),
            FlowStep("Compute processes request (Lambda / ECS Fargate)", ("compute",)),
            FlowStep("Relational DB query (RDS PostgreSQL)", ("rds",)),
            FlowStep("Cache lookup on hot paths (Redis)", ("cache",)),
            FlowStep("Key-value read/write (DynamoDB)", ("nosql",)),
            FlowStep("Response returned to client (with CDN caching headers if applicable)"),
        ),
    ),
    FlowSpec(
        id="upload",
        name="File upload path",
        type=FlowType.UPLOAD,
        requires=("files",),
        steps=(
            FlowStep("Client requests a pre-signed S3 URL from compute", ("compute", "files")),
            FlowStep("Compute generates and returns a time-limited S3 pre-signed URL", ("compute", "files")),
            FlowStep("Client uploads file directly to S3 object storage", ("files",)),
            FlowStep("S3 event notification triggers compute for post-processing", ("files", "compute")),
            FlowStep("Upload metrics tracked in CloudWatch", ("monitoring",), when=_adv_mon),
        ),
    ),
    FlowSpec(
        id="async",
        name="Async job path",
        type=FlowType.ASYNC,
        requires=("queue", "worker"),
        steps=(
            FlowStep("Compute enqueues a message on SQS queue", ("compute", "queue")),
            FlowStep("SQS delivers message to Worker via event-source mapping", ("queue", "worker")),
            FlowStep("Worker processes task (DB writes, email, file processing, etc.)", ("worker",)),
            FlowStep("On success: message deleted from queue", ("queue",)),
            FlowStep("On failure: message sent to DLQ after max retries", ("queue",)),
            FlowStep("Queue depth and DLQ depth tracked in CloudWatch", ("queue", "monitoring"), when=_adv_mon),
        ),
    ),
    FlowSpec(
        id="telemetry",
        name="Telemetry path",
        type=FlowType.TELEMETRY,
        requires=("monitoring",),
        steps=(
            FlowStep("All services emit structured logs to CloudWatch Logs", ("monitoring",)),
            FlowStep(
                "CloudWatch Metrics collect service-level metrics (latency, errors, throughput)",
                ("monitoring",),
            ),
            FlowStep("X-Ray traces capture per-request spans across all services", ("monitoring",), when=_adv_mon),
            FlowStep("CloudWatch Alarms trigger SNS notifications on threshold breach", ("monitoring",)),
            FlowStep("SLO burn-rate alerts fire before error budget is exhausted", ("monitoring",), when=_adv_mon),
        ),
    ),
)


def _narrate(spec: FlowSpec, present: set[str], flags: FeatureFlags) -> PlanFlow:
    steps: List[str] = []
    touches: List[str] = []
    for step in spec.steps:
        if not all(cid in present for cid in step.touches):
            continue
        if step.when is not None and not step.when(flags):
            continue
        steps.append(step.text)
        touches.extend(cid for cid in step.touches if cid not in touches)
    return PlanFlow(
        id=spec.id,
        name=spec.name,
        type=spec.type,
        steps=tuple(steps),
        touches=tuple(touches),
    )


def derive_flows(components: Iterable[PlanComponent], features: FeatureFlags) -> Tuple[PlanFlow, ...]:
    present = {c.id for c in components}
    flows: List[PlanFlow] = []
    for spec in FLOW_SPECS:
        if not all(cid in present for cid in spec.requires):
            continue
        flows.append(_narrate(spec, present, features))
    return tuple(flows)


__all__ = ["FLOW_SPECS", "FlowSpec", "FlowStep", "derive_flows"]
