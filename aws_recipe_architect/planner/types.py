from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from ..catalog import Region
from .recipe import Tier


class ComponentCategory(str, Enum):
    EDGE = "edge"
    NETWORK = "network"
    COMPUTE = "compute"
    DATA = "data"
    ASYNC = "async"
    REALTIME = "realtime"
    OPS = "ops"
    COMPLIANCE = "compliance"
    CICD = "cicd"


class DiagramGroup(str, Enum):
    EXTERNAL_LEFT = "external-left"  # Internet, DNS, CDN, WAF
    PUBLIC = "public"  # ALB, WebSocket API
    APP = "app"  # compute
    ASYNC = "async"  # queue, worker
    DATA = "data"  # DB, cache, search, buckets
    EXTERNAL_RIGHT = "external-right"  # monitoring, audit, CI/CD, support


class SubnetRole(str, Enum):
    PUBLIC = "public"
    PRIVATE_APP = "private-app"
    PRIVATE_DATA = "private-data"


class FlowType(str, Enum):
    REQUEST = "request"
    UPLOAD = "upload"
    ASYNC = "async"
    TELEMETRY = "telemetry"


@dataclass(frozen=True)
class PlanComponent:
    id: str
    name: str
    sub: str
    category: ComponentCategory
    aws_services: Tuple[str, ...]
    details: Tuple[str, ...]
    driven_by: Tuple[str, ...]
    diagram_group: DiagramGroup
    accent: str = "slate"  # display hint only


@dataclass(frozen=True)
class Subnet:
    az: str
    role: SubnetRole
    cidr: str


@dataclass(frozen=True)
class VpcPlan:
    cidr: str
    multi_az: bool
    azs: Tuple[str, ...]
    subnets: Tuple[Subnet, ...]


@dataclass(frozen=True)
class PlanFlow:
    id: str
    name: str
    type: FlowType
    steps: Tuple[str, ...]
    # Component ids referenced by the emitted steps.
    touches: Tuple[str, ...] = ()


@dataclass(frozen=True)
class DeploymentPlan:
    tier: Tier
    region: Region
    vpc: VpcPlan
    components: Tuple[PlanComponent, ...]
    flows: Tuple[PlanFlow, ...]

    @property
    def component_ids(self) -> Tuple[str, ...]:
        return tuple(c.id for c in self.components)

    def component(self, component_id: str) -> PlanComponent | None:
        return next((c for c in self.components if c.id == component_id), None)

    def flow(self, flow_id: str) -> PlanFlow | None:
        return next((f for f in self.flows if f.id == flow_id), None)
