"""Component rule table and ordered component derivation.

Each infrastructure component is one ComponentRule. A rule carries:
- the predicate that governs whether the component exists at all,
- name / sub choices (first matching line wins),
- conditional AWS service entries and conditional detail lines.

Every predicate reads FeatureFlags only, so lines can be evaluated in any
order. The position of a rule in COMPONENT_RULES is the output order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from operator import attrgetter
from typing import Callable, Dict, Iterable, Optional, Tuple

from ..catalog import ItemId, Region
from ..config import PROVIDER_NAME
from .features import FeatureFlags
from .network import derive_vpc
from .recipe import Addons, Tier
from .types import ComponentCategory, DiagramGroup, PlanComponent, VpcPlan

_LOGGER = logging.getLogger(__name__)

Predicate = Callable[[FeatureFlags], bool]

_flag = attrgetter


def _always(_flags: FeatureFlags) -> bool:
    return True


def _not(pred: Predicate) -> Predicate:
    return lambda f: not pred(f)


@dataclass(frozen=True)
class Line:
    """A text fragment guarded by a feature predicate.

    When the predicate is false the ``otherwise`` text is used instead
    (empty means the line is dropped).
    """

    text: str
    when: Optional[Predicate] = None
    otherwise: str = ""

    def render(self, flags: FeatureFlags, ctx: Dict[str, str]) -> str:
        chosen = self.text if self.when is None or self.when(flags) else self.otherwise
        return chosen.format(**ctx) if chosen else ""


@dataclass(frozen=True)
class ComponentRule:
    id: str
    include: Predicate
    name: Tuple[Line, ...]
    sub: Tuple[Line, ...]
    category: ComponentCategory
    diagram_group: DiagramGroup
    accent: str
    services: Tuple[Line, ...] = ()
    details: Tuple[Line, ...] = ()
    driven_by: Tuple[ItemId, ...] = ()
    addon_driver: str = ""

    def build(self, flags: FeatureFlags, ctx: Dict[str, str]) -> PlanComponent:
        drivers = tuple(i.value for i in self.driven_by if flags.has(i))
        if self.addon_driver:
            drivers += (self.addon_driver,)
        return PlanComponent(
            id=self.id,
            name=_first(self.name, flags, ctx),
            sub=_first(self.sub, flags, ctx),
            category=self.category,
            aws_services=_render_all(self.services, flags, ctx),
            details=_render_all(self.details, flags, ctx),
            driven_by=drivers,
            diagram_group=self.diagram_group,
            accent=self.accent,
        )


def _first(options: Iterable[Line], flags: FeatureFlags, ctx: Dict[str, str]) -> str:
    for option in options:
        text = option.render(flags, ctx)
        if text:
            return text
    return ""


def _render_all(lines: Iterable[Line], flags: FeatureFlags, ctx: Dict[str, str]) -> Tuple[str, ...]:
    return tuple(t for t in (line.render(flags, ctx) for line in lines) if t)


def _fixed(*texts: str) -> Tuple[Line, ...]:
    return tuple(Line(t) for t in texts)


_E = ComponentCategory
_G = DiagramGroup

_multi_az = _flag("is_multi_az")
_https = _flag("has_https")
_waf = _flag("has_waf")
_compliance = _flag("has_compliance")
_backups = _flag("has_backups")
_blue_green = _flag("has_blue_green")
_adv_mon = _flag("has_advanced_monitoring")
_basic_mon = _flag("has_basic_monitoring")
_tier3 = _flag("is_tier3")
_needs_cdn = _flag("needs_cdn")


COMPONENT_RULES: Tuple[ComponentRule, ...] = (
    ComponentRule(
        id="internet",
        include=_always,
        name=_fixed("Internet"),
        sub=_fixed("Public traffic entry"),
        category=_E.EDGE,
        diagram_group=_G.EXTERNAL_LEFT,
        accent="slate",
        details=_fixed("Public inbound traffic from end-users and clients"),
    ),
    ComponentRule(
        id="dns",
        include=_always,
        name=_fixed("DNS"),
        sub=_fixed("Route 53 (optional)"),
        category=_E.EDGE,
        diagram_group=_G.EXTERNAL_LEFT,
        accent="slate",
        services=_fixed("Route 53"),
        details=_fixed(
            "Custom domain routing via Route 53 hosted zone",
            "Health-check-based failover if Multi-AZ selected",
            "Can be managed externally; Route 53 is optional",
        ),
    ),
    ComponentRule(
        id="acm",
        include=_https,
        name=_fixed("TLS Certificate"),
        sub=_fixed("ACM-managed"),
        category=_E.EDGE,
        diagram_group=_G.EXTERNAL_LEFT,
        accent="amber",
        services=_fixed("AWS Certificate Manager"),
        details=_fixed(
            "Managed TLS certificate via ACM, free and auto-renewing",
            "Attached to CloudFront or ALB for HTTPS termination",
        ),
        driven_by=(ItemId.SEC_HTTPS,),
    ),
    ComponentRule(
        id="waf",
        include=_waf,
        name=_fixed("WAF"),
        sub=_fixed("Rate limiting & rules"),
        category=_E.EDGE,
        diagram_group=_G.EXTERNAL_LEFT,
        accent="amber",
        services=_fixed("AWS WAF"),
        details=_fixed(
            "Web Application Firewall in front of CloudFront or ALB",
            "Rate-based rules to block abusive IPs",
            "Managed rule groups (common threats, SQLi, XSS)",
        ),
        driven_by=(ItemId.SEC_WAF,),
    ),
    ComponentRule(
        id="cdn",
        include=_needs_cdn,
        name=_fixed("CDN"),
        sub=_fixed("CloudFront global edge"),
        category=_E.EDGE,
        diagram_group=_G.EXTERNAL_LEFT,
        accent="cyan",
        services=_fixed("CloudFront", "ACM"),
        details=(
            Line("Global CDN with 400+ PoPs via CloudFront"),
            Line("Caches static assets at the edge (HTML, CSS, JS, images)"),
            Line("HTTPS/TLS enforced via ACM certificate", when=_https, otherwise="HTTP (HTTPS recommended)"),
            Line("WAF rules evaluated before origin requests", when=_waf),
        ),
        driven_by=(ItemId.STYLE_STATIC, ItemId.STYLE_WEBSITE_API),
    ),
    ComponentRule(
        id="vpc",
        include=_flag("needs_vpc"),
        name=_fixed("VPC"),
        sub=_fixed("{cidr} · {az_count}"),
        category=_E.NETWORK,
        diagram_group=_G.EXTERNAL_LEFT,
        accent="slate",
        services=_fixed("VPC", "Internet Gateway", "NAT Gateway"),
        details=(
            Line("CIDR: {cidr}"),
            Line(
                "Spans 2 AZs ({azs}) for high availability",
                when=_multi_az,
                otherwise="Single AZ ({primary_az})",
            ),
            Line("Internet Gateway for public subnet egress"),
            Line("NAT Gateway for private subnet outbound traffic"),
            Line("Security Groups as per-resource firewall rules"),
            Line("VPC Flow Logs enabled for network auditing"),
        ),
    ),
    ComponentRule(
        id="alb",
        include=_flag("needs_alb"),
        name=_fixed("HTTPS Load Balancer"),
        sub=_fixed("Application Load Balancer"),
        category=_E.COMPUTE,
        diagram_group=_G.PUBLIC,
        accent="blue",
        services=(Line("ALB"), Line("ACM"), Line("WAF", when=_waf)),
        details=(
            Line("Application Load Balancer in public subnet"),
            Line("TLS termination via ACM certificate", when=_https, otherwise="HTTP listener (HTTPS recommended)"),
            Line("Multi-AZ targets for high availability", when=_multi_az, otherwise="Single-AZ target group"),
            Line("Health checks on /health endpoint"),
            Line("WAF rules evaluated on each request", when=_waf),
            Line("Blue/Green deploy via weighted target groups", when=_blue_green),
        ),
        driven_by=(ItemId.STYLE_WEBSITE_API, ItemId.STYLE_API_FIRST, ItemId.STYLE_JOBS),
    ),
    ComponentRule(
        id="wsapi",
        include=_flag("is_realtime"),
        name=_fixed("WebSocket API"),
        sub=_fixed("Real-time connections"),
        category=_E.REALTIME,
        diagram_group=_G.PUBLIC,
        accent="blue",
        services=_fixed("API Gateway (WebSocket)", "ACM"),
        details=(
            Line("Managed WebSocket API via API Gateway"),
            Line("Persistent connections for real-time push events"),
            Line("WSS/TLS enforced", when=_https, otherwise="WS (WSS recommended)"),
            Line("Connection table stored in DynamoDB (connectionId)"),
            Line("Routes: $connect, $disconnect, $default + custom"),
        ),
        driven_by=(ItemId.STYLE_REALTIME,),
    ),
    ComponentRule(
        id="compute",
        include=_flag("needs_compute"),
        name=(
            Line("WS Handlers", when=_flag("is_realtime")),
            Line("API Compute", when=_flag("is_api_first")),
            Line("App Compute"),
        ),
        sub=(
            Line("Containers / Serverless (you deploy)", when=_tier3),
            Line("Lambda / ECS Fargate"),
        ),
        category=_E.COMPUTE,
        diagram_group=_G.APP,
        accent="cyan",
        services=(
            Line("Lambda or ECS Fargate (Terraform)", when=_tier3),
            Line("ECS Fargate", when=_not(_tier3)),
            Line("Lambda", when=_not(_tier3)),
            Line("ECR", when=_not(_tier3)),
        ),
        details=(
            Line(
                "Terraform module supports both Lambda (serverless) and ECS Fargate (containers)",
                when=_tier3,
                otherwise="{provider} selects Lambda or ECS Fargate based on workload characteristics",
            ),
            Line("Private-app subnet, no direct public internet access"),
            Line("Deployed across 2 AZs for high availability", when=_multi_az, otherwise="Single-AZ deployment"),
            Line(
                "Blue/Green deployment with zero-downtime rollouts",
                when=_blue_green,
                otherwise="Rolling deploy strategy",
            ),
            Line("Deployed via GitHub Actions OIDC pipeline", when=_flag("has_cicd")),
            Line("X-Ray tracing instrumented", when=_adv_mon),
            Line("CloudWatch metrics + alarms", when=lambda f: f.has_basic_monitoring and not f.has_advanced_monitoring),
        ),
        driven_by=(ItemId.STYLE_WEBSITE_API, ItemId.STYLE_API_FIRST, ItemId.STYLE_REALTIME, ItemId.STYLE_JOBS),
    ),
    ComponentRule(
        id="rds",
        include=_flag("has_sql"),
        name=_fixed("Relational DB"),
        sub=_fixed("PostgreSQL · RDS"),
        category=_E.DATA,
        diagram_group=_G.DATA,
        accent="emerald",
        services=(Line("RDS PostgreSQL"), Line("Multi-AZ Standby", when=_multi_az)),
        details=(
            Line("RDS PostgreSQL in private-data subnet"),
            Line(
                "Multi-AZ standby replica, automatic failover < 60s",
                when=_multi_az,
                otherwise="Single-AZ instance",
            ),
            Line("No public access, VPC-only with a strict security group", when=_flag("has_private_db")),
            Line("Automated backups with point-in-time restore (7-35 days)", when=_backups),
            Line("Storage encrypted at rest via KMS", when=_compliance),
            Line("Parameter group tuned for production (connection pooling, autovacuum)"),
        ),
        driven_by=(ItemId.DATA_SQL,),
    ),
    ComponentRule(
        id="nosql",
        include=_flag("has_nosql"),
        name=_fixed("Key-Value Store"),
        sub=_fixed("DynamoDB"),
        category=_E.DATA,
        diagram_group=_G.DATA,
        accent="emerald",
        services=(Line("DynamoDB"), Line("Global Tables (optional)", when=_multi_az)),
        details=(
            Line("DynamoDB with single-digit millisecond reads"),
            Line("On-demand capacity mode (auto-scales, pay-per-request)"),
            Line("Point-in-time recovery (PITR) enabled", when=_backups),
            Line("Encryption at rest via KMS", when=_compliance),
            Line("Stores WebSocket connectionId table", when=_flag("is_realtime")),
        ),
        driven_by=(ItemId.DATA_NOSQL,),
    ),
    ComponentRule(
        id="cache",
        include=_flag("has_cache"),
        name=_fixed("Cache"),
        sub=_fixed("Redis · ElastiCache"),
        category=_E.DATA,
        diagram_group=_G.DATA,
        accent="cyan",
        services=_fixed("ElastiCache for Redis"),
        details=(
            Line("ElastiCache for Redis in private-data subnet"),
            Line("Multi-AZ with automatic failover", when=_multi_az, otherwise="Single-node"),
            Line("Sub-millisecond reads for session store, rate-limiting and hot data"),
            Line("Encryption in-transit and at-rest", when=_compliance),
        ),
        driven_by=(ItemId.DATA_CACHE,),
    ),
    ComponentRule(
        id="search",
        include=_flag("has_search"),
        name=_fixed("Search Index"),
        sub=_fixed("OpenSearch"),
        category=_E.DATA,
        diagram_group=_G.DATA,
        accent="blue",
        services=_fixed("Amazon OpenSearch Service"),
        details=(
            Line("Amazon OpenSearch (managed Elasticsearch) in private-data subnet"),
            Line("Full-text search + analytics with millisecond latency"),
            Line("2-node cluster across AZs", when=_multi_az, otherwise="1-node dev cluster"),
            Line("Fine-grained access control + at-rest encryption", when=_compliance),
        ),
        driven_by=(ItemId.DATA_SEARCH,),
    ),
    ComponentRule(
        id="files",
        include=_flag("has_files"),
        name=_fixed("Object Storage"),
        sub=_fixed("S3 · file uploads"),
        category=_E.DATA,
        diagram_group=_G.DATA,
        accent="slate",
        services=(Line("S3"), Line("CloudFront (delivery)", when=_needs_cdn)),
        details=(
            Line("S3 bucket for user-uploaded files"),
            Line("Pre-signed URLs generated by compute, client uploads directly", when=_flag("needs_compute")),
            Line("Server-side encryption (SSE-KMS)", when=_compliance, otherwise="SSE-S3 encryption"),
            Line("Versioning enabled for file recovery", when=_backups),
            Line("CloudFront distribution for fast global delivery", when=_needs_cdn),
        ),
        driven_by=(ItemId.DATA_FILES,),
    ),
    ComponentRule(
        id="s3-frontend",
        include=_needs_cdn,
        name=_fixed("Frontend Assets"),
        sub=_fixed("S3 · static hosting"),
        category=_E.DATA,
        diagram_group=_G.DATA,
        accent="blue",
        services=_fixed("S3", "CloudFront OAC"),
        details=_fixed(
            "S3 bucket for compiled frontend (HTML/CSS/JS)",
            "Private bucket, accessible only via CloudFront OAC (no public-read)",
            "Deployed by CI/CD or {provider} on each build",
        ),
        driven_by=(ItemId.STYLE_STATIC, ItemId.STYLE_WEBSITE_API),
    ),
    ComponentRule(
        id="queue",
        include=_flag("has_jobs"),
        name=_fixed("Message Queue"),
        sub=_fixed("SQS · async tasks"),
        category=_E.ASYNC,
        diagram_group=_G.ASYNC,
        accent="purple",
        services=_fixed("SQS (Standard or FIFO)"),
        details=_fixed(
            "SQS queue for decoupled async task processing",
            "Visibility timeout prevents duplicate processing",
            "Dead-letter queue (DLQ) captures failed messages",
            "Worker scales independently from API compute",
        ),
        driven_by=(ItemId.STYLE_JOBS,),
    ),
    # Same predicate as the queue: the two are never emitted apart.
    ComponentRule(
        id="worker",
        include=_flag("has_jobs"),
        name=_fixed("Worker"),
        sub=_fixed("Background processing"),
        category=_E.ASYNC,
        diagram_group=_G.ASYNC,
        accent="purple",
        services=_fixed("Lambda (event source mapping)", "or ECS Fargate task"),
        details=_fixed(
            "Processes messages from SQS queue",
            "Triggered automatically by SQS event source mapping",
            "Retries with exponential backoff on failure",
        ),
        driven_by=(ItemId.STYLE_JOBS,),
    ),
    ComponentRule(
        id="monitoring",
        include=_flag("has_monitoring"),
        name=(Line("Monitoring & Tracing", when=_adv_mon), Line("Monitoring & Logs")),
        sub=(Line("CloudWatch + X-Ray + SLOs", when=_adv_mon), Line("CloudWatch metrics + alerts")),
        category=_E.OPS,
        diagram_group=_G.EXTERNAL_RIGHT,
        accent="rose",
        services=(
            Line("CloudWatch Logs"),
            Line("CloudWatch Metrics"),
            Line("CloudWatch Alarms"),
            Line("X-Ray", when=_adv_mon),
            Line("CloudWatch ServiceLens", when=_adv_mon),
        ),
        details=(
            Line("CloudWatch log groups for all services"),
            Line("Metric alarms on error rate, latency, CPU/memory"),
            Line("X-Ray distributed tracing with service map", when=_adv_mon),
            Line("SLO dashboards with burn-rate alerts", when=_adv_mon),
            Line("SNS topic for alarm notifications (email/PagerDuty)"),
        ),
        driven_by=(ItemId.OPS_BASIC, ItemId.OPS_ADVANCED),
    ),
    ComponentRule(
        id="audit",
        include=_compliance,
        name=_fixed("Audit & Encryption"),
        sub=_fixed("CloudTrail + KMS"),
        category=_E.COMPLIANCE,
        diagram_group=_G.EXTERNAL_RIGHT,
        accent="amber",
        services=_fixed("CloudTrail", "KMS", "S3 (audit logs)"),
        details=_fixed(
            "CloudTrail enabled for all API calls as an audit trail",
            "CloudTrail logs stored in dedicated S3 bucket with integrity validation",
            "KMS CMK for encryption at rest on RDS, S3, and ElastiCache",
            "AWS Config rules for compliance drift detection",
        ),
        driven_by=(ItemId.SEC_COMPLIANCE,),
    ),
    ComponentRule(
        id="cicd",
        include=_flag("has_cicd"),
        name=_fixed("CI/CD Pipeline"),
        sub=_fixed("GitHub Actions + OIDC"),
        category=_E.CICD,
        diagram_group=_G.EXTERNAL_RIGHT,
        accent="purple",
        services=_fixed("GitHub Actions", "IAM OIDC", "ECR", "S3 (artifacts)"),
        details=(
            Line("GitHub Actions workflow with AWS OIDC (no long-lived credentials)"),
            Line("On push to main: build, test, push image to ECR, deploy to ECS/Lambda"),
            Line("Terraform CI: plan on PR, apply on merge", when=_tier3, otherwise="{provider}-managed deploy pipeline"),
            Line("Rollback trigger on CloudWatch alarm breach"),
        ),
        addon_driver="cicd-addon",
    ),
    ComponentRule(
        id="support",
        include=_flag("has_support"),
        name=_fixed("Support & Changes"),
        sub=_fixed("{provider} managed · Tier 2"),
        category=_E.OPS,
        diagram_group=_G.EXTERNAL_RIGHT,
        accent="rose",
        details=_fixed(
            "Monthly infrastructure changes handled by {provider} engineers",
            "Priority support via email/Slack",
            "Security patch management included",
        ),
        addon_driver="support-addon",
    ),
)


def _format_context(vpc: VpcPlan) -> Dict[str, str]:
    return {
        "provider": PROVIDER_NAME,
        "cidr": vpc.cidr,
        "az_count": "2 AZs" if vpc.multi_az else "1 AZ",
        "azs": ", ".join(vpc.azs),
        "primary_az": vpc.azs[0],
    }


def components_for_flags(flags: FeatureFlags, vpc: Optional[VpcPlan] = None) -> Tuple[PlanComponent, ...]:
    vpc = vpc or derive_vpc(flags.is_multi_az, flags.region)
    ctx = _format_context(vpc)
    out = tuple(rule.build(flags, ctx) for rule in COMPONENT_RULES if rule.include(flags))
    _LOGGER.debug("Derived components: %s", [c.id for c in out])
    return out


def derive_components(
    tier: Tier,
    selection: Iterable[ItemId],
    addons: Addons,
    region: Region,
) -> Tuple[PlanComponent, ...]:
    """Ordered bill of materials for a selection. Never raises on unknown ids."""
    flags = FeatureFlags.from_selection(tier, selection, addons, region)
    return components_for_flags(flags)


__all__ = ["COMPONENT_RULES", "ComponentRule", "Line", "components_for_flags", "derive_components"]
