"""Static recipe catalog: the six builder topics and their items."""

from __future__ import annotations

from typing import Tuple

from .types import ItemId, RecipeItem, Topic, TopicCategory


def _item(
    item_id: ItemId,
    label: str,
    category: TopicCategory,
    hints: Tuple[str, ...],
    description: str | None = None,
) -> RecipeItem:
    return RecipeItem(
        id=item_id,
        label=label,
        category=category,
        description=description,
        aws_hints=hints,
    )


_T = TopicCategory

TOPICS: Tuple[Topic, ...] = (
    Topic(
        id=_T.TRAFFIC,
        label="Traffic & scale",
        exclusive=True,
        items=(
            _item(
                ItemId.TRAFFIC_PROTOTYPE,
                "Prototype",
                _T.TRAFFIC,
                ("t3.micro EC2 or Lambda", "Single-AZ RDS if needed", "No CDN required"),
                description="0-100 users",
            ),
            _item(
                ItemId.TRAFFIC_SMALL,
                "Small",
                _T.TRAFFIC,
                ("t3.small/medium EC2 or Lambda", "RDS single-AZ", "CloudFront optional"),
                description="100-1,000 users",
            ),
            _item(
                ItemId.TRAFFIC_MEDIUM,
                "Medium",
                _T.TRAFFIC,
                ("ECS Fargate + ALB + Auto Scaling", "RDS Multi-AZ", "CloudFront CDN"),
                description="1k-100k users",
            ),
            _item(
                ItemId.TRAFFIC_LARGE,
                "Large",
                _T.TRAFFIC,
                (
                    "ECS/EKS with horizontal scaling",
                    "Aurora Global or RDS Multi-AZ",
                    "CloudFront + WAF",
                ),
                description="100k+ users",
            ),
        ),
    ),
    Topic(
        id=_T.APP_STYLE,
        label="App style",
        items=(
            _item(ItemId.STYLE_STATIC, "Static website only", _T.APP_STYLE, ("S3 + CloudFront", "No server required")),
            _item(
                ItemId.STYLE_WEBSITE_API,
                "Website + API",
                _T.APP_STYLE,
                ("CloudFront + S3 (frontend)", "API Gateway or ALB + Lambda/ECS (API)"),
            ),
            _item(ItemId.STYLE_API_FIRST, "API-first backend", _T.APP_STYLE, ("API Gateway + Lambda", "or ALB + ECS Fargate")),
            _item(
                ItemId.STYLE_REALTIME,
                "Realtime (websockets)",
                _T.APP_STYLE,
                ("WebSocket API Gateway", "or ALB + ECS with sticky sessions"),
            ),
            _item(ItemId.STYLE_JOBS, "Background jobs", _T.APP_STYLE, ("SQS + Lambda", "or SQS + ECS worker")),
        ),
    ),
    Topic(
        id=_T.DATA,
        label="Data needs",
        items=(
            _item(ItemId.DATA_SQL, "SQL database", _T.DATA, ("RDS PostgreSQL", "or Aurora Serverless v2")),
            _item(ItemId.DATA_NOSQL, "NoSQL (key-value)", _T.DATA, ("DynamoDB",)),
            _item(
                ItemId.DATA_FILES,
                "File uploads",
                _T.DATA,
                ("S3 with pre-signed URLs", "optionally CloudFront for delivery"),
            ),
            _item(ItemId.DATA_CACHE, "Caching", _T.DATA, ("ElastiCache Redis", "or DAX for DynamoDB")),
            _item(
                ItemId.DATA_SEARCH,
                "Full-text search",
                _T.DATA,
                ("OpenSearch (Elasticsearch)", "or RDS with pg_trgm extension"),
            ),
        ),
    ),
    Topic(
        id=_T.SECURITY,
        label="Security needs",
        items=(
            _item(ItemId.SEC_HTTPS, "HTTPS", _T.SECURITY, ("ACM certificate", "ALB or CloudFront TLS termination")),
            _item(
                ItemId.SEC_WAF,
                "WAF / rate limiting",
                _T.SECURITY,
                ("AWS WAF on CloudFront or ALB", "Rate-based rules included"),
            ),
            _item(
                ItemId.SEC_PRIVATE_DB,
                "Private DB (no public access)",
                _T.SECURITY,
                ("RDS in private subnet", "VPC + Security Groups"),
            ),
            _item(
                ItemId.SEC_COMPLIANCE,
                "Compliance-ish",
                _T.SECURITY,
                ("CloudTrail + S3 audit logs", "KMS encryption at rest", "RDS encryption enabled"),
                description="Audit logs, encryption",
            ),
        ),
    ),
    Topic(
        id=_T.RELIABILITY,
        label="Reliability",
        items=(
            _item(
                ItemId.REL_SINGLE_AZ,
                "Single AZ ok",
                _T.RELIABILITY,
                ("Resources in one AZ", "Lower cost, some downtime risk"),
            ),
            _item(
                ItemId.REL_MULTI_AZ,
                "Multi-AZ HA",
                _T.RELIABILITY,
                ("ALB + Auto Scaling across AZs", "RDS Multi-AZ standby"),
            ),
            _item(
                ItemId.REL_BACKUPS,
                "Backups + PITR",
                _T.RELIABILITY,
                ("RDS automated backups (7-35 days)", "S3 versioning enabled"),
                description="Point-in-time restore",
            ),
            _item(
                ItemId.REL_BLUE_GREEN,
                "Blue/green deploy",
                _T.RELIABILITY,
                ("CodeDeploy blue/green", "or ECS rolling + circuit breaker"),
            ),
        ),
    ),
    Topic(
        id=_T.OPS,
        label="Ops",
        items=(
            _item(
                ItemId.OPS_BASIC,
                "Basic monitoring",
                _T.OPS,
                ("CloudWatch metrics + alarms", "Basic dashboard included"),
            ),
            _item(
                ItemId.OPS_ADVANCED,
                "Advanced monitoring",
                _T.OPS,
                ("CloudWatch + X-Ray tracing", "SLO dashboards", "SNS or PagerDuty alerting"),
                description="Tracing + SLOs",
            ),
        ),
    ),
)


__all__ = ["TOPICS"]
