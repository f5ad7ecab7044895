from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class TopicCategory(str, Enum):
    TRAFFIC = "traffic"
    APP_STYLE = "appStyle"
    DATA = "data"
    SECURITY = "security"
    RELIABILITY = "reliability"
    OPS = "ops"


class ItemId(str, Enum):
    """Stable identifiers of every selectable recipe item.

    The string values are persisted by the builder and sent to the payment
    backend; never rename a value, only add new members.
    """

    TRAFFIC_PROTOTYPE = "traffic-prototype"
    TRAFFIC_SMALL = "traffic-small"
    TRAFFIC_MEDIUM = "traffic-medium"
    TRAFFIC_LARGE = "traffic-large"

    STYLE_STATIC = "style-static"
    STYLE_WEBSITE_API = "style-website-api"
    STYLE_API_FIRST = "style-api-first"
    STYLE_REALTIME = "style-realtime"
    STYLE_JOBS = "style-jobs"

    DATA_SQL = "data-sql"
    DATA_NOSQL = "data-nosql"
    DATA_FILES = "data-files"
    DATA_CACHE = "data-cache"
    DATA_SEARCH = "data-search"

    SEC_HTTPS = "sec-https"
    SEC_WAF = "sec-waf"
    SEC_PRIVATE_DB = "sec-private-db"
    SEC_COMPLIANCE = "sec-compliance"

    REL_SINGLE_AZ = "rel-single-az"
    REL_MULTI_AZ = "rel-multi-az"
    REL_BACKUPS = "rel-backups"
    REL_BLUE_GREEN = "rel-blue-green"

    OPS_BASIC = "ops-basic"
    OPS_ADVANCED = "ops-advanced"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class RecipeItem:
    id: ItemId
    label: str
    category: TopicCategory
    description: Optional[str] = None
    aws_hints: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Topic:
    id: TopicCategory
    label: str
    items: Tuple[RecipeItem, ...]
    # At most one item of an exclusive topic may be selected. The builder
    # enforces it; validate_recipe() reports violations.
    exclusive: bool = False
