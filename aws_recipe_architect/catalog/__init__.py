from .regions import FALLBACK_REGION, REGIONS, Region, coerce_region, region_label, region_multiplier, resolve_default_region
from .registry import CATALOG, CatalogRegistry, coerce_item_id
from .topics import TOPICS
from .types import ItemId, RecipeItem, Topic, TopicCategory

__all__ = [
    "CATALOG",
    "CatalogRegistry",
    "coerce_item_id",
    "ItemId",
    "RecipeItem",
    "Topic",
    "TopicCategory",
    "TOPICS",
    "Region",
    "REGIONS",
    "coerce_region",
    "FALLBACK_REGION",
    "resolve_default_region",
    "region_label",
    "region_multiplier",
]
