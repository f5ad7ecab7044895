from __future__ import annotations

import logging
from typing import Dict, Iterator, Optional, Tuple

from .topics import TOPICS
from .types import ItemId, RecipeItem, Topic, TopicCategory

_LOGGER = logging.getLogger(__name__)


class CatalogRegistry:
    """
    Runtime registry derived from the static TOPICS table.
    This is the authoritative source of:
      - which item ids exist
      - which topic (category) each item belongs to
      - which topics are exclusive
    Built once at import and never mutated afterwards.
    """

    def __init__(self, topics: Tuple[Topic, ...]):
        self._topics: Dict[TopicCategory, Topic] = {}
        self._items: Dict[ItemId, RecipeItem] = {}
        for topic in topics:
            self._topics[topic.id] = topic
            for item in topic.items:
                if item.id in self._items:
                    raise ValueError(f"Duplicate catalog item id: {item.id.value}")
                self._items[item.id] = item

    def __iter__(self) -> Iterator[RecipeItem]:
        return iter(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return coerce_item_id(item_id) in self._items

    @property
    def topics(self) -> Tuple[Topic, ...]:
        return tuple(self._topics.values())

    def get(self, item_id: ItemId | str) -> Optional[RecipeItem]:
        key = coerce_item_id(item_id)
        if key is None:
            return None
        return self._items.get(key)

    def require(self, item_id: ItemId | str) -> RecipeItem:
        item = self.get(item_id)
        if not item:
            raise ValueError(f"Unknown recipe item not in catalog: {item_id}")
        return item

    def topic(self, category: TopicCategory) -> Topic:
        return self._topics[category]

    def items_in(self, category: TopicCategory) -> Tuple[RecipeItem, ...]:
        return self._topics[category].items

    def is_exclusive(self, category: TopicCategory) -> bool:
        return self._topics[category].exclusive


def coerce_item_id(raw: object) -> Optional[ItemId]:
    """Return the ItemId for a raw token, or None when it is not a known id."""
    if isinstance(raw, ItemId):
        return raw
    if isinstance(raw, RecipeItem):
        return raw.id
    if not isinstance(raw, str):
        return None
    try:
        return ItemId(raw.strip())
    except ValueError:
        _LOGGER.debug("Ignoring unknown recipe item id %r", raw)
        return None


CATALOG = CatalogRegistry(TOPICS)


__all__ = ["CATALOG", "CatalogRegistry", "coerce_item_id"]
