"""Boolean feature predicates derived from a selection.

Every flag is an independent set-membership test (or a pure combination of
other flags). Nothing here depends on the order items were selected in.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from ..catalog import ItemId, Region, coerce_region
from .recipe import Addons, Tier, coerce_tier, normalize_selection


@dataclass(frozen=True)
class FeatureFlags:
    tier: Tier
    region: Region
    selected: frozenset

    is_static: bool
    has_website_api: bool
    is_api_first: bool
    is_realtime: bool
    has_jobs: bool

    has_sql: bool
    has_nosql: bool
    has_files: bool
    has_cache: bool
    has_search: bool

    has_https: bool
    has_waf: bool
    has_private_db: bool
    has_compliance: bool

    is_multi_az: bool
    has_backups: bool
    has_blue_green: bool

    has_basic_monitoring: bool
    has_advanced_monitoring: bool

    has_cicd: bool
    has_support: bool

    @classmethod
    def from_selection(
        cls,
        tier: Tier,
        selection: Iterable[ItemId | str],
        addons: Addons | None,
        region: Region | str,
    ) -> "FeatureFlags":
        tier = coerce_tier(tier)
        region = coerce_region(region)
        addons = addons or Addons()
        ids = frozenset(normalize_selection(selection)[0])

        def has(item_id: ItemId) -> bool:
            return item_id in ids

        return cls(
            tier=tier,
            region=region,
            selected=ids,
            is_static=has(ItemId.STYLE_STATIC),
            has_website_api=has(ItemId.STYLE_WEBSITE_API),
            is_api_first=has(ItemId.STYLE_API_FIRST),
            is_realtime=has(ItemId.STYLE_REALTIME),
            has_jobs=has(ItemId.STYLE_JOBS),
            has_sql=has(ItemId.DATA_SQL),
            has_nosql=has(ItemId.DATA_NOSQL),
            has_files=has(ItemId.DATA_FILES),
            has_cache=has(ItemId.DATA_CACHE),
            has_search=has(ItemId.DATA_SEARCH),
            has_https=has(ItemId.SEC_HTTPS),
            has_waf=has(ItemId.SEC_WAF),
            has_private_db=has(ItemId.SEC_PRIVATE_DB),
            has_compliance=has(ItemId.SEC_COMPLIANCE),
            is_multi_az=has(ItemId.REL_MULTI_AZ),
            has_backups=has(ItemId.REL_BACKUPS),
            has_blue_green=has(ItemId.REL_BLUE_GREEN),
            has_basic_monitoring=has(ItemId.OPS_BASIC),
            has_advanced_monitoring=has(ItemId.OPS_ADVANCED),
            has_cicd=bool(addons.cicd),
            has_support=addons.effective_support(tier),
        )

    def has(self, item_id: ItemId) -> bool:
        return item_id in self.selected

    @property
    def is_tier3(self) -> bool:
        return self.tier is Tier.TERRAFORM_KIT

    @property
    def needs_cdn(self) -> bool:
        return self.is_static or self.has_website_api

    @property
    def needs_compute(self) -> bool:
        # Any app style other than a pure static site runs code.
        return self.has_website_api or self.is_api_first or self.is_realtime or self.has_jobs

    @property
    def needs_alb(self) -> bool:
        # Realtime traffic enters through the WebSocket API instead.
        return not self.is_realtime and (self.has_website_api or self.is_api_first or self.has_jobs)

    @property
    def needs_vpc(self) -> bool:
        return self.needs_compute or self.has_sql or self.has_nosql or self.has_cache or self.has_search

    @property
    def has_monitoring(self) -> bool:
        return self.has_basic_monitoring or self.has_advanced_monitoring


__all__ = ["FeatureFlags"]
