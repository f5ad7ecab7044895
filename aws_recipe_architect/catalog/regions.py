"""Supported deployment regions and their AWS usage cost multipliers."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, Tuple

from ..config import DEFAULT_REGION

_LOGGER = logging.getLogger(__name__)


class Region(str, Enum):
    US_EAST_1 = "us-east-1"
    US_WEST_2 = "us-west-2"
    EU_WEST_1 = "eu-west-1"
    EU_CENTRAL_1 = "eu-central-1"
    AP_SOUTHEAST_1 = "ap-southeast-1"

    def __str__(self) -> str:
        return self.value


REGIONS: Tuple[Tuple[Region, str], ...] = (
    (Region.US_EAST_1, "US East (N. Virginia)"),
    (Region.US_WEST_2, "US West (Oregon)"),
    (Region.EU_WEST_1, "EU (Ireland)"),
    (Region.EU_CENTRAL_1, "EU (Frankfurt)"),
    (Region.AP_SOUTHEAST_1, "Asia Pacific (Singapore)"),
)

# us-east-1 is the baseline the usage model was calibrated against.
_MULTIPLIERS: Dict[Region, float] = {
    Region.US_EAST_1: 1.00,
    Region.US_WEST_2: 1.00,
    Region.EU_WEST_1: 1.05,
    Region.EU_CENTRAL_1: 1.10,
    Region.AP_SOUTHEAST_1: 1.20,
}

_LABELS: Dict[Region, str] = dict(REGIONS)


def region_label(region: Region) -> str:
    return _LABELS[region]


def region_multiplier(region: Region) -> float:
    return _MULTIPLIERS[region]


def resolve_default_region(code: str) -> Region:
    """Resolve the configured default region; an unsupported code is a config error."""
    try:
        return Region(code.strip().lower())
    except ValueError:
        supported = ", ".join(r.value for r in Region)
        raise ValueError(
            f"AWSRECIPE_DEFAULT_REGION={code!r} is not a supported region (expected one of: {supported})"
        ) from None


FALLBACK_REGION: Region = resolve_default_region(DEFAULT_REGION)


def coerce_region(raw: Any) -> Region:
    """Map a raw region code to a Region, falling back to the default.

    Stale or mistyped codes are not fatal: the recipe keeps compiling in the
    default region and the fallback is logged. Non-string values (a YAML
    ``region: 5``) are treated as unknown codes.
    """
    if isinstance(raw, Region):
        return raw
    code = "" if raw is None else str(raw).strip().lower()
    try:
        return Region(code)
    except ValueError:
        if code:
            _LOGGER.warning("Unknown region %r, using %s", raw, FALLBACK_REGION.value)
        return FALLBACK_REGION


__all__ = [
    "FALLBACK_REGION",
    "Region",
    "REGIONS",
    "coerce_region",
    "region_label",
    "region_multiplier",
    "resolve_default_region",
]
