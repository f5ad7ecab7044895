from .contract import check_plan_contract
from .features import FeatureFlags
from .flows import derive_flows
from .network import derive_vpc
from .recipe import Addons, Recipe, Tier, coerce_tier
from .rules import derive_components
from .validation import RecipeIssue, validate_recipe

__all__ = [
    "Addons",
    "FeatureFlags",
    "Recipe",
    "RecipeIssue",
    "Tier",
    "check_plan_contract",
    "coerce_tier",
    "derive_components",
    "derive_flows",
    "derive_vpc",
    "validate_recipe",
]
