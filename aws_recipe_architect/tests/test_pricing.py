import pytest

from aws_recipe_architect.catalog import ItemId
from aws_recipe_architect.planner import Addons
from aws_recipe_architect.pricing import (
    aws_usage_estimate,
    calculate_estimate,
    complexity_label,
    complexity_score,
    round_dollars,
    starts_from,
)


def _labels(estimate):
    return [line.label for line in estimate.breakdown]


def test_static_prototype_on_tier3_is_base_fee_only():
    est = calculate_estimate(3, ["traffic-prototype", "style-static"], Addons(), "us-east-1")
    assert est.setup_fee == 499
    assert est.monthly_fee == 0
    # zero-amount items produce no breakdown line
    assert _labels(est) == ["Tier 3: Terraform Kit (base)"]
    assert est.complexity_score == 2
    assert est.complexity_label == "Low"
    assert est.aws_monthly_estimate == 33


def test_managed_tier_items_are_recurring():
    est = calculate_estimate(
        2,
        ["traffic-medium", "style-website-api", "data-sql", "sec-https", "rel-multi-az"],
        Addons(support=True),
        "us-east-1",
    )
    assert est.setup_fee == 0
    assert est.monthly_fee == 299 + 149 + 59 + 59 + 79 + 199
    assert est.monthly_fee > 299
    assert all(line.recurring for line in est.breakdown)
    assert _labels(est)[-1] == "Support & infra changes (monthly)"
    assert est.complexity_score == 26
    assert est.aws_monthly_estimate == 25 + 26 * 4 + 30 + 40


def test_tier1_realtime_with_cicd():
    est = calculate_estimate(1, ["style-realtime"], Addons(cicd=True), "us-east-1")
    assert est.setup_fee == 1500 + 500 + 500
    assert est.monthly_fee == 0
    assert est.breakdown[-1].label == "CI/CD pipeline setup (one-time)"
    assert est.aws_monthly_estimate == 25 + 8 * 4 + 20


def test_cicd_addon_is_one_time_on_tier2():
    est = calculate_estimate(2, [], Addons(cicd=True))
    assert est.setup_fee == 500
    assert est.monthly_fee == 299


def test_cicd_addon_price_on_tier3():
    est = calculate_estimate(3, [], Addons(cicd=True))
    assert est.setup_fee == 499 + 299


@pytest.mark.parametrize("tier", [1, 3])
def test_support_addon_ignored_outside_tier2(tier):
    with_support = calculate_estimate(tier, ["style-api-first"], Addons(support=True))
    without = calculate_estimate(tier, ["style-api-first"], Addons())
    assert with_support == without
    assert with_support.monthly_fee == 0


def test_breakdown_follows_selection_order_and_totals_add_up():
    est = calculate_estimate(1, ["data-sql", "traffic-small", "sec-waf"], Addons(cicd=True))
    assert _labels(est) == [
        "Tier 1: Deploy & Ownership Transfer (base)",
        "SQL database",
        "Small scale infra",
        "WAF protection",
        "CI/CD pipeline setup (one-time)",
    ]
    assert est.setup_fee == sum(line.amount for line in est.one_time_lines)
    assert est.monthly_fee == sum(line.amount for line in est.recurring_lines) == 0


def test_exclusive_violation_prices_every_selected_item():
    est = calculate_estimate(1, ["traffic-small", "traffic-large"], Addons())
    assert est.setup_fee == 1500 + 250 + 1500
    assert est.complexity_score == 13


def test_unknown_ids_contribute_nothing():
    assert calculate_estimate(2, ["style-jobs", "retired-item"]) == calculate_estimate(2, ["style-jobs"])


@pytest.mark.parametrize(
    "tier,setup,monthly",
    [(1, 1500, 0), (2, 0, 299), (3, 499, 0)],
)
def test_base_fee_floors(tier, setup, monthly):
    floor = starts_from(tier)
    assert (floor.setup_fee, floor.monthly_fee) == (setup, monthly)
    est = calculate_estimate(tier, [])
    assert est.setup_fee >= setup
    assert est.monthly_fee >= monthly
    assert est.starts_from == floor


def test_complexity_is_clamped_to_ceiling():
    everything = list(ItemId)
    assert complexity_score(everything, ceiling=0) == 105
    assert complexity_score(everything) == 100
    assert complexity_score(everything, ceiling=50) == 50
    assert calculate_estimate(2, everything).complexity_label == "High"


@pytest.mark.parametrize("score,label", [(0, "Low"), (29, "Low"), (30, "Medium"), (59, "Medium"), (60, "High")])
def test_complexity_labels(score, label):
    assert complexity_label(score) == label


def test_adding_an_item_never_lowers_complexity():
    base = ["traffic-small", "style-api-first"]
    before = complexity_score(base)
    for item_id in ItemId:
        assert complexity_score(base + [item_id.value]) >= before


def test_region_multiplier_applies_to_usage_only():
    us = calculate_estimate(3, ["traffic-prototype", "style-static"], region="us-east-1")
    sg = calculate_estimate(3, ["traffic-prototype", "style-static"], region="ap-southeast-1")
    fra = calculate_estimate(3, ["traffic-prototype", "style-static"], region="eu-central-1")
    assert sg.setup_fee == us.setup_fee
    assert sg.aws_monthly_estimate == 40  # 33 * 1.20 = 39.6
    assert fra.aws_monthly_estimate == 36  # 33 * 1.10 = 36.3
    assert sg.region_multiplier == 1.20


def test_usage_estimate_rounds_half_up():
    # (25 + 5 * 4 + 5) * 1.05 = 52.5
    assert aws_usage_estimate(5, [ItemId.TRAFFIC_SMALL, ItemId.DATA_FILES], "eu-west-1") == 53
    assert calculate_estimate(2, ["traffic-small", "data-files"], region="eu-west-1").aws_monthly_estimate == 53


@pytest.mark.parametrize("value,expected", [(2.5, 3), (3.5, 4), (52.5, 53), (0.49, 0), (10, 10)])
def test_round_dollars(value, expected):
    assert round_dollars(value) == expected
