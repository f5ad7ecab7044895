import json

from aws_recipe_architect.compiler import compile_recipe
from aws_recipe_architect.planner import Recipe
from aws_recipe_architect.reporting import build_checkout_payload, estimate_to_dict, plan_to_dict, render_report
from aws_recipe_architect.reporting.format import _md_escape


def _compiled():
    recipe = Recipe.build(
        2,
        ["traffic-medium", "style-website-api", "data-sql", "rel-multi-az", "ops-basic"],
        region="eu-west-1",
        support=True,
    )
    return compile_recipe(recipe)


def test_md_escape_keeps_tables_intact():
    assert _md_escape("a|b\nc") == "a\\|b c"
    assert _md_escape(None) == ""


def test_render_report_sections_and_content():
    report = render_report(_compiled())
    for heading in (
        "## Recipe",
        "## Bill of materials",
        "## Network",
        "## Data flows",
        "## Provider fees",
        "## AWS usage estimate",
    ):
        assert heading in report
    assert "Relational DB (PostgreSQL · RDS)" in report
    assert "| eu-west-1b | private-data | `10.0.80.0/24` |" in report
    assert "### Request path" in report
    assert "| Support & infra changes (monthly) | monthly | 199 USD |" in report
    assert "## Warnings" not in report


def test_render_report_lists_warnings():
    compiled = compile_recipe(Recipe.build(3, ["style-static"], support=True))
    report = render_report(compiled)
    assert "## Warnings" in report
    assert "`no_traffic`" in report
    assert "`support_requires_tier2`" in report


def test_plan_to_dict_uses_wire_keys():
    data = plan_to_dict(_compiled().plan)
    json.dumps(data)
    assert data["tier"] == 2
    assert data["region"] == "eu-west-1"
    assert data["regionLabel"] == "EU (Ireland)"
    assert data["vpc"]["multiAz"] is True
    assert data["vpc"]["subnets"][0] == {"az": "eu-west-1a", "type": "public", "cidr": "10.0.0.0/24"}
    rds = next(c for c in data["components"] if c["id"] == "rds")
    assert rds["awsServices"] == ["RDS PostgreSQL", "Multi-AZ Standby"]
    assert rds["diagramGroup"] == "data"
    assert {f["id"] for f in data["flows"]} == {"request", "telemetry"}


def test_estimate_to_dict_marks_setup_lines():
    compiled = compile_recipe(Recipe.build(1, ["traffic-small"], cicd=True, aws_account_id="123456789012"))
    data = estimate_to_dict(compiled.estimate)
    assert data["provider"] == {"setupFee": 1500 + 250 + 500, "monthlyFee": 0}
    assert all(line["isSetup"] for line in data["breakdown"])
    assert data["startsFrom"] == {"setupFee": 1500, "monthlyFee": 0}


def test_checkout_payload_tier1_includes_account():
    recipe = Recipe.build(1, ["traffic-small", "style-static"], cicd=True, aws_account_id="123456789012")
    compiled = compile_recipe(recipe)
    payload = build_checkout_payload(recipe, compiled.estimate, user_email="dev@example.com")
    assert payload == {
        "tier": 1,
        "region": "us-east-1",
        "selections": ["traffic-small", "style-static"],
        "addons": {"cicd": True, "support": False},
        "aspenxPrice": {"setupFee": 2250, "monthlyFee": 0},
        "awsEstimate": compiled.estimate.aws_monthly_estimate,
        "userEmail": "dev@example.com",
        "awsAccountId": "123456789012",
    }


def test_checkout_payload_other_tiers_omit_account_and_email():
    recipe = Recipe.build(2, ["traffic-small", "style-static"], aws_account_id="123456789012")
    payload = build_checkout_payload(recipe, compile_recipe(recipe).estimate)
    assert "awsAccountId" not in payload
    assert "userEmail" not in payload
    assert payload["aspenxPrice"] == {"setupFee": 0, "monthlyFee": 299 + 49}
