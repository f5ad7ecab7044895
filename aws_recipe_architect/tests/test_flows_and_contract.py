from dataclasses import replace

from aws_recipe_architect.compiler import build_deployment_plan
from aws_recipe_architect.planner import Addons, check_plan_contract
from aws_recipe_architect.planner.types import FlowType, PlanFlow


def _flow(plan, flow_id):
    flow = plan.flow(flow_id)
    assert flow is not None, f"{flow_id} missing from {[f.id for f in plan.flows]}"
    return flow


def test_static_site_has_request_flow_only():
    plan = build_deployment_plan(3, ["traffic-prototype", "style-static"])
    assert [f.id for f in plan.flows] == ["request"]
    request = _flow(plan, "request")
    assert request.type is FlowType.REQUEST
    assert request.steps == (
        "CloudFront checks edge cache; a cache hit returns immediately",
        "Response returned to client (with CDN caching headers if applicable)",
    )
    assert request.touches == ("cdn",)


def test_request_flow_follows_entrypoint():
    alb_plan = build_deployment_plan(2, ["style-api-first", "data-sql", "data-cache", "sec-waf"])
    steps = _flow(alb_plan, "request").steps
    assert steps[0].startswith("WAF")
    assert any(s.startswith("ALB terminates TLS") for s in steps)
    assert not any("WebSocket" in s for s in steps)
    assert steps[-1].startswith("Response returned")

    ws_plan = build_deployment_plan(2, ["style-realtime"])
    steps = _flow(ws_plan, "request").steps
    assert "API Gateway upgrades HTTP to WebSocket (WSS)" in steps
    assert not any(s.startswith("ALB") for s in steps)


def test_upload_flow_requires_files_and_compute_for_presigned_urls():
    plan = build_deployment_plan(2, ["style-website-api", "data-files", "ops-advanced"])
    upload = _flow(plan, "upload")
    assert upload.steps[0] == "Client requests a pre-signed S3 URL from compute"
    assert upload.steps[-1] == "Upload metrics tracked in CloudWatch"

    static = build_deployment_plan(2, ["style-static", "data-files"])
    assert _flow(static, "upload").steps == ("Client uploads file directly to S3 object storage",)

    assert build_deployment_plan(2, ["style-website-api"]).flow("upload") is None


def test_async_flow_present_only_with_jobs():
    plan = build_deployment_plan(2, ["style-jobs"])
    async_flow = _flow(plan, "async")
    assert len(async_flow.steps) == 5
    assert set(async_flow.touches) == {"compute", "queue", "worker"}

    assert build_deployment_plan(2, ["style-api-first"]).flow("async") is None


def test_telemetry_flow_depth_follows_monitoring_level():
    basic = _flow(build_deployment_plan(2, ["ops-basic"]), "telemetry")
    advanced = _flow(build_deployment_plan(2, ["ops-advanced"]), "telemetry")
    assert len(basic.steps) == 3
    assert len(advanced.steps) == 5
    assert any("X-Ray" in s for s in advanced.steps)
    assert not any("X-Ray" in s for s in basic.steps)


def test_compiled_plans_satisfy_contract():
    plan = build_deployment_plan(
        2,
        ["traffic-large", "style-website-api", "style-jobs", "data-files", "ops-advanced", "rel-multi-az"],
        Addons(cicd=True, support=True),
    )
    assert check_plan_contract(plan) == []
    present = set(plan.component_ids)
    for flow in plan.flows:
        assert set(flow.touches) <= present


def test_contract_reports_broken_plans():
    plan = build_deployment_plan(2, ["style-jobs"])
    without_worker = tuple(c for c in plan.components if c.id != "worker")
    ghost = PlanFlow(id="ghost", name="Ghost", type=FlowType.REQUEST, steps=(), touches=("search",))
    broken = replace(
        plan,
        components=without_worker + (plan.component("queue"),),
        flows=plan.flows + (ghost,),
    )

    types = [e["type"] for e in check_plan_contract(broken)]
    assert "duplicate_component" in types
    assert "unpaired_async" in types
    assert "empty_flow" in types
    assert "flow_references_missing_component" in types


def test_contract_flags_bad_vpc_shape():
    plan = build_deployment_plan(2, ["style-api-first", "rel-multi-az"])
    broken = replace(plan, vpc=replace(plan.vpc, multi_az=False))
    assert [e["type"] for e in check_plan_contract(broken)] == ["vpc_shape"]
