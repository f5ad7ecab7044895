from __future__ import annotations

from typing import Any, List

from ..catalog import CATALOG, region_label
from ..config import CURRENCY
from ..planner.types import DeploymentPlan
from ..pricing.estimate import PriceEstimate


def _md_escape(v: Any) -> str:
    s = "" if v is None else str(v)
    # Escape pipes so Markdown tables don't break
    return s.replace("|", "\\|").replace("\n", " ").strip()


def _format_currency(value: int, currency: str = CURRENCY) -> str:
    return f"{value:,} {currency}"


def _item_label(item_id: Any) -> str:
    item = CATALOG.get(item_id)
    return item.label if item else str(item_id)


def render_summary(compiled) -> str:
    recipe = compiled.recipe
    addons = [name for name, on in (("CI/CD", recipe.addons.cicd), ("Support", recipe.addons.support)) if on]
    rows = [
        "| Field | Value |",
        "|---|---|",
        f"| Tier | {int(recipe.tier)} ({_md_escape(recipe.tier.title)}) |",
        f"| Region | {recipe.region.value} ({_md_escape(region_label(recipe.region))}) |",
        f"| Selections | {_md_escape(', '.join(_item_label(i) for i in recipe.selection) or '-')} |",
        f"| Add-ons | {_md_escape(', '.join(addons) or '-')} |",
    ]
    if recipe.aws_account_id:
        rows.append(f"| AWS account | `{_md_escape(recipe.aws_account_id)}` |")
    return "\n".join(rows)


def render_components_table(plan: DeploymentPlan) -> str:
    rows = [
        "| # | Component | Category | AWS services | Driven by | Details |",
        "|---:|---|---|---|---|---|",
    ]
    for idx, c in enumerate(plan.components, start=1):
        rows.append(
            "| {idx} | {name} ({sub}) | {cat} | {svc} | {drv} | {det} |".format(
                idx=idx,
                name=_md_escape(c.name),
                sub=_md_escape(c.sub),
                cat=c.category.value,
                svc=_md_escape(", ".join(c.aws_services) or "-"),
                drv=_md_escape(", ".join(c.driven_by) or "-"),
                det=_md_escape("; ".join(c.details)),
            )
        )
    return "\n".join(rows)


def render_network_table(plan: DeploymentPlan) -> str:
    vpc = plan.vpc
    rows = [
        f"VPC `{vpc.cidr}` across {len(vpc.azs)} AZ(s): {', '.join(vpc.azs)}",
        "",
        "| AZ | Subnet | CIDR |",
        "|---|---|---|",
    ]
    for subnet in vpc.subnets:
        rows.append(f"| {subnet.az} | {subnet.role.value} | `{subnet.cidr}` |")
    return "\n".join(rows)


def render_flows(plan: DeploymentPlan) -> str:
    out: List[str] = []
    for flow in plan.flows:
        out.append(f"### {_md_escape(flow.name)}")
        out.extend(f"{n}. {step}" for n, step in enumerate(flow.steps, start=1))
        out.append("")
    return "\n".join(out).strip()


def render_price_table(estimate: PriceEstimate) -> str:
    rows = [
        "| Line | Billing | Amount |",
        "|---|---|---:|",
    ]
    for line in estimate.breakdown:
        billing = "monthly" if line.recurring else "one-time"
        rows.append(f"| {_md_escape(line.label)} | {billing} | {_format_currency(line.amount)} |")
    rows.append(f"| **Setup total** | one-time | **{_format_currency(estimate.setup_fee)}** |")
    rows.append(f"| **Monthly total** | monthly | **{_format_currency(estimate.monthly_fee)}** |")
    return "\n".join(rows)


def render_aws_estimate(estimate: PriceEstimate) -> str:
    return "\n".join(
        [
            f"- Estimated AWS usage: **~{_format_currency(estimate.aws_monthly_estimate)} / month**",
            f"- Region multiplier: x{estimate.region_multiplier:.2f}",
            f"- Complexity: {estimate.complexity_score} ({estimate.complexity_label})",
            "- Billed separately by Amazon; placeholder model, not a quote.",
        ]
    )


def render_warnings(compiled) -> str:
    lines = [f"- **{i.severity}** `{i.code}`: {_md_escape(i.message)}" for i in compiled.issues]
    lines.extend(f"- **contract** `{e.get('type')}`: {_md_escape(e)}" for e in compiled.contract_errors)
    return "\n".join(lines)


def render_report(compiled) -> str:
    """Markdown report for a CompiledRecipe: summary, BOM, network, flows, price."""
    plan = compiled.plan
    estimate = compiled.estimate

    sections: List[str] = [
        "# Deployment plan",
        "",
        "## Recipe",
        render_summary(compiled),
        "",
        "## Bill of materials",
        render_components_table(plan),
        "",
        "## Network",
        render_network_table(plan),
        "",
        "## Data flows",
        render_flows(plan),
        "",
        "## Provider fees",
        render_price_table(estimate),
        "",
        "## AWS usage estimate",
        render_aws_estimate(estimate),
    ]

    warnings = render_warnings(compiled)
    if warnings:
        sections.extend(["", "## Warnings", warnings])

    return "\n".join(sections).strip() + "\n"


__all__ = [
    "render_aws_estimate",
    "render_components_table",
    "render_flows",
    "render_network_table",
    "render_price_table",
    "render_report",
]
