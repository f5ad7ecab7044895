#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
AWS Recipe Architect – CLI

Flow:
- Builds a recipe from flags and/or a JSON/YAML recipe file (the builder's
  persisted state shape).
- Validates it (advisory issues) and compiles it into a DeploymentPlan plus a
  PriceEstimate.
- Writes runs/<prefix>/plan.json, report.md, checkout_payload.json,
  metadata.json, trace.jsonl and console.log.

Exit codes: 0 ok, 1 bad input, 2 --strict with recipe issues, 3 plan
contract violation.
"""

import argparse
import json
import logging
import os
import sys
from datetime import datetime, timezone
from importlib import metadata
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from rich.console import Console
from rich.table import Table

from .catalog import CATALOG, REGIONS
from .compiler import CompiledRecipe, compile_recipe
from .config import DEFAULT_LOG_LEVEL, DEFAULT_REGION, DEFAULT_TIER, RUNS_DIR
from .planner.recipe import Recipe
from .reporting import build_checkout_payload, estimate_to_dict, plan_to_dict, render_report
from .utils.trace import TraceLogger

console = Console()

EXIT_BAD_INPUT = 1
EXIT_STRICT = 2
EXIT_CONTRACT = 3


# --------------------------------------------------------------------
# Argument parsing
# --------------------------------------------------------------------
def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="aws-recipe",
        description=(
            "AWS Recipe Architect – deployment plan compiler\n\n"
            "Turns a recipe (traffic, app style, data, security, reliability, ops)\n"
            "plus a delivery tier, region and add-ons into:\n"
            "- an ordered bill of materials of AWS components\n"
            "- a VPC / subnet layout\n"
            "- request, upload, async and telemetry flow narratives\n"
            "- a provider fee estimate and a separate AWS usage estimate.\n"
        ),
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--tier",
        type=int,
        default=None,
        help=f"Delivery tier: 1 deploy & own, 2 managed, 3 Terraform kit (default {DEFAULT_TIER}).",
    )
    parser.add_argument(
        "--region",
        type=str,
        default=None,
        help=f"AWS region code (default {DEFAULT_REGION}). Unknown codes fall back to the default.",
    )
    parser.add_argument(
        "-i",
        "--item",
        action="append",
        default=[],
        help=(
            "Recipe item id. Repeat the flag or comma-separate, e.g.:\n"
            "  -i traffic-small -i style-website-api,data-sql"
        ),
    )
    parser.add_argument(
        "--recipe-file",
        type=str,
        default=None,
        help="JSON or YAML recipe (tier, region, selections, addons, awsAccountId). Flags override it.",
    )
    parser.add_argument("--cicd", action="store_true", help="Add the CI/CD pipeline add-on.")
    parser.add_argument("--support", action="store_true", help="Add the support add-on (Tier 2 only).")
    parser.add_argument(
        "--aws-account-id",
        type=str,
        default=None,
        help="12-digit AWS account id that receives ownership (Tier 1).",
    )
    parser.add_argument(
        "--user-email",
        type=str,
        default=None,
        help="Customer e-mail to include in the checkout payload.",
    )

    parser.add_argument(
        "--output-format",
        choices=["markdown", "json", "both"],
        default="markdown",
        help=(
            "What to produce besides plan.json:\n"
            "  - markdown: also write and print report.md.\n"
            "  - json: only the JSON artifacts.\n"
            "  - both: JSON artifacts and the Markdown report."
        ),
    )
    parser.add_argument(
        "--output-prefix",
        type=str,
        default="aws_recipe",
        help=f"Run folder name under {RUNS_DIR}/.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with code 2 (before writing the report) when validation reports any issue.",
    )
    parser.add_argument(
        "--log-level",
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        default=DEFAULT_LOG_LEVEL.upper(),
        help="Logging level for internal messages.",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Force writing a run trace JSONL (enabled by default).",
    )
    parser.add_argument(
        "--trace-path",
        type=str,
        default=None,
        help="Override trace output path (default: runs/<prefix>/trace.jsonl)",
    )
    parser.add_argument(
        "--list-items",
        action="store_true",
        help="Print the recipe catalog and supported regions, then exit.",
    )

    return parser.parse_args(argv)


# --------------------------------------------------------------------
# Helpers
# --------------------------------------------------------------------
def _load_recipe_file(path: str) -> Dict[str, Any]:
    fp = Path(path)
    if not fp.exists():
        raise ValueError(f"Recipe file not found: {fp}")
    raw = fp.read_text(encoding="utf-8")
    if fp.suffix.lower() in (".yaml", ".yml"):
        try:
            data = yaml.safe_load(raw) or {}
        except yaml.YAMLError as ex:
            raise ValueError(f"Recipe file {fp} is not valid YAML: {ex}") from ex
    else:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as ex:
            raise ValueError(f"Recipe file {fp} is not valid JSON: {ex}") from ex
    if not isinstance(data, dict):
        raise ValueError(f"Recipe file {fp} must contain a mapping")
    return data


def _split_items(values: List[str]) -> List[str]:
    out: List[str] = []
    for value in values:
        out.extend(v.strip() for v in value.split(",") if v.strip())
    return out


def _recipe_from_args(args: argparse.Namespace) -> Recipe:
    """Merge the recipe file (if any) with CLI flags. Flags win; items are appended."""
    data: Dict[str, Any] = _load_recipe_file(args.recipe_file) if args.recipe_file else {}

    if args.tier is not None:
        data["tier"] = args.tier
    if data.get("tier") is None:
        data["tier"] = DEFAULT_TIER
    if args.region:
        data["region"] = args.region

    file_items = data.get("selections", data.get("items")) or []
    if not isinstance(file_items, list):
        raise ValueError("Recipe selections must be a list")
    data["selections"] = list(file_items) + _split_items(args.item)

    addons = dict(data["addons"]) if isinstance(data.get("addons"), dict) else {}
    addons["cicd"] = bool(addons.get("cicd")) or args.cicd
    addons["support"] = bool(addons.get("support")) or args.support
    data["addons"] = addons

    if args.aws_account_id:
        data["awsAccountId"] = args.aws_account_id

    return Recipe.from_dict(data)


def _print_catalog() -> None:
    for topic in CATALOG.topics:
        suffix = " (pick one)" if topic.exclusive else ""
        table = Table(title=f"{topic.label}{suffix}", show_lines=False)
        table.add_column("id", style="cyan", no_wrap=True)
        table.add_column("label")
        table.add_column("AWS hints", style="dim")
        for item in topic.items:
            label = f"{item.label} – {item.description}" if item.description else item.label
            table.add_row(item.id.value, label, "; ".join(item.aws_hints))
        console.print(table)

    regions = Table(title="Regions")
    regions.add_column("code", style="cyan", no_wrap=True)
    regions.add_column("label")
    for code, label in REGIONS:
        regions.add_row(code.value, label)
    console.print(regions)


def _print_summary(compiled: CompiledRecipe) -> None:
    table = Table(title=f"Bill of materials – Tier {int(compiled.plan.tier)} @ {compiled.plan.region.value}")
    table.add_column("#", justify="right")
    table.add_column("component", style="cyan")
    table.add_column("category")
    table.add_column("AWS services", style="dim")
    for idx, component in enumerate(compiled.plan.components, start=1):
        table.add_row(str(idx), f"{component.name} ({component.sub})", component.category.value, ", ".join(component.aws_services))
    console.print(table)

    est = compiled.estimate
    console.print(
        f"[bold]Provider fee:[/bold] {est.setup_fee:,} setup, {est.monthly_fee:,} / month   "
        f"[bold]AWS usage:[/bold] ~{est.aws_monthly_estimate:,} / month   "
        f"[bold]Complexity:[/bold] {est.complexity_score} ({est.complexity_label})"
    )
    for issue in compiled.issues:
        colour = "red" if issue.severity == "error" else "yellow"
        console.print(f"[{colour}]{issue.severity}: {issue}[/{colour}]")


def _write_json(path: Path, payload: Any) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)


def _tool_version() -> str:
    try:
        return metadata.version("aws-recipe-architect")
    except metadata.PackageNotFoundError:
        return "dev"


# --------------------------------------------------------------------
# Main
# --------------------------------------------------------------------
def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)

    if args.list_items:
        _print_catalog()
        return

    run_dir = Path(RUNS_DIR) / args.output_prefix
    run_dir.mkdir(parents=True, exist_ok=True)

    trace_path = Path(args.trace_path) if args.trace_path else run_dir / "trace.jsonl"

    trace_env = os.getenv("AWSRECIPE_TRACE")
    trace_enabled = True
    if trace_env is not None and trace_env.strip().lower() in {"0", "false", "no"}:
        trace_enabled = False
    if args.trace:
        trace_enabled = True

    log_handlers: list[logging.Handler] = [logging.StreamHandler()]
    console_log_path = run_dir / "console.log"
    log_handlers.append(logging.FileHandler(console_log_path, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        handlers=log_handlers,
    )
    logger = logging.getLogger("aws_recipe_architect")
    logger.debug("CLI arguments: %s", args)

    console.print("[bold]AWS Recipe Architect – Deployment Plan Compiler[/bold]\n")

    # ----- recipe -----
    try:
        recipe = _recipe_from_args(args)
    except ValueError as ex:
        logger.error("Invalid recipe input: %s", ex)
        console.print(f"[red]Invalid recipe: {ex}[/red]")
        sys.exit(EXIT_BAD_INPUT)

    recipe_view = {
        "tier": int(recipe.tier),
        "region": recipe.region.value,
        "selections": [i.value for i in recipe.selection],
        "addons": {"cicd": recipe.addons.cicd, "support": recipe.addons.support},
    }
    trace_logger = TraceLogger.for_recipe(trace_path, recipe_view, enabled=trace_enabled)
    trace_logger.log(
        "phase0_setup",
        {
            "tool_version": _tool_version(),
            "recipe": recipe_view,
            "unknown_items": list(recipe.unknown_items),
            "recipe_file": args.recipe_file or "",
        },
    )

    # --------------------
    # 1) Compile
    # --------------------
    try:
        compiled = compile_recipe(recipe)
    except ValueError as ex:
        # Raised by the fee schedule loader on a malformed schedule file.
        logger.error("Compilation failed: %s", ex)
        console.print(f"[red]Compilation failed: {ex}[/red]")
        sys.exit(EXIT_BAD_INPUT)

    trace_logger.log(
        "phase1_validation",
        {"issues": [{"code": i.code, "severity": i.severity, "message": i.message} for i in compiled.issues]},
    )
    for component in compiled.plan.components:
        trace_logger.log(
            "phase2_components",
            {"name": component.name, "driven_by": list(component.driven_by)},
            component_id=component.id,
        )
    trace_logger.log("phase3_pricing", estimate_to_dict(compiled.estimate))

    plan_path = run_dir / "plan.json"
    _write_json(
        plan_path,
        {
            "recipe": recipe_view,
            "plan": plan_to_dict(compiled.plan),
            "estimate": estimate_to_dict(compiled.estimate),
            "issues": [{"code": i.code, "severity": i.severity, "message": i.message} for i in compiled.issues],
            "contract_errors": list(compiled.contract_errors),
        },
    )
    logger.info("Saved plan JSON to %s", plan_path)

    _print_summary(compiled)

    if compiled.contract_errors:
        trace_logger.log("phase4_contract", {"errors": list(compiled.contract_errors)})
        console.print("[red]Plan contract violated; see console.log for details.[/red]")
        sys.exit(EXIT_CONTRACT)

    if args.strict and compiled.issues:
        console.print("[red]--strict is set and the recipe has issues; exiting before report generation.[/red]")
        sys.exit(EXIT_STRICT)

    # --------------------
    # 2) Report + checkout payload
    # --------------------
    md_path = run_dir / "report.md"
    if args.output_format in ("markdown", "both"):
        report_md = render_report(compiled)
        with open(md_path, "w", encoding="utf-8") as f:
            f.write(report_md)
        console.rule("[bold green]Deployment Plan[/bold green]")
        console.print(report_md)
        console.print(f"[green]Saved report to {md_path}[/green]")
        trace_logger.log("phase5_reporting", {"report_path": str(md_path)})
    else:
        logger.info("Markdown report skipped due to --output-format=json")

    checkout = build_checkout_payload(recipe, compiled.estimate, user_email=args.user_email)
    checkout_path = run_dir / "checkout_payload.json"
    _write_json(checkout_path, checkout)
    logger.info("Saved checkout payload to %s", checkout_path)

    metadata_path = run_dir / "metadata.json"
    _write_json(
        metadata_path,
        {
            "timestamp_utc": datetime.now(timezone.utc).isoformat(),
            "command": " ".join(sys.argv),
            "working_directory": os.getcwd(),
            "cli_args": vars(args),
            "tool_version": _tool_version(),
            "derived": {
                "tier": int(recipe.tier),
                "region": recipe.region.value,
                "fee_schedule": compiled.estimate.schedule_id,
                "recipe_fingerprint": trace_logger.fingerprint,
            },
            "output_files": {
                "plan": str(plan_path),
                "report": str(md_path if args.output_format in ("markdown", "both") else ""),
                "checkout_payload": str(checkout_path),
                "trace": str(trace_path) if trace_enabled else "",
                "console_log": str(console_log_path),
            },
        },
    )
    logger.info("Saved run metadata to %s", metadata_path)


if __name__ == "__main__":
    main()
