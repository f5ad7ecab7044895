import json
from pathlib import Path

import pytest

from aws_recipe_architect import cli


def _run_dir(tmp_path, prefix):
    return tmp_path / "runs" / prefix


def test_cli_writes_run_artifacts(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    cli.main(
        [
            "--tier",
            "3",
            "-i",
            "traffic-prototype,style-static",
            "--output-format",
            "both",
            "--output-prefix",
            "static",
        ]
    )

    run_dir = _run_dir(tmp_path, "static")
    for name in ("plan.json", "report.md", "checkout_payload.json", "metadata.json", "trace.jsonl", "console.log"):
        assert (run_dir / name).exists(), name

    plan = json.loads((run_dir / "plan.json").read_text(encoding="utf-8"))
    assert [c["id"] for c in plan["plan"]["components"]] == ["internet", "dns", "cdn", "s3-frontend"]
    assert plan["estimate"]["provider"] == {"setupFee": 499, "monthlyFee": 0}
    assert plan["issues"] == []

    phases = [json.loads(line)["phase"] for line in (run_dir / "trace.jsonl").read_text(encoding="utf-8").splitlines()]
    assert phases[0] == "phase0_setup"
    assert "phase3_pricing" in phases


def test_cli_reads_yaml_recipe_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    recipe_path = Path("recipe.yaml")
    recipe_path.write_text(
        "tier: 1\n"
        "region: eu-west-1\n"
        "selections: [traffic-small, style-api-first]\n"
        "addons: {cicd: true}\n"
        'awsAccountId: "123456789012"\n',
        encoding="utf-8",
    )
    cli.main(["--recipe-file", str(recipe_path), "-i", "data-nosql", "--output-format", "json", "--output-prefix", "yaml"])

    run_dir = _run_dir(tmp_path, "yaml")
    assert not (run_dir / "report.md").exists()
    payload = json.loads((run_dir / "checkout_payload.json").read_text(encoding="utf-8"))
    assert payload["selections"] == ["traffic-small", "style-api-first", "data-nosql"]
    assert payload["aspenxPrice"] == {"setupFee": 1500 + 250 + 200 + 150 + 500, "monthlyFee": 0}
    assert payload["awsAccountId"] == "123456789012"
    # (25 + 11 * 4) * 1.05 = 72.45
    assert payload["awsEstimate"] == 72


def test_cli_yaml_recipe_with_unquoted_scalars(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    Path("recipe.yaml").write_text(
        "tier: 1\n"
        "region: 5\n"
        "selections: [traffic-small, style-static]\n"
        "awsAccountId: 123456789012\n",
        encoding="utf-8",
    )
    cli.main(["--recipe-file", "recipe.yaml", "--output-format", "json", "--output-prefix", "unquoted"])

    payload = json.loads((_run_dir(tmp_path, "unquoted") / "checkout_payload.json").read_text(encoding="utf-8"))
    assert payload["awsAccountId"] == "123456789012"
    assert payload["region"] == cli.DEFAULT_REGION


@pytest.mark.parametrize(
    "name, body",
    [
        ("recipe.json", '{"tier": 2, "selections": ['),
        ("recipe.yaml", "tier: [2\nselections: [style-static]\n"),
    ],
)
def test_cli_rejects_malformed_recipe_file(tmp_path, monkeypatch, name, body):
    monkeypatch.chdir(tmp_path)
    Path(name).write_text(body, encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        cli.main(["--recipe-file", name, "--output-prefix", "malformed"])
    assert exc.value.code == cli.EXIT_BAD_INPUT


def test_cli_rejects_boolean_tier_in_recipe_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    Path("recipe.json").write_text('{"tier": true, "selections": ["style-static"]}', encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        cli.main(["--recipe-file", "recipe.json", "--output-prefix", "booltier"])
    assert exc.value.code == cli.EXIT_BAD_INPUT


def test_cli_strict_mode_stops_before_report(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(SystemExit) as exc:
        cli.main(["--tier", "3", "-i", "style-static", "--strict", "--output-prefix", "strict"])
    assert exc.value.code == cli.EXIT_STRICT

    run_dir = _run_dir(tmp_path, "strict")
    assert (run_dir / "plan.json").exists()
    assert not (run_dir / "report.md").exists()


def test_cli_rejects_invalid_tier(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(SystemExit) as exc:
        cli.main(["--tier", "7", "-i", "style-static", "--output-prefix", "bad"])
    assert exc.value.code == cli.EXIT_BAD_INPUT


def test_cli_rejects_missing_recipe_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(SystemExit) as exc:
        cli.main(["--recipe-file", "nope.json", "--output-prefix", "missing"])
    assert exc.value.code == cli.EXIT_BAD_INPUT


def test_cli_list_items_does_not_create_run_dir(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    cli.main(["--list-items"])
    assert not (tmp_path / "runs").exists()
    out = capsys.readouterr().out
    assert "traffic-prototype" in out
    assert "ap-southeast-1" in out
