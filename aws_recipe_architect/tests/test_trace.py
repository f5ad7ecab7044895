import json

from aws_recipe_architect.utils.trace import TraceLogger, recipe_fingerprint


def _events(path):
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


def test_fingerprint_ignores_key_order():
    a = recipe_fingerprint({"tier": 2, "selections": ["style-static"]})
    b = recipe_fingerprint({"selections": ["style-static"], "tier": 2})
    c = recipe_fingerprint({"selections": ["style-jobs"], "tier": 2})
    assert a == b
    assert a != c
    assert len(a) == 64


def test_trace_events_carry_sequence_and_fingerprint(tmp_path):
    recipe = {"tier": 3, "selections": ["style-static"]}
    path = tmp_path / "nested" / "trace.jsonl"
    trace = TraceLogger.for_recipe(path, recipe)
    trace.log("phase0_setup", {"x": 1})
    trace.log("phase2_components", {"name": "CDN"}, component_id="cdn")

    events = _events(path)
    assert [e["seq"] for e in events] == [1, 2]
    assert [e["phase"] for e in events] == ["phase0_setup", "phase2_components"]
    assert all(e["recipe"] == recipe_fingerprint(recipe) for e in events)
    assert events[0]["data"] == {"x": 1}
    assert events[1]["component_id"] == "cdn"
    assert "component_id" not in events[0]


def test_same_recipe_traces_match_apart_from_time(tmp_path):
    recipe = {"tier": 1, "selections": ["traffic-small"]}
    paths = [tmp_path / "a.jsonl", tmp_path / "b.jsonl"]
    for path in paths:
        trace = TraceLogger.for_recipe(path, recipe)
        trace.log("phase0_setup", {"recipe": recipe})
        trace.log("phase3_pricing", {"setupFee": 1500})

    stripped = [[{k: v for k, v in e.items() if k != "at"} for e in _events(p)] for p in paths]
    assert stripped[0] == stripped[1]


def test_disabled_trace_writes_nothing(tmp_path):
    path = tmp_path / "trace.jsonl"
    TraceLogger.for_recipe(path, {}, enabled=False).log("phase0_setup", {})
    assert not path.exists()
