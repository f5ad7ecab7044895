from aws_recipe_architect.planner import Recipe, validate_recipe


def _codes(recipe):
    return [issue.code for issue in validate_recipe(recipe)]


def test_complete_recipe_has_no_issues():
    recipe = Recipe.build(2, ["traffic-small", "style-website-api", "data-sql"], support=True)
    assert validate_recipe(recipe) == []


def test_missing_traffic_and_app_style():
    assert _codes(Recipe.build(2, ["data-sql"])) == ["no_traffic", "no_app_style"]


def test_exclusive_conflict_is_an_error():
    issues = validate_recipe(Recipe.build(2, ["traffic-small", "traffic-large", "style-static"]))
    assert [i.code for i in issues] == ["exclusive_conflict"]
    assert issues[0].severity == "error"
    assert "traffic-small, traffic-large" in issues[0].message


def test_support_outside_tier2_is_flagged():
    assert _codes(Recipe.build(3, ["traffic-small", "style-static"], support=True)) == ["support_requires_tier2"]


def test_tier1_account_id_checks():
    base = ["traffic-small", "style-static"]
    assert _codes(Recipe.build(1, base)) == ["aws_account_missing"]
    invalid = validate_recipe(Recipe.build(1, base, aws_account_id="1234"))
    assert [(i.code, i.severity) for i in invalid] == [("aws_account_invalid", "error")]
    assert validate_recipe(Recipe.build(1, base, aws_account_id=" 123456789012 ")) == []


def test_account_id_not_required_on_other_tiers():
    assert validate_recipe(Recipe.build(3, ["traffic-small", "style-static"])) == []


def test_unknown_items_are_reported():
    issues = validate_recipe(Recipe.build(2, ["traffic-small", "style-static", "style-mainframe"]))
    assert [i.code for i in issues] == ["unknown_items"]
    assert "style-mainframe" in str(issues[0])
