import json
from pathlib import Path

import pytest

from plan_commenter.adapters import PlanLoader, PlanLoaderError, find_plan_files, load_plan_document
from plan_commenter.models import MISSING

FIXTURES = Path(__file__).resolve().parent.parent / "fixtures" / "plans"


def write_plan(path: Path, payload) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_load_plan_document_parses_resource_changes():
    plan = load_plan_document(FIXTURES / "network" / "tfplan.json")

    assert plan.variable("environment") == "staging"
    assert [change.address for change in plan.resource_changes][:3] == [
        "aws_s3_bucket.logs",
        "aws_s3_bucket.assets",
        "aws_db_instance.main",
    ]

    created = plan.resource_changes[0]
    assert created.actions == ("create",)
    assert created.before == {}
    assert created.before_sensitive == {}

    replaced = plan.resource_changes[2]
    assert replaced.actions == ("delete", "create")
    assert replaced.after_sensitive == {"password": True}

    imported = plan.resource_changes[4]
    assert imported.is_importing
    assert not plan.resource_changes[5].is_importing


def test_missing_optional_fields_default_to_empty(tmp_path):
    path = write_plan(
        tmp_path / "tfplan.json",
        {"resource_changes": [{"address": "null_resource.x", "change": {"actions": ["create"]}}]},
    )

    plan = load_plan_document(path)

    change = plan.resource_changes[0]
    assert change.before == {}
    assert change.after == {}
    assert change.after_sensitive == {}
    assert change.importing is None
    assert plan.variables == {}


def test_plain_variable_values_are_accepted(tmp_path):
    path = write_plan(
        tmp_path / "tfplan.json",
        {"variables": {"name": "plain"}, "resource_changes": []},
    )

    assert load_plan_document(path).variable("name") == "plain"
    assert load_plan_document(path).variable("absent") is MISSING


def test_null_variable_is_distinct_from_missing(tmp_path):
    path = write_plan(
        tmp_path / "tfplan.json",
        {"variables": {"name": {"value": None}}, "resource_changes": []},
    )

    assert load_plan_document(path).variable("name") is None


def test_whole_object_sensitivity_marker_is_preserved(tmp_path):
    change = {
        "actions": ["update"],
        "before": {"password": "a"},
        "after": {"password": "b"},
        "before_sensitive": True,
        "after_sensitive": False,
    }
    path = write_plan(
        tmp_path / "tfplan.json",
        {"resource_changes": [{"address": "aws_db_instance.main", "change": change}]},
    )

    parsed = load_plan_document(path).resource_changes[0]

    assert parsed.before_sensitive is True
    assert parsed.after_sensitive == {}


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"format_version": "1.2"},
        {"resource_changes": {}},
        {"resource_changes": [{"change": {"actions": ["create"]}}]},
        {"resource_changes": [{"address": "a.b"}]},
        {"resource_changes": [{"address": "a.b", "change": {"actions": []}}]},
    ],
)
def test_invalid_plans_raise(tmp_path, payload):
    path = write_plan(tmp_path / "tfplan.json", payload)

    with pytest.raises(PlanLoaderError):
        load_plan_document(path)


def test_malformed_json_raises(tmp_path):
    path = tmp_path / "tfplan.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(PlanLoaderError, match="Invalid JSON"):
        load_plan_document(path)


def test_missing_artifact_raises(tmp_path):
    with pytest.raises(PlanLoaderError):
        load_plan_document(tmp_path / "missing.json")


def test_find_plan_files_respects_depth(tmp_path):
    plan = {"resource_changes": []}
    write_plan(tmp_path / "tfplan.json", plan)
    write_plan(tmp_path / "a" / "tfplan.json", plan)
    write_plan(tmp_path / "b" / "c" / "tfplan.json", plan)
    write_plan(tmp_path / "b" / "other.json", plan)

    assert find_plan_files(tmp_path, "tfplan.json", 0) == [tmp_path / "tfplan.json"]
    assert find_plan_files(tmp_path, "tfplan.json", 1) == [
        tmp_path / "tfplan.json",
        tmp_path / "a" / "tfplan.json",
    ]
    assert find_plan_files(tmp_path, "tfplan.json", 5) == [
        tmp_path / "tfplan.json",
        tmp_path / "a" / "tfplan.json",
        tmp_path / "b" / "c" / "tfplan.json",
    ]


def test_find_plan_files_missing_directory(tmp_path):
    with pytest.raises(PlanLoaderError):
        find_plan_files(tmp_path / "missing", "tfplan.json", 3)


def test_plan_loader_loads_lazily(tmp_path):
    write_plan(tmp_path / "a" / "tfplan.json", {"resource_changes": []})
    broken = tmp_path / "b" / "tfplan.json"
    broken.parent.mkdir()
    broken.write_text("oops", encoding="utf-8")

    plans = PlanLoader(tmp_path, plan_name="tfplan.json", max_depth=3).load_all()

    first = next(plans)
    assert first.path.name == "tfplan.json"
    assert first.resource_changes == ()
    with pytest.raises(PlanLoaderError):
        next(plans)
