import json

import pytest

from compensatr import pipeline
from compensatr.errors import EmptyInputError, InputError, InvalidTimeUnitError
from compensatr.pipeline import compensate, load_projects, run_pipeline


def test_load_projects(fixture_path):
    df = load_projects(fixture_path)
    assert list(df["id"]) == ["p1", "p2", "p3"]


def test_load_projects_missing_file(tmp_path):
    with pytest.raises(InputError):
        load_projects(tmp_path / "missing.json")


def test_load_projects_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("[{")
    with pytest.raises(InputError):
        load_projects(path)


def test_load_projects_requires_array(tmp_path):
    path = tmp_path / "object.json"
    path.write_text('{"id": "p1"}')
    with pytest.raises(InputError):
        load_projects(path)


def test_compensate_builds_plan_and_report(raw_projects, config):
    result = compensate(raw_projects, config)
    plan = result["purchase_plan"]
    assert plan and all(row for row in plan)
    assert sum(row["price"] for row in plan) <= config.money
    assert len(result["co2_report"]) == config.target_years


def test_compensate_rejects_empty_input(config):
    with pytest.raises(EmptyInputError):
        compensate([], config)


def test_compensate_aborts_before_search_on_unknown_time_unit(raw_projects, config, monkeypatch):
    def fail_search(*args, **kwargs):
        raise AssertionError("search must not run")

    monkeypatch.setattr(pipeline, "search", fail_search)
    raw_projects[1]["time_unit"] = "fortnight"
    with pytest.raises(InvalidTimeUnitError):
        compensate(raw_projects, config)


def test_compensate_without_valid_selection_gives_placeholders(raw_projects):
    from compensatr.config import CompensatrConfig

    config = CompensatrConfig(money=500, iterations=100, seed=1, min_continents=5)
    assert compensate(raw_projects, config) == {"purchase_plan": [{}], "co2_report": [{}]}


def test_run_pipeline_writes_output(fixture_path, config, tmp_path):
    output_path = tmp_path / "data" / "output.json"
    result = run_pipeline(fixture_path, config, output_path=output_path)
    assert json.loads(output_path.read_text()) == result
