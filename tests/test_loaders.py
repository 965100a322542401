"""Tests for loading projects and limits from JSON and dumping results."""

from __future__ import annotations

import json

import pytest

from conftest import FIXTURES_DIR, load_fixture

from baseline_scheduling.loaders import (
    dump_result_json,
    load_limits_json,
    load_project_json,
    project_from_dict,
    result_to_dict,
)
from baseline_scheduling.palette import PACKAGE_COLORS, package_color
from baseline_scheduling.units import DAY, WEEK


class TestProjectFromDict:

    def test_reference_fixture(self):
        data = project_from_dict(load_fixture("reference_lob")["project"])
        assert data.houses_count == 116
        assert data.duration_unit is DAY
        assert [p.name for p in data.work_packages] == [
            "Pré-Obra", "Estacas", "Infraestrutura Enterrada",
        ]
        assert data.work_packages[0].latency == 28
        assert data.work_packages[0].color == "#FF0000"
        assert data.learning_curve.period_weeks == 4

    def test_defaults(self):
        data = project_from_dict({
            "housesCount": 2,
            "startDate": "2026-04-06",
            "workPackages": [{"name": "A", "duration": 1, "rhythm": 1}],
        })
        assert data.duration_unit is WEEK
        assert data.work_packages[0].latency == 0
        assert data.work_packages[0].cost == 0.0
        assert data.stop_periods == ()
        assert data.learning_curve.applied_packages == frozenset()

    def test_palette_fills_missing_colours(self):
        data = project_from_dict(load_fixture("jardins_montreal")["project"])
        colors = [p.color for p in data.work_packages]
        assert colors == [package_color(i) for i in range(23)]
        assert len(set(colors)) == 23
        assert set(colors) <= set(PACKAGE_COLORS)

    def test_applied_packages(self):
        raw = dict(load_fixture("reference_lob")["project"])
        raw["learningCurve"] = {"appliedPackages": ["Estacas"]}
        data = project_from_dict(raw)
        assert data.learning_curve.applied_packages == frozenset({"Estacas"})
        assert data.learning_curve.rhythm_reducer == 0.60

    def test_missing_required_key(self):
        with pytest.raises(KeyError):
            project_from_dict({"housesCount": 2, "workPackages": []})

    def test_unknown_unit(self):
        raw = dict(load_fixture("seasonal_stop")["project"], durationUnit="month")
        with pytest.raises(ValueError, match="Unknown duration unit"):
            project_from_dict(raw)


class TestLoadProjectJson:

    def test_fixture_with_project_key(self):
        data = load_project_json(FIXTURES_DIR / "seasonal_stop.json")
        assert data.houses_count == 3
        assert data.stop_periods[0].month == "dezembro"

    def test_top_level_project(self, tmp_path):
        path = tmp_path / "project.json"
        path.write_text(json.dumps(load_fixture("seasonal_reduction")["project"]))
        data = load_project_json(path)
        assert data.houses_count == 12

    def test_validation_errors_listed(self, tmp_path):
        raw = dict(load_fixture("seasonal_reduction")["project"], housesCount=0)
        path = tmp_path / "bad.json"
        path.write_text(json.dumps(raw))
        with pytest.raises(ValueError, match="Validation errors in bad.json") as exc:
            load_project_json(path)
        assert "House count must be between 1 and 9999, got 0" in str(exc.value)

    def test_fractional_house_count_rejected(self, tmp_path):
        raw = dict(load_fixture("seasonal_reduction")["project"], housesCount=3.5)
        path = tmp_path / "fractional.json"
        path.write_text(json.dumps(raw))
        with pytest.raises(ValueError, match="House count must be a whole number"):
            load_project_json(path)

    def test_limits_apply(self):
        limits = load_limits_json(FIXTURES_DIR / "limits.json")
        # 2026-11-23 is a Monday
        data = load_project_json(FIXTURES_DIR / "seasonal_stop.json", limits)
        assert data.houses_count == 3


class TestLoadLimitsJson:

    def test_overrides(self):
        limits = load_limits_json(FIXTURES_DIR / "limits.json")
        assert limits.max_houses == 500
        assert limits.min_estimated_weeks == 52
        assert limits.max_safety_weeks == 300
        assert limits.required_start_weekday == 0
        assert limits.estimation_multiplier == 3

    def test_unknown_field(self, tmp_path):
        path = tmp_path / "limits.json"
        path.write_text(json.dumps({"max_houses": 10, "speed": 2}))
        with pytest.raises(ValueError, match="speed"):
            load_limits_json(path)


class TestResultDump:

    def test_camel_case_contract(self, stop_result):
        payload = result_to_dict(stop_result)
        assert set(payload) == {
            "matrix", "weeks", "houses", "weekDateMappings",
            "financialData", "calculationMetadata",
        }
        cell = payload["matrix"][0][0]
        assert cell["houseNumber"] == 1
        assert cell["packageName"] == "Alvenaria"
        meta = payload["calculationMetadata"]
        assert meta["totalProjectDuration"] == 9
        assert meta["totalProjectCost"] == 900
        assert meta["baseDate"] == "2026-11-23"
        assert payload["weekDateMappings"][2]["month"] == "december"

    def test_dump_round_trips_through_json(self, stop_result, tmp_path):
        path = tmp_path / "result.json"
        dump_result_json(stop_result, path)
        with open(path, encoding="utf-8") as f:
            assert json.load(f) == result_to_dict(stop_result)
