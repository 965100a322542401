"""Tests for calculate_baseline: composition, metadata and the input guard."""

from __future__ import annotations

import dataclasses
import logging
from datetime import date

import pytest

from conftest import FIXED_NOW, calculate, fixed_clock, load_expected, load_project

from baseline_scheduling import calculate_baseline
from baseline_scheduling.types import (
    InvalidProjectDataError,
    StopPeriod,
    ValidationErrorKind,
)


class TestResultShape:

    def test_houses_are_one_based(self, stop_result):
        assert stop_result.houses == (1, 2, 3)
        assert len(stop_result.matrix) == 3

    def test_week_labels_cover_schedule(self, stop_result):
        assert stop_result.weeks == tuple(f"W{i:02d}" for i in range(1, 10))

    def test_mappings_cover_horizon(self, stop_result):
        assert len(stop_result.week_mappings) == 200
        assert len(stop_result.weeks) <= len(stop_result.week_mappings)

    def test_cells_ordered_within_house(self, reference_result):
        for cells in reference_result.matrix:
            weeks = [c.week_index for c in cells]
            assert weeks == sorted(weeks)

    def test_house_numbers_match_rows(self, reference_result):
        for house, cells in zip(reference_result.houses, reference_result.matrix):
            assert all(c.house_number == house for c in cells)


class TestMetadata:

    def test_fields(self, stop_result):
        meta = stop_result.metadata
        assert meta.total_duration_weeks == 9
        assert meta.package_count == 1
        assert meta.reduction_period_count == 1
        assert meta.total_cost == load_expected("seasonal_stop")["total_cost"]
        assert meta.calculated_at == FIXED_NOW
        assert meta.base_date == date(2026, 11, 23)

    def test_period_count_includes_both_kinds(self, montreal_result):
        assert montreal_result.metadata.reduction_period_count == 4
        assert montreal_result.metadata.package_count == 23

    def test_total_cost_is_last_cumulative(self, montreal_result):
        assert (
            montreal_result.metadata.total_cost
            == montreal_result.financial_data[-1].cumulative_cost
        )


class TestGuard:

    def test_invalid_house_count(self):
        data = dataclasses.replace(load_project("seasonal_stop"), houses_count=0)
        with pytest.raises(InvalidProjectDataError) as exc:
            calculate_baseline(data)
        assert exc.value.issues[0].kind is ValidationErrorKind.INVALID_HOUSE_COUNT

    def test_unresolvable_date(self):
        data = dataclasses.replace(load_project("seasonal_stop"), start_date="soon")
        with pytest.raises(InvalidProjectDataError):
            calculate_baseline(data)

    def test_fractional_house_count(self):
        data = dataclasses.replace(load_project("seasonal_stop"), houses_count=3.5)
        with pytest.raises(InvalidProjectDataError) as exc:
            calculate_baseline(data)
        assert [i.field for i in exc.value.issues] == ["houses_count"]

    def test_rhythm_below_one(self):
        project = load_project("seasonal_stop")
        package = dataclasses.replace(project.work_packages[0], rhythm=0.5)
        data = dataclasses.replace(project, work_packages=(package,))
        with pytest.raises(InvalidProjectDataError) as exc:
            calculate_baseline(data)
        assert exc.value.issues[0].kind is ValidationErrorKind.INVALID_PACKAGE_FIELD
        assert exc.value.issues[0].field == "work_packages[0].rhythm"

    def test_unknown_month(self):
        data = dataclasses.replace(
            load_project("seasonal_stop"), stop_periods=(StopPeriod("smarch"),)
        )
        with pytest.raises(InvalidProjectDataError) as exc:
            calculate_baseline(data)
        assert exc.value.issues[0].kind is ValidationErrorKind.INVALID_PERIOD
        assert exc.value.issues[0].field == "stop_periods[0].month"

    def test_empty_packages(self):
        data = dataclasses.replace(load_project("seasonal_stop"), work_packages=())
        with pytest.raises(InvalidProjectDataError):
            calculate_baseline(data)


class TestDeterminism:

    def test_identical_inputs_identical_results(self):
        first = calculate("reference_lob")
        second = calculate("reference_lob")
        assert first == second

    def test_only_timestamp_depends_on_clock(self):
        data = load_project("seasonal_reduction")
        later = calculate_baseline(data, clock=lambda: FIXED_NOW.replace(year=2030))
        base = calculate_baseline(data, clock=fixed_clock)
        assert later.matrix == base.matrix
        assert later.financial_data == base.financial_data
        assert later.metadata.calculated_at != base.metadata.calculated_at


class TestLogging:

    def test_summary_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="baseline_scheduling"):
            calculate("seasonal_reduction")
        assert "Baseline for 12 houses" in caplog.text
