"""Tests for the tabular matrix export."""

from __future__ import annotations

import csv
import io

from conftest import NEUTRAL_CURVE, fixed_clock

from baseline_scheduling.baseline import calculate_baseline
from baseline_scheduling.export import HOUSE_HEADER, matrix_rows, matrix_to_csv
from baseline_scheduling.types import ProjectData, WorkPackage


class TestMatrixRows:

    def test_header(self, stop_result):
        header = matrix_rows(stop_result)[0]
        assert header == [HOUSE_HEADER] + [f"W{i:02d}" for i in range(1, 10)]

    def test_one_row_per_house(self, stop_result):
        rows = matrix_rows(stop_result)
        assert [r[0] for r in rows[1:]] == ["1", "2", "3"]
        assert all(len(r) == 10 for r in rows)

    def test_cells_name_the_package(self, stop_result):
        house_1 = matrix_rows(stop_result)[1]
        assert house_1[1:8] == ["Alvenaria"] * 7
        assert house_1[8:] == ["", ""]

    def test_stopped_weeks_still_listed(self, stop_result):
        house_3 = matrix_rows(stop_result)[3]
        assert house_3[1:7] == [""] * 6
        assert house_3[7:] == ["Alvenaria"] * 3


class TestCsv:

    def test_parses_back_to_rows(self, stop_result):
        text = matrix_to_csv(stop_result)
        assert list(csv.reader(io.StringIO(text))) == matrix_rows(stop_result)

    def test_newline_terminated(self, stop_result):
        text = matrix_to_csv(stop_result)
        assert text.startswith("House,W01,W02")
        assert text.endswith("\n")
        assert "\r" not in text

    def test_quotes_package_names_with_commas(self):
        data = ProjectData(
            houses_count=1,
            start_date="2026-04-06",
            work_packages=(WorkPackage("Gesso, Pintura", duration=1, rhythm=1),),
            learning_curve=NEUTRAL_CURVE,
        )
        result = calculate_baseline(data, clock=fixed_clock)
        assert matrix_to_csv(result) == 'House,W01\n1,"Gesso, Pintura"\n'
