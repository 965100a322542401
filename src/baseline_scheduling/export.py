"""Tabular export: one row per house, one column per week."""

from __future__ import annotations

import csv
import io

from baseline_scheduling.types import CalculationResult

HOUSE_HEADER = "House"


def matrix_rows(result: CalculationResult) -> list[list[str]]:
    """Header row then one row per house.

    Each cell holds the package active for that house in that week, or ""
    when the house is idle.
    """
    rows: list[list[str]] = [[HOUSE_HEADER, *result.weeks]]
    week_count = len(result.weeks)

    for house_number, cells in zip(result.houses, result.matrix):
        row = [""] * week_count
        for cell in cells:
            if cell.week_index < week_count:
                row[cell.week_index] = cell.package_name
        rows.append([str(house_number), *row])

    return rows


def matrix_to_csv(result: CalculationResult) -> str:
    """Comma-separated rendering of matrix_rows, newline-terminated rows."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerows(matrix_rows(result))
    return buffer.getvalue()
