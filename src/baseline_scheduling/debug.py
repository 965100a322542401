"""ASCII visualisation for development-time verification.

This module is dev-only and not imported by production code.
"""

from __future__ import annotations

from baseline_scheduling.types import CalculationResult

_LABEL_CHARS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def package_labels(result: CalculationResult) -> dict[str, str]:
    """Package name -> letter, in order of first appearance in the matrix."""
    labels: dict[str, str] = {}
    for cells in result.matrix:
        for cell in sorted(cells, key=lambda c: c.week_index):
            if cell.package_name not in labels:
                labels[cell.package_name] = _LABEL_CHARS[len(labels) % len(_LABEL_CHARS)]
    return labels


def show_matrix(
    result: CalculationResult,
    max_houses: int | None = None,
    max_weeks: int | None = None,
) -> str:
    """Print an ASCII line-of-balance view of the matrix.

    Legend: '.' = idle, 'A'-'Z' = package, lower case = reduced or stopped week.
    Each row is one house, each char one week. Returns the string and also
    prints to stdout.
    """
    labels = package_labels(result)
    week_count = len(result.weeks)
    if max_weeks is not None:
        week_count = min(week_count, max_weeks)
    houses = result.houses if max_houses is None else result.houses[:max_houses]

    lines: list[str] = []
    # Week ruler: a digit every 10 weeks
    ruler = "".join(
        str((w // 10) % 10) if w % 10 == 0 else " " for w in range(week_count)
    )
    lines.append(f"{'House':>6s}  {ruler}")

    for house_number in houses:
        row = ["."] * week_count
        for cell in result.house_cells(house_number):
            if cell.week_index >= week_count:
                continue
            char = labels[cell.package_name]
            row[cell.week_index] = char.lower() if cell.is_reduced else char
        lines.append(f"{house_number:>6d}  {''.join(row)}")

    if labels:
        legend = ", ".join(f"{v}={k}" for k, v in labels.items())
        lines.append(f"\nLegend: . = idle, lower case = reduced/stopped, {legend}")

    output = "\n".join(lines)
    print(output)
    return output


def show_financials(result: CalculationResult, only_active: bool = True) -> str:
    """Print the weekly financial series as a table.

    Returns the string and also prints to stdout.
    """
    lines = [f"{'Week':>6s}  {'Weekly':>14s}  {'Cumulative':>16s}  {'Active':>6s}"]
    for week in result.financial_data:
        if only_active and week.active_houses == 0 and week.weekly_cost == 0:
            continue
        lines.append(
            f"{week.week_label:>6s}  {week.weekly_cost:>14,.2f}  "
            f"{week.cumulative_cost:>16,.2f}  {week.active_houses:>6d}"
        )

    output = "\n".join(lines)
    print(output)
    return output
