"""Layer 4: financial aggregation — per-week and cumulative cost rollups."""

from __future__ import annotations

from collections import defaultdict
from typing import Sequence

from baseline_scheduling.types import (
    FinancialWeekData,
    MatrixCell,
    WeekDateMapping,
    WorkPackage,
)

MONEY_DECIMALS = 2


def aggregate_financials(
    matrix: Sequence[Sequence[MatrixCell]],
    weeks: Sequence[WeekDateMapping],
    packages: Sequence[WorkPackage],
) -> tuple[FinancialWeekData, ...]:
    """One FinancialWeekData per mapped week.

    Weekly and cumulative totals are accumulated unrounded and rounded on
    output. Every package appears in package_costs, with 0 when idle.
    """
    week_costs: dict[int, dict[str, float]] = defaultdict(lambda: defaultdict(float))
    week_houses: dict[int, set[int]] = defaultdict(set)
    for house_cells in matrix:
        for cell in house_cells:
            week_costs[cell.week_index][cell.package_name] += cell.cost
            week_houses[cell.week_index].add(cell.house_number)

    series: list[FinancialWeekData] = []
    cumulative = 0.0
    for week in weeks:
        costs = week_costs.get(week.week_index, {})
        weekly = sum(costs.values())
        cumulative += weekly
        series.append(
            FinancialWeekData(
                week_index=week.week_index,
                week_label=week.week_label,
                weekly_cost=round(weekly, MONEY_DECIMALS),
                cumulative_cost=round(cumulative, MONEY_DECIMALS),
                active_houses=len(week_houses.get(week.week_index, ())),
                package_costs={
                    pkg.name: round(costs.get(pkg.name, 0.0), MONEY_DECIMALS)
                    for pkg in packages
                },
            )
        )
    return tuple(series)
