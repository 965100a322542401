"""Layer 5: temporal rollup — weekly series regrouped into calendar buckets.

Buckets are keyed by week, month, quarter or year of each week's first
day. Buckets with no cost, no completions and no active houses are dropped.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Sequence

from baseline_scheduling.calendar import month_number
from baseline_scheduling.types import CalculationResult, MatrixCell, WeekDateMapping


class TimeUnit(Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


_UNIT_NAMES = {
    TimeUnit.WEEKLY: ("week", "weeks"),
    TimeUnit.MONTHLY: ("month", "months"),
    TimeUnit.QUARTERLY: ("quarter", "quarters"),
    TimeUnit.YEARLY: ("year", "years"),
}


@dataclass(frozen=True)
class PeriodKey:
    """Identity and labels of one bucket. Sorts by (year, period_number)."""

    key: str
    label: str
    full_label: str
    year: int
    period_number: int


@dataclass(frozen=True)
class WeekDetail:
    week_index: int
    week_label: str
    weekly_cost: float
    active_houses: int
    start_date: date
    end_date: date


@dataclass(frozen=True)
class PeriodBucket:
    """Rollup of the weeks falling in one period.

    cumulative_cost is the cumulative cost at the bucket's last week;
    active_houses is the peak weekly active-house count in the bucket.
    """

    period: PeriodKey
    period_cost: float
    cumulative_cost: float
    houses_completed: int
    active_houses: int
    weeks: tuple[WeekDetail, ...]

    @property
    def is_empty(self) -> bool:
        return (
            self.period_cost <= 0
            and self.houses_completed == 0
            and self.active_houses == 0
        )


@dataclass(frozen=True)
class TemporalMetrics:
    total_project_cost: float
    duration_periods: int
    duration_label: str
    lead_time_min: int
    lead_time_max: int
    total_houses_completed: int
    average_period_cost: float
    peak_period_cost: float
    peak_active_houses: int


@dataclass(frozen=True)
class TemporalAnalytics:
    unit: TimeUnit
    buckets: tuple[PeriodBucket, ...]
    metrics: TemporalMetrics


def period_key(week: WeekDateMapping, unit: TimeUnit) -> PeriodKey:
    """Bucket identity for a week under the given unit."""
    year = week.year
    month = month_number(week.month)

    if unit is TimeUnit.WEEKLY:
        number = week.week_index + 1
        return PeriodKey(
            key=f"{year}-W{number:02d}",
            label=f"Wk {number}",
            full_label=f"Week {number} - {week.start_date.isoformat()}",
            year=year,
            period_number=number,
        )
    if unit is TimeUnit.MONTHLY:
        return PeriodKey(
            key=f"{year}-{month:02d}",
            label=f"{week.month[:3].title()}/{year % 100:02d}",
            full_label=f"{week.month.title()} {year}",
            year=year,
            period_number=month,
        )
    if unit is TimeUnit.QUARTERLY:
        quarter = math.ceil(month / 3)
        return PeriodKey(
            key=f"{year}-Q{quarter}",
            label=f"{year}-Q{quarter}",
            full_label=f"Q{quarter} {year}",
            year=year,
            period_number=quarter,
        )
    if unit is TimeUnit.YEARLY:
        return PeriodKey(
            key=str(year),
            label=str(year),
            full_label=f"Year {year}",
            year=year,
            period_number=1,
        )
    raise ValueError(f"Unsupported time unit: {unit!r}")


def house_lead_times(matrix: Sequence[Sequence[MatrixCell]]) -> list[int]:
    """Lead time (max week - min week + 1) of every house with any cell."""
    lead_times: list[int] = []
    for cells in matrix:
        if not cells:
            continue
        week_indices = [cell.week_index for cell in cells]
        lead_times.append(max(week_indices) - min(week_indices) + 1)
    return lead_times


def duration_label(periods: int, unit: TimeUnit) -> str:
    """'1 month', '12 months', ..."""
    singular, plural = _UNIT_NAMES[unit]
    return f"{periods} {singular if periods == 1 else plural}"


def calculate_temporal_analytics(
    result: CalculationResult, unit: TimeUnit
) -> TemporalAnalytics:
    """Regroup the weekly financial series of a result into period buckets."""
    mappings = {week.week_index: week for week in result.week_mappings}

    keys: dict[str, PeriodKey] = {}
    costs: dict[str, float] = {}
    cumulative: dict[str, float] = {}
    active: dict[str, int] = {}
    details: dict[str, list[WeekDetail]] = {}
    for week_data in result.financial_data:
        week = mappings.get(week_data.week_index)
        if week is None:
            continue
        period = period_key(week, unit)
        if period.key not in keys:
            keys[period.key] = period
            costs[period.key] = 0.0
            active[period.key] = 0
            details[period.key] = []
        costs[period.key] += week_data.weekly_cost
        cumulative[period.key] = week_data.cumulative_cost
        active[period.key] = max(active[period.key], week_data.active_houses)
        details[period.key].append(
            WeekDetail(
                week_index=week_data.week_index,
                week_label=week_data.week_label,
                weekly_cost=week_data.weekly_cost,
                active_houses=week_data.active_houses,
                start_date=week.start_date,
                end_date=week.end_date,
            )
        )

    # A house completes in the bucket of its last scheduled week
    completed: dict[str, int] = {key: 0 for key in keys}
    for cells in result.matrix:
        if not cells:
            continue
        last_cell = max(cells, key=lambda cell: cell.week_index)
        week = mappings.get(last_cell.week_index)
        if week is None:
            continue
        key = period_key(week, unit).key
        if key in completed:
            completed[key] += 1

    buckets = [
        PeriodBucket(
            period=keys[key],
            period_cost=round(costs[key], 2),
            cumulative_cost=cumulative[key],
            houses_completed=completed[key],
            active_houses=active[key],
            weeks=tuple(details[key]),
        )
        for key in keys
    ]
    buckets = [bucket for bucket in buckets if not bucket.is_empty]
    buckets.sort(key=lambda b: (b.period.year, b.period.period_number))

    lead_times = house_lead_times(result.matrix)
    period_costs = [bucket.period_cost for bucket in buckets]
    metrics = TemporalMetrics(
        total_project_cost=result.metadata.total_cost,
        duration_periods=len(buckets),
        duration_label=duration_label(len(buckets), unit),
        lead_time_min=min(lead_times, default=0),
        lead_time_max=max(lead_times, default=0),
        total_houses_completed=sum(b.houses_completed for b in buckets),
        average_period_cost=(
            sum(period_costs) / len(period_costs) if period_costs else 0.0
        ),
        peak_period_cost=max(period_costs, default=0.0),
        peak_active_houses=max((b.active_houses for b in buckets), default=0),
    )
    return TemporalAnalytics(unit=unit, buckets=tuple(buckets), metrics=metrics)
