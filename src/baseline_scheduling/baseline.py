"""Public entry point: calculate_baseline composes every layer.

    ProjectData -> week mappings -> schedule -> financial series -> result

The call is synchronous and pure apart from the metadata timestamp, which
comes from the injectable ``clock``.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from baseline_scheduling.calendar import (
    build_week_mappings,
    format_week_label,
    parse_start_date,
)
from baseline_scheduling.engine import build_schedule
from baseline_scheduling.financial import aggregate_financials
from baseline_scheduling.limits import DEFAULT_LIMITS, EngineLimits
from baseline_scheduling.schema import check_invariants
from baseline_scheduling.types import (
    CalculationMetadata,
    CalculationResult,
    ProjectData,
)

logger = logging.getLogger(__name__)


def calculate_baseline(
    data: ProjectData,
    limits: EngineLimits = DEFAULT_LIMITS,
    clock: Callable[[], datetime] = datetime.now,
) -> CalculationResult:
    """Compute the full baseline schedule and its financial series.

    Args:
        data: Pre-validated project description (see schema.validate_project).
        limits: Engine bounds and tuning constants.
        clock: Source of the calculated_at timestamp.

    Returns:
        A new CalculationResult. Identical inputs give identical matrices
        and financial series.

    Raises:
        InvalidProjectDataError: If the core invariants do not hold
            (see schema.check_invariants), including unknown month names.
    """
    check_invariants(data, limits)

    week_mappings = build_week_mappings(data, limits)
    schedule = build_schedule(data, week_mappings, limits)
    financial_data = aggregate_financials(
        schedule.matrix, week_mappings, data.work_packages
    )

    total_cost = financial_data[-1].cumulative_cost if financial_data else 0.0
    metadata = CalculationMetadata(
        total_duration_weeks=schedule.total_weeks,
        package_count=len(data.work_packages),
        reduction_period_count=(
            len(data.stop_periods) + len(data.partial_reduction_periods)
        ),
        total_cost=total_cost,
        calculated_at=clock(),
        base_date=parse_start_date(data.start_date),
    )
    logger.info(
        "Baseline for %d houses: %d weeks, total cost %.2f",
        data.houses_count, schedule.total_weeks, total_cost,
    )

    return CalculationResult(
        matrix=schedule.matrix,
        weeks=tuple(format_week_label(i) for i in range(schedule.total_weeks)),
        houses=tuple(range(1, data.houses_count + 1)),
        week_mappings=week_mappings,
        financial_data=financial_data,
        metadata=metadata,
        blocks=schedule.blocks,
    )
