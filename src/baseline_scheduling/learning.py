"""Layer 2: learning curve — throughput ramp-up and duration ramp-down.

Both ramps are measured in *productive* weeks (stop weeks excluded) since
the package's own first start, never since project start.
"""

from __future__ import annotations

import math

from baseline_scheduling.calendar_rules import WeekException
from baseline_scheduling.limits import DEFAULT_LIMITS, EngineLimits
from baseline_scheduling.types import LearningCurve

FULL_PRODUCTIVITY = 1.0


def applies_to(curve: LearningCurve, package_name: str) -> bool:
    """Empty applied_packages means every package ramps."""
    return not curve.applied_packages or package_name in curve.applied_packages


def rhythm_multiplier(curve: LearningCurve, weeks_productive: int) -> float:
    """Throughput fraction: reducer, then reducer + increment, then 1.0.

    Tier one lasts period_weeks, tier two another period_weeks.
    """
    if weeks_productive < curve.period_weeks:
        return curve.rhythm_reducer
    if weeks_productive < 2 * curve.period_weeks:
        return curve.rhythm_reducer + curve.increment
    return FULL_PRODUCTIVITY


def duration_multiplier(curve: LearningCurve, weeks_into_package: int) -> float:
    """Duration factor during the package's first duration_impact_weeks."""
    if weeks_into_package < curve.duration_impact_weeks:
        return curve.duration_multiplier
    return FULL_PRODUCTIVITY


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def effective_rhythm(
    base_rhythm: int,
    exception: WeekException,
    multiplier: float | None,
    limits: EngineLimits = DEFAULT_LIMITS,
) -> int:
    """Houses allowed to start a package this week.

    multiplier is the learning-curve rhythm multiplier, or None when the
    curve does not apply to the package. Curve and reduction combine by
    minimum: whichever is more restrictive governs. A stop week or a zero
    base rhythm always yields 0; otherwise the result is at least
    limits.min_rhythm_per_week.
    """
    if base_rhythm <= 0 or exception.is_stop:
        return 0

    reduced: int | None = None
    if exception.is_reduction:
        reduced = max(
            limits.min_rhythm_per_week,
            math.floor(base_rhythm * exception.coefficient),
        )

    if multiplier is None:
        return reduced if reduced is not None else int(base_rhythm)

    rhythm = _round_half_up(base_rhythm * multiplier)
    if reduced is not None:
        rhythm = min(rhythm, reduced)
    return max(limits.min_rhythm_per_week, rhythm)


def base_duration_weeks(duration_weeks: float, multiplier: float) -> int:
    """Whole productive weeks a block needs: ceil(duration * multiplier).

    Products are rounded to 9 decimals before the ceiling, so
    2.0000000000000004 counts as 2.
    """
    return max(1, math.ceil(round(duration_weeks * multiplier, 9)))
