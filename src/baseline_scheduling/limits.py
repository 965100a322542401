"""Engine limits: bounds and tuning constants shared by validation and engine."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EngineLimits:
    """Configuration for one engine invocation. Immutable.

    Horizon estimation:
        weeks = max(min_estimated_weeks,
                    (ceil(houses / min_rhythm) + sum(duration + latency))
                    * estimation_multiplier)

    The scheduling loop stops early when a week without any new start
    occurs after ``max_safety_weeks``.
    """

    min_houses: int = 1
    max_houses: int = 9999
    min_estimated_weeks: int = 200
    estimation_multiplier: int = 3
    max_safety_weeks: int = 500
    min_rhythm_per_week: int = 1
    stop_opacity: float = 0.1
    min_reduction_opacity: float = 0.2
    max_duration_weeks: float = 52
    max_rhythm: int = 100
    max_latency_weeks: float = 52
    # 0 = Monday ... 6 = Sunday; None disables the check
    required_start_weekday: int | None = None

    def reduction_opacity(self, coefficient: float) -> float:
        """Display opacity hint for a cell in a reduced or stopped week."""
        if coefficient == 0:
            return self.stop_opacity
        return max(self.min_reduction_opacity, coefficient)


DEFAULT_LIMITS = EngineLimits()
