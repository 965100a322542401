"""Boundary: DurationUnit — package durations and latencies ↔ weeks."""

from __future__ import annotations

from dataclasses import dataclass

DAYS_PER_WEEK = 7


@dataclass(frozen=True)
class DurationUnit:
    """Unit in which package durations and latencies are supplied. Immutable.

    The unit is a parameter set once at the boundary.
    All engine arithmetic happens in weeks.
    """

    days: int
    label: str

    def to_weeks(self, value: float) -> float:
        """Convert a value in this unit to (possibly fractional) weeks."""
        if self.days == DAYS_PER_WEEK:
            return float(value)
        return value * self.days / DAYS_PER_WEEK

    def from_weeks(self, weeks: float) -> float:
        """Convert weeks back into this unit."""
        return weeks * DAYS_PER_WEEK / self.days


WEEK = DurationUnit(days=7, label="week")
DAY = DurationUnit(days=1, label="day")

_BY_LABEL = {
    "week": WEEK,
    "weeks": WEEK,
    "day": DAY,
    "days": DAY,
}


def unit_from_label(label: str) -> DurationUnit:
    """Look up a predefined unit by label ('week', 'days', ...).

    Raises ValueError for unknown labels.
    """
    try:
        return _BY_LABEL[label.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unknown duration unit {label!r} "
            f"(expected one of: {', '.join(sorted(_BY_LABEL))})"
        ) from None
