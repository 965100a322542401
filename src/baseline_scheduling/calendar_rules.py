"""Layer 1: ExceptionCalendar — recurring monthly stop and reduction rules."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Sequence

from baseline_scheduling.calendar import month_number
from baseline_scheduling.types import (
    PartialReductionPeriod,
    StopPeriod,
    WeekDateMapping,
)


class ExceptionKind(Enum):
    NONE = "none"
    STOP = "stop"
    REDUCTION = "reduction"


@dataclass(frozen=True)
class WeekException:
    """Resolved rule for one week.

    NONE → coefficient 1.0, STOP → 0.0, REDUCTION → 0 < coefficient < 1.
    """

    kind: ExceptionKind
    coefficient: float
    description: str | None = None

    @property
    def is_stop(self) -> bool:
        return self.kind is ExceptionKind.STOP

    @property
    def is_reduction(self) -> bool:
        return self.kind is ExceptionKind.REDUCTION


NO_EXCEPTION = WeekException(ExceptionKind.NONE, 1.0)


class ExceptionCalendar:
    """Pure month lookup. Periods recur every calendar year.

    Month names are matched case- and accent-insensitively, in English or
    Portuguese. When a month is listed twice in the same list the first
    entry wins. Raises ValueError for unknown month names.
    """

    def __init__(
        self,
        stop_periods: Iterable[StopPeriod] = (),
        reduction_periods: Iterable[PartialReductionPeriod] = (),
    ) -> None:
        self._stops: dict[int, WeekException] = {}
        for period in stop_periods:
            self._stops.setdefault(
                month_number(period.month),
                WeekException(ExceptionKind.STOP, 0.0, period.description),
            )

        self._reductions: dict[int, WeekException] = {}
        for period in reduction_periods:
            self._reductions.setdefault(
                month_number(period.month),
                WeekException(
                    ExceptionKind.REDUCTION,
                    period.coefficient,
                    period.description,
                ),
            )

    def resolve_month(self, month: int) -> WeekException:
        """Resolve by month number. Stop rules are checked before reductions."""
        if month in self._stops:
            return self._stops[month]
        if month in self._reductions:
            return self._reductions[month]
        return NO_EXCEPTION

    def resolve(self, month_name: str) -> WeekException:
        """Resolve by month name (case-insensitive)."""
        return self.resolve_month(month_number(month_name))

    def resolve_weeks(
        self, weeks: Sequence[WeekDateMapping]
    ) -> tuple[WeekException, ...]:
        """Resolve every week of a mapping once, indexed by week_index."""
        return tuple(self.resolve(week.month) for week in weeks)
