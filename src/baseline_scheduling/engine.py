"""Layer 3: scheduling engine — week-major greedy block admission.

Each week, every package (in declaration order) admits a contiguous block
of houses from its own cursor, up to the week's effective rhythm. A house
may start package k only after finishing package k-1 plus its latency.
Once admitted, a block's end week is fixed: stop weeks inside the span
extend it without consuming productive duration.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from baseline_scheduling.calendar_rules import ExceptionCalendar, WeekException
from baseline_scheduling.learning import (
    applies_to,
    base_duration_weeks,
    duration_multiplier,
    effective_rhythm,
    rhythm_multiplier,
)
from baseline_scheduling.limits import DEFAULT_LIMITS, EngineLimits
from baseline_scheduling.types import (
    LearningCurve,
    MatrixCell,
    ProjectData,
    StartBlock,
    WeekDateMapping,
)

logger = logging.getLogger(__name__)

_UNSET = -1


@dataclass(frozen=True)
class PackagePlan:
    """A work package converted to weeks, with its curve applicability."""

    index: int
    name: str
    color: str
    duration_weeks: float
    latency_weeks: float
    rhythm: int
    cost: float
    ramps: bool


def plan_packages(data: ProjectData) -> tuple[PackagePlan, ...]:
    """Convert package durations and latencies to weeks once."""
    unit = data.duration_unit
    return tuple(
        PackagePlan(
            index=i,
            name=pkg.name,
            color=pkg.color,
            duration_weeks=unit.to_weeks(pkg.duration),
            latency_weeks=unit.to_weeks(pkg.latency),
            rhythm=int(pkg.rhythm),
            cost=float(pkg.cost),
            ramps=applies_to(data.learning_curve, pkg.name),
        )
        for i, pkg in enumerate(data.work_packages)
    )


@dataclass
class SchedulerState:
    """Mutable working state for one run, sized houses x packages.

    start_week[h][p] / end_week[h][p] are -1 until house h is admitted to
    package p. next_house[p] is a single monotonically increasing cursor.
    """

    houses_count: int
    start_week: list[list[int]]
    end_week: list[list[int]]
    next_house: list[int]
    first_start_week: list[int]
    cells: list[list[MatrixCell]] = field(default_factory=list)
    last_week_used: int = _UNSET

    @classmethod
    def empty(cls, houses_count: int, packages_count: int) -> SchedulerState:
        return cls(
            houses_count=houses_count,
            start_week=[[_UNSET] * packages_count for _ in range(houses_count)],
            end_week=[[_UNSET] * packages_count for _ in range(houses_count)],
            next_house=[0] * packages_count,
            first_start_week=[_UNSET] * packages_count,
            cells=[[] for _ in range(houses_count)],
        )

    def is_complete(self) -> bool:
        """Every house has been admitted to the last package."""
        return all(row[-1] != _UNSET for row in self.end_week)

    def is_eligible(
        self, house: int, plan: PackagePlan, previous: PackagePlan | None, week: int
    ) -> bool:
        """Whether house (0-based) may start plan in week."""
        if self.start_week[house][plan.index] != _UNSET:
            return False
        if previous is None:
            return True
        prev_end = self.end_week[house][previous.index]
        if prev_end == _UNSET:
            return False
        return week >= prev_end + 1 + previous.latency_weeks


@dataclass(frozen=True)
class Schedule:
    """Engine output: the assignment matrix plus its admission trace."""

    matrix: tuple[tuple[MatrixCell, ...], ...]
    total_weeks: int
    blocks: tuple[StartBlock, ...]
    complete: bool


def productive_prefix(exceptions: Sequence[WeekException]) -> list[int]:
    """prefix[w] = number of non-stop weeks in [0, w)."""
    prefix = [0]
    for exc in exceptions:
        prefix.append(prefix[-1] + (0 if exc.is_stop else 1))
    return prefix


def real_duration(
    start_week: int, base_duration: int, exceptions: Sequence[WeekException]
) -> int:
    """Calendar weeks needed to complete base_duration productive weeks.

    Stop weeks add calendar time without consuming duration. Truncated at
    the end of the mapped horizon.
    """
    productive = 0
    week = start_week
    while productive < base_duration and week < len(exceptions):
        if not exceptions[week].is_stop:
            productive += 1
        week += 1
    return week - start_week


def _productive_weeks_since(
    state: SchedulerState, plan: PackagePlan, week: int, prefix: list[int]
) -> int:
    first = state.first_start_week[plan.index]
    if first == _UNSET:
        return 0
    return prefix[week] - prefix[first]


def _block_cells(
    house_number: int,
    plan: PackagePlan,
    start_week: int,
    span: int,
    cost_per_week: float,
    exceptions: Sequence[WeekException],
    limits: EngineLimits,
) -> list[MatrixCell]:
    cells: list[MatrixCell] = []
    for week in range(start_week, start_week + span):
        exc = exceptions[week]
        if exc.is_stop:
            cells.append(MatrixCell(
                house_number=house_number,
                week_index=week,
                package_name=plan.name,
                color=plan.color,
                is_reduced=True,
                reduction_opacity=limits.stop_opacity,
                cost=0.0,
            ))
            continue

        # Reduction throttles admissions only; running houses keep full cost
        cells.append(MatrixCell(
            house_number=house_number,
            week_index=week,
            package_name=plan.name,
            color=plan.color,
            is_reduced=exc.is_reduction,
            reduction_opacity=(
                limits.reduction_opacity(exc.coefficient)
                if exc.is_reduction else None
            ),
            cost=cost_per_week,
        ))
    return cells


def _admit_block(
    state: SchedulerState,
    plan: PackagePlan,
    previous: PackagePlan | None,
    week: int,
    curve: LearningCurve,
    exceptions: Sequence[WeekException],
    prefix: list[int],
    limits: EngineLimits,
) -> StartBlock | None:
    """Admit this week's block for one package, or return None."""
    exception = exceptions[week]
    if exception.is_stop:
        return None

    cursor = state.next_house[plan.index]
    if cursor >= state.houses_count:
        return None

    multiplier = None
    if plan.ramps:
        multiplier = rhythm_multiplier(
            curve, _productive_weeks_since(state, plan, week, prefix)
        )
    rhythm = effective_rhythm(plan.rhythm, exception, multiplier, limits)
    if rhythm <= 0:
        return None

    houses: list[int] = []
    for house in range(cursor, min(cursor + rhythm, state.houses_count)):
        # An ineligible house blocks every later one
        if not state.is_eligible(house, plan, previous, week):
            break
        houses.append(house)
    if not houses:
        return None

    if state.first_start_week[plan.index] == _UNSET:
        state.first_start_week[plan.index] = week

    factor = 1.0
    if plan.ramps:
        factor = duration_multiplier(
            curve, _productive_weeks_since(state, plan, week, prefix)
        )
    base = base_duration_weeks(plan.duration_weeks, factor)
    span = real_duration(week, base, exceptions)
    end = week + span - 1
    cost_per_week = plan.cost / state.houses_count / base

    for house in houses:
        state.start_week[house][plan.index] = week
        state.end_week[house][plan.index] = end
        state.cells[house].extend(
            _block_cells(house + 1, plan, week, span, cost_per_week, exceptions, limits)
        )
    state.next_house[plan.index] = cursor + len(houses)
    state.last_week_used = max(state.last_week_used, end)

    logger.debug(
        "week %d: %s admits houses %d-%d (rhythm=%d, base=%d, span=%d)",
        week, plan.name, houses[0] + 1, houses[-1] + 1, rhythm, base, span,
    )
    return StartBlock(
        package_name=plan.name,
        week_index=week,
        house_numbers=tuple(h + 1 for h in houses),
        effective_rhythm=rhythm,
        base_duration=base,
        real_duration=span,
    )


def build_schedule(
    data: ProjectData,
    weeks: Sequence[WeekDateMapping],
    limits: EngineLimits = DEFAULT_LIMITS,
) -> Schedule:
    """Run the week-major loop over pre-validated project data.

    Terminates when every house is admitted to the last package, when the
    mapped horizon runs out, or when a week without any admission occurs
    after limits.max_safety_weeks. In the last two cases the partial
    schedule accumulated so far is returned.
    """
    plans = plan_packages(data)
    calendar = ExceptionCalendar(data.stop_periods, data.partial_reduction_periods)
    exceptions = calendar.resolve_weeks(weeks)
    prefix = productive_prefix(exceptions)
    state = SchedulerState.empty(data.houses_count, len(plans))
    blocks: list[StartBlock] = []

    current_week = 0
    while not state.is_complete() and current_week < len(weeks):
        admitted = False
        for plan in plans:
            previous = plans[plan.index - 1] if plan.index > 0 else None
            block = _admit_block(
                state, plan, previous, current_week,
                data.learning_curve, exceptions, prefix, limits,
            )
            if block is not None:
                blocks.append(block)
                admitted = True

        current_week += 1
        if not admitted and current_week > limits.max_safety_weeks:
            break

    complete = state.is_complete()
    if not complete:
        logger.warning(
            "Schedule incomplete after %d weeks (horizon=%d, safety cap=%d); "
            "returning partial schedule",
            current_week, len(weeks), limits.max_safety_weeks,
        )

    total_weeks = state.last_week_used + 1 if blocks else 0
    logger.info(
        "Scheduled %d houses x %d packages: %d blocks over %d weeks",
        state.houses_count, len(plans), len(blocks), total_weeks,
    )
    return Schedule(
        matrix=tuple(tuple(cells) for cells in state.cells),
        total_weeks=total_weeks,
        blocks=tuple(blocks),
        complete=complete,
    )
