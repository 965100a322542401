"""Shared types: project input records, schedule output records and errors."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Mapping

from baseline_scheduling.units import WEEK, DurationUnit


# ---------------------------------------------------------------------------
# Input records
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class WorkPackage:
    """One trade package executed in every house, in declaration order.

    Invariants:
        - duration > 0, rhythm > 0, cost >= 0
        - duration and latency are in the project's duration unit
        - cost is the package total across all houses
    """

    name: str
    duration: float
    rhythm: int
    latency: float = 0
    cost: float = 0.0
    color: str = "#1d4ed8"


@dataclass(frozen=True)
class StopPeriod:
    """Recurring month with a full halt on new starts."""

    month: str
    description: str | None = None
    coefficient: float = 0.0


@dataclass(frozen=True)
class PartialReductionPeriod:
    """Recurring month with throttled new-start throughput (0 < coefficient < 1)."""

    month: str
    coefficient: float
    description: str | None = None


@dataclass(frozen=True)
class LearningCurve:
    """Throughput ramp-up and duration ramp-down parameters.

    applied_packages empty means the curve applies to every package.
    """

    rhythm_reducer: float = 0.60
    increment: float = 0.20
    period_weeks: int = 4
    duration_multiplier: float = 2.00
    duration_impact_weeks: int = 6
    applied_packages: frozenset[str] = frozenset()


@dataclass(frozen=True)
class ProjectData:
    """Complete engine input. start_date may be a date or a date string."""

    houses_count: int
    start_date: date | datetime | str
    work_packages: tuple[WorkPackage, ...]
    stop_periods: tuple[StopPeriod, ...] = ()
    partial_reduction_periods: tuple[PartialReductionPeriod, ...] = ()
    learning_curve: LearningCurve = field(default_factory=LearningCurve)
    duration_unit: DurationUnit = WEEK


# ---------------------------------------------------------------------------
# Output records
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class WeekDateMapping:
    """Calendar week at a 0-based index: [start_date, end_date] inclusive."""

    week_index: int
    start_date: date
    end_date: date
    week_label: str
    month: str
    year: int


@dataclass(frozen=True)
class MatrixCell:
    """One house working one package during one week."""

    house_number: int
    week_index: int
    package_name: str
    color: str
    is_reduced: bool = False
    reduction_opacity: float | None = None
    cost: float = 0.0


@dataclass(frozen=True)
class StartBlock:
    """Record of one admission: a block of houses starting a package together.

    Invariants:
        - 1 <= len(house_numbers) <= effective_rhythm
        - real_duration >= base_duration (stop weeks only extend)
    """

    package_name: str
    week_index: int
    house_numbers: tuple[int, ...]
    effective_rhythm: int
    base_duration: int
    real_duration: int

    @property
    def end_week(self) -> int:
        """Last week index occupied by the block."""
        return self.week_index + self.real_duration - 1


@dataclass(frozen=True)
class FinancialWeekData:
    """Cost and activity rollup for one mapped week."""

    week_index: int
    week_label: str
    weekly_cost: float
    cumulative_cost: float
    active_houses: int
    package_costs: Mapping[str, float]


@dataclass(frozen=True)
class CalculationMetadata:
    total_duration_weeks: int
    package_count: int
    reduction_period_count: int
    total_cost: float
    calculated_at: datetime
    base_date: date


@dataclass(frozen=True)
class CalculationResult:
    """Immutable aggregate produced once per engine invocation."""

    matrix: tuple[tuple[MatrixCell, ...], ...]
    weeks: tuple[str, ...]
    houses: tuple[int, ...]
    week_mappings: tuple[WeekDateMapping, ...]
    financial_data: tuple[FinancialWeekData, ...]
    metadata: CalculationMetadata
    blocks: tuple[StartBlock, ...] = ()

    def house_cells(self, house_number: int) -> tuple[MatrixCell, ...]:
        """Cells of a 1-based house number, in emission order."""
        return self.matrix[house_number - 1]


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------
class ValidationErrorKind(Enum):
    """Closed vocabulary shared by the validator and the engine guard."""

    INVALID_HOUSE_COUNT = "invalid_house_count"
    EMPTY_PACKAGE_LIST = "empty_package_list"
    NON_POSITIVE_PACKAGE_FIELD = "non_positive_package_field"
    UNRESOLVABLE_START_DATE = "unresolvable_start_date"
    INVALID_PACKAGE_FIELD = "invalid_package_field"
    DUPLICATE_PACKAGE_NAME = "duplicate_package_name"
    INVALID_PERIOD = "invalid_period"
    INVALID_LEARNING_CURVE = "invalid_learning_curve"
    START_DATE_WEEKDAY = "start_date_weekday"


@dataclass(frozen=True)
class ValidationIssue:
    """One violated rule, naming the offending field."""

    kind: ValidationErrorKind
    field: str
    message: str

    def __str__(self) -> str:
        return self.message


class InvalidProjectDataError(Exception):
    """Raised by the engine when asked to run on data failing its invariants."""

    def __init__(self, issues: list[ValidationIssue]) -> None:
        self.issues = list(issues)
        super().__init__("Invalid project data")
