"""baseline-scheduling: Line-of-balance baseline schedules and cost rollups."""

from baseline_scheduling.baseline import calculate_baseline
from baseline_scheduling.calendar import build_week_mappings, parse_start_date
from baseline_scheduling.calendar_rules import ExceptionCalendar, WeekException
from baseline_scheduling.engine import Schedule, build_schedule
from baseline_scheduling.export import matrix_rows, matrix_to_csv
from baseline_scheduling.financial import aggregate_financials
from baseline_scheduling.limits import DEFAULT_LIMITS, EngineLimits
from baseline_scheduling.schema import validate_project
from baseline_scheduling.temporal import TimeUnit, calculate_temporal_analytics
from baseline_scheduling.types import (
    CalculationResult,
    InvalidProjectDataError,
    LearningCurve,
    MatrixCell,
    PartialReductionPeriod,
    ProjectData,
    StopPeriod,
    ValidationErrorKind,
    WorkPackage,
)
from baseline_scheduling.units import DAY, WEEK, DurationUnit

__all__ = [
    "CalculationResult",
    "DAY",
    "DEFAULT_LIMITS",
    "DurationUnit",
    "EngineLimits",
    "ExceptionCalendar",
    "InvalidProjectDataError",
    "LearningCurve",
    "MatrixCell",
    "PartialReductionPeriod",
    "ProjectData",
    "Schedule",
    "StopPeriod",
    "TimeUnit",
    "ValidationErrorKind",
    "WEEK",
    "WeekException",
    "WorkPackage",
    "aggregate_financials",
    "build_schedule",
    "build_week_mappings",
    "calculate_baseline",
    "calculate_temporal_analytics",
    "matrix_rows",
    "matrix_to_csv",
    "parse_start_date",
    "validate_project",
]
