"""Input validation for project data.

Two tiers share one vocabulary (ValidationErrorKind):
    - validate_project / collect_issues: caller-facing, every violated rule
    - check_invariants: engine guard, core rules only (house count, start date,
      package durations, rhythms and costs, month names), raises one generic error
"""

from __future__ import annotations

from baseline_scheduling.calendar import month_number, parse_start_date
from baseline_scheduling.limits import DEFAULT_LIMITS, EngineLimits
from baseline_scheduling.types import (
    InvalidProjectDataError,
    ProjectData,
    ValidationErrorKind,
    ValidationIssue,
)

_WEEKDAY_NAMES = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)


def _is_whole(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _month_issues(data: ProjectData) -> list[ValidationIssue]:
    """Month names the exception calendar cannot resolve."""
    issues: list[ValidationIssue] = []
    named = [
        ("stop_periods", "Stop period", data.stop_periods),
        ("partial_reduction_periods", "Reduction period", data.partial_reduction_periods),
    ]
    for field, label, periods in named:
        for i, period in enumerate(periods):
            try:
                month_number(period.month)
            except ValueError:
                issues.append(ValidationIssue(
                    ValidationErrorKind.INVALID_PERIOD,
                    f"{field}[{i}].month",
                    f"{label} {i + 1}: unknown month {period.month!r}",
                ))
    return issues


def _core_issues(data: ProjectData, limits: EngineLimits) -> list[ValidationIssue]:
    """Minimal invariants the engine itself relies on."""
    issues: list[ValidationIssue] = []

    if not _is_whole(data.houses_count):
        issues.append(ValidationIssue(
            ValidationErrorKind.INVALID_HOUSE_COUNT,
            "houses_count",
            f"House count must be a whole number, got {data.houses_count!r}",
        ))
    elif not limits.min_houses <= data.houses_count <= limits.max_houses:
        issues.append(ValidationIssue(
            ValidationErrorKind.INVALID_HOUSE_COUNT,
            "houses_count",
            f"House count must be between {limits.min_houses} and "
            f"{limits.max_houses}, got {data.houses_count}",
        ))

    try:
        parse_start_date(data.start_date)
    except ValueError:
        issues.append(ValidationIssue(
            ValidationErrorKind.UNRESOLVABLE_START_DATE,
            "start_date",
            f"Start date {data.start_date!r} is not a valid calendar date",
        ))

    if not data.work_packages:
        issues.append(ValidationIssue(
            ValidationErrorKind.EMPTY_PACKAGE_LIST,
            "work_packages",
            "At least one work package is required",
        ))

    for i, pkg in enumerate(data.work_packages):
        label = f"Package {i + 1} ({pkg.name})"
        if pkg.duration <= 0:
            issues.append(ValidationIssue(
                ValidationErrorKind.NON_POSITIVE_PACKAGE_FIELD,
                f"work_packages[{i}].duration",
                f"{label}: duration must be greater than zero",
            ))
        if pkg.rhythm <= 0:
            issues.append(ValidationIssue(
                ValidationErrorKind.NON_POSITIVE_PACKAGE_FIELD,
                f"work_packages[{i}].rhythm",
                f"{label}: rhythm must be greater than zero",
            ))
        elif pkg.rhythm != int(pkg.rhythm):
            issues.append(ValidationIssue(
                ValidationErrorKind.INVALID_PACKAGE_FIELD,
                f"work_packages[{i}].rhythm",
                f"{label}: rhythm must be a whole number of houses per week",
            ))
        if pkg.cost < 0:
            issues.append(ValidationIssue(
                ValidationErrorKind.NON_POSITIVE_PACKAGE_FIELD,
                f"work_packages[{i}].cost",
                f"{label}: cost cannot be negative",
            ))

    issues.extend(_month_issues(data))
    return issues


def _package_issues(data: ProjectData, limits: EngineLimits) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    unit = data.duration_unit
    seen: dict[str, int] = {}

    for i, pkg in enumerate(data.work_packages):
        label = f"Package {i + 1} ({pkg.name})"
        name = pkg.name.strip()
        if not name:
            issues.append(ValidationIssue(
                ValidationErrorKind.INVALID_PACKAGE_FIELD,
                f"work_packages[{i}].name",
                f"Package {i + 1}: name is required",
            ))
        elif name.lower() in seen:
            issues.append(ValidationIssue(
                ValidationErrorKind.DUPLICATE_PACKAGE_NAME,
                f"work_packages[{i}].name",
                f"{label}: name duplicates package {seen[name.lower()] + 1}",
            ))
        else:
            seen[name.lower()] = i

        if pkg.rhythm > limits.max_rhythm:
            issues.append(ValidationIssue(
                ValidationErrorKind.INVALID_PACKAGE_FIELD,
                f"work_packages[{i}].rhythm",
                f"{label}: rhythm cannot exceed {limits.max_rhythm} houses per week",
            ))
        if unit.to_weeks(pkg.duration) > limits.max_duration_weeks:
            issues.append(ValidationIssue(
                ValidationErrorKind.INVALID_PACKAGE_FIELD,
                f"work_packages[{i}].duration",
                f"{label}: duration cannot exceed "
                f"{limits.max_duration_weeks:g} weeks",
            ))
        if pkg.latency < 0:
            issues.append(ValidationIssue(
                ValidationErrorKind.INVALID_PACKAGE_FIELD,
                f"work_packages[{i}].latency",
                f"{label}: latency cannot be negative",
            ))
        elif unit.to_weeks(pkg.latency) > limits.max_latency_weeks:
            issues.append(ValidationIssue(
                ValidationErrorKind.INVALID_PACKAGE_FIELD,
                f"work_packages[{i}].latency",
                f"{label}: latency cannot exceed "
                f"{limits.max_latency_weeks:g} weeks",
            ))

    return issues


def _period_issues(data: ProjectData) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []

    for i, stop in enumerate(data.stop_periods):
        if stop.coefficient != 0:
            issues.append(ValidationIssue(
                ValidationErrorKind.INVALID_PERIOD,
                f"stop_periods[{i}].coefficient",
                f"Stop period {i + 1}: coefficient must be 0",
            ))

    for i, period in enumerate(data.partial_reduction_periods):
        if not 0 < period.coefficient < 1:
            issues.append(ValidationIssue(
                ValidationErrorKind.INVALID_PERIOD,
                f"partial_reduction_periods[{i}].coefficient",
                f"Reduction period {i + 1}: coefficient must be between 0 and 1 "
                f"(exclusive), got {period.coefficient}",
            ))

    return issues


def _learning_curve_issues(data: ProjectData) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    curve = data.learning_curve

    def issue(field: str, message: str) -> None:
        issues.append(ValidationIssue(
            ValidationErrorKind.INVALID_LEARNING_CURVE,
            f"learning_curve.{field}",
            f"Learning curve: {message}",
        ))

    if not 0 < curve.rhythm_reducer <= 1:
        issue("rhythm_reducer", "initial rhythm reducer must be in (0, 1]")
    if curve.increment < 0:
        issue("increment", "increment cannot be negative")
    elif curve.rhythm_reducer + curve.increment > 1:
        issue("increment", "reducer plus increment cannot exceed 1")
    if curve.period_weeks < 1 or curve.period_weeks != int(curve.period_weeks):
        issue("period_weeks", "period must be a whole number of weeks >= 1")
    if curve.duration_multiplier <= 0:
        issue("duration_multiplier", "duration multiplier must be greater than zero")
    if curve.duration_impact_weeks < 0:
        issue("duration_impact_weeks", "duration impact weeks cannot be negative")

    names = {pkg.name for pkg in data.work_packages}
    for name in sorted(curve.applied_packages - names):
        issue("applied_packages", f"unknown package {name!r}")

    return issues


def _start_weekday_issues(
    data: ProjectData, limits: EngineLimits
) -> list[ValidationIssue]:
    if limits.required_start_weekday is None:
        return []
    try:
        start = parse_start_date(data.start_date)
    except ValueError:
        return []  # already reported as UNRESOLVABLE_START_DATE
    if start.weekday() == limits.required_start_weekday:
        return []
    return [ValidationIssue(
        ValidationErrorKind.START_DATE_WEEKDAY,
        "start_date",
        f"Start date must be a {_WEEKDAY_NAMES[limits.required_start_weekday]}, "
        f"got {start.isoformat()} ({_WEEKDAY_NAMES[start.weekday()]})",
    )]


def collect_issues(
    data: ProjectData, limits: EngineLimits = DEFAULT_LIMITS
) -> list[ValidationIssue]:
    """Every violated rule, one issue per offending field."""
    issues = _core_issues(data, limits)
    issues.extend(_start_weekday_issues(data, limits))
    issues.extend(_package_issues(data, limits))
    issues.extend(_period_issues(data))
    issues.extend(_learning_curve_issues(data))
    return issues


def validate_project(
    data: ProjectData, limits: EngineLimits = DEFAULT_LIMITS
) -> list[str]:
    """Validate project data. Returns list of error messages (empty = valid)."""
    return [issue.message for issue in collect_issues(data, limits)]


def check_invariants(
    data: ProjectData, limits: EngineLimits = DEFAULT_LIMITS
) -> None:
    """Engine guard: raise InvalidProjectDataError if core invariants fail."""
    issues = _core_issues(data, limits)
    if issues:
        raise InvalidProjectDataError(issues)
