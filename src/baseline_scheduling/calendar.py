"""Layer 1: calendar mapping — start date + horizon → ordered calendar weeks."""

from __future__ import annotations

import math
import re
import unicodedata
from datetime import date, datetime, timedelta
from typing import Sequence

from baseline_scheduling.limits import DEFAULT_LIMITS, EngineLimits
from baseline_scheduling.types import ProjectData, WeekDateMapping, WorkPackage
from baseline_scheduling.units import DAYS_PER_WEEK, DurationUnit

MONTH_NAMES = (
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
)

_PT_MONTH_NAMES = (
    "janeiro", "fevereiro", "marco", "abril", "maio", "junho",
    "julho", "agosto", "setembro", "outubro", "novembro", "dezembro",
)

_MONTH_LOOKUP: dict[str, int] = {}
for _i, (_en, _pt) in enumerate(zip(MONTH_NAMES, _PT_MONTH_NAMES), start=1):
    _MONTH_LOOKUP[_en] = _i
    _MONTH_LOOKUP[_en[:3]] = _i
    _MONTH_LOOKUP[_pt] = _i

_BR_DATE = re.compile(r"^(\d{2})/(\d{2})/(\d{4})$")


def _fold(name: str) -> str:
    """Lower-case and strip accents: 'Março' -> 'marco'."""
    decomposed = unicodedata.normalize("NFKD", name.strip().lower())
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def month_number(name: str) -> int:
    """Month number 1-12 for an English or Portuguese month name.

    Case- and accent-insensitive. Raises ValueError for unknown names.
    """
    try:
        return _MONTH_LOOKUP[_fold(name)]
    except KeyError:
        raise ValueError(f"Unknown month name: {name!r}") from None


def parse_start_date(value: date | datetime | str) -> date:
    """Resolve a start date given as a date, ISO 'YYYY-MM-DD' or 'DD/MM/YYYY'.

    Raises ValueError if the value cannot be converted to a calendar date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Unresolvable start date: {value!r}")

    text = value.strip()
    match = _BR_DATE.match(text)
    try:
        if match:
            day, month, year = (int(g) for g in match.groups())
            return date(year, month, day)
        return date.fromisoformat(text[:10])
    except ValueError as e:
        raise ValueError(f"Unresolvable start date: {value!r} ({e})") from None


def format_week_label(week_index: int) -> str:
    """'W01' for week index 0."""
    return f"W{week_index + 1:02d}"


def estimate_horizon_weeks(
    houses_count: int,
    packages: Sequence[WorkPackage],
    unit: DurationUnit,
    limits: EngineLimits = DEFAULT_LIMITS,
) -> int:
    """Generous upper estimate of the number of weeks a schedule can need."""
    min_rhythm = min(pkg.rhythm for pkg in packages)
    package_weeks = sum(
        unit.to_weeks(pkg.duration) + unit.to_weeks(pkg.latency)
        for pkg in packages
    )
    base_estimate = math.ceil(houses_count / min_rhythm) + package_weeks
    return max(
        limits.min_estimated_weeks,
        math.ceil(base_estimate * limits.estimation_multiplier),
    )


def map_weeks(start: date, weeks_count: int) -> tuple[WeekDateMapping, ...]:
    """One mapping per week index; week i spans start + 7i .. start + 7i + 6.

    Month and year are those of the week's first day.
    """
    mappings: list[WeekDateMapping] = []
    for week_index in range(weeks_count):
        week_start = start + timedelta(days=week_index * DAYS_PER_WEEK)
        mappings.append(
            WeekDateMapping(
                week_index=week_index,
                start_date=week_start,
                end_date=week_start + timedelta(days=DAYS_PER_WEEK - 1),
                week_label=format_week_label(week_index),
                month=MONTH_NAMES[week_start.month - 1],
                year=week_start.year,
            )
        )
    return tuple(mappings)


def build_week_mappings(
    data: ProjectData,
    limits: EngineLimits = DEFAULT_LIMITS,
) -> tuple[WeekDateMapping, ...]:
    """Calendar weeks covering the estimated horizon of a project."""
    weeks_count = estimate_horizon_weeks(
        data.houses_count, data.work_packages, data.duration_unit, limits
    )
    return map_weeks(parse_start_date(data.start_date), weeks_count)
