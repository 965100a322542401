"""Data loading utilities for project definitions, limits and results."""

from __future__ import annotations

import dataclasses
import json
import logging
from pathlib import Path
from typing import Any

from baseline_scheduling.limits import DEFAULT_LIMITS, EngineLimits
from baseline_scheduling.palette import package_color
from baseline_scheduling.schema import validate_project
from baseline_scheduling.types import (
    CalculationResult,
    LearningCurve,
    PartialReductionPeriod,
    ProjectData,
    StopPeriod,
    WorkPackage,
)
from baseline_scheduling.units import WEEK, unit_from_label

logger = logging.getLogger(__name__)

_CURVE_FIELDS = {
    "rhythmReducer": "rhythm_reducer",
    "increment": "increment",
    "periodWeeks": "period_weeks",
    "durationMultiplier": "duration_multiplier",
    "durationImpactWeeks": "duration_impact_weeks",
}


def project_from_dict(raw: dict[str, Any]) -> ProjectData:
    """Build ProjectData from the camelCase contract used by collaborators.

    {
        "housesCount": 116,
        "startDate": "2026-04-06",
        "durationUnit": "week",
        "workPackages": [{"name": ..., "duration": ..., "rhythm": ...,
                          "latency": ..., "cost": ..., "color": ...}],
        "stopPeriods": [{"month": "december", "description": ...}],
        "partialReductionPeriods": [{"month": ..., "coefficient": ...}],
        "learningCurve": {"rhythmReducer": ..., "appliedPackages": [...]}
    }

    Missing colours come from the package palette. Raises KeyError for
    missing required keys and ValueError for an unknown duration unit.
    """
    packages = tuple(
        WorkPackage(
            name=pkg["name"],
            duration=pkg["duration"],
            rhythm=pkg["rhythm"],
            latency=pkg.get("latency", 0),
            cost=pkg.get("cost", 0.0),
            color=pkg.get("color") or package_color(i),
        )
        for i, pkg in enumerate(raw["workPackages"])
    )

    stops = tuple(
        StopPeriod(
            month=p["month"],
            description=p.get("description"),
            coefficient=p.get("coefficient", 0.0),
        )
        for p in raw.get("stopPeriods", [])
    )
    reductions = tuple(
        PartialReductionPeriod(
            month=p["month"],
            coefficient=p["coefficient"],
            description=p.get("description"),
        )
        for p in raw.get("partialReductionPeriods", [])
    )

    curve_raw = raw.get("learningCurve", {})
    curve_kwargs = {
        field: curve_raw[key] for key, field in _CURVE_FIELDS.items() if key in curve_raw
    }
    curve = LearningCurve(
        **curve_kwargs,
        applied_packages=frozenset(curve_raw.get("appliedPackages") or ()),
    )

    unit_label = raw.get("durationUnit")
    return ProjectData(
        houses_count=raw["housesCount"],
        start_date=raw["startDate"],
        work_packages=packages,
        stop_periods=stops,
        partial_reduction_periods=reductions,
        learning_curve=curve,
        duration_unit=unit_from_label(unit_label) if unit_label else WEEK,
    )


def load_project_json(
    path: str | Path, limits: EngineLimits = DEFAULT_LIMITS
) -> ProjectData:
    """Load ProjectData from a JSON file.

    The project may sit at the top level or under a "project" key
    (fixture files carry an "id" and "description" alongside it).

    Raises ValueError if validation fails.
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    project = project_from_dict(data.get("project", data))

    errors = validate_project(project, limits)
    if errors:
        raise ValueError(
            f"Validation errors in {path.name}:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )

    logger.debug(
        "Loaded %s: %d houses, %d packages",
        path.name, project.houses_count, len(project.work_packages),
    )
    return project


def load_limits_json(path: str | Path) -> EngineLimits:
    """Load EngineLimits overrides from a JSON object of snake_case fields.

    Fields not present keep their defaults. Raises ValueError for unknown
    fields.
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    known = {f.name for f in dataclasses.fields(EngineLimits)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(
            f"Unknown limit fields in {path.name}: {', '.join(unknown)}"
        )
    return EngineLimits(**data)


def result_to_dict(result: CalculationResult) -> dict[str, Any]:
    """JSON-safe rendering of a result, in the camelCase contract."""
    meta = result.metadata
    return {
        "matrix": [
            [
                {
                    "houseNumber": c.house_number,
                    "weekIndex": c.week_index,
                    "packageName": c.package_name,
                    "color": c.color,
                    "isReduced": c.is_reduced,
                    "reductionOpacity": c.reduction_opacity,
                    "cost": c.cost,
                }
                for c in cells
            ]
            for cells in result.matrix
        ],
        "weeks": list(result.weeks),
        "houses": list(result.houses),
        "weekDateMappings": [
            {
                "weekIndex": w.week_index,
                "startDate": w.start_date.isoformat(),
                "endDate": w.end_date.isoformat(),
                "weekLabel": w.week_label,
                "month": w.month,
                "year": w.year,
            }
            for w in result.week_mappings
        ],
        "financialData": [
            {
                "weekIndex": f.week_index,
                "weekLabel": f.week_label,
                "weeklyCost": f.weekly_cost,
                "cumulativeCost": f.cumulative_cost,
                "activeHouses": f.active_houses,
                "packageCosts": dict(f.package_costs),
            }
            for f in result.financial_data
        ],
        "calculationMetadata": {
            "totalProjectDuration": meta.total_duration_weeks,
            "totalPackages": meta.package_count,
            "reductionPeriods": meta.reduction_period_count,
            "calculatedAt": meta.calculated_at.isoformat(),
            "baseDate": meta.base_date.isoformat(),
            "totalProjectCost": meta.total_cost,
        },
    }


def dump_result_json(result: CalculationResult, path: str | Path) -> None:
    """Write a result to a JSON file (the persistence blob)."""
    path = Path(path)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(result_to_dict(result), f, ensure_ascii=False)
