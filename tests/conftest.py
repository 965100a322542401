"""Shared test fixtures and data loading for baseline-scheduling.

All test data lives in data/fixtures/ as JSON files.  Project fixtures
carry an "id", a "description", a camelCase "project" and an "expected"
block; scenario tables live in data/fixtures/scenarios/.

Neutral curve: reducer 1.0, increment 0, duration multiplier 1.0, so
package rhythm and duration apply unchanged from the first week.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

import pytest

from baseline_scheduling.baseline import calculate_baseline
from baseline_scheduling.loaders import project_from_dict
from baseline_scheduling.types import CalculationResult, LearningCurve, ProjectData

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
FIXTURES_DIR = Path(__file__).resolve().parent.parent / "data" / "fixtures"
SCENARIOS_DIR = FIXTURES_DIR / "scenarios"


# ---------------------------------------------------------------------------
# Data loaders
# ---------------------------------------------------------------------------
def _load_json(path: Path):
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def load_fixture(name: str) -> dict:
    """Raw contents of data/fixtures/{name}.json."""
    return _load_json(FIXTURES_DIR / f"{name}.json")


def load_project(name: str) -> ProjectData:
    """ProjectData built from the "project" block of a fixture file."""
    return project_from_dict(load_fixture(name)["project"])


def load_expected(name: str) -> dict:
    """The "expected" block of a fixture file."""
    return load_fixture(name)["expected"]


def load_scenarios(name: str):
    """Load a scenario file from data/fixtures/scenarios/{name}.json."""
    return _load_json(SCENARIOS_DIR / f"{name}.json")


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
NEUTRAL_CURVE = LearningCurve(
    rhythm_reducer=1.0,
    increment=0.0,
    period_weeks=1,
    duration_multiplier=1.0,
    duration_impact_weeks=0,
)

FIXED_NOW = datetime(2026, 10, 19, 9, 30)


def fixed_clock() -> datetime:
    return FIXED_NOW


def calculate(name: str, **kwargs) -> CalculationResult:
    """Run the engine on a fixture project with a fixed clock."""
    kwargs.setdefault("clock", fixed_clock)
    return calculate_baseline(load_project(name), **kwargs)


def span(cells) -> tuple[int, int]:
    """(first, last) week index of a collection of cells."""
    weeks = [cell.week_index for cell in cells]
    return min(weeks), max(weeks)


def package_span(result: CalculationResult, house_number: int, package: str):
    """(first, last) week index of one package in one house."""
    return span(
        c for c in result.house_cells(house_number) if c.package_name == package
    )


# ---------------------------------------------------------------------------
# pytest fixtures
# ---------------------------------------------------------------------------
@pytest.fixture(scope="session")
def reference_result() -> CalculationResult:
    """116-house, three-package line of balance with the default curve."""
    return calculate("reference_lob")


@pytest.fixture(scope="session")
def stop_result() -> CalculationResult:
    """Three houses straddling a December stop."""
    return calculate("seasonal_stop")


@pytest.fixture(scope="session")
def reduction_result() -> CalculationResult:
    """Twelve houses in a half-throughput January."""
    return calculate("seasonal_reduction")


@pytest.fixture(scope="session")
def montreal_result() -> CalculationResult:
    """Default 300-house, 23-package scenario."""
    return calculate("jardins_montreal")
