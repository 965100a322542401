#!/usr/bin/env python
"""Visual verification report for baseline-scheduling.

Run:  python scripts/verify.py  (with the package installed)

Produces a formatted report showing, for each project fixture:
  1. Project summary (houses, start date, unit, packages, periods, curve)
  2. Admission trace (first blocks per package) as a table
  3. ASCII line-of-balance matrix
  4. Weekly financial series and a monthly rollup
  5. Checks against the fixture's "expected" block, where present
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from baseline_scheduling import TimeUnit, calculate_baseline, calculate_temporal_analytics
from baseline_scheduling.calendar import format_week_label
from baseline_scheduling.debug import show_financials, show_matrix
from baseline_scheduling.loaders import project_from_dict

# ---------------------------------------------------------------------------
# Paths and data loading
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
FIXTURES = ROOT / "data" / "fixtures"

PROJECT_FIXTURES = ["seasonal_stop", "seasonal_reduction", "reference_lob", "jardins_montreal"]


def _load(path: Path):
    with open(path, encoding="utf-8") as f:
        return json.load(f)


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------
WIDTH = 90


def banner(title: str):
    print()
    print("=" * WIDTH)
    print(f"  {title}")
    print("=" * WIDTH)


def heading(title: str):
    print()
    print(f"  {title}")
    print(f"  {'-' * (len(title) + 2)}")


def table(headers: list[str], rows: list[list[str]], indent: int = 4):
    """Print a formatted table with auto-sized columns."""
    col_widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            col_widths[i] = max(col_widths[i], len(cell))

    pad = " " * indent
    fmt = pad + "  ".join(f"{{:<{w}}}" for w in col_widths)
    sep = pad + "  ".join("-" * w for w in col_widths)

    print(fmt.format(*headers))
    print(sep)
    for row in rows:
        print(fmt.format(*row))


def check(label: str, actual, expected) -> bool:
    ok = actual == expected
    mark = "PASS" if ok else "FAIL"
    print(f"    [{mark}] {label}: {actual!r}" + ("" if ok else f" (expected {expected!r})"))
    return ok


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------
def show_project(fixture: dict):
    data = project_from_dict(fixture["project"])
    heading("Project")
    print(f"    {fixture.get('description', '')}")
    print(f"    houses={data.houses_count}  start={data.start_date}  "
          f"unit={data.duration_unit.label}")
    table(
        ["#", "Package", "Duration", "Rhythm", "Latency", "Cost"],
        [
            [str(i + 1), p.name, f"{p.duration:g}", str(p.rhythm),
             f"{p.latency:g}", f"{p.cost:,.2f}"]
            for i, p in enumerate(data.work_packages)
        ],
    )
    periods = [f"stop {s.month}" for s in data.stop_periods]
    periods += [f"{r.month} x{r.coefficient}" for r in data.partial_reduction_periods]
    print(f"\n    periods: {', '.join(periods) or 'none'}")
    curve = data.learning_curve
    print(f"    curve: reducer={curve.rhythm_reducer} +{curve.increment} "
          f"every {curve.period_weeks}w, duration x{curve.duration_multiplier} "
          f"for {curve.duration_impact_weeks}w")
    return data


def show_blocks(result, per_package: int = 6):
    heading("Admission trace (first blocks per package)")
    shown: dict[str, int] = {}
    rows = []
    for block in result.blocks:
        if shown.get(block.package_name, 0) >= per_package:
            continue
        shown[block.package_name] = shown.get(block.package_name, 0) + 1
        houses = block.house_numbers
        rows.append([
            block.package_name[:32],
            format_week_label(block.week_index),
            f"{houses[0]}-{houses[-1]}",
            str(block.effective_rhythm),
            str(block.base_duration),
            str(block.real_duration),
        ])
    table(["Package", "Week", "Houses", "Rhythm", "Base", "Real"], rows)


def show_monthly(result):
    heading("Monthly rollup")
    analytics = calculate_temporal_analytics(result, TimeUnit.MONTHLY)
    table(
        ["Month", "Cost", "Cumulative", "Completed", "Peak active"],
        [
            [b.period.label, f"{b.period_cost:,.2f}", f"{b.cumulative_cost:,.2f}",
             str(b.houses_completed), str(b.active_houses)]
            for b in analytics.buckets
        ],
    )
    m = analytics.metrics
    print(f"\n    duration={m.duration_label}  lead time={m.lead_time_min}-"
          f"{m.lead_time_max} weeks  peak month={m.peak_period_cost:,.2f}")


def verify_expected(result, expected: dict) -> bool:
    heading("Expected values")
    ok = True
    if "total_weeks" in expected:
        ok &= check("total weeks", result.metadata.total_duration_weeks,
                    expected["total_weeks"])
    if "total_cost" in expected:
        ok &= check("total cost", result.metadata.total_cost, expected["total_cost"])
    if "starts_by_week" in expected:
        starts = {str(b.week_index): len(b.house_numbers) for b in result.blocks}
        ok &= check("starts by week", starts, expected["starts_by_week"])
    if "house_1" in expected:
        for package, (first, last) in expected["house_1"].items():
            weeks = [c.week_index + 1 for c in result.house_cells(1)
                     if c.package_name == package]
            ok &= check(f"house 1 {package}", [min(weeks), max(weeks)], [first, last])
    return ok


def main() -> int:
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    failures = 0
    for name in PROJECT_FIXTURES:
        fixture = _load(FIXTURES / f"{name}.json")
        banner(f"{name}")
        data = show_project(fixture)
        result = calculate_baseline(data)

        show_blocks(result)
        heading("Line of balance")
        show_matrix(result, max_houses=40, max_weeks=80)
        heading("Weekly financials")
        show_financials(result)
        show_monthly(result)

        if "expected" in fixture and not verify_expected(result, fixture["expected"]):
            failures += 1

    banner(f"{len(PROJECT_FIXTURES)} fixtures, {failures} with failures")
    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
