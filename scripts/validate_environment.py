#!/usr/bin/env python3
"""Validate local hall scheduler environment readiness."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from backend.domain.constraints import RandomInstanceConfig, conflicts
from backend.domain.models import Event
from backend.services.scheduling_service import SchedulingService
from backend.utils.config import get_settings

SEPARATOR_LINE = "=" * 44


def _print_result(name: str, success: bool, detail: str = "") -> tuple[bool, str]:
    if success:
        return True, f"[PASS] {name}{detail}"
    return False, f"[FAIL] {name}: {detail}"


def main() -> int:
    results: list[str] = []
    all_passed = True

    # CHECK 1 - Python version >= 3.10
    if sys.version_info >= (3, 10):
        ok, line = _print_result("Python " + sys.version.split()[0], True)
    else:
        ok, line = _print_result(
            "Python version >= 3.10",
            False,
            f"found {sys.version.split()[0]}",
        )
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 2 - Required packages importable with versions
    package_specs = [
        ("fastapi", "fastapi"),
        ("uvicorn", "uvicorn"),
        ("pydantic", "pydantic"),
        ("httpx", "httpx"),
        ("pytest", "pytest"),
    ]
    import_errors: list[str] = []
    from importlib.metadata import version

    for module_name, dist_name in package_specs:
        try:
            importlib.import_module(module_name)
            _ = version(dist_name)
        except Exception as exc:  # pragma: no cover - runtime guard
            import_errors.append(f"{module_name} ({exc})")
    if import_errors:
        ok, line = _print_result(
            "Required packages",
            False,
            "missing/unimportable -> " + "; ".join(import_errors),
        )
    else:
        ok, line = _print_result("Required packages: all importable", True)
    results.append(line)
    all_passed = all_passed and ok

    service = SchedulingService(settings=get_settings())
    sample_events = [
        Event("A", 1, 3),
        Event("B", 2, 5),
        Event("C", 4, 7),
        Event("D", 6, 9),
        Event("E", 8, 10),
    ]

    # CHECK 3 - Greedy scheduler on the two-hall sample
    try:
        greedy = service.run_greedy(sample_events, 2)
        if greedy.scheduled_count != 5:
            raise RuntimeError(f"expected 5 scheduled events, got {greedy.scheduled_count}")
        ok, line = _print_result(
            "Greedy scheduler",
            True,
            f": {greedy.scheduled_count} scheduled in {greedy.elapsed_ms:.3f} ms",
        )
    except Exception as exc:
        ok, line = _print_result("Greedy scheduler", False, str(exc))
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 4 - Backtracking scheduler on a random instance
    try:
        random_events = service.generate_events(
            RandomInstanceConfig(count=12, range_start=0, range_end=20, min_length=1, max_length=6),
            seed=7,
        )
        greedy = service.run_greedy(random_events, 2)
        backtracking = service.run_backtracking(random_events, 2, time_budget_ms=2000)
        for hall in backtracking.scheduled:
            for position, first in enumerate(hall.events):
                for second in hall.events[position + 1:]:
                    if conflicts(first, second):
                        raise RuntimeError(
                            f"hall {hall.hall_index} overlaps {first.event_id}/{second.event_id}"
                        )
        if not backtracking.timed_out and backtracking.scheduled_count < greedy.scheduled_count:
            raise RuntimeError("backtracking scheduled fewer events than greedy")
        ok, line = _print_result(
            "Backtracking scheduler",
            True,
            (
                f": {backtracking.scheduled_count}/{len(random_events)} scheduled "
                f"(greedy {greedy.scheduled_count}) in {backtracking.elapsed_ms:.1f} ms"
            ),
        )
    except Exception as exc:
        ok, line = _print_result("Backtracking scheduler", False, str(exc))
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 5 - Validation rejects a zero hall count
    validation = service.validate(sample_events, 0)
    ok, line = _print_result(
        "Input validation",
        not validation.ok,
        "" if not validation.ok else "hall count 0 was accepted",
    )
    results.append(line)
    all_passed = all_passed and ok

    print(SEPARATOR_LINE)
    print(" Hall Scheduler Environment Validation")
    print(SEPARATOR_LINE)
    for line in results:
        print(f" {line}")
    print(SEPARATOR_LINE)
    if all_passed:
        print(" All checks passed. Environment is ready.")
        print(SEPARATOR_LINE)
        return 0
    print(" One or more checks failed.")
    print(SEPARATOR_LINE)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
