#!/usr/bin/env python3
"""Smoke-test deterministic behaviour of the solver on the bundled puzzles."""

from __future__ import annotations

import hashlib
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from contracts.schema_validator import validate_payload  # noqa: E402
from solver.puzzle_io import read_grid  # noqa: E402
from solver.solver_port import solve_cells  # noqa: E402
from solver.trace import TraceRecorder  # noqa: E402


def _digest(obj: object) -> str:
    dumped = json.dumps(obj, sort_keys=True, ensure_ascii=False, separators=(",", ":"))
    return "sha256-" + hashlib.sha256(dumped.encode("utf-8")).hexdigest()


def _run(path: Path) -> tuple[str, str, str]:
    recorder = TraceRecorder(trace_level="full")
    report = solve_cells(read_grid(path).cells, trace=recorder)
    payload = report.to_payload()
    validate_payload(payload, "SolveReport")
    trace = [event.to_payload() for event in recorder.snapshot()]
    return payload["status"], _digest(payload), _digest(trace)


def main() -> int:
    puzzles = sorted((ROOT / "puzzles").glob("*.txt"))
    if not puzzles:
        print("no puzzles found")
        return 1

    for path in puzzles:
        first = _run(path)
        second = _run(path)
        if first != second:
            print(f"determinism failed for {path.name}: {first} vs {second}")
            return 1
        print(f"{path.name}: {first[0]} {first[1]}")

    print("Determinism smoke-test passed.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
