"""Aggregation helpers for JSONL solver trace logs."""

from __future__ import annotations

import argparse
import json
from collections import Counter
from pathlib import Path
from typing import Iterable, List, Mapping

from contracts.schema_validator import SchemaValidationError, validate_payload

__all__ = ["aggregate", "main"]


def _load_events(paths: Iterable[Path]) -> Iterable[Mapping[str, object]]:
    for path in paths:
        for line in path.read_text(encoding="utf-8").splitlines():
            if not line.strip():
                continue
            yield json.loads(line)


def aggregate(paths: Iterable[Path], *, top: int = 5) -> Mapping[str, object]:
    """Summarise ``solver.trace`` events found in ``paths``.

    Lines that are not trace events are skipped; trace events that break the
    ``TraceEvent`` schema are counted as ``rejected``.
    """

    kinds: Counter = Counter()
    hot_cells: Counter = Counter()
    total = 0
    rejected = 0
    max_depth = 0
    for event in _load_events(paths):
        if event.get("event") != "solver.trace":
            continue
        try:
            validate_payload(dict(event), "TraceEvent")
        except SchemaValidationError:
            rejected += 1
            continue
        total += 1
        kind = str(event["kind"])
        kinds[kind] += 1
        depth = int(event["depth"])  # type: ignore[call-overload]
        max_depth = max(max_depth, depth)
        if kind == "BRANCH" and "cell" in event:
            hot_cells[int(event["cell"])] += 1  # type: ignore[call-overload]

    return {
        "total_events": total,
        "rejected": rejected,
        "kinds": dict(sorted(kinds.items())),
        "max_depth": max_depth,
        "top_branch_cells": hot_cells.most_common(top),
    }


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Summarise solver trace logs")
    parser.add_argument("path", help="Directory containing JSONL trace logs")
    parser.add_argument("--top", type=int, default=5)
    args = parser.parse_args(argv)

    base_dir = Path(args.path)
    files = sorted(base_dir.glob("**/*.jsonl"))
    if not files:
        raise SystemExit(f"No JSONL logs found under {base_dir}")
    print(json.dumps(aggregate(files, top=args.top), indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
