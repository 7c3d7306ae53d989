"""JSONL trace log used as a :class:`~solver.trace.TraceRecorder` sink.

Each accepted event becomes one JSON line under
``<base_dir>/<YYYYMMDD>/trace_NN.jsonl``; ``NN`` moves on once a file reaches
``max_bytes``.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

from .trace import TraceEvent

__all__ = ["DEFAULT_MAX_BYTES", "TraceLog"]

DEFAULT_MAX_BYTES = 100 * 1024 * 1024


class TraceLog:
    """Append-only, size-rotated trace file writer."""

    def __init__(self, base_dir: str | Path, *, max_bytes: int | None = None) -> None:
        self.base_dir = Path(base_dir)
        self.max_bytes = max_bytes or DEFAULT_MAX_BYTES
        self._day: Path | None = None
        self._index = 0
        self.path: Path | None = None

    def _target(self) -> Path:
        day = self.base_dir / datetime.now(timezone.utc).strftime("%Y%m%d")
        if day != self._day:
            day.mkdir(parents=True, exist_ok=True)
            self._day = day
            self._index = 0
        path = day / f"trace_{self._index:02d}.jsonl"
        while path.exists() and path.stat().st_size >= self.max_bytes:
            self._index += 1
            path = day / f"trace_{self._index:02d}.jsonl"
        self.path = path
        return path

    def write(self, record: Dict[str, Any]) -> Path:
        """Append ``record`` (stamped with ``ts``) and return the file written."""

        payload = dict(record)
        payload.setdefault("ts", datetime.now(timezone.utc).isoformat(timespec="milliseconds"))
        path = self._target()
        with path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(payload, sort_keys=True, ensure_ascii=False) + "\n")
        return path

    def __call__(self, event: TraceEvent) -> None:
        self.write({"event": "solver.trace", **event.to_payload()})
