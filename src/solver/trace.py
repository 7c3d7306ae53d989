"""Trace hook for the solver engine.

The engine never prints.  Instead it calls an optional hook with a
:class:`TraceEvent` whenever a digit is placed, a contradiction is found, a
branch is taken or abandoned, and when a solution is reached.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple

from .grid_state import coords


class TraceKind(str, Enum):
    PLACE = "PLACE"
    BRANCH = "BRANCH"
    BACKTRACK = "BACKTRACK"
    CONTRADICTION = "CONTRADICTION"
    SOLVED = "SOLVED"


TRACE_LEVELS = ("none", "branch", "full")


@dataclass(frozen=True, slots=True)
class TraceEvent:
    """Immutable record emitted at a well-defined point of the solve."""

    kind: TraceKind
    cell: Optional[int] = None
    digit: Optional[int] = None
    depth: int = 0
    source: str = ""
    note: Optional[str] = None

    def to_payload(self) -> dict:
        payload: dict = {"kind": self.kind.value, "depth": int(self.depth)}
        if self.cell is not None:
            row, col = coords(self.cell)
            payload.update({"cell": int(self.cell), "row": row, "col": col})
        if self.digit is not None:
            payload["digit"] = int(self.digit)
        if self.source:
            payload["source"] = self.source
        if self.note is not None:
            payload["note"] = self.note
        return payload


TraceHook = Callable[[TraceEvent], None]


@dataclass
class TraceRecorder:
    """In-memory trace accumulator respecting ``trace_level`` semantics.

    ``none`` keeps nothing, ``branch`` keeps everything except forced
    placements, ``full`` keeps every event.  Accepted events are also handed
    to ``sink`` when one is configured.
    """

    trace_level: str = "none"
    sink: Optional[TraceHook] = None
    entries: List[TraceEvent] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.trace_level not in TRACE_LEVELS:
            raise ValueError(f"Unsupported trace level: {self.trace_level!r}")

    def accepts(self, event: TraceEvent) -> bool:
        if self.trace_level == "none":
            return False
        if self.trace_level == "branch":
            return not (event.kind is TraceKind.PLACE and event.source == "single")
        return True

    def __call__(self, event: TraceEvent) -> None:
        if not self.accepts(event):
            return
        self.entries.append(event)
        if self.sink is not None:
            self.sink(event)

    def snapshot(self) -> Tuple[TraceEvent, ...]:
        return tuple(self.entries)

    def reset(self) -> None:
        self.entries.clear()

    def to_json(self, *, indent: int | None = None) -> str:
        payload = [entry.to_payload() for entry in self.entries]
        return json.dumps(payload, ensure_ascii=False, separators=(",", ":"), indent=indent)


def emit(hook: Optional[TraceHook], kind: TraceKind, **fields) -> None:
    """Send an event to ``hook`` if one is installed."""

    if hook is not None:
        hook(TraceEvent(kind, **fields))


__all__ = [
    "TRACE_LEVELS",
    "TraceEvent",
    "TraceHook",
    "TraceKind",
    "TraceRecorder",
    "emit",
]
