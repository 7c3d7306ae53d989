"""One-call solver entry points returning a serialisable report."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

from .delta import Delta, count_ops
from .facade import SolveStatus, SudokuSolver
from .puzzle_io import cells_to_string, parse_grid
from .trace import TraceHook

REPORT_VERSION = "1.0"


@dataclass(frozen=True)
class SolveReport:
    """Outcome of a solve.

    ``grid`` is the committed state: the solution for ``SOLVED``, otherwise
    whatever the root transaction holds.
    """

    status: SolveStatus
    givens: Tuple[int, ...]
    grid: Tuple[int, ...]
    history: Tuple[Delta, ...]
    stats: Dict[str, int]

    @property
    def solved(self) -> bool:
        return self.status is SolveStatus.SOLVED

    @classmethod
    def from_solver(cls, solver: SudokuSolver) -> "SolveReport":
        history = solver.transaction.history
        forced, guessed = count_ops(history)
        stats = dict(solver.stats.to_payload())
        stats.update({"forced": forced, "guessed_on_path": guessed})
        return cls(
            status=solver.status,
            givens=solver.givens,
            grid=solver.grid,
            history=history,
            stats=stats,
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "version": REPORT_VERSION,
            "status": self.status.value,
            "message": self.status.message,
            "givens": cells_to_string(self.givens),
            "grid": cells_to_string(self.grid),
            "stats": dict(self.stats),
            "history": [delta.to_payload() for delta in self.history],
        }


def solve_cells(cells: Sequence[int], *, trace: Optional[TraceHook] = None) -> SolveReport:
    """Solve 81 cell values (0 for blanks) and return the report."""

    solver = SudokuSolver(cells, trace=trace)
    solver.solve()
    return SolveReport.from_solver(solver)


def solve_text(text: str, *, trace: Optional[TraceHook] = None) -> SolveReport:
    """Parse ``text`` in the input file format and solve it.

    Raises :class:`contracts.errors.InputFormatError` on malformed input.
    """

    parsed = parse_grid(text)
    return solve_cells(parsed.cells, trace=trace)


__all__ = ["REPORT_VERSION", "SolveReport", "solve_cells", "solve_text"]
