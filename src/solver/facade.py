"""Solver facade owning the root transaction."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Sequence, Tuple

from .phases.branch import SearchStats, search
from .trace import TraceHook
from .transaction import Transaction

_LOGGER = logging.getLogger(__name__)


class SolveStatus(str, Enum):
    PENDING = "pending"
    SOLVED = "solved"
    INVALID = "invalid"
    EXHAUSTED = "exhausted"

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES = {
    SolveStatus.PENDING: "Not solved yet.",
    SolveStatus.SOLVED: "Solved.",
    SolveStatus.INVALID: "No solution possible.",
    SolveStatus.EXHAUSTED: "No solution found.",
}


class SudokuSolver:
    """Drive a puzzle from its givens to a verdict.

    The root transaction is built (and propagated once) on construction.
    :meth:`solve` runs the search and commits the winning grid; afterwards
    :attr:`grid` holds the solution, or the root state when no solution was
    committed.
    """

    def __init__(self, cells: Sequence[int], *, trace: Optional[TraceHook] = None) -> None:
        self.givens: Tuple[int, ...] = tuple(int(value) for value in cells)
        self.root = Transaction.from_cells(self.givens, trace=trace)
        self.stats = SearchStats()
        self.status = SolveStatus.PENDING
        self._committed: Transaction = self.root

    @property
    def is_sane(self) -> bool:
        """``False`` when the givens already contradict each other."""

        return self.root.valid

    @property
    def transaction(self) -> Transaction:
        """The committed transaction (the root until a solution is found)."""

        return self._committed

    @property
    def grid(self) -> Tuple[int, ...]:
        return self._committed.cells

    def solve(self) -> SolveStatus:
        if self.status is not SolveStatus.PENDING:
            return self.status

        if not self.root.valid:
            self.status = SolveStatus.INVALID
        elif self.root.solved:
            self._commit(self.root)
        else:
            winner = search(self.root, self.stats)
            if winner is None:
                self.status = SolveStatus.EXHAUSTED
            else:
                self._commit(winner)

        _LOGGER.info(
            "%s nodes=%d guesses=%d backtracks=%d max_depth=%d",
            self.status.message,
            self.stats.nodes,
            self.stats.guesses,
            self.stats.backtracks,
            self.stats.max_depth,
        )
        return self.status

    def _commit(self, txn: Transaction) -> None:
        self._committed = txn
        self.status = SolveStatus.SOLVED


__all__ = ["SolveStatus", "SudokuSolver"]
