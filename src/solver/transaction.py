"""Transaction snapshots for the backtracking search."""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple

from contracts.errors import Contradiction, InvariantViolation

from .bitmask import mask_to_digits
from .delta import Delta, DeltaOp
from .grid_state import EMPTY, GridState, coords, validate_cells
from .phases.branch import select_branch_cell
from .phases.propagate import propagate_singles, recompute_candidates, set_cell
from .trace import TraceHook, TraceKind, emit

_LOGGER = logging.getLogger(__name__)


class Transaction:
    """Immutable snapshot of the solver state at one node of the search tree.

    A transaction owns its :class:`GridState` outright and never hands it
    out; readers get tuples and integers.  New states are only
    ever produced by :meth:`evolve`, which copies the grid, applies one
    assignment and propagates the naked singles that follow.  ``valid`` is
    ``False`` when a contradiction was found while building the snapshot;
    such a transaction must not be explored further.
    """

    __slots__ = ("_state", "_solved", "_valid", "_history", "_depth", "_hook")

    def __init__(
        self,
        state: GridState,
        *,
        solved: bool,
        valid: bool,
        history: Tuple[Delta, ...] = (),
        depth: int = 0,
        hook: Optional[TraceHook] = None,
    ) -> None:
        self._state = state
        self._solved = solved
        self._valid = valid
        self._history = tuple(history)
        self._depth = depth
        self._hook = hook

    # Construction ------------------------------------------------------

    @classmethod
    def from_cells(cls, cells: Sequence[int], *, trace: Optional[TraceHook] = None) -> "Transaction":
        """Build the root transaction from 81 input values.

        A given that repeats a digit already placed in its row, column or box
        makes the transaction invalid and stops construction early.
        """

        values = validate_cells(cells)
        state = GridState()
        complete = True
        for index, value in enumerate(values):
            if value == EMPTY:
                complete = False
                continue
            if not state.is_free(index, value):
                row, col = coords(index)
                _LOGGER.info("given %d at (%d, %d) repeats a digit in its unit", value, row, col)
                emit(trace, TraceKind.CONTRADICTION, cell=index, digit=value, source="given")
                return cls(state, solved=False, valid=False, hook=trace)
            state.place(index, value)

        if complete:
            emit(trace, TraceKind.SOLVED, source="given")
            return cls(state, solved=True, valid=True, hook=trace)

        try:
            recompute_candidates(state)
            history = propagate_singles(state, hook=trace, depth=0)
        except Contradiction as exc:
            _LOGGER.info("root configuration is contradictory: %s", exc)
            emit(trace, TraceKind.CONTRADICTION, cell=exc.cell, source="root")
            return cls(state, solved=False, valid=False, hook=trace)
        return cls._settled(state, history, depth=0, hook=trace)

    def evolve(self, index: int, digit: int) -> "Transaction":
        """Return a child snapshot with ``digit`` written into ``index``.

        The parent is left untouched.  The child is invalid when the
        assignment, or the propagation that follows it, runs into a
        contradiction.
        """

        if not self._valid:
            raise InvariantViolation("cannot evolve an invalid transaction")
        state = self._state.copy()
        depth = self._depth + 1
        history = self._history + (Delta(DeltaOp.GUESS, index, digit),)
        try:
            if state.cells[index] == EMPTY and not state.is_free(index, digit):
                raise Contradiction(index, f"digit {digit} is already used in a unit")
            set_cell(state, index, digit)
            history += propagate_singles(state, hook=self._hook, depth=depth)
        except Contradiction as exc:
            emit(self._hook, TraceKind.CONTRADICTION, cell=exc.cell, depth=depth, note=exc.reason)
            return Transaction(state, solved=False, valid=False, history=history, depth=depth, hook=self._hook)
        return Transaction._settled(state, history, depth=depth, hook=self._hook)

    @classmethod
    def _settled(
        cls,
        state: GridState,
        history: Tuple[Delta, ...],
        *,
        depth: int,
        hook: Optional[TraceHook],
    ) -> "Transaction":
        solved = next(state.unfilled(), None) is None
        if solved:
            emit(hook, TraceKind.SOLVED, depth=depth)
        return cls(state, solved=solved, valid=True, history=history, depth=depth, hook=hook)

    # Read-only accessors -------------------------------------------------

    @property
    def solved(self) -> bool:
        return self._solved

    @property
    def valid(self) -> bool:
        return self._valid

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def history(self) -> Tuple[Delta, ...]:
        return self._history

    @property
    def hook(self) -> Optional[TraceHook]:
        return self._hook

    def branch_cell(self) -> Optional[int]:
        """Cell the search should branch on next, or ``None``."""

        return select_branch_cell(self._state)

    @property
    def cells(self) -> Tuple[int, ...]:
        return self._state.snapshot()

    def candidate_mask(self, index: int) -> int:
        return self._state.candidates[index]

    def candidate_count(self, index: int) -> int:
        return self._state.counts[index]

    def candidates(self, index: int) -> Tuple[int, ...]:
        """Legal digits for ``index``, ascending; empty for filled cells."""

        return mask_to_digits(self._state.candidates[index])

    def __repr__(self) -> str:
        filled = sum(1 for value in self._state.cells if value != EMPTY)
        return (
            f"Transaction(depth={self._depth}, filled={filled}, "
            f"solved={self._solved}, valid={self._valid})"
        )


__all__ = ["Transaction"]
