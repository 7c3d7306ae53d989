"""Branching support: MRV cell selection and recursive backtracking."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from ..bitmask import mask_to_digits
from ..grid_state import CELL_COUNT, EMPTY, GridState, coords
from ..trace import TraceKind, emit

if TYPE_CHECKING:  # pragma: no cover
    from ..transaction import Transaction

_LOGGER = logging.getLogger(__name__)


@dataclass
class SearchStats:
    """Counters collected while searching."""

    nodes: int = 0
    guesses: int = 0
    backtracks: int = 0
    max_depth: int = 0

    def to_payload(self) -> dict:
        return {
            "nodes": self.nodes,
            "guesses": self.guesses,
            "backtracks": self.backtracks,
            "max_depth": self.max_depth,
        }


def select_branch_cell(state: GridState) -> Optional[int]:
    """Pick the unfilled cell with the fewest candidates.

    Ties go to the lowest flat index.  Returns ``None`` when no unfilled cell
    carries a candidate.
    """

    best: Optional[int] = None
    best_count = 10
    for index in range(CELL_COUNT):
        if state.cells[index] != EMPTY:
            continue
        count = state.counts[index]
        if 1 <= count < best_count:
            best = index
            best_count = count
            if count == 1:
                break
    return best


def search(txn: "Transaction", stats: Optional[SearchStats] = None) -> Optional["Transaction"]:
    """Return the first solved descendant of ``txn``, or ``None``.

    Candidates of the MRV cell are tried in ascending order.  Invalid
    children are dropped; ambiguous children are searched recursively; the
    first solved child ends the enumeration.  ``txn`` itself is never
    modified.
    """

    if stats is None:
        stats = SearchStats()
    if not txn.valid:
        return None
    if txn.solved:
        return txn

    index = txn.branch_cell()
    if index is None:
        _LOGGER.debug("no branchable cell at depth %d", txn.depth)
        return None

    row, col = coords(index)
    depth = txn.depth + 1
    for digit in mask_to_digits(txn.candidate_mask(index)):
        _LOGGER.debug("depth %d: trying %d at (%d, %d)", depth, digit, row, col)
        emit(txn.hook, TraceKind.BRANCH, cell=index, digit=digit, depth=depth, source="guess")
        stats.nodes += 1
        stats.guesses += 1
        stats.max_depth = max(stats.max_depth, depth)
        child = txn.evolve(index, digit)
        if not child.valid:
            stats.backtracks += 1
            emit(txn.hook, TraceKind.BACKTRACK, cell=index, digit=digit, depth=depth, note="invalid")
            continue
        if child.solved:
            _LOGGER.debug("found a solution at depth %d", depth)
            return child
        found = search(child, stats)
        if found is not None:
            return found
        stats.backtracks += 1
        emit(txn.hook, TraceKind.BACKTRACK, cell=index, digit=digit, depth=depth, note="exhausted")
    return None


__all__ = ["SearchStats", "search", "select_branch_cell"]
