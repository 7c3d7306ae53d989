"""Constraint propagation: candidate recomputation and naked singles."""

from __future__ import annotations

import logging
from collections import deque
from typing import Deque, List, Optional, Set, Tuple

from contracts.errors import Contradiction, InvariantViolation

from ..bitmask import FULL_MASK, POPCOUNT, single_digit
from ..delta import Delta, DeltaOp
from ..grid_state import BOX_OF, CELL_COUNT, COL_OF, EMPTY, ROW_OF, GridState, coords
from ..trace import TraceHook, TraceKind, emit

_LOGGER = logging.getLogger(__name__)


def recompute_candidates(state: GridState) -> bool:
    """Rebuild every unfilled cell's candidate mask and count.

    Returns ``True`` when the grid has no unfilled cell left.  Raises
    :class:`Contradiction` for the first cell (row-major) left without a
    candidate.
    """

    solved = True
    cells, candidates, counts = state.cells, state.candidates, state.counts
    rows, cols, boxes = state.rows, state.cols, state.boxes
    for index in range(CELL_COUNT):
        if cells[index] != EMPTY:
            continue
        solved = False
        mask = FULL_MASK & ~(rows[ROW_OF[index]] | cols[COL_OF[index]] | boxes[BOX_OF[index]])
        candidates[index] = mask
        counts[index] = POPCOUNT[mask]
        if not mask:
            row, col = coords(index)
            _LOGGER.debug("no candidate left for cell (%d, %d)", row, col)
            raise Contradiction(index)
    return solved


def set_cell(state: GridState, index: int, digit: int) -> bool:
    """Place ``digit`` on an unfilled cell and rescan the whole grid.

    The full rescan keeps every candidate mask exact after the placement.
    Returns the solved flag of :func:`recompute_candidates`.
    """

    state.place(index, digit)
    return recompute_candidates(state)


def find_singles(state: GridState) -> List[int]:
    """Return unfilled cells with exactly one candidate, row-major."""

    return [index for index in range(CELL_COUNT) if state.counts[index] == 1 and state.cells[index] == EMPTY]


def propagate_singles(
    state: GridState,
    *,
    hook: Optional[TraceHook] = None,
    depth: int = 0,
) -> Tuple[Delta, ...]:
    """Place naked singles until none remain.

    Singles found by a scan are queued once each and applied in FIFO order;
    the scan is repeated after every placement because a placement can
    create new singles.  Returns the forced placements in application order.
    :class:`Contradiction` from :func:`set_cell` is propagated.
    """

    queue: Deque[int] = deque()
    queued: Set[int] = set()
    placed: List[Delta] = []
    while True:
        for index in find_singles(state):
            if index not in queued:
                queued.add(index)
                queue.append(index)
        if not queue:
            break
        index = queue.popleft()
        if state.counts[index] != 1:
            raise InvariantViolation(f"queued cell {index} no longer holds a single candidate")
        digit = single_digit(state.candidates[index])
        row, col = coords(index)
        _LOGGER.debug("single possibility at (%d, %d): %d", row, col, digit)
        placed.append(Delta(DeltaOp.FORCE, index, digit))
        emit(hook, TraceKind.PLACE, cell=index, digit=digit, depth=depth, source="single")
        set_cell(state, index, digit)
    return tuple(placed)


__all__ = ["find_singles", "propagate_singles", "recompute_candidates", "set_cell"]
