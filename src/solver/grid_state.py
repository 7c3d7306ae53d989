"""Mutable 9x9 grid state owned by exactly one transaction."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Sequence, Tuple

from contracts.errors import InvariantViolation

from .bitmask import digit_to_mask

GRID_SIZE = 9
BOX_SIZE = 3
CELL_COUNT = GRID_SIZE * GRID_SIZE
EMPTY = 0


def cell_index(row: int, col: int) -> int:
    return row * GRID_SIZE + col


def box_index(row: int, col: int) -> int:
    return BOX_SIZE * (row // BOX_SIZE) + col // BOX_SIZE


# Unit lookups per flat cell index.
ROW_OF: Tuple[int, ...] = tuple(index // GRID_SIZE for index in range(CELL_COUNT))
COL_OF: Tuple[int, ...] = tuple(index % GRID_SIZE for index in range(CELL_COUNT))
BOX_OF: Tuple[int, ...] = tuple(box_index(ROW_OF[i], COL_OF[i]) for i in range(CELL_COUNT))


def coords(index: int) -> Tuple[int, int]:
    """Return ``(row, col)`` of a flat cell index."""

    return ROW_OF[index], COL_OF[index]


def _flags() -> List[bool]:
    return [False] * CELL_COUNT


@dataclass
class GridState:
    """Cell values plus the derived constraint masks.

    ``row_has[(digit - 1) * 9 + row]`` (and the column/box equivalents) mirror
    the unit masks for point queries; ``counts`` caches the popcount of
    ``candidates``.  Filled cells always carry a zero candidate mask.
    """

    cells: List[int] = field(default_factory=lambda: [EMPTY] * CELL_COUNT)
    rows: List[int] = field(default_factory=lambda: [0] * GRID_SIZE)
    cols: List[int] = field(default_factory=lambda: [0] * GRID_SIZE)
    boxes: List[int] = field(default_factory=lambda: [0] * GRID_SIZE)
    candidates: List[int] = field(default_factory=lambda: [0] * CELL_COUNT)
    counts: List[int] = field(default_factory=lambda: [0] * CELL_COUNT)
    row_has: List[bool] = field(default_factory=_flags)
    col_has: List[bool] = field(default_factory=_flags)
    box_has: List[bool] = field(default_factory=_flags)

    def copy(self) -> "GridState":
        """Return a deep copy; the copy shares no list with ``self``."""

        return GridState(
            cells=list(self.cells),
            rows=list(self.rows),
            cols=list(self.cols),
            boxes=list(self.boxes),
            candidates=list(self.candidates),
            counts=list(self.counts),
            row_has=list(self.row_has),
            col_has=list(self.col_has),
            box_has=list(self.box_has),
        )

    def used_mask(self, index: int) -> int:
        """Digits already placed in the row, column or box of ``index``."""

        return self.rows[ROW_OF[index]] | self.cols[COL_OF[index]] | self.boxes[BOX_OF[index]]

    def is_free(self, index: int, digit: int) -> bool:
        """``True`` when ``digit`` is absent from every unit of ``index``."""

        return not self.used_mask(index) & digit_to_mask(digit)

    def is_filled(self, index: int) -> bool:
        return self.cells[index] != EMPTY

    def place(self, index: int, digit: int) -> None:
        """Write ``digit`` into an unfilled cell and update unit bookkeeping.

        Candidate masks of other cells are left stale; the propagator
        recomputes them.
        """

        mask = digit_to_mask(digit)
        if self.cells[index] != EMPTY:
            row, col = coords(index)
            raise InvariantViolation(
                f"Trying to set value of cell ({row}, {col}) already containing "
                f"{self.cells[index]} to {digit}"
            )
        row, col, box = ROW_OF[index], COL_OF[index], BOX_OF[index]
        self.cells[index] = digit
        self.rows[row] |= mask
        self.cols[col] |= mask
        self.boxes[box] |= mask
        offset = (digit - 1) * GRID_SIZE
        self.row_has[offset + row] = True
        self.col_has[offset + col] = True
        self.box_has[offset + box] = True
        self.candidates[index] = 0
        self.counts[index] = 0

    def unfilled(self) -> Iterator[int]:
        """Yield unfilled cell indices in row-major order."""

        return (index for index, value in enumerate(self.cells) if value == EMPTY)

    def snapshot(self) -> Tuple[int, ...]:
        return tuple(self.cells)


def validate_cells(cells: Sequence[int]) -> Tuple[int, ...]:
    """Return ``cells`` as a tuple after checking the 81-value domain."""

    values = tuple(int(value) for value in cells)
    if len(values) != CELL_COUNT:
        raise InvariantViolation(f"expected {CELL_COUNT} cell values, got {len(values)}")
    for index, value in enumerate(values):
        if value != EMPTY and not 1 <= value <= GRID_SIZE:
            raise InvariantViolation(f"cell {index} holds out-of-domain value {value!r}")
    return values


__all__ = [
    "BOX_OF",
    "BOX_SIZE",
    "CELL_COUNT",
    "COL_OF",
    "EMPTY",
    "GRID_SIZE",
    "GridState",
    "ROW_OF",
    "box_index",
    "cell_index",
    "coords",
    "validate_cells",
]
