"""Constraint-propagation and backtracking solver for the classic 9x9 Sudoku."""

from __future__ import annotations

from .bitmask import FULL_MASK, digit_to_mask, mask_to_digits
from .delta import Delta, DeltaOp
from .facade import SolveStatus, SudokuSolver
from .grid_state import CELL_COUNT, EMPTY, GridState
from .phases import SearchStats, propagate_singles, recompute_candidates, search, select_branch_cell, set_cell
from .puzzle_io import ParsedGrid, format_grid, is_complete_solution, parse_grid, read_grid
from .solver_port import SolveReport, solve_cells, solve_text
from .trace import TraceEvent, TraceKind, TraceRecorder
from .transaction import Transaction

__all__ = [
    "CELL_COUNT",
    "Delta",
    "DeltaOp",
    "EMPTY",
    "FULL_MASK",
    "GridState",
    "ParsedGrid",
    "SearchStats",
    "SolveReport",
    "SolveStatus",
    "SudokuSolver",
    "TraceEvent",
    "TraceKind",
    "TraceRecorder",
    "Transaction",
    "digit_to_mask",
    "format_grid",
    "is_complete_solution",
    "mask_to_digits",
    "parse_grid",
    "propagate_singles",
    "read_grid",
    "recompute_candidates",
    "search",
    "select_branch_cell",
    "set_cell",
    "solve_cells",
    "solve_text",
]
