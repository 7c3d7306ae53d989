"""Solver phases: propagation and branching."""

from __future__ import annotations

from .branch import SearchStats, search, select_branch_cell
from .propagate import find_singles, propagate_singles, recompute_candidates, set_cell

__all__ = [
    "SearchStats",
    "find_singles",
    "propagate_singles",
    "recompute_candidates",
    "search",
    "select_branch_cell",
    "set_cell",
]
