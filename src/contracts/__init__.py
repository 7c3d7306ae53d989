"""Error types and payload contracts for the Sudoku solver."""

from __future__ import annotations

from .errors import (
    Contradiction,
    InputFormatError,
    InvariantViolation,
    SudokuError,
    ValidationIssue,
)

__all__ = [
    "Contradiction",
    "InputFormatError",
    "InvariantViolation",
    "SudokuError",
    "ValidationIssue",
]
