"""Shared error types for the Sudoku solver."""

from __future__ import annotations


from dataclasses import dataclass
from typing import List

SEVERITY_ERROR = "ERROR"
SEVERITY_WARN = "WARN"


@dataclass(frozen=True)
class ValidationIssue:
    """Single finding produced while checking puzzle input."""

    code: str
    msg: str
    path: str
    severity: str


def make_error(code: str, msg: str, path: str) -> ValidationIssue:
    """Construct an error-level :class:`ValidationIssue`."""

    return ValidationIssue(code=code, msg=msg, path=path, severity=SEVERITY_ERROR)


def make_warning(code: str, msg: str, path: str) -> ValidationIssue:
    """Construct a warning-level :class:`ValidationIssue`."""

    return ValidationIssue(code=code, msg=msg, path=path, severity=SEVERITY_WARN)


class SudokuError(Exception):
    """Base class for every error raised by the solver."""


class InputFormatError(SudokuError, ValueError):
    """Raised when the textual grid cannot be turned into 81 cell values."""

    def __init__(self, issue: ValidationIssue) -> None:
        self.issue = issue
        super().__init__(f"{issue.code}: {issue.msg} ({issue.path})")


class Contradiction(SudokuError):
    """Some unfilled cell has no legal digit left.

    Recoverable: the transaction that hit it is marked invalid and the search
    moves on to the next candidate.
    """

    def __init__(self, cell: int, reason: str = "no candidates left") -> None:
        self.cell = cell
        self.reason = reason
        super().__init__(f"contradiction at cell {cell}: {reason}")


class InvariantViolation(SudokuError, RuntimeError):
    """Programming defect, e.g. assigning an already filled cell.

    Never absorbed by the engine.
    """


__all__: List[str] = [
    "SEVERITY_ERROR",
    "SEVERITY_WARN",
    "Contradiction",
    "InputFormatError",
    "InvariantViolation",
    "SudokuError",
    "ValidationIssue",
    "make_error",
    "make_warning",
]
