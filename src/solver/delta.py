"""Placement records kept in a transaction's history.

Every digit written after the givens is either forced by propagation
(``FORCE``) or chosen by the search (``GUESS``).  The history of a solved
transaction therefore replays the whole solve in order.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Tuple

from contracts.errors import InvariantViolation

from .grid_state import CELL_COUNT, coords


class DeltaOp(str, Enum):
    """How a digit came to be placed."""

    FORCE = "FORCE"
    GUESS = "GUESS"

    @classmethod
    def from_value(cls, value: str) -> "DeltaOp":
        try:
            return cls(value)
        except ValueError as exc:
            raise InvariantViolation(f"Unsupported delta op: {value!r}") from exc


@dataclass(frozen=True, slots=True)
class Delta:
    """Single placement: ``digit`` written into flat cell ``cell``."""

    op: DeltaOp
    cell: int
    digit: int

    def __post_init__(self) -> None:
        if not isinstance(self.op, DeltaOp):
            object.__setattr__(self, "op", DeltaOp.from_value(str(self.op)))
        if not 0 <= int(self.cell) < CELL_COUNT:
            raise InvariantViolation(f"cell must be in [0, 80], got {self.cell!r}")
        if not 1 <= int(self.digit) <= 9:
            raise InvariantViolation(f"digit must be in [1, 9], got {self.digit!r}")

    def to_payload(self) -> dict:
        row, col = coords(self.cell)
        return {
            "op": self.op.value,
            "cell": int(self.cell),
            "row": row,
            "col": col,
            "digit": int(self.digit),
        }


def count_ops(deltas: Iterable[Delta]) -> Tuple[int, int]:
    """Return ``(forced, guessed)`` placement counts."""

    forced = guessed = 0
    for delta in deltas:
        if delta.op is DeltaOp.FORCE:
            forced += 1
        else:
            guessed += 1
    return forced, guessed


__all__ = ["Delta", "DeltaOp", "count_ops"]
