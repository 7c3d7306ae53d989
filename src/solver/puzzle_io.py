"""Reading and rendering 9x9 grids in the plain-text puzzle format.

The input format is a row-major stream of single-character tokens, ``1``-``9``
for givens and ``.`` for blanks.  Whitespace between tokens is optional, so
both ``5 3 . . 7 . . . .`` and ``53..7....`` describe the same row.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Sequence, Tuple

from contracts.errors import InputFormatError, ValidationIssue, make_error, make_warning

from .grid_state import BOX_SIZE, CELL_COUNT, EMPTY, GRID_SIZE, coords

_LOGGER = logging.getLogger(__name__)

BLANK = "."
_DIGIT_CHARS = frozenset("123456789")


@dataclass(frozen=True)
class ParsedGrid:
    cells: Tuple[int, ...]
    issues: Tuple[ValidationIssue, ...] = ()


def tokenize(text: str) -> Iterator[str]:
    for char in text:
        if not char.isspace():
            yield char


def parse_grid(text: str) -> ParsedGrid:
    """Turn puzzle text into 81 cell values (``0`` for blanks).

    Tokens after the 81st are ignored and reported as a warning.  A token
    outside ``.``/``1``-``9`` or fewer than 81 tokens raises
    :class:`InputFormatError`.
    """

    cells: List[int] = []
    extra = 0
    for token in tokenize(text):
        if len(cells) == CELL_COUNT:
            extra += 1
            continue
        if token == BLANK:
            cells.append(EMPTY)
        elif token in _DIGIT_CHARS:
            cells.append(int(token))
        else:
            row, col = coords(len(cells))
            raise InputFormatError(
                make_error(
                    "bad-token",
                    f"Incorrect input value {token!r} found; cell values must be '.' or 1-{GRID_SIZE}",
                    f"r{row}c{col}",
                )
            )

    if len(cells) < CELL_COUNT:
        raise InputFormatError(
            make_error("short-grid", f"expected {CELL_COUNT} cells, found {len(cells)}", "grid")
        )

    issues: List[ValidationIssue] = []
    if extra:
        issue = make_warning(
            "extra-tokens",
            f"Ignoring {extra} token(s) after the first {CELL_COUNT} cells",
            "grid",
        )
        _LOGGER.warning(issue.msg)
        issues.append(issue)
    return ParsedGrid(cells=tuple(cells), issues=tuple(issues))


def read_grid(path: str | Path) -> ParsedGrid:
    """Read and parse a puzzle file.

    ``OSError`` propagates to the caller; bytes that are not UTF-8 raise
    :class:`InputFormatError`.
    """

    raw = Path(path).read_bytes()
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InputFormatError(
            make_error(
                "bad-encoding",
                f"Incorrect input byte 0x{raw[exc.start]:02x} found; input must be UTF-8 text",
                f"byte{exc.start}",
            )
        ) from exc
    return parse_grid(text)


def format_grid(cells: Sequence[int], *, blank: str = BLANK) -> str:
    """Render 9 space-separated rows, ``blank`` for unfilled cells."""

    lines = []
    for row in range(GRID_SIZE):
        values = cells[row * GRID_SIZE:(row + 1) * GRID_SIZE]
        lines.append(" ".join(str(value) if value != EMPTY else blank for value in values))
    return "\n".join(lines)


def cells_to_string(cells: Sequence[int]) -> str:
    return "".join(str(value) if value != EMPTY else BLANK for value in cells)


def is_complete_solution(cells: Sequence[int]) -> bool:
    """``True`` when every row, column and box holds 1..9 exactly once."""

    if len(cells) != CELL_COUNT:
        return False
    need = list(range(1, GRID_SIZE + 1))
    grid = [list(cells[r * GRID_SIZE:(r + 1) * GRID_SIZE]) for r in range(GRID_SIZE)]
    rows = all(sorted(row) == need for row in grid)
    cols = all(sorted(col) == need for col in zip(*grid))

    def box(br: int, bc: int) -> List[int]:
        return [grid[r][c] for r in range(br, br + BOX_SIZE) for c in range(bc, bc + BOX_SIZE)]

    boxes = all(sorted(box(r, c)) == need for r in (0, 3, 6) for c in (0, 3, 6))
    return rows and cols and boxes


__all__ = [
    "BLANK",
    "ParsedGrid",
    "cells_to_string",
    "format_grid",
    "is_complete_solution",
    "parse_grid",
    "read_grid",
    "tokenize",
]
