from __future__ import annotations

import pytest

from contracts.errors import Contradiction
from solver.bitmask import FULL_MASK, digit_to_mask, popcount
from solver.delta import DeltaOp
from solver.grid_state import BOX_OF, COL_OF, EMPTY, ROW_OF, GridState, cell_index
from solver.phases.propagate import find_singles, propagate_singles, recompute_candidates, set_cell
from solver.trace import TraceKind, TraceRecorder

SOLVED = (
    "123456789"
    "456789123"
    "789123456"
    "214365897"
    "365897214"
    "897214365"
    "531642978"
    "642978531"
    "978531642"
)
CLASSIC = (
    "53..7...."
    "6..195..."
    ".98....6."
    "8...6...3"
    "4..8.3..1"
    "7...2...6"
    ".6....28."
    "...419..5"
    "....8..79"
)
CLASSIC_SOLUTION = (
    "534678912"
    "672195348"
    "198342567"
    "859761423"
    "426853791"
    "713924856"
    "961537284"
    "287419635"
    "345286179"
)


def _cells(text: str) -> list[int]:
    return [EMPTY if ch == "." else int(ch) for ch in text]


def _state_from(text: str) -> GridState:
    state = GridState()
    for index, value in enumerate(_cells(text)):
        if value != EMPTY:
            state.place(index, value)
    return state


def _assert_candidates_exact(state: GridState) -> None:
    rows = [0] * 9
    cols = [0] * 9
    boxes = [0] * 9
    for index, value in enumerate(state.cells):
        if value != EMPTY:
            mask = digit_to_mask(value)
            rows[ROW_OF[index]] |= mask
            cols[COL_OF[index]] |= mask
            boxes[BOX_OF[index]] |= mask
    assert rows == state.rows
    assert cols == state.cols
    assert boxes == state.boxes
    for index, value in enumerate(state.cells):
        if value != EMPTY:
            assert state.candidates[index] == 0
            continue
        expected = FULL_MASK & ~(rows[ROW_OF[index]] | cols[COL_OF[index]] | boxes[BOX_OF[index]])
        assert state.candidates[index] == expected
        assert state.counts[index] == popcount(expected)


def test_recompute_candidates_matches_unit_masks() -> None:
    state = _state_from(CLASSIC)
    solved = recompute_candidates(state)

    assert solved is False
    _assert_candidates_exact(state)
    # (0, 2): row has 5,3,7; column has 8; box has 5,3,6,9,8
    assert state.candidates[cell_index(0, 2)] == digit_to_mask(1) | digit_to_mask(2) | digit_to_mask(4)


def test_recompute_candidates_resets_stale_masks() -> None:
    state = _state_from(CLASSIC)
    state.candidates[cell_index(0, 2)] = FULL_MASK
    state.counts[cell_index(0, 2)] = 9
    recompute_candidates(state)
    assert state.counts[cell_index(0, 2)] == 3


def test_recompute_candidates_reports_solved_grid() -> None:
    assert recompute_candidates(_state_from(SOLVED)) is True


def test_recompute_candidates_raises_on_empty_cell() -> None:
    state = GridState()
    for col in range(8):
        state.place(cell_index(0, col), col + 1)
    state.place(cell_index(1, 8), 9)

    with pytest.raises(Contradiction) as info:
        recompute_candidates(state)
    assert info.value.cell == cell_index(0, 8)


def test_set_cell_rescans_whole_grid() -> None:
    state = _state_from(CLASSIC)
    recompute_candidates(state)
    target = cell_index(0, 2)

    set_cell(state, target, 4)

    assert state.cells[target] == 4
    assert state.counts[target] == 0
    _assert_candidates_exact(state)
    assert not state.candidates[cell_index(0, 3)] & digit_to_mask(4)
    assert not state.candidates[cell_index(8, 2)] & digit_to_mask(4)


def test_set_cell_propagates_contradiction() -> None:
    state = GridState()
    for col in range(8):
        state.place(cell_index(0, col), col + 1)
    recompute_candidates(state)
    assert state.candidates[cell_index(0, 8)] == digit_to_mask(9)

    with pytest.raises(Contradiction):
        set_cell(state, cell_index(1, 8), 9)


def test_propagate_singles_applies_row_major_fifo() -> None:
    puzzle = "." + SOLVED[1:80] + "."
    state = _state_from(puzzle)
    recompute_candidates(state)
    assert find_singles(state) == [0, 80]

    deltas = propagate_singles(state)

    assert [(d.op, d.cell, d.digit) for d in deltas] == [(DeltaOp.FORCE, 0, 1), (DeltaOp.FORCE, 80, 2)]
    assert "".join(str(v) for v in state.cells) == SOLVED
    assert find_singles(state) == []


def test_propagate_singles_forces_only_solution_digits() -> None:
    state = _state_from(CLASSIC)
    recompute_candidates(state)
    recorder = TraceRecorder(trace_level="full")

    deltas = propagate_singles(state, hook=recorder, depth=0)

    assert deltas
    for delta in deltas:
        assert int(CLASSIC_SOLUTION[delta.cell]) == delta.digit
    assert [event.cell for event in recorder.snapshot()] == [delta.cell for delta in deltas]
    assert all(event.kind is TraceKind.PLACE for event in recorder.snapshot())
    assert find_singles(state) == []
    _assert_candidates_exact(state)
