from __future__ import annotations

from solver.grid_state import EMPTY, GridState, cell_index
from solver.phases.branch import SearchStats, search, select_branch_cell
from solver.trace import TraceKind, TraceRecorder
from solver.transaction import Transaction

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
# Two disjoint rectangles, each with two consistent fillings.
RECTANGLE_CELLS = (
    cell_index(0, 0),
    cell_index(0, 1),
    cell_index(3, 0),
    cell_index(3, 1),
    cell_index(1, 6),
    cell_index(1, 7),
    cell_index(4, 6),
    cell_index(4, 7),
)


def _cells(text: str) -> list[int]:
    return [EMPTY if ch == "." else int(ch) for ch in text]


def _blank(text: str, indices) -> str:
    chars = list(text)
    for index in indices:
        chars[index] = "."
    return "".join(chars)


def test_select_branch_cell_prefers_fewest_candidates() -> None:
    state = GridState()
    state.counts[3] = 4
    state.counts[40] = 2
    state.counts[60] = 3
    assert select_branch_cell(state) == 40


def test_select_branch_cell_breaks_ties_by_index() -> None:
    state = GridState()
    state.counts[70] = 2
    state.counts[12] = 2
    state.counts[50] = 2
    assert select_branch_cell(state) == 12


def test_select_branch_cell_skips_filled_and_empty_cells() -> None:
    state = GridState()
    state.place(0, 5)
    state.counts[0] = 1
    state.counts[9] = 0
    state.counts[20] = 6
    assert select_branch_cell(state) == 20
    assert select_branch_cell(GridState()) is None


def test_search_returns_solved_transaction_itself() -> None:
    txn = Transaction.from_cells(_cells(SOLVED))
    stats = SearchStats()
    assert search(txn, stats) is txn
    assert stats.nodes == 0


def test_search_on_invalid_transaction_finds_nothing() -> None:
    txn = Transaction.from_cells(_cells("11" + "." * 79))
    stats = SearchStats()
    assert search(txn, stats) is None
    assert stats == SearchStats()


def test_search_single_level_tries_lowest_digit_first() -> None:
    root = Transaction.from_cells(_cells(_blank(SOLVED, RECTANGLE_CELLS[:4])))
    assert root.valid and not root.solved
    assert [root.candidate_count(index) for index in RECTANGLE_CELLS[:4]] == [2, 2, 2, 2]

    stats = SearchStats()
    winner = search(root, stats)

    assert winner is not None and winner.solved
    assert "".join(map(str, winner.cells)) == SOLVED
    assert stats.to_payload() == {"nodes": 1, "guesses": 1, "backtracks": 0, "max_depth": 1}
    assert root.cells[0] == EMPTY


def test_search_recurses_into_ambiguous_children() -> None:
    recorder = TraceRecorder(trace_level="branch")
    root = Transaction.from_cells(_cells(_blank(SOLVED, RECTANGLE_CELLS)), trace=recorder)

    stats = SearchStats()
    winner = search(root, stats)

    assert winner is not None
    assert "".join(map(str, winner.cells)) == SOLVED
    assert stats.max_depth == 2
    assert stats.nodes == 2
    assert winner.depth == 2
    branches = [event for event in recorder.snapshot() if event.kind is TraceKind.BRANCH]
    assert [(event.cell, event.digit, event.depth) for event in branches] == [
        (cell_index(0, 0), 1, 1),
        (cell_index(1, 6), 1, 2),
    ]
    assert recorder.snapshot()[-1].kind is TraceKind.SOLVED


def test_search_reports_exhaustion_with_backtracks() -> None:
    # Digit 1 cannot be placed anywhere in row 0.
    puzzle = "......789" "1........" "...1....." + "." * 54
    root = Transaction.from_cells(_cells(puzzle))
    stats = SearchStats()

    assert search(root, stats) is None
    assert stats.nodes > 0
    assert stats.backtracks == stats.nodes
