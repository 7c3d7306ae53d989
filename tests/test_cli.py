from __future__ import annotations

import json
from pathlib import Path

import pytest

from tools.cli import solve as solve_cli
from tools.reports import trace_report

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
# Two independent rectangles: the search has to guess twice.
TWO_RECTANGLES = "".join(
    "." if index in (0, 1, 27, 28, 15, 16, 42, 43) else ch for index, ch in enumerate(SOLVED)
)


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("SUDOKU_TRACE_LEVEL", "SUDOKU_LOG_LEVEL", "SUDOKU_TRACE_LOG_DIR", "SUDOKU_BLANK"):
        monkeypatch.delenv(key, raising=False)


def _write(tmp_path: Path, text: str, name: str = "puzzle.txt") -> Path:
    path = tmp_path / name
    rows = [text[i:i + 9] for i in range(0, 81, 9)]
    path.write_text("\n".join(" ".join(row) for row in rows) + "\n", encoding="utf-8")
    return path


def test_solves_file_and_prints_grid(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, TWO_RECTANGLES)
    assert solve_cli.main([str(path)]) == 0

    captured = capsys.readouterr()
    assert captured.out.splitlines()[0] == "1 2 3 4 5 6 7 8 9"
    assert len(captured.out.splitlines()) == 9
    assert "Solved." in captured.err


def test_argument_errors_exit_with_usage(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as info:
        solve_cli.main([])
    assert info.value.code == 2
    with pytest.raises(SystemExit) as info:
        solve_cli.main(["a.txt", "b.txt"])
    assert info.value.code == 2


def test_missing_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert solve_cli.main([str(tmp_path / "nope.txt")]) == 1
    assert "Cannot read" in capsys.readouterr().err


def test_malformed_input(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "bad.txt"
    path.write_text("1 2 x" + " ." * 78, encoding="utf-8")
    assert solve_cli.main([str(path)]) == 1
    captured = capsys.readouterr()
    assert "Input puzzle failed sanity checks" in captured.err
    assert captured.out == ""


def test_invalid_givens(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, "11" + "." * 79)
    assert solve_cli.main([str(path)]) == 1
    captured = capsys.readouterr()
    assert "No solution possible." in captured.err
    assert captured.out == ""


def test_exhausted_puzzle(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, "......789" "1........" "...1....." + "." * 54)
    assert solve_cli.main([str(path)]) == 1
    captured = capsys.readouterr()
    assert "No solution found." in captured.err
    assert captured.out.splitlines()[0] == ". . . . . . 7 8 9"


def test_json_report(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, TWO_RECTANGLES)
    assert solve_cli.main([str(path), "--json"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["status"] == "solved"
    assert payload["grid"] == SOLVED
    assert payload["stats"]["max_depth"] == 2
    assert payload["stats"]["guessed_on_path"] == 2
    assert [entry["op"] for entry in payload["history"]].count("GUESS") == 2


def test_trace_log_feeds_trace_report(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, TWO_RECTANGLES)
    log_dir = tmp_path / "logs"
    assert solve_cli.main([str(path), "--trace-log", str(log_dir)]) == 0

    files = sorted(log_dir.glob("**/*.jsonl"))
    assert files
    summary = trace_report.aggregate(files)
    assert summary["rejected"] == 0
    assert summary["kinds"]["BRANCH"] == 2
    assert summary["kinds"]["SOLVED"] == 1
    assert "PLACE" not in summary["kinds"]
    assert summary["max_depth"] == 2
    assert summary["top_branch_cells"] == [(0, 1), (15, 1)]

    capsys.readouterr()
    assert trace_report.main([str(log_dir)]) == 0
    assert json.loads(capsys.readouterr().out)["total_events"] == summary["total_events"]


def test_explicit_trace_none_disables_trace_log(tmp_path: Path) -> None:
    path = _write(tmp_path, TWO_RECTANGLES)
    log_dir = tmp_path / "logs"
    assert solve_cli.main([str(path), "--trace", "none", "--trace-log", str(log_dir)]) == 0
    assert not list(log_dir.glob("**/*.jsonl"))


def test_explicit_trace_level_is_kept_for_trace_log(tmp_path: Path) -> None:
    path = _write(tmp_path, TWO_RECTANGLES)
    log_dir = tmp_path / "logs"
    assert solve_cli.main([str(path), "--trace", "full", "--trace-log", str(log_dir)]) == 0
    summary = trace_report.aggregate(sorted(log_dir.glob("**/*.jsonl")))
    assert summary["kinds"]["PLACE"] > 0


def test_non_utf8_input(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "bad.txt"
    path.write_bytes(b"\xff" + b" ." * 80)
    assert solve_cli.main([str(path)]) == 1
    captured = capsys.readouterr()
    assert "bad-encoding" in captured.err
    assert captured.out == ""


def test_trace_report_without_logs(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        trace_report.main([str(tmp_path)])


def test_pdf_export(tmp_path: Path) -> None:
    path = _write(tmp_path, TWO_RECTANGLES)
    pdf_path = tmp_path / "out.pdf"
    assert solve_cli.main([str(path), "--pdf", str(pdf_path)]) == 0
    assert pdf_path.read_bytes().startswith(b"%PDF")
