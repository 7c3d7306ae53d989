"""Command line entry point: solve one puzzle file."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List

from contracts.errors import InputFormatError
from contracts.schema_validator import validate_payload
from project_config import get_section
from solver.event_log import DEFAULT_MAX_BYTES, TraceLog
from solver.facade import SolveStatus, SudokuSolver
from solver.puzzle_io import format_grid, read_grid
from solver.settings import SolverSettings, resolve_settings
from solver.solver_port import SolveReport
from solver.trace import TRACE_LEVELS, TraceRecorder

_LOGGER = logging.getLogger(__name__)


def _configure_logging(settings: SolverSettings) -> None:
    logging.basicConfig(
        level=settings.log_level_value,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _build_recorder(settings: SolverSettings, *, explicit_level: bool = False) -> TraceRecorder | None:
    """Return the recorder for ``settings``, or ``None`` when nothing is traced.

    A trace log without a configured level records at ``branch`` level unless
    the level was given on the command line.
    """

    sink = None
    if settings.trace_log_dir:
        max_bytes = int(get_section("event_log.max_bytes", DEFAULT_MAX_BYTES))
        sink = TraceLog(settings.trace_log_dir, max_bytes=max_bytes)
    trace_level = settings.trace_level
    if sink is not None and trace_level == "none" and not explicit_level:
        trace_level = "branch"
    if trace_level == "none":
        return None
    return TraceRecorder(trace_level=trace_level, sink=sink)


def _export_pdf(solver: SudokuSolver, path: str) -> None:
    from solver.pdf_export import export_pdf

    out = export_pdf(solver.grid, path, givens=solver.givens, title=solver.status.message)
    _LOGGER.info("PDF written to %s", out)


def cmd_solve(args: argparse.Namespace) -> int:
    settings = resolve_settings(
        overrides={
            "trace_level": args.trace,
            "trace_log_dir": args.trace_log,
            "log_level": "DEBUG" if args.verbose else None,
        }
    )
    _configure_logging(settings)

    try:
        parsed = read_grid(args.path)
    except OSError as exc:
        print(f" Cannot read {args.path}: {exc.strerror or exc}", file=sys.stderr)
        return 1
    except InputFormatError as exc:
        print(f" Input puzzle failed sanity checks: {exc}", file=sys.stderr)
        return 1

    recorder = _build_recorder(settings, explicit_level=args.trace is not None)
    solver = SudokuSolver(parsed.cells, trace=recorder)
    status = solver.solve()

    if args.json:
        payload = SolveReport.from_solver(solver).to_payload()
        validate_payload(payload, "SolveReport")
        print(json.dumps(payload, indent=2, sort_keys=True))
    else:
        print(f" {status.message}", file=sys.stderr)
        if status is not SolveStatus.INVALID:
            print(format_grid(solver.grid, blank=settings.blank))

    if args.pdf:
        _export_pdf(solver, args.pdf)
    return 0 if status is SolveStatus.SOLVED else 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Solve a 9x9 Sudoku puzzle file")
    parser.add_argument("path", help="Puzzle file: 81 tokens, '1'-'9' for givens and '.' for blanks")
    parser.add_argument("--json", action="store_true", help="Print the solve report as JSON")
    parser.add_argument(
        "--trace",
        choices=TRACE_LEVELS,
        default=None,
        help="Trace level for solver events (default: from configuration)",
    )
    parser.add_argument(
        "--trace-log",
        default=None,
        metavar="DIR",
        help="Append trace events as JSONL files under DIR",
    )
    parser.add_argument("--pdf", default=None, metavar="PATH", help="Also export the grid as a PDF")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.set_defaults(func=cmd_solve)
    return parser


def main(argv: List[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
