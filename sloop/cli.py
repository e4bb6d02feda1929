"""
Command line for the sloop puzzle search.

    sloop enumerate --output sloop_puzzles.txt --max-clues 10
    sloop solve 001000000010000000000000010000000000
    sloop verify sloop_puzzles.txt
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from sloop.config import resolve_max_clues, resolve_output_path, resolve_progress_interval
from sloop.generators.clue_enumerator import check_max_clues
from sloop.grid import format_grid, parse_grid_string
from sloop.logging_utils import get_logger, set_verbose
from sloop.puzzle_evaluator import load_puzzles, run_enumeration, verify_puzzles
from sloop.solvers.loop_solver import SloopEdges
from sloop.validators import check_loop_solution

logger = get_logger(__name__)


def _positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {text}")
    return value


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sloop", description="Search 6x6 single-loop puzzles")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    enum_p = sub.add_parser("enumerate", help="Enumerate candidate grids and keep unique puzzles")
    enum_p.add_argument("--output", type=str, default=None,
                        help="Output file (default: $SLOOP_OUTPUT_PATH or sloop_puzzles.txt)")
    enum_p.add_argument("--max-clues", type=_positive_int, default=None,
                        help="Largest clue count explored (even, default 10)")
    enum_p.add_argument("--progress-interval", type=_positive_int, default=None,
                        help="Log progress every N candidates")
    enum_p.add_argument("--limit", type=_positive_int, default=None,
                        help="Stop after N evaluated candidates")
    enum_p.add_argument("--append", action="store_true",
                        help="Append to the output file instead of truncating it")

    solve_p = sub.add_parser("solve", help="Count the loop solutions of one grid")
    solve_p.add_argument("grid", help="36 characters of 0/1, row-major, 1 = clue")
    solve_p.add_argument("--cap", type=_positive_int, default=2, help="Solution cap (default 2)")

    verify_p = sub.add_parser("verify", help="Re-check every puzzle in an output file")
    verify_p.add_argument("path", help="Output file written by 'enumerate'")

    return parser


def _cmd_enumerate(parser, args) -> int:
    try:
        max_clues = check_max_clues(args.max_clues or resolve_max_clues())
    except ValueError as exc:
        parser.error(str(exc))

    stats = run_enumeration(
        args.output or resolve_output_path(),
        max_clues=max_clues,
        progress_interval=args.progress_interval or resolve_progress_interval(),
        limit=args.limit,
        append=args.append,
    )
    print(stats.summary())
    print(f"Duplicates skipped: {stats.duplicates_skipped}")
    print(f"Elapsed: {stats.elapsed_seconds:.2f}s")
    return 0


def _cmd_solve(parser, args) -> int:
    try:
        grid = parse_grid_string(args.grid)
    except ValueError as exc:
        parser.error(str(exc))

    solutions = list(SloopEdges(grid).iter_solutions(args.cap))

    print(format_grid(grid))
    print(f"Solutions (cap {args.cap}): {len(solutions)}")

    if solutions:
        solution = solutions[0]
        valid, reason = check_loop_solution(grid, solution.loop_edges)
        print()
        print(solution.path_to_string(), end="")
        logger.debug("First solution check: %s", reason)
        if not valid:
            logger.error("Solver produced an invalid loop: %s", reason)
            return 1
    return 0


def _cmd_verify(parser, args) -> int:
    try:
        grids = load_puzzles(args.path)
    except ValueError as exc:
        parser.error(str(exc))

    report = verify_puzzles(grids)

    print(f"Puzzles checked: {report.total}")
    print(f"Not uniquely solvable: {len(report.not_unique)}")
    print(f"Duplicate canonical forms: {len(report.duplicates)}")
    for grid in report.not_unique:
        logger.warning("Not unique: %s", format_grid(grid).replace("\n", "/"))
    for grid in report.duplicates:
        logger.warning("Duplicate: %s", format_grid(grid).replace("\n", "/"))
    return 0 if report.ok else 1


_COMMANDS = {
    "enumerate": _cmd_enumerate,
    "solve": _cmd_solve,
    "verify": _cmd_verify,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    set_verbose(args.verbose)

    return _COMMANDS[args.command](parser, args)


if __name__ == "__main__":
    sys.exit(main())
