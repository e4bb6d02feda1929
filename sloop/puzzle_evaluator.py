"""
Puzzle Evaluator
================
Classifies candidate grids and drives a full enumeration run.

A grid is a valid puzzle when its loop has exactly one solution. The solver
runs with cap 2, which is all it takes to tell "none", "unique" and "many"
apart.

Accepted grids go to a plain text file, one 36-character '0'/'1' line per
puzzle, flushed after every write so an interrupted run keeps everything
accepted so far.
"""

from __future__ import annotations

import itertools
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Union

from sloop.canonical import canonicalize
from sloop.config import DEFAULT_MAX_CLUES, DEFAULT_PROGRESS_INTERVAL, INITIAL_CLUE_LOCATIONS
from sloop.generators.clue_enumerator import ClueEnumerator
from sloop.grid import clue_count, grid_string, parse_grid_string
from sloop.logging_utils import get_logger
from sloop.solvers.loop_solver import SloopEdges, SolverMetrics

logger = get_logger(__name__)

PathLike = Union[str, Path]


class PuzzleEvaluator:
    """Runs the loop solver on candidate grids."""

    SOLUTION_CAP = 2

    def __init__(self, metrics: Optional[SolverMetrics] = None):
        self.metrics = metrics if metrics is not None else SolverMetrics()

    def evaluate(self, grid: int) -> int:
        """Capped solution count of *grid*."""
        return SloopEdges(grid).solution_count(self.SOLUTION_CAP, self.metrics)

    def is_valid_puzzle(self, grid: int) -> bool:
        return self.evaluate(grid) == 1


class PuzzleWriter:
    """
    Line-per-puzzle output file, opened once for a whole run.

    I/O errors are not caught: a run whose output cannot be written is
    stopped rather than left with a silently truncated file.
    """

    def __init__(self, path: PathLike, append: bool = False):
        self.path = Path(path)
        self.append = append
        self.puzzles_written = 0
        self._file = None

    def open(self) -> "PuzzleWriter":
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self.path, "a" if self.append else "w", encoding="utf-8")
        return self

    def write(self, grid: int) -> None:
        if self._file is None:
            raise RuntimeError("PuzzleWriter.write called before open()")
        self._file.write(grid_string(grid) + "\n")
        self._file.flush()
        self.puzzles_written += 1

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> "PuzzleWriter":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


@dataclass
class EnumerationStats:
    """Counters for one enumeration run."""
    candidates_evaluated: int = 0
    puzzles_found: int = 0
    duplicates_skipped: int = 0
    elapsed_seconds: float = 0.0
    solver_states_explored: int = 0
    puzzles_by_clue_count: Dict[int, int] = field(default_factory=dict)

    def summary(self) -> str:
        return f"Number of unique 6x6 grids: {self.puzzles_found} / {self.candidates_evaluated}"


def run_enumeration(
    output_path: PathLike,
    *,
    max_clues: int = DEFAULT_MAX_CLUES,
    progress_interval: int = DEFAULT_PROGRESS_INTERVAL,
    limit: Optional[int] = None,
    initial_clue_locations: Iterable[int] = INITIAL_CLUE_LOCATIONS,
    seen_puzzles: Optional[Set[int]] = None,
    append: bool = False,
) -> EnumerationStats:
    """
    Enumerate candidate grids, keep the uniquely solvable ones.

    *limit* stops the run after that many evaluated candidates.
    """
    if progress_interval < 1:
        raise ValueError(f"progress_interval must be positive, got {progress_interval}")
    if limit is not None and limit < 0:
        raise ValueError(f"limit must not be negative, got {limit}")

    enumerator = ClueEnumerator(
        max_clues=max_clues,
        initial_clue_locations=initial_clue_locations,
        seen_puzzles=seen_puzzles,
    )
    evaluator = PuzzleEvaluator()
    stats = EnumerationStats()
    start_time = time.perf_counter()

    logger.info("Enumerating sloop grids with up to %d clues into %s", max_clues, output_path)

    candidates = enumerator.candidates()
    if limit is not None:
        candidates = itertools.islice(candidates, limit)

    with PuzzleWriter(output_path, append=append) as writer:
        for grid in candidates:
            stats.candidates_evaluated += 1
            if stats.candidates_evaluated % progress_interval == 0:
                logger.info(
                    "[Progress] Number of unique 6x6 grids: %d / %d",
                    stats.puzzles_found, stats.candidates_evaluated,
                )

            if evaluator.is_valid_puzzle(grid):
                writer.write(grid)
                stats.puzzles_found += 1
                clues = clue_count(grid)
                stats.puzzles_by_clue_count[clues] = stats.puzzles_by_clue_count.get(clues, 0) + 1
                logger.debug("Accepted %s", grid_string(grid))

    if limit is not None and stats.candidates_evaluated >= limit:
        logger.info("Candidate limit %d reached", limit)

    stats.duplicates_skipped = enumerator.duplicates_skipped
    stats.solver_states_explored = evaluator.metrics.states_explored
    stats.elapsed_seconds = time.perf_counter() - start_time
    logger.info(stats.summary())
    return stats


def load_puzzles(path: PathLike) -> List[int]:
    """Read an output file back into grids. Blank lines are skipped."""
    grids = []
    with open(path, "r", encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                grids.append(parse_grid_string(line))
            except ValueError as exc:
                raise ValueError(f"{path}:{line_number}: {exc}") from exc
    return grids


@dataclass
class VerificationReport:
    total: int = 0
    not_unique: List[int] = field(default_factory=list)
    duplicates: List[int] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.not_unique and not self.duplicates


def verify_puzzles(grids: Iterable[int]) -> VerificationReport:
    """
    Re-solve every grid and check no two share a canonical form.
    """
    evaluator = PuzzleEvaluator()
    report = VerificationReport()
    seen_canonical: Set[int] = set()

    for grid in grids:
        report.total += 1
        if evaluator.evaluate(grid) != 1:
            report.not_unique.append(grid)

        canonical = canonicalize(grid)
        if canonical in seen_canonical:
            report.duplicates.append(grid)
        seen_canonical.add(canonical)

    return report
