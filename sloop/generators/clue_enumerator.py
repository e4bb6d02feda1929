"""
Clue Enumerator
===============
Depth-first generation of candidate sloop grids.

Rules every generated grid follows:
- the first clue lies in the top-left 3x3 block,
- clues come in pairs, one on each checkerboard colour,
- at most `max_clues` clues in total.

Work is an explicit stack of (grid, next_clue_index) entries. The index is
the scan boundary for further clues, so the same placement order is never
derived twice from one parent. Each popped grid is canonicalized and only
the first grid of its symmetry class is handed out.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional, Set, Tuple

from sloop.canonical import canonicalize
from sloop.checkerboard import opposite_checkerboard
from sloop.config import DEFAULT_MAX_CLUES, INITIAL_CLUE_LOCATIONS
from sloop.grid import CELL_COUNT, cell_bit, check_cell_index, clue_count, is_clued
from sloop.logging_utils import get_logger

logger = get_logger(__name__)

StackEntry = Tuple[int, int]


def place_clue(grid_stack: List[StackEntry], base_grid: int, clue_index: int) -> None:
    """
    Push every grid made of *base_grid* plus a clue at *clue_index* and one
    counterpart clue on the opposite colour at or after it.
    """
    if is_clued(base_grid, clue_index):
        return

    next_clue_index = clue_index + 1
    while next_clue_index < CELL_COUNT and is_clued(base_grid, next_clue_index):
        next_clue_index += 1

    new_grid = base_grid | cell_bit(clue_index)

    for opposite_clue_index in opposite_checkerboard(clue_index):
        if opposite_clue_index < clue_index:
            continue
        if is_clued(new_grid, opposite_clue_index):
            continue
        grid_stack.append((new_grid | cell_bit(opposite_clue_index), next_clue_index))


def check_max_clues(max_clues: int) -> int:
    """Return *max_clues* unchanged, or raise ValueError unless it is an even number in 2..36."""
    if not isinstance(max_clues, int) or max_clues < 2 or max_clues > CELL_COUNT or max_clues % 2:
        raise ValueError(f"max_clues must be an even number in 2..{CELL_COUNT}, got {max_clues!r}")
    return max_clues


class ClueEnumerator:
    """
    Streams canonical, never-before-seen candidate grids.

    The dedup set is owned by the caller when one is passed in, so several
    runs can share it (or a test can inspect it).
    """

    def __init__(
        self,
        max_clues: int = DEFAULT_MAX_CLUES,
        initial_clue_locations: Iterable[int] = INITIAL_CLUE_LOCATIONS,
        seen_puzzles: Optional[Set[int]] = None,
    ):
        self.max_clues = check_max_clues(max_clues)
        self.initial_clue_locations = tuple(check_cell_index(i) for i in initial_clue_locations)
        self.seen_puzzles: Set[int] = seen_puzzles if seen_puzzles is not None else set()
        self.duplicates_skipped = 0
        self.candidates_generated = 0

    def _seed_stack(self) -> List[StackEntry]:
        grid_stack: List[StackEntry] = []
        for initial_clue_location in self.initial_clue_locations:
            place_clue(grid_stack, 0, initial_clue_location)
        return grid_stack

    def candidates(self) -> Iterator[int]:
        """
        Yield canonical grids in search order.

        Children of a grid are pushed after the consumer has handled it, so
        evaluation always precedes expansion.
        """
        grid_stack = self._seed_stack()

        while grid_stack:
            grid, next_clue_index = grid_stack.pop()
            grid = canonicalize(grid)
            if grid in self.seen_puzzles:
                self.duplicates_skipped += 1
                continue
            self.seen_puzzles.add(grid)
            self.candidates_generated += 1

            yield grid

            if next_clue_index >= CELL_COUNT or clue_count(grid) >= self.max_clues:
                continue

            for clue_index in range(next_clue_index, CELL_COUNT):
                place_clue(grid_stack, grid, clue_index)

        logger.debug(
            "Enumeration exhausted: %d candidates, %d duplicates skipped",
            self.candidates_generated, self.duplicates_skipped,
        )
