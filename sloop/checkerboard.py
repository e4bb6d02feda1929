"""
Checkerboard Tables
===================
Static partition of the 36 cells into two parity classes.
White cells have (row + col) even, black cells odd. The tables are built
once at import time and never mutated.
"""

from typing import Tuple

from sloop.grid import CELL_COUNT, GRID_SIZE, check_cell_index


def _gen_checkerboard(is_white: bool) -> Tuple[int, ...]:
    parity = 0 if is_white else 1
    return tuple(
        i for i in range(CELL_COUNT)
        if sum(divmod(i, GRID_SIZE)) % 2 == parity
    )


def _gen_checkerboard_lookup() -> int:
    lookup = 0
    for cell_index in _gen_checkerboard(True):
        lookup |= 1 << cell_index
    return lookup


CHECKERBOARD_WHITE = _gen_checkerboard(True)
CHECKERBOARD_BLACK = _gen_checkerboard(False)
CHECKERBOARD_LOOKUP = _gen_checkerboard_lookup()


def is_white(cell_index: int) -> bool:
    return (CHECKERBOARD_LOOKUP >> check_cell_index(cell_index)) & 1 == 1


def opposite_checkerboard(cell_index: int) -> Tuple[int, ...]:
    """Cells of the colour class opposite to *cell_index*'s own class."""
    return CHECKERBOARD_BLACK if is_white(cell_index) else CHECKERBOARD_WHITE


def color_counts(grid: int) -> Tuple[int, int]:
    """(white, black) clue counts of a grid."""
    white = bin(grid & CHECKERBOARD_LOOKUP).count("1")
    black = bin(grid & ~CHECKERBOARD_LOOKUP).count("1")
    return white, black
