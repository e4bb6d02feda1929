"""
Grid Helpers
============
A sloop grid is a plain int used as a 36-bit mask over the 6x6 board.
Cells are indexed 0..35 in row-major order; a set bit marks a clued
(blocked) cell, a clear bit an open cell the loop has to visit.
"""

from __future__ import annotations

from typing import Iterable, List

GRID_SIZE = 6
CELL_COUNT = GRID_SIZE * GRID_SIZE
FULL_GRID = (1 << CELL_COUNT) - 1


def cell_bit(cell_index: int) -> int:
    return 1 << cell_index


def is_clued(grid: int, cell_index: int) -> bool:
    return (grid >> cell_index) & 1 == 1


def clue_count(grid: int) -> int:
    return bin(grid).count("1")


def check_cell_index(cell_index: int) -> int:
    """Return *cell_index* unchanged, or raise ValueError when it is off the board."""
    if not isinstance(cell_index, int) or not 0 <= cell_index < CELL_COUNT:
        raise ValueError(f"cell index must be in 0..{CELL_COUNT - 1}, got {cell_index!r}")
    return cell_index


def grid_from_clues(clue_cells: Iterable[int]) -> int:
    grid = 0
    for cell_index in clue_cells:
        grid |= cell_bit(check_cell_index(cell_index))
    return grid


def clue_indices(grid: int) -> List[int]:
    return [i for i in range(CELL_COUNT) if is_clued(grid, i)]


def grid_string(grid: int) -> str:
    """36 characters of '0'/'1', row-major, '1' for a clued cell."""
    return "".join("1" if is_clued(grid, i) else "0" for i in range(CELL_COUNT))


def parse_grid_string(text: str) -> int:
    """
    Inverse of :func:`grid_string`.

    Surrounding whitespace is ignored. Raises ValueError when the text is
    not exactly 36 characters of '0'/'1'.
    """
    text = text.strip()
    if len(text) != CELL_COUNT:
        raise ValueError(f"grid string must be {CELL_COUNT} characters, got {len(text)}")
    grid = 0
    for cell_index, ch in enumerate(text):
        if ch == "1":
            grid |= cell_bit(cell_index)
        elif ch != "0":
            raise ValueError(f"invalid grid character {ch!r} at position {cell_index}")
    return grid


def format_grid(grid: int) -> str:
    """Six text rows, '#' for a clue and '.' for an open cell."""
    rows = []
    for row in range(GRID_SIZE):
        rows.append("".join(
            "#" if is_clued(grid, row * GRID_SIZE + col) else "."
            for col in range(GRID_SIZE)
        ))
    return "\n".join(rows)
