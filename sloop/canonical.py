"""
Grid Canonicalizer
==================
Collapses the 8 symmetric images of a grid (4 rotations, each optionally
mirrored) onto one representative: the numerically smallest mask.

Rotation maps (row, col) -> (col, 5 - row).
Mirroring maps (row, col) -> (5 - row, col).
"""

from typing import List

from sloop.grid import CELL_COUNT, GRID_SIZE

_LAST = GRID_SIZE - 1


def _remap(grid: int, target) -> int:
    out = 0
    cell_index = 0
    while grid:
        if grid & 1:
            out |= 1 << target[cell_index]
        grid >>= 1
        cell_index += 1
    return out


def _build_rotation_table():
    table = []
    for cell_index in range(CELL_COUNT):
        row, col = divmod(cell_index, GRID_SIZE)
        table.append(col * GRID_SIZE + (_LAST - row))
    return tuple(table)


def _build_flip_table():
    table = []
    for cell_index in range(CELL_COUNT):
        row, col = divmod(cell_index, GRID_SIZE)
        table.append((_LAST - row) * GRID_SIZE + col)
    return tuple(table)


_ROTATE = _build_rotation_table()
_FLIP = _build_flip_table()


def rotate_grid(grid: int) -> int:
    """Rotate a grid by 90 degrees."""
    return _remap(grid, _ROTATE)


def flip_grid(grid: int) -> int:
    """Mirror a grid top-to-bottom."""
    return _remap(grid, _FLIP)


def symmetric_images(grid: int) -> List[int]:
    """
    All 8 images of *grid* under the symmetries of the square.

    The identity comes first, followed by its three rotations, then the
    mirror image and its three rotations. Symmetric grids repeat images.
    """
    images = []
    for base in (grid, flip_grid(grid)):
        image = base
        for _ in range(4):
            images.append(image)
            image = rotate_grid(image)
    return images


def canonicalize(grid: int) -> int:
    """Smallest mask among the 8 symmetric images of *grid*."""
    return min(symmetric_images(grid))
