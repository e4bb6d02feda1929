import unittest
import random
import sys
import os

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from sloop.canonical import canonicalize, flip_grid, rotate_grid, symmetric_images
from sloop.grid import clue_count, grid_from_clues


def _random_grids(count, seed=7):
    rng = random.Random(seed)
    grids = []
    for _ in range(count):
        clues = rng.sample(range(36), rng.randint(0, 10))
        grids.append(grid_from_clues(clues))
    return grids


class TestSymmetries(unittest.TestCase):

    def test_rotate_maps_row_col_to_col_5_minus_row(self):
        # (0, 0) -> (0, 5); (0, 5) -> (5, 5); (2, 3) -> (3, 3)
        self.assertEqual(rotate_grid(1 << 0), 1 << 5)
        self.assertEqual(rotate_grid(1 << 5), 1 << 35)
        self.assertEqual(rotate_grid(1 << 15), 1 << 21)

    def test_flip_maps_row_to_5_minus_row(self):
        self.assertEqual(flip_grid(1 << 0), 1 << 30)
        self.assertEqual(flip_grid(1 << 14), 1 << 20)

    def test_four_rotations_are_identity(self):
        for grid in _random_grids(50):
            image = grid
            for _ in range(4):
                image = rotate_grid(image)
            self.assertEqual(image, grid)

    def test_flip_is_an_involution(self):
        for grid in _random_grids(50):
            self.assertEqual(flip_grid(flip_grid(grid)), grid)

    def test_symmetries_preserve_clue_count(self):
        for grid in _random_grids(30):
            for image in symmetric_images(grid):
                self.assertEqual(clue_count(image), clue_count(grid))

    def test_eight_images_identity_first(self):
        grid = grid_from_clues([0, 1, 8])
        images = symmetric_images(grid)
        self.assertEqual(len(images), 8)
        self.assertEqual(images[0], grid)
        # An asymmetric grid has 8 distinct images
        self.assertEqual(len(set(images)), 8)


class TestCanonicalize(unittest.TestCase):

    def test_idempotent(self):
        for grid in _random_grids(100):
            canonical = canonicalize(grid)
            self.assertEqual(canonicalize(canonical), canonical)

    def test_invariant_over_all_images(self):
        for grid in _random_grids(60):
            canonical = canonicalize(grid)
            for image in symmetric_images(grid):
                self.assertEqual(canonicalize(image), canonical)

    def test_never_above_the_grid(self):
        for grid in _random_grids(100):
            self.assertLessEqual(canonicalize(grid), grid)

    def test_empty_and_full_grids(self):
        self.assertEqual(canonicalize(0), 0)
        full = grid_from_clues(range(36))
        self.assertEqual(canonicalize(full), full)

    def test_single_clue_collapses_to_corner_or_edge(self):
        # Every corner is the image of cell 0
        for corner in (0, 5, 30, 35):
            self.assertEqual(canonicalize(1 << corner), 1 << 0)


if __name__ == '__main__':
    unittest.main()
