import unittest
import sys
import os

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from sloop.grid import grid_from_clues
from sloop.solvers.loop_solver import SloopEdge, SloopEdges, SolverMetrics, solution_count
from sloop.solvers.solver_errors import SolverInvariantError
from sloop.validators import check_loop_solution

KNOWN_UNIQUE_GRID = grid_from_clues([2, 10, 19, 32])
FULL_GRID = grid_from_clues(range(36))
# Cell 0 has no open neighbour
ISOLATED_CORNER_GRID = grid_from_clues([1, 6])

BOX_GLYPHS = set("─│┌┐└┘")


def _commit(state, cell0, cell1):
    state.add_free_edge_to_loop(state.free_edges.index(SloopEdge(cell0, cell1)))


class TestInitialState(unittest.TestCase):

    def test_empty_grid_edges(self):
        state = SloopEdges(0)
        # 6 rows x 5 horizontal + 5 rows x 6 vertical
        self.assertEqual(len(state.free_edges), 60)
        self.assertEqual(state.free_edges[0], SloopEdge(0, 1))
        self.assertEqual(state.free_edges[1], SloopEdge(0, 6))
        self.assertEqual(state.cell_free_edge_counts[0], 2)
        self.assertEqual(state.cell_free_edge_counts[7], 4)
        self.assertEqual(state.open_cells_count, 36)
        self.assertEqual(state.loop_edges, [])

    def test_clued_cells_start_satisfied(self):
        state = SloopEdges(KNOWN_UNIQUE_GRID)
        for cell_index in (2, 10, 19, 32):
            self.assertEqual(state.cell_loop_edge_counts[cell_index], 2)
            self.assertEqual(state.cell_free_edge_counts[cell_index], 0)
        self.assertEqual(state.open_cells_count, 32)
        for edge in state.free_edges:
            self.assertNotIn(edge.cell0, (2, 10, 19, 32))
            self.assertNotIn(edge.cell1, (2, 10, 19, 32))

    def test_edges_are_ordered_pairs_of_neighbours(self):
        for edge in SloopEdges(0).free_edges:
            self.assertLess(edge.cell0, edge.cell1)
            self.assertIn(edge.cell1 - edge.cell0, (1, 6))

    def test_fully_clued_grid_is_solved_but_has_no_edges(self):
        state = SloopEdges(FULL_GRID)
        self.assertEqual(state.free_edges, [])
        self.assertEqual(state.open_cells_count, 0)
        self.assertTrue(state.is_solved())


class TestStatePredicates(unittest.TestCase):

    def test_is_impossible_false_for_ordinary_grids(self):
        self.assertFalse(SloopEdges(0).is_impossible())
        self.assertFalse(SloopEdges(KNOWN_UNIQUE_GRID).is_impossible())

    def test_is_impossible_for_isolated_cell(self):
        self.assertTrue(SloopEdges(ISOLATED_CORNER_GRID).is_impossible())

    def test_is_impossible_after_clearing_an_edge(self):
        state = SloopEdges(0)
        # Corner 0 only has two edges; excluding one strands it
        state.clear_free_edge(0)
        self.assertEqual(state.cell_free_edge_counts[0], 1)
        self.assertTrue(state.is_impossible())

    def test_would_edge_early_loop(self):
        state = SloopEdges(0)
        _commit(state, 0, 1)
        _commit(state, 0, 6)
        _commit(state, 1, 7)
        self.assertEqual(state.open_cells_count, 34)
        self.assertTrue(state.would_edge_early_loop(SloopEdge(6, 7)))
        self.assertFalse(state.would_edge_early_loop(SloopEdge(6, 12)))

    def test_cleanup_removes_early_loop_and_saturated_edges(self):
        state = SloopEdges(0)
        _commit(state, 0, 1)
        _commit(state, 0, 6)
        _commit(state, 1, 7)
        state.cleanup_invalid_free_edges()

        self.assertNotIn(SloopEdge(6, 7), state.free_edges)
        self.assertNotIn(SloopEdge(1, 2), state.free_edges)
        # (0,6) committed, (6,7) dropped, only (6,12) remains
        self.assertEqual(state.cell_free_edge_counts[6], 1)
        self.assertEqual(state.cell_free_edge_counts[1], 0)
        for edge in state.free_edges:
            self.assertLess(state.cell_loop_edge_counts[edge.cell0], 2)
            self.assertLess(state.cell_loop_edge_counts[edge.cell1], 2)

    def test_free_counts_match_free_edges(self):
        state = SloopEdges(KNOWN_UNIQUE_GRID)
        _commit(state, 0, 1)
        state.cleanup_invalid_free_edges()
        expected = [0] * 36
        for edge in state.free_edges:
            expected[edge.cell0] += 1
            expected[edge.cell1] += 1
        self.assertEqual(state.cell_free_edge_counts, expected)


class TestInvariants(unittest.TestCase):

    def test_degree_overflow_raises(self):
        state = SloopEdges(0)
        _commit(state, 0, 1)
        _commit(state, 1, 2)
        with self.assertRaises(SolverInvariantError) as ctx:
            _commit(state, 1, 7)
        self.assertEqual(ctx.exception.cell_index, 1)
        self.assertEqual(ctx.exception.observed, 3)

    def test_self_loop_raises(self):
        state = SloopEdges(0)
        state.free_edges.append(SloopEdge(5, 5))
        with self.assertRaises(SolverInvariantError):
            state.add_free_edge_to_loop(len(state.free_edges) - 1)

    def test_invariant_error_is_a_runtime_error(self):
        self.assertTrue(issubclass(SolverInvariantError, RuntimeError))


class TestContinueLoop(unittest.TestCase):

    def test_first_step_commits_first_free_edge(self):
        state = SloopEdges(0)
        step = state.continue_loop()
        self.assertEqual(step.loop_edges, [SloopEdge(0, 1)])
        # The original state is untouched
        self.assertEqual(state.loop_edges, [])
        self.assertEqual(len(state.free_edges), 60)

    def test_forced_move_is_taken(self):
        state = SloopEdges(0)
        step = state.continue_loop()
        step.cleanup_invalid_free_edges()
        # Corner 0 is a path end with one way out
        step = step.continue_loop()
        self.assertEqual(step.loop_edges[-1], SloopEdge(0, 6))

    def test_branch_extends_from_a_path_end(self):
        state = SloopEdges(0)
        _commit(state, 7, 8)
        state.cleanup_invalid_free_edges()
        step = state.continue_loop()
        added = step.loop_edges[-1]
        self.assertTrue(added.touches(7) or added.touches(8))

    def test_no_free_edges_returns_none(self):
        self.assertIsNone(SloopEdges(FULL_GRID).continue_loop())


class TestSolutionCount(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.known_metrics = SolverMetrics()
        cls.known_solutions = list(SloopEdges(KNOWN_UNIQUE_GRID).iter_solutions(2, cls.known_metrics))

    def test_known_grid_has_exactly_one_solution(self):
        self.assertEqual(len(self.known_solutions), 1)
        self.assertEqual(self.known_metrics.solutions_found, 1)
        self.assertGreater(self.known_metrics.states_explored, 0)

    def test_known_grid_solution_is_a_valid_loop(self):
        solution = self.known_solutions[0]
        self.assertTrue(solution.is_solved())
        # 32 open cells on one cycle use 32 edges
        self.assertEqual(len(solution.loop_edges), 32)
        valid, reason = check_loop_solution(KNOWN_UNIQUE_GRID, solution.loop_edges)
        self.assertTrue(valid, reason)

    def test_known_grid_solution_count_function(self):
        self.assertEqual(solution_count(KNOWN_UNIQUE_GRID, 2), 1)

    def test_fully_clued_grid_has_no_solution(self):
        self.assertEqual(SloopEdges(FULL_GRID).solution_count(2), 0)

    def test_isolated_corner_has_no_solution(self):
        self.assertEqual(SloopEdges(ISOLATED_CORNER_GRID).solution_count(2), 0)

    def test_zero_clue_grid_reaches_the_cap(self):
        """The open 6x6 board has many Hamiltonian cycles."""
        self.assertEqual(SloopEdges(0).solution_count(2), 2)

    def test_count_never_exceeds_cap(self):
        self.assertEqual(SloopEdges(0).solution_count(1), 1)

    def test_zero_clue_solutions_are_distinct_valid_loops(self):
        solutions = list(SloopEdges(0).iter_solutions(2))
        self.assertEqual(len(solutions), 2)
        for solution in solutions:
            valid, reason = check_loop_solution(0, solution.loop_edges)
            self.assertTrue(valid, reason)
        self.assertNotEqual(set(solutions[0].loop_edges), set(solutions[1].loop_edges))

    def test_cap_must_be_positive(self):
        with self.assertRaises(ValueError):
            SloopEdges(0).solution_count(0)

    def test_search_does_not_mutate_the_root(self):
        state = SloopEdges(FULL_GRID ^ grid_from_clues([0, 1, 6, 7]))
        before = (list(state.free_edges), list(state.cell_free_edge_counts))
        self.assertEqual(state.solution_count(2), 1)
        self.assertEqual((state.free_edges, state.cell_free_edge_counts), before)


class TestPathRendering(unittest.TestCase):

    def test_partial_path(self):
        state = SloopEdges(0)
        _commit(state, 0, 1)
        _commit(state, 0, 6)
        rows = state.path_to_string().split("\n")
        self.assertEqual(rows[0], "┌LBBBB")
        self.assertEqual(rows[1], "UBBBBB")

    def test_square_loop(self):
        # Only the 2x2 block in the top-left corner is open
        grid = FULL_GRID ^ grid_from_clues([0, 1, 6, 7])
        solution = SloopEdges(grid).first_solution()
        rows = solution.path_to_string().split("\n")
        self.assertEqual(rows[0], "┌┐BBBB")
        self.assertEqual(rows[1], "└┘BBBB")
        self.assertEqual(len(rows), 7)  # six rows and a trailing newline

    def test_solution_rendering_routes_every_open_cell(self):
        solution = SloopEdges(KNOWN_UNIQUE_GRID).first_solution()
        chars = solution.path_to_string().replace("\n", "")
        for cell_index, ch in enumerate(chars):
            if cell_index in (2, 10, 19, 32):
                self.assertEqual(ch, "B")
            else:
                self.assertIn(ch, BOX_GLYPHS)


if __name__ == '__main__':
    unittest.main()
