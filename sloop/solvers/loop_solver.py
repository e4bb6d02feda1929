"""
Loop Constraint Solver
======================
Counts the single-loop solutions of a fixed sloop grid.

A solution is a set of edges between orthogonally adjacent open cells in
which every open cell has exactly two edges and all edges form one cycle.

Search model:
- The loop grows as one path from its first committed edge.
- Forced moves (a path end with a single remaining free edge) are taken
  before any choice.
- Each committed edge spawns a backtrack alternative in which that edge is
  permanently excluded; both branches go onto an explicit stack of cloned
  states, so no two branches share mutable data.
- The caller's cap bounds the count: distinguishing 0 / 1 / many
  solutions only needs cap = 2.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, NamedTuple, Optional

from sloop.grid import CELL_COUNT, GRID_SIZE, is_clued
from sloop.solvers.solver_errors import (
    DEGREE_OVERFLOW_MESSAGE,
    SELF_LOOP_MESSAGE,
    SolverInvariantError,
)


class SloopEdge(NamedTuple):
    """Edge between two adjacent open cells, cell0 < cell1."""
    cell0: int
    cell1: int

    def touches(self, cell_index: int) -> bool:
        return self.cell0 == cell_index or self.cell1 == cell_index

    @property
    def is_horizontal(self) -> bool:
        return self.cell0 // GRID_SIZE == self.cell1 // GRID_SIZE


@dataclass
class SolverMetrics:
    """Counters collected over one solution search."""
    states_explored: int = 0    # states popped from the stack
    states_pushed: int = 0      # states queued, including the root
    max_stack_depth: int = 0
    solutions_found: int = 0


# Partial path glyphs: the direction a cell's single loop edge leaves in.
_EMPTY = "B"
_JOINS = {
    frozenset("LR"): "─",
    frozenset("UD"): "│",
    frozenset("RD"): "┌",
    frozenset("LD"): "┐",
    frozenset("RU"): "└",
    frozenset("LU"): "┘",
}


class SloopEdges:
    """
    Solver state for one search branch.

    Clued cells start at loop degree 2. They never touch the loop, but
    treating them as already satisfied lets "every cell at degree 2" mean
    "solved" without special cases.
    """

    def __init__(self, grid: int):
        self.original_grid = grid
        self.loop_edges: List[SloopEdge] = []
        self.free_edges: List[SloopEdge] = []
        self.cell_loop_edge_counts = [0] * CELL_COUNT
        self.cell_free_edge_counts = [0] * CELL_COUNT

        for cell_index in range(CELL_COUNT):
            if is_clued(grid, cell_index):
                continue
            row, col = divmod(cell_index, GRID_SIZE)

            if col < GRID_SIZE - 1:
                self._add_initial_free_edge(cell_index, cell_index + 1)
            if row < GRID_SIZE - 1:
                self._add_initial_free_edge(cell_index, cell_index + GRID_SIZE)

        for cell_index in range(CELL_COUNT):
            if is_clued(grid, cell_index):
                self.cell_loop_edge_counts[cell_index] = 2

        self.open_cells_count = sum(1 for count in self.cell_loop_edge_counts if count < 2)

    def _add_initial_free_edge(self, cell0: int, cell1: int) -> None:
        if is_clued(self.original_grid, cell1):
            return
        self.free_edges.append(SloopEdge(cell0, cell1))
        self.cell_free_edge_counts[cell0] += 1
        self.cell_free_edge_counts[cell1] += 1

    def copy(self) -> "SloopEdges":
        clone = SloopEdges.__new__(SloopEdges)
        clone.original_grid = self.original_grid
        clone.loop_edges = list(self.loop_edges)
        clone.free_edges = list(self.free_edges)
        clone.cell_loop_edge_counts = list(self.cell_loop_edge_counts)
        clone.cell_free_edge_counts = list(self.cell_free_edge_counts)
        clone.open_cells_count = self.open_cells_count
        return clone

    # ── Edge bookkeeping ───────────────────────────────────────

    def cleanup_invalid_free_edges(self) -> None:
        """Drop free edges that can no longer join the loop."""
        loop_counts = self.cell_loop_edge_counts
        kept = []
        for edge in self.free_edges:
            if (loop_counts[edge.cell0] >= 2
                    or loop_counts[edge.cell1] >= 2
                    or self.would_edge_early_loop(edge)):
                self.cell_free_edge_counts[edge.cell0] -= 1
                self.cell_free_edge_counts[edge.cell1] -= 1
            else:
                kept.append(edge)
        self.free_edges = kept

    def would_edge_early_loop(self, edge: SloopEdge) -> bool:
        """
        Joining two degree-1 cells closes the loop. That is only allowed
        when they are the last two open cells, i.e. the close completes the
        solution instead of cutting it short.
        """
        if (self.cell_loop_edge_counts[edge.cell0] == 1
                and self.cell_loop_edge_counts[edge.cell1] == 1):
            return self.open_cells_count > 2
        return False

    def add_free_edge_to_loop(self, free_edge_index: int) -> None:
        edge = self.free_edges[free_edge_index]
        if edge.cell0 == edge.cell1:
            raise SolverInvariantError(
                SELF_LOOP_MESSAGE, cell_index=edge.cell0, context="add_free_edge_to_loop"
            )

        self.loop_edges.append(edge)
        for cell_index in edge:
            self.cell_loop_edge_counts[cell_index] += 1
            degree = self.cell_loop_edge_counts[cell_index]
            if degree > 2:
                raise SolverInvariantError(
                    DEGREE_OVERFLOW_MESSAGE,
                    cell_index=cell_index,
                    observed=degree,
                    context="add_free_edge_to_loop",
                )
            if degree == 2:
                self.open_cells_count -= 1

        del self.free_edges[free_edge_index]
        self.cell_free_edge_counts[edge.cell0] -= 1
        self.cell_free_edge_counts[edge.cell1] -= 1

    def clear_free_edge(self, free_edge_index: int) -> None:
        """Permanently exclude a free edge from this branch."""
        edge = self.free_edges.pop(free_edge_index)
        self.cell_free_edge_counts[edge.cell0] -= 1
        self.cell_free_edge_counts[edge.cell1] -= 1

    # ── State predicates ───────────────────────────────────────

    def is_solved(self) -> bool:
        return all(count == 2 for count in self.cell_loop_edge_counts)

    def is_impossible(self) -> bool:
        """True when some cell can no longer reach loop degree 2."""
        for free, loop in zip(self.cell_free_edge_counts, self.cell_loop_edge_counts):
            if free + loop < 2:
                return True
        return False

    def is_viable(self) -> bool:
        return bool(self.free_edges) and not self.is_impossible()

    # ── Search ─────────────────────────────────────────────────

    def _committed(self, free_edge_index: int) -> "SloopEdges":
        clone = self.copy()
        clone.add_free_edge_to_loop(free_edge_index)
        return clone

    def continue_loop(self) -> Optional["SloopEdges"]:
        """
        One propagation-or-choice step on a clone of this state.

        Returns the clone with one more loop edge, or None when no edge can
        extend the loop.
        """
        if not self.free_edges:
            return None

        # Any first edge will do; the backtrack branch covers the rest.
        if not self.loop_edges:
            return self._committed(0)

        loop_counts = self.cell_loop_edge_counts
        allowed_cells = []
        for edge in self.loop_edges:
            if loop_counts[edge.cell0] == 1:
                allowed_cells.append(edge.cell0)
            if loop_counts[edge.cell1] == 1:
                allowed_cells.append(edge.cell1)

        # Forced move: a path end with one way out.
        for cell_index in allowed_cells:
            if self.cell_free_edge_counts[cell_index] == 1:
                for free_edge_index, edge in enumerate(self.free_edges):
                    if edge.touches(cell_index):
                        return self._committed(free_edge_index)

        # Branch point: extend from any path end.
        for free_edge_index, edge in enumerate(self.free_edges):
            if loop_counts[edge.cell0] == 1 or loop_counts[edge.cell1] == 1:
                return self._committed(free_edge_index)

        return None

    def iter_solutions(
        self,
        limit: int,
        metrics: Optional[SolverMetrics] = None,
    ) -> Iterator["SloopEdges"]:
        """
        Yield solved states, depth-first, stopping after *limit* of them.

        Each yielded state is an independent clone whose ``loop_edges`` hold
        one complete loop.
        """
        if limit < 1:
            raise ValueError(f"solution limit must be at least 1, got {limit}")
        if metrics is None:
            metrics = SolverMetrics()

        root = self.copy()
        root.cleanup_invalid_free_edges()
        stack = [root]
        metrics.states_pushed += 1
        metrics.max_stack_depth = max(metrics.max_stack_depth, 1)

        found = 0
        while stack:
            state = stack.pop()
            metrics.states_explored += 1

            new_state = state.continue_loop()
            if new_state is None:
                continue
            if len(new_state.loop_edges) <= len(state.loop_edges):
                raise SolverInvariantError(
                    "continue_loop did not commit an edge", context="iter_solutions"
                )

            # The branch where the edge just taken is never part of the loop.
            added_edge = new_state.loop_edges[-1]
            backtrack = state.copy()
            backtrack.clear_free_edge(backtrack.free_edges.index(added_edge))
            backtrack.cleanup_invalid_free_edges()
            if backtrack.is_viable():
                stack.append(backtrack)
                metrics.states_pushed += 1

            if new_state.is_solved():
                found += 1
                metrics.solutions_found += 1
                yield new_state
                if found >= limit:
                    return
            else:
                new_state.cleanup_invalid_free_edges()
                if new_state.is_viable():
                    stack.append(new_state)
                    metrics.states_pushed += 1

            if len(stack) > metrics.max_stack_depth:
                metrics.max_stack_depth = len(stack)

    def solution_count(self, count_cap: int, metrics: Optional[SolverMetrics] = None) -> int:
        """Number of loop solutions, never more than *count_cap*."""
        return sum(1 for _ in self.iter_solutions(count_cap, metrics))

    def first_solution(self) -> Optional["SloopEdges"]:
        return next(self.iter_solutions(1), None)

    # ── Rendering ──────────────────────────────────────────────

    def path_to_string(self) -> str:
        """
        Render the committed loop edges as six text rows.

        Fully routed cells use box-drawing glyphs. A cell with one loop edge
        shows the direction it leaves in (L, R, U, D); a cell with none shows B.
        """
        path_chars = [_EMPTY] * CELL_COUNT
        for edge in self.loop_edges:
            if edge.is_horizontal:
                _route(path_chars, edge.cell0, "R")
                _route(path_chars, edge.cell1, "L")
            else:
                _route(path_chars, edge.cell0, "D")
                _route(path_chars, edge.cell1, "U")

        rows = []
        for row in range(GRID_SIZE):
            start = row * GRID_SIZE
            rows.append("".join(path_chars[start:start + GRID_SIZE]) + "\n")
        return "".join(rows)

    def __repr__(self) -> str:
        return (
            f"SloopEdges(grid={self.original_grid:#011x}, loop={len(self.loop_edges)}, "
            f"free={len(self.free_edges)}, open={self.open_cells_count})"
        )


def _route(path_chars: List[str], cell_index: int, direction: str) -> None:
    current = path_chars[cell_index]
    if current == _EMPTY:
        path_chars[cell_index] = direction
    elif current in "LRUD":
        path_chars[cell_index] = _JOINS.get(frozenset((current, direction)), current)


def solution_count(grid: int, count_cap: int = 2) -> int:
    """Capped solution count of a grid."""
    return SloopEdges(grid).solution_count(count_cap)
