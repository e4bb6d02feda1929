"""
Loop Validators
===============
Independent check of a finished sloop solution.

The solver's own bookkeeping only tracks degrees; this module re-derives
the win condition from the raw edge set so tests and the verify command
do not have to trust the solver.
"""

from sloop.grid import CELL_COUNT, GRID_SIZE, is_clued


def check_loop_solution(grid, loop_edges):
    """
    Check that *loop_edges* is a valid single loop for *grid*.
    Returns: (bool, reason)
    """
    edges = [tuple(sorted(edge)) for edge in loop_edges]
    if not edges:
        return False, "Empty board"

    degree = [0] * CELL_COUNT
    for u, v in edges:
        if is_clued(grid, u) or is_clued(grid, v):
            return False, "Edge touches clued cell"
        if not _are_adjacent(u, v):
            return False, "Edge cells not adjacent"
        degree[u] += 1
        degree[v] += 1

    if len(set(edges)) != len(edges):
        return False, "Not a closed loop"

    # 1. Every open cell is routed through exactly once
    for cell_index in range(CELL_COUNT):
        if is_clued(grid, cell_index):
            continue
        if degree[cell_index] != 2:
            return False, "Not a closed loop"

    # 2. Connectivity
    if _component_count_via_dsu(edges) != 1:
        return False, "Multiple loops detected"

    return True, "OK"


def _are_adjacent(u, v):
    if not (0 <= u < CELL_COUNT and 0 <= v < CELL_COUNT):
        return False
    ru, cu = divmod(u, GRID_SIZE)
    rv, cv = divmod(v, GRID_SIZE)
    return abs(ru - rv) + abs(cu - cv) == 1


def _component_count_via_dsu(edges):
    """Number of connected components over cells touched by edges."""
    dsu = _DSU()
    cells = set()
    for u, v in edges:
        cells.add(u)
        cells.add(v)
        dsu.union(u, v)

    return len({dsu.find(cell) for cell in cells})


class _DSU:
    def __init__(self):
        self.parent = {}
        self.rank = {}

    def find(self, x):
        if x not in self.parent:
            self.parent[x] = x
            self.rank[x] = 0
            return x
        while self.parent[x] != x:
            self.parent[x] = self.parent[self.parent[x]]
            x = self.parent[x]
        return x

    def union(self, a, b):
        ra = self.find(a)
        rb = self.find(b)
        if ra == rb:
            return
        if self.rank[ra] < self.rank[rb]:
            self.parent[ra] = rb
        elif self.rank[ra] > self.rank[rb]:
            self.parent[rb] = ra
        else:
            self.parent[rb] = ra
            self.rank[ra] += 1
