"""
Solver invariant errors.
"""

from __future__ import annotations

DEGREE_OVERFLOW_MESSAGE = "Loop degree exceeded 2 after committing an edge."
SELF_LOOP_MESSAGE = "Loop edge joins a cell to itself."


class SolverInvariantError(RuntimeError):
    """
    Raised when the loop solver reaches a state its propagation rules forbid.

    These are programming errors, not puzzle outcomes: a run that hits one
    would otherwise classify grids incorrectly, so it is never caught inside
    the package.
    """

    def __init__(
        self,
        message: str,
        *,
        cell_index: int | None = None,
        observed: int | None = None,
        context: str | None = None,
    ) -> None:
        super().__init__(message)
        self.cell_index = cell_index
        self.observed = observed
        self.context = context
