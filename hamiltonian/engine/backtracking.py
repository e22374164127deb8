"""Depth-first backtracking search for Hamiltonian cycles.

Every Hamiltonian cycle passes through vertex 0, so the search only starts
there. Recursion depth is at most N (63), well within Python's default limit,
and the only auxiliary state is the current path and its visited set.
Worst-case time is exponential, but dense graphs usually give up a cycle
almost immediately.
"""

from __future__ import annotations

import logging

from hamiltonian.engine import bitset
from hamiltonian.engine.core import AdjacencyTable, Deadline, Path

logger = logging.getLogger(__name__)


class BacktrackingSearch:
    """Exhaustive depth-first search anchored at vertex 0."""

    name = "backtracking"

    def __init__(self, adjacency: AdjacencyTable, deadline: Deadline | None = None) -> None:
        self.adjacency = adjacency
        self.deadline = deadline
        self.paths_explored = 0
        self.layers: dict[int, int] = {}

    def run(self) -> Path | None:
        """Return a Hamiltonian cycle as vertex indices, or None if none exists."""
        if self.adjacency.n < 3:
            return None
        path = [0]
        if self._extend(path, bitset.bit(0)):
            return tuple(path)
        logger.debug("Backtracking exhausted after %d partial paths", self.paths_explored)
        return None

    def _extend(self, path: list[int], visited: int) -> bool:
        if self.deadline is not None:
            self.deadline.check()
        self.paths_explored += 1
        last = path[-1]
        if len(path) == self.adjacency.n:
            return self.adjacency.has_edge(last, path[0])
        for vertex in bitset.members(self.adjacency.mask(last) & ~visited):
            path.append(vertex)
            if self._extend(path, visited | (1 << vertex)):
                return True
            path.pop()
        return False

    def __repr__(self) -> str:
        return f"BacktrackingSearch({self.adjacency!r})"
