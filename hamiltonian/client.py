"""Hamiltonian solver client — the primary interface for cycle searches."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from typing import TypeVar

from hamiltonian.engine.backtracking import BacktrackingSearch
from hamiltonian.engine.core import (
    AdjacencyTable,
    CompressedPathSearch,
    Deadline,
    SearchAborted,
    canonical_cycle,
    check_capacity,
)
from hamiltonian.models import CycleResult, SearchStats, SolverConfig, ValidationResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

Search = CompressedPathSearch | BacktrackingSearch

STRATEGIES: dict[str, type[Search]] = {
    CompressedPathSearch.name: CompressedPathSearch,
    BacktrackingSearch.name: BacktrackingSearch,
}

AUTO = "auto"

# Average degree above which "auto" prefers backtracking
DENSE_AVERAGE_DEGREE = 3.5


def strategy_names() -> list[str]:
    """Every name accepted as a strategy."""
    return [*STRATEGIES, AUTO]


def _select_search(name: str, adjacency: AdjacencyTable) -> type[Search]:
    if name == AUTO:
        if adjacency.average_degree > DENSE_AVERAGE_DEGREE:
            return BacktrackingSearch
        return CompressedPathSearch
    return STRATEGIES[name]


def _stats(adjacency: AdjacencyTable, search: Search | None = None) -> SearchStats:
    return SearchStats(
        vertex_count=adjacency.n,
        edge_count=adjacency.edge_count,
        min_degree=adjacency.min_degree,
        average_degree=adjacency.average_degree,
        paths_explored=search.paths_explored if search is not None else 0,
        layers=search.layers if search is not None else {},
    )


class HamiltonianSolver:
    """Finds a Hamiltonian cycle in a small undirected graph.

    The graph is given as an ordered sequence of elements plus a symmetric,
    irreflexive adjacency predicate. Elements are opaque: the search runs on
    indices and only maps back to elements when a cycle is found.

    Strategies:
        - ``"compressed-path-search"`` — meet-in-the-middle over a path dictionary
          (default, best for sparse graphs)
        - ``"backtracking"`` — depth-first search anchored at the first element
          (best for dense graphs)
        - ``"auto"`` — backtracking when the average degree exceeds 3.5, else
          compressed path search

    Example:
        ```python
        solver = HamiltonianSolver()
        solver.find_cycle(["a", "b", "c"], lambda x, y: x != y)   # ["a", "b", "c"]

        solver = HamiltonianSolver("backtracking", timeout=5.0)
        result = solver.solve(elements, adjacent)
        if result.found:
            print(result.cycle)
        ```

    Raises:
        ValueError: If ``strategy`` is not a known strategy name, or
                    ``timeout`` is not positive
    """

    def __init__(
        self,
        strategy: str | None = None,
        *,
        timeout: float | None = None,
        config: SolverConfig | None = None,
    ) -> None:
        if config is not None and (strategy is not None or timeout is not None):
            raise ValueError("Pass either config or strategy/timeout, not both")
        if config is None:
            if strategy is None:
                strategy = CompressedPathSearch.name
            if strategy not in strategy_names():
                raise ValueError(
                    f"strategy must be one of {strategy_names()}, got: {strategy!r}"
                )
            config = SolverConfig(strategy=strategy, timeout=timeout)
        self._config = config

    @classmethod
    def compressed(cls, *, timeout: float | None = None) -> HamiltonianSolver:
        return cls(CompressedPathSearch.name, timeout=timeout)

    @classmethod
    def backtracking(cls, *, timeout: float | None = None) -> HamiltonianSolver:
        return cls(BacktrackingSearch.name, timeout=timeout)

    @property
    def config(self) -> SolverConfig:
        return self._config

    @property
    def strategy(self) -> str:
        return self._config.strategy

    def solve(
        self,
        elements: Sequence[T],
        adjacent: Callable[[T, T], bool],
        *,
        cancel: threading.Event | None = None,
    ) -> CycleResult:
        """Search for a Hamiltonian cycle and report the outcome.

        Never raises for "no cycle" or for an aborted search; both are
        reported through ``CycleResult.status``.

        Args:
            elements: The graph's vertices, in any order
            adjacent: Symmetric, irreflexive adjacency test (called O(N²) times)
            cancel: Event that aborts the search once set (optional)

        Returns:
            CycleResult with status "found", "no_cycle" or "aborted"

        Raises:
            GraphTooLargeError: If there are more than 63 elements
        """
        elements = list(elements)
        n = len(elements)
        check_capacity(n)
        if n < 3:
            logger.debug("Rejecting graph with %d vertices: a cycle needs at least 3", n)
            return CycleResult(
                status="no_cycle", strategy=self.strategy, stats=SearchStats(vertex_count=n)
            )

        adjacency = AdjacencyTable.from_predicate(elements, adjacent)
        if adjacency.min_degree < 2:
            logger.debug(
                "Rejecting graph with minimum degree %d: every vertex needs 2 neighbours",
                adjacency.min_degree,
            )
            return CycleResult(status="no_cycle", strategy=self.strategy, stats=_stats(adjacency))

        search_cls = _select_search(self.strategy, adjacency)
        logger.debug(
            "Running %s on %d vertices, %d edges", search_cls.name, n, adjacency.edge_count
        )
        search = search_cls(adjacency, Deadline(self._config.timeout, cancel))
        try:
            indices = search.run()
        except SearchAborted as exc:
            logger.warning("%s aborted on %d vertices: %s", search.name, n, exc)
            return CycleResult(
                status="aborted", strategy=search.name, stats=_stats(adjacency, search)
            )

        if indices is None:
            logger.info("No Hamiltonian cycle in %d vertices (%s)", n, search.name)
            return CycleResult(
                status="no_cycle", strategy=search.name, stats=_stats(adjacency, search)
            )
        logger.info("Found Hamiltonian cycle through %d vertices (%s)", n, search.name)
        return CycleResult(
            status="found",
            cycle=[elements[i] for i in canonical_cycle(indices)],
            strategy=search.name,
            stats=_stats(adjacency, search),
        )

    def find_cycle(
        self,
        elements: Sequence[T],
        adjacent: Callable[[T, T], bool],
        *,
        cancel: threading.Event | None = None,
    ) -> list[T] | None:
        """Return the elements in Hamiltonian cycle order, or None if no cycle exists.

        Consecutive elements, and the last and first, satisfy ``adjacent``.

        Raises:
            GraphTooLargeError: If there are more than 63 elements
            SearchAborted: If the timeout elapsed or ``cancel`` was set
        """
        result = self.solve(elements, adjacent, cancel=cancel)
        if result.status == "aborted":
            raise SearchAborted(f"{result.strategy} search was aborted")
        return result.cycle

    def __repr__(self) -> str:
        return f"HamiltonianSolver(strategy={self.strategy!r}, timeout={self._config.timeout})"


def verify_cycle(
    elements: Sequence[T],
    adjacent: Callable[[T, T], bool],
    cycle: Sequence[T],
) -> ValidationResult:
    """Check that ``cycle`` is a Hamiltonian cycle of the graph.

    Checks for:
    - One entry per element, no repeats, nothing outside ``elements``
    - Adjacency between consecutive entries, including last to first
    """
    elements = list(elements)
    cycle = list(cycle)
    errors: list[str] = []

    if len(cycle) != len(elements):
        errors.append(f"Cycle has {len(cycle)} vertices, graph has {len(elements)}")
    if len(cycle) < 3:
        errors.append("A cycle needs at least 3 vertices")

    seen: set[int] = set()
    for item in cycle:
        try:
            index = elements.index(item)
        except ValueError:
            errors.append(f"{item!r} is not a vertex of the graph")
            continue
        if index in seen:
            errors.append(f"{item!r} appears more than once")
        seen.add(index)

    if len(cycle) >= 2:
        for a, b in zip(cycle, [*cycle[1:], cycle[0]]):
            if not adjacent(a, b):
                errors.append(f"{a!r} and {b!r} are not adjacent")

    return ValidationResult(valid=not errors, errors=errors)


def find_cycle(
    elements: Sequence[T],
    adjacent: Callable[[T, T], bool],
    *,
    strategy: str = CompressedPathSearch.name,
    timeout: float | None = None,
    cancel: threading.Event | None = None,
) -> list[T] | None:
    """Shortcut for ``HamiltonianSolver(strategy, timeout=timeout).find_cycle(...)``."""
    solver = HamiltonianSolver(strategy, timeout=timeout)
    return solver.find_cycle(elements, adjacent, cancel=cancel)


def solve(
    elements: Sequence[T],
    adjacent: Callable[[T, T], bool],
    *,
    strategy: str = CompressedPathSearch.name,
    timeout: float | None = None,
    cancel: threading.Event | None = None,
) -> CycleResult:
    """Shortcut for ``HamiltonianSolver(strategy, timeout=timeout).solve(...)``."""
    return HamiltonianSolver(strategy, timeout=timeout).solve(elements, adjacent, cancel=cancel)
