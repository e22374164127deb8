"""Pydantic models for the hamiltonian public API.

These wrap the engine's plain results (index tuples, counters) with
validation and serialization for callers.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

StrategyName = Literal["compressed-path-search", "backtracking", "auto"]

SearchStatus = Literal["found", "no_cycle", "aborted"]


class SolverConfig(BaseModel):
    """Settings for a HamiltonianSolver.

    ``timeout`` is in seconds and applies to each search separately.
    """

    strategy: StrategyName = "compressed-path-search"
    timeout: float | None = Field(default=None, gt=0)


class SearchStats(BaseModel):
    """Size of the graph and the work a search did on it.

    ``paths_explored`` counts paths stored in the path dictionary for the
    compressed path search, or partial paths visited by backtracking.
    ``layers`` maps path length to stored paths (compressed path search only).
    """

    vertex_count: int
    edge_count: int = 0
    min_degree: int = 0
    average_degree: float = 0.0
    paths_explored: int = 0
    layers: dict[int, int] = Field(default_factory=dict)


class CycleResult(BaseModel):
    """Outcome of one search.

    ``cycle`` holds the caller's elements in cycle order when ``status`` is
    ``"found"`` and is None otherwise.
    """

    status: SearchStatus
    cycle: list[Any] | None = None
    strategy: str
    stats: SearchStats

    @property
    def found(self) -> bool:
        return self.status == "found"

    def __repr__(self) -> str:
        if self.found:
            return f"CycleResult(found, cycle={self.cycle!r}, strategy={self.strategy!r})"
        return f"CycleResult({self.status}, strategy={self.strategy!r})"


class ValidationResult(BaseModel):
    """Result of checking a proposed Hamiltonian cycle.

    Contains a pass/fail flag and every problem found.
    """

    valid: bool
    errors: list[str] = Field(default_factory=list)
