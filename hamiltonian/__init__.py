"""hamiltonian — Hamiltonian cycle search for small undirected graphs."""

__version__ = "0.1.0"

from hamiltonian.client import HamiltonianSolver, find_cycle, solve, strategy_names, verify_cycle
from hamiltonian.engine.core import GraphTooLargeError, SearchAborted
from hamiltonian.models import CycleResult, SearchStats, SolverConfig, ValidationResult

__all__ = [
    "CycleResult",
    "GraphTooLargeError",
    "HamiltonianSolver",
    "SearchAborted",
    "SearchStats",
    "SolverConfig",
    "ValidationResult",
    "__version__",
    "find_cycle",
    "solve",
    "strategy_names",
    "verify_cycle",
]
