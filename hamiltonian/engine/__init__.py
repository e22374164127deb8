from hamiltonian.engine.backtracking import BacktrackingSearch
from hamiltonian.engine.core import (
    AdjacencyTable,
    CompressedPathSearch,
    Deadline,
    GraphTooLargeError,
    PathDictionary,
    SearchAborted,
    build_layers,
    canonical_cycle,
    expand_layer,
    stitch,
)

__all__ = [
    "AdjacencyTable",
    "PathDictionary",
    "CompressedPathSearch",
    "BacktrackingSearch",
    "Deadline",
    "GraphTooLargeError",
    "SearchAborted",
    "build_layers",
    "expand_layer",
    "stitch",
    "canonical_cycle",
]
