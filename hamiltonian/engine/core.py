"""Compressed path search for Hamiltonian cycles.

A meet-in-the-middle search over simple paths. Think of a path as a "word"
whose letters are vertex indices. Every word has:

- an endpoint pair: its first and last vertex (order does not matter)
- a visited set: every vertex it contains
- the path itself: one ordering that walks from one endpoint to the other

The search builds a dictionary of words of every length up to
``T = ceil((N + 2) / 2)``, keeping a single witness per
(length, endpoint pair, visited set) signature, then looks for two words that
share an endpoint pair and have otherwise disjoint visited sets covering the
whole graph. Gluing those together gives a Hamiltonian cycle.

Both endpoint pairs and visited sets are bitmask vertex sets (see
``hamiltonian.engine.bitset``), which limits the search to 63 vertices.

Memory grows roughly with C(N, N/2) in dense graphs. The search works best on
sparse graphs (E < 4V); for dense graphs the backtracking strategy is usually
the better choice.

References:
- Horowitz & Sahni: meet-in-the-middle subset enumeration (1974)
- Bellman, Held & Karp: bitmask dynamic programming over vertex subsets (1962)
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import TypeVar

from hamiltonian.engine import bitset

logger = logging.getLogger(__name__)

T = TypeVar("T")

Path = tuple[int, ...]


class GraphTooLargeError(ValueError):
    """Raised when a graph has more vertices than a vertex set can hold."""


class SearchAborted(RuntimeError):
    """Raised when a search hits its deadline or is cancelled."""


def check_capacity(n: int) -> None:
    """Reject vertex counts that do not fit a bitmask vertex set.

    Raises:
        GraphTooLargeError: If ``n`` exceeds ``bitset.MAX_VERTICES``
    """
    if n > bitset.MAX_VERTICES:
        raise GraphTooLargeError(
            f"Graph has {n} vertices; at most {bitset.MAX_VERTICES} are supported"
        )


class Deadline:
    """Cooperative cancellation checked from inside the search loops.

    Args:
        timeout: Seconds from construction until the search is aborted (optional)
        cancel: Event that aborts the search once set (optional)
    """

    def __init__(
        self,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> None:
        self._expires_at = time.monotonic() + timeout if timeout is not None else None
        self._cancel = cancel

    def check(self) -> None:
        """Raise SearchAborted if the deadline passed or cancellation was requested."""
        if self._cancel is not None and self._cancel.is_set():
            raise SearchAborted("Search was cancelled")
        if self._expires_at is not None and time.monotonic() >= self._expires_at:
            raise SearchAborted("Search exceeded its deadline")


# ========== Adjacency Table ==========


class AdjacencyTable:
    """Per-vertex neighbour lists and neighbour sets for an undirected graph.

    Vertices are the indices ``0..n-1``. Self loops are dropped, so the table
    is irreflexive. Symmetry is the caller's responsibility.

    Raises:
        GraphTooLargeError: If there are more than 63 vertices
        ValueError: If a neighbour index is outside ``range(n)``
    """

    def __init__(self, neighbors: Sequence[Iterable[int]]) -> None:
        n = len(neighbors)
        check_capacity(n)
        lists = []
        for v, adj in enumerate(neighbors):
            clean = sorted(set(adj) - {v})
            if clean and not (0 <= clean[0] and clean[-1] < n):
                raise ValueError(f"Neighbours of vertex {v} must be in [0, {n}), got: {clean}")
            lists.append(tuple(clean))
        self._neighbors: tuple[tuple[int, ...], ...] = tuple(lists)
        self._masks: tuple[int, ...] = tuple(bitset.from_indices(adj) for adj in lists)

    @classmethod
    def from_predicate(
        cls, elements: Sequence[T], adjacent: Callable[[T, T], bool]
    ) -> AdjacencyTable:
        """Build the table by testing every unordered pair of elements once.

        The capacity check runs before the predicate is ever called.
        """
        n = len(elements)
        check_capacity(n)
        neighbors: list[list[int]] = [[] for _ in range(n)]
        for i in range(n):
            for j in range(i + 1, n):
                if adjacent(elements[i], elements[j]):
                    neighbors[i].append(j)
                    neighbors[j].append(i)
        return cls(neighbors)

    @classmethod
    def from_edges(cls, n: int, edges: Iterable[tuple[int, int]]) -> AdjacencyTable:
        """Build the table from index pairs."""
        check_capacity(n)
        neighbors: list[set[int]] = [set() for _ in range(n)]
        for u, v in edges:
            if not (0 <= u < n and 0 <= v < n):
                raise ValueError(f"Edge ({u}, {v}) references a vertex outside [0, {n})")
            neighbors[u].add(v)
            neighbors[v].add(u)
        return cls(neighbors)

    @property
    def n(self) -> int:
        return len(self._neighbors)

    def neighbors(self, v: int) -> tuple[int, ...]:
        """Neighbours of ``v`` in ascending order."""
        return self._neighbors[v]

    def mask(self, v: int) -> int:
        """Neighbours of ``v`` as a vertex set."""
        return self._masks[v]

    def degree(self, v: int) -> int:
        return len(self._neighbors[v])

    def has_edge(self, u: int, v: int) -> bool:
        return bitset.contains(self._masks[u], v)

    @property
    def min_degree(self) -> int:
        return min((len(adj) for adj in self._neighbors), default=0)

    @property
    def edge_count(self) -> int:
        return sum(len(adj) for adj in self._neighbors) // 2

    @property
    def average_degree(self) -> float:
        if not self._neighbors:
            return 0.0
        return 2 * self.edge_count / self.n

    def __repr__(self) -> str:
        return f"AdjacencyTable(n={self.n}, edges={self.edge_count})"


# ========== Path Dictionary ==========


class PathDictionary:
    """Layered index of simple paths.

    Structure: ``length -> endpoint pair -> visited set -> path``. Endpoint
    pairs and visited sets are vertex-set bitmasks. Only the first path stored
    for a given signature is kept; any one of them is interchangeable when
    stitching.
    """

    def __init__(self) -> None:
        self._layers: dict[int, dict[int, dict[int, Path]]] = {}
        # Paths stored per length, kept after a layer is discarded
        self._sizes: dict[int, int] = {}
        self._longest = 0

    @property
    def longest(self) -> int:
        """Length of the most recently opened layer (0 when empty)."""
        return self._longest

    def open_layer(self, length: int) -> None:
        """Start a new, empty layer one longer than the current longest."""
        if self._longest and length != self._longest + 1:
            raise ValueError(
                f"Layers must be opened in order: expected {self._longest + 1}, got {length}"
            )
        self._layers[length] = {}
        self._sizes[length] = 0
        self._longest = length

    def add(self, path: Path, visited: int) -> bool:
        """Store ``path`` in the newest layer unless its signature is already present.

        Returns:
            True if the path was stored, False if an equivalent path was already there
        """
        if len(path) != self._longest:
            raise ValueError(f"Path of length {len(path)} cannot go in layer {self._longest}")
        ends = (1 << path[0]) | (1 << path[-1])
        by_visited = self._layers[self._longest].setdefault(ends, {})
        if visited in by_visited:
            return False
        by_visited[visited] = path
        self._sizes[self._longest] += 1
        return True

    def seed(self, adjacency: AdjacencyTable) -> None:
        """Create layer 2: one trivial path per edge."""
        self.open_layer(2)
        for a in range(adjacency.n):
            for b in adjacency.neighbors(a):
                if a < b:
                    self.add((a, b), bitset.bit(a) | bitset.bit(b))

    def layer(self, length: int) -> Mapping[int, Mapping[int, Path]]:
        """Paths of ``length``, grouped by endpoint pair then visited set.

        Raises:
            KeyError: If the layer was never built or has been discarded
        """
        return self._layers[length]

    def has_layer(self, length: int) -> bool:
        return length in self._layers

    def discard_below(self, length: int) -> None:
        """Drop every layer shorter than ``length``."""
        for key in [k for k in self._layers if k < length]:
            del self._layers[key]

    def size(self, length: int) -> int:
        """Number of paths ever stored at ``length``, including discarded layers."""
        return self._sizes.get(length, 0)

    def layer_sizes(self) -> dict[int, int]:
        return dict(self._sizes)

    @property
    def total_paths(self) -> int:
        return sum(self._sizes.values())

    def dump(self, n: int) -> str:
        """Human-readable listing of every layer (debugging aid)."""
        lines = []
        for length in sorted(self._layers):
            lines.append(f"Of length {length}")
            for ends, by_visited in self._layers[length].items():
                lines.append(f"  {bitset.to_string(ends, n)}")
                for visited, path in by_visited.items():
                    lines.append(f"    {bitset.to_string(visited, n)} {list(path)}")
        return "\n".join(lines)


# ========== Expander ==========


def required_length(n: int) -> int:
    """Length of the longer half-path: ``ceil((n + 2) / 2)``."""
    return (n + 3) // 2


def extend_path(path: Path, endpoint: int, vertex: int) -> Path:
    """Add ``vertex`` next to ``endpoint``, which must be one end of ``path``."""
    if path[0] == endpoint:
        return (vertex,) + path
    if path[-1] == endpoint:
        return path + (vertex,)
    raise ValueError(f"Expected path {list(path)} to be terminated on one side by {endpoint}")


def expand_layer(
    adjacency: AdjacencyTable,
    dictionary: PathDictionary,
    deadline: Deadline | None = None,
) -> int:
    """Grow every path of the longest layer by one vertex at either end.

    Returns:
        Number of paths stored in the new layer
    """
    source = dictionary.layer(dictionary.longest)
    dictionary.open_layer(dictionary.longest + 1)
    for by_visited in source.values():
        for visited, path in by_visited.items():
            if deadline is not None:
                deadline.check()
            for endpoint in (path[0], path[-1]):
                # Unvisited neighbours of this end, as a vertex set
                for vertex in bitset.members(adjacency.mask(endpoint) & ~visited):
                    dictionary.add(extend_path(path, endpoint, vertex), visited | (1 << vertex))
    size = dictionary.size(dictionary.longest)
    logger.debug("Layer %d holds %d paths", dictionary.longest, size)
    return size


def build_layers(
    adjacency: AdjacencyTable,
    dictionary: PathDictionary,
    deadline: Deadline | None = None,
) -> bool:
    """Build layers 2..T, discarding layers the stitcher will not read.

    Returns:
        False if some layer came out empty (no path long enough exists), else True
    """
    n = adjacency.n
    target = required_length(n)
    keep_from = n + 2 - target
    dictionary.seed(adjacency)
    if dictionary.size(2) == 0:
        return False
    while dictionary.longest < target:
        if expand_layer(adjacency, dictionary, deadline) == 0:
            logger.debug("No simple paths of length %d; stopping early", dictionary.longest)
            return False
        dictionary.discard_below(min(keep_from, dictionary.longest))
    return True


# ========== Stitcher ==========


def splice(first: Path, second: Path) -> Path:
    """Join two half-paths that share both endpoints into one cycle.

    ``second``'s endpoints are dropped and its interior is inserted after
    ``first``'s last vertex, reversed if needed so neighbours line up.
    """
    interior = second[1:-1]
    if second[0] == first[-1] and second[-1] == first[0]:
        return first + interior
    if second[-1] == first[-1] and second[0] == first[0]:
        return first + interior[::-1]
    raise ValueError(f"Paths {list(first)} and {list(second)} do not share endpoints")


def stitch(
    n: int,
    dictionary: PathDictionary,
    deadline: Deadline | None = None,
) -> Path | None:
    """Find two half-paths whose union is a Hamiltonian cycle.

    For lengths ``L1 = ceil((n + 2) / 2)`` and ``L2 = n + 2 - L1``, a pair of
    paths with the same endpoint pair ``se`` and visited sets ``v1``, ``v2``
    forms a cycle iff ``v1 | v2`` is every vertex and ``v1 & v2 == se``.
    """
    l1 = required_length(n)
    l2 = n + 2 - l1
    complete = bitset.full_set(n)
    second_layer = dictionary.layer(l2)
    for ends, first_paths in dictionary.layer(l1).items():
        # Though L2 is built, this endpoint pair may have no path of length L2.
        second_paths = second_layer.get(ends)
        if second_paths is None:
            continue
        for v1, first in first_paths.items():
            if deadline is not None:
                deadline.check()
            # The only v2 with v1 | v2 == complete and v1 & v2 == ends
            v2 = (complete & ~v1) | ends
            second = second_paths.get(v2)
            if second is not None:
                return splice(first, second)
    return None


# ========== Search ==========


def canonical_cycle(cycle: Sequence[int]) -> Path:
    """Rotate ``cycle`` to start at its smallest index, oriented so cycle[1] < cycle[-1]."""
    if not cycle:
        return ()
    start = cycle.index(min(cycle))
    rotated = tuple(cycle[start:]) + tuple(cycle[:start])
    if len(rotated) > 2 and rotated[1] > rotated[-1]:
        rotated = rotated[:1] + rotated[:0:-1]
    return rotated


class CompressedPathSearch:
    """Meet-in-the-middle Hamiltonian cycle search over a PathDictionary.

    Example:
        ```python
        table = AdjacencyTable.from_edges(4, [(0, 1), (1, 2), (2, 3), (3, 0)])
        CompressedPathSearch(table).run()   # (0, 1, 2, 3)
        ```
    """

    name = "compressed-path-search"

    def __init__(self, adjacency: AdjacencyTable, deadline: Deadline | None = None) -> None:
        self.adjacency = adjacency
        self.deadline = deadline
        self.dictionary = PathDictionary()
        self.paths_explored = 0
        self.layers: dict[int, int] = {}

    def run(self) -> Path | None:
        """Return a Hamiltonian cycle as vertex indices, or None if none exists."""
        n = self.adjacency.n
        if n < 3:
            return None
        try:
            complete = build_layers(self.adjacency, self.dictionary, self.deadline)
        finally:
            self.layers = self.dictionary.layer_sizes()
            self.paths_explored = self.dictionary.total_paths
        if not complete:
            return None
        if logger.isEnabledFor(logging.DEBUG) and n <= 8:
            logger.debug("Path dictionary:\n%s", self.dictionary.dump(n))
        return stitch(n, self.dictionary, self.deadline)

    def __repr__(self) -> str:
        return f"CompressedPathSearch({self.adjacency!r})"
