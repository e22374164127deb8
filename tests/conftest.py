"""Shared fixtures for hamiltonian tests."""

import json

import pytest

from hamiltonian import HamiltonianSolver
from hamiltonian.engine import AdjacencyTable
from tests.graphs import LOOP_4, PETERSEN_WITH_CHORD


@pytest.fixture(params=["compressed-path-search", "backtracking"])
def solver(request):
    """A solver for each concrete strategy."""
    return HamiltonianSolver(request.param)


@pytest.fixture()
def loop_4_table():
    """Adjacency table of the 4-cycle 0-1-2-3-0."""
    return AdjacencyTable.from_edges(*LOOP_4)


@pytest.fixture()
def counting_predicate():
    """Wrap a predicate so the number of calls can be asserted on.

    Usage:
        adjacent, calls = counting_predicate(predicate(edges))
        ...
        assert calls[0] == 6
    """

    def wrap(adjacent):
        calls = [0]

        def counted(a, b):
            calls[0] += 1
            return adjacent(a, b)

        return counted, calls

    return wrap


@pytest.fixture()
def graph_file(tmp_path):
    """Write a graph JSON file and return its path.

    Default graph: Petersen graph plus one chord (has a Hamiltonian cycle).
    """

    def write(data=None, name="graph.json"):
        if data is None:
            data = {"edges": [list(e) for e in PETERSEN_WITH_CHORD[1]]}
        path = tmp_path / name
        path.write_text(json.dumps(data))
        return str(path)

    return write
