"""Benchmark fixtures for Hamiltonian cycle search performance tests."""

import random

import pytest


def generate_chorded_ring(
    num_vertices: int,
    num_chords: int,
    seed: int = 42,
) -> tuple[int, list[tuple[int, int]]]:
    """Generate a ring with random extra edges for benchmarking.

    The ring guarantees a Hamiltonian cycle exists; the chords add the
    branching that makes the search work for it.

    Args:
        num_vertices: Number of vertices on the ring
        num_chords: Number of extra edges between non-adjacent ring vertices
        seed: Random seed for reproducibility

    Returns:
        (vertex count, edge list)
    """
    rng = random.Random(seed)
    edges = {(i, (i + 1) % num_vertices) for i in range(num_vertices)}
    while len(edges) < num_vertices + num_chords:
        a, b = sorted(rng.sample(range(num_vertices), 2))
        if (a, b) in edges or (b, a) in edges:
            continue
        edges.add((a, b))
    return num_vertices, sorted(edges)


@pytest.fixture
def sparse_20():
    """20 vertices, 10 chords - average degree 3."""
    return generate_chorded_ring(num_vertices=20, num_chords=10)


@pytest.fixture
def sparse_40():
    """40 vertices, 8 chords - average degree 2.4."""
    return generate_chorded_ring(num_vertices=40, num_chords=8)


@pytest.fixture
def dense_16():
    """16 vertices, 50 chords - average degree above 8."""
    return generate_chorded_ring(num_vertices=16, num_chords=50)
