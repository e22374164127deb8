"""Bitmask vertex sets.

A vertex set is a plain ``int`` whose bit ``v`` is set when vertex index ``v``
is a member. Python ints are immutable, so every operation returns a new set.
Indices are limited to ``0 <= v < MAX_VERTICES`` so that a set always fits in
a signed 64-bit word; out-of-range indices raise instead of wrapping.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

MAX_VERTICES = 63

EMPTY = 0


def _check_index(v: int) -> None:
    if not 0 <= v < MAX_VERTICES:
        raise ValueError(f"Vertex index must be in [0, {MAX_VERTICES}), got: {v}")


def bit(v: int) -> int:
    """Set containing only ``v``."""
    _check_index(v)
    return 1 << v


def with_vertex(s: int, v: int) -> int:
    return s | bit(v)


def union(a: int, b: int) -> int:
    return a | b


def intersection(a: int, b: int) -> int:
    return a & b


def contains(s: int, v: int) -> bool:
    return (s >> v) & 1 == 1


def full_set(n: int) -> int:
    """Set of every index in ``range(n)``."""
    if not 0 <= n <= MAX_VERTICES:
        raise ValueError(f"Vertex count must be in [0, {MAX_VERTICES}], got: {n}")
    return (1 << n) - 1


def is_full(s: int, n: int) -> bool:
    return s == full_set(n)


def from_indices(indices: Iterable[int]) -> int:
    s = EMPTY
    for v in indices:
        s |= bit(v)
    return s


def members(s: int) -> Iterator[int]:
    """Yield member indices in ascending order."""
    while s:
        low = s & -s
        yield low.bit_length() - 1
        s ^= low


def size(s: int) -> int:
    return bin(s).count("1")


def to_string(s: int, n: int) -> str:
    """Render ``s`` as a fixed-width binary string, highest index first."""
    return format(s, f"0{max(n, 1)}b")
