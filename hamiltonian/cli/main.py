"""hamiltonian CLI — search graph files for Hamiltonian cycles."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from hamiltonian.client import HamiltonianSolver, strategy_names, verify_cycle
from hamiltonian.engine.core import GraphTooLargeError

DEFAULT_STRATEGY = "compressed-path-search"


def _check_vertices(values: list[Any]) -> None:
    """Vertices must be JSON scalars so they can be compared and hashed."""
    for v in values:
        if not isinstance(v, (str, int, float, bool)):
            raise click.ClickException(
                f"Vertices must be strings, numbers or booleans, got: {v!r}"
            )


def _load_graph(path: str) -> tuple[list[Any], Callable[[Any, Any], bool]]:
    """Read ``{"vertices": [...], "edges": [[u, v], ...]}`` from a JSON file.

    ``vertices`` is optional; without it every edge endpoint becomes a vertex,
    in first-seen order.
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except UnicodeDecodeError as exc:
        raise click.ClickException(f"{path} is not UTF-8 text: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise click.ClickException(f"{path} must contain a JSON object")

    edges = data.get("edges", [])
    if not isinstance(edges, list):
        raise click.ClickException(f"'edges' must be a list, got: {edges!r}")
    for pair in edges:
        if not isinstance(pair, list) or len(pair) != 2:
            raise click.ClickException(f"Each edge must be a pair of vertices, got: {pair!r}")
        _check_vertices(pair)

    vertices = data.get("vertices")
    if vertices is None:
        vertices = list(dict.fromkeys(v for pair in edges for v in pair))
    else:
        if not isinstance(vertices, list):
            raise click.ClickException(f"'vertices' must be a list, got: {vertices!r}")
        _check_vertices(vertices)
        known = set(vertices)
        for u, v in edges:
            if u not in known or v not in known:
                raise click.ClickException(f"Edge [{u!r}, {v!r}] references an unknown vertex")

    edge_set = {frozenset(pair) for pair in edges}

    def adjacent(a: Any, b: Any) -> bool:
        return frozenset((a, b)) in edge_set

    return vertices, adjacent


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log search progress to stderr.")
def cli(verbose: bool) -> None:
    """hamiltonian CLI — find Hamiltonian cycles in small graphs."""
    # All logging goes to stderr — stdout carries results
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )


@cli.command()
@click.argument("graph_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--strategy",
    type=click.Choice(strategy_names()),
    default=DEFAULT_STRATEGY,
    envvar="HAMILTONIAN_STRATEGY",
    show_default=True,
    help="Search strategy.",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    envvar="HAMILTONIAN_TIMEOUT",
    help="Abort the search after this many seconds.",
)
@click.option("--json", "as_json", is_flag=True, help="Print the full result as JSON.")
def solve(graph_file: str, strategy: str, timeout: float | None, as_json: bool) -> None:
    """Find a Hamiltonian cycle in GRAPH_FILE."""
    vertices, adjacent = _load_graph(graph_file)
    solver = HamiltonianSolver(strategy, timeout=timeout)
    try:
        result = solver.solve(vertices, adjacent)
    except GraphTooLargeError as exc:
        raise click.ClickException(str(exc)) from exc

    if as_json:
        click.echo(result.model_dump_json(indent=2))
    elif result.found:
        click.echo(" -> ".join(str(v) for v in result.cycle or []))
    elif result.status == "no_cycle":
        click.echo("No Hamiltonian cycle.")

    if result.status == "aborted":
        click.echo(f"Search aborted ({result.strategy}).", err=True)
        sys.exit(1)


@cli.command()
@click.argument("graph_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("cycle", nargs=-1, required=True)
def verify(graph_file: str, cycle: tuple[str, ...]) -> None:
    """Check that CYCLE is a Hamiltonian cycle of GRAPH_FILE."""
    vertices, adjacent = _load_graph(graph_file)
    # Command-line arguments are strings; match them to vertices by text
    by_text = {str(v): v for v in vertices}
    proposed = [by_text.get(item, item) for item in cycle]
    result = verify_cycle(vertices, adjacent, proposed)
    if result.valid:
        click.echo("Valid Hamiltonian cycle.")
        return
    click.echo("Invalid cycle:")
    for err in result.errors:
        click.echo(f"  ERROR: {err}")
    sys.exit(1)


@cli.command()
def strategies() -> None:
    """List the available search strategies."""
    for name in strategy_names():
        click.echo(name)


if __name__ == "__main__":
    cli()
