"""
sfquery/solver/ordering.py

Elimination ordering on the interaction graph.

The interaction graph G = (V, E) has:
- Nodes: variables
- Edges: pairs of variables that appear together in some factor
"""

from __future__ import annotations

import itertools
from typing import Callable, Dict, Iterable, List, Sequence

import networkx as nx

from sfquery.algebra.factor import Factor
from sfquery.model.variable import Variable


def interaction_graph(factors: Sequence[Factor]) -> nx.Graph:
    """Build the interaction graph of a factor set."""
    g = nx.Graph()
    for f in factors:
        g.add_nodes_from(f.variables)
        g.add_edges_from(itertools.combinations(f.variables, 2))
    return g


def _degree(g: nx.Graph, v: Variable) -> int:
    return g.degree(v)


def _fill_in(g: nx.Graph, v: Variable) -> int:
    """Number of edges eliminating v would add."""
    nbrs = list(g.neighbors(v))
    return sum(1 for a, b in itertools.combinations(nbrs, 2) if not g.has_edge(a, b))


HEURISTICS: Dict[str, Callable[[nx.Graph, Variable], int]] = {
    "min_degree": _degree,
    "min_fill": _fill_in,
}


def elimination_order(
    factors: Sequence[Factor],
    keep: Iterable[Variable],
    heuristic: str = "min_fill",
) -> List[Variable]:
    """
    Greedy elimination order for every variable not in keep.

    Args:
        factors: Factor set to eliminate from
        keep: Variables that must survive elimination
        heuristic: "min_fill" or "min_degree"; ties break by variable id

    Returns:
        Variables in the order they should be summed out
    """
    try:
        score = HEURISTICS[heuristic]
    except KeyError:
        raise ValueError(
            f"Unknown elimination heuristic {heuristic!r}; expected one of {sorted(HEURISTICS)}"
        ) from None

    g = interaction_graph(factors)
    candidates = set(g.nodes) - set(keep)
    order: List[Variable] = []

    while candidates:
        v = min(candidates, key=lambda u: (score(g, u), u.id))
        # Connect the neighbourhood before removing v
        g.add_edges_from(itertools.combinations(list(g.neighbors(v)), 2))
        g.remove_node(v)
        candidates.discard(v)
        order.append(v)

    return order
