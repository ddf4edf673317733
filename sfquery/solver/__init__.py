"""
Solver module: Variable elimination producing per-bounds solutions.
"""

from sfquery.solver.ordering import interaction_graph, elimination_order
from sfquery.solver.elimination import build_factors, eliminate, solve, solve_all

__all__ = [
    "interaction_graph",
    "elimination_order",
    "build_factors",
    "eliminate",
    "solve",
    "solve_all",
]
