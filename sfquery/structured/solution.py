"""
sfquery/structured/solution.py

Scenario keys, solutions and the solved-problem handle.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Optional, Tuple

from sfquery.algebra.factor import Factor
from sfquery.model.collection import ComponentCollection
from sfquery.model.element import Element


class Bounds(Enum):
    """Approximation regime a solution was computed under."""
    LOWER = 1      # * entries weigh nothing; also the key of an unbounded solve
    UPPER = 2      # * entries weigh one


# (factor set, auxiliary data opaque to the query layer)
Solution = Tuple[List[Factor], Any]
SolutionStore = Mapping[Bounds, Solution]


@dataclass
class Problem:
    """
    Explicit handle to a solved problem.

    Attributes:
        collection: Element -> component registry
        targets: Elements the problem was solved for
        solution: Factor set of the last single-scenario solve
        solved: Whether a solve has completed
    """
    collection: ComponentCollection
    targets: Tuple[Element, ...]
    solution: List[Factor] = field(default_factory=list)
    solved: bool = False

    def set_solution(self, solutions: SolutionStore) -> None:
        """Record the LOWER (or only) factor set of a completed solve."""
        chosen: Optional[Solution] = solutions.get(Bounds.LOWER)
        if chosen is None and solutions:
            chosen = next(iter(solutions.values()))
        self.solution = list(chosen[0]) if chosen is not None else []
        self.solved = True
