"""
sfquery/structured/joint.py

Joint distribution over several targets of a solved problem.

The returned value lists follow the joint table's own variable order,
which need not match the order the targets were requested in. The
ordering list returned alongside them says which name sits at which
position; read positions from it rather than from the request.
"""

from __future__ import annotations

import math
from typing import Any, List, Sequence, Tuple

from sfquery.algebra.factor import Factor
from sfquery.algebra.semiring import Semiring
from sfquery.model.collection import ProblemComponent
from sfquery.model.element import Element
from sfquery.model.values import Extended
from sfquery.structured.errors import AlgorithmInactiveError, NotATargetError, ZeroMassError
from sfquery.structured.materialize import joint_factor
from sfquery.structured.solution import Problem

Ordering = List[Tuple[str, ProblemComponent]]
JointEntries = List[Tuple[float, List[Extended[Any]]]]


class JointQueryEngine:
    """
    Answers multi-target queries directly from a problem's factor set.

    Only meaningful for an unbounded (single scenario) solve; the factor
    set used is whatever the problem handle recorded.
    """

    def __init__(self, problem: Problem, semiring: Semiring, zero_mass_tolerance: float = 0.0):
        self.problem = problem
        self.semiring = semiring
        self.zero_mass_tolerance = zero_mass_tolerance

    def query(self, targets: Sequence[Element]) -> Tuple[Ordering, JointEntries]:
        """
        Normalized joint distribution over targets.

        Returns:
            (ordering, entries) where ordering lists (name, component)
            sorted by table position and entries holds
            (probability, values) for every index of the table.

        Raises:
            AlgorithmInactiveError: If the problem has not been solved
            ValueError: If a target is requested twice
            NotATargetError: If a target is not one the problem was solved for
            ZeroMassError: If the joint has no mass
        """
        if not self.problem.solved:
            raise AlgorithmInactiveError("problem has not been solved")
        if len(set(targets)) != len(targets):
            raise ValueError(f"duplicate targets in joint query: {[t.name for t in targets]}")
        for t in targets:
            if t not in self.problem.targets:
                raise NotATargetError(f"{t} was not solved for")

        collection = self.problem.collection
        target_vars = [collection.variable(t) for t in targets]

        joint = joint_factor(self.problem.solution, self.semiring)
        unnormalized = joint.marginalize_to(*target_vars)
        z = unnormalized.total()
        if not math.isfinite(z) or z <= self.zero_mass_tolerance:
            raise ZeroMassError(f"joint of {[t.name for t in targets]} has total mass {z}")
        target_factor = unnormalized.map_to(lambda w: w / z)

        ordering = name_components(targets, target_factor, collection)
        entries = [
            (target_factor.get(idx), target_factor.convert_indices_to_values(idx))
            for idx in target_factor.indices()
        ]
        return ordering, entries


def name_components(targets: Sequence[Element], factor: Factor, collection) -> Ordering:
    """Pair each target's name with its component, sorted by table position."""
    positions = []
    for t in targets:
        component = collection[t]
        positions.append((factor.axis_of(component.variable), t.name, component))

    taken = [p for p, _, _ in positions]
    assert len(set(taken)) == len(taken), "two targets share one table position"

    return [(name, component) for _, name, component in sorted(positions, key=lambda p: p[0])]
