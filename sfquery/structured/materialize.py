"""
sfquery/structured/materialize.py

Marginalize each scenario's joint factor to every query target.

The joint product of a scenario is computed once and shared by all the
targets; the result is a read-only snapshot meant to be swapped in as a
whole.
"""

from __future__ import annotations

import logging
from functools import reduce
from types import MappingProxyType
from typing import Mapping, Sequence

from sfquery.algebra.factor import Factor
from sfquery.algebra.semiring import Semiring
from sfquery.model.collection import ComponentCollection
from sfquery.model.element import Element
from sfquery.structured.solution import Bounds, SolutionStore

logger = logging.getLogger(__name__)

TargetFactors = Mapping[Bounds, Mapping[Element, Factor]]


def joint_factor(factors: Sequence[Factor], semiring: Semiring) -> Factor:
    """Product of a factor set, seeded with the unit factor."""
    return reduce(Factor.product, factors, Factor.unit(semiring))


def materialize_targets(
    solutions: SolutionStore,
    targets: Sequence[Element],
    collection: ComponentCollection,
    semiring: Semiring,
) -> TargetFactors:
    """
    Unnormalized single-target marginals for every bounds regime.

    Args:
        solutions: Bounds -> (factor set, auxiliary)
        targets: Query targets
        collection: Registry resolving targets to variables
        semiring: Semiring of the factors

    Returns:
        Read-only mapping Bounds -> {target: marginal factor}
    """
    out = {}
    for bounds, (factors, _aux) in solutions.items():
        joint = joint_factor(factors, semiring)
        marginals = {}
        for target in targets:
            var = collection.variable(target)
            if var in joint.variables:
                marginals[target] = joint.marginalize_to(var)
            else:
                # No factor mentions the target: it is unconstrained
                marginals[target] = Factor.constant((var,), semiring.one, semiring)
        out[bounds] = MappingProxyType(marginals)
        logger.debug(
            "Materialized %d targets for %s from %d factors",
            len(marginals), bounds.name, len(factors),
        )
    return MappingProxyType(out)
