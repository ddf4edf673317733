"""
sfquery/solver/elimination.py

Sum-product variable elimination producing per-bounds solutions.

The query layer consumes the factor sets produced here; it never looks at
the elimination order stored as auxiliary data.
"""

from __future__ import annotations

import logging
from functools import reduce
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from sfquery.algebra.factor import Factor
from sfquery.algebra.semiring import SumProductSemiring
from sfquery.model.element import Element
from sfquery.model.structure import FactorModel
from sfquery.model.variable import Variable
from sfquery.solver.ordering import elimination_order
from sfquery.structured.solution import Bounds, Solution

logger = logging.getLogger(__name__)


def build_factors(model: FactorModel, bounds: Bounds, semiring: Any = None) -> List[Factor]:
    """
    Turn the model's weight tables into factors for one bounds regime.

    Entries where some variable takes * are set to zero for LOWER and to
    one for UPPER.
    """
    sr = semiring if semiring is not None else SumProductSemiring()
    out: List[Factor] = []
    for fdef in model.factor_defs():
        variables = tuple(model.collection.variable(e) for e in fdef.scope)
        data = np.array(fdef.weights, dtype=np.float64, copy=True)
        fill = sr.zero if bounds is Bounds.LOWER else sr.one
        for axis, v in enumerate(variables):
            if v.has_star:
                idx = [slice(None)] * data.ndim
                idx[axis] = v.star_index()
                data[tuple(idx)] = fill
        out.append(Factor(variables, data, sr))
    return out


def eliminate(
    factors: Sequence[Factor],
    keep: Iterable[Variable],
    heuristic: str = "min_fill",
    semiring: Any = None,
) -> Tuple[List[Factor], List[Variable]]:
    """
    Sum out every variable not in keep.

    Args:
        factors: Input factor set
        keep: Variables to keep
        heuristic: Ordering heuristic passed to elimination_order
        semiring: Semiring for the unit factor (default sum-product)

    Returns:
        (remaining factors, elimination order)
    """
    sr = semiring if semiring is not None else SumProductSemiring()
    keep = list(keep)
    order = elimination_order(factors, keep, heuristic)

    current = list(factors)
    for v in order:
        touching = [f for f in current if v in f.variables]
        rest = [f for f in current if v not in f.variables]
        joint = reduce(Factor.product, touching, Factor.unit(sr))
        current = rest + [joint.sum_over(v)]
        logger.debug("Eliminated %s (%d factors joined)", v.name, len(touching))

    return current, order


def solve(
    model: FactorModel,
    targets: Sequence[Element],
    bounds: Bounds = Bounds.LOWER,
    heuristic: str = "min_fill",
    semiring: Any = None,
) -> Solution:
    """
    Solve the model for targets under one bounds regime.

    Targets that no weight table mentions get a constant-one factor so
    that every target variable appears in the solution.
    """
    sr = semiring if semiring is not None else SumProductSemiring()
    factors = build_factors(model, bounds, sr)
    keep = [model.collection.variable(t) for t in targets]

    covered = {v for f in factors for v in f.variables}
    for v in keep:
        if v not in covered:
            factors.append(Factor.constant((v,), sr.one, sr))

    remaining, order = eliminate(factors, keep, heuristic, sr)
    logger.debug(
        "Solved %s for %d targets: %d factors remain after eliminating %d variables",
        bounds.name, len(keep), len(remaining), len(order),
    )
    return remaining, order


def solve_all(
    model: FactorModel,
    targets: Sequence[Element],
    heuristic: str = "min_fill",
    semiring: Optional[Any] = None,
) -> Dict[Bounds, Solution]:
    """
    Solve for every bounds regime the model needs.

    A model without * in any range is solved once under LOWER; otherwise
    it is solved under both LOWER and UPPER.
    """
    regimes = [Bounds.LOWER, Bounds.UPPER] if model.has_star() else [Bounds.LOWER]
    return {b: solve(model, targets, b, heuristic, semiring) for b in regimes}
