"""
sfquery/structured/algorithm.py

Structured probability-of-query algorithms.

Solutions are unnormalized factors marginalized to individual targets.
Each completed solve rebuilds the whole target cache and replaces it with
one reference assignment, so readers see either the old snapshot or the
new one, never a mix.
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Any, Callable, Dict, Optional, Sequence, Tuple, TypeVar

from sfquery.algebra.semiring import SumProductSemiring
from sfquery.config import QueryConfig
from sfquery.model.element import Element
from sfquery.model.structure import FactorModel
from sfquery.solver.elimination import solve_all
from sfquery.structured.distribution import Distribution
from sfquery.structured.errors import (
    AlgorithmInactiveError,
    MultipleScenariosError,
    NotATargetError,
    UnresolvedSupportError,
    ZeroMassError,
)
from sfquery.structured.joint import JointEntries, JointQueryEngine, Ordering
from sfquery.structured.materialize import TargetFactors, materialize_targets
from sfquery.structured.solution import Bounds, Problem, Solution, SolutionStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StructuredProbQueryAlgorithm(ABC):
    """
    Exact marginal queries over a solved factor model.

    Attributes:
        model: The model being queried
        collection: Element -> component registry of the model
        query_targets: Elements tracked by this instance, fixed at construction
        config: Algorithm settings
        problem: Handle to the solved problem used by joint queries
        active: Whether queries may be answered
    """

    def __init__(
        self,
        model: FactorModel,
        *query_targets: Element,
        config: Optional[QueryConfig] = None,
        semiring: Any = None,
    ):
        if not query_targets:
            raise ValueError("At least one query target is required")
        for t in query_targets:
            if t not in model.collection:
                raise ValueError(f"Query target {t} is not part of the model")

        self.model = model
        self.collection = model.collection
        self.query_targets = tuple(query_targets)
        self.config = config if config is not None else QueryConfig()
        self.semiring = semiring if semiring is not None else SumProductSemiring()
        self.problem = Problem(self.collection, self.query_targets)
        self.active = False
        self._target_factors: TargetFactors = MappingProxyType({})

    @property
    def problem_targets(self) -> list:
        return list(self.query_targets)

    @property
    def target_factors(self) -> TargetFactors:
        """Current read-only snapshot of the per-bounds target marginals."""
        return self._target_factors

    def solve(self) -> Dict[Bounds, Solution]:
        """Solve every bounds regime the model needs and materialize targets."""
        solutions = solve_all(
            self.model,
            self.query_targets,
            heuristic=self.config.elimination_heuristic,
            semiring=self.semiring,
        )
        self.problem.set_solution(solutions)
        self.process_solutions(solutions)
        return solutions

    def process_solutions(self, solutions: SolutionStore) -> None:
        """For each of the bounds, marginalize to each target element."""
        snapshot = materialize_targets(solutions, self.query_targets, self.collection, self.semiring)
        self._target_factors = snapshot
        logger.debug("Target cache replaced (%d bounds)", len(snapshot))

    @abstractmethod
    def start(self) -> None:
        """Begin solving; queries are answered once a solve completes."""

    def kill(self) -> None:
        """Deactivate and drop the cached marginals."""
        self.active = False
        self._target_factors = MappingProxyType({})

    def compute_distribution(self, target: Element[T]) -> Distribution[T]:
        """
        Normalized distribution over a single target element.

        Raises:
            UnresolvedSupportError: If the target's range contains *
            MultipleScenariosError: If lower and upper bounds are needed
            ZeroMassError: If the target's marginal has no mass
            NotATargetError: If the target is not a query target
        """
        try:
            target_var = self.collection.variable(target)
        except KeyError:
            raise NotATargetError(f"{target} is not part of the model") from None
        if target_var.has_star:
            raise UnresolvedSupportError()

        solutions = self._target_factors
        if len(solutions) > 1:
            raise MultipleScenariosError()
        if not solutions:
            raise AlgorithmInactiveError("no solution has been processed")

        marginals = next(iter(solutions.values()))
        try:
            factor = marginals[target]
        except KeyError:
            raise NotATargetError(f"{target} is not a query target") from None

        normalizer = factor.total()
        if not math.isfinite(normalizer) or normalizer <= self.config.zero_mass_tolerance:
            raise ZeroMassError(f"marginal of {target.name} has total mass {normalizer}")
        return Distribution(factor, target_var, normalizer)

    def compute_expectation(self, target: Element[T], function: Callable[[T], float]) -> float:
        """Expectation of function under the target's distribution."""
        return sum(p * function(v) for p, v in self.compute_distribution(target))

    def _check(self, target: Element) -> None:
        if not self.active:
            raise AlgorithmInactiveError("algorithm is not active")
        if target not in self.query_targets:
            raise NotATargetError(f"{target} is not a query target")

    def distribution(self, target: Element[T]) -> Distribution[T]:
        self._check(target)
        return self.compute_distribution(target)

    def expectation(self, target: Element[T], function: Callable[[T], float]) -> float:
        self._check(target)
        return self.compute_expectation(target, function)

    def probability(self, target: Element[T], predicate: Callable[[T], bool]) -> float:
        """Probability that predicate holds for the target's value."""
        return self.expectation(target, lambda v: 1.0 if predicate(v) else 0.0)

    def probability_of(self, target: Element[T], value: T) -> float:
        """Probability of an exact value."""
        return self.probability(target, lambda v: v == value)

    def mean(self, target: Element[float]) -> float:
        return self.expectation(target, lambda v: float(v))

    def variance(self, target: Element[float]) -> float:
        m = self.mean(target)
        return self.expectation(target, lambda v: float(v) ** 2) - m * m

    def joint_distribution(self, targets: Sequence[Element]) -> Tuple[Ordering, JointEntries]:
        """
        Joint distribution over several query targets.

        Values in each entry follow the joint table's variable order; the
        returned ordering tells which target sits at which position.
        """
        if not self.active:
            raise AlgorithmInactiveError("algorithm is not active")
        for t in targets:
            if t not in self.query_targets:
                raise NotATargetError(f"{t} is not a query target")
        engine = JointQueryEngine(self.problem, self.semiring, self.config.zero_mass_tolerance)
        return engine.query(targets)


class OneTimeStructuredProbQuery(StructuredProbQueryAlgorithm):
    """Solves exactly once; the cache is read-only afterwards."""

    def start(self) -> None:
        if self.active:
            raise RuntimeError("algorithm already started")
        logger.info("Solving %d targets once", len(self.query_targets))
        self.run()
        self.active = True

    def run(self) -> None:
        self.solve()
