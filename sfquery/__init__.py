"""
SFQuery: Structured Factored Queries

Exact marginal and joint queries over the factor sets produced by
solving a discrete model, with lower/upper bound awareness.

Key components:
- algebra: Semiring and weight tables (factors)
- model: Variables, extended ranges, query targets and factor models
- solver: Variable elimination per bounds regime
- structured: Target materialization, point and joint queries,
  one-time and anytime algorithms
"""

__version__ = "1.0.0"
__author__ = "SFQuery Team"

from sfquery.algebra.semiring import SumProductSemiring
from sfquery.algebra.factor import Factor
from sfquery.model.values import STAR, Regular
from sfquery.model.element import Element
from sfquery.model.structure import FactorModel
from sfquery.structured import (
    Bounds,
    Problem,
    UnresolvedSupportError,
    MultipleScenariosError,
    ZeroMassError,
    NotATargetError,
    AlgorithmInactiveError,
    StructuredProbQueryAlgorithm,
    OneTimeStructuredProbQuery,
    AnytimeStructuredProbQuery,
)
from sfquery.config import QueryConfig

__all__ = [
    # Algebra
    "SumProductSemiring",
    "Factor",
    # Model
    "STAR",
    "Regular",
    "Element",
    "FactorModel",
    # Queries
    "Bounds",
    "Problem",
    "UnresolvedSupportError",
    "MultipleScenariosError",
    "ZeroMassError",
    "NotATargetError",
    "AlgorithmInactiveError",
    "StructuredProbQueryAlgorithm",
    "OneTimeStructuredProbQuery",
    "AnytimeStructuredProbQuery",
    "QueryConfig",
]
