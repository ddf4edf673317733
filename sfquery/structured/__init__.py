"""
Structured module: Target materialization, point and joint queries.
"""

from sfquery.structured.solution import Bounds, Problem, Solution, SolutionStore
from sfquery.structured.errors import (
    QueryError,
    UnresolvedSupportError,
    MultipleScenariosError,
    ZeroMassError,
    NotATargetError,
    AlgorithmInactiveError,
)
from sfquery.structured.materialize import joint_factor, materialize_targets
from sfquery.structured.distribution import Distribution
from sfquery.structured.joint import JointQueryEngine, name_components
from sfquery.structured.algorithm import StructuredProbQueryAlgorithm, OneTimeStructuredProbQuery
from sfquery.structured.anytime import AnytimeStructuredProbQuery

__all__ = [
    "Bounds",
    "Problem",
    "Solution",
    "SolutionStore",
    "QueryError",
    "UnresolvedSupportError",
    "MultipleScenariosError",
    "ZeroMassError",
    "NotATargetError",
    "AlgorithmInactiveError",
    "joint_factor",
    "materialize_targets",
    "Distribution",
    "JointQueryEngine",
    "name_components",
    "StructuredProbQueryAlgorithm",
    "OneTimeStructuredProbQuery",
    "AnytimeStructuredProbQuery",
]
