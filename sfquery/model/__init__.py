"""
Model module: Variables, ranges, query targets and factor models.
"""

from sfquery.model.values import STAR, Extended, Regular, Star, ValueSet
from sfquery.model.variable import Variable
from sfquery.model.element import Element
from sfquery.model.collection import ComponentCollection, ProblemComponent
from sfquery.model.structure import FactorDef, FactorModel

__all__ = [
    "STAR",
    "Extended",
    "Regular",
    "Star",
    "ValueSet",
    "Variable",
    "Element",
    "ComponentCollection",
    "ProblemComponent",
    "FactorDef",
    "FactorModel",
]
