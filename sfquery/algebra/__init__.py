"""
Algebra module: Semirings and weight tables (factors).
"""

from sfquery.algebra.semiring import Semiring, SumProductSemiring
from sfquery.algebra.factor import Factor

__all__ = [
    "Semiring",
    "SumProductSemiring",
    "Factor",
]
