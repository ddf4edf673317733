"""
sfquery/algebra/semiring.py

Semiring used by weight tables.

A commutative semiring (S, ⊕, ⊗, 0, 1) provides:
- add (⊕): semiring addition (used by fold and marginalization)
- mul (⊗): semiring multiplication (used by product)
- zero (0): additive identity
- one (1): multiplicative identity

Query answers are sum-product: marginals are sums of products of
non-negative weights.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol, Tuple, Union
import numpy as np


class Semiring(Protocol):
    """Protocol for semirings usable by Factor."""
    zero: Any
    one: Any

    def add(self, a: Any, b: Any) -> Any: ...
    def mul(self, a: Any, b: Any) -> Any: ...
    def add_reduce(self, x: np.ndarray, axis: Optional[Union[int, Tuple[int, ...]]] = None) -> np.ndarray: ...


@dataclass(frozen=True)
class SumProductSemiring:
    """Nonnegative reals: add=+, mul=*."""
    zero: float = 0.0
    one: float = 1.0
    name: str = "SUM_PRODUCT"

    def add(self, a: Any, b: Any) -> float:
        return float(a) + float(b)

    def mul(self, a: Any, b: Any) -> Any:
        # Elementwise so it works on scalars and aligned arrays alike
        return np.multiply(a, b)

    def add_reduce(self, x: np.ndarray, axis: Optional[Union[int, Tuple[int, ...]]] = None) -> np.ndarray:
        return np.sum(x, axis=axis)
