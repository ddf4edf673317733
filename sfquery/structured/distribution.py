"""
sfquery/structured/distribution.py

Lazy, restartable view of a normalized single-variable marginal.
"""

from __future__ import annotations

from typing import Any, Generic, Iterator, List, Tuple, TypeVar

from sfquery.algebra.factor import Factor
from sfquery.model.variable import Variable

T = TypeVar("T")


class Distribution(Generic[T]):
    """
    Iterable of (probability, value) pairs.

    Each iteration walks the factor's indices again in the same order;
    nothing is computed until iteration starts.
    """

    def __init__(self, factor: Factor, variable: Variable, normalizer: float):
        self.factor = factor
        self.variable = variable
        self.normalizer = normalizer

    def __iter__(self) -> Iterator[Tuple[float, T]]:
        for index in self.factor.indices():
            yield (
                self.factor.get(index) / self.normalizer,
                self.factor.value_of(self.variable, index).value,
            )

    def __len__(self) -> int:
        return self.variable.size

    def to_list(self) -> List[Tuple[float, T]]:
        return list(self)

    def __repr__(self) -> str:
        return f"Distribution({self.variable.name!r}, {self.to_list()!r})"
