"""
sfquery/algebra/factor.py

A Factor is a semiring-valued table over an ordered tuple of variables.

Key operations:
  - unit:           identity table (no variables, value one)
  - product:        pointwise product on the union of variables
  - marginalize_to: semiring-sum out every variable not kept
  - fold / map_to:  reduction over entries / elementwise transform
  - indices:        row-major enumeration of index tuples

Design constraints:
  - Variable ordering is *semantic*: axes correspond 1-1 to variables.
  - Determinism: product() orders the union canonically (ascending id), so
    folding a set of factors does not depend on iteration order.
  - marginalize_to() keeps the surviving variables in this table's own
    order, whatever order the caller listed them in.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from typing import Any, Callable, Iterator, List, Sequence, Tuple
import numpy as np

from sfquery.algebra.semiring import Semiring
from sfquery.model.values import Extended
from sfquery.model.variable import Variable


@dataclass(frozen=True)
class Factor:
    """
    A weight table over an ordered tuple of variables.

    Attributes:
        variables: Ordered variables (axis labels).
        data: ndarray shaped by the variables' range sizes in the *same order*.
        semiring: Semiring implementing add/mul/add_reduce.
    """
    variables: Tuple[Variable, ...]
    data: np.ndarray
    semiring: Semiring

    def __post_init__(self):
        if len(self.variables) != self.data.ndim:
            raise ValueError(
                f"Factor rank mismatch: |variables|={len(self.variables)} "
                f"but data.ndim={self.data.ndim}"
            )
        if len(set(self.variables)) != len(self.variables):
            raise ValueError(f"Factor variables have duplicates: {self.variables}")
        expected = tuple(v.size for v in self.variables)
        if self.data.shape != expected:
            raise ValueError(f"Factor shape {self.data.shape} does not match ranges {expected}")

    @staticmethod
    def unit(semiring: Semiring) -> "Factor":
        """Multiplicative identity: scalar one over no variables."""
        return Factor((), np.array(semiring.one, dtype=np.float64), semiring)

    @staticmethod
    def constant(variables: Sequence[Variable], value: float, semiring: Semiring) -> "Factor":
        """Table with every entry equal to value."""
        vs = tuple(variables)
        data = np.full(tuple(v.size for v in vs), value, dtype=np.float64)
        return Factor(vs, data, semiring)

    def axis_of(self, v: Variable) -> int:
        """Returns the axis index of variable v."""
        return self.variables.index(v)

    def _aligned_view(self, target: Tuple[Variable, ...]) -> np.ndarray:
        """
        Broadcast view of self.data laid out along target.

        Existing axes are permuted into target order and missing axes
        become singleton dimensions broadcast to the target shape.
        """
        src_pos = {v: i for i, v in enumerate(self.variables)}
        perm = [src_pos[v] for v in target if v in src_pos]

        data = self.data
        if perm and perm != list(range(data.ndim)):
            data = np.transpose(data, axes=perm)

        shape = [v.size if v in src_pos else 1 for v in target]
        data = data.reshape(shape)
        return np.broadcast_to(data, tuple(v.size for v in target))

    def product(self, other: "Factor") -> "Factor":
        """
        Join-product on the union of variables.

        (f * g)(x_{U∪W}) = f(x_U) ⊗ g(x_W), with the union in ascending
        variable id order.
        """
        if type(self.semiring) is not type(other.semiring):
            raise ValueError("Cannot multiply factors from different semirings")

        union = tuple(sorted(set(self.variables) | set(other.variables)))
        a = self._aligned_view(union)
        b = other._aligned_view(union)
        out = np.asarray(self.semiring.mul(a, b), dtype=np.float64)
        return Factor(union, out, self.semiring)

    def marginalize_to(self, *variables: Variable) -> "Factor":
        """
        Sum out every variable not listed.

        The result keeps the listed variables in this factor's own order
        (duplicates collapse), not in the order they were passed.
        """
        keep = set(variables)
        for v in keep:
            if v not in self.variables:
                raise ValueError(f"marginalize_to: {v} not in factor variables {self.variables}")

        kept = tuple(v for v in self.variables if v in keep)
        if kept == self.variables:
            return self

        elim_axes = tuple(i for i, v in enumerate(self.variables) if v not in keep)
        data = np.asarray(self.semiring.add_reduce(self.data, axis=elim_axes), dtype=np.float64)
        return Factor(kept, data, self.semiring)

    def sum_over(self, variable: Variable) -> "Factor":
        """Sum out a single variable."""
        return self.marginalize_to(*(v for v in self.variables if v != variable))

    def fold(self, seed: Any, op: Callable[[Any, Any], Any]) -> Any:
        """Reduce all entries, in index order, starting from seed."""
        return reduce(op, (self.data[idx] for idx in self.indices()), seed)

    def total(self) -> float:
        """Total mass under semiring addition."""
        return float(self.fold(self.semiring.zero, self.semiring.add))

    def map_to(self, fn: Callable[[float], float]) -> "Factor":
        """Elementwise transform."""
        out = np.vectorize(fn, otypes=[np.float64])(self.data) if self.data.size else self.data.copy()
        return Factor(self.variables, np.asarray(out, dtype=np.float64).reshape(self.data.shape), self.semiring)

    def indices(self) -> Iterator[Tuple[int, ...]]:
        """All index tuples in row-major order; a scalar table yields ()."""
        return np.ndindex(*self.data.shape)

    def get(self, index: Sequence[int]) -> float:
        return float(self.data[tuple(index)])

    def value_of(self, variable: Variable, index: Sequence[int]) -> Extended[Any]:
        """Extended value the index tuple assigns to variable."""
        return variable.range[index[self.axis_of(variable)]]

    def convert_indices_to_values(self, index: Sequence[int]) -> List[Extended[Any]]:
        """Extended values of every variable, in this factor's order."""
        return [v.range[i] for v, i in zip(self.variables, index)]

    def __repr__(self) -> str:
        names = tuple(v.name for v in self.variables)
        return f"Factor(variables={names}, shape={self.data.shape}, semiring={type(self.semiring).__name__})"
