"""
sfquery/model/variable.py

Discrete variables with an ordered extended range.

Variables are identified by an integer id handed out by the component
registry. Equality, hashing and ordering use the id only, so the
canonical variable order of a product table is ascending id.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Tuple

from sfquery.model.values import STAR, Extended, ValueSet


@dataclass(frozen=True, order=True)
class Variable:
    """
    A random quantity with a finite extended range.

    Attributes:
        id: Registry-assigned identifier (canonical sort key)
        name: Human readable name
        value_set: Regular values plus optional STAR
    """
    id: int
    name: str = field(compare=False)
    value_set: ValueSet = field(compare=False)

    @property
    def range(self) -> Tuple[Extended[Any], ...]:
        return self.value_set.xvalues

    @property
    def size(self) -> int:
        return len(self.value_set)

    @property
    def has_star(self) -> bool:
        return self.value_set.has_star

    def star_index(self) -> int:
        if not self.has_star:
            raise ValueError(f"Variable {self.name} has no * in its range")
        return self.range.index(STAR)

    def __repr__(self) -> str:
        return f"Variable({self.id}, {self.name!r}, size={self.size})"
