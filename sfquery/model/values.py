"""
sfquery/model/values.py

Extended values and value sets.

A variable's range holds extended values: either a Regular wrapper around
a concrete domain value, or the STAR sentinel standing for the outcomes
that were pruned away while the model was being expanded. A range that
contains STAR cannot be turned into a point distribution.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import Any, Generic, Iterable, Tuple, TypeVar

T = TypeVar("T")


class Extended(Generic[T]):
    """Base class for Regular values and the STAR sentinel."""

    @property
    def is_regular(self) -> bool:
        raise NotImplementedError

    @property
    def value(self) -> T:
        raise NotImplementedError


@dataclass(frozen=True)
class Regular(Extended[T]):
    """A concrete, fully resolved domain value."""
    wrapped: T

    @property
    def is_regular(self) -> bool:
        return True

    @property
    def value(self) -> T:
        return self.wrapped

    def __repr__(self) -> str:
        return f"Regular({self.wrapped!r})"


class Star(Extended[Any]):
    """The unresolved sentinel. Use the module-level STAR instance."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def is_regular(self) -> bool:
        return False

    @property
    def value(self) -> Any:
        raise ValueError("* has no concrete value")

    def __repr__(self) -> str:
        return "*"

    def __reduce__(self):
        return (Star, ())


STAR = Star()


@dataclass(frozen=True)
class ValueSet(Generic[T]):
    """
    Ordered set of regular values, optionally extended with STAR.

    Attributes:
        regular: Deduplicated regular values in declaration order
        has_star: Whether the unresolved sentinel belongs to the set
    """
    regular: Tuple[T, ...]
    has_star: bool = False

    def __post_init__(self):
        seen = []
        for v in self.regular:
            if v not in seen:
                seen.append(v)
        object.__setattr__(self, "regular", tuple(seen))

    @staticmethod
    def with_values(values: Iterable[T], has_star: bool = False) -> "ValueSet[T]":
        return ValueSet(tuple(values), has_star)

    @cached_property
    def xvalues(self) -> Tuple[Extended[T], ...]:
        """Extended range: regular values first, then STAR if present. Built once."""
        xs: Tuple[Extended[T], ...] = tuple(Regular(v) for v in self.regular)
        if self.has_star:
            xs = xs + (STAR,)
        return xs

    def __len__(self) -> int:
        return len(self.regular) + (1 if self.has_star else 0)
