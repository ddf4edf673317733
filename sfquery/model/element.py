"""
sfquery/model/element.py

Query targets.
"""

from __future__ import annotations

from typing import Generic, TypeVar

T = TypeVar("T")


class Element(Generic[T]):
    """
    A named random element whose values have type T.

    Elements use identity equality: two elements sharing a name are
    still different targets.
    """

    def __init__(self, name: str):
        self.name = name

    def __repr__(self) -> str:
        return f"Element({self.name!r})"
