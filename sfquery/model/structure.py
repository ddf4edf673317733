"""
sfquery/model/structure.py

Discrete factor model: elements with ranges and named weight tables.

A model consists of:
- Elements, each registered in a ComponentCollection with its range
- Factor definitions (scope of elements + non-negative weight array)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple

import numpy as np

from sfquery.model.collection import ComponentCollection
from sfquery.model.element import Element


@dataclass(frozen=True)
class FactorDef:
    """Definition of a weight table over a scope of elements."""
    name: str
    scope: Tuple[Element, ...]
    weights: np.ndarray


class FactorModel:
    """
    Structure and weights of a discrete model.

    Maintains:
    - The component collection (element -> variable)
    - Factor definitions in declaration order
    """

    def __init__(self, collection: ComponentCollection = None):
        self.collection = collection if collection is not None else ComponentCollection()
        self.factors: Dict[str, FactorDef] = {}
        self._by_name: Dict[str, Element] = {}

    def add_variable(self, name: str, values: Iterable[Any], has_star: bool = False) -> Element:
        """Declare an element with the given range and return it."""
        if name in self._by_name:
            raise ValueError(f"Variable {name!r} already declared")
        element: Element = Element(name)
        self.collection.add(element, values, has_star)
        self._by_name[name] = element
        return element

    def add_factor(self, name: str, scope: Sequence[Element], weights: Any) -> FactorDef:
        """
        Add a weight table over scope.

        Raises:
            ValueError: On duplicate names, unknown elements, shape mismatch
                or negative weights
        """
        if name in self.factors:
            raise ValueError(f"Factor {name!r} already declared")
        scope_t = tuple(scope)
        if len(set(scope_t)) != len(scope_t):
            raise ValueError(f"Factor {name!r} scope has duplicates")
        for e in scope_t:
            if e not in self.collection:
                raise ValueError(f"Factor {name!r} refers to unknown element {e}")

        data = np.asarray(weights, dtype=np.float64)
        expected = tuple(self.collection.variable(e).size for e in scope_t)
        if data.shape != expected:
            raise ValueError(f"Factor {name!r} has shape {data.shape}, expected {expected}")
        if np.any(data < 0) or not np.all(np.isfinite(data)):
            raise ValueError(f"Factor {name!r} has negative or non-finite weights")

        fdef = FactorDef(name, scope_t, data)
        self.factors[name] = fdef
        return fdef

    def element(self, name: str) -> Element:
        """Get an element by name."""
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(f"Unknown variable {name!r}") from None

    def elements(self) -> List[Element]:
        return list(self._by_name.values())

    def factor_defs(self) -> List[FactorDef]:
        return list(self.factors.values())

    def has_star(self) -> bool:
        """Whether any range contains the unresolved sentinel."""
        return any(c.variable.has_star for c in self.collection)

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "FactorModel":
        """
        Build a model from the JSON problem format.

        Expected format:
        {
            "variables": {"A": {"values": [0, 1], "star": false}},
            "factors": {"f": {"scope": ["A"], "values": [0.3, 0.7]}}
        }
        A variable may also be given as a bare list of values.
        """
        model = FactorModel()
        for name, vdata in data["variables"].items():
            if isinstance(vdata, Mapping):
                model.add_variable(name, vdata["values"], bool(vdata.get("star", False)))
            else:
                model.add_variable(name, vdata)
        for name, fdata in data.get("factors", {}).items():
            scope = [model.element(v) for v in fdata["scope"]]
            model.add_factor(name, scope, fdata["values"])
        return model

    def __repr__(self) -> str:
        return f"FactorModel(vars={len(self.collection)}, factors={len(self.factors)})"
