"""
sfquery/model/collection.py

Registry mapping elements to problem components.

Variable ids are allocated in registration order, so the canonical order
of a product table follows the order in which elements were declared.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List

from sfquery.model.element import Element
from sfquery.model.values import ValueSet
from sfquery.model.variable import Variable


@dataclass(frozen=True)
class ProblemComponent:
    """An element together with the variable that represents it."""
    element: Element
    variable: Variable

    @property
    def name(self) -> str:
        return self.element.name


@dataclass
class ComponentCollection:
    """
    Registry for element components.

    Attributes:
        components: Element -> component, in registration order
        next_var_id: Next available variable ID
    """
    components: Dict[Element, ProblemComponent] = field(default_factory=dict)
    next_var_id: int = 0

    def alloc_var_id(self) -> int:
        """Allocate a new variable ID."""
        vid = self.next_var_id
        self.next_var_id += 1
        return vid

    def add(self, element: Element, values: Iterable[Any], has_star: bool = False) -> ProblemComponent:
        """
        Register an element with its range.

        Raises:
            ValueError: If the element is already registered
        """
        if element in self.components:
            raise ValueError(f"{element} is already registered")
        value_set = ValueSet.with_values(values, has_star)
        variable = Variable(self.alloc_var_id(), element.name, value_set)
        component = ProblemComponent(element, variable)
        self.components[element] = component
        return component

    def __getitem__(self, element: Element) -> ProblemComponent:
        try:
            return self.components[element]
        except KeyError:
            raise KeyError(f"{element} has no component in this collection") from None

    def __contains__(self, element: Element) -> bool:
        return element in self.components

    def __iter__(self) -> Iterator[ProblemComponent]:
        return iter(self.components.values())

    def __len__(self) -> int:
        return len(self.components)

    def variable(self, element: Element) -> Variable:
        """Get the variable of an element."""
        return self[element].variable

    def variables(self) -> List[Variable]:
        return [c.variable for c in self.components.values()]
