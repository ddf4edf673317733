"""
sfquery/structured/errors.py

Errors raised by the query layer.
"""

from __future__ import annotations

USE_BOUNDS = "use a lazy algorithm that computes bounds, or a ranging strategy that avoids *"


class QueryError(ValueError):
    """Base class for queries that cannot be answered as asked."""


class UnresolvedSupportError(QueryError):
    """The target's range contains *, so its point distribution is undefined."""

    def __init__(self, message: str = "target range contains *; " + USE_BOUNDS):
        super().__init__(message)


class MultipleScenariosError(QueryError):
    """The solution has lower and upper bounds; a point answer is undefined."""

    def __init__(self, message: str = "this model requires lower and upper bounds; " + USE_BOUNDS):
        super().__init__(message)


class ZeroMassError(QueryError):
    """Normalization would divide by a zero (or non-finite) total mass."""


class NotATargetError(QueryError):
    """The element was not declared as a query target."""


class AlgorithmInactiveError(RuntimeError):
    """The algorithm has no completed solve to answer from."""
