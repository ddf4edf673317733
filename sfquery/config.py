"""
sfquery/config.py

Query algorithm configuration.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Union

from sfquery.solver.ordering import HEURISTICS


@dataclass(frozen=True)
class QueryConfig:
    """
    Settings shared by the structured query algorithms.

    Attributes:
        elimination_heuristic: "min_fill" or "min_degree"
        zero_mass_tolerance: Total mass at or below this is treated as zero
        anytime_interval: Seconds the anytime loop waits between solves
    """
    elimination_heuristic: str = "min_fill"
    zero_mass_tolerance: float = 0.0
    anytime_interval: float = 0.0

    def __post_init__(self):
        if self.elimination_heuristic not in HEURISTICS:
            raise ValueError(
                f"Unknown elimination heuristic {self.elimination_heuristic!r}; "
                f"expected one of {sorted(HEURISTICS)}"
            )
        if self.zero_mass_tolerance < 0:
            raise ValueError("zero_mass_tolerance must be non-negative")
        if self.anytime_interval < 0:
            raise ValueError("anytime_interval must be non-negative")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "QueryConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        return cls(**dict(data))

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "QueryConfig":
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))
