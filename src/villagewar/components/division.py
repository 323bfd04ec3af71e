from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Tuple

from villagewar.utils.validation import require_non_negative


@dataclass(frozen=True)
class Division:
    """An unstructured force: soldier counts per unit type.

    Counts are validated non-negative on construction. While a resolution is
    running they become fractional, since casualties are spread across types
    in proportion to each type's share of the force.
    """
    counts: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        checked = {str(t): require_non_negative(f"{t} count", c) for t, c in self.counts.items()}
        object.__setattr__(self, "counts", MappingProxyType(checked))

    @classmethod
    def of(cls, **counts: float) -> "Division":
        return cls(counts)

    def count(self, unit_type: str) -> float:
        return self.counts.get(unit_type, 0.0)

    def items(self) -> Iterator[Tuple[str, float]]:
        return iter(self.counts.items())

    @property
    def total(self) -> float:
        return max(0.0, sum(self.counts.values()))

    @property
    def is_empty(self) -> bool:
        return self.total <= 0

    def apply_casualties(self, losses: float) -> "Division":
        """Return a new Division with ``losses`` removed proportionally by type."""
        strength = self.total
        if strength <= 0 or losses <= 0:
            return self
        if losses >= strength:
            return Division({unit_type: 0.0 for unit_type in self.counts})
        remaining: Dict[str, float] = {}
        for unit_type, count in self.counts.items():
            share = count / strength
            remaining[unit_type] = max(0.0, count - losses * share)
        return Division(remaining)

    def to_dict(self) -> Dict[str, float]:
        return dict(self.counts)
