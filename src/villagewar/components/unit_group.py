from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, replace
from typing import Iterable, Sequence, Tuple

from villagewar.components.division import Division
from villagewar.components.squad import Squad
from villagewar.constants import GROUP_ROLE_SHARE_PCT, UNIT_TYPES


@dataclass(frozen=True)
class UnitGroup:
    """A banner: an ordered collection of squads belonging to one owner."""
    id: int
    owner_id: int
    squads: Tuple[Squad, ...] = ()
    name: str = ""
    custom_named: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "squads", tuple(self.squads))
        if not self.name:
            object.__setattr__(self, "name", generate_group_name(self.id, self.squads))

    @property
    def total_strength(self) -> int:
        return sum(s.current_size for s in self.squads)

    @property
    def is_destroyed(self) -> bool:
        return self.total_strength <= 0

    def count_by_type(self, unit_type: str) -> int:
        return sum(s.current_size for s in self.squads if s.unit_type == unit_type)

    def to_division(self) -> Division:
        types = list(UNIT_TYPES) + [s.unit_type for s in self.squads if s.unit_type not in UNIT_TYPES]
        return Division({t: self.count_by_type(t) for t in dict.fromkeys(types)})

    def with_squads(self, squads: Iterable[Squad]) -> "UnitGroup":
        squads = tuple(squads)
        if self.custom_named:
            return replace(self, squads=squads)
        return replace(self, squads=squads, name=generate_group_name(self.id, squads))


def _ordinal(n: int) -> str:
    suffixes = ["th", "st", "nd", "rd"]
    v = n % 100
    if 11 <= v <= 13:
        return f"{n}th"
    return f"{n}{suffixes[n % 10] if n % 10 < 4 else 'th'}"


def group_role(squads: Sequence[Squad]) -> str:
    if not squads:
        return "Mixed"
    by_type = Counter(s.unit_type for s in squads)
    for unit_type, label in (("warrior", "Warrior"), ("archer", "Archer")):
        if by_type[unit_type] / len(squads) * 100 >= GROUP_ROLE_SHARE_PCT:
            return label
    return "Mixed"


def group_composition(squads: Sequence[Squad]) -> str:
    """e.g. "3 Warrior, 1 Archer": highest squad count first, ties alphabetical."""
    counts = Counter(s.unit_type.capitalize() for s in squads)
    entries = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
    return ", ".join(f"{count} {label}" for label, count in entries)


def generate_group_name(group_id: int, squads: Sequence[Squad]) -> str:
    composition = group_composition(squads)
    suffix = f" ({composition})" if composition else ""
    return f"{_ordinal(group_id)} {group_role(squads)} Banner{suffix}"
