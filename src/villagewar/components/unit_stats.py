from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from types import MappingProxyType
from typing import Any, Dict, Mapping

from villagewar.constants import ARCHER, WARRIOR
from villagewar.errors import InvalidInput
from villagewar.utils.validation import require_non_negative


@dataclass(frozen=True)
class UnitStats:
    """Combat coefficients for one unit type.

    Fields:
        skirmish_attack / skirmish_defence: ranged exchange before the lines meet.
        melee_attack / melee_defence: close combat once the lines are engaged.
        pursuit: power used to cut down a broken enemy.
        morale_per_100: morale contributed by every 100 soldiers of this type.
    """
    skirmish_attack: float
    skirmish_defence: float
    melee_attack: float
    melee_defence: float
    pursuit: float
    morale_per_100: float

    def __post_init__(self) -> None:
        for name, value in asdict(self).items():
            require_non_negative(name, value)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UnitStats":
        if not isinstance(data, Mapping):
            raise InvalidInput(f"unit stats must be a mapping, got {type(data).__name__}")
        unknown = sorted(set(data) - {f.name for f in fields(cls)})
        if unknown:
            raise InvalidInput(f"unknown unit stat field(s): {', '.join(unknown)}")
        try:
            return cls(
                skirmish_attack=data["skirmish_attack"],
                skirmish_defence=data["skirmish_defence"],
                melee_attack=data["melee_attack"],
                melee_defence=data["melee_defence"],
                pursuit=data["pursuit"],
                morale_per_100=data["morale_per_100"],
            )
        except KeyError as exc:
            raise InvalidInput(f"unit stats missing field {exc.args[0]!r}") from exc

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


DEFAULT_WARRIOR_STATS = UnitStats(
    skirmish_attack=0,
    skirmish_defence=15,
    melee_attack=15,
    melee_defence=12,
    pursuit=3,
    morale_per_100=110,
)

DEFAULT_ARCHER_STATS = UnitStats(
    skirmish_attack=30,
    skirmish_defence=6,
    melee_attack=5,
    melee_defence=5,
    pursuit=4,
    morale_per_100=80,
)


def _default_types() -> Mapping[str, UnitStats]:
    return {WARRIOR: DEFAULT_WARRIOR_STATS, ARCHER: DEFAULT_ARCHER_STATS}


@dataclass(frozen=True)
class UnitStatTable:
    """Read-only lookup of UnitStats by unit type, shared across resolutions."""
    types: Mapping[str, UnitStats] = field(default_factory=_default_types)

    def __post_init__(self) -> None:
        # Freeze a private copy so callers cannot mutate a table in use.
        object.__setattr__(self, "types", MappingProxyType(dict(self.types)))

    def __contains__(self, unit_type: object) -> bool:
        return unit_type in self.types

    def for_type(self, unit_type: str) -> UnitStats:
        try:
            return self.types[unit_type]
        except KeyError:
            raise InvalidInput(f"no unit stats for unit type {unit_type!r}") from None

    @classmethod
    def from_dict(cls, data: Mapping[str, Mapping[str, Any]]) -> "UnitStatTable":
        if not isinstance(data, Mapping):
            raise InvalidInput("unit stats must be a mapping of unit type to stats")
        return cls({str(name): UnitStats.from_dict(values) for name, values in data.items()})

    def to_dict(self) -> Dict[str, Dict[str, float]]:
        return {name: stats.to_dict() for name, stats in self.types.items()}
