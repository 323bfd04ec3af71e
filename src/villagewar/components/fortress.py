from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Callable, Dict, List, Sequence

from villagewar.constants import (
    FORTRESS_MAX_BUILDING_LEVEL,
    GARRISON_HUT_CAPACITY_PER_LEVEL,
    PALISADE_HP_PER_LEVEL,
    WATCH_POST_SLOTS_PER_LEVEL,
)
from villagewar.errors import InvalidInput
from villagewar.utils.validation import require_non_negative


@dataclass(frozen=True)
class FortressState:
    """Snapshot of a fortified position handed to the siege resolver.

    Fields:
        fort_hp: Structural points of the outer walls.
        archer_slots: Upper bound on defending archers able to shoot from the walls.
        garrison_warriors / garrison_archers: Defenders stationed inside.
    """
    fort_hp: float
    archer_slots: int
    garrison_warriors: float = 0
    garrison_archers: float = 0

    def __post_init__(self) -> None:
        require_non_negative("fort_hp", self.fort_hp)
        require_non_negative("archer_slots", self.archer_slots)
        require_non_negative("garrison_warriors", self.garrison_warriors)
        require_non_negative("garrison_archers", self.garrison_archers)

    @property
    def garrison_total(self) -> float:
        return self.garrison_warriors + self.garrison_archers

    def with_garrison(self, warriors: float, archers: float) -> "FortressState":
        return replace(self, garrison_warriors=warriors, garrison_archers=archers)


@dataclass(frozen=True)
class FortressStats:
    fort_hp: int = 0
    archer_slots: int = 0
    garrison_warriors: int = 0
    garrison_archers: int = 0
    stored_squads: int = 1


@dataclass(frozen=True)
class FortressBuilding:
    id: str
    name: str
    description: str
    effect: Callable[[int], Dict[str, int]] = field(compare=False, repr=False)
    level: int = 1
    max_level: int = FORTRESS_MAX_BUILDING_LEVEL

    def upgraded(self) -> "FortressBuilding":
        if self.level >= self.max_level:
            raise InvalidInput(f"{self.name} is already at max level {self.max_level}")
        return replace(self, level=self.level + 1)


def default_fortress_buildings() -> List[FortressBuilding]:
    return [
        FortressBuilding(
            id="palisade_wall",
            name="Palisade Wall",
            description=f"+{PALISADE_HP_PER_LEVEL} Fort HP",
            effect=lambda level: {"fort_hp": PALISADE_HP_PER_LEVEL * level},
        ),
        FortressBuilding(
            id="watch_post",
            name="Watch Post",
            description=f"+{WATCH_POST_SLOTS_PER_LEVEL} Archer slots",
            effect=lambda level: {"archer_slots": WATCH_POST_SLOTS_PER_LEVEL * level},
        ),
        FortressBuilding(
            id="garrison_hut",
            name="Garrison Hut",
            description=f"+{GARRISON_HUT_CAPACITY_PER_LEVEL} Garrison capacity",
            effect=lambda level: {
                "garrison_warriors": GARRISON_HUT_CAPACITY_PER_LEVEL * level,
                "garrison_archers": GARRISON_HUT_CAPACITY_PER_LEVEL * level,
            },
        ),
    ]


def calculate_fortress_stats(buildings: Sequence[FortressBuilding]) -> FortressStats:
    totals = {"fort_hp": 0, "archer_slots": 0, "garrison_warriors": 0, "garrison_archers": 0, "stored_squads": 1}
    for building in buildings:
        for key, value in building.effect(building.level).items():
            if key in totals:
                totals[key] += value
    return FortressStats(**totals)


@dataclass
class Fortress:
    """Component for a fortress entity: its buildings and the stationed garrison."""
    name: str
    buildings: List[FortressBuilding] = field(default_factory=default_fortress_buildings)
    garrison_entities: List[int] = field(default_factory=list)

    def stats(self) -> FortressStats:
        return calculate_fortress_stats(self.buildings)
