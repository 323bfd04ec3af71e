from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Hashable

from villagewar.components.division import Division
from villagewar.errors import NotFound


@dataclass(frozen=True)
class MissionTemplate:
    """A combat mission with a fixed enemy force."""
    id: int
    name: str
    enemy: Division


DEFAULT_MISSIONS: Dict[int, MissionTemplate] = {
    m.id: m
    for m in (
        MissionTemplate(1, "Scout the Forest", Division.of(warrior=10, archer=0)),
        MissionTemplate(2, "Secure the Quarry Road", Division.of(warrior=30, archer=10)),
        MissionTemplate(3, "Sweep the Northern Ridge", Division.of(warrior=50, archer=10)),
    )
}


def mission_enemy(mission_id: Hashable, missions: Dict[int, MissionTemplate] = DEFAULT_MISSIONS) -> Division:
    try:
        return missions[mission_id].enemy
    except KeyError:
        raise NotFound(f"unknown mission {mission_id!r}") from None
