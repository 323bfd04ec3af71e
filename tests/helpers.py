from __future__ import annotations

from typing import Sequence

from villagewar.components.battle_params import BattleParameters
from villagewar.components.squad import Squad
from villagewar.components.unit_group import UnitGroup


def make_group(
    sizes: Sequence[int],
    unit_types: Sequence[str] | None = None,
    *,
    group_id: int = 1,
    owner_id: int = 0,
) -> UnitGroup:
    """Build a unit group with one squad per entry of ``sizes`` (all warriors unless typed)."""
    unit_types = unit_types or ["warrior"] * len(sizes)
    squads = [
        Squad(id=index + 1, unit_type=unit_type, current_size=size)
        for index, (size, unit_type) in enumerate(zip(sizes, unit_types))
    ]
    return UnitGroup(id=group_id, owner_id=owner_id, squads=tuple(squads))


def noiseless_params(**overrides) -> BattleParameters:
    return BattleParameters(**{"rng_variance": 0.0, **overrides})
