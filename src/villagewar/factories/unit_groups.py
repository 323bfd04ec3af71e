from __future__ import annotations

from typing import List, Sequence, Tuple

from esper import World

from villagewar.components.squad import Squad
from villagewar.components.unit_group import UnitGroup
from villagewar.constants import DEFAULT_SQUAD_SIZE
from villagewar.errors import InvalidInput


def next_squad_ids(world: World, count: int) -> List[int]:
    """Reserve ``count`` squad ids from the world's running sequence."""
    start = getattr(world, "squad_seq", 1)
    setattr(world, "squad_seq", start + count)
    return list(range(start, start + count))


def build_squads(
    world: World,
    squad_types: Sequence[str],
    *,
    start_empty: bool = False,
) -> Tuple[Squad, ...]:
    """One full squad (or an empty one when ``start_empty``) per entry of ``squad_types``."""
    config = getattr(world, "combat_config", None)
    if config is not None:
        for unit_type in squad_types:
            if unit_type not in config.stats:
                raise InvalidInput(f"unknown unit type {unit_type!r}")
    ids = next_squad_ids(world, len(squad_types))
    size = 0 if start_empty else DEFAULT_SQUAD_SIZE
    return tuple(
        Squad(id=squad_id, unit_type=unit_type, current_size=size, max_size=DEFAULT_SQUAD_SIZE)
        for squad_id, unit_type in zip(ids, squad_types)
    )


def create_unit_group(
    world: World,
    owner_id: int,
    squad_types: Sequence[str],
    *,
    name: str = "",
    start_empty: bool = False,
) -> int:
    """Spawn a unit group entity; the group's id is its entity id."""
    squads = build_squads(world, squad_types, start_empty=start_empty)
    entity = world.create_entity()
    world.add_component(
        entity,
        UnitGroup(id=entity, owner_id=owner_id, squads=squads, name=name, custom_named=bool(name)),
    )
    return entity
