from __future__ import annotations

from typing import Iterable, Optional, Sequence

from esper import World

from villagewar.components.fortress import Fortress, FortressBuilding, default_fortress_buildings
from villagewar.components.unit_group import UnitGroup
from villagewar.errors import NotFound


def create_fortress(
    world: World,
    name: str,
    *,
    buildings: Optional[Sequence[FortressBuilding]] = None,
    garrison: Iterable[int] = (),
) -> int:
    fortress = Fortress(
        name=name,
        buildings=list(buildings) if buildings is not None else default_fortress_buildings(),
    )
    entity = world.create_entity(fortress)
    for group_entity in garrison:
        station_unit_group(world, entity, group_entity)
    return entity


def station_unit_group(world: World, fortress_entity: int, group_entity: int) -> None:
    """Move a unit group into a fortress's garrison."""
    try:
        fortress = world.component_for_entity(fortress_entity, Fortress)
    except KeyError:
        raise NotFound(f"fortress entity {fortress_entity} does not exist") from None
    try:
        world.component_for_entity(group_entity, UnitGroup)
    except KeyError:
        raise NotFound(f"unit group entity {group_entity} does not exist") from None
    if group_entity not in fortress.garrison_entities:
        fortress.garrison_entities.append(group_entity)


def withdraw_unit_group(world: World, fortress_entity: int, group_entity: int) -> None:
    try:
        fortress = world.component_for_entity(fortress_entity, Fortress)
    except KeyError:
        raise NotFound(f"fortress entity {fortress_entity} does not exist") from None
    if group_entity in fortress.garrison_entities:
        fortress.garrison_entities.remove(group_entity)


def upgrade_building(world: World, fortress_entity: int, building_id: str) -> FortressBuilding:
    try:
        fortress = world.component_for_entity(fortress_entity, Fortress)
    except KeyError:
        raise NotFound(f"fortress entity {fortress_entity} does not exist") from None
    for index, building in enumerate(fortress.buildings):
        if building.id == building_id:
            fortress.buildings[index] = building.upgraded()
            return fortress.buildings[index]
    raise NotFound(f"fortress has no building {building_id!r}")
