import random

import pytest

from villagewar.components.fortress import Fortress
from villagewar.components.siege_result import SiegeOutcome
from villagewar.components.unit_group import UnitGroup
from villagewar.errors import NotFound
from villagewar.events.bus import (
    EventBus,
    EVENT_LOSSES_APPLIED,
    EVENT_SIEGE_REQUEST,
    EVENT_SIEGE_RESOLVED,
    EVENT_UNIT_GROUP_DESTROYED,
)
from villagewar.factories.fortresses import create_fortress, station_unit_group, upgrade_building
from villagewar.factories.unit_groups import create_unit_group
from villagewar.systems.siege_system import SiegeSystem
from villagewar.world import create_world


def _setup():
    bus = EventBus()
    world = create_world(bus, rng=random.Random(3))
    SiegeSystem(world, bus)
    events = {EVENT_SIEGE_RESOLVED: [], EVENT_LOSSES_APPLIED: [], EVENT_UNIT_GROUP_DESTROYED: []}
    for name, bucket in events.items():
        bus.subscribe(name, lambda s, bucket=bucket, **k: bucket.append(k))
    return bus, world, events


def test_fortress_state_comes_from_buildings_and_garrison():
    bus, world, _ = _setup()
    group = create_unit_group(world, owner_id=1, squad_types=["warrior", "warrior", "archer"])
    fortress_ent = create_fortress(world, "Ridge Fort", garrison=[group])
    fortress = world.component_for_entity(fortress_ent, Fortress)
    state = SiegeSystem.fortress_state(fortress, [world.component_for_entity(group, UnitGroup)])
    assert state.fort_hp == 400
    assert state.archer_slots == 5
    assert state.garrison_warriors == 20
    assert state.garrison_archers == 10


def test_strong_walls_hold_without_garrison_losses():
    bus, world, events = _setup()
    group = create_unit_group(world, owner_id=1, squad_types=["warrior", "warrior", "archer"])
    fortress_ent = create_fortress(world, "Stone Hill", garrison=[group])
    for _ in range(4):
        upgrade_building(world, fortress_ent, "palisade_wall")
    upgrade_building(world, fortress_ent, "watch_post")

    bus.emit(EVENT_SIEGE_REQUEST, fortress_entity=fortress_ent, attackers=50)

    resolved = events[EVENT_SIEGE_RESOLVED][0]
    assert resolved["result"].outcome is SiegeOutcome.WALLS_HOLD
    assert resolved["destroyed"] == []
    assert not events[EVENT_LOSSES_APPLIED]
    assert world.component_for_entity(group, UnitGroup).total_strength == 30


def test_fallen_fortress_loses_its_garrison():
    bus, world, events = _setup()
    group = create_unit_group(world, owner_id=1, squad_types=["warrior", "warrior", "archer"])
    fortress_ent = create_fortress(world, "Old Mill", garrison=[group])

    bus.emit(EVENT_SIEGE_REQUEST, fortress_entity=fortress_ent, attackers=50)

    result = events[EVENT_SIEGE_RESOLVED][0]["result"]
    assert result.outcome is SiegeOutcome.FALLS
    assert result.had_inner_battle
    assert events[EVENT_SIEGE_RESOLVED][0]["destroyed"] == [group]
    assert events[EVENT_UNIT_GROUP_DESTROYED][0]["group_entity"] == group
    assert world.component_for_entity(fortress_ent, Fortress).garrison_entities == []
    assert group not in {ent for ent, _ in world.get_component(UnitGroup)}


def test_garrison_that_holds_takes_partial_losses():
    bus, world, events = _setup()
    group = create_unit_group(world, owner_id=1, squad_types=["warrior"] * 10 + ["archer"])
    fortress_ent = create_fortress(world, "Keep", garrison=[group])

    bus.emit(EVENT_SIEGE_REQUEST, fortress_entity=fortress_ent, attackers=30)

    result = events[EVENT_SIEGE_RESOLVED][0]["result"]
    assert result.outcome is SiegeOutcome.INNER_HOLDS
    remaining = world.component_for_entity(group, UnitGroup).total_strength
    assert 100 < remaining < 110
    applied = events[EVENT_LOSSES_APPLIED][0]
    assert applied["losses"] == 110 - remaining
    assert applied["notice"].message.endswith("losses defending the fortress.")


def test_missing_fortress_or_garrison_is_not_found():
    bus, world, _ = _setup()
    with pytest.raises(NotFound):
        bus.emit(EVENT_SIEGE_REQUEST, fortress_entity=404, attackers=10)
    fortress_ent = create_fortress(world, "Empty")
    with pytest.raises(NotFound):
        station_unit_group(world, fortress_ent, 777)
    world.component_for_entity(fortress_ent, Fortress).garrison_entities.append(777)
    with pytest.raises(NotFound):
        bus.emit(EVENT_SIEGE_REQUEST, fortress_entity=fortress_ent, attackers=10)
