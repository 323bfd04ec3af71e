import logging
import random

from villagewar.components.division import Division
from villagewar.events.bus import (
    EventBus,
    EVENT_BATTLE_RESOLVED,
    EVENT_LOSSES_APPLIED,
    EVENT_MISSION_BATTLE_REQUEST,
    EVENT_UNIT_GROUP_DESTROYED,
)
from villagewar.factories.unit_groups import create_unit_group
from villagewar.systems.battle_log_system import BattleLogSystem
from villagewar.systems.battle_system import BattleSystem
from villagewar.world import create_world


def test_log_records_combat_events_in_order():
    bus = EventBus()
    world = create_world(bus, rng=random.Random(8))
    BattleSystem(world, bus)
    log = BattleLogSystem(bus, clock=lambda: 123.0)
    group = create_unit_group(world, owner_id=1, squad_types=["warrior"] * 10)

    bus.emit(EVENT_MISSION_BATTLE_REQUEST, group_entity=group, mission_id=1)

    assert [e.type for e in log.events()] == [EVENT_LOSSES_APPLIED, EVENT_BATTLE_RESOLVED]
    resolved = log.events(EVENT_BATTLE_RESOLVED)[0]
    assert resolved.ts == 123.0
    assert resolved.payload["winner"] == "attacker"
    assert resolved.payload["mission_id"] == 1


def test_destroyed_groups_are_logged_as_warnings(caplog):
    bus = EventBus()
    world = create_world(bus, rng=random.Random(8))
    BattleSystem(world, bus)
    log = BattleLogSystem(bus)
    group = create_unit_group(world, owner_id=1, squad_types=["archer"])

    with caplog.at_level(logging.WARNING, logger="villagewar.systems.battle_log_system"):
        bus.emit(EVENT_MISSION_BATTLE_REQUEST, group_entity=group, enemy=Division.of(warrior=400, archer=100))

    destroyed = log.events(EVENT_UNIT_GROUP_DESTROYED)
    assert destroyed and destroyed[0].level == "warning"
    assert "was decimated in the battle." in destroyed[0].payload["message"]
    assert any(EVENT_UNIT_GROUP_DESTROYED in record.getMessage() for record in caplog.records)


def test_buffer_is_bounded():
    bus = EventBus()
    log = BattleLogSystem(bus, max_entries=3)
    for i in range(5):
        log.log("custom", {"i": i})
    assert [e.payload["i"] for e in log.events()] == [2, 3, 4]
    log.clear()
    assert log.events() == []
