from __future__ import annotations

import logging
import random
from typing import Optional

from esper import World

from villagewar.combat.field import resolve_field_battle
from villagewar.combat.losses import LossNotice, calculate_group_losses, distribute_losses
from villagewar.components.battle_result import BattleResult
from villagewar.components.unit_group import UnitGroup
from villagewar.config import CombatConfig
from villagewar.errors import NotFound
from villagewar.events.bus import (
    EventBus,
    EVENT_BATTLE_RESOLVED,
    EVENT_LOSSES_APPLIED,
    EVENT_MISSION_BATTLE_REQUEST,
    EVENT_UNIT_GROUP_DESTROYED,
)
from villagewar.missions import mission_enemy

logger = logging.getLogger(__name__)


class BattleSystem:
    """Resolves mission battles for a deployed unit group and writes its losses back.

    Subscribes to EVENT_MISSION_BATTLE_REQUEST. The enemy force is taken from
    the ``enemy`` payload or, when absent, from the mission's static
    composition. Emits EVENT_BATTLE_RESOLVED, then EVENT_LOSSES_APPLIED or
    EVENT_UNIT_GROUP_DESTROYED for the group.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        config: Optional[CombatConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        self.world = world
        self.event_bus = event_bus
        self.config = config or getattr(world, "combat_config", None) or CombatConfig()
        self.rng = rng or getattr(world, "random", None) or random.Random()
        self.event_bus.subscribe(EVENT_MISSION_BATTLE_REQUEST, self.on_mission_battle_request)

    def on_mission_battle_request(self, sender, **kwargs) -> None:
        group_entity = kwargs.get("group_entity")
        mission_id = kwargs.get("mission_id")
        enemy = kwargs.get("enemy")
        if group_entity is None:
            return
        group = self._group(group_entity)
        if enemy is None:
            enemy = mission_enemy(mission_id)

        result = resolve_field_battle(
            group.to_division(), enemy, self.config.stats, self.config.battle, self.rng
        )
        losses = self.apply_result(group_entity, group, result)
        self.event_bus.emit(
            EVENT_BATTLE_RESOLVED,
            group_entity=group_entity,
            mission_id=mission_id,
            result=result,
            losses=losses,
        )

    def apply_result(self, group_entity: int, group: UnitGroup, result: BattleResult) -> int:
        """Write the attacking side's losses from ``result`` onto the group; return the loss count."""
        losses = calculate_group_losses(result.a_initial.total, result.a_final.total)
        updated = distribute_losses(group, losses, self.rng)
        if updated.is_destroyed:
            notice = LossNotice(group.id, group.name, f"{group.name} was decimated in the battle.", destroyed=True)
            self.world.delete_entity(group_entity, immediate=True)
            logger.info("%s destroyed after losing %d soldiers", group.name, losses)
            self.event_bus.emit(EVENT_UNIT_GROUP_DESTROYED, group_entity=group_entity, notice=notice)
            return losses

        self.world.add_component(group_entity, updated)
        logger.info("%s lost %d soldiers, %d remain", group.name, losses, updated.total_strength)
        self.event_bus.emit(
            EVENT_LOSSES_APPLIED,
            group_entity=group_entity,
            losses=losses,
            remaining=updated.total_strength,
            notice=None,
        )
        return losses

    def _group(self, group_entity: int) -> UnitGroup:
        try:
            return self.world.component_for_entity(group_entity, UnitGroup)
        except KeyError:
            raise NotFound(f"unit group entity {group_entity} does not exist") from None
