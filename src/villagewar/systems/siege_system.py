from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from esper import World

from villagewar.combat.losses import apply_garrison_losses, garrison_losses
from villagewar.combat.siege import resolve_siege
from villagewar.components.fortress import Fortress, FortressState
from villagewar.components.siege_result import SiegeBattleResult
from villagewar.components.unit_group import UnitGroup
from villagewar.config import CombatConfig
from villagewar.constants import ARCHER, WARRIOR
from villagewar.errors import NotFound
from villagewar.events.bus import (
    EventBus,
    EVENT_LOSSES_APPLIED,
    EVENT_SIEGE_REQUEST,
    EVENT_SIEGE_RESOLVED,
    EVENT_UNIT_GROUP_DESTROYED,
)

logger = logging.getLogger(__name__)


class SiegeSystem:
    """Resolves assaults on fortresses and applies casualties to the garrison.

    The fortress state handed to the resolver is derived from the fortress's
    buildings and the unit groups stationed in it. Destroyed groups are
    removed from the garrison and the world.
    """

    def __init__(self, world: World, event_bus: EventBus, *, config: Optional[CombatConfig] = None):
        self.world = world
        self.event_bus = event_bus
        self.config = config or getattr(world, "combat_config", None) or CombatConfig()
        self.event_bus.subscribe(EVENT_SIEGE_REQUEST, self.on_siege_request)

    def on_siege_request(self, sender, **kwargs) -> None:
        fortress_entity = kwargs.get("fortress_entity")
        attackers = kwargs.get("attackers", 0)
        if fortress_entity is None:
            raise NotFound("siege request without a fortress")
        fortress = self._fortress(fortress_entity)
        garrison = self._garrison(fortress)

        state = self.fortress_state(fortress, [group for _, group in garrison])
        result = resolve_siege(attackers, state, self.config.stats, self.config.siege)
        destroyed = self.apply_result(fortress, garrison, result)
        self.event_bus.emit(
            EVENT_SIEGE_RESOLVED,
            fortress_entity=fortress_entity,
            result=result,
            destroyed=destroyed,
        )

    @staticmethod
    def fortress_state(fortress: Fortress, groups: List[UnitGroup]) -> FortressState:
        stats = fortress.stats()
        return FortressState(
            fort_hp=stats.fort_hp,
            archer_slots=stats.archer_slots,
            garrison_warriors=sum(g.count_by_type(WARRIOR) for g in groups),
            garrison_archers=sum(g.count_by_type(ARCHER) for g in groups),
        )

    def apply_result(
        self,
        fortress: Fortress,
        garrison: List[Tuple[int, UnitGroup]],
        result: SiegeBattleResult,
    ) -> List[int]:
        """Trim garrison squads by the losses in ``result``; return destroyed group entities."""
        warrior_losses, archer_losses = garrison_losses(result)
        if warrior_losses == 0 and archer_losses == 0:
            return []
        entities: Dict[int, int] = {group.id: entity for entity, group in garrison}
        casualties = apply_garrison_losses([group for _, group in garrison], warrior_losses, archer_losses)
        notices = {notice.group_id: notice for notice in casualties.notices}

        destroyed: List[int] = []
        for group in casualties.groups:
            entity = entities[group.id]
            if group.id in casualties.destroyed:
                destroyed.append(entity)
                fortress.garrison_entities.remove(entity)
                self.world.delete_entity(entity, immediate=True)
                self.event_bus.emit(EVENT_UNIT_GROUP_DESTROYED, group_entity=entity, notice=notices[group.id])
                continue
            self.world.add_component(entity, group)
            lost = casualties.losses.get(group.id, 0)
            if lost:
                self.event_bus.emit(
                    EVENT_LOSSES_APPLIED,
                    group_entity=entity,
                    losses=lost,
                    remaining=group.total_strength,
                    notice=notices.get(group.id),
                )
        logger.info(
            "%s garrison lost %d warriors and %d archers, %d groups destroyed",
            fortress.name,
            warrior_losses,
            archer_losses,
            len(destroyed),
        )
        return destroyed

    def _fortress(self, fortress_entity: int) -> Fortress:
        try:
            return self.world.component_for_entity(fortress_entity, Fortress)
        except KeyError:
            raise NotFound(f"fortress entity {fortress_entity} does not exist") from None

    def _garrison(self, fortress: Fortress) -> List[Tuple[int, UnitGroup]]:
        garrison = []
        for entity in fortress.garrison_entities:
            try:
                garrison.append((entity, self.world.component_for_entity(entity, UnitGroup)))
            except KeyError:
                raise NotFound(f"garrisoned unit group entity {entity} does not exist") from None
        return garrison
