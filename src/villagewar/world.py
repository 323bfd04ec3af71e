import random

from esper import World

from villagewar.config import CombatConfig
from villagewar.events.bus import EventBus


def create_world(
    event_bus: EventBus,
    *,
    config: CombatConfig | None = None,
    rng: random.Random | None = None,
) -> World:
    """Create a world carrying the shared combat config, random source and event bus."""
    world = World()
    setattr(world, "random", rng or random.Random())
    setattr(world, "combat_config", config or CombatConfig())
    setattr(world, "event_bus", event_bus)
    setattr(world, "squad_seq", 1)
    return world
