from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # Use weak=False to retain strong reference to bound methods so systems not kept in a variable still receive events.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# MISSIONS & FIELD BATTLES
# ============================================================================
EVENT_MISSION_BATTLE_REQUEST = "mission_battle_request"  # payload: group_entity=int, mission_id=Any, enemy=Division|Mapping|None
EVENT_BATTLE_RESOLVED = "battle_resolved"                # payload: group_entity=int, mission_id=Any, result=BattleResult, losses=int


# ============================================================================
# FORTRESSES & SIEGES
# ============================================================================
EVENT_SIEGE_REQUEST = "siege_request"      # payload: fortress_entity=int, attackers=int
EVENT_SIEGE_RESOLVED = "siege_resolved"    # payload: fortress_entity=int, result=SiegeBattleResult, destroyed=list[int] (group entities)


# ============================================================================
# CASUALTIES
# ============================================================================
EVENT_LOSSES_APPLIED = "losses_applied"              # payload: group_entity=int, losses=int, remaining=int, notice=LossNotice|None
EVENT_UNIT_GROUP_DESTROYED = "unit_group_destroyed"  # payload: group_entity=int, notice=LossNotice
