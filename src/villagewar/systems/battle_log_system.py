from __future__ import annotations

import logging
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Deque, Dict, List, Optional

from villagewar.constants import LOG_BUFFER_SIZE
from villagewar.events.bus import (
    EventBus,
    EVENT_BATTLE_RESOLVED,
    EVENT_LOSSES_APPLIED,
    EVENT_SIEGE_RESOLVED,
    EVENT_UNIT_GROUP_DESTROYED,
)

logger = logging.getLogger(__name__)

_LEVELS = {"debug": logging.DEBUG, "info": logging.INFO, "warning": logging.WARNING, "error": logging.ERROR}


@dataclass(frozen=True)
class LogEvent:
    ts: float
    type: str
    payload: Dict[str, Any] = field(default_factory=dict)
    level: str = "info"


class BattleLogSystem:
    """Keeps a bounded history of combat events and mirrors each one to ``logging``."""

    def __init__(
        self,
        event_bus: EventBus,
        *,
        max_entries: int = LOG_BUFFER_SIZE,
        clock: Callable[[], float] = time.time,
    ):
        self.event_bus = event_bus
        self.clock = clock
        self.entries: Deque[LogEvent] = deque(maxlen=max_entries)
        self.event_bus.subscribe(EVENT_BATTLE_RESOLVED, self.on_battle_resolved)
        self.event_bus.subscribe(EVENT_SIEGE_RESOLVED, self.on_siege_resolved)
        self.event_bus.subscribe(EVENT_LOSSES_APPLIED, self.on_losses_applied)
        self.event_bus.subscribe(EVENT_UNIT_GROUP_DESTROYED, self.on_unit_group_destroyed)

    def log(self, event_type: str, payload: Optional[Dict[str, Any]] = None, level: str = "info") -> LogEvent:
        entry = LogEvent(ts=self.clock(), type=event_type, payload=dict(payload or {}), level=level)
        self.entries.append(entry)
        logger.log(_LEVELS.get(level, logging.INFO), "%s %s", event_type, entry.payload)
        return entry

    def events(self, event_type: Optional[str] = None) -> List[LogEvent]:
        return [e for e in self.entries if event_type is None or e.type == event_type]

    def clear(self) -> None:
        self.entries.clear()

    def on_battle_resolved(self, sender, **kwargs) -> None:
        result = kwargs.get("result")
        if result is None:
            return
        self.log(
            EVENT_BATTLE_RESOLVED,
            {
                "group_entity": kwargs.get("group_entity"),
                "mission_id": kwargs.get("mission_id"),
                "winner": result.winner.value,
                "ticks": result.ticks,
                "losses": kwargs.get("losses", 0),
            },
        )

    def on_siege_resolved(self, sender, **kwargs) -> None:
        result = kwargs.get("result")
        if result is None:
            return
        self.log(
            EVENT_SIEGE_RESOLVED,
            {
                "fortress_entity": kwargs.get("fortress_entity"),
                "outcome": result.outcome.value,
                "rounds": result.rounds,
                "inner_steps": len(result.inner_timeline),
                "destroyed": list(kwargs.get("destroyed", [])),
            },
        )

    def on_losses_applied(self, sender, **kwargs) -> None:
        notice = kwargs.get("notice")
        self.log(
            EVENT_LOSSES_APPLIED,
            {
                "group_entity": kwargs.get("group_entity"),
                "losses": kwargs.get("losses", 0),
                "remaining": kwargs.get("remaining"),
                "message": notice.message if notice is not None else None,
            },
        )

    def on_unit_group_destroyed(self, sender, **kwargs) -> None:
        notice = kwargs.get("notice")
        self.log(
            EVENT_UNIT_GROUP_DESTROYED,
            {
                "group_entity": kwargs.get("group_entity"),
                "message": notice.message if notice is not None else None,
            },
            level="warning",
        )
