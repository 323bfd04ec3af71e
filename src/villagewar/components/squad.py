from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from villagewar.constants import DEFAULT_SQUAD_SIZE, SQUAD_ORANGE_RATIO, SQUAD_YELLOW_RATIO
from villagewar.errors import InvalidInput


class SquadHealth(Enum):
    HEALTHY = "healthy"
    YELLOW = "yellow"
    ORANGE = "orange"
    RED = "red"
    DESTROYED = "destroyed"


@dataclass(frozen=True)
class Squad:
    """A fixed-capacity block of soldiers of one type inside a unit group.

    Fields:
        id: Identifier unique within the owning player's army.
        unit_type: Stat profile the squad fights with ("warrior", "archer").
        current_size: Soldiers still standing, 0..max_size.
        max_size: Capacity of a full squad.
    """
    id: int
    unit_type: str
    current_size: int = DEFAULT_SQUAD_SIZE
    max_size: int = DEFAULT_SQUAD_SIZE

    def __post_init__(self) -> None:
        if self.max_size < 0:
            raise InvalidInput(f"squad {self.id} max_size must be non-negative")
        if not 0 <= self.current_size <= self.max_size:
            raise InvalidInput(
                f"squad {self.id} current_size {self.current_size} outside 0..{self.max_size}"
            )

    @property
    def is_empty(self) -> bool:
        return self.current_size <= 0

    def with_size(self, current_size: int) -> "Squad":
        """Return a copy resized to ``current_size`` clamped into 0..max_size."""
        return replace(self, current_size=max(0, min(self.max_size, current_size)))

    def health_state(self) -> SquadHealth:
        if self.current_size == 0:
            return SquadHealth.DESTROYED
        if self.current_size == self.max_size:
            return SquadHealth.HEALTHY
        ratio = self.current_size / self.max_size
        if ratio >= SQUAD_YELLOW_RATIO:
            return SquadHealth.YELLOW
        if ratio >= SQUAD_ORANGE_RATIO:
            return SquadHealth.ORANGE
        return SquadHealth.RED
