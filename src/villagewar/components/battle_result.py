from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Tuple

from villagewar.components.division import Division


class Winner(str, Enum):
    ATTACKER = "attacker"
    DEFENDER = "defender"
    DRAW = "draw"


@dataclass(frozen=True)
class BattleSnapshot:
    """A side's composition and morale at the start or end of a battle."""
    division: Division
    morale: float

    @property
    def total(self) -> float:
        return self.division.total

    def to_dict(self) -> Dict[str, object]:
        return {"counts": self.division.to_dict(), "total": self.total, "morale": self.morale}


@dataclass(frozen=True)
class BattleTick:
    tick: int
    phase: str
    a_troops: float
    b_troops: float
    a_morale: float
    b_morale: float
    # Casualties inflicted by A on B and by B on A during this tick
    a_to_b: float
    b_to_a: float


@dataclass(frozen=True)
class BattleResult:
    """Outcome of a field engagement between side A (attacker) and side B (defender)."""
    a_initial: BattleSnapshot
    b_initial: BattleSnapshot
    a_final: BattleSnapshot
    b_final: BattleSnapshot
    winner: Winner
    ticks: int
    timeline: Tuple[BattleTick, ...] = field(default_factory=tuple)

    @property
    def a_losses(self) -> float:
        return max(0.0, self.a_initial.total - self.a_final.total)

    @property
    def b_losses(self) -> float:
        return max(0.0, self.b_initial.total - self.b_final.total)

    def ticks_in(self, phase: str) -> int:
        return sum(1 for t in self.timeline if t.phase == phase)
