from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple


class SiegeOutcome(str, Enum):
    WALLS_HOLD = "walls_hold"
    INNER_HOLDS = "inner_holds"
    FALLS = "falls"
    STALEMATE = "stalemate"


@dataclass(frozen=True)
class SiegeRound:
    round: int
    fort_hp: float
    attackers: float
    archers: float
    killed: float
    fort_damage: float


@dataclass(frozen=True)
class InnerBattleStep:
    step: int
    phase: str
    def_warriors: float
    def_archers: float
    defenders: float
    attackers: float
    killed_attackers: float
    killed_defenders: float


@dataclass(frozen=True)
class SiegeBattleResult:
    """Outcome of an assault on a fortress.

    ``rounds`` counts outer siege rounds only. Garrison fields carry the
    defender composition before and after the inner battle so callers can
    distribute casualties by unit type.
    """
    outcome: SiegeOutcome
    rounds: int
    initial_fort_hp: float
    final_fort_hp: float
    initial_attackers: float
    final_attackers: float
    initial_defenders: float
    final_defenders: float
    initial_garrison_warriors: float
    initial_garrison_archers: float
    final_garrison_warriors: float
    final_garrison_archers: float
    siege_timeline: Tuple[SiegeRound, ...] = field(default_factory=tuple)
    inner_timeline: Tuple[InnerBattleStep, ...] = field(default_factory=tuple)

    @property
    def attacker_losses(self) -> float:
        return max(0.0, self.initial_attackers - self.final_attackers)

    @property
    def defender_losses(self) -> float:
        return max(0.0, self.initial_defenders - self.final_defenders)

    @property
    def had_inner_battle(self) -> bool:
        return bool(self.inner_timeline)
