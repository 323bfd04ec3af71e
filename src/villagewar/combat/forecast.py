from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Optional

from villagewar.combat.field import ForceLike, resolve_field_battle
from villagewar.components.battle_params import BattleParameters
from villagewar.components.battle_result import Winner
from villagewar.components.unit_stats import UnitStatTable


@dataclass(frozen=True)
class BattleForecast:
    winner: Winner
    ticks: int
    loss_pct: float
    text: str

    @property
    def victory(self) -> bool:
        return self.winner is Winner.ATTACKER


def forecast_text(victory: bool, ticks: int, loss_pct: float) -> str:
    """e.g. "Win in ~42 ticks, 4-6% losses." for the attacking side."""
    low = max(0, math.floor(loss_pct * 0.8))
    high = min(100, math.ceil(loss_pct * 1.2))
    prefix = "Win" if victory else "Likely defeat"
    return f"{prefix} in ~{ticks} ticks, {low}-{high}% losses."


def forecast_battle(
    force_a: ForceLike,
    force_b: ForceLike,
    stats: Optional[UnitStatTable] = None,
    params: Optional[BattleParameters] = None,
) -> BattleForecast:
    """Predict a field battle from side A's point of view by resolving it without noise."""
    params = replace(params or BattleParameters(), rng_variance=0.0)
    result = resolve_field_battle(force_a, force_b, stats, params)
    initial = result.a_initial.total
    loss_pct = result.a_losses / initial * 100.0 if initial > 0 else 0.0
    victory = result.winner is Winner.ATTACKER
    return BattleForecast(
        winner=result.winner,
        ticks=result.ticks,
        loss_pct=loss_pct,
        text=forecast_text(victory, result.ticks, loss_pct),
    )
