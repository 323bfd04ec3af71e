from __future__ import annotations

from villagewar.combat.field import as_division, resolve_field_battle
from villagewar.combat.forecast import BattleForecast, forecast_battle
from villagewar.combat.losses import (
    GarrisonCasualties,
    LossNotice,
    apply_garrison_losses,
    calculate_group_losses,
    distribute_across_groups,
    distribute_losses,
    garrison_losses,
    trim_by_type,
)
from villagewar.combat.phase import Phase, PhaseStats, phase_stats
from villagewar.combat.siege import resolve_siege

__all__ = [
    "BattleForecast",
    "GarrisonCasualties",
    "LossNotice",
    "Phase",
    "PhaseStats",
    "apply_garrison_losses",
    "as_division",
    "calculate_group_losses",
    "distribute_across_groups",
    "distribute_losses",
    "forecast_battle",
    "garrison_losses",
    "phase_stats",
    "resolve_field_battle",
    "resolve_siege",
    "trim_by_type",
]
