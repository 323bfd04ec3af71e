"""
phase.py

Shared combat primitives
------------------------
Both the field resolver and the siege resolver build on these helpers:
- Effective attack / defence / pursuit power of a Division in a phase,
  summed per 100 soldiers of each unit type.
- Attack-to-defence ratios with a floor on both terms.
- Casualty strikes capped at the target's strength.
- Morale: starting pool, break threshold and per-tick drain.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

from villagewar.components.battle_params import BattleParameters
from villagewar.components.division import Division
from villagewar.components.unit_stats import UnitStatTable
from villagewar.constants import MIN_EFFECTIVE_STAT, PER_UNITS


class Phase(str, Enum):
    SKIRMISH = "skirmish"
    MELEE = "melee"
    PURSUIT = "pursuit"


@dataclass(frozen=True)
class PhaseStats:
    attack: float
    defence: float
    pursuit: float


# ------------------------------------------------------------
# Effective power
# ------------------------------------------------------------

def phase_stats(
    division: Division,
    table: UnitStatTable,
    phase: Phase,
    weights: Optional[Mapping[str, float]] = None,
) -> PhaseStats:
    """Sum ``(count / 100) * stat`` over the unit types in ``division``.

    Skirmish uses the skirmish coefficients; melee and pursuit use the melee
    coefficients for attack and defence. ``weights`` scales the contribution
    of individual unit types (missing types weigh 1.0).
    """
    attack = defence = pursuit = 0.0
    for unit_type, count in division.items():
        if count <= 0:
            continue
        stats = table.for_type(unit_type)
        share = count / PER_UNITS * (weights.get(unit_type, 1.0) if weights else 1.0)
        if phase is Phase.SKIRMISH:
            attack += share * stats.skirmish_attack
            defence += share * stats.skirmish_defence
        else:
            attack += share * stats.melee_attack
            defence += share * stats.melee_defence
        pursuit += share * stats.pursuit
    return PhaseStats(attack=attack, defence=defence, pursuit=pursuit)


def effective_ratio(attacker: PhaseStats, defender: PhaseStats) -> float:
    """Attack of one side over defence of the other, both floored at 0.1."""
    return max(attacker.attack, MIN_EFFECTIVE_STAT) / max(defender.defence, MIN_EFFECTIVE_STAT)


# ------------------------------------------------------------
# Casualties
# ------------------------------------------------------------

def strike(power: float, rate: float, target_strength: float, multiplier: float = 1.0) -> float:
    """Casualties dealt by ``power * rate * multiplier``, capped at the target's strength."""
    if target_strength <= 0:
        return 0.0
    return max(0.0, min(target_strength, power * rate * multiplier))


def field_casualties(
    opponent_strength: float,
    ratio: float,
    target_strength: float,
    params: BattleParameters,
    noise: float = 1.0,
) -> float:
    return strike(opponent_strength / PER_UNITS * ratio, params.base_casualty_rate, target_strength, noise)


# ------------------------------------------------------------
# Morale
# ------------------------------------------------------------

def starting_morale(division: Division, table: UnitStatTable) -> float:
    return sum(count / PER_UNITS * table.for_type(t).morale_per_100 for t, count in division.items())


def break_threshold(morale: float, params: BattleParameters) -> float:
    return params.break_pct / 100.0 * morale


def morale_drain(casualties: float, opponent_ratio: float, params: BattleParameters) -> float:
    """Morale lost by a side that took ``casualties`` from an opponent striking at ``opponent_ratio``."""
    return params.morale_per_casualty * casualties + params.advantage_morale_tick * max(0.0, opponent_ratio - 1.0)
