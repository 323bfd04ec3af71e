"""
field.py

Field engagement resolver
-------------------------
Key mechanics:
- Three ordered phases: skirmish (capped by ``skirmish_ticks``), melee (until
  a side breaks or is destroyed) and pursuit of the loser.
- Both sides strike simultaneously every tick; casualties scale with the
  striker's strength and its attack-to-defence ratio, times a noise factor.
- Morale drains with casualties taken and with how badly a side is outmatched.
- A side is broken once morale falls to its break threshold.
"""

from __future__ import annotations

import logging
import random
from typing import List, Mapping, Optional, Union

from villagewar.combat.phase import (
    Phase,
    break_threshold,
    effective_ratio,
    field_casualties,
    morale_drain,
    phase_stats,
    starting_morale,
    strike,
)
from villagewar.components.battle_params import BattleParameters
from villagewar.components.battle_result import BattleResult, BattleSnapshot, BattleTick, Winner
from villagewar.components.division import Division
from villagewar.components.unit_stats import UnitStatTable
from villagewar.constants import MELEE_SAFETY_GUARD, PER_UNITS, PURSUIT_BASE
from villagewar.errors import InvalidInput

logger = logging.getLogger(__name__)

ForceLike = Union[Division, Mapping[str, float]]


def as_division(force: ForceLike, table: UnitStatTable) -> Division:
    """Coerce ``force`` into a validated Division whose unit types are all known to ``table``."""
    if not isinstance(force, Division):
        if not isinstance(force, Mapping):
            raise InvalidInput(f"force must be a Division or mapping, got {type(force).__name__}")
        force = Division(force)
    for unit_type, _ in force.items():
        table.for_type(unit_type)
    return force


def _noise(rng: random.Random, variance: float) -> float:
    return 1.0 + (rng.random() * 2.0 - 1.0) * variance


class _Side:
    """Mutable per-resolution state of one side; never escapes the resolver."""

    def __init__(self, division: Division, table: UnitStatTable, params: BattleParameters):
        self.division = division
        self.morale = starting_morale(division, table)
        self.initial = BattleSnapshot(division=division, morale=self.morale)
        self.threshold = break_threshold(self.morale, params)

    @property
    def strength(self) -> float:
        return self.division.total

    @property
    def down(self) -> bool:
        return self.division.is_empty or self.morale <= self.threshold

    def take(self, casualties: float, morale_loss: float) -> None:
        self.division = self.division.apply_casualties(casualties)
        self.morale -= morale_loss

    def snapshot(self) -> BattleSnapshot:
        return BattleSnapshot(division=self.division, morale=self.morale)


def _pick_winner(a: _Side, b: _Side) -> Winner:
    if a.down and b.down:
        return Winner.DRAW
    if a.down:
        return Winner.DEFENDER
    if b.down:
        return Winner.ATTACKER
    if a.morale != b.morale:
        return Winner.ATTACKER if a.morale > b.morale else Winner.DEFENDER
    if a.strength != b.strength:
        return Winner.ATTACKER if a.strength > b.strength else Winner.DEFENDER
    return Winner.DRAW


def resolve_field_battle(
    force_a: ForceLike,
    force_b: ForceLike,
    stats: Optional[UnitStatTable] = None,
    params: Optional[BattleParameters] = None,
    rng: Optional[random.Random] = None,
) -> BattleResult:
    """Resolve an open-field battle between attacker ``force_a`` and defender ``force_b``.

    Inputs are validated before any simulation; zero-strength forces are
    valid and lose (or draw) immediately. ``rng`` supplies the per-tick noise
    and defaults to a fresh ``random.Random``.
    """
    stats = UnitStatTable() if stats is None else stats
    if not isinstance(stats, UnitStatTable):
        raise InvalidInput(f"stats must be a UnitStatTable, got {type(stats).__name__}")
    params = params or BattleParameters()
    if not isinstance(params, BattleParameters):
        raise InvalidInput(f"params must be BattleParameters, got {type(params).__name__}")
    a = _Side(as_division(force_a, stats), stats, params)
    b = _Side(as_division(force_b, stats), stats, params)
    rng = rng or random.Random()

    timeline: List[BattleTick] = []

    def record(phase: Phase, a_to_b: float, b_to_a: float) -> None:
        timeline.append(
            BattleTick(
                tick=len(timeline) + 1,
                phase=phase.value,
                a_troops=a.strength,
                b_troops=b.strength,
                a_morale=a.morale,
                b_morale=b.morale,
                a_to_b=a_to_b,
                b_to_a=b_to_a,
            )
        )

    for phase, limit in ((Phase.SKIRMISH, params.skirmish_ticks), (Phase.MELEE, MELEE_SAFETY_GUARD)):
        for _ in range(limit):
            if a.down or b.down:
                break
            stats_a = phase_stats(a.division, stats, phase)
            stats_b = phase_stats(b.division, stats, phase)
            ratio_a = effective_ratio(stats_a, stats_b)
            ratio_b = effective_ratio(stats_b, stats_a)
            noise_a = _noise(rng, params.rng_variance)
            noise_b = _noise(rng, params.rng_variance)
            a_to_b = field_casualties(a.strength, ratio_a, b.strength, params, noise_a)
            b_to_a = field_casualties(b.strength, ratio_b, a.strength, params, noise_b)
            a.take(b_to_a, morale_drain(b_to_a, ratio_b, params))
            b.take(a_to_b, morale_drain(a_to_b, ratio_a, params))
            record(phase, a_to_b, b_to_a)

    winner = _pick_winner(a, b)

    if winner is not Winner.DRAW and params.pursuit_ticks > 0:
        victor, loser = (a, b) if winner is Winner.ATTACKER else (b, a)
        for _ in range(params.pursuit_ticks):
            if loser.division.is_empty:
                break
            power = phase_stats(victor.division, stats, Phase.PURSUIT).pursuit
            loss = strike(PURSUIT_BASE * power / max(1.0, loser.strength / PER_UNITS), 1.0, loser.strength)
            loser.take(loss, params.morale_per_casualty * loss)
            if winner is Winner.ATTACKER:
                record(Phase.PURSUIT, loss, 0.0)
            else:
                record(Phase.PURSUIT, 0.0, loss)

    result = BattleResult(
        a_initial=a.initial,
        b_initial=b.initial,
        a_final=a.snapshot(),
        b_final=b.snapshot(),
        winner=winner,
        ticks=len(timeline),
        timeline=tuple(timeline),
    )
    logger.debug(
        "field battle %s after %d ticks: A %.1f -> %.1f, B %.1f -> %.1f",
        winner.value,
        result.ticks,
        result.a_initial.total,
        result.a_final.total,
        result.b_initial.total,
        result.b_final.total,
    )
    return result
