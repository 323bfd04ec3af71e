"""
siege.py

Siege resolver
--------------
Key mechanics:
- Outer siege: archers on the walls (bounded by the fortress's archer slots)
  shoot the attackers each round; the survivors batter the walls.
- Walls falling with a garrison inside starts an inner battle with fixed
  step-count phases: skirmish, then melee, then pursuit by the larger side.
- Defender casualties are split between warriors and archers in proportion
  to their share of the garrison.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from villagewar.combat.phase import Phase, phase_stats, strike
from villagewar.components.battle_params import SiegeParameters
from villagewar.components.division import Division
from villagewar.components.fortress import FortressState
from villagewar.components.siege_result import InnerBattleStep, SiegeBattleResult, SiegeOutcome, SiegeRound
from villagewar.components.unit_stats import UnitStatTable
from villagewar.constants import ARCHER, WARRIOR
from villagewar.errors import InvalidInput, NotFound
from villagewar.utils.validation import require_non_negative

logger = logging.getLogger(__name__)


# ------------------------------------------------------------
# Outer siege
# ------------------------------------------------------------

def run_outer_siege(
    attackers: float,
    fortress: FortressState,
    stats: UnitStatTable,
    params: SiegeParameters,
) -> Tuple[float, float, List[SiegeRound]]:
    """Run the wall phase; return ``(attackers, fort_hp, rounds)``."""
    warrior = stats.for_type(WARRIOR)
    active_archers = min(fortress.garrison_archers, fortress.archer_slots)
    volley = phase_stats(Division({ARCHER: active_archers}), stats, Phase.SKIRMISH).attack
    fort_hp = float(fortress.fort_hp)
    rounds: List[SiegeRound] = []

    while fort_hp > 0 and attackers > 0 and len(rounds) < params.max_rounds:
        killed = strike(volley, params.base_casualty_rate, attackers)
        attackers = max(0.0, attackers - killed)
        damage = strike(
            attackers * warrior.melee_attack,
            params.base_casualty_rate,
            fort_hp,
            params.wall_damage_factor,
        )
        fort_hp = max(0.0, fort_hp - damage)
        rounds.append(
            SiegeRound(
                round=len(rounds) + 1,
                fort_hp=fort_hp,
                attackers=attackers,
                archers=active_archers,
                killed=killed,
                fort_damage=damage,
            )
        )
    return attackers, fort_hp, rounds


# ------------------------------------------------------------
# Inner battle
# ------------------------------------------------------------

def _step_phase(step: int, params: SiegeParameters) -> Phase:
    if step <= params.skirmish_steps:
        return Phase.SKIRMISH
    if step <= params.melee_steps_end:
        return Phase.MELEE
    return Phase.PURSUIT


def run_inner_battle(
    def_warriors: float,
    def_archers: float,
    attackers: float,
    stats: UnitStatTable,
    params: SiegeParameters,
) -> List[InnerBattleStep]:
    """Fight the garrison against the attackers who broke through the walls."""
    rate = params.base_casualty_rate
    steps: List[InnerBattleStep] = []

    while attackers > 0 and def_warriors + def_archers > 0 and len(steps) < params.max_inner_steps:
        step = len(steps) + 1
        phase = _step_phase(step, params)
        garrison = Division({WARRIOR: def_warriors, ARCHER: def_archers})
        assault = Division({WARRIOR: attackers})
        defenders = garrison.total

        if phase is Phase.SKIRMISH:
            def_power = phase_stats(
                garrison, stats, phase, weights={WARRIOR: params.defender_warrior_skirmish_factor}
            ).attack
            killed_attackers = strike(def_power, rate, attackers)
            atk_power = phase_stats(assault, stats, phase).attack
            killed_defenders = strike(atk_power, rate, defenders, params.attacker_skirmish_factor)
        elif phase is Phase.MELEE:
            killed_attackers = strike(phase_stats(garrison, stats, phase).attack, rate, attackers)
            killed_defenders = strike(phase_stats(assault, stats, phase).attack, rate, defenders)
        else:
            killed_attackers = killed_defenders = 0.0
            if attackers > defenders:
                atk_power = phase_stats(assault, stats, phase).attack
                killed_defenders = strike(atk_power, rate, defenders, params.pursuit_factor)
            else:
                def_power = phase_stats(garrison, stats, phase).attack
                killed_attackers = strike(def_power, rate, attackers, params.pursuit_factor)

        garrison = garrison.apply_casualties(killed_defenders)
        def_warriors = garrison.count(WARRIOR)
        def_archers = garrison.count(ARCHER)
        attackers = max(0.0, attackers - killed_attackers)

        steps.append(
            InnerBattleStep(
                step=step,
                phase=phase.value,
                def_warriors=def_warriors,
                def_archers=def_archers,
                defenders=def_warriors + def_archers,
                attackers=attackers,
                killed_attackers=killed_attackers,
                killed_defenders=killed_defenders,
            )
        )
    return steps


# ------------------------------------------------------------
# Entry point
# ------------------------------------------------------------

def resolve_siege(
    attackers: float,
    fortress: Optional[FortressState],
    stats: Optional[UnitStatTable] = None,
    params: Optional[SiegeParameters] = None,
) -> SiegeBattleResult:
    """Resolve an assault by ``attackers`` warriors on ``fortress``.

    Raises ``NotFound`` when there is no fortress to besiege and
    ``InvalidInput`` for negative attacker counts.
    """
    if fortress is None:
        raise NotFound("no fortress to besiege")
    if not isinstance(fortress, FortressState):
        raise InvalidInput(f"fortress must be a FortressState, got {type(fortress).__name__}")
    stats = UnitStatTable() if stats is None else stats
    if not isinstance(stats, UnitStatTable):
        raise InvalidInput(f"stats must be a UnitStatTable, got {type(stats).__name__}")
    params = params or SiegeParameters()
    if not isinstance(params, SiegeParameters):
        raise InvalidInput(f"params must be SiegeParameters, got {type(params).__name__}")
    initial_attackers = require_non_negative("attackers", attackers)
    stats.for_type(WARRIOR)
    stats.for_type(ARCHER)

    remaining, fort_hp, rounds = run_outer_siege(initial_attackers, fortress, stats, params)

    def_warriors = float(fortress.garrison_warriors)
    def_archers = float(fortress.garrison_archers)
    inner: List[InnerBattleStep] = []

    if remaining <= 0 and fort_hp > 0:
        outcome = SiegeOutcome.WALLS_HOLD
    elif fort_hp <= 0 and remaining > 0 and fortress.garrison_total > 0:
        inner = run_inner_battle(def_warriors, def_archers, remaining, stats, params)
        if inner:
            last = inner[-1]
            def_warriors, def_archers, remaining = last.def_warriors, last.def_archers, last.attackers
        defenders = def_warriors + def_archers
        if defenders > 0 and remaining <= 0:
            outcome = SiegeOutcome.INNER_HOLDS
        elif remaining > 0 and defenders <= 0:
            outcome = SiegeOutcome.FALLS
        else:
            outcome = SiegeOutcome.STALEMATE
    elif fort_hp <= 0 and remaining > 0:
        outcome = SiegeOutcome.FALLS
    else:
        outcome = SiegeOutcome.STALEMATE

    result = SiegeBattleResult(
        outcome=outcome,
        rounds=len(rounds),
        initial_fort_hp=float(fortress.fort_hp),
        final_fort_hp=fort_hp,
        initial_attackers=initial_attackers,
        final_attackers=remaining,
        initial_defenders=float(fortress.garrison_total),
        final_defenders=def_warriors + def_archers,
        initial_garrison_warriors=float(fortress.garrison_warriors),
        initial_garrison_archers=float(fortress.garrison_archers),
        final_garrison_warriors=def_warriors,
        final_garrison_archers=def_archers,
        siege_timeline=tuple(rounds),
        inner_timeline=tuple(inner),
    )
    logger.debug(
        "siege %s after %d rounds and %d inner steps: attackers %.1f -> %.1f, fort hp %.0f -> %.0f",
        outcome.value,
        result.rounds,
        len(inner),
        initial_attackers,
        remaining,
        result.initial_fort_hp,
        fort_hp,
    )
    return result
