import pytest

from villagewar.combat.phase import (
    Phase,
    PhaseStats,
    break_threshold,
    effective_ratio,
    morale_drain,
    phase_stats,
    starting_morale,
    strike,
)
from villagewar.components.battle_params import BattleParameters
from villagewar.components.division import Division
from villagewar.components.unit_stats import UnitStatTable
from villagewar.errors import InvalidInput


def test_skirmish_stats_sum_per_hundred_soldiers():
    stats = phase_stats(Division.of(warrior=100, archer=50), UnitStatTable(), Phase.SKIRMISH)
    assert stats.attack == pytest.approx(15.0)
    assert stats.defence == pytest.approx(18.0)
    assert stats.pursuit == pytest.approx(5.0)


def test_melee_and_pursuit_use_melee_coefficients():
    division = Division.of(warrior=100, archer=50)
    melee = phase_stats(division, UnitStatTable(), Phase.MELEE)
    pursuit = phase_stats(division, UnitStatTable(), Phase.PURSUIT)
    assert melee.attack == pytest.approx(17.5)
    assert melee.defence == pytest.approx(14.5)
    assert pursuit == melee


def test_weights_scale_individual_unit_types():
    division = Division.of(warrior=100, archer=100)
    stats = phase_stats(division, UnitStatTable(), Phase.SKIRMISH, weights={"warrior": 0.3})
    assert stats.defence == pytest.approx(15 * 0.3 + 6)


def test_unknown_unit_type_is_rejected():
    with pytest.raises(InvalidInput):
        phase_stats(Division.of(knight=10), UnitStatTable(), Phase.MELEE)


def test_effective_ratio_floors_both_terms():
    empty = PhaseStats(attack=0.0, defence=0.0, pursuit=0.0)
    assert effective_ratio(empty, empty) == pytest.approx(1.0)
    strong = PhaseStats(attack=15.0, defence=12.0, pursuit=3.0)
    assert effective_ratio(strong, empty) == pytest.approx(150.0)


def test_strike_is_capped_at_target_strength():
    assert strike(10.0, 0.6, 100.0) == pytest.approx(6.0)
    assert strike(10.0, 0.6, 2.5) == 2.5
    assert strike(10.0, 0.6, 0.0) == 0.0
    assert strike(10.0, 0.6, 100.0, multiplier=1.2) == pytest.approx(7.2)


def test_morale_pool_and_break_threshold():
    morale = starting_morale(Division.of(warrior=100, archer=50), UnitStatTable())
    assert morale == pytest.approx(150.0)
    assert break_threshold(morale, BattleParameters()) == pytest.approx(52.5)


def test_morale_drain_grows_with_opponent_advantage():
    params = BattleParameters()
    assert morale_drain(0.0, 1.0, params) == 0.0
    assert morale_drain(0.0, 3.0, params) == pytest.approx(6.0)
    assert morale_drain(5.0, 0.5, params) == pytest.approx(4.0)
