import random

import pytest

from villagewar.combat.field import resolve_field_battle
from villagewar.components.battle_params import BattleParameters
from villagewar.components.battle_result import Winner
from villagewar.components.division import Division
from villagewar.components.unit_stats import UnitStatTable
from villagewar.errors import InvalidInput

from tests.helpers import noiseless_params


def test_scout_the_forest_overwhelming_attacker_wipes_out_defender():
    result = resolve_field_battle(
        Division.of(warrior=100, archer=0),
        Division.of(warrior=10, archer=0),
        UnitStatTable(),
        noiseless_params(),
    )
    assert result.winner is Winner.ATTACKER
    assert result.b_final.total == 0
    assert result.a_losses < 10
    assert result.ticks_in("pursuit") > 0


def test_decisive_dominance_reduces_defender_to_zero():
    result = resolve_field_battle(
        {"warrior": 1000},
        {"warrior": 20, "archer": 5},
        params=noiseless_params(),
    )
    assert result.winner is Winner.ATTACKER
    assert result.b_final.total == 0
    assert result.b_final.division.count("archer") == 0


def test_defender_wins_when_attacker_is_outmatched():
    result = resolve_field_battle(
        Division.of(warrior=10),
        Division.of(warrior=50, archer=10),
        params=noiseless_params(),
    )
    assert result.winner is Winner.DEFENDER
    assert result.ticks_in("melee") == 0
    pursuit = [t for t in result.timeline if t.phase == "pursuit"]
    assert pursuit, "Winning defender should pursue the broken attacker"
    assert all(t.a_to_b == 0 for t in pursuit)


def test_identical_forces_draw_without_pursuit():
    result = resolve_field_battle(
        Division.of(warrior=50, archer=20),
        Division.of(warrior=50, archer=20),
        params=noiseless_params(),
    )
    assert result.winner is Winner.DRAW
    assert result.ticks_in("pursuit") == 0
    assert result.a_final.total == result.b_final.total


def test_empty_side_loses_immediately():
    result = resolve_field_battle(Division.of(warrior=0), Division.of(warrior=10), params=noiseless_params())
    assert result.winner is Winner.DEFENDER
    assert result.ticks == 0
    assert result.timeline == ()
    assert result.b_final.total == 10


def test_two_empty_sides_draw():
    result = resolve_field_battle(Division(), Division(), params=noiseless_params())
    assert result.winner is Winner.DRAW
    assert result.ticks == 0


def test_negative_counts_are_rejected():
    with pytest.raises(InvalidInput):
        resolve_field_battle({"warrior": -5}, {"warrior": 10})


def test_unknown_unit_types_are_rejected():
    with pytest.raises(InvalidInput):
        resolve_field_battle({"knight": 5}, {"warrior": 10})


def test_malformed_parameters_are_rejected():
    with pytest.raises(InvalidInput):
        BattleParameters(break_pct=150)
    with pytest.raises(InvalidInput):
        BattleParameters(skirmish_ticks=-1)
    with pytest.raises(InvalidInput):
        resolve_field_battle({"warrior": 5}, {"warrior": 10}, params={"rng_variance": 0})


def test_phases_respect_tick_caps():
    params = BattleParameters(skirmish_ticks=5, pursuit_ticks=3)
    result = resolve_field_battle(
        Division.of(warrior=80, archer=40),
        Division.of(warrior=30, archer=10),
        params=params,
        rng=random.Random(11),
    )
    assert result.ticks_in("skirmish") <= 5
    assert result.ticks_in("pursuit") <= 3
    phases = [t.phase for t in result.timeline]
    assert phases == sorted(phases, key=["skirmish", "melee", "pursuit"].index)


def test_zero_skirmish_ticks_starts_in_melee():
    result = resolve_field_battle(
        Division.of(warrior=100), Division.of(warrior=10), params=noiseless_params(skirmish_ticks=0)
    )
    assert result.timeline[0].phase == "melee"


def test_no_pursuit_when_disabled():
    result = resolve_field_battle(
        Division.of(warrior=100), Division.of(warrior=10), params=noiseless_params(pursuit_ticks=0)
    )
    assert result.winner is Winner.ATTACKER
    assert result.ticks_in("pursuit") == 0


def test_timeline_is_ordered_and_counts_never_increase():
    result = resolve_field_battle(
        Division.of(warrior=60, archer=30),
        Division.of(warrior=50, archer=10),
        rng=random.Random(3),
    )
    ticks = [t.tick for t in result.timeline]
    assert ticks == list(range(1, result.ticks + 1))
    previous_a, previous_b = result.a_initial.total, result.b_initial.total
    for record in result.timeline:
        assert 0 <= record.a_troops <= previous_a
        assert 0 <= record.b_troops <= previous_b
        previous_a, previous_b = record.a_troops, record.b_troops


def test_conservation_over_random_compositions():
    rng = random.Random(2024)
    for _ in range(25):
        a = Division.of(warrior=rng.randint(0, 200), archer=rng.randint(0, 80))
        b = Division.of(warrior=rng.randint(0, 200), archer=rng.randint(0, 80))
        result = resolve_field_battle(a, b, rng=rng)
        assert result.a_final.total <= result.a_initial.total
        assert result.b_final.total <= result.b_initial.total
        assert all(c >= 0 for _, c in result.a_final.division.items())
        assert all(c >= 0 for _, c in result.b_final.division.items())


def test_noiseless_resolution_is_repeatable():
    args = (Division.of(warrior=70, archer=25), Division.of(warrior=40, archer=40))
    first = resolve_field_battle(*args, params=noiseless_params(), rng=random.Random(1))
    second = resolve_field_battle(*args, params=noiseless_params(), rng=random.Random(99))
    assert first.timeline == second.timeline
    assert first.winner is second.winner


def test_seeded_noise_is_reproducible():
    args = (Division.of(warrior=70, archer=25), Division.of(warrior=40, archer=40))
    first = resolve_field_battle(*args, rng=random.Random(5))
    second = resolve_field_battle(*args, rng=random.Random(5))
    assert first.timeline == second.timeline


def test_casualties_follow_type_composition():
    result = resolve_field_battle(
        Division.of(warrior=300), Division.of(warrior=30, archer=10), params=noiseless_params(pursuit_ticks=0)
    )
    final = result.b_final.division
    if final.total > 0:
        assert final.count("warrior") / final.count("archer") == pytest.approx(3.0)


def test_stats_must_be_a_unit_stat_table():
    with pytest.raises(InvalidInput):
        resolve_field_battle({"warrior": 5}, {"warrior": 10}, stats={"warrior": {"melee_attack": 15}})
