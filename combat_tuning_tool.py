"""Matplotlib-based combat tuning explorer.

Visualises how the unit stats and battle parameters shape the engagement
model:

- Sweeps the size of an attacking force against a fixed enemy composition
  and plots the win/draw/loss outcome and the attacker's loss percentage.
- Plots troop counts and morale over the ticks of one representative battle.
- Plots the outer siege and inner battle of a fortress assault.

A text summary of every sweep point is written to ``combat_reports/``.

Run with: ``python combat_tuning_tool.py [--config combat.json] [--mission 2]``
"""
from __future__ import annotations

import argparse
from pathlib import Path
import sys
from typing import List, Optional

import matplotlib.pyplot as plt
import numpy as np

# Ensure src/ is on the import path so the tool runs from a plain checkout.
SRC_PATH = Path(__file__).parent / "src"
if SRC_PATH.exists() and str(SRC_PATH) not in sys.path:
    sys.path.append(str(SRC_PATH))

from villagewar.combat import resolve_field_battle, resolve_siege  # type: ignore
from villagewar.components.battle_result import BattleResult, Winner  # type: ignore
from villagewar.components.division import Division  # type: ignore
from villagewar.components.fortress import FortressState  # type: ignore
from villagewar.config import CombatConfig, load_combat_config  # type: ignore
from villagewar.missions import DEFAULT_MISSIONS  # type: ignore

SUMMARY_DIR = Path(__file__).parent / "combat_reports"
OUTCOME_VALUE = {Winner.ATTACKER: 1.0, Winner.DRAW: 0.0, Winner.DEFENDER: -1.0}


def sweep_attackers(
    config: CombatConfig,
    enemy: Division,
    sizes: np.ndarray,
    archer_share: float = 0.0,
) -> List[BattleResult]:
    """Resolve one noiseless battle per attacker size in ``sizes``."""
    results = []
    for size in sizes:
        archers = float(size) * archer_share
        force = Division.of(warrior=float(size) - archers, archer=archers)
        results.append(resolve_field_battle(force, enemy, config.stats, config.battle))
    return results


def plot_sweep(ax_outcome, ax_losses, sizes: np.ndarray, results: List[BattleResult]) -> None:
    outcomes = np.array([OUTCOME_VALUE[r.winner] for r in results])
    initial = np.array([r.a_initial.total for r in results])
    losses = np.array([r.a_losses for r in results])
    loss_pct = np.divide(losses, initial, out=np.zeros_like(losses), where=initial > 0) * 100.0

    ax_outcome.step(sizes, outcomes, where="mid", color="tab:green")
    ax_outcome.set_yticks([-1, 0, 1], labels=["defeat", "draw", "win"])
    ax_outcome.set_xlabel("Attacking soldiers")
    ax_outcome.set_title("Outcome by attacker size")
    ax_outcome.grid(True)

    ax_losses.plot(sizes, loss_pct, color="tab:red")
    ax_losses.set_xlabel("Attacking soldiers")
    ax_losses.set_ylabel("Attacker losses (%)")
    ax_losses.set_title("Loss percentage by attacker size")
    ax_losses.grid(True)


def plot_timeline(ax, result: BattleResult) -> None:
    ticks = np.array([t.tick for t in result.timeline])
    if ticks.size == 0:
        ax.set_title("Battle timeline (no ticks)")
        return
    ax.plot(ticks, [t.a_troops for t in result.timeline], label="A troops", color="tab:green")
    ax.plot(ticks, [t.b_troops for t in result.timeline], label="B troops", color="tab:red")
    ax.plot(ticks, [t.a_morale for t in result.timeline], "--", label="A morale", color="tab:green")
    ax.plot(ticks, [t.b_morale for t in result.timeline], "--", label="B morale", color="tab:red")
    for phase, shade in (("melee", 0.08), ("pursuit", 0.16)):
        phase_ticks = [t.tick for t in result.timeline if t.phase == phase]
        if phase_ticks:
            ax.axvspan(min(phase_ticks) - 0.5, max(phase_ticks) + 0.5, color="gray", alpha=shade)
    ax.set_xlabel("Tick")
    ax.set_title(f"Battle timeline ({result.winner.value})")
    ax.legend()
    ax.grid(True)


def plot_siege(ax, config: CombatConfig, attackers: float, fortress: FortressState) -> None:
    result = resolve_siege(attackers, fortress, config.stats, config.siege)
    rounds = np.array([r.round for r in result.siege_timeline])
    ax.plot(rounds, [r.attackers for r in result.siege_timeline], label="Attackers", color="tab:red")
    ax.plot(rounds, [r.fort_hp / 100.0 for r in result.siege_timeline], label="Fort HP / 100", color="tab:blue")
    if result.inner_timeline:
        offset = len(rounds)
        steps = np.array([s.step for s in result.inner_timeline]) + offset
        ax.plot(steps, [s.attackers for s in result.inner_timeline], ":", color="tab:red", label="Inner attackers")
        ax.plot(steps, [s.defenders for s in result.inner_timeline], ":", color="tab:blue", label="Inner defenders")
        ax.axvline(offset + 0.5, color="gray", linestyle="--")
    ax.set_xlabel("Round / step")
    ax.set_title(f"Siege ({result.outcome.value})")
    ax.legend()
    ax.grid(True)


def write_summary(mission_name: str, sizes: np.ndarray, results: List[BattleResult]) -> Path:
    lines = [f"=== Attacker sweep vs {mission_name} ===", ""]
    for size, result in zip(sizes, results):
        lines.append(
            f"  {int(size):4d} soldiers: {result.winner.value:8s} in {result.ticks:4d} ticks, "
            f"lost {result.a_losses:6.1f}, enemy left {result.b_final.total:6.1f}"
        )
    SUMMARY_DIR.mkdir(parents=True, exist_ok=True)
    path = SUMMARY_DIR / f"sweep_{mission_name.lower().replace(' ', '_')}.txt"
    path.write_text("\n".join(lines), encoding="utf-8")
    return path


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--config", type=Path, help="combat config JSON document")
    parser.add_argument("--mission", type=int, default=2, choices=sorted(DEFAULT_MISSIONS))
    parser.add_argument("--max-attackers", type=int, default=150)
    parser.add_argument("--archer-share", type=float, default=0.0)
    args = parser.parse_args(argv)

    config = load_combat_config(args.config) if args.config else CombatConfig()
    mission = DEFAULT_MISSIONS[args.mission]
    sizes = np.arange(10, args.max_attackers + 1, 5)
    results = sweep_attackers(config, mission.enemy, sizes, args.archer_share)
    print(f"Summary written to {write_summary(mission.name, sizes, results)}")

    fig, axes = plt.subplots(2, 2, figsize=(12, 8))
    plot_sweep(axes[0][0], axes[0][1], sizes, results)
    plot_timeline(axes[1][0], results[len(results) // 2])
    plot_siege(
        axes[1][1],
        config,
        attackers=50,
        fortress=FortressState(fort_hp=2000, archer_slots=10, garrison_warriors=20, garrison_archers=10),
    )
    fig.tight_layout()
    plt.show()


if __name__ == "__main__":
    main()
