"""
losses.py

Loss distribution
-----------------
Turns aggregate casualty counts from a resolution into concrete squad sizes:
- ``distribute_losses`` spreads a group's losses over its squads, one per
  squad first, then randomly under a soft cap.
- ``distribute_across_groups`` splits one unit type's losses over several
  groups with the largest-remainder method.
- ``trim_by_type`` removes losses of one type round-robin over matching squads.
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Optional, Sequence, Tuple

from villagewar.components.siege_result import SiegeBattleResult
from villagewar.components.squad import Squad
from villagewar.components.unit_group import UnitGroup
from villagewar.constants import ARCHER, SOFT_CAP_SHARE, WARRIOR
from villagewar.errors import InvalidInput
from villagewar.utils.validation import require_non_negative, require_non_negative_int, round_half_up

logger = logging.getLogger(__name__)


def _loss_count(name: str, value: float) -> int:
    return round_half_up(require_non_negative(name, value))


def _require_unique_ids(ids: Sequence[Hashable]) -> None:
    seen = set()
    for group_id in ids:
        if group_id in seen:
            raise InvalidInput(f"group id {group_id!r} appears more than once")
        seen.add(group_id)


def calculate_group_losses(initial_total: float, final_total: float) -> int:
    """Whole soldiers lost by a side, from its strength before and after a battle."""
    return max(0, math.floor(initial_total - final_total))


# ------------------------------------------------------------
# Within one group
# ------------------------------------------------------------

def distribute_losses(group: UnitGroup, total_losses: int, rng: Optional[random.Random] = None) -> UnitGroup:
    """Return ``group`` with ``total_losses`` soldiers removed from its squads."""
    total_losses = _loss_count("total_losses", total_losses)
    if total_losses == 0 or not group.squads:
        return group
    if total_losses >= group.total_strength:
        return group.with_squads(s.with_size(0) for s in group.squads)

    rng = rng or random.Random()
    sizes = [s.current_size for s in group.squads]
    taken = [0] * len(sizes)
    soft_cap = max(1, math.floor(total_losses * SOFT_CAP_SHARE))
    remaining = total_losses

    for i, size in enumerate(sizes):
        if remaining <= 0:
            break
        if size > 0:
            sizes[i] -= 1
            taken[i] += 1
            remaining -= 1

    while remaining > 0:
        alive = [i for i, size in enumerate(sizes) if size > 0]
        if not alive:
            break
        eligible = [i for i in alive if taken[i] < soft_cap]
        i = rng.choice(eligible or alive)
        sizes[i] -= 1
        taken[i] += 1
        remaining -= 1

    return group.with_squads(s.with_size(size) for s, size in zip(group.squads, sizes))


# ------------------------------------------------------------
# Across groups
# ------------------------------------------------------------

def distribute_across_groups(
    entries: Sequence[Tuple[Hashable, int]],
    total_losses: float,
) -> Dict[Hashable, int]:
    """Allocate ``total_losses`` (rounded half up) over ``(group_id, available)`` pairs.

    Every group id appears in the result. The allocations sum to
    ``min(total_losses, sum(available))`` and none exceeds its group's
    available count. Repeated group ids raise ``InvalidInput``.
    """
    losses = _loss_count("total_losses", total_losses)
    _require_unique_ids([group_id for group_id, _ in entries])
    capacity = {group_id: require_non_negative_int(f"available[{group_id}]", count) for group_id, count in entries}
    allocation = {group_id: 0 for group_id in capacity}
    total = sum(capacity.values())
    if losses == 0 or total == 0:
        return allocation

    safe_losses = min(losses, total)
    fractions: List[Tuple[float, Hashable]] = []
    for group_id, count in capacity.items():
        exact = count / total * safe_losses
        allocation[group_id] = min(count, math.floor(exact))
        fractions.append((exact - math.floor(exact), group_id))

    remaining = safe_losses - sum(allocation.values())
    # Python's sort is stable, so equal remainders keep input order.
    order = [group_id for _, group_id in sorted(fractions, key=lambda f: -f[0])]
    while remaining > 0:
        progressed = False
        for group_id in order:
            if remaining <= 0:
                break
            if allocation[group_id] < capacity[group_id]:
                allocation[group_id] += 1
                remaining -= 1
                progressed = True
        if not progressed:
            break
    return allocation


def trim_by_type(group: UnitGroup, unit_type: str, losses: float) -> UnitGroup:
    """Remove ``losses`` soldiers of ``unit_type``, one per matching squad per sweep."""
    remaining = _loss_count("losses", losses)
    if remaining == 0:
        return group
    sizes = [s.current_size for s in group.squads]
    targets = [i for i, s in enumerate(group.squads) if s.unit_type == unit_type]
    while remaining > 0:
        applied = False
        for i in targets:
            if remaining <= 0:
                break
            if sizes[i] > 0:
                sizes[i] -= 1
                remaining -= 1
                applied = True
        if not applied:
            break
    return group.with_squads(s.with_size(size) for s, size in zip(group.squads, sizes))


# ------------------------------------------------------------
# Garrison casualties after a siege
# ------------------------------------------------------------

@dataclass(frozen=True)
class LossNotice:
    group_id: int
    group_name: str
    message: str
    destroyed: bool = False


@dataclass
class GarrisonCasualties:
    groups: List[UnitGroup] = field(default_factory=list)
    destroyed: List[int] = field(default_factory=list)
    notices: List[LossNotice] = field(default_factory=list)
    losses: Dict[int, int] = field(default_factory=dict)


def garrison_losses(result: SiegeBattleResult) -> Tuple[int, int]:
    """Whole warriors and archers the garrison lost during ``result``."""
    warriors = max(0, round_half_up(result.initial_garrison_warriors) - round_half_up(result.final_garrison_warriors))
    archers = max(0, round_half_up(result.initial_garrison_archers) - round_half_up(result.final_garrison_archers))
    return warriors, archers


def apply_garrison_losses(groups: Sequence[UnitGroup], warrior_losses: int, archer_losses: int) -> GarrisonCasualties:
    """Spread typed garrison losses over ``groups`` and trim their squads.

    Returns every group (updated where it took losses, in input order), the
    ids of groups left with no soldiers and a notice for each group hit.
    """
    warrior_losses = _loss_count("warrior_losses", warrior_losses)
    archer_losses = _loss_count("archer_losses", archer_losses)
    _require_unique_ids([g.id for g in groups])
    by_warriors = distribute_across_groups([(g.id, g.count_by_type(WARRIOR)) for g in groups], warrior_losses)
    by_archers = distribute_across_groups([(g.id, g.count_by_type(ARCHER)) for g in groups], archer_losses)

    outcome = GarrisonCasualties()
    for group in groups:
        lost_warriors = by_warriors.get(group.id, 0)
        lost_archers = by_archers.get(group.id, 0)
        lost = lost_warriors + lost_archers
        if lost <= 0 or not group.squads:
            outcome.groups.append(group)
            continue
        updated = trim_by_type(trim_by_type(group, WARRIOR, lost_warriors), ARCHER, lost_archers)
        outcome.groups.append(updated)
        outcome.losses[group.id] = lost
        if updated.is_destroyed:
            outcome.destroyed.append(group.id)
            notice = LossNotice(group.id, group.name, f"{group.name} was decimated in the battle.", destroyed=True)
        else:
            notice = LossNotice(group.id, group.name, f"{group.name} suffered {lost} losses defending the fortress.")
        outcome.notices.append(notice)
    logger.debug(
        "garrison lost %d warriors and %d archers across %d groups, %d destroyed",
        warrior_losses,
        archer_losses,
        len(outcome.losses),
        len(outcome.destroyed),
    )
    return outcome
