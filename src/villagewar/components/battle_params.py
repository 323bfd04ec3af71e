from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Mapping

from villagewar.constants import MAX_INNER_STEPS, MAX_SIEGE_ROUNDS
from villagewar.errors import InvalidInput
from villagewar.utils.validation import require_non_negative, require_non_negative_int


# ------------------------------------------------------------
# Field battle tuning parameters
# ------------------------------------------------------------


@dataclass(frozen=True)
class BattleParameters:
    skirmish_ticks: int = 30
    pursuit_ticks: int = 20
    base_casualty_rate: float = 0.6
    morale_per_casualty: float = 0.8
    advantage_morale_tick: float = 3.0
    break_pct: float = 35.0
    rng_variance: float = 0.05

    def __post_init__(self) -> None:
        require_non_negative_int("skirmish_ticks", self.skirmish_ticks)
        require_non_negative_int("pursuit_ticks", self.pursuit_ticks)
        require_non_negative("base_casualty_rate", self.base_casualty_rate)
        require_non_negative("morale_per_casualty", self.morale_per_casualty)
        require_non_negative("advantage_morale_tick", self.advantage_morale_tick)
        if not 0 <= require_non_negative("break_pct", self.break_pct) <= 100:
            raise InvalidInput(f"break_pct must be within 0..100, got {self.break_pct!r}")
        if not 0 <= require_non_negative("rng_variance", self.rng_variance) <= 1:
            raise InvalidInput(f"rng_variance must be within 0..1, got {self.rng_variance!r}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BattleParameters":
        return cls(**_known_fields(cls, data))

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


# ------------------------------------------------------------
# Siege tuning parameters
# ------------------------------------------------------------


@dataclass(frozen=True)
class SiegeParameters:
    max_rounds: int = MAX_SIEGE_ROUNDS
    max_inner_steps: int = MAX_INNER_STEPS
    # Inner battle phase boundaries: steps 1..skirmish_steps are skirmish,
    # up to melee_steps_end are melee, everything after is pursuit.
    skirmish_steps: int = 3
    melee_steps_end: int = 13
    base_casualty_rate: float = 0.6
    wall_damage_factor: float = 0.2
    defender_warrior_skirmish_factor: float = 0.3
    attacker_skirmish_factor: float = 0.4
    pursuit_factor: float = 1.2

    def __post_init__(self) -> None:
        for name in ("max_rounds", "max_inner_steps", "skirmish_steps", "melee_steps_end"):
            require_non_negative_int(name, getattr(self, name))
        for name in (
            "base_casualty_rate",
            "wall_damage_factor",
            "defender_warrior_skirmish_factor",
            "attacker_skirmish_factor",
            "pursuit_factor",
        ):
            require_non_negative(name, getattr(self, name))
        if self.max_rounds > MAX_SIEGE_ROUNDS:
            raise InvalidInput(f"max_rounds must not exceed {MAX_SIEGE_ROUNDS}, got {self.max_rounds!r}")
        if self.max_inner_steps > MAX_INNER_STEPS:
            raise InvalidInput(f"max_inner_steps must not exceed {MAX_INNER_STEPS}, got {self.max_inner_steps!r}")
        if self.melee_steps_end < self.skirmish_steps:
            raise InvalidInput("melee_steps_end must not precede skirmish_steps")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SiegeParameters":
        return cls(**_known_fields(cls, data))

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def _known_fields(cls, data: Mapping[str, Any]) -> Dict[str, Any]:
    if not isinstance(data, Mapping):
        raise InvalidInput(f"{cls.__name__} expects a mapping, got {type(data).__name__}")
    names = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - names)
    if unknown:
        raise InvalidInput(f"unknown {cls.__name__} field(s): {', '.join(unknown)}")
    return dict(data)
