from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Union

from villagewar.components.battle_params import BattleParameters, SiegeParameters
from villagewar.components.unit_stats import UnitStatTable
from villagewar.errors import ConfigError, InvalidInput

logger = logging.getLogger(__name__)

SECTIONS = ("unit_stats", "battle_params", "siege_params")


@dataclass(frozen=True)
class CombatConfig:
    """Unit stats and tuning parameters shared read-only by every resolution."""
    stats: UnitStatTable = field(default_factory=UnitStatTable)
    battle: BattleParameters = field(default_factory=BattleParameters)
    siege: SiegeParameters = field(default_factory=SiegeParameters)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CombatConfig":
        """Build a config from a document; absent sections keep their defaults.

        ``unit_stats`` entries replace or add unit types on top of the
        default warrior and archer profiles.
        """
        if not isinstance(data, Mapping):
            raise ConfigError("combat config must be a JSON object")
        unknown = sorted(set(data) - set(SECTIONS))
        if unknown:
            raise ConfigError(f"unknown combat config section(s): {', '.join(unknown)}")
        try:
            stats = UnitStatTable()
            if "unit_stats" in data:
                overrides = UnitStatTable.from_dict(data["unit_stats"])
                stats = UnitStatTable({**stats.types, **overrides.types})
            battle = BattleParameters.from_dict(data.get("battle_params", {}))
            siege = SiegeParameters.from_dict(data.get("siege_params", {}))
        except ConfigError:
            raise
        except (InvalidInput, TypeError) as exc:
            raise ConfigError(f"invalid combat config: {exc}") from exc
        return cls(stats=stats, battle=battle, siege=siege)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "unit_stats": self.stats.to_dict(),
            "battle_params": self.battle.to_dict(),
            "siege_params": self.siege.to_dict(),
        }


def load_combat_config(path: Union[str, Path]) -> CombatConfig:
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except OSError as exc:
        raise ConfigError(f"cannot read combat config {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"combat config {path} is not valid JSON: {exc}") from exc
    config = CombatConfig.from_dict(payload)
    logger.info("loaded combat config from %s (%d unit types)", path, len(config.stats.types))
    return config
