"""Config — load game parameters from YAML files.

Population sizes, the ability step caps, the computer opponents'
appetite for abilities and the RNG seed live in YAML and are parsed into
a typed dataclass here.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from slidingpenguins.engine.errors import ConfigError
from slidingpenguins.world.position import GRID_SIZE

_PERIMETER_CELLS = 4 * (GRID_SIZE - 1)


@dataclass
class GameConfig:
    """Top-level game configuration.

    Attributes:
        seed: RNG seed for deterministic replay.
        rounds: Rounds played before scoring.
        penguin_count: Penguins placed on the perimeter.
        hazard_count: Hazards scattered on the ice.
        food_count: Food items scattered on the ice.
        king_step_cap: Free cells a King slides when using its ability.
        emperor_step_cap: Free cells an Emperor slides when using its
            ability.
        ai_ability_chance: Per-turn probability that a computer King,
            Emperor or Royal spends its ability.
        check_invariants: Verify grid invariants after every turn.
        log_level: Level handed to ``configure_logging``.
    """

    seed: int = 42
    rounds: int = 4
    penguin_count: int = 3
    hazard_count: int = 15
    food_count: int = 20

    # Abilities
    king_step_cap: int = 5
    emperor_step_cap: int = 3
    ai_ability_chance: float = 0.3

    check_invariants: bool = True
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Reject settings the board cannot hold.

        Raises:
            ConfigError: If a count is negative or too large, a step cap
                is below 1, or the ability chance is not a probability.
        """
        for name in ("rounds", "penguin_count", "hazard_count", "food_count"):
            if getattr(self, name) < 0:
                msg = f"{name} must not be negative"
                raise ConfigError(msg)
        if self.penguin_count > _PERIMETER_CELLS:
            msg = f"at most {_PERIMETER_CELLS} penguins fit on the perimeter"
            raise ConfigError(msg)
        total = self.penguin_count + self.hazard_count + self.food_count
        if total > GRID_SIZE * GRID_SIZE:
            msg = f"{total} objects do not fit on a {GRID_SIZE}x{GRID_SIZE} grid"
            raise ConfigError(msg)
        if self.king_step_cap < 1 or self.emperor_step_cap < 1:
            msg = "step caps must be at least 1"
            raise ConfigError(msg)
        if not 0.0 <= self.ai_ability_chance <= 1.0:
            msg = "ai_ability_chance must be between 0 and 1"
            raise ConfigError(msg)

    @classmethod
    def from_yaml(cls, path: str | Path) -> GameConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated GameConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
            ConfigError: If the values are inconsistent.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}

        return cls(
            seed=data.get("seed", cls.seed),
            rounds=data.get("rounds", cls.rounds),
            penguin_count=data.get("penguin_count", cls.penguin_count),
            hazard_count=data.get("hazard_count", cls.hazard_count),
            food_count=data.get("food_count", cls.food_count),
            king_step_cap=data.get("king_step_cap", cls.king_step_cap),
            emperor_step_cap=data.get(
                "emperor_step_cap",
                cls.emperor_step_cap,
            ),
            ai_ability_chance=data.get(
                "ai_ability_chance",
                cls.ai_ability_chance,
            ),
            check_invariants=data.get(
                "check_invariants",
                cls.check_invariants,
            ),
            log_level=data.get("log_level", cls.log_level),
        )
