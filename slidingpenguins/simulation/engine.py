"""GameEngine — builds and owns one complete game.

Wires the pieces together from a GameConfig:

1. Seed the master random generator
2. Spawn penguins, hazards and food onto an empty grid
3. Pick the player's penguin at random
4. Assign deciders (the player's, or the computer opponent)
5. Hand everything to the turn scheduler
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from numpy.random import Generator

from slidingpenguins.engine.abilities import AbilityEngine
from slidingpenguins.engine.events import EventLog
from slidingpenguins.engine.slide import SlideEngine
from slidingpenguins.penguins.deciders import Decider, GreedyDecider
from slidingpenguins.penguins.penguin import Penguin
from slidingpenguins.simulation.config import GameConfig
from slidingpenguins.simulation.scheduler import TurnScheduler
from slidingpenguins.simulation.scoreboard import Scoreboard, ScoreRecord
from slidingpenguins.simulation.spawner import Spawner
from slidingpenguins.world.grid import Grid


@dataclass
class GameEngine:
    """Drives a game forward penguin slot by penguin slot.

    Attributes:
        config: Loaded game configuration.
        player_decider: Decider for the player's penguin.  If None the
            computer plays every penguin.
        scoreboard: Receives the final standings.
        rng: Master seeded random generator.
        grid: The icy terrain.
        penguins: All penguins, in id order.
        events: Everything that happened so far.
        spawned_food_weight: Total food weight at the start.
    """

    config: GameConfig
    player_decider: Decider | None = None
    scoreboard: Scoreboard | None = None
    rng: Generator = field(init=False)
    grid: Grid = field(init=False)
    penguins: list[Penguin] = field(init=False)
    events: EventLog = field(init=False)
    slides: SlideEngine = field(init=False, repr=False)
    abilities: AbilityEngine = field(init=False, repr=False)
    scheduler: TurnScheduler = field(init=False, repr=False)
    spawned_food_weight: int = field(init=False)

    def __post_init__(self) -> None:
        """Build grid, population, engines and scheduler from config."""
        self.rng = np.random.default_rng(self.config.seed)
        self.grid = Grid()
        spawner = Spawner(
            penguin_count=self.config.penguin_count,
            hazard_count=self.config.hazard_count,
            food_count=self.config.food_count,
        )
        self.penguins = spawner.populate(self.grid, self.rng)
        self.spawned_food_weight = self.grid.food_weight()
        self._choose_player()

        self.events = EventLog()
        self.slides = SlideEngine(grid=self.grid, events=self.events)
        self.abilities = AbilityEngine(
            slides=self.slides,
            king_step_cap=self.config.king_step_cap,
            emperor_step_cap=self.config.emperor_step_cap,
        )
        self.scheduler = TurnScheduler(
            grid=self.grid,
            penguins=self.penguins,
            deciders=self._assign_deciders(),
            slides=self.slides,
            abilities=self.abilities,
            rounds=self.config.rounds,
            check_invariants=self.config.check_invariants,
            scoreboard=self.scoreboard,
        )

    @property
    def player(self) -> Penguin | None:
        return next((p for p in self.penguins if p.is_player), None)

    @property
    def finished(self) -> bool:
        return self.scheduler.finished

    @property
    def turn(self) -> int:
        return self.scheduler.turn

    def step(self) -> None:
        """Play the next penguin slot."""
        self.scheduler.step()

    def run(self) -> list[ScoreRecord]:
        """Play the game to the end and return the standings."""
        return self.scheduler.run()

    def food_balance(self) -> int:
        """Account for every unit of food spawned.

        Returns:
            Weight carried + weight still on the ice + weight crushed by
            hazards + weight forfeited to heavy ice.  Equals
            ``spawned_food_weight`` at all times.
        """
        carried = sum(p.total_weight for p in self.penguins)
        return (
            carried
            + self.grid.food_weight()
            + self.slides.crushed_weight
            + self.slides.forfeited_weight
        )

    def _choose_player(self) -> None:
        if not self.penguins:
            return
        chosen = self.penguins[int(self.rng.integers(len(self.penguins)))]
        chosen.is_player = True

    def _assign_deciders(self) -> dict[str, Decider]:
        computer = GreedyDecider(rng=self.rng, ability_chance=self.config.ai_ability_chance)
        deciders: dict[str, Decider] = {}
        for penguin in self.penguins:
            if penguin.is_player and self.player_decider is not None:
                deciders[penguin.penguin_id] = self.player_decider
            else:
                deciders[penguin.penguin_id] = computer
        return deciders
