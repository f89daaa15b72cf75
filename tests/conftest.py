"""Shared fixtures for the Sliding Penguins test suite."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pytest
from numpy.random import Generator

from slidingpenguins.engine.abilities import AbilityEngine
from slidingpenguins.engine.events import EventLog
from slidingpenguins.engine.slide import SlideEngine
from slidingpenguins.penguins.penguin import Penguin, Species
from slidingpenguins.simulation.config import GameConfig
from slidingpenguins.world.grid import Grid
from slidingpenguins.world.position import Position
from slidingpenguins.world.terrain import Food, FoodType, Hazard, HazardKind


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def grid() -> Grid:
    """An empty 10x10 grid."""
    return Grid()


@pytest.fixture
def events() -> EventLog:
    return EventLog()


@pytest.fixture
def slides(grid: Grid, events: EventLog) -> SlideEngine:
    """A slide engine bound to the empty grid."""
    return SlideEngine(grid=grid, events=events)


@pytest.fixture
def abilities(slides: SlideEngine) -> AbilityEngine:
    return AbilityEngine(slides=slides)


@pytest.fixture
def default_config() -> GameConfig:
    """Default game config (no YAML file needed)."""
    return GameConfig()


@dataclass
class BoardBuilder:
    """Places literal objects on a grid by coordinates."""

    grid: Grid

    def penguin(
        self,
        x: int,
        y: int,
        species: Species = Species.KING,
        penguin_id: str = "P1",
    ) -> Penguin:
        penguin = Penguin(penguin_id=penguin_id, species=species)
        self.grid.place(Position(x, y), penguin)
        return penguin

    def hazard(self, x: int, y: int, kind: HazardKind, *, plugged: bool = False) -> Hazard:
        hazard = Hazard(kind=kind, plugged=plugged)
        self.grid.place(Position(x, y), hazard)
        return hazard

    def food(self, x: int, y: int, kind: FoodType = FoodType.KRILL, weight: int = 3) -> Food:
        food = Food(kind=kind, weight=weight)
        self.grid.place(Position(x, y), food)
        return food


@pytest.fixture
def board(grid: Grid) -> BoardBuilder:
    """Builder for hand-made scenarios on the ``grid`` fixture."""
    return BoardBuilder(grid=grid)
