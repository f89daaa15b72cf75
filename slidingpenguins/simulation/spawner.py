"""Starting population for a fresh board.

Penguins go on the perimeter first, then hazards and food anywhere that
is still free.  Every choice (cell, species, hazard kind, food kind and
weight) is drawn uniformly from the injected generator, so a seed fully
determines the starting board.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from slidingpenguins.penguins.penguin import Penguin, Species
from slidingpenguins.world.terrain import (
    MAX_FOOD_WEIGHT,
    MIN_FOOD_WEIGHT,
    Food,
    FoodType,
    Hazard,
    HazardKind,
)

if TYPE_CHECKING:
    from numpy.random import Generator

    from slidingpenguins.world.grid import Grid
    from slidingpenguins.world.position import Position

_SPECIES = list(Species)
_HAZARD_KINDS = list(HazardKind)
_FOOD_TYPES = list(FoodType)


@dataclass
class Spawner:
    """Places the starting population.

    Attributes:
        penguin_count: Penguins to place on the perimeter.
        hazard_count: Hazards to place anywhere free.
        food_count: Food items to place anywhere free.
    """

    penguin_count: int = 3
    hazard_count: int = 15
    food_count: int = 20

    def populate(self, grid: Grid, rng: Generator) -> list[Penguin]:
        """Fill ``grid`` and return the penguins in id order.

        Args:
            grid: An empty grid.
            rng: Seeded random generator.

        Returns:
            Penguins ``P1``, ``P2``, ... in placement order.
        """
        penguins: list[Penguin] = []
        for number in range(1, self.penguin_count + 1):
            pos = self._free_cell(grid, rng, perimeter_only=True)
            species = _SPECIES[int(rng.integers(len(_SPECIES)))]
            penguin = Penguin(penguin_id=f"P{number}", species=species)
            grid.place(pos, penguin)
            penguins.append(penguin)

        for _ in range(self.hazard_count):
            pos = self._free_cell(grid, rng)
            kind = _HAZARD_KINDS[int(rng.integers(len(_HAZARD_KINDS)))]
            grid.place(pos, Hazard(kind=kind))

        for _ in range(self.food_count):
            pos = self._free_cell(grid, rng)
            kind = _FOOD_TYPES[int(rng.integers(len(_FOOD_TYPES)))]
            weight = int(rng.integers(MIN_FOOD_WEIGHT, MAX_FOOD_WEIGHT + 1))
            grid.place(pos, Food(kind=kind, weight=weight))

        return penguins

    @staticmethod
    def _free_cell(grid: Grid, rng: Generator, *, perimeter_only: bool = False) -> Position:
        candidates = [
            pos
            for pos in grid.positions()
            if grid.is_empty(pos) and (pos.is_perimeter or not perimeter_only)
        ]
        if not candidates:
            msg = "no free cell left to spawn into"
            raise ValueError(msg)
        return candidates[int(rng.integers(len(candidates)))]
