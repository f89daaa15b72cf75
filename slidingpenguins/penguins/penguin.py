"""Penguin — the actor that slides across the ice.

A penguin carries its inventory of collected food, a stun flag that
costs it exactly one turn, and a one-shot species ability.  Elimination
(water or an open hole) clears its position but keeps the inventory so
the penguin is still scored at the end.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from slidingpenguins.engine.errors import InvariantViolation

if TYPE_CHECKING:
    from slidingpenguins.world.position import Position
    from slidingpenguins.world.terrain import Food


class Species(Enum):
    """Penguin species; each one has a different special action."""

    KING = "King"
    EMPEROR = "Emperor"
    ROYAL = "Royal"
    ROCKHOPPER = "Rockhopper"

    @property
    def display_name(self) -> str:
        return f"{self.value} Penguin"


@dataclass(eq=False)
class Penguin:
    """A single penguin.

    Attributes:
        penguin_id: ``P1``, ``P2`` and so on, assigned in spawn order.
        species: Determines the special action.
        position: Current cell, or None once eliminated.
        inventory: Collected food in pickup order.
        stunned: If set, the next turn is skipped.
        ability_used: Set once the special action has been spent.
        is_player: True for the human-controlled penguin.
    """

    penguin_id: str
    species: Species
    position: Position | None = None
    inventory: list[Food] = field(default_factory=list)
    stunned: bool = False
    ability_used: bool = False
    is_player: bool = False

    @property
    def notation(self) -> str:
        return self.penguin_id

    @property
    def order(self) -> int:
        """Spawn number taken from the id, so ``P10`` comes after ``P9``."""
        return int(self.penguin_id[1:])

    @property
    def is_eliminated(self) -> bool:
        """Return True once the penguin has left the board."""
        return self.position is None

    @property
    def total_weight(self) -> int:
        """Sum of the weights of all carried food."""
        return sum(food.weight for food in self.inventory)

    def pick_up(self, food: Food) -> None:
        """Add ``food`` to the inventory and detach it from the board."""
        food.position = None
        self.inventory.append(food)

    def drop_lightest(self) -> Food | None:
        """Remove and return the lightest food item.

        Ties go to the item picked up first.

        Returns:
            The removed Food, or None if the inventory was empty.
        """
        if not self.inventory:
            return None
        lightest = min(range(len(self.inventory)), key=lambda i: self.inventory[i].weight)
        return self.inventory.pop(lightest)

    def spend_ability(self) -> None:
        """Flip ``ability_used`` from False to True.

        Raises:
            InvariantViolation: If the ability was already spent.
        """
        if self.ability_used:
            msg = f"{self.penguin_id} tried to use its special action twice"
            raise InvariantViolation(msg)
        self.ability_used = True

    def __str__(self) -> str:
        where = str(self.position) if self.position is not None else "eliminated"
        return f"{self.species.display_name} ({self.penguin_id}) at {where}"
