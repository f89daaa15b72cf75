"""Terrain objects — the food and hazards scattered on the ice.

Penguins live in ``slidingpenguins.penguins.penguin``; together with the
two classes here they make up everything a grid cell can hold.  Each
variant exposes a ``position`` mirror (None once the object has left the
board) and a two-character ``notation`` used for rendering.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from slidingpenguins.world.position import Position

MIN_FOOD_WEIGHT = 1
MAX_FOOD_WEIGHT = 5


class FoodType(Enum):
    """Kinds of fish and krill a penguin can collect."""

    KRILL = "Kr"
    CRUSTACEAN = "Cr"
    ANCHOVY = "An"
    SQUID = "Sq"
    MACKEREL = "Ma"

    @property
    def notation(self) -> str:
        return self.value


@dataclass(eq=False)
class Food:
    """A collectible food item.

    Type and weight never change after spawning; only the position
    mirror is cleared when the item is picked up or crushed.

    Attributes:
        kind: What the food is.
        weight: Score value, 1 to 5 units.
        position: Cell the item lies on, or None once it left the board.
    """

    kind: FoodType
    weight: int
    position: Position | None = None

    def __post_init__(self) -> None:
        if not MIN_FOOD_WEIGHT <= self.weight <= MAX_FOOD_WEIGHT:
            msg = f"food weight must be {MIN_FOOD_WEIGHT}..{MAX_FOOD_WEIGHT}, got {self.weight}"
            raise ValueError(msg)

    @property
    def notation(self) -> str:
        return self.kind.notation

    def __str__(self) -> str:
        return f"{self.notation} ({self.weight} units)"


class HazardKind(Enum):
    """Hazard subtypes and their board notation."""

    LIGHT_ICE = "LB"
    HEAVY_ICE = "HB"
    SEA_LION = "SL"
    HOLE = "HI"

    @property
    def can_slide(self) -> bool:
        """Return True for hazards that are pushed along by a collision."""
        return self in (HazardKind.LIGHT_ICE, HazardKind.SEA_LION)


PLUGGED_HOLE_NOTATION = "PH"


@dataclass(eq=False)
class Hazard:
    """An obstacle on the ice.

    Attributes:
        kind: Which hazard this is.
        position: Current cell, or None once it sank or plugged a hole.
        plugged: Only meaningful for holes; a plugged hole is inert
            terrain that still occupies its cell.
    """

    kind: HazardKind
    position: Position | None = None
    plugged: bool = False

    @property
    def can_slide(self) -> bool:
        return self.kind.can_slide

    @property
    def is_open_hole(self) -> bool:
        """Return True for a hole that still swallows penguins."""
        return self.kind is HazardKind.HOLE and not self.plugged

    @property
    def is_plugged_hole(self) -> bool:
        return self.kind is HazardKind.HOLE and self.plugged

    @property
    def notation(self) -> str:
        if self.is_plugged_hole:
            return PLUGGED_HOLE_NOTATION
        return self.kind.value

    def plug(self) -> None:
        """Mark this hole as filled in by a sliding hazard."""
        if self.kind is not HazardKind.HOLE:
            msg = f"only holes can be plugged, not {self.kind.name}"
            raise ValueError(msg)
        self.plugged = True
