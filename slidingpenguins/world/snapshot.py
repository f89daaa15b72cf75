"""GridSnapshot — a read-only view of the board handed to deciders.

Deciders only ever see notations, never live objects, so nothing they do
can mutate the game.  ``CellKind`` collapses the notations into the
categories that matter for choosing a move.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from types import MappingProxyType
from typing import TYPE_CHECKING

from slidingpenguins.world.terrain import PLUGGED_HOLE_NOTATION, FoodType, HazardKind

if TYPE_CHECKING:
    from collections.abc import Mapping

    from slidingpenguins.world.position import Position


class CellKind(Enum):
    """What a decider can tell about a cell."""

    EMPTY = auto()
    FOOD = auto()
    PENGUIN = auto()
    HAZARD = auto()
    HOLE = auto()
    PLUGGED_HOLE = auto()

    @property
    def is_passable(self) -> bool:
        """Return True if a slide carries on through this cell."""
        return self in (CellKind.EMPTY, CellKind.PLUGGED_HOLE)


_KIND_BY_NOTATION: dict[str, CellKind] = {
    **{food.notation: CellKind.FOOD for food in FoodType},
    HazardKind.LIGHT_ICE.value: CellKind.HAZARD,
    HazardKind.HEAVY_ICE.value: CellKind.HAZARD,
    HazardKind.SEA_LION.value: CellKind.HAZARD,
    HazardKind.HOLE.value: CellKind.HOLE,
    PLUGGED_HOLE_NOTATION: CellKind.PLUGGED_HOLE,
}


def classify(notation: str | None) -> CellKind:
    """Map a two-character notation to its CellKind."""
    if notation is None:
        return CellKind.EMPTY
    kind = _KIND_BY_NOTATION.get(notation)
    if kind is not None:
        return kind
    if notation.startswith("P") and notation[1:].isdigit():
        return CellKind.PENGUIN
    msg = f"unknown notation {notation!r}"
    raise ValueError(msg)


@dataclass(frozen=True)
class GridSnapshot:
    """Frozen copy of every occupied cell's notation.

    Attributes:
        cells: Mapping from Position to the notation visible there.
    """

    cells: Mapping[Position, str]

    @classmethod
    def from_notations(cls, cells: dict[Position, str]) -> GridSnapshot:
        return cls(cells=MappingProxyType(dict(cells)))

    def notation_at(self, pos: Position) -> str | None:
        return self.cells.get(pos)

    def kind_at(self, pos: Position) -> CellKind:
        return classify(self.cells.get(pos))
