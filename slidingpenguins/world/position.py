"""Position and Direction — coordinates on the icy terrain.

The terrain is a fixed 10x10 field.  Anything outside it is open water,
which is why a step off the edge yields ``None`` instead of a Position:
out-of-bounds coordinates are never representable.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from slidingpenguins.engine.errors import InvalidPositionError

GRID_SIZE = 10


@dataclass(frozen=True, slots=True)
class Position:
    """A cell on the terrain.

    Attributes:
        x: Column index, growing to the right.
        y: Row index, growing downwards.

    Raises:
        InvalidPositionError: If either coordinate is not an integer in
            ``[0, GRID_SIZE)``.
    """

    x: int
    y: int

    def __post_init__(self) -> None:
        if not isinstance(self.x, int) or not isinstance(self.y, int):
            msg = f"coordinates must be integers, got ({self.x!r}, {self.y!r})"
            raise InvalidPositionError(msg)
        if not (0 <= self.x < GRID_SIZE and 0 <= self.y < GRID_SIZE):
            msg = f"({self.x}, {self.y}) out of bounds for {GRID_SIZE}x{GRID_SIZE}"
            raise InvalidPositionError(msg)

    @property
    def is_perimeter(self) -> bool:
        """Return True for cells on the outer ring of the terrain."""
        edge = GRID_SIZE - 1
        return self.x in (0, edge) or self.y in (0, edge)

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


class Direction(Enum):
    """The four cardinal slide directions with their unit displacement."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    def opposite(self) -> Direction:
        """Return the direction pointing the other way."""
        return _OPPOSITES[self]

    def step(self, pos: Position) -> Position | None:
        """Return the neighbouring cell of ``pos`` in this direction.

        Args:
            pos: Starting cell.

        Returns:
            The adjacent Position, or None if the step leaves the terrain.
        """
        nx, ny = pos.x + self.dx, pos.y + self.dy
        if not (0 <= nx < GRID_SIZE and 0 <= ny < GRID_SIZE):
            return None
        return Position(nx, ny)

    @classmethod
    def from_letter(cls, letter: str) -> Direction:
        """Parse ``U``/``D``/``L``/``R`` (case-insensitive).

        Raises:
            ValueError: If the letter is not one of the four.
        """
        key = letter.strip().upper()
        for direction in cls:
            if direction.name[0] == key:
                return direction
        msg = f"unknown direction {letter!r}"
        raise ValueError(msg)


_OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}
