"""Grid — the 10x10 occupancy map of the icy terrain.

The grid is the source of truth for who stands where.  Every object also
keeps a ``position`` mirror; ``place`` and ``move`` keep the two in step
and ``verify`` checks that nothing has drifted.

Plugged holes live on a separate floor layer: they keep their cell and
their ``PH`` notation, but penguins and sliding hazards may pass over or
stop on top of them.  ``get`` returns whatever is on top.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import TypeAlias

from slidingpenguins.engine.errors import InvalidPositionError, InvariantViolation
from slidingpenguins.penguins.penguin import Penguin
from slidingpenguins.world.position import GRID_SIZE, Position
from slidingpenguins.world.snapshot import GridSnapshot
from slidingpenguins.world.terrain import Food, Hazard

TerrainObject: TypeAlias = Penguin | Food | Hazard


@dataclass
class Grid:
    """A square terrain holding at most one object per cell.

    Attributes:
        size: Number of rows and columns.
    """

    size: int = field(default=GRID_SIZE, init=False)
    _objects: dict[Position, TerrainObject] = field(
        init=False, default_factory=dict, repr=False,
    )
    _floor: dict[Position, Hazard] = field(init=False, default_factory=dict, repr=False)

    def is_in_bounds(self, x: int, y: int) -> bool:
        """Return True if ``(x, y)`` is on the ice rather than in the water."""
        return 0 <= x < self.size and 0 <= y < self.size

    def positions(self) -> Iterator[Position]:
        """Yield every cell in row-major order."""
        for y in range(self.size):
            for x in range(self.size):
                yield Position(x, y)

    def get(self, pos: Position) -> TerrainObject | None:
        """Return the object visible at ``pos``, or None if the cell is empty."""
        _require_position(pos)
        top = self._objects.get(pos)
        if top is not None:
            return top
        return self._floor.get(pos)

    def is_empty(self, pos: Position) -> bool:
        return self.get(pos) is None

    def place(self, pos: Position, obj: TerrainObject) -> None:
        """Put ``obj`` on ``pos`` and point its position mirror there.

        A plugged hole goes onto the floor layer; anything else may be
        placed on top of a plugged hole.

        Raises:
            InvariantViolation: If the cell is already taken.
        """
        _require_position(pos)
        if isinstance(obj, Hazard) and obj.is_plugged_hole:
            if pos in self._floor or pos in self._objects:
                msg = f"cannot put a plugged hole on occupied cell {pos}"
                raise InvariantViolation(msg)
            self._floor[pos] = obj
        else:
            occupant = self._objects.get(pos)
            if occupant is not None:
                msg = f"cannot place {obj.notation} on {pos}: held by {occupant.notation}"
                raise InvariantViolation(msg)
            self._objects[pos] = obj
        obj.position = pos

    def remove(self, pos: Position) -> TerrainObject | None:
        """Lift the top object off ``pos``.

        Removing from an empty cell is a no-op.  Plugged holes on the
        floor layer are never removed.  The removed object's position
        mirror is left for the caller to update.

        Returns:
            The removed object, or None.
        """
        _require_position(pos)
        return self._objects.pop(pos, None)

    def move(self, obj: TerrainObject, target: Position) -> None:
        """Move ``obj`` from its current cell to ``target``."""
        if obj.position is None or self._objects.get(obj.position) is not obj:
            msg = f"{obj.notation} is not on the grid where it claims to be"
            raise InvariantViolation(msg)
        del self._objects[obj.position]
        self.place(target, obj)

    def plug(self, pos: Position) -> Hazard:
        """Turn the open hole at ``pos`` into a plugged hole.

        Returns:
            The plugged hole.

        Raises:
            InvariantViolation: If ``pos`` does not hold an open hole.
        """
        hole = self._objects.get(pos)
        if not isinstance(hole, Hazard) or not hole.is_open_hole:
            msg = f"no open hole at {pos} to plug"
            raise InvariantViolation(msg)
        hole.plug()
        del self._objects[pos]
        self._floor[pos] = hole
        return hole

    def objects(self) -> list[TerrainObject]:
        """Return every object on the board, floor layer included."""
        return [*self._objects.values(), *self._floor.values()]

    def penguins(self) -> list[Penguin]:
        """Return the penguins on the board ordered by id."""
        found = [obj for obj in self._objects.values() if isinstance(obj, Penguin)]
        return sorted(found, key=lambda p: p.order)

    def food_items(self) -> list[Food]:
        return [obj for obj in self._objects.values() if isinstance(obj, Food)]

    def hazards(self) -> list[Hazard]:
        return [obj for obj in self.objects() if isinstance(obj, Hazard)]

    def food_weight(self) -> int:
        """Total weight of food still lying on the ice."""
        return sum(food.weight for food in self.food_items())

    def snapshot(self) -> GridSnapshot:
        """Return a frozen notation map of the current board."""
        cells: dict[Position, str] = {pos: hole.notation for pos, hole in self._floor.items()}
        cells.update({pos: obj.notation for pos, obj in self._objects.items()})
        return GridSnapshot.from_notations(cells)

    def verify(self, penguins: Iterable[Penguin] = ()) -> None:
        """Check the occupancy invariants.

        Every object's mirror must match its cell, no object may appear
        twice, and every eliminated penguin must be gone from the board.

        Args:
            penguins: All penguins in the game, eliminated ones included.

        Raises:
            InvariantViolation: On the first broken invariant.
        """
        seen: set[int] = set()
        for pos, obj in [*self._objects.items(), *self._floor.items()]:
            if obj.position != pos:
                msg = f"{obj.notation} at {pos} believes it is at {obj.position}"
                raise InvariantViolation(msg)
            if id(obj) in seen:
                msg = f"{obj.notation} occupies more than one cell"
                raise InvariantViolation(msg)
            seen.add(id(obj))

        for hole in self._floor.values():
            if not hole.is_plugged_hole:
                msg = f"floor layer at {hole.position} holds {hole.notation}"
                raise InvariantViolation(msg)

        for penguin in penguins:
            if penguin.is_eliminated:
                if id(penguin) in seen:
                    msg = f"eliminated {penguin.penguin_id} is still on the grid"
                    raise InvariantViolation(msg)
            elif self._objects.get(penguin.position) is not penguin:
                msg = f"{penguin.penguin_id} is not on the grid at {penguin.position}"
                raise InvariantViolation(msg)


def _require_position(pos: object) -> None:
    if not isinstance(pos, Position):
        msg = f"expected a Position, got {pos!r}"
        raise InvalidPositionError(msg)
