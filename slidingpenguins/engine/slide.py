"""SlideEngine — frictionless sliding and the collisions it sets off.

A slide walks a penguin cell by cell until something stops it:

- Water past the edge or an open hole eliminates the penguin.
- Food is collected and ends the slide in the food's cell.
- Another penguin stops the slider, which hands its momentum over: the
  struck penguin slides on in the same direction.
- Heavy ice stops the slider and costs it its lightest food.
- Light ice stuns the slider and is pushed away.
- A sea lion is pushed away first, then the slider bounces back and
  slides the opposite way.

Pushed hazards follow their own, simpler rules (``slide_hazard``): they
crush food, stop in front of anything solid, sink past the edge, and
plug the first open hole they reach.

Cascades are plain recursion.  A penguin that would start a slide it has
already made on the current chain (same cell, same direction) with no
hazard having moved since stays put instead, so two immovable sea lions
cannot bounce a penguin forever.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING

from slidingpenguins.engine.errors import InvariantViolation
from slidingpenguins.engine.events import EventKind
from slidingpenguins.penguins.penguin import Penguin
from slidingpenguins.world.terrain import Food, Hazard, HazardKind

if TYPE_CHECKING:
    from slidingpenguins.engine.events import EventLog
    from slidingpenguins.world.grid import Grid
    from slidingpenguins.world.position import Direction, Position

logger = logging.getLogger(__name__)

FollowUp = Callable[[], None]


@dataclass
class SlideModifiers:
    """Ability effects armed for one slide.

    Attributes:
        step_cap: Stop after this many free cells (King, Emperor).
            Cleared once it fires.
        jump_armed: Hop over the first hazard met (Rockhopper).
            Cleared once a hazard is met.
        single_step: Move at most one cell (Royal pre-move).
    """

    step_cap: int | None = None
    jump_armed: bool = False
    single_step: bool = False

    @property
    def pending(self) -> bool:
        """Return True if an ability effect was armed but never fired."""
        return self.step_cap is not None or self.jump_armed


class _Jump(Enum):
    LANDED = auto()
    STOPPED = auto()
    FAILED = auto()


@dataclass
class SlideEngine:
    """Resolves penguin and hazard slides on a grid.

    Attributes:
        grid: The board being mutated.
        events: Where every outcome is reported.
        crushed_food: Food destroyed by sliding hazards.
        forfeited_food: Food lost to heavy ice penalties.
    """

    grid: Grid
    events: EventLog
    crushed_food: list[Food] = field(default_factory=list)
    forfeited_food: list[Food] = field(default_factory=list)
    _depth: int = field(default=0, init=False, repr=False)
    _chain: set[tuple[int, Position, Direction]] = field(
        default_factory=set,
        init=False,
        repr=False,
    )

    # -- Penguins ------------------------------------------------------------

    def slide_penguin(
        self,
        penguin: Penguin,
        direction: Direction,
        modifiers: SlideModifiers | None = None,
    ) -> None:
        """Slide ``penguin`` in ``direction`` until the slide resolves.

        Args:
            penguin: The penguin to move; must be on the grid.
            direction: Where it slides.
            modifiers: Armed ability effects, if any.  Mutated in place
                as effects fire.

        Raises:
            InvariantViolation: If the penguin is eliminated or its
                position mirror disagrees with the grid.
        """
        self._require_on_grid(penguin)
        if self._depth == 0:
            self._chain.clear()
        self._depth += 1
        try:
            self._slide_penguin(penguin, direction, modifiers or SlideModifiers())
        finally:
            self._depth -= 1

    def _slide_penguin(
        self,
        penguin: Penguin,
        direction: Direction,
        mods: SlideModifiers,
    ) -> None:
        pid = penguin.penguin_id
        key = (id(penguin), penguin.position, direction)
        if key in self._chain:
            self.events.emit(EventKind.SLIDE_SKIPPED, pid, penguin.position)
            self._settle(penguin, mods)
            return
        self._chain.add(key)

        self.events.emit(
            EventKind.SLIDE_STARTED,
            pid,
            penguin.position,
            direction.name.lower(),
        )
        follow_up: FollowUp | None = None
        steps = 0
        while True:
            target = direction.step(penguin.position)
            if target is None:
                self._eliminate(penguin, "water")
                break

            occupant = self.grid.get(target)
            match occupant:
                case None | Hazard(plugged=True):
                    self.grid.move(penguin, target)
                    steps += 1
                    if mods.single_step:
                        break
                    if mods.step_cap is not None and steps >= mods.step_cap:
                        mods.step_cap = None
                        self.events.emit(EventKind.STEP_CAP_REACHED, pid, target)
                        break
                case Food():
                    self._collect(penguin, occupant, target)
                    break
                case Penguin():
                    self.events.emit(
                        EventKind.MOMENTUM_TRANSFERRED,
                        pid,
                        penguin.position,
                        occupant.penguin_id,
                    )
                    follow_up = self._transfer(occupant, direction)
                    break
                case Hazard() if mods.jump_armed:
                    mods.jump_armed = False
                    outcome = self._jump(penguin, occupant, direction)
                    if outcome is _Jump.LANDED:
                        continue
                    if outcome is _Jump.FAILED:
                        follow_up = self._collide(penguin, occupant, target, direction)
                    break
                case Hazard():
                    follow_up = self._collide(penguin, occupant, target, direction)
                    break
                case _:
                    msg = f"unknown object {occupant!r} at {target}"
                    raise InvariantViolation(msg)

        self._settle(penguin, mods)
        if follow_up is not None:
            follow_up()

    def _transfer(self, struck: Penguin, direction: Direction) -> FollowUp:
        def follow_up() -> None:
            self._slide_penguin(struck, direction, SlideModifiers())

        return follow_up

    def _collide(
        self,
        penguin: Penguin,
        hazard: Hazard,
        target: Position,
        direction: Direction,
    ) -> FollowUp | None:
        """Apply ``hazard``'s effect on a penguin that ran into it.

        The penguin is left in the cell before ``target``.  Effects that
        start new slides are returned as a follow-up so that they run
        after the current slide has been wrapped up.
        """
        pid = penguin.penguin_id
        match hazard.kind:
            case HazardKind.HOLE:
                self._eliminate(penguin, "hole", at=target)
                return None
            case HazardKind.HEAVY_ICE:
                lost = penguin.drop_lightest()
                if lost is None:
                    self.events.emit(EventKind.PENALTY_AVOIDED, pid, penguin.position)
                else:
                    self.forfeited_food.append(lost)
                    self.events.emit(EventKind.FOOD_LOST, pid, penguin.position, str(lost))
                return None
            case HazardKind.LIGHT_ICE:
                penguin.stunned = True
                self.events.emit(EventKind.STUNNED, pid, penguin.position)
                self.grid.remove(target)

                def push_ice() -> None:
                    self.slide_hazard(hazard, direction)

                return push_ice
            case HazardKind.SEA_LION:
                self.events.emit(EventKind.BOUNCED, pid, penguin.position)
                self.grid.remove(target)

                def push_and_bounce() -> None:
                    self.slide_hazard(hazard, direction)
                    self._slide_penguin(penguin, direction.opposite(), SlideModifiers())

                return push_and_bounce
        msg = f"unhandled hazard {hazard.kind}"
        raise InvariantViolation(msg)

    def _jump(self, penguin: Penguin, hazard: Hazard, direction: Direction) -> _Jump:
        """Try to hop over ``hazard`` into the cell beyond it."""
        pid = penguin.penguin_id
        landing = direction.step(hazard.position)
        if landing is None:
            self.events.emit(EventKind.JUMPED, pid, penguin.position, hazard.notation)
            self._eliminate(penguin, "water")
            return _Jump.STOPPED

        occupant = self.grid.get(landing)
        match occupant:
            case None | Hazard(plugged=True):
                self.events.emit(EventKind.JUMPED, pid, landing, hazard.notation)
                self.grid.move(penguin, landing)
                return _Jump.LANDED
            case Food():
                self.events.emit(EventKind.JUMPED, pid, landing, hazard.notation)
                self._collect(penguin, occupant, landing)
                return _Jump.STOPPED
            case Hazard() if occupant.is_open_hole:
                self.events.emit(EventKind.JUMPED, pid, landing, hazard.notation)
                self._eliminate(penguin, "hole", at=landing)
                return _Jump.STOPPED
            case _:
                self.events.emit(EventKind.JUMP_FAILED, pid, penguin.position, hazard.notation)
                return _Jump.FAILED

    def _collect(self, penguin: Penguin, food: Food, target: Position) -> None:
        self.grid.remove(target)
        self.grid.move(penguin, target)
        penguin.pick_up(food)
        self.events.emit(
            EventKind.FOOD_COLLECTED,
            penguin.penguin_id,
            target,
            f"{food.kind.name.title()} (Weight={food.weight} units)",
        )

    def _eliminate(self, penguin: Penguin, cause: str, at: Position | None = None) -> None:
        last = penguin.position
        self.grid.remove(last)
        penguin.position = None
        self.events.emit(EventKind.ELIMINATED, penguin.penguin_id, at or last, cause)
        logger.info("%s eliminated (%s) near %s", penguin.penguin_id, cause, at or last)

    def _settle(self, penguin: Penguin, mods: SlideModifiers) -> None:
        if mods.pending:
            mods.step_cap = None
            mods.jump_armed = False
            self.events.emit(EventKind.ABILITY_WASTED, penguin.penguin_id, penguin.position)

    def _require_on_grid(self, penguin: Penguin) -> None:
        if penguin.position is None:
            msg = f"{penguin.penguin_id} is eliminated and cannot slide"
            raise InvariantViolation(msg)
        if self.grid.get(penguin.position) is not penguin:
            msg = f"{penguin.penguin_id} is not on the grid at {penguin.position}"
            raise InvariantViolation(msg)

    # -- Hazards -------------------------------------------------------------

    def slide_hazard(self, hazard: Hazard, direction: Direction) -> None:
        """Push a mobile hazard from its (already vacated) cell.

        The hazard never triggers another hazard's effect and never
        passes momentum on; it stops in front of penguins and solid
        hazards, crushes food, plugs open holes and sinks past the edge.

        Args:
            hazard: A light ice block or sea lion lifted off the grid.
            direction: Where it is pushed.

        Raises:
            InvariantViolation: If the hazard cannot slide or is still
                on the grid.
        """
        if not hazard.can_slide:
            msg = f"{hazard.notation} cannot slide"
            raise InvariantViolation(msg)
        if hazard.position is None or self.grid.get(hazard.position) is hazard:
            msg = f"{hazard.notation} must be lifted off the grid before sliding"
            raise InvariantViolation(msg)

        name = hazard.notation
        start = current = hazard.position
        while True:
            target = direction.step(current)
            if target is None:
                hazard.position = None
                self._chain.clear()
                self.events.emit(EventKind.HAZARD_SUNK, name, current)
                return

            occupant = self.grid.get(target)
            match occupant:
                case None | Hazard(plugged=True):
                    current = target
                case Food():
                    self.grid.remove(target)
                    occupant.position = None
                    self.crushed_food.append(occupant)
                    self.events.emit(EventKind.FOOD_CRUSHED, name, target, str(occupant))
                    current = target
                case Hazard() if occupant.is_open_hole:
                    self.grid.plug(target)
                    hazard.position = None
                    self._chain.clear()
                    self.events.emit(EventKind.HOLE_PLUGGED, name, target)
                    return
                case _:
                    break

        # A hazard that moved reopens slides already made on this chain.
        if current != start:
            self._chain.clear()
        self.grid.place(current, hazard)
        self.events.emit(EventKind.HAZARD_STOPPED, name, current)

    # -- Ledger --------------------------------------------------------------

    @property
    def crushed_weight(self) -> int:
        return sum(food.weight for food in self.crushed_food)

    @property
    def forfeited_weight(self) -> int:
        return sum(food.weight for food in self.forfeited_food)
