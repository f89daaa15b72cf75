"""Deciders — who chooses each penguin's move.

A decider looks at a frozen snapshot of the board and returns a
TurnDecision.  The scheduler treats the human player and the computer
opponents the same way: both are just objects with a ``decide`` method.

``GreedyDecider`` is the computer opponent.  For every direction it
traces the slide on the snapshot and ranks the outcome:

1. FOOD  - the slide ends on food.
2. SAFE  - the slide stops against a hazard or another penguin.
3. FATAL - the slide ends in the water or an open hole.

It picks at random among the directions of the best non-empty class.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Protocol

from slidingpenguins.engine.errors import InvalidDecisionError
from slidingpenguins.penguins.penguin import Species
from slidingpenguins.world.position import Direction
from slidingpenguins.world.snapshot import CellKind

if TYPE_CHECKING:
    from collections.abc import Iterable

    from numpy.random import Generator

    from slidingpenguins.penguins.penguin import Penguin
    from slidingpenguins.world.position import Position
    from slidingpenguins.world.snapshot import GridSnapshot


@dataclass(frozen=True)
class TurnDecision:
    """What a penguin does this turn.

    Attributes:
        direction: Slide direction.  Only a Royal that uses its single
            step may leave this as None to skip the slide.
        use_ability: Whether to spend the special action.
        royal_direction: Direction of the Royal single step.
    """

    direction: Direction | None
    use_ability: bool = False
    royal_direction: Direction | None = None


class Decider(Protocol):
    """Anything that can choose a move for a penguin."""

    def decide(
        self,
        snapshot: GridSnapshot,
        penguin: Penguin,
        turn: int,
    ) -> TurnDecision: ...


@dataclass
class ScriptedDecider:
    """Replays a fixed list of decisions, one per call."""

    decisions: deque[TurnDecision] = field(default_factory=deque)

    @classmethod
    def of(cls, decisions: Iterable[TurnDecision]) -> ScriptedDecider:
        return cls(decisions=deque(decisions))

    def decide(
        self,
        snapshot: GridSnapshot,
        penguin: Penguin,
        turn: int,
    ) -> TurnDecision:
        if not self.decisions:
            msg = f"no scripted decision left for {penguin.penguin_id} on turn {turn}"
            raise InvalidDecisionError(msg)
        return self.decisions.popleft()


class Outcome(Enum):
    """Predicted result of sliding in one direction."""

    FOOD = auto()
    SAFE = auto()
    FATAL = auto()


@dataclass
class GreedyDecider:
    """Computer opponent that prefers food, then safety.

    Attributes:
        rng: Seeded random generator for tie-breaking and ability rolls.
        ability_chance: Probability that a King, Emperor or Royal spends
            its ability on a given turn.  A Rockhopper instead jumps the
            first time its chosen slide heads into a hazard.
    """

    rng: Generator
    ability_chance: float = 0.3

    def decide(
        self,
        snapshot: GridSnapshot,
        penguin: Penguin,
        turn: int,
    ) -> TurnDecision:
        start = penguin.position
        if start is None:
            msg = f"{penguin.penguin_id} is eliminated and has no move"
            raise InvalidDecisionError(msg)

        direction = self._choose_direction(snapshot, start)
        if penguin.ability_used:
            return TurnDecision(direction=direction)

        if penguin.species is Species.ROCKHOPPER:
            use_ability = faces_hazard(snapshot, start, direction)
        else:
            use_ability = bool(self.rng.random() < self.ability_chance)

        royal_direction = None
        if use_ability and penguin.species is Species.ROYAL:
            royal_direction = self._safe_step(snapshot, start)
        return TurnDecision(
            direction=direction,
            use_ability=use_ability,
            royal_direction=royal_direction,
        )

    def _choose_direction(self, snapshot: GridSnapshot, start: Position) -> Direction:
        outcomes = {d: forecast(snapshot, start, d) for d in Direction}
        for outcome in Outcome:
            candidates = [d for d in Direction if outcomes[d] is outcome]
            if candidates:
                return self._pick(candidates)
        return self._pick(list(Direction))

    def _safe_step(self, snapshot: GridSnapshot, start: Position) -> Direction:
        """Pick a single step that stays on the ice and avoids hazards."""
        safe = []
        for direction in Direction:
            target = direction.step(start)
            if target is None:
                continue
            if snapshot.kind_at(target) in (CellKind.HAZARD, CellKind.HOLE):
                continue
            safe.append(direction)
        return self._pick(safe or list(Direction))

    def _pick(self, options: list[Direction]) -> Direction:
        return options[int(self.rng.integers(len(options)))]


def forecast(snapshot: GridSnapshot, start: Position, direction: Direction) -> Outcome:
    """Trace a plain slide on ``snapshot`` and classify where it ends."""
    pos: Position | None = start
    while True:
        pos = direction.step(pos)
        if pos is None:
            return Outcome.FATAL
        kind = snapshot.kind_at(pos)
        if kind.is_passable:
            continue
        if kind is CellKind.FOOD:
            return Outcome.FOOD
        if kind is CellKind.HOLE:
            return Outcome.FATAL
        return Outcome.SAFE


def faces_hazard(snapshot: GridSnapshot, start: Position, direction: Direction) -> bool:
    """Return True if the first obstacle on the slide path is a hazard."""
    pos: Position | None = start
    while True:
        pos = direction.step(pos)
        if pos is None:
            return False
        kind = snapshot.kind_at(pos)
        if kind.is_passable:
            continue
        return kind in (CellKind.HAZARD, CellKind.HOLE)
