"""TurnScheduler — the round loop.

Each round every penguin gets one slot, in id order:

1. An eliminated penguin is skipped silently.
2. A stunned penguin loses this turn, and the stun is cleared.
3. Otherwise its decider is asked for a move; the special action is
   applied if requested and still available, then the penguin slides.

After the last round the standings are handed to the scoreboard.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from slidingpenguins.engine.errors import InvalidDecisionError
from slidingpenguins.engine.events import EventKind
from slidingpenguins.penguins.penguin import Species
from slidingpenguins.simulation.scoreboard import standings
from slidingpenguins.world.position import Direction

if TYPE_CHECKING:
    from slidingpenguins.engine.abilities import AbilityEngine
    from slidingpenguins.engine.events import EventLog
    from slidingpenguins.engine.slide import SlideEngine
    from slidingpenguins.penguins.deciders import Decider, TurnDecision
    from slidingpenguins.penguins.penguin import Penguin
    from slidingpenguins.simulation.scoreboard import Scoreboard, ScoreRecord
    from slidingpenguins.world.grid import Grid

logger = logging.getLogger(__name__)


@dataclass
class TurnScheduler:
    """Drives penguins through the rounds one slot at a time.

    Attributes:
        grid: The shared board.
        penguins: Every penguin in the game; kept sorted by id.
        deciders: Decider per penguin id.
        slides: Slide resolution.
        abilities: Special action resolution.
        rounds: Rounds to play.
        check_invariants: Verify the grid after every slot.
        scoreboard: Receives the standings when the game ends.
        turn: Current round number, starting at 1.
        results: Final standings, filled in once finished.
    """

    grid: Grid
    penguins: list[Penguin]
    deciders: dict[str, Decider]
    slides: SlideEngine
    abilities: AbilityEngine
    rounds: int = 4
    check_invariants: bool = True
    scoreboard: Scoreboard | None = None
    turn: int = 1
    results: list[ScoreRecord] = field(default_factory=list)
    _slot: int = field(default=0, init=False, repr=False)
    _finished: bool = field(default=False, init=False, repr=False)

    def __post_init__(self) -> None:
        self.penguins = sorted(self.penguins, key=lambda p: p.order)
        missing = [p.penguin_id for p in self.penguins if p.penguin_id not in self.deciders]
        if missing:
            msg = f"no decider for {', '.join(missing)}"
            raise ValueError(msg)

    @property
    def events(self) -> EventLog:
        return self.slides.events

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def current_penguin(self) -> Penguin | None:
        """The penguin whose slot comes next, or None once finished."""
        if self._finished or not self.penguins:
            return None
        return self.penguins[self._slot]

    def step(self) -> None:
        """Play the next penguin slot."""
        if self._finished:
            return
        if self.turn > self.rounds or not self.penguins:
            self._finish()
            return

        self._take_turn(self.penguins[self._slot])
        if self.check_invariants:
            self.grid.verify(self.penguins)

        self._slot += 1
        if self._slot == len(self.penguins):
            self._slot = 0
            self.turn += 1
            if self.turn > self.rounds:
                self._finish()

    def run(self) -> list[ScoreRecord]:
        """Play every remaining slot and return the standings."""
        while not self._finished:
            self.step()
        return self.results

    def _take_turn(self, penguin: Penguin) -> None:
        pid = penguin.penguin_id
        if penguin.is_eliminated:
            logger.debug("Round %d: %s is out of the game", self.turn, pid)
            return

        self.events.emit(EventKind.TURN_STARTED, pid, penguin.position, str(self.turn))
        if penguin.stunned:
            penguin.stunned = False
            self.events.emit(EventKind.STUN_SKIPPED, pid, penguin.position)
            return

        decision = self.deciders[pid].decide(self.grid.snapshot(), penguin, self.turn)
        use_ability = decision.use_ability and not penguin.ability_used
        _validate(penguin, decision, use_ability=use_ability)

        modifiers = None
        if use_ability:
            modifiers = self.abilities.activate(penguin, decision.royal_direction)
            if penguin.is_eliminated:
                return

        if decision.direction is None:
            self.events.emit(EventKind.SLIDE_SKIPPED, pid, penguin.position)
            return
        self.slides.slide_penguin(penguin, decision.direction, modifiers)

    def _finish(self) -> None:
        self._finished = True
        self.results = standings(self.penguins)
        self.events.emit(EventKind.GAME_OVER, "game")
        logger.info(
            "Game over: %s",
            ", ".join(f"{r.penguin_id}={r.total_weight}" for r in self.results),
        )
        if self.scoreboard is not None:
            self.scoreboard.report(self.results)


def _validate(penguin: Penguin, decision: TurnDecision, *, use_ability: bool) -> None:
    """Reject decisions that cannot be carried out, before anything moves."""
    royal_step = use_ability and penguin.species is Species.ROYAL
    if decision.direction is None:
        if not royal_step:
            msg = f"{penguin.penguin_id} must choose a slide direction"
            raise InvalidDecisionError(msg)
    elif not isinstance(decision.direction, Direction):
        msg = f"{decision.direction!r} is not a Direction"
        raise InvalidDecisionError(msg)
    if royal_step and not isinstance(decision.royal_direction, Direction):
        msg = f"{penguin.penguin_id} needs a direction for its single step"
        raise InvalidDecisionError(msg)
