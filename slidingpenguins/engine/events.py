"""Game events — the observable outcomes of a turn.

Everything that happens on the ice (a pickup, a stun, a plugged hole, an
elimination) is recorded as a GameEvent in the order the slide recursion
produces it.  The console narrator and the tests both read this log.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from slidingpenguins.world.position import Position

logger = logging.getLogger(__name__)


class EventKind(Enum):
    """Everything the engine reports."""

    TURN_STARTED = auto()
    STUN_SKIPPED = auto()
    ABILITY_USED = auto()
    ABILITY_WASTED = auto()
    SLIDE_STARTED = auto()
    SLIDE_SKIPPED = auto()
    STEP_CAP_REACHED = auto()
    FOOD_COLLECTED = auto()
    FOOD_LOST = auto()
    PENALTY_AVOIDED = auto()
    STUNNED = auto()
    MOMENTUM_TRANSFERRED = auto()
    BOUNCED = auto()
    JUMPED = auto()
    JUMP_FAILED = auto()
    ELIMINATED = auto()
    HAZARD_STOPPED = auto()
    HAZARD_SUNK = auto()
    FOOD_CRUSHED = auto()
    HOLE_PLUGGED = auto()
    GAME_OVER = auto()


_TEMPLATES: dict[EventKind, str] = {
    EventKind.TURN_STARTED: "*** Turn {detail} - {actor}",
    EventKind.STUN_SKIPPED: "{actor} is stunned and skips this turn!",
    EventKind.ABILITY_USED: "{actor} uses its special action: {detail}.",
    EventKind.ABILITY_WASTED: "{actor}'s special action had no effect.",
    EventKind.SLIDE_STARTED: "{actor} starts sliding {detail}!",
    EventKind.SLIDE_SKIPPED: "{actor} stays where it is.",
    EventKind.STEP_CAP_REACHED: "{actor} stops at {position} using its special action.",
    EventKind.FOOD_COLLECTED: "{actor} takes the {detail} on the ground.",
    EventKind.FOOD_LOST: "{actor} loses {detail} due to collision!",
    EventKind.PENALTY_AVOIDED: "{actor} hits the heavy ice block with nothing to lose.",
    EventKind.STUNNED: "{actor} is stunned by hitting the ice block!",
    EventKind.MOMENTUM_TRANSFERRED: "{actor} collides with {detail}, which starts sliding instead!",
    EventKind.BOUNCED: "{actor} collides with the sea lion and bounces back!",
    EventKind.JUMPED: "{actor} jumps over {detail}!",
    EventKind.JUMP_FAILED: "{actor} fails to jump over {detail}!",
    EventKind.ELIMINATED: "*** {actor} falls into the {detail} and is removed from the game!",
    EventKind.HAZARD_STOPPED: "{actor} stops at {position}.",
    EventKind.HAZARD_SUNK: "{actor} falls into the water!",
    EventKind.FOOD_CRUSHED: "{actor} destroys {detail}!",
    EventKind.HOLE_PLUGGED: "{actor} falls into the hole at {position} and plugs it!",
    EventKind.GAME_OVER: "***** GAME OVER *****",
}


@dataclass(frozen=True)
class GameEvent:
    """One thing that happened.

    Attributes:
        kind: Event category.
        actor: Notation of the penguin or hazard the event is about.
        position: Cell where it happened, if meaningful.
        detail: Free-form context (food name, direction, cause...).
    """

    kind: EventKind
    actor: str
    position: Position | None = None
    detail: str = ""

    def describe(self) -> str:
        """Return a one-line human-readable narration."""
        return _TEMPLATES[self.kind].format(
            actor=self.actor,
            position=self.position,
            detail=self.detail,
        )


@dataclass
class EventLog:
    """Ordered record of every event, with optional live subscribers.

    Attributes:
        events: Events in emission order.
    """

    events: list[GameEvent] = field(default_factory=list)
    _subscribers: list[Callable[[GameEvent], None]] = field(
        default_factory=list,
        repr=False,
    )

    def subscribe(self, callback: Callable[[GameEvent], None]) -> None:
        """Call ``callback`` with every event emitted from now on."""
        self._subscribers.append(callback)

    def emit(
        self,
        kind: EventKind,
        actor: str,
        position: Position | None = None,
        detail: str = "",
    ) -> GameEvent:
        """Record an event and forward it to subscribers."""
        event = GameEvent(kind=kind, actor=actor, position=position, detail=detail)
        self.events.append(event)
        logger.debug("%s", event.describe())
        for callback in self._subscribers:
            callback(event)
        return event

    def kinds(self) -> list[EventKind]:
        """Return just the kinds, in order."""
        return [event.kind for event in self.events]

    def of_kind(self, kind: EventKind) -> list[GameEvent]:
        return [event for event in self.events if event.kind is kind]

    def __len__(self) -> int:
        return len(self.events)
