"""AbilityEngine — the once-per-game special action of each species.

- King and Emperor cap the upcoming slide at 5 and 3 free cells.
- Royal takes a single step first, with full collision rules, and may
  then slide as usual (possibly in another direction).
- Rockhopper arms a jump over the first hazard met during the slide.

Activating an ability always spends it, whether or not it ends up
doing anything.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from slidingpenguins.engine.errors import InvalidDecisionError
from slidingpenguins.engine.events import EventKind
from slidingpenguins.engine.slide import SlideEngine, SlideModifiers
from slidingpenguins.penguins.penguin import Penguin, Species
from slidingpenguins.world.position import Direction

logger = logging.getLogger(__name__)


@dataclass
class AbilityEngine:
    """Turns a penguin's special action into slide modifiers.

    Attributes:
        slides: Engine used for the Royal pre-move.
        king_step_cap: Free cells a King slides before stopping.
        emperor_step_cap: Free cells an Emperor slides before stopping.
    """

    slides: SlideEngine
    king_step_cap: int = 5
    emperor_step_cap: int = 3

    def activate(
        self,
        penguin: Penguin,
        royal_direction: Direction | None = None,
    ) -> SlideModifiers:
        """Spend ``penguin``'s ability and return what it does to the slide.

        A Royal's single step happens right here; the returned modifiers
        are then empty.

        Args:
            penguin: The acting penguin.
            royal_direction: Direction of the Royal pre-move.

        Returns:
            Modifiers to pass to the upcoming slide.

        Raises:
            InvalidDecisionError: If a Royal has no pre-move direction.
            InvariantViolation: If the ability was already spent.
        """
        if penguin.species is Species.ROYAL and royal_direction is None:
            msg = f"{penguin.penguin_id} needs a direction for its single step"
            raise InvalidDecisionError(msg)

        penguin.spend_ability()
        pid = penguin.penguin_id
        logger.debug("%s activates its %s ability", pid, penguin.species.value)

        match penguin.species:
            case Species.KING:
                return self._capped(pid, self.king_step_cap)
            case Species.EMPEROR:
                return self._capped(pid, self.emperor_step_cap)
            case Species.ROCKHOPPER:
                self._announce(pid, "prepares to jump over a hazard")
                return SlideModifiers(jump_armed=True)
            case Species.ROYAL:
                self._announce(pid, f"moves one square {royal_direction.name.lower()}")
                self.slides.slide_penguin(
                    penguin,
                    royal_direction,
                    SlideModifiers(single_step=True),
                )
                return SlideModifiers()

    def _capped(self, pid: str, cap: int) -> SlideModifiers:
        self._announce(pid, f"will stop after {cap} squares")
        return SlideModifiers(step_cap=cap)

    def _announce(self, pid: str, detail: str) -> None:
        self.slides.events.emit(EventKind.ABILITY_USED, pid, detail=detail)
