"""Final standings once the rounds are over.

Penguins are ranked by total carried weight, heaviest first; ties keep
id order (P1 before P2 before P3).  Eliminated penguins are ranked too,
with whatever they collected before falling in.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable

    from slidingpenguins.penguins.penguin import Penguin, Species
    from slidingpenguins.world.terrain import Food


@dataclass(frozen=True)
class ScoreRecord:
    """One line of the final scoreboard."""

    rank: int
    penguin_id: str
    species: Species
    foods: tuple[Food, ...]
    total_weight: int
    is_player: bool
    eliminated: bool


class Scoreboard(Protocol):
    """Receives the final standings."""

    def report(self, records: list[ScoreRecord]) -> None: ...


def standings(penguins: Iterable[Penguin]) -> list[ScoreRecord]:
    """Rank penguins by carried weight, heaviest first.

    Args:
        penguins: All penguins of the game.

    Returns:
        One ScoreRecord per penguin, in rank order.
    """
    by_id = sorted(penguins, key=lambda p: p.order)
    ranked = sorted(by_id, key=lambda p: p.total_weight, reverse=True)
    return [
        ScoreRecord(
            rank=rank,
            penguin_id=p.penguin_id,
            species=p.species,
            foods=tuple(p.inventory),
            total_weight=p.total_weight,
            is_player=p.is_player,
            eliminated=p.is_eliminated,
        )
        for rank, p in enumerate(ranked, start=1)
    ]


def ordinal(rank: int) -> str:
    """Return ``1st``, ``2nd``, ``3rd``, ``4th``..."""
    if 10 <= rank % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(rank % 10, "th")
    return f"{rank}{suffix}"
