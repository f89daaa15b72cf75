"""Console front end: grid table, narration, player input and scoreboard.

All I/O goes through injectable callables so the prompts can be driven
from tests without touching stdin.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from slidingpenguins.penguins.deciders import TurnDecision
from slidingpenguins.penguins.penguin import Species
from slidingpenguins.simulation.scoreboard import ordinal
from slidingpenguins.world.grid import Grid
from slidingpenguins.world.position import GRID_SIZE, Direction, Position

if TYPE_CHECKING:
    from slidingpenguins.engine.events import GameEvent
    from slidingpenguins.penguins.penguin import Penguin
    from slidingpenguins.simulation.scoreboard import ScoreRecord
    from slidingpenguins.world.snapshot import GridSnapshot

CELL_WIDTH = 4
_DIRECTION_HELP = "Answer with U (Up), D (Down), L (Left), R (Right): "


def render_grid(grid: Grid | GridSnapshot) -> str:
    """Draw the board as a bordered table of 2-character notations.

    Example::

        +----+----+----+...
        | P1 |    | Kr |...
        +----+----+----+...
    """
    border = "+" + "+".join("-" * CELL_WIDTH for _ in range(GRID_SIZE)) + "+"
    snapshot = grid.snapshot() if isinstance(grid, Grid) else grid
    lines = [border]
    for y in range(GRID_SIZE):
        cells = [
            (snapshot.notation_at(Position(x, y)) or "").center(CELL_WIDTH)
            for x in range(GRID_SIZE)
        ]
        lines.append("|" + "|".join(cells) + "|")
        lines.append(border)
    return "\n".join(lines)


def narrate(output: Callable[[str], None] = print) -> Callable[[GameEvent], None]:
    """Return an EventLog subscriber that prints each event."""

    def _print(event: GameEvent) -> None:
        output(event.describe())

    return _print


@dataclass
class ConsoleDecider:
    """Asks the human player for each move.

    Answers are trimmed and case-insensitive; anything else is rejected
    and the question asked again.

    Attributes:
        prompt: Reads one line given a prompt (``input`` by default).
        output: Writes one line (``print`` by default).
        show_grid: Print the board before asking.
    """

    prompt: Callable[[str], str] = input
    output: Callable[[str], None] = print
    show_grid: bool = True

    def decide(
        self,
        snapshot: GridSnapshot,
        penguin: Penguin,
        turn: int,
    ) -> TurnDecision:
        pid = penguin.penguin_id
        if self.show_grid:
            self.output(render_grid(snapshot))
        self.output("YOUR PENGUIN")

        use_ability = False
        royal_direction = None
        if penguin.ability_used:
            self.output(f"{pid} has already used its special action.")
        else:
            use_ability = self.ask_yes_no(
                f"Will {pid} use its special action? Answer with Y or N: ",
            )
            if use_ability and penguin.species is Species.ROYAL:
                royal_direction = self.ask_direction(
                    f"Which direction for the special move? {_DIRECTION_HELP}",
                )

        direction = self.ask_direction(f"Which direction will {pid} move? {_DIRECTION_HELP}")
        return TurnDecision(
            direction=direction,
            use_ability=use_ability,
            royal_direction=royal_direction,
        )

    def ask_yes_no(self, question: str) -> bool:
        while True:
            answer = self.prompt(question).strip().upper()
            if answer in ("Y", "N"):
                return answer == "Y"
            self.output("Invalid input. Please enter Y or N.")

    def ask_direction(self, question: str) -> Direction:
        while True:
            answer = self.prompt(question).strip()
            try:
                return Direction.from_letter(answer)
            except ValueError:
                self.output("Invalid input. Please enter U, D, L, or R.")


def format_scoreboard(records: list[ScoreRecord]) -> str:
    """Render the final standings the way the game prints them."""
    lines = ["***** SCOREBOARD FOR THE PENGUINS *****"]
    for record in records:
        header = record.penguin_id
        if record.is_player:
            header += " (Your Penguin)"
        lines.append(f"* {ordinal(record.rank)} place: {header}")
        foods = ", ".join(f"{f.notation} ({f.weight} units)" for f in record.foods)
        lines.append(f"  |---> Food items: {foods or 'None'}")
        lines.append(f"  |---> Total weight: {record.total_weight} units")
    return "\n".join(lines)


@dataclass
class ConsoleScoreboard:
    """Prints the final standings."""

    output: Callable[[str], None] = print

    def report(self, records: list[ScoreRecord]) -> None:
        self.output(format_scoreboard(records))
