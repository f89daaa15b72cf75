"""Pygame 2D spectator view of a game.

Draws the ice, hazards, food and penguins, and plays one penguin slot
per tick.  The game advances at a configurable tick rate while the
display refreshes at the Pygame frame rate.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

import numpy as np
import pygame

if TYPE_CHECKING:
    from slidingpenguins.simulation.engine import GameEngine

from slidingpenguins.penguins.penguin import Penguin, Species
from slidingpenguins.world.terrain import MAX_FOOD_WEIGHT, Food, Hazard, HazardKind

# Colour palette
_BG = (10, 30, 60)
_ICE = (210, 230, 245)
_GRID_LINE = (150, 180, 205)
_TEXT = (230, 230, 230)
_LABEL = (20, 20, 20)

_HAZARD_COLOURS: dict[HazardKind, tuple[int, int, int]] = {
    HazardKind.LIGHT_ICE: (160, 220, 255),
    HazardKind.HEAVY_ICE: (70, 120, 170),
    HazardKind.SEA_LION: (120, 90, 60),
    HazardKind.HOLE: (15, 25, 50),
}
_PLUGGED_HOLE = (120, 140, 160)

_PENGUIN_COLOURS: dict[Species, tuple[int, int, int]] = {
    Species.KING: (255, 200, 50),
    Species.EMPEROR: (240, 240, 240),
    Species.ROYAL: (255, 140, 60),
    Species.ROCKHOPPER: (230, 80, 80),
}

# Food colour range by weight (pale pink -> deep red)
_FOOD_LO = np.array([250, 190, 190], dtype=np.float64)
_FOOD_HI = np.array([200, 30, 40], dtype=np.float64)

_RECENT_EVENTS = 12


class PygameRenderer:
    """Renders a GameEngine into a Pygame window.

    Attributes:
        engine: The game to watch.
        cell_size: Pixel size of each grid cell.
        screen: The Pygame display surface.
    """

    # Speed presets: penguin turns per second
    _SPEED_STEPS: ClassVar[list[float]] = [0.25, 0.5, 1.0, 2.0, 4.0, 8.0]

    def __init__(
        self,
        engine: GameEngine,
        cell_size: int = 56,
        turns_per_second: float = 1.0,
    ) -> None:
        """Initialise the renderer.

        Args:
            engine: The game to render.
            cell_size: Pixel width/height per grid cell.
            turns_per_second: Penguin turns played per real-time second.
        """
        self.engine = engine
        self.cell_size = cell_size
        self.turns_per_second = turns_per_second
        self._speed_index = self._nearest_speed(turns_per_second)
        self._tick_accumulator = 0.0

        side = engine.grid.size * cell_size
        self._panel_width = 420
        self._win_w = side + self._panel_width
        self._win_h = side

        pygame.init()
        self.screen = pygame.display.set_mode((self._win_w, self._win_h))
        pygame.display.set_caption("Sliding Penguins")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", 14)
        self.cell_font = pygame.font.SysFont("monospace", max(10, cell_size // 3), bold=True)
        self.running = True
        self.paused = False

    def _nearest_speed(self, tps: float) -> int:
        """Return the index of the closest speed preset."""
        diffs = [abs(s - tps) for s in self._SPEED_STEPS]
        return diffs.index(min(diffs))

    def run(self, fps: int = 30) -> None:
        """Main loop: handle events, play turns, render.

        Args:
            fps: Target frames per second.
        """
        while self.running:
            dt = self.clock.tick(fps) / 1000.0
            self._handle_events()
            if not self.paused and not self.engine.finished:
                self._tick_accumulator += self.turns_per_second * dt
                steps = int(self._tick_accumulator)
                self._tick_accumulator -= steps
                for _ in range(steps):
                    self.engine.step()
            self._draw()

        pygame.quit()

    def _handle_events(self) -> None:
        """Process Pygame input events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_SPACE:
                    self.paused = not self.paused
                elif event.key in (pygame.K_PLUS, pygame.K_EQUALS):
                    self._speed_index = min(
                        len(self._SPEED_STEPS) - 1,
                        self._speed_index + 1,
                    )
                    self.turns_per_second = self._SPEED_STEPS[self._speed_index]
                elif event.key == pygame.K_MINUS:
                    self._speed_index = max(0, self._speed_index - 1)
                    self.turns_per_second = self._SPEED_STEPS[self._speed_index]

    def _draw(self) -> None:
        """Render one frame."""
        self.screen.fill(_BG)
        self._draw_ice()
        self._draw_objects()
        self._draw_info_panel()
        pygame.display.flip()

    def _draw_ice(self) -> None:
        cs = self.cell_size
        for pos in self.engine.grid.positions():
            rect = (pos.x * cs, pos.y * cs, cs, cs)
            pygame.draw.rect(self.screen, _ICE, rect)
            pygame.draw.rect(self.screen, _GRID_LINE, rect, 1)

    def _draw_objects(self) -> None:
        """Draw every visible object with its notation on top."""
        cs = self.cell_size
        grid = self.engine.grid
        for pos in grid.positions():
            obj = grid.get(pos)
            if obj is None:
                continue
            cx = pos.x * cs + cs // 2
            cy = pos.y * cs + cs // 2
            inset = (pos.x * cs + 3, pos.y * cs + 3, cs - 6, cs - 6)
            match obj:
                case Penguin():
                    colour = _PENGUIN_COLOURS[obj.species]
                    pygame.draw.circle(self.screen, colour, (cx, cy), cs // 2 - 4)
                case Food():
                    pygame.draw.rect(self.screen, _food_colour(obj.weight), inset)
                case Hazard() if obj.is_plugged_hole:
                    pygame.draw.rect(self.screen, _PLUGGED_HOLE, inset)
                case Hazard():
                    pygame.draw.rect(self.screen, _HAZARD_COLOURS[obj.kind], inset)
            label_colour = _TEXT if isinstance(obj, Hazard) and obj.is_open_hole else _LABEL
            label = self.cell_font.render(obj.notation, True, label_colour)
            self.screen.blit(label, label.get_rect(center=(cx, cy)))

    def _draw_info_panel(self) -> None:
        """Draw a stats panel on the right side of the window."""
        panel_x = self.engine.grid.size * self.cell_size + 10
        y = 10

        if self.engine.finished:
            status = "GAME OVER"
        else:
            status = "PAUSED" if self.paused else "RUNNING"
        lines = [
            f"Round: {min(self.engine.turn, self.engine.config.rounds)}"
            f" / {self.engine.config.rounds}",
            f"Speed: {self.turns_per_second:.2f} turns/s",
            status,
            "",
            "--- Penguins ---",
        ]
        for penguin in self.engine.penguins:
            state = "out" if penguin.is_eliminated else ("stunned" if penguin.stunned else "")
            lines.append(
                f"{penguin.penguin_id} {penguin.species.value:<10} "
                f"{penguin.total_weight:>3} units {state}",
            )

        lines += ["", "--- Events ---"]
        lines += [e.describe()[:52] for e in self.engine.events.events[-_RECENT_EVENTS:]]

        lines += [
            "",
            "--- Controls ---",
            "SPACE: pause",
            "+/-: speed",
            "ESC: quit",
        ]

        for line in lines:
            surf = self.font.render(line, True, _TEXT)
            self.screen.blit(surf, (panel_x, y))
            y += 18


def _food_colour(weight: int) -> list[int]:
    """Interpolate the food colour by weight."""
    t = min(weight / MAX_FOOD_WEIGHT, 1.0)
    colour = _FOOD_LO + t * (_FOOD_HI - _FOOD_LO)
    return colour.astype(int).tolist()
