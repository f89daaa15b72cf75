"""Entry point for ``python -m slidingpenguins``.

Loads the default YAML config and plays one game: interactively in the
console, fully automatic with ``--autoplay``, or in a Pygame window with
``--gui``.
"""

from __future__ import annotations

import argparse
import logging
import pathlib
import sys
from dataclasses import replace

from slidingpenguins.engine.errors import PenguinGameError
from slidingpenguins.logging_config import configure_logging
from slidingpenguins.simulation.config import GameConfig
from slidingpenguins.simulation.engine import GameEngine
from slidingpenguins.ui.console import (
    ConsoleDecider,
    ConsoleScoreboard,
    narrate,
    render_grid,
)

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="slidingpenguins",
        description="Sliding Penguins - a turn-based puzzle on the ice",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Override the RNG seed from the config",
    )
    parser.add_argument(
        "--autoplay",
        action="store_true",
        help="Let the computer play your penguin too",
    )
    parser.add_argument(
        "--gui",
        action="store_true",
        help="Watch an all-computer game in a Pygame window",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: config log_level, or PENGUINS_LOG_LEVEL)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse CLI args, build the game, play it."""
    args = build_parser().parse_args(argv)

    try:
        config = GameConfig.from_yaml(args.config)
        if args.seed is not None:
            config = replace(config, seed=args.seed)
        configure_logging(args.log_level, default=config.log_level)

        if args.gui:
            return _watch(config)
        return _play(config, autoplay=args.autoplay)
    except (PenguinGameError, OSError):
        logger.exception("Game aborted")
        return 1


def _play(config: GameConfig, *, autoplay: bool) -> int:
    engine = GameEngine(
        config=config,
        player_decider=None if autoplay else ConsoleDecider(show_grid=False),
        scoreboard=ConsoleScoreboard(),
    )
    print("Welcome to Sliding Penguins! The initial icy terrain grid:")
    print(render_grid(engine.grid))
    for penguin in engine.penguins:
        suffix = " ---> YOUR PENGUIN" if penguin.is_player else ""
        print(f"{penguin}{suffix}")

    engine.events.subscribe(narrate())
    last_turn = engine.turn
    while not engine.finished:
        engine.step()
        if engine.turn != last_turn or engine.finished:
            print(render_grid(engine.grid))
            last_turn = engine.turn
    return 0


def _watch(config: GameConfig) -> int:
    from slidingpenguins.ui.pygame_client import PygameRenderer

    engine = GameEngine(config=config)
    PygameRenderer(engine=engine).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
