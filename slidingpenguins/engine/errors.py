"""Error taxonomy for the penguin game.

Invariant violations are engine bugs and are never caught by the core.
Caller misuse (bad positions, bad decisions, bad config) is rejected at
the boundary before any state is touched.  Expected game outcomes such as
elimination are events, not exceptions.
"""

from __future__ import annotations


class PenguinGameError(Exception):
    """Base class for every error raised by slidingpenguins."""


class InvariantViolation(PenguinGameError):
    """The grid or a penguin reached a state the rules forbid."""


class InvalidPositionError(PenguinGameError, ValueError):
    """A missing or out-of-range coordinate was passed in from outside."""


class InvalidDecisionError(PenguinGameError, ValueError):
    """A decider returned a decision the scheduler cannot execute."""


class ConfigError(PenguinGameError, ValueError):
    """The game configuration is inconsistent."""
