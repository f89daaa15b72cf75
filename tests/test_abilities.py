"""Tests for slidingpenguins.engine.abilities — species special actions."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from slidingpenguins.engine.abilities import AbilityEngine
from slidingpenguins.engine.errors import InvalidDecisionError, InvariantViolation
from slidingpenguins.engine.events import EventKind, EventLog
from slidingpenguins.engine.slide import SlideEngine, SlideModifiers
from slidingpenguins.penguins.penguin import Penguin, Species
from slidingpenguins.world.grid import Grid
from slidingpenguins.world.position import Direction, Position
from slidingpenguins.world.terrain import FoodType, HazardKind

if TYPE_CHECKING:
    from tests.conftest import BoardBuilder


def _use(
    abilities: AbilityEngine,
    slides: SlideEngine,
    penguin: Penguin,
    direction: Direction,
    royal_direction: Direction | None = None,
) -> None:
    modifiers = abilities.activate(penguin, royal_direction)
    if not penguin.is_eliminated:
        slides.slide_penguin(penguin, direction, modifiers)


class TestStepCap:
    """King and Emperor stop early."""

    def test_king_stops_after_five(
        self,
        board: BoardBuilder,
        abilities: AbilityEngine,
        slides: SlideEngine,
        events: EventLog,
    ) -> None:
        king = board.penguin(0, 5, Species.KING)
        _use(abilities, slides, king, Direction.RIGHT)
        assert king.position == Position(5, 5)
        assert king.ability_used
        assert EventKind.STEP_CAP_REACHED in events.kinds()

    def test_emperor_stops_after_three(self, board: BoardBuilder, abilities: AbilityEngine, slides: SlideEngine) -> None:
        emperor = board.penguin(0, 5, Species.EMPEROR)
        _use(abilities, slides, emperor, Direction.RIGHT)
        assert emperor.position == Position(3, 5)

    def test_king_meets_food_first(
        self,
        board: BoardBuilder,
        abilities: AbilityEngine,
        slides: SlideEngine,
        events: EventLog,
    ) -> None:
        king = board.penguin(0, 5, Species.KING)
        board.food(2, 5, FoodType.CRUSTACEAN, 2)
        _use(abilities, slides, king, Direction.RIGHT)
        assert king.position == Position(2, 5)
        assert king.total_weight == 2
        assert king.ability_used
        assert EventKind.ABILITY_WASTED in events.kinds()
        assert EventKind.STEP_CAP_REACHED not in events.kinds()

    def test_cap_counts_only_free_cells_before_water(self, board: BoardBuilder, abilities: AbilityEngine, slides: SlideEngine) -> None:
        emperor = board.penguin(8, 5, Species.EMPEROR)
        _use(abilities, slides, emperor, Direction.RIGHT)
        assert emperor.is_eliminated
        assert emperor.ability_used

    def test_custom_caps(self, grid: Grid, board: BoardBuilder, events: EventLog) -> None:
        slides = SlideEngine(grid=grid, events=events)
        abilities = AbilityEngine(slides=slides, king_step_cap=2)
        king = board.penguin(0, 5, Species.KING)
        _use(abilities, slides, king, Direction.RIGHT)
        assert king.position == Position(2, 5)


class TestRoyal:
    """Royal single step before the slide."""

    def test_single_step(
        self,
        board: BoardBuilder,
        abilities: AbilityEngine,
        events: EventLog,
    ) -> None:
        royal = board.penguin(0, 5, Species.ROYAL)
        modifiers = abilities.activate(royal, Direction.UP)
        assert royal.position == Position(0, 4)
        assert modifiers == SlideModifiers()
        assert events.of_kind(EventKind.ABILITY_USED)[0].detail == "moves one square up"

    def test_step_then_slide_elsewhere(self, board: BoardBuilder, abilities: AbilityEngine, slides: SlideEngine) -> None:
        royal = board.penguin(0, 5, Species.ROYAL)
        board.hazard(6, 4, HazardKind.HEAVY_ICE)
        _use(abilities, slides, royal, Direction.RIGHT, royal_direction=Direction.UP)
        assert royal.position == Position(5, 4)

    def test_step_into_water(self, board: BoardBuilder, abilities: AbilityEngine) -> None:
        royal = board.penguin(0, 0, Species.ROYAL)
        abilities.activate(royal, Direction.LEFT)
        assert royal.is_eliminated
        assert royal.ability_used

    def test_step_collects_food(self, board: BoardBuilder, abilities: AbilityEngine) -> None:
        royal = board.penguin(0, 5, Species.ROYAL)
        board.food(1, 5, FoodType.SQUID, 4)
        abilities.activate(royal, Direction.RIGHT)
        assert royal.position == Position(1, 5)
        assert royal.total_weight == 4

    def test_step_into_light_ice(self, board: BoardBuilder, abilities: AbilityEngine) -> None:
        royal = board.penguin(0, 5, Species.ROYAL)
        ice = board.hazard(1, 5, HazardKind.LIGHT_ICE)
        abilities.activate(royal, Direction.RIGHT)
        assert royal.position == Position(0, 5)
        assert royal.stunned
        assert ice.position is None

    def test_requires_direction(self, board: BoardBuilder, abilities: AbilityEngine) -> None:
        royal = board.penguin(0, 5, Species.ROYAL)
        with pytest.raises(InvalidDecisionError):
            abilities.activate(royal)
        assert not royal.ability_used


class TestRockhopper:
    """Rockhopper jump over the first hazard."""

    def test_jump_then_fall_off(
        self,
        grid: Grid,
        board: BoardBuilder,
        abilities: AbilityEngine,
        slides: SlideEngine,
        events: EventLog,
    ) -> None:
        hopper = board.penguin(0, 0, Species.ROCKHOPPER)
        ice = board.hazard(3, 0, HazardKind.LIGHT_ICE)
        _use(abilities, slides, hopper, Direction.RIGHT)
        assert hopper.is_eliminated
        assert hopper.ability_used
        assert ice.position == Position(3, 0)
        assert grid.get(Position(3, 0)) is ice
        assert EventKind.JUMPED in events.kinds()
        assert not hopper.stunned

    def test_landing_in_water(self, board: BoardBuilder, abilities: AbilityEngine, slides: SlideEngine) -> None:
        hopper = board.penguin(0, 0, Species.ROCKHOPPER)
        board.hazard(9, 0, HazardKind.HEAVY_ICE)
        _use(abilities, slides, hopper, Direction.RIGHT)
        assert hopper.is_eliminated
        assert hopper.ability_used

    def test_landing_on_food(self, board: BoardBuilder, abilities: AbilityEngine, slides: SlideEngine) -> None:
        hopper = board.penguin(0, 0, Species.ROCKHOPPER)
        board.hazard(3, 0, HazardKind.SEA_LION)
        board.food(4, 0, FoodType.ANCHOVY, 5)
        _use(abilities, slides, hopper, Direction.RIGHT)
        assert hopper.position == Position(4, 0)
        assert hopper.total_weight == 5

    def test_landing_in_open_hole(self, board: BoardBuilder, abilities: AbilityEngine, slides: SlideEngine) -> None:
        hopper = board.penguin(0, 0, Species.ROCKHOPPER)
        board.hazard(3, 0, HazardKind.HEAVY_ICE)
        board.hazard(4, 0, HazardKind.HOLE)
        _use(abilities, slides, hopper, Direction.RIGHT)
        assert hopper.is_eliminated

    def test_landing_on_plugged_hole(
        self,
        grid: Grid,
        board: BoardBuilder,
        abilities: AbilityEngine,
        slides: SlideEngine,
    ) -> None:
        hopper = board.penguin(0, 0, Species.ROCKHOPPER)
        board.hazard(3, 0, HazardKind.HEAVY_ICE)
        hole = board.hazard(4, 0, HazardKind.HOLE, plugged=True)
        board.hazard(7, 0, HazardKind.HEAVY_ICE)
        _use(abilities, slides, hopper, Direction.RIGHT)
        assert hopper.position == Position(6, 0)
        assert hopper.ability_used
        assert grid.get(Position(4, 0)) is hole
        assert grid.snapshot().notation_at(Position(4, 0)) == "PH"
        grid.verify([hopper])

    def test_jumps_only_once(self, board: BoardBuilder, abilities: AbilityEngine, slides: SlideEngine) -> None:
        hopper = board.penguin(0, 0, Species.ROCKHOPPER)
        board.hazard(3, 0, HazardKind.HEAVY_ICE)
        board.hazard(6, 0, HazardKind.HEAVY_ICE)
        _use(abilities, slides, hopper, Direction.RIGHT)
        assert hopper.position == Position(5, 0)

    def test_failed_jump_falls_back_to_collision(
        self,
        board: BoardBuilder,
        abilities: AbilityEngine,
        slides: SlideEngine,
        events: EventLog,
    ) -> None:
        hopper = board.penguin(0, 0, Species.ROCKHOPPER)
        ice = board.hazard(3, 0, HazardKind.LIGHT_ICE)
        board.hazard(4, 0, HazardKind.HEAVY_ICE)
        _use(abilities, slides, hopper, Direction.RIGHT)
        assert hopper.position == Position(2, 0)
        assert hopper.stunned
        assert hopper.ability_used
        assert ice.position == Position(3, 0)
        assert EventKind.JUMP_FAILED in events.kinds()

    def test_no_hazard_wastes_jump(
        self,
        board: BoardBuilder,
        abilities: AbilityEngine,
        slides: SlideEngine,
        events: EventLog,
    ) -> None:
        hopper = board.penguin(0, 0, Species.ROCKHOPPER)
        board.food(5, 0)
        _use(abilities, slides, hopper, Direction.RIGHT)
        assert hopper.position == Position(5, 0)
        assert EventKind.ABILITY_WASTED in events.kinds()


class TestAbilityOnce:
    """Abilities are spent exactly once."""

    def test_second_activation_fails(self, board: BoardBuilder, abilities: AbilityEngine) -> None:
        king = board.penguin(0, 5, Species.KING)
        abilities.activate(king)
        with pytest.raises(InvariantViolation):
            abilities.activate(king)
