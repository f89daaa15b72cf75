"""Tests for slidingpenguins.simulation.scheduler and scoreboard."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from slidingpenguins.engine.abilities import AbilityEngine
from slidingpenguins.engine.errors import InvalidDecisionError
from slidingpenguins.engine.events import EventKind, EventLog
from slidingpenguins.engine.slide import SlideEngine
from slidingpenguins.penguins.deciders import ScriptedDecider, TurnDecision
from slidingpenguins.penguins.penguin import Penguin, Species
from slidingpenguins.simulation.scheduler import TurnScheduler
from slidingpenguins.simulation.scoreboard import ScoreRecord, ordinal, standings
from slidingpenguins.world.grid import Grid
from slidingpenguins.world.position import Direction, Position
from slidingpenguins.world.terrain import Food, FoodType, HazardKind

if TYPE_CHECKING:
    from tests.conftest import BoardBuilder


def _scheduler(
    grid: Grid,
    slides: SlideEngine,
    abilities: AbilityEngine,
    script: dict[Penguin, list[TurnDecision]],
    rounds: int = 4,
) -> TurnScheduler:
    return TurnScheduler(
        grid=grid,
        penguins=list(script),
        deciders={p.penguin_id: ScriptedDecider.of(moves) for p, moves in script.items()},
        slides=slides,
        abilities=abilities,
        rounds=rounds,
    )


class _RecordingScoreboard:
    def __init__(self) -> None:
        self.reports: list[list[ScoreRecord]] = []

    def report(self, records: list[ScoreRecord]) -> None:
        self.reports.append(records)


class TestTurnGating:
    """Eliminated, stunned and normal turns."""

    def test_stunned_penguin_skips_next_turn(
        self,
        grid: Grid,
        board: BoardBuilder,
        slides: SlideEngine,
        abilities: AbilityEngine,
        events: EventLog,
    ) -> None:
        p1 = board.penguin(0, 5)
        board.hazard(2, 5, HazardKind.LIGHT_ICE)
        board.hazard(8, 5, HazardKind.HEAVY_ICE)
        board.hazard(1, 2, HazardKind.HEAVY_ICE)
        scheduler = _scheduler(
            grid,
            slides,
            abilities,
            {p1: [TurnDecision(Direction.RIGHT), TurnDecision(Direction.UP)]},
            rounds=3,
        )
        scheduler.run()

        assert events.kinds().count(EventKind.STUN_SKIPPED) == 1
        assert not p1.stunned
        assert p1.position == Position(1, 3)

    def test_stun_clears_after_skip(
        self,
        grid: Grid,
        board: BoardBuilder,
        slides: SlideEngine,
        abilities: AbilityEngine,
    ) -> None:
        p1 = board.penguin(0, 5)
        board.hazard(1, 5, HazardKind.HEAVY_ICE)
        p1.stunned = True
        scheduler = _scheduler(grid, slides, abilities, {p1: [TurnDecision(Direction.RIGHT)]}, rounds=2)
        scheduler.step()
        assert not p1.stunned
        assert scheduler.turn == 2
        scheduler.step()
        assert scheduler.finished

    def test_eliminated_penguin_is_skipped(
        self,
        grid: Grid,
        board: BoardBuilder,
        slides: SlideEngine,
        abilities: AbilityEngine,
        events: EventLog,
    ) -> None:
        p1 = board.penguin(0, 0)
        p2 = board.penguin(5, 5, penguin_id="P2")
        board.hazard(5, 6, HazardKind.HEAVY_ICE)
        scheduler = _scheduler(
            grid,
            slides,
            abilities,
            {
                p1: [TurnDecision(Direction.UP)],
                p2: [TurnDecision(Direction.DOWN)] * 3,
            },
            rounds=3,
        )
        scheduler.run()

        started = [e.actor for e in events.of_kind(EventKind.TURN_STARTED)]
        assert started.count("P1") == 1
        assert started.count("P2") == 3
        assert p1.is_eliminated

    def test_turns_follow_id_order(
        self,
        grid: Grid,
        board: BoardBuilder,
        slides: SlideEngine,
        abilities: AbilityEngine,
        events: EventLog,
    ) -> None:
        p2 = board.penguin(5, 5, penguin_id="P2")
        p1 = board.penguin(5, 0, penguin_id="P1")
        board.hazard(6, 5, HazardKind.HEAVY_ICE)
        board.hazard(6, 0, HazardKind.HEAVY_ICE)
        scheduler = _scheduler(
            grid,
            slides,
            abilities,
            {p2: [TurnDecision(Direction.RIGHT)], p1: [TurnDecision(Direction.RIGHT)]},
            rounds=1,
        )
        scheduler.run()
        started = [e.actor for e in events.of_kind(EventKind.TURN_STARTED)]
        assert started == ["P1", "P2"]

    def test_double_digit_ids_follow_numeric_order(
        self,
        grid: Grid,
        board: BoardBuilder,
        slides: SlideEngine,
        abilities: AbilityEngine,
        events: EventLog,
    ) -> None:
        p10 = board.penguin(5, 0, penguin_id="P10")
        p2 = board.penguin(5, 5, penguin_id="P2")
        board.hazard(6, 0, HazardKind.HEAVY_ICE)
        board.hazard(6, 5, HazardKind.HEAVY_ICE)
        scheduler = _scheduler(
            grid,
            slides,
            abilities,
            {p10: [TurnDecision(Direction.RIGHT)], p2: [TurnDecision(Direction.RIGHT)]},
            rounds=1,
        )
        scheduler.run()
        started = [e.actor for e in events.of_kind(EventKind.TURN_STARTED)]
        assert started == ["P2", "P10"]
        assert [p.penguin_id for p in grid.penguins()] == ["P2", "P10"]

    def test_missing_decider(self, grid: Grid, board: BoardBuilder, slides: SlideEngine, abilities: AbilityEngine) -> None:
        p1 = board.penguin(0, 0)
        with pytest.raises(ValueError):
            TurnScheduler(grid=grid, penguins=[p1], deciders={}, slides=slides, abilities=abilities)


class TestAbilityGating:
    """The special action is honoured once per game."""

    def test_ability_used_once(
        self,
        grid: Grid,
        board: BoardBuilder,
        slides: SlideEngine,
        abilities: AbilityEngine,
        events: EventLog,
    ) -> None:
        king = board.penguin(0, 5, Species.KING)
        board.hazard(5, 9, HazardKind.HEAVY_ICE)
        scheduler = _scheduler(
            grid,
            slides,
            abilities,
            {
                king: [
                    TurnDecision(Direction.RIGHT, use_ability=True),
                    TurnDecision(Direction.DOWN, use_ability=True),
                ],
            },
            rounds=2,
        )
        scheduler.run()

        assert events.kinds().count(EventKind.ABILITY_USED) == 1
        assert king.position == Position(5, 8)

    def test_royal_may_skip_the_slide(
        self,
        grid: Grid,
        board: BoardBuilder,
        slides: SlideEngine,
        abilities: AbilityEngine,
        events: EventLog,
    ) -> None:
        royal = board.penguin(0, 5, Species.ROYAL)
        decision = TurnDecision(None, use_ability=True, royal_direction=Direction.RIGHT)
        scheduler = _scheduler(grid, slides, abilities, {royal: [decision]}, rounds=1)
        scheduler.run()
        assert royal.position == Position(1, 5)
        assert EventKind.SLIDE_SKIPPED in events.kinds()

    def test_royal_eliminated_by_step_skips_slide(
        self,
        grid: Grid,
        board: BoardBuilder,
        slides: SlideEngine,
        abilities: AbilityEngine,
        events: EventLog,
    ) -> None:
        royal = board.penguin(0, 5, Species.ROYAL)
        decision = TurnDecision(Direction.RIGHT, use_ability=True, royal_direction=Direction.LEFT)
        scheduler = _scheduler(grid, slides, abilities, {royal: [decision]}, rounds=1)
        scheduler.run()
        assert royal.is_eliminated
        assert events.kinds().count(EventKind.SLIDE_STARTED) == 1


class TestInvalidDecisions:
    """Unusable decisions are rejected before anything moves."""

    def test_missing_direction(
        self,
        grid: Grid,
        board: BoardBuilder,
        slides: SlideEngine,
        abilities: AbilityEngine,
    ) -> None:
        king = board.penguin(0, 5, Species.KING)
        scheduler = _scheduler(grid, slides, abilities, {king: [TurnDecision(None, use_ability=True)]})
        with pytest.raises(InvalidDecisionError):
            scheduler.step()
        assert king.position == Position(0, 5)
        assert not king.ability_used

    def test_royal_without_step_direction(
        self,
        grid: Grid,
        board: BoardBuilder,
        slides: SlideEngine,
        abilities: AbilityEngine,
    ) -> None:
        royal = board.penguin(0, 5, Species.ROYAL)
        scheduler = _scheduler(
            grid,
            slides,
            abilities,
            {royal: [TurnDecision(Direction.RIGHT, use_ability=True)]},
        )
        with pytest.raises(InvalidDecisionError):
            scheduler.step()
        assert royal.position == Position(0, 5)
        assert not royal.ability_used

    def test_exhausted_script(
        self,
        grid: Grid,
        board: BoardBuilder,
        slides: SlideEngine,
        abilities: AbilityEngine,
    ) -> None:
        p1 = board.penguin(0, 5)
        scheduler = _scheduler(grid, slides, abilities, {p1: []})
        with pytest.raises(InvalidDecisionError):
            scheduler.step()


class TestScoreboard:
    """Final ranking."""

    def test_rank_by_weight_then_id(self) -> None:
        p1 = Penguin("P1", Species.KING)
        p2 = Penguin("P2", Species.EMPEROR, is_player=True)
        p3 = Penguin("P3", Species.ROYAL)
        p1.inventory.append(Food(FoodType.KRILL, 3))
        p2.inventory.append(Food(FoodType.MACKEREL, 5))
        p3.inventory.append(Food(FoodType.SQUID, 3))
        records = standings([p3, p1, p2])
        assert [r.penguin_id for r in records] == ["P2", "P1", "P3"]
        assert [r.rank for r in records] == [1, 2, 3]
        assert records[0].is_player

    def test_ties_keep_numeric_id_order(self) -> None:
        p10 = Penguin("P10", Species.KING)
        p9 = Penguin("P9", Species.ROYAL)
        records = standings([p10, p9])
        assert [r.penguin_id for r in records] == ["P9", "P10"]

    def test_eliminated_penguins_keep_their_food(self) -> None:
        p1 = Penguin("P1", Species.KING)
        p1.inventory.append(Food(FoodType.KRILL, 4))
        records = standings([p1])
        assert records[0].eliminated
        assert records[0].total_weight == 4

    @pytest.mark.parametrize(
        "rank, text",
        [(1, "1st"), (2, "2nd"), (3, "3rd"), (4, "4th"), (11, "11th"), (22, "22nd")],
    )
    def test_ordinal(self, rank: int, text: str) -> None:
        assert ordinal(rank) == text

    def test_reported_when_game_ends(
        self,
        grid: Grid,
        board: BoardBuilder,
        slides: SlideEngine,
        abilities: AbilityEngine,
        events: EventLog,
    ) -> None:
        p1 = board.penguin(0, 5)
        board.food(3, 5, weight=2)
        scoreboard = _RecordingScoreboard()
        scheduler = TurnScheduler(
            grid=grid,
            penguins=[p1],
            deciders={"P1": ScriptedDecider.of([TurnDecision(Direction.RIGHT)])},
            slides=slides,
            abilities=abilities,
            rounds=1,
            scoreboard=scoreboard,
        )
        results = scheduler.run()
        assert scoreboard.reports == [results]
        assert results[0].total_weight == 2
        assert events.kinds()[-1] is EventKind.GAME_OVER
