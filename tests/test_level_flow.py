"""
Tests for the leveling state machine.

RUNNING -> LEVEL_ENDING -> LEVEL_UP_PAUSE -> RUNNING
"""

import pytest

from catch_zone.catch_core.config_loader import load_config
from catch_zone.catch_core.events import (
    EventLog,
    ItemSpawned,
    LevelChanged,
    LevelUpCountdown,
    TimeChanged,
)
from catch_zone.catch_core.game import CatchGame
from catch_zone.catch_core.item_catalog import Zone
from catch_zone.catch_core.state import Phase


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def log():
    return EventLog()


@pytest.fixture
def game(config, log):
    game = CatchGame(config=config, seed=7)
    game.subscribe(log)
    game.start()
    return game


def expire_level_timer_next_tick(game):
    """Leave one second on the clock so the next level tick ends the level."""
    game.state.level_time_remaining = 1


class TestLevelCountdown:

    def test_counts_down_each_second(self, game, log):
        game.advance(3.0)
        times = [e.level_time_remaining for e in log.of_type(TimeChanged)]
        assert times == [19, 18, 17]
        assert game.state.level_time_remaining == 17

    def test_full_level_without_pressure(self, config_factory):
        """Twenty seconds end the level; the next one starts after the pause."""
        config = config_factory({
            "spawn": {"hazard_probability": 0.0},
            "rules": {"max_misses": 1000},
        })
        log = EventLog()
        game = CatchGame(config=config, seed=11)
        game.subscribe(log)
        game.start()

        game.advance(20.0)
        times = [e.level_time_remaining for e in log.of_type(TimeChanged)]
        assert times[:20] == list(range(19, -1, -1))
        assert game.state.phase in (Phase.LEVEL_ENDING, Phase.LEVEL_UP_PAUSE)
        assert game.state.level in (1, 2)

        game.advance(6.0)
        assert game.state.phase == Phase.RUNNING
        assert game.state.level == 2
        assert log.of_type(LevelChanged) == [LevelChanged(level=2)]


class TestEmptyLevelEnd:
    """Level timer reaches zero with nothing in the air."""

    def test_goes_straight_to_pause(self, game):
        expire_level_timer_next_tick(game)
        game.advance(1.0)

        state = game.state
        assert state.phase == Phase.LEVEL_UP_PAUSE
        assert state.level == 2
        assert state.level_time_remaining == 20
        assert state.level_up_countdown == 3

    def test_pause_counts_down_then_resumes(self, game, log):
        expire_level_timer_next_tick(game)
        game.advance(1.0)
        assert log.of_type(LevelChanged) == []

        game.advance(2.0)
        assert game.state.phase == Phase.LEVEL_UP_PAUSE
        assert game.state.level_up_countdown == 1

        game.advance(1.0)
        assert game.state.phase == Phase.RUNNING
        assert game.state.level_up_countdown == 0
        assert log.of_type(LevelChanged) == [LevelChanged(level=2)]
        assert [e.remaining for e in log.of_type(LevelUpCountdown)] == [3, 2, 1, 0]

    def test_no_spawns_during_pause(self, game, log):
        expire_level_timer_next_tick(game)
        game.advance(1.0)
        spawned = len(log.of_type(ItemSpawned))

        game.advance(2.9)
        assert len(log.of_type(ItemSpawned)) == spawned
        assert game.spawn_interval is None

    def test_level_timer_frozen_during_pause(self, game):
        expire_level_timer_next_tick(game)
        game.advance(3.5)
        assert game.state.level_time_remaining == 20

    def test_resumes_with_faster_cadence(self, game):
        difficulty = game.rules.difficulty
        expire_level_timer_next_tick(game)
        game.advance(4.0)

        low, high = difficulty.spawn_interval_range(2)
        assert low == pytest.approx(0.6 * 1.8)
        assert high == pytest.approx(0.8 * 1.8)
        assert high < difficulty.spawn_interval_range(1)[1]
        assert low <= game.spawn_interval <= high

    def test_new_items_use_new_drop_time(self, game):
        expire_level_timer_next_tick(game)
        game.advance(4.0)
        item = game.spawn_item()
        assert item.fall_duration == pytest.approx(1.8)

    def test_level_timer_resumes(self, game):
        expire_level_timer_next_tick(game)
        game.advance(4.0)
        game.advance(2.0)
        assert game.state.level_time_remaining == 18


class TestLevelEndWithItemsInFlight:
    """Level timer reaches zero while an item is still falling."""

    @pytest.fixture
    def ending(self, game):
        apple = game.catalog.get_by_name("apple")
        item = game.spawn_item(zone=Zone.CENTER, kind=apple)
        expire_level_timer_next_tick(game)
        game.advance(1.0)
        return item

    def test_enters_level_ending(self, game, ending):
        assert game.state.phase == Phase.LEVEL_ENDING
        assert game.state.level == 1
        assert game.state.level_time_remaining == 0

    def test_no_spawns_while_ending(self, game, log, ending):
        spawned = len(log.of_type(ItemSpawned))
        game.advance(0.8)
        assert len(log.of_type(ItemSpawned)) == spawned

    def test_items_keep_falling(self, game, ending):
        progress = ending.progress
        game.advance(0.3)
        assert ending.progress > progress

    def test_waits_for_landing_and_removal(self, game, ending):
        game.advance(0.8)
        # Caught at ~1.7s, still inside the grace delay
        assert ending.caught
        assert game.state.score == 100
        assert game.state.phase == Phase.LEVEL_ENDING
        assert game.state.level == 1

        game.advance(0.3)
        assert ending.id not in game.state.items
        assert game.state.phase == Phase.LEVEL_UP_PAUSE
        assert game.state.level == 2
        assert game.state.level_time_remaining == 20

    def test_level_increments_by_exactly_one(self, game, ending):
        game.advance(1.1)
        assert game.state.level == 2
        game.advance(1.0)
        assert game.state.level == 2

    def test_miss_while_ending_still_counts(self, game, log):
        game.spawn_item(zone=Zone.LEFT, kind=game.catalog.get_by_name("apple"))
        expire_level_timer_next_tick(game)
        game.advance(1.0)
        assert game.state.phase == Phase.LEVEL_ENDING

        game.advance(1.2)
        assert game.state.miss_count == 1
        assert game.state.phase == Phase.LEVEL_UP_PAUSE
