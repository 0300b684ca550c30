"""
Core Game
=========

Main game orchestrator combining spawning, falling-item physics, catch
rules, scoring and the leveling state machine.
"""

from __future__ import annotations

import itertools
import logging
from functools import partial
from typing import Any, Callable, Dict, Optional, Type

from catch_zone.catch_core.config_loader import GameConfig, get_config
from catch_zone.catch_core.events import (
    BasketMoved,
    EventBus,
    Feedback,
    GameEnded,
    GameEvent,
    GameStarted,
    ItemLanded,
    ItemRemoved,
    ItemSpawned,
    LevelChanged,
    LevelUpCountdown,
    MissChanged,
    ScoreChanged,
    TimeChanged,
)
from catch_zone.catch_core.item_catalog import ItemCatalog, ItemKind, Zone, resolve_zone
from catch_zone.catch_core.rng import SpawnRng
from catch_zone.catch_core.rules import (
    GameOverReason,
    GameRules,
    LandingOutcome,
    TerminationResult,
)
from catch_zone.catch_core.scheduler import CooperativeScheduler, TaskHandle
from catch_zone.catch_core.scoring import ScoreTracker
from catch_zone.catch_core.state import FallingItem, GameState, Phase
from catch_zone.catch_core.state_snapshot import GameSnapshot, SnapshotBuilder

logger = logging.getLogger(__name__)


class CatchGame:
    """
    Main game simulation class.

    Orchestrates three periodic processes on a cooperative scheduler:
    - Level countdown (1 Hz): ends the level when it reaches zero
    - Item spawner (randomized cadence): only while RUNNING
    - Physics/collision updater (60 Hz): advances items, evaluates landings

    Phases: STOPPED -> RUNNING -> LEVEL_ENDING -> LEVEL_UP_PAUSE -> RUNNING ...
    Game over (bomb caught, miss limit) or stop() returns to STOPPED.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        scheduler: Optional[CooperativeScheduler] = None,
        events: Optional[EventBus] = None
    ):
        """
        Initialize game.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility.
            scheduler: Scheduler to run on. A private one is created if None.
            events: Event bus to publish on. A private one is created if None.
        """
        if config is None:
            config = get_config()

        self._config = config

        # Initialize subsystems
        self._catalog = ItemCatalog(config)
        self._rng = SpawnRng(config, seed, catalog=self._catalog)
        self._rules = GameRules(config)
        self._scorer = ScoreTracker(config)
        self._snapshot_builder = SnapshotBuilder(config)
        self._scheduler = scheduler if scheduler is not None else CooperativeScheduler()
        self._events = events if events is not None else EventBus()

        # Game state
        self._state = GameState(level_time_limit=config.timing.level_time_limit)
        self._item_ids = itertools.count(1)
        self._generation: int = 0
        self._termination_reason: str = ""
        self._spawn_interval: Optional[float] = None

        # Task handles owned by this engine
        self._level_task: Optional[TaskHandle] = None
        self._spawn_task: Optional[TaskHandle] = None
        self._physics_task: Optional[TaskHandle] = None
        self._countdown_task: Optional[TaskHandle] = None
        self._removals: Dict[int, TaskHandle] = {}

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def catalog(self) -> ItemCatalog:
        return self._catalog

    @property
    def rules(self) -> GameRules:
        return self._rules

    @property
    def scheduler(self) -> CooperativeScheduler:
        return self._scheduler

    @property
    def events(self) -> EventBus:
        return self._events

    @property
    def state(self) -> GameState:
        """Live mutable state (for tools and tests; UIs should use get_state())."""
        return self._state

    @property
    def active(self) -> bool:
        return self._state.active

    @property
    def is_over(self) -> bool:
        """True once a run has ended by game over or stop."""
        return not self._state.active and self._termination_reason != ""

    @property
    def termination_reason(self) -> str:
        """Reason for game end, or empty string."""
        return self._termination_reason

    @property
    def generation(self) -> int:
        """Run counter; bumped on every start and every end."""
        return self._generation

    @property
    def spawn_interval(self) -> Optional[float]:
        """Interval drawn for the currently pending spawn, if any."""
        return self._spawn_interval

    def drop_time(self, level: Optional[int] = None) -> float:
        """Fall duration for a level (current level if None)."""
        return self._rules.difficulty.drop_time(self._state.level if level is None else level)

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: Type[GameEvent] = GameEvent
    ) -> Callable[[], None]:
        """Shortcut for ``events.subscribe``."""
        return self._events.subscribe(handler, event_type)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def start(self, seed: Optional[int] = None) -> GameSnapshot:
        """
        Start a new run, resetting all state.

        Calling start() on a running game discards the current run and
        starts over; no GameEnded is emitted for the discarded run.

        Args:
            seed: New random seed. Replays the previous seed if None.

        Returns:
            Initial game snapshot.
        """
        if self._state.active:
            logger.info("Restarting active game (generation %d)", self._generation)
            self._cancel_tasks()

        self._generation += 1
        self._rng.reset(seed)
        self._scorer.reset()
        self._state.reset()
        self._termination_reason = ""
        self._spawn_interval = None

        state = self._state
        state.active = True
        state.phase = Phase.RUNNING

        self._start_level_timer()
        self._schedule_next_spawn()
        self._physics_task = self._scheduler.call_every(
            self._config.timing.physics_dt, self._on_physics_tick, name="physics"
        )

        logger.info("Game started (generation %d, seed %s)", self._generation, self._rng.seed)
        self._events.emit(GameStarted(
            score=state.score,
            level=state.level,
            miss_count=state.miss_count,
            max_misses=self._rules.termination.max_misses,
            basket_zone=state.basket_zone,
            level_time_remaining=state.level_time_remaining,
        ))

        return self.get_state()

    def stop(self) -> None:
        """Stop the current run. No-op if the game is not active."""
        if not self._state.active:
            return
        self._end_run(GameOverReason.STOPPED.value, "Game stopped.")

    def move_basket(self, command: Any) -> bool:
        """
        Move the basket to the lane named by ``command``.

        Args:
            command: A Zone, a lane index (0-2) or an alias from the
                controls vocabulary (e.g. "left", "정면").

        Returns:
            True if the basket moved.
        """
        if not self._state.active:
            return False

        zone = resolve_zone(command, self._config)
        if zone is None:
            logger.debug("Ignoring unknown basket command %r", command)
            return False

        if zone == self._state.basket_zone:
            return False

        self._state.basket_zone = zone
        self._events.emit(BasketMoved(zone=zone))
        return True

    def advance(self, dt: float) -> int:
        """Drive the scheduler forward by ``dt`` seconds."""
        return self._scheduler.advance(dt)

    def get_state(self) -> GameSnapshot:
        """Read-only snapshot of the current state."""
        return self._snapshot_builder.build(self._state)

    def spawn_item(
        self,
        zone: Optional[Zone] = None,
        kind: Optional[ItemKind] = None
    ) -> Optional[FallingItem]:
        """
        Spawn one item now.

        Missing zone/kind are drawn from the spawn RNG. Used by the
        spawner and by scripted tools.

        Returns:
            The new item, or None if the game is not active.
        """
        if not self._state.active:
            return None

        if zone is None:
            zone = self._rng.choose_zone()
        if kind is None:
            kind = self._rng.choose_kind()

        item = FallingItem(
            id=next(self._item_ids),
            zone=zone,
            kind=kind,
            fall_duration=self.drop_time(),
        )
        self._state.add_item(item)
        self._events.emit(ItemSpawned(item_id=item.id, zone=zone, kind=kind.name))
        return item

    # ------------------------------------------------------------------
    # Periodic processes
    # ------------------------------------------------------------------

    def _start_level_timer(self) -> None:
        self._level_task = self._scheduler.call_every(
            self._config.timing.level_tick_interval, self._on_level_tick, name="level_timer"
        )

    def _schedule_next_spawn(self) -> None:
        interval_range = self._rules.difficulty.spawn_interval_range(self._state.level)
        self._spawn_interval = self._rng.spawn_interval(interval_range)
        self._spawn_task = self._scheduler.call_later(
            self._spawn_interval, self._on_spawn, name="spawner"
        )

    def _on_level_tick(self) -> None:
        state = self._state
        if not state.active or state.phase != Phase.RUNNING:
            return

        generation = self._generation
        state.level_time_remaining = max(state.level_time_remaining - 1, 0)
        self._events.emit(TimeChanged(level_time_remaining=state.level_time_remaining))
        if not self._is_current(generation):
            return

        if state.level_time_remaining <= 0:
            self._enter_level_ending()

    def _on_spawn(self) -> None:
        self._spawn_task = None
        if not self._state.active or self._state.phase != Phase.RUNNING:
            return
        generation = self._generation
        self.spawn_item()
        if self._is_current(generation):
            self._schedule_next_spawn()

    def _on_physics_tick(self) -> None:
        state = self._state
        if not state.active or state.phase == Phase.LEVEL_UP_PAUSE:
            return

        generation = self._generation
        dt = self._config.timing.physics_dt
        catch_line = self._rules.landing.catch_line
        for item in state.iter_items():
            if item.advance(dt, catch_line):
                self._land(item)
                # Game over, stop() or start() from a subscriber ends this run's tick
                if not self._is_current(generation):
                    return

    def _on_level_up_tick(self) -> None:
        state = self._state
        if not state.active or state.phase != Phase.LEVEL_UP_PAUSE:
            return

        generation = self._generation
        state.level_up_countdown -= 1
        self._events.emit(LevelUpCountdown(remaining=state.level_up_countdown))
        if not self._is_current(generation):
            return

        if state.level_up_countdown <= 0:
            self._cancel(self._countdown_task)
            self._countdown_task = None
            self._resume_running()

    # ------------------------------------------------------------------
    # Phase transitions
    # ------------------------------------------------------------------

    def _enter_level_ending(self) -> None:
        state = self._state
        state.phase = Phase.LEVEL_ENDING
        self._cancel(self._level_task)
        self._cancel(self._spawn_task)
        self._level_task = None
        self._spawn_task = None
        self._spawn_interval = None
        logger.info("Level %d time up, %d item(s) still in play", state.level, len(state.items))

        if not state.items:
            self._enter_level_up_pause()

    def _enter_level_up_pause(self) -> None:
        state = self._state
        state.phase = Phase.LEVEL_UP_PAUSE
        state.level += 1
        state.level_time_remaining = self._config.timing.level_time_limit
        state.level_up_countdown = self._config.timing.level_up_countdown
        logger.info("Level up to %d, resuming in %d", state.level, state.level_up_countdown)

        if state.level_up_countdown > 0:
            self._countdown_task = self._scheduler.call_every(
                self._config.timing.level_tick_interval, self._on_level_up_tick, name="level_up_countdown"
            )

        generation = self._generation
        self._events.emit(TimeChanged(level_time_remaining=state.level_time_remaining))
        if not self._is_current(generation):
            return
        self._events.emit(LevelUpCountdown(remaining=state.level_up_countdown))
        if not self._is_current(generation):
            return

        if state.level_up_countdown <= 0:
            self._resume_running()

    def _resume_running(self) -> None:
        state = self._state
        state.phase = Phase.RUNNING
        state.level_up_countdown = 0
        self._start_level_timer()
        self._schedule_next_spawn()
        logger.info("Level %d running (drop time %.2fs)", state.level, self.drop_time())
        self._events.emit(LevelChanged(level=state.level))

    # ------------------------------------------------------------------
    # Landing outcomes
    # ------------------------------------------------------------------

    def _land(self, item: FallingItem) -> None:
        """Evaluate an item that just crossed the catch line."""
        state = self._state
        generation = self._generation
        outcome = self._rules.landing.evaluate(item.zone, item.kind, state.basket_zone)
        item.outcome = outcome
        self._events.emit(ItemLanded(
            item_id=item.id,
            zone=item.zone,
            kind=item.kind.name,
            outcome=outcome.value,
        ))
        if not self._is_current(generation):
            return

        if outcome == LandingOutcome.HAZARD_CAUGHT:
            self._check_termination(hazard_caught=True)
        elif outcome == LandingOutcome.CATCH:
            event = self._scorer.apply_catch(state, item.kind)
            self._events.emit(ScoreChanged(score=state.score))
            if self._is_current(generation):
                self._events.emit(Feedback(message=f"+{event.points}", zone=item.zone, kind="success"))
        elif outcome == LandingOutcome.MISS:
            self._apply_miss(item, generation)

        if self._is_current(generation):
            self._schedule_removal(item)

    def _apply_miss(self, item: FallingItem, generation: int) -> None:
        state = self._state
        max_misses = self._rules.termination.max_misses
        self._scorer.apply_miss(state, item.kind)
        self._events.emit(MissChanged(miss_count=state.miss_count, max_misses=max_misses))
        if not self._is_current(generation):
            return

        if state.miss_count == 1 and state.miss_count < max_misses:
            self._events.emit(Feedback(message="Warning!", zone=None, kind="warning"))
            if not self._is_current(generation):
                return

        self._check_termination()

    def _check_termination(self, hazard_caught: bool = False) -> TerminationResult:
        result = self._rules.termination.check_termination(
            miss_count=self._state.miss_count,
            hazard_caught=hazard_caught,
        )
        if result.terminated:
            self._end_run(result.reason, result.message)
        return result

    # ------------------------------------------------------------------
    # Grace-delay removal
    # ------------------------------------------------------------------

    def _schedule_removal(self, item: FallingItem) -> None:
        self._removals[item.id] = self._scheduler.call_later(
            self._config.timing.grace_delay,
            partial(self._remove_item, self._generation, item.id),
            name=f"remove_item_{item.id}",
        )

    def _remove_item(self, generation: int, item_id: int) -> None:
        self._removals.pop(item_id, None)
        state = self._state
        if generation != self._generation or not state.active:
            logger.debug("Dropping stale removal of item %d (generation %d)", item_id, generation)
            return

        if state.remove_item(item_id) is None:
            return
        self._events.emit(ItemRemoved(item_id=item_id))
        if not self._is_current(generation):
            return

        if not state.items and state.phase == Phase.LEVEL_ENDING:
            self._enter_level_up_pause()

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def _end_run(self, reason: str, message: str) -> None:
        state = self._state
        self._cancel_tasks()
        self._generation += 1
        state.active = False
        state.phase = Phase.STOPPED
        self._termination_reason = reason

        logger.info("Game ended (%s): score=%d level=%d", reason, state.score, state.level)
        self._events.emit(GameEnded(
            final_score=state.score,
            final_level=state.level,
            reason=reason,
            message=message,
        ))

    def _is_current(self, generation: int) -> bool:
        """
        True while the run that captured ``generation`` is still live.

        Subscribers may call start() or stop() from inside a notification;
        either bumps the generation, so work queued by the old run stops.
        """
        return generation == self._generation and self._state.active

    @staticmethod
    def _cancel(handle: Optional[TaskHandle]) -> None:
        if handle is not None:
            handle.cancel()

    def _cancel_tasks(self) -> None:
        """Cancel every task this engine scheduled."""
        for handle in (self._level_task, self._spawn_task, self._physics_task, self._countdown_task):
            self._cancel(handle)
        for handle in self._removals.values():
            handle.cancel()
        self._removals.clear()
        self._level_task = None
        self._spawn_task = None
        self._physics_task = None
        self._countdown_task = None
        self._spawn_interval = None

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        state = self._state
        return {
            "score": state.score,
            "level": state.level,
            "miss_count": state.miss_count,
            "catches": self._scorer.catches,
            "items_in_play": len(state.items),
            "phase": state.phase.value,
            "level_time_remaining": state.level_time_remaining,
            "terminated_reason": self._termination_reason,
            "sim_time": self._scheduler.now,
        }
