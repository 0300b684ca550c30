"""
Game Rules
==========

Handles the difficulty curve, landing evaluation and termination conditions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from catch_zone.catch_core.config_loader import GameConfig, get_config
from catch_zone.catch_core.item_catalog import ItemKind, Zone


class LandingOutcome(str, Enum):
    """What happened when an item reached the catch line."""
    CATCH = "catch"
    MISS = "miss"
    HAZARD_CAUGHT = "hazard_caught"
    HAZARD_DODGED = "hazard_dodged"


class GameOverReason(str, Enum):
    """Why a run ended."""
    HAZARD_CAUGHT = "hazard_caught"
    MISS_LIMIT = "miss_limit"
    STOPPED = "stopped"


@dataclass
class TerminationResult:
    """Result of termination check."""
    terminated: bool
    reason: str
    message: str

    @staticmethod
    def none() -> "TerminationResult":
        return TerminationResult(False, "", "")

    @staticmethod
    def game_over(reason: GameOverReason, message: str) -> "TerminationResult":
        return TerminationResult(True, reason.value, message)


class DifficultyRules:
    """
    Drop time and spawn cadence as pure functions of level.

    The spawn interval scales with the fall duration so the number of
    simultaneously airborne items stays roughly constant as levels speed up.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize difficulty rules.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        difficulty = config.difficulty
        self._base = difficulty.base_drop_time
        self._decrease = difficulty.drop_time_decrease_per_level
        self._min = difficulty.min_drop_time
        self._min_factor = difficulty.spawn_interval_min_factor
        self._max_factor = difficulty.spawn_interval_max_factor

    def drop_time(self, level: int) -> float:
        """
        Seconds an item takes to fall at a given level.

        Args:
            level: Current level (>= 1).

        Returns:
            max(base - decrease * (level - 1), min)
        """
        return max(self._base - (level - 1) * self._decrease, self._min)

    def spawn_interval_range(self, level: int) -> Tuple[float, float]:
        """(low, high) bounds for the next spawn interval at a level."""
        drop_time = self.drop_time(level)
        return (drop_time * self._min_factor, drop_time * self._max_factor)


class LandingRules:
    """Evaluates an item against the basket when it crosses the catch line."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._catch_line = config.rules.catch_line

    @property
    def catch_line(self) -> float:
        """Progress fraction at which landings are evaluated."""
        return self._catch_line

    def evaluate(self, item_zone: Zone, kind: ItemKind, basket_zone: Zone) -> LandingOutcome:
        """
        Decide the landing outcome.

        Args:
            item_zone: Lane the item fell in.
            kind: Item kind.
            basket_zone: Lane the basket is in.

        Returns:
            LandingOutcome for this item.
        """
        if item_zone == basket_zone:
            return LandingOutcome.HAZARD_CAUGHT if kind.is_hazard else LandingOutcome.CATCH
        # Bombs outside the basket's lane carry no penalty
        if kind.is_hazard:
            return LandingOutcome.HAZARD_DODGED
        return LandingOutcome.MISS


class TerminationRules:
    """
    Handles game termination conditions.

    - Hazard caught: immediate game over
    - Miss limit: game over once misses reach max_misses
    """

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._max_misses = config.rules.max_misses

    @property
    def max_misses(self) -> int:
        return self._max_misses

    def check_termination(
        self,
        miss_count: int,
        hazard_caught: bool = False
    ) -> TerminationResult:
        """
        Check all termination conditions.

        Args:
            miss_count: Misses so far in this run.
            hazard_caught: True if a hazard was just caught.

        Returns:
            TerminationResult indicating game state.
        """
        if hazard_caught:
            return TerminationResult.game_over(
                GameOverReason.HAZARD_CAUGHT,
                "Game over! You caught a bomb!"
            )

        if miss_count >= self._max_misses:
            return TerminationResult.game_over(
                GameOverReason.MISS_LIMIT,
                f"Game over! You missed {self._max_misses} items!"
            )

        return TerminationResult.none()


class GameRules:
    """
    Combined interface for all game rules.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize game rules.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self.difficulty = DifficultyRules(config)
        self.landing = LandingRules(config)
        self.termination = TerminationRules(config)
