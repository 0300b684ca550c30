"""
Scoring System
==============

Applies catch points and miss penalties to the game state.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Dict, Optional, TYPE_CHECKING

from catch_zone.catch_core.config_loader import GameConfig, get_config
from catch_zone.catch_core.item_catalog import ItemKind

if TYPE_CHECKING:
    from catch_zone.catch_core.state import GameState


@dataclass
class ScoreEvent:
    """Record of a scoring event."""
    points: int
    item_kind_id: int
    total: int

    def __repr__(self) -> str:
        return f"ScoreEvent(+{self.points} -> {self.total})"


class ScoreTracker:
    """
    Applies score and miss changes to a GameState.

    Also keeps per-run tallies (catches and misses by kind) that the
    environment reports in its info dict.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize score tracker.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._catches: Counter = Counter()
        self._misses: Counter = Counter()

    @property
    def catches(self) -> int:
        """Fruits caught this run."""
        return sum(self._catches.values())

    @property
    def catches_by_kind(self) -> Dict[str, int]:
        return dict(self._catches)

    @property
    def misses_by_kind(self) -> Dict[str, int]:
        return dict(self._misses)

    def apply_catch(self, state: "GameState", kind: ItemKind) -> ScoreEvent:
        """
        Add a caught fruit's points to the score.

        Args:
            state: Game state to update.
            kind: The caught (non-hazard) kind.

        Returns:
            ScoreEvent describing the points awarded.
        """
        state.score += kind.points
        self._catches[kind.name] += 1
        return ScoreEvent(points=kind.points, item_kind_id=kind.id, total=state.score)

    def apply_miss(self, state: "GameState", kind: ItemKind) -> int:
        """
        Count a missed fruit.

        Returns:
            The new miss count (never above max_misses).
        """
        state.miss_count = min(state.miss_count + 1, self._config.rules.max_misses)
        self._misses[kind.name] += 1
        return state.miss_count

    def reset(self) -> None:
        """Clear per-run tallies."""
        self._catches.clear()
        self._misses.clear()
