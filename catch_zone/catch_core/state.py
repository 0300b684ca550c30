"""
Game State
==========

The single mutable record shared by the engine's periodic processes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, Optional

from catch_zone.catch_core.item_catalog import ItemKind, Zone
from catch_zone.catch_core.rules import LandingOutcome


class Phase(str, Enum):
    """Coarse engine state gating what the periodic processes may do."""
    STOPPED = "stopped"
    RUNNING = "running"
    LEVEL_ENDING = "level_ending"
    LEVEL_UP_PAUSE = "level_up_pause"


@dataclass
class FallingItem:
    """An item in flight, tracked by normalized fall progress."""
    id: int
    zone: Zone
    kind: ItemKind
    fall_duration: float
    progress: float = 0.0
    caught: bool = False
    outcome: Optional[LandingOutcome] = None

    @property
    def points(self) -> int:
        return self.kind.points

    @property
    def is_hazard(self) -> bool:
        return self.kind.is_hazard

    def advance(self, dt: float, catch_line: float) -> bool:
        """
        Move the item down by one frame.

        Args:
            dt: Frame delta in seconds.
            catch_line: Progress at which landing is evaluated.

        Returns:
            True if this frame carried the item across the catch line.
        """
        if self.caught:
            return False
        self.progress += dt / self.fall_duration
        if self.progress >= catch_line:
            self.progress = catch_line
            self.caught = True
            return True
        return False


@dataclass
class GameState:
    """Everything the engine knows about the current run."""
    level_time_limit: int
    active: bool = False
    score: int = 0
    level: int = 1
    miss_count: int = 0
    basket_zone: Zone = Zone.CENTER
    level_time_remaining: int = 0
    phase: Phase = Phase.STOPPED
    level_up_countdown: int = 0
    items: Dict[int, FallingItem] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.level_time_remaining:
            self.level_time_remaining = self.level_time_limit

    def reset(self) -> None:
        """Back to the values a new run starts from (still inactive)."""
        self.active = False
        self.score = 0
        self.level = 1
        self.miss_count = 0
        self.basket_zone = Zone.CENTER
        self.level_time_remaining = self.level_time_limit
        self.phase = Phase.STOPPED
        self.level_up_countdown = 0
        self.items.clear()

    def add_item(self, item: FallingItem) -> None:
        self.items[item.id] = item

    def remove_item(self, item_id: int) -> Optional[FallingItem]:
        """Remove by id; None if the item is no longer tracked."""
        return self.items.pop(item_id, None)

    def iter_items(self) -> Iterator[FallingItem]:
        """Iterate over a copy so callers may remove while iterating."""
        return iter(list(self.items.values()))

    @property
    def airborne_count(self) -> int:
        """Items still falling (not yet past the catch line)."""
        return sum(1 for item in self.items.values() if not item.caught)
