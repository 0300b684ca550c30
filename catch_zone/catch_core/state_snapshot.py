"""
State Snapshot
==============

Read-only projection of the game state for UI polling, plus packing into
fixed-size numpy arrays for Gymnasium observations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple
import numpy as np

from catch_zone.catch_core.config_loader import GameConfig, get_config
from catch_zone.catch_core.item_catalog import Zone
from catch_zone.catch_core.state import GameState, Phase

# Stable integer codes for the phase observation
PHASE_CODES: Dict[Phase, int] = {
    Phase.STOPPED: 0,
    Phase.RUNNING: 1,
    Phase.LEVEL_ENDING: 2,
    Phase.LEVEL_UP_PAUSE: 3,
}


@dataclass(frozen=True)
class ItemView:
    """Immutable copy of one FallingItem."""
    id: int
    zone: Zone
    kind_id: int
    kind: str
    is_hazard: bool
    progress: float
    fall_duration: float
    caught: bool
    outcome: Optional[str]


@dataclass(frozen=True)
class GameSnapshot:
    """
    Complete game state snapshot.

    Holds copies only; mutating the engine afterwards never changes a
    snapshot that was already taken.
    """
    active: bool
    score: int
    level: int
    miss_count: int
    max_misses: int
    basket_zone: Zone
    airborne_item_count: int
    item_count: int
    phase: Phase
    level_time_remaining: int
    level_up_countdown: int
    catch_line: float
    items: Tuple[ItemView, ...]

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict projection (what a UI polls)."""
        return {
            "active": self.active,
            "score": self.score,
            "level": self.level,
            "miss_count": self.miss_count,
            "max_misses": self.max_misses,
            "basket_zone": self.basket_zone.name,
            "airborne_item_count": self.airborne_item_count,
            "item_count": self.item_count,
            "phase": self.phase.value,
            "level_time_remaining": self.level_time_remaining,
            "level_up_countdown": self.level_up_countdown,
        }

    def to_obs_dict(self, max_items: int) -> Dict[str, np.ndarray]:
        """
        Convert to Gymnasium observation dictionary.

        Item arrays are padded to ``max_items``; padding rows have zone and
        kind -1 and a False mask. Uncaught items closest to the catch line
        come first, so truncation drops the items furthest from landing.
        ``item_time_to_land`` counts down to the catch line, where the
        landing is evaluated.
        """
        item_zone = np.full(max_items, -1, dtype=np.int8)
        item_kind = np.full(max_items, -1, dtype=np.int8)
        item_hazard = np.zeros(max_items, dtype=np.int8)
        item_progress = np.zeros(max_items, dtype=np.float32)
        item_time_to_land = np.zeros(max_items, dtype=np.float32)
        item_mask = np.zeros(max_items, dtype=np.int8)

        airborne = sorted(
            (item for item in self.items if not item.caught),
            key=lambda item: -item.progress
        )
        for i, item in enumerate(airborne[:max_items]):
            item_zone[i] = item.zone.index
            item_kind[i] = item.kind_id
            item_hazard[i] = int(item.is_hazard)
            item_progress[i] = item.progress
            item_time_to_land[i] = item.fall_duration * max(0.0, self.catch_line - item.progress)
            item_mask[i] = 1

        return {
            "basket_zone": np.int64(self.basket_zone.index),
            "score": np.array(self.score, dtype=np.int64),
            "level": np.array(self.level, dtype=np.int32),
            "miss_count": np.array(self.miss_count, dtype=np.int32),
            "level_time_remaining": np.array(self.level_time_remaining, dtype=np.int32),
            "phase": np.int64(PHASE_CODES[self.phase]),
            "items_count": np.array(min(len(airborne), max_items), dtype=np.int32),
            "item_zone": item_zone,
            "item_kind": item_kind,
            "item_hazard": item_hazard,
            "item_progress": item_progress,
            "item_time_to_land": item_time_to_land,
            "item_mask": item_mask,
        }


class SnapshotBuilder:
    """Builds GameSnapshot objects from the live GameState."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._max_misses = config.rules.max_misses
        self._catch_line = config.rules.catch_line

    def build(self, state: GameState) -> GameSnapshot:
        """
        Copy the live state into a snapshot.

        Args:
            state: The engine's mutable state.

        Returns:
            Immutable GameSnapshot.
        """
        items = tuple(
            ItemView(
                id=item.id,
                zone=item.zone,
                kind_id=item.kind.id,
                kind=item.kind.name,
                is_hazard=item.is_hazard,
                progress=item.progress,
                fall_duration=item.fall_duration,
                caught=item.caught,
                outcome=item.outcome.value if item.outcome is not None else None,
            )
            for item in state.items.values()
        )
        return GameSnapshot(
            active=state.active,
            score=state.score,
            level=state.level,
            miss_count=state.miss_count,
            max_misses=self._max_misses,
            basket_zone=state.basket_zone,
            airborne_item_count=state.airborne_count,
            item_count=len(items),
            phase=state.phase,
            level_time_remaining=state.level_time_remaining,
            level_up_countdown=state.level_up_countdown,
            catch_line=self._catch_line,
            items=items,
        )
