"""
Team Template Agent
===================

Your agent must provide one of:
1. A `CatchAgent` class with an `act(obs) -> action` method
2. A standalone `act(obs) -> action` function

Actions are lane indices: 0 = LEFT, 1 = CENTER, 2 = RIGHT.

Observation keys (see CatchZoneEnv):
    basket_zone, score, level, miss_count, level_time_remaining, phase,
    items_count, item_zone, item_kind, item_hazard, item_progress,
    item_time_to_land, item_mask
"""

from __future__ import annotations

from typing import Dict
import numpy as np


class CatchAgent:
    """
    Your Catch Zone agent implementation.

    Replace the strategy in `act()` with your own logic.
    """

    def __init__(self):
        """Initialize your agent. Load models, set up state, etc."""
        self.rng = np.random.default_rng()

    def act(self, obs: Dict[str, np.ndarray]) -> int:
        """
        Choose a lane based on the observation.

        Args:
            obs: Dictionary containing game state.

        Returns:
            action: Lane index in {0, 1, 2}.
        """
        # Random lane; replace with your strategy
        return int(self.rng.integers(0, 3))

    def reset(self) -> None:
        """Called when a new episode starts (optional)."""
        pass


def act(obs: Dict[str, np.ndarray]) -> int:
    """Standalone act function (alternative to class-based agent)."""
    return int(np.random.randint(0, 3))
