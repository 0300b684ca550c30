"""
Baseline Tracker Agent - Follows the next fruit, dodges bombs.

This is a simple heuristic agent that reads the item arrays of the
observation (sorted closest-to-landing first) and moves the basket under
the fruit that will land next, unless a bomb is about to land there.

This serves as:
1. A working example of how to read observations and return actions
2. A baseline benchmark for agents to compare against
3. A verification that the environment API works correctly

Strategy:
- A lane is unsafe while a bomb in it is past ``danger_progress``
- Target the most advanced fruit in a safe lane
- With no fruit to chase, stay put if safe, otherwise take the first safe lane
"""

import numpy as np
from typing import Any, Dict, List, Optional


NUM_LANES = 3
CENTER = 1


class CatchAgent:
    """
    Simple baseline agent that tracks the next landing fruit.
    """

    def __init__(self, danger_progress: float = 0.55, debug: bool = False):
        """
        Initialize the agent.

        Args:
            danger_progress: Bomb progress from which its lane is avoided.
            debug: If True, print decisions to stdout.
        """
        self.danger_progress = danger_progress
        self.debug = debug

    def reset(self, seed: Optional[int] = None) -> None:
        """Reset agent state for a new episode (stateless)."""

    def _unsafe_lanes(self, observation: Dict[str, Any]) -> List[bool]:
        unsafe = [False] * NUM_LANES
        mask = observation["item_mask"].astype(bool)
        hazard = observation["item_hazard"].astype(bool)
        for i in np.flatnonzero(mask & hazard):
            if observation["item_progress"][i] >= self.danger_progress:
                unsafe[int(observation["item_zone"][i])] = True
        return unsafe

    def act(self, observation: Dict[str, Any], debug: bool = False) -> int:
        """
        Choose a lane for the basket.

        Args:
            observation: Dict of numpy arrays from the environment.
            debug: If True, print debug info for this step.

        Returns:
            Lane index: 0 = LEFT, 1 = CENTER, 2 = RIGHT.
        """
        current = int(observation["basket_zone"])
        unsafe = self._unsafe_lanes(observation)

        mask = observation["item_mask"].astype(bool)
        hazard = observation["item_hazard"].astype(bool)

        target = None
        # Items are ordered closest-to-landing first
        for i in np.flatnonzero(mask & ~hazard):
            lane = int(observation["item_zone"][i])
            if not unsafe[lane]:
                target = lane
                break

        if target is None:
            if not unsafe[current]:
                target = current
            elif not unsafe[CENTER]:
                target = CENTER
            else:
                target = next((lane for lane in range(NUM_LANES) if not unsafe[lane]), current)

        if debug or self.debug:
            print(f"[Tracker Agent] basket={current} unsafe={unsafe} target={target}")

        return target


# Convenience function to create agent (used by evaluation harness)
def create_agent(**kwargs) -> CatchAgent:
    """Factory function to create an agent instance."""
    return CatchAgent(**kwargs)
