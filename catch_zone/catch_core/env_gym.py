"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the Catch Zone engine.
Reward is always 0.0 - agents must compute their own from info.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from catch_zone.catch_core.config_loader import GameConfig, load_config
from catch_zone.catch_core.game import CatchGame
from catch_zone.catch_core.item_catalog import ZONES
from catch_zone.catch_core.state_snapshot import PHASE_CODES, GameSnapshot


class CatchZoneEnv(gym.Env):
    """
    Catch Zone as a Gymnasium environment.

    Action Space:
        Discrete(3): basket lane, 0 = LEFT, 1 = CENTER, 2 = RIGHT.

    Observation Space:
        Dict with scalar game state and fixed-size item arrays (see
        GameSnapshot.to_obs_dict).

    Step:
        Moves the basket, then advances ``decision_interval`` seconds of
        simulated time (several physics ticks).

    Reward:
        Always 0.0. Agents must compute their own reward from the info dict.

    Info:
        Contains score, delta_score, miss_count, level, terminated_reason, etc.
    """

    metadata = {
        "render_modes": ["ansi"],
        "render_fps": 10,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        decision_interval: Optional[float] = None,
        debug: bool = False,
    ):
        """
        Initialize Catch Zone environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            config: Already-loaded config; takes precedence over config_path.
            render_mode: "ansi" for a text rendering, None for headless.
            decision_interval: Override seconds simulated per step.
            debug: If True, enables verbose debug output for agent development.
        """
        super().__init__()

        self._config = config if config is not None else load_config(config_path)

        self.render_mode = render_mode
        self._debug = debug
        self._decision_interval = decision_interval or self._config.caps.decision_interval
        self._max_items = self._config.observation.max_items

        self._game = CatchGame(config=self._config)
        self._episode_start: float = 0.0

        self.action_space = spaces.Discrete(len(ZONES))
        self.observation_space = self._build_observation_space()

        if self._debug:
            print(f"[DEBUG] CatchZoneEnv initialized")
            print(f"[DEBUG]   Decision interval: {self._decision_interval}s")
            print(f"[DEBUG]   Max items: {self._max_items}")

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        max_items = self._max_items
        num_kinds = self._config.num_item_kinds
        time_limit = self._config.timing.level_time_limit

        return spaces.Dict({
            "basket_zone": spaces.Discrete(len(ZONES)),
            "score": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "level": spaces.Box(low=1, high=np.iinfo(np.int32).max, shape=(), dtype=np.int32),
            "miss_count": spaces.Box(low=0, high=self._config.rules.max_misses, shape=(), dtype=np.int32),
            "level_time_remaining": spaces.Box(low=0, high=time_limit, shape=(), dtype=np.int32),
            "phase": spaces.Discrete(len(PHASE_CODES)),
            "items_count": spaces.Box(low=0, high=max_items, shape=(), dtype=np.int32),
            "item_zone": spaces.Box(low=-1, high=len(ZONES) - 1, shape=(max_items,), dtype=np.int8),
            "item_kind": spaces.Box(low=-1, high=num_kinds - 1, shape=(max_items,), dtype=np.int8),
            "item_hazard": spaces.Box(low=0, high=1, shape=(max_items,), dtype=np.int8),
            "item_progress": spaces.Box(low=0.0, high=1.0, shape=(max_items,), dtype=np.float32),
            "item_time_to_land": spaces.Box(low=0.0, high=np.inf, shape=(max_items,), dtype=np.float32),
            "item_mask": spaces.MultiBinary(max_items),
        })

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        snapshot = self._game.start(seed=seed)
        self._episode_start = self._game.scheduler.now

        obs = self._snapshot_to_obs(snapshot)
        info = self._get_info()
        info["delta_score"] = 0

        return obs, info

    def step(
        self,
        action: Union[int, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one step.

        Args:
            action: Basket lane index in {0, 1, 2}.

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
            Reward is always 0.0.
        """
        if isinstance(action, np.ndarray):
            action = int(action.item() if action.ndim == 0 else action[0])

        score_before = self._game.state.score
        if self._game.active:
            self._game.move_basket(int(action))
            self._game.advance(self._decision_interval)

        snapshot = self._game.get_state()
        obs = self._snapshot_to_obs(snapshot)

        reward = 0.0

        terminated = self._game.is_over
        truncated = (
            not terminated
            and self._elapsed() >= self._config.caps.max_episode_seconds
        )

        info = self._get_info()
        info["delta_score"] = snapshot.score - score_before

        if self._debug:
            print(f"[DEBUG] Step: action={action}, delta_score={info['delta_score']}, "
                  f"items={obs['items_count']}, level={snapshot.level}")
            if terminated:
                print(f"[DEBUG] TERMINATED: {info.get('terminated_reason', 'unknown')}")

        return obs, reward, terminated, truncated, info

    def _elapsed(self) -> float:
        return self._game.scheduler.now - self._episode_start

    def _get_info(self) -> Dict[str, Any]:
        info = self._game.get_info()
        info["sim_time"] = self._elapsed()
        return info

    def _snapshot_to_obs(self, snapshot: GameSnapshot) -> Dict[str, np.ndarray]:
        """Convert snapshot to observation dict."""
        return snapshot.to_obs_dict(self._max_items)

    def render(self) -> Optional[str]:
        """
        Render the current game state.

        Returns:
            Text board if render_mode is "ansi", None otherwise.
        """
        if self.render_mode != "ansi":
            return None

        snapshot = self._game.get_state()
        lanes = []
        for zone in ZONES:
            falling = [
                f"{self._game.catalog[item.kind_id].icon or item.kind}@{item.progress:.2f}"
                for item in snapshot.items
                if item.zone == zone and not item.caught
            ]
            basket = "[U]" if snapshot.basket_zone == zone else "   "
            lanes.append(f"{zone.name:<6} {basket} {' '.join(falling)}")
        header = (
            f"score={snapshot.score} level={snapshot.level} "
            f"misses={snapshot.miss_count}/{snapshot.max_misses} "
            f"time={snapshot.level_time_remaining} phase={snapshot.phase.value}"
        )
        return "\n".join([header] + lanes)

    def close(self) -> None:
        """Clean up resources."""
        if self._game.active:
            self._game.stop()

    @property
    def game(self) -> CatchGame:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
