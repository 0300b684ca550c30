"""
RNG - Spawn Draws
=================

Seedable randomness for the item spawner: lane choice, the biased
hazard/fruit draw and the per-spawn cadence.
"""

from __future__ import annotations

import random
from typing import Optional, Tuple

from catch_zone.catch_core.config_loader import GameConfig, get_config
from catch_zone.catch_core.item_catalog import ZONES, ItemCatalog, ItemKind, Zone


class SpawnRng:
    """
    All random decisions made by the spawner.

    Every draw goes through one ``random.Random`` so a seed reproduces the
    full sequence of zones, kinds and spawn intervals.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        catalog: Optional[ItemCatalog] = None
    ):
        """
        Initialize spawn RNG.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility. Random if None.
            catalog: Item catalog. Built from config if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._catalog = catalog if catalog is not None else ItemCatalog(config)
        self._hazard_probability = config.spawn.hazard_probability
        self._seed = seed
        self._rng = random.Random(seed)

    @property
    def seed(self) -> Optional[int]:
        return self._seed

    def choose_zone(self) -> Zone:
        """Uniform lane choice."""
        return self._rng.choice(ZONES)

    def choose_kind(self) -> ItemKind:
        """
        Biased kind draw.

        With ``hazard_probability`` pick a hazard, otherwise a uniform
        choice among the fruits.
        """
        if self._rng.random() < self._hazard_probability:
            return self._rng.choice(self._catalog.hazards)
        return self._rng.choice(self._catalog.fruits)

    def spawn_interval(self, interval_range: Tuple[float, float]) -> float:
        """Uniform draw from a [low, high] spawn interval range."""
        low, high = interval_range
        return self._rng.uniform(low, high)

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reseed the generator.

        Args:
            seed: New random seed. Replays the current seed if None.
        """
        if seed is not None:
            self._seed = seed
        self._rng = random.Random(self._seed)
