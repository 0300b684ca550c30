"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml


# Lane names in left-to-right order
ZONE_NAMES: Tuple[str, ...] = ("LEFT", "CENTER", "RIGHT")


@dataclass(frozen=True)
class TimingConfig:
    """Clock cadences and level timing."""
    level_time_limit: int        # Seconds per level
    level_tick_interval: float   # Seconds between level countdown ticks
    level_up_countdown: int      # Countdown units between levels
    physics_hz: int              # Physics evaluations per second
    grace_delay: float           # Seconds before a landed item is purged

    @property
    def physics_dt(self) -> float:
        """Seconds per physics evaluation."""
        return 1.0 / self.physics_hz


@dataclass(frozen=True)
class DifficultyConfig:
    """Drop-time curve and spawn cadence factors."""
    base_drop_time: float
    drop_time_decrease_per_level: float
    min_drop_time: float
    spawn_interval_min_factor: float
    spawn_interval_max_factor: float


@dataclass(frozen=True)
class SpawnConfig:
    """Item selection parameters."""
    hazard_probability: float


@dataclass(frozen=True)
class RulesConfig:
    """Catch and miss rules."""
    max_misses: int
    catch_line: float


@dataclass(frozen=True)
class ItemConfig:
    """Configuration for a single item kind."""
    id: int
    name: str
    icon: str
    points: int
    is_hazard: bool = False


@dataclass(frozen=True)
class ControlsConfig:
    """Basket command vocabulary (lower-cased alias -> zone name)."""
    aliases: Tuple[Tuple[str, str], ...]

    def as_dict(self) -> Dict[str, str]:
        return dict(self.aliases)

    def lookup(self, command: str) -> Optional[str]:
        """Zone name for a command alias, or None if unknown."""
        key = command.strip().lower()
        for alias, zone_name in self.aliases:
            if alias == key:
                return zone_name
        return None


@dataclass(frozen=True)
class ObservationConfig:
    """Observation space parameters."""
    max_items: int


@dataclass(frozen=True)
class CapsConfig:
    """Environment stepping limits."""
    decision_interval: float
    max_episode_seconds: float


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    timing: TimingConfig
    difficulty: DifficultyConfig
    spawn: SpawnConfig
    rules: RulesConfig
    items: Tuple[ItemConfig, ...]
    controls: ControlsConfig
    observation: ObservationConfig
    caps: CapsConfig

    @property
    def num_item_kinds(self) -> int:
        """Total number of item kinds."""
        return len(self.items)

    @property
    def hazard_items(self) -> Tuple[ItemConfig, ...]:
        return tuple(item for item in self.items if item.is_hazard)

    @property
    def fruit_items(self) -> Tuple[ItemConfig, ...]:
        return tuple(item for item in self.items if not item.is_hazard)

    def get_item(self, item_id: int) -> ItemConfig:
        """Get item config by ID."""
        if 0 <= item_id < len(self.items):
            return self.items[item_id]
        raise ValueError(f"Invalid item ID: {item_id}")


def _parse_item(item_id: int, item_data: dict) -> ItemConfig:
    """Parse a single item configuration from YAML."""
    return ItemConfig(
        id=item_id,
        name=str(item_data["name"]),
        icon=str(item_data.get("icon", "")),
        points=int(item_data.get("points", 0)),
        is_hazard=bool(item_data.get("is_hazard", False))
    )


def _parse_controls(controls_data: dict) -> ControlsConfig:
    """Parse the zone -> aliases mapping into flat alias pairs."""
    aliases: List[Tuple[str, str]] = []
    for zone_name, zone_aliases in controls_data.items():
        zone_name = str(zone_name).upper()
        if zone_name not in ZONE_NAMES:
            raise ValueError(f"Unknown zone in controls: '{zone_name}'")
        # The zone's own name always maps to itself
        aliases.append((zone_name.lower(), zone_name))
        for alias in zone_aliases or []:
            aliases.append((str(alias).strip().lower(), zone_name))
    return ControlsConfig(aliases=tuple(aliases))


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    timing = config.timing
    if timing.level_time_limit <= 0:
        raise ValueError(f"level_time_limit must be positive, got {timing.level_time_limit}")
    if timing.level_tick_interval <= 0:
        raise ValueError(f"level_tick_interval must be positive, got {timing.level_tick_interval}")
    if timing.level_up_countdown < 0:
        raise ValueError(f"level_up_countdown must be >= 0, got {timing.level_up_countdown}")
    if timing.physics_hz <= 0:
        raise ValueError(f"physics_hz must be positive, got {timing.physics_hz}")
    if timing.grace_delay < 0:
        raise ValueError(f"grace_delay must be >= 0, got {timing.grace_delay}")

    difficulty = config.difficulty
    if difficulty.min_drop_time <= 0:
        raise ValueError(f"min_drop_time must be positive, got {difficulty.min_drop_time}")
    if difficulty.base_drop_time < difficulty.min_drop_time:
        raise ValueError(
            f"base_drop_time ({difficulty.base_drop_time}) must be >= "
            f"min_drop_time ({difficulty.min_drop_time})"
        )
    if not 0 < difficulty.spawn_interval_min_factor <= difficulty.spawn_interval_max_factor:
        raise ValueError(
            f"spawn interval factors must satisfy 0 < min <= max, got "
            f"[{difficulty.spawn_interval_min_factor}, {difficulty.spawn_interval_max_factor}]"
        )

    if not 0.0 <= config.spawn.hazard_probability <= 1.0:
        raise ValueError(f"hazard_probability must be in [0, 1], got {config.spawn.hazard_probability}")

    if config.rules.max_misses < 1:
        raise ValueError(f"max_misses must be >= 1, got {config.rules.max_misses}")
    if not 0.0 < config.rules.catch_line <= 1.0:
        raise ValueError(f"catch_line must be in (0, 1], got {config.rules.catch_line}")

    # Spawner needs at least one kind on each side of the hazard draw
    if not config.hazard_items:
        raise ValueError("At least one item must be marked is_hazard")
    if not config.fruit_items:
        raise ValueError("At least one non-hazard item is required")
    names = [item.name for item in config.items]
    if len(set(names)) != len(names):
        raise ValueError(f"Item names must be unique, got {names}")

    mapped = {zone_name for _, zone_name in config.controls.aliases}
    for zone_name in ZONE_NAMES:
        if zone_name not in mapped:
            raise ValueError(f"Zone '{zone_name}' has no control alias")

    if config.observation.max_items <= 0:
        raise ValueError(f"max_items must be positive, got {config.observation.max_items}")
    if config.caps.decision_interval <= 0:
        raise ValueError(f"decision_interval must be positive, got {config.caps.decision_interval}")
    if config.caps.max_episode_seconds <= 0:
        raise ValueError(f"max_episode_seconds must be positive, got {config.caps.max_episode_seconds}")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    timing_data = raw["timing"]
    timing = TimingConfig(
        level_time_limit=int(timing_data["level_time_limit"]),
        level_tick_interval=float(timing_data.get("level_tick_interval", 1.0)),
        level_up_countdown=int(timing_data.get("level_up_countdown", 3)),
        physics_hz=int(timing_data.get("physics_hz", 60)),
        grace_delay=float(timing_data.get("grace_delay", 0.3))
    )

    difficulty_data = raw["difficulty"]
    difficulty = DifficultyConfig(
        base_drop_time=float(difficulty_data["base_drop_time"]),
        drop_time_decrease_per_level=float(difficulty_data["drop_time_decrease_per_level"]),
        min_drop_time=float(difficulty_data["min_drop_time"]),
        spawn_interval_min_factor=float(difficulty_data.get("spawn_interval_min_factor", 0.6)),
        spawn_interval_max_factor=float(difficulty_data.get("spawn_interval_max_factor", 0.8))
    )

    spawn = SpawnConfig(
        hazard_probability=float(raw["spawn"]["hazard_probability"])
    )

    rules_data = raw["rules"]
    rules = RulesConfig(
        max_misses=int(rules_data["max_misses"]),
        catch_line=float(rules_data.get("catch_line", 0.85))
    )

    items = tuple(
        _parse_item(i, item_data)
        for i, item_data in enumerate(raw["items"])
    )

    controls = _parse_controls(raw.get("controls", {}))

    obs_data = raw.get("observation", {})
    observation = ObservationConfig(
        max_items=int(obs_data.get("max_items", 16))
    )

    caps_data = raw.get("caps", {})
    caps = CapsConfig(
        decision_interval=float(caps_data.get("decision_interval", 0.1)),
        max_episode_seconds=float(caps_data.get("max_episode_seconds", 600.0))
    )

    config = GameConfig(
        timing=timing,
        difficulty=difficulty,
        spawn=spawn,
        rules=rules,
        items=items,
        controls=controls,
        observation=observation,
        caps=caps
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
