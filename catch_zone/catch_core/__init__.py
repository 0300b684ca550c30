"""
Catch Core - The game engine and its supporting systems.

Main exports:
- CatchGame: The rule engine (commands, events, snapshots)
- CatchZoneEnv: Gymnasium environment for agents driving the basket
- CooperativeScheduler: Virtual-clock timer facility the engine runs on
- EventBus / event classes: Notifications for rendering layers
- GameConfig: Configuration loaded from game_config.yaml
"""

from catch_zone.catch_core.config_loader import GameConfig, load_config
from catch_zone.catch_core.item_catalog import ItemCatalog, ItemKind, Zone
from catch_zone.catch_core.scheduler import CooperativeScheduler, TaskHandle
from catch_zone.catch_core.events import (
    EventBus,
    EventLog,
    GameEvent,
    GameStarted,
    ScoreChanged,
    MissChanged,
    LevelChanged,
    BasketMoved,
    TimeChanged,
    LevelUpCountdown,
    ItemSpawned,
    ItemLanded,
    ItemRemoved,
    Feedback,
    GameEnded,
)
from catch_zone.catch_core.rules import GameOverReason, LandingOutcome
from catch_zone.catch_core.state import FallingItem, GameState, Phase
from catch_zone.catch_core.state_snapshot import GameSnapshot
from catch_zone.catch_core.game import CatchGame
from catch_zone.catch_core.env_gym import CatchZoneEnv

__all__ = [
    "GameConfig",
    "load_config",
    "ItemCatalog",
    "ItemKind",
    "Zone",
    "CooperativeScheduler",
    "TaskHandle",
    "EventBus",
    "EventLog",
    "GameEvent",
    "GameStarted",
    "ScoreChanged",
    "MissChanged",
    "LevelChanged",
    "BasketMoved",
    "TimeChanged",
    "LevelUpCountdown",
    "ItemSpawned",
    "ItemLanded",
    "ItemRemoved",
    "Feedback",
    "GameEnded",
    "GameOverReason",
    "LandingOutcome",
    "FallingItem",
    "GameState",
    "Phase",
    "GameSnapshot",
    "CatchGame",
    "CatchZoneEnv",
]
