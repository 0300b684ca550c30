"""
Item Catalog
============

Provides lane definitions and convenient access to item kinds loaded from config.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from catch_zone.catch_core.config_loader import (
    ZONE_NAMES,
    GameConfig,
    ItemConfig,
    get_config
)


class Zone(Enum):
    """Horizontal lane shared by the basket and falling items."""
    LEFT = 0
    CENTER = 1
    RIGHT = 2

    @classmethod
    def from_index(cls, index: int) -> "Zone":
        return cls(int(index))

    @property
    def index(self) -> int:
        return self.value


ZONES: Tuple[Zone, ...] = tuple(Zone[name] for name in ZONE_NAMES)


@dataclass(frozen=True)
class ItemKind:
    """
    Runtime representation of an item kind.

    Wraps ItemConfig with convenience accessors.
    """
    config: ItemConfig

    @property
    def id(self) -> int:
        return self.config.id

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def icon(self) -> str:
        return self.config.icon

    @property
    def points(self) -> int:
        return self.config.points

    @property
    def is_hazard(self) -> bool:
        """True for bombs: fatal when caught, ignored when missed."""
        return self.config.is_hazard

    def __repr__(self) -> str:
        return f"ItemKind({self.id}: {self.name})"


class ItemCatalog:
    """
    Collection of all item kinds.

    Splits kinds into hazards and fruits for the spawner's biased draw.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize catalog from game config.

        Args:
            config: GameConfig instance. If None, loads from default location.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._kinds: Tuple[ItemKind, ...] = tuple(
            ItemKind(item_config) for item_config in config.items
        )
        self._hazards = tuple(kind for kind in self._kinds if kind.is_hazard)
        self._fruits = tuple(kind for kind in self._kinds if not kind.is_hazard)

    def __len__(self) -> int:
        return len(self._kinds)

    def __getitem__(self, item_id: int) -> ItemKind:
        """Get item kind by ID."""
        if 0 <= item_id < len(self._kinds):
            return self._kinds[item_id]
        raise IndexError(f"Item ID {item_id} out of range [0, {len(self._kinds)})")

    def __iter__(self):
        return iter(self._kinds)

    @property
    def all_kinds(self) -> Tuple[ItemKind, ...]:
        return self._kinds

    @property
    def hazards(self) -> Tuple[ItemKind, ...]:
        """Hazard kinds (bombs)."""
        return self._hazards

    @property
    def fruits(self) -> Tuple[ItemKind, ...]:
        """Scoring kinds."""
        return self._fruits

    def get_by_name(self, name: str) -> Optional[ItemKind]:
        """Get item kind by name (case-insensitive)."""
        name_lower = name.lower()
        for kind in self._kinds:
            if kind.name.lower() == name_lower:
                return kind
        return None


def resolve_zone(command: Union["Zone", str, int], config: GameConfig) -> Optional[Zone]:
    """
    Map an external basket command to a zone.

    Accepts a Zone, a lane index (0-2) or any alias from the controls
    vocabulary. Returns None for anything else.
    """
    if isinstance(command, Zone):
        return command
    # bool is an int subclass; True/False are not lane indices
    if isinstance(command, numbers.Integral) and not isinstance(command, bool):
        if 0 <= command < len(ZONES):
            return ZONES[int(command)]
        return None
    if isinstance(command, str):
        zone_name = config.controls.lookup(command)
        if zone_name is not None:
            return Zone[zone_name]
    return None
