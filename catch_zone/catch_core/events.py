"""
Game Events
===========

Typed notifications produced by the engine and a small subscription bus
for the rendering / input layers to consume them.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, DefaultDict, List, Optional, Type

from catch_zone.catch_core.item_catalog import Zone


@dataclass(frozen=True)
class GameEvent:
    """Base class for everything the engine emits."""


@dataclass(frozen=True)
class GameStarted(GameEvent):
    score: int
    level: int
    miss_count: int
    max_misses: int
    basket_zone: Zone
    level_time_remaining: int


@dataclass(frozen=True)
class ScoreChanged(GameEvent):
    score: int


@dataclass(frozen=True)
class MissChanged(GameEvent):
    miss_count: int
    max_misses: int


@dataclass(frozen=True)
class LevelChanged(GameEvent):
    level: int


@dataclass(frozen=True)
class BasketMoved(GameEvent):
    zone: Zone


@dataclass(frozen=True)
class TimeChanged(GameEvent):
    level_time_remaining: int


@dataclass(frozen=True)
class LevelUpCountdown(GameEvent):
    remaining: int


@dataclass(frozen=True)
class ItemSpawned(GameEvent):
    item_id: int
    zone: Zone
    kind: str


@dataclass(frozen=True)
class ItemLanded(GameEvent):
    item_id: int
    zone: Zone
    kind: str
    outcome: str


@dataclass(frozen=True)
class ItemRemoved(GameEvent):
    item_id: int


@dataclass(frozen=True)
class Feedback(GameEvent):
    """Transient message for the player ("+100", "Warning!")."""
    message: str
    zone: Optional[Zone]
    kind: str  # "success" or "warning"


@dataclass(frozen=True)
class GameEnded(GameEvent):
    final_score: int
    final_level: int
    reason: str
    message: str


Handler = Callable[[GameEvent], None]


class EventBus:
    """
    Synchronous publish/subscribe for GameEvents.

    Handlers run inline, in subscription order, inside the tick or command
    that produced the event. Exceptions raised by a handler propagate.
    """

    def __init__(self):
        self._handlers: DefaultDict[Type[GameEvent], List[Handler]] = defaultdict(list)

    def subscribe(
        self,
        handler: Handler,
        event_type: Type[GameEvent] = GameEvent
    ) -> Callable[[], None]:
        """
        Register a handler.

        Args:
            handler: Called with each matching event.
            event_type: Event class to listen for. GameEvent receives everything.

        Returns:
            A zero-argument function that unsubscribes the handler.
        """
        self._handlers[event_type].append(handler)
        return lambda: self.unsubscribe(handler, event_type)

    def unsubscribe(self, handler: Handler, event_type: Type[GameEvent] = GameEvent) -> None:
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def emit(self, event: GameEvent) -> None:
        """Deliver an event to type-specific handlers, then catch-all ones."""
        for handler in list(self._handlers.get(type(event), ())):
            handler(event)
        if type(event) is not GameEvent:
            for handler in list(self._handlers.get(GameEvent, ())):
                handler(event)

    def clear(self) -> None:
        self._handlers.clear()


class EventLog:
    """Handler that records every event it receives (tools and tests)."""

    def __init__(self):
        self.events: List[GameEvent] = []

    def __call__(self, event: GameEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: Type[GameEvent]) -> List[GameEvent]:
        return [e for e in self.events if isinstance(e, event_type)]

    def clear(self) -> None:
        self.events.clear()
