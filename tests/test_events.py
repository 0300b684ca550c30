"""
Tests for the event bus.
"""

import pytest

from catch_zone.catch_core.events import (
    BasketMoved,
    EventBus,
    EventLog,
    GameEvent,
    ScoreChanged,
)
from catch_zone.catch_core.item_catalog import Zone


@pytest.fixture
def bus():
    return EventBus()


def test_typed_subscription(bus):
    scores = EventLog()
    bus.subscribe(scores, ScoreChanged)

    bus.emit(ScoreChanged(score=100))
    bus.emit(BasketMoved(zone=Zone.LEFT))

    assert scores.events == [ScoreChanged(score=100)]


def test_catch_all_receives_everything(bus):
    log = EventLog()
    bus.subscribe(log)

    bus.emit(ScoreChanged(score=100))
    bus.emit(BasketMoved(zone=Zone.RIGHT))

    assert len(log.events) == 2
    assert log.of_type(BasketMoved) == [BasketMoved(zone=Zone.RIGHT)]


def test_typed_handlers_run_before_catch_all(bus):
    order = []
    bus.subscribe(lambda e: order.append("all"))
    bus.subscribe(lambda e: order.append("score"), ScoreChanged)

    bus.emit(ScoreChanged(score=1))
    assert order == ["score", "all"]


def test_unsubscribe(bus):
    log = EventLog()
    unsubscribe = bus.subscribe(log)

    bus.emit(ScoreChanged(score=1))
    unsubscribe()
    bus.emit(ScoreChanged(score=2))

    assert log.events == [ScoreChanged(score=1)]


def test_unsubscribe_twice_is_harmless(bus):
    log = EventLog()
    unsubscribe = bus.subscribe(log)
    unsubscribe()
    unsubscribe()
    bus.emit(ScoreChanged(score=1))
    assert log.events == []


def test_handler_may_unsubscribe_during_emit(bus):
    log = EventLog()

    def once(event):
        unsubscribe()

    unsubscribe = bus.subscribe(once)
    bus.subscribe(log)

    bus.emit(ScoreChanged(score=1))
    bus.emit(ScoreChanged(score=2))

    assert len(log.events) == 2


def test_handler_errors_propagate(bus):
    def broken(event):
        raise RuntimeError("handler failed")

    bus.subscribe(broken)
    with pytest.raises(RuntimeError):
        bus.emit(ScoreChanged(score=1))


def test_events_are_immutable():
    event = ScoreChanged(score=5)
    assert isinstance(event, GameEvent)
    with pytest.raises(AttributeError):
        event.score = 6


def test_clear(bus):
    log = EventLog()
    bus.subscribe(log)
    bus.clear()
    bus.emit(ScoreChanged(score=1))
    assert log.events == []
