"""
Tests for the cooperative scheduler.
"""

import pytest

from catch_zone.catch_core.scheduler import CooperativeScheduler


@pytest.fixture
def scheduler():
    return CooperativeScheduler()


class TestOneShot:

    def test_runs_when_due(self, scheduler):
        calls = []
        scheduler.call_later(0.5, lambda: calls.append(scheduler.now))

        scheduler.advance(0.4)
        assert calls == []

        scheduler.advance(0.1)
        assert calls == [pytest.approx(0.5)]

    def test_runs_once(self, scheduler):
        calls = []
        scheduler.call_later(0.1, lambda: calls.append(1))
        scheduler.advance(5.0)
        assert calls == [1]
        assert scheduler.pending == 0

    def test_cancel(self, scheduler):
        calls = []
        handle = scheduler.call_later(0.1, lambda: calls.append(1))
        handle.cancel()
        scheduler.advance(1.0)
        assert calls == []

    def test_negative_delay_rejected(self, scheduler):
        with pytest.raises(ValueError):
            scheduler.call_later(-1.0, lambda: None)


class TestPeriodic:

    def test_interval_count(self, scheduler):
        calls = []
        scheduler.call_every(1.0, lambda: calls.append(scheduler.now))
        scheduler.advance(3.5)
        assert calls == [pytest.approx(1.0), pytest.approx(2.0), pytest.approx(3.0)]

    def test_no_drift_at_high_frequency(self, scheduler):
        """60 Hz for 10 seconds is exactly 600 runs."""
        calls = []
        scheduler.call_every(1 / 60, lambda: calls.append(1))
        for _ in range(100):
            scheduler.advance(0.1)
        assert len(calls) == 600

    def test_cancel_from_inside_callback(self, scheduler):
        calls = []

        def tick():
            calls.append(1)
            if len(calls) == 2:
                handle.cancel()

        handle = scheduler.call_every(0.25, tick)
        scheduler.advance(2.0)
        assert len(calls) == 2

    def test_non_positive_interval_rejected(self, scheduler):
        with pytest.raises(ValueError):
            scheduler.call_every(0.0, lambda: None)


class TestOrdering:

    def test_due_time_order(self, scheduler):
        order = []
        scheduler.call_later(0.3, lambda: order.append("c"))
        scheduler.call_later(0.1, lambda: order.append("a"))
        scheduler.call_later(0.2, lambda: order.append("b"))
        scheduler.advance(1.0)
        assert order == ["a", "b", "c"]

    def test_ties_run_in_schedule_order(self, scheduler):
        order = []
        scheduler.call_later(0.5, lambda: order.append(1))
        scheduler.call_later(0.5, lambda: order.append(2))
        scheduler.call_later(0.5, lambda: order.append(3))
        scheduler.advance(0.5)
        assert order == [1, 2, 3]

    def test_chained_tasks_run_within_window(self, scheduler):
        """A task scheduled by a callback runs in the same advance if due."""
        times = []

        def first():
            times.append(scheduler.now)
            scheduler.call_later(0.2, lambda: times.append(scheduler.now))

        scheduler.call_later(0.1, first)
        scheduler.advance(1.0)
        assert times == [pytest.approx(0.1), pytest.approx(0.3)]

    def test_clock_lands_on_target(self, scheduler):
        scheduler.advance(0.75)
        assert scheduler.now == pytest.approx(0.75)

    def test_negative_advance_rejected(self, scheduler):
        with pytest.raises(ValueError):
            scheduler.advance(-0.1)


class TestCancelAll:

    def test_cancel_all(self, scheduler):
        calls = []
        scheduler.call_later(0.1, lambda: calls.append(1))
        scheduler.call_every(0.1, lambda: calls.append(2))
        assert scheduler.pending == 2

        scheduler.cancel_all()
        scheduler.advance(1.0)

        assert calls == []
        assert scheduler.pending == 0

    def test_reset_rewinds_clock(self, scheduler):
        scheduler.advance(3.0)
        scheduler.reset()
        assert scheduler.now == 0.0
