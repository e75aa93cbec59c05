"""Tests for taskmesh.simulation.events."""

from __future__ import annotations

import pytest

from taskmesh.simulation.events import EventQueue


class TestEventQueueOrdering:
    def test_runs_in_time_order(self) -> None:
        queue = EventQueue()
        fired: list[str] = []
        queue.schedule(3.0, fired.append, "c")
        queue.schedule(1.0, fired.append, "a")
        queue.schedule(2.0, fired.append, "b")
        assert queue.run(until=10.0) == 3
        assert fired == ["a", "b", "c"]

    def test_ties_run_in_insertion_order(self) -> None:
        queue = EventQueue()
        fired: list[int] = []
        for i in range(5):
            queue.schedule_at(1.0, fired.append, i)
        queue.run(until=1.0)
        assert fired == [0, 1, 2, 3, 4]

    def test_callback_sees_event_time(self) -> None:
        queue = EventQueue()
        seen: list[float] = []
        queue.schedule(2.5, lambda: seen.append(queue.now))
        queue.run(until=5.0)
        assert seen == [2.5]

    def test_callbacks_may_schedule_more_events(self) -> None:
        queue = EventQueue()
        fired: list[float] = []

        def tick() -> None:
            fired.append(queue.now)
            queue.schedule(1.0, tick)

        queue.schedule(0.0, tick)
        queue.run(until=3.0)
        assert fired == [0.0, 1.0, 2.0, 3.0]
        assert queue.pending == 1


class TestEventQueueHorizon:
    def test_events_after_horizon_stay_pending(self) -> None:
        queue = EventQueue()
        fired: list[int] = []
        queue.schedule(5.0, fired.append, 1)
        assert queue.run(until=4.0) == 0
        assert fired == []
        assert queue.now == 4.0
        assert queue.pending == 1

    def test_run_backwards_rejected(self) -> None:
        queue = EventQueue()
        queue.run(until=2.0)
        with pytest.raises(ValueError, match="until"):
            queue.run(until=1.0)

    def test_stop_keeps_clock_at_last_event(self) -> None:
        queue = EventQueue()
        queue.schedule(1.0, queue.stop)
        queue.schedule(2.0, lambda: None)
        assert queue.run(until=10.0) == 1
        assert queue.now == 1.0
        assert queue.pending == 1


class TestEventQueueScheduling:
    def test_negative_delay_rejected(self) -> None:
        with pytest.raises(ValueError, match="delay"):
            EventQueue().schedule(-0.1, lambda: None)

    def test_past_absolute_time_rejected(self) -> None:
        queue = EventQueue()
        queue.run(until=3.0)
        with pytest.raises(ValueError, match="past"):
            queue.schedule_at(2.0, lambda: None)

    def test_cancelled_event_does_not_fire(self) -> None:
        queue = EventQueue()
        fired: list[int] = []
        event = queue.schedule(1.0, fired.append, 1)
        queue.schedule(2.0, fired.append, 2)
        event.cancel()
        assert queue.pending == 1
        assert queue.run(until=3.0) == 1
        assert fired == [2]
