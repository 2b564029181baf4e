"""
Tests for periodic tasks and the scheduler.
"""

import pytest

from clean_drops.catch_core.timers import PeriodicTask, TaskScheduler, TaskState


class TestPeriodicTask:
    """Test a single task."""

    def test_fires_per_interval(self):
        calls = []
        task = PeriodicTask("t", 100, lambda: calls.append(1))
        task.start()

        assert task.advance(99) == 0
        assert task.advance(1) == 1
        assert task.advance(250) == 2
        assert len(calls) == 3
        assert task.elapsed_ms == pytest.approx(50)

    def test_stopped_task_never_fires(self):
        calls = []
        task = PeriodicTask("t", 100, lambda: calls.append(1))
        assert task.advance(1000) == 0
        assert calls == []

    def test_suspend_keeps_progress(self):
        task = PeriodicTask("t", 100, lambda: None)
        task.start()
        task.advance(60)
        task.suspend()

        assert task.state is TaskState.SUSPENDED
        assert task.advance(500) == 0
        assert task.time_until_due() is None

        task.resume()
        assert task.time_until_due() == pytest.approx(40)
        assert task.advance(40) == 1

    def test_stop_discards_progress(self):
        task = PeriodicTask("t", 100, lambda: None)
        task.start()
        task.advance(60)
        task.stop()
        task.resume()

        assert task.state is TaskState.STOPPED
        assert task.elapsed_ms == 0

    def test_stop_inside_callback(self):
        """Stopping from the callback cancels remaining firings."""
        calls = []

        def callback():
            calls.append(1)
            task.stop()

        task = PeriodicTask("t", 100, callback)
        task.start()
        assert task.advance(1000) == 1
        assert calls == [1]

    def test_invalid_interval(self):
        with pytest.raises(ValueError):
            PeriodicTask("t", 0, lambda: None)


class TestTaskScheduler:
    """Test chronological advancement of several tasks."""

    def test_chronological_order(self):
        order = []
        scheduler = TaskScheduler()
        scheduler.add(PeriodicTask("spawn", 700, lambda: order.append("spawn")))
        scheduler.add(PeriodicTask("tick", 1000, lambda: order.append("tick")))
        scheduler.start_all()

        fired = scheduler.advance(2100)

        # spawn 700, tick 1000, spawn 1400, tick 2000, spawn 2100
        assert order == ["spawn", "tick", "spawn", "tick", "spawn"]
        assert fired == {"spawn": 3, "tick": 2}
        assert scheduler.now_ms == pytest.approx(2100)

    def test_ties_fire_in_registration_order(self):
        order = []
        scheduler = TaskScheduler()
        scheduler.add(PeriodicTask("a", 500, lambda: order.append("a")))
        scheduler.add(PeriodicTask("b", 500, lambda: order.append("b")))
        scheduler.start_all()

        scheduler.advance(500)
        assert order == ["a", "b"]

    def test_callback_stop_cancels_later_firings(self):
        """A task stopped by another's callback does not fire later in the same advance."""
        order = []
        scheduler = TaskScheduler()
        scheduler.add(PeriodicTask("spawn", 700, lambda: order.append("spawn")))

        def tick():
            order.append("tick")
            scheduler.stop_all()

        scheduler.add(PeriodicTask("tick", 1000, tick))
        scheduler.start_all()

        fired = scheduler.advance(5000)

        assert order == ["spawn", "tick"]
        assert fired == {"spawn": 1, "tick": 1}

    def test_suspend_and_resume_all(self):
        scheduler = TaskScheduler()
        task = scheduler.add(PeriodicTask("t", 1000, lambda: None))
        scheduler.start_all()
        scheduler.advance(400)
        scheduler.suspend_all()
        scheduler.advance(10000)
        scheduler.resume_all()

        assert scheduler.advance(600) == {"t": 1}
        assert task.fired == 1

    def test_duplicate_name(self):
        scheduler = TaskScheduler()
        scheduler.add(PeriodicTask("t", 100, lambda: None))
        with pytest.raises(ValueError):
            scheduler.add(PeriodicTask("t", 200, lambda: None))

    def test_many_small_frames_match_one_big(self):
        """Frame size does not change how often tasks fire."""
        counts = {"small": 0, "big": 0}

        small = TaskScheduler()
        small.add(PeriodicTask("t", 700, lambda: counts.__setitem__("small", counts["small"] + 1)))
        small.start_all()
        for _ in range(600):
            small.advance(16)

        big = TaskScheduler()
        big.add(PeriodicTask("t", 700, lambda: counts.__setitem__("big", counts["big"] + 1)))
        big.start_all()
        big.advance(9600)

        assert counts["small"] == counts["big"] == 13
