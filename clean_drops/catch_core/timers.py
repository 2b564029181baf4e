"""
Timers
======

Cancellable periodic tasks driven by elapsed game time.

The host feeds frame time into a TaskScheduler; the scheduler fires due
callbacks one at a time in chronological order, so a callback that stops
another task (the countdown ending the round stops the spawn trigger)
takes effect before that task's next firing.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, List, Optional


class TaskState(Enum):
    """PeriodicTask run state."""
    STOPPED = "stopped"
    RUNNING = "running"
    SUSPENDED = "suspended"


class PeriodicTask:
    """
    Calls a callback every interval_ms of advanced time.

    - start(): begin counting a fresh interval
    - suspend() / resume(): freeze and continue, keeping progress
    - stop(): cancel, discarding progress
    """

    def __init__(self, name: str, interval_ms: int, callback: Callable[[], object]):
        """
        Initialize a stopped task.

        Args:
            name: Label used in debug output.
            interval_ms: Period in milliseconds, must be positive.
            callback: Called with no arguments each time the task fires.
        """
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")

        self._name = name
        self._interval_ms = interval_ms
        self._callback = callback
        self._state = TaskState.STOPPED
        self._elapsed_ms: float = 0.0
        self._fired: int = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    @property
    def state(self) -> TaskState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is TaskState.RUNNING

    @property
    def elapsed_ms(self) -> float:
        """Progress into the current interval."""
        return self._elapsed_ms

    @property
    def fired(self) -> int:
        """Times the callback has fired since the last start."""
        return self._fired

    def start(self) -> None:
        self._state = TaskState.RUNNING
        self._elapsed_ms = 0.0
        self._fired = 0

    def suspend(self) -> None:
        if self._state is TaskState.RUNNING:
            self._state = TaskState.SUSPENDED

    def resume(self) -> None:
        if self._state is TaskState.SUSPENDED:
            self._state = TaskState.RUNNING

    def stop(self) -> None:
        self._state = TaskState.STOPPED
        self._elapsed_ms = 0.0

    def time_until_due(self) -> Optional[float]:
        """Milliseconds until the next firing, None unless running."""
        if self._state is not TaskState.RUNNING:
            return None
        return self._interval_ms - self._elapsed_ms

    def advance(self, dt_ms: float) -> int:
        """
        Advance this task on its own.

        Fires once per completed interval. Stops firing as soon as the task
        leaves the running state, even mid-advance.

        Returns:
            Number of times the callback fired.
        """
        count = 0
        remaining = dt_ms
        while self._state is TaskState.RUNNING and remaining > 0:
            due = self._interval_ms - self._elapsed_ms
            if remaining < due:
                self._elapsed_ms += remaining
                break
            remaining -= due
            self._fire()
            count += 1
        return count

    def _fire(self) -> None:
        self._elapsed_ms = 0.0
        self._fired += 1
        self._callback()

    def __repr__(self) -> str:
        return (
            f"PeriodicTask({self._name!r}, every={self._interval_ms}ms, "
            f"state={self._state.value})"
        )


class TaskScheduler:
    """
    Advances several PeriodicTasks together in time order.

    Tasks due at the same instant fire in registration order.
    """

    def __init__(self):
        self._tasks: Dict[str, PeriodicTask] = {}
        self._now_ms: float = 0.0

    @property
    def now_ms(self) -> float:
        """Total time advanced through this scheduler."""
        return self._now_ms

    @property
    def tasks(self) -> List[PeriodicTask]:
        return list(self._tasks.values())

    def add(self, task: PeriodicTask) -> PeriodicTask:
        """Register a task. Names must be unique."""
        if task.name in self._tasks:
            raise ValueError(f"Duplicate task name: {task.name}")
        self._tasks[task.name] = task
        return task

    def get(self, name: str) -> PeriodicTask:
        return self._tasks[name]

    def start_all(self) -> None:
        for task in self._tasks.values():
            task.start()

    def suspend_all(self) -> None:
        for task in self._tasks.values():
            task.suspend()

    def resume_all(self) -> None:
        for task in self._tasks.values():
            task.resume()

    def stop_all(self) -> None:
        for task in self._tasks.values():
            task.stop()

    def advance(self, dt_ms: float) -> Dict[str, int]:
        """
        Advance all running tasks by dt_ms.

        Args:
            dt_ms: Elapsed time in milliseconds.

        Returns:
            Firing count per task name.
        """
        fired = {name: 0 for name in self._tasks}
        remaining = float(dt_ms)

        while remaining > 0:
            running = [t for t in self._tasks.values() if t.is_running]
            if not running:
                self._now_ms += remaining
                break

            step = min(t.time_until_due() for t in running)
            if step > remaining:
                for task in running:
                    task.advance(remaining)
                self._now_ms += remaining
                break

            # Move everyone up to the earliest due point, then fire in order
            due = [t for t in running if t.time_until_due() <= step]
            for task in running:
                if task not in due:
                    task.advance(step)
            remaining -= step
            self._now_ms += step

            for task in due:
                # An earlier callback in this batch may have stopped it
                if task.is_running:
                    task._fire()
                    fired[task.name] += 1

        return fired
