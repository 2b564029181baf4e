"""
Game Session
============

Lifecycle state machine for one round: start, pause, resume, reset, end,
plus the countdown tick and score bookkeeping.

The session never owns timers or visuals. It emits SessionSignals and the
host (see game.py) starts, suspends or stops its periodic tasks and clears
drops in response.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from clean_drops.catch_core.config_loader import GameConfig, get_config
from clean_drops.catch_core.scoring import ScoreEvent, ScoreTracker


class GamePhase(Enum):
    """Session lifecycle phase."""
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    ENDED = "ended"


class SessionSignal(Enum):
    """Requests from the session to its host."""
    TIMERS_START = "timers_start"
    TIMERS_SUSPEND = "timers_suspend"
    TIMERS_RESUME = "timers_resume"
    TIMERS_STOP = "timers_stop"
    DROPS_CLEAR = "drops_clear"
    GAME_OVER = "game_over"


SignalListener = Callable[[SessionSignal, "GameSession"], None]


@dataclass(frozen=True)
class EndResult:
    """Final outcome of a session."""
    final_score: int
    timed_out: bool

    @property
    def title(self) -> str:
        """Overlay title for the end screen."""
        return "Time's up!" if self.timed_out else "Game over"


class GameSession:
    """
    Owns score, time remaining and phase for one game.

    All operations are total: calling one from a phase where it does not
    apply is a no-op, never an error.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize an idle session.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._scorer = ScoreTracker(config)
        self._phase = GamePhase.IDLE
        self._time_remaining: int = config.session.duration_seconds
        self._result: Optional[EndResult] = None
        self._listeners: List[SignalListener] = []

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def phase(self) -> GamePhase:
        """Current lifecycle phase."""
        return self._phase

    @property
    def score(self) -> int:
        """Current score."""
        return self._scorer.score

    @property
    def time_remaining(self) -> int:
        """Whole seconds left on the countdown."""
        return self._time_remaining

    @property
    def is_running(self) -> bool:
        return self._phase is GamePhase.RUNNING

    @property
    def accepting_input(self) -> bool:
        """True if collect events are scored."""
        return self._phase is GamePhase.RUNNING

    @property
    def result(self) -> Optional[EndResult]:
        """Outcome of the session, None until it has ended."""
        return self._result

    @property
    def hits(self) -> int:
        """Clean drops collected this session."""
        return self._scorer.clean_collected

    @property
    def misses(self) -> int:
        """Polluted drops collected this session."""
        return self._scorer.polluted_collected

    def add_listener(self, listener: SignalListener) -> None:
        """Register a callback for lifecycle signals."""
        self._listeners.append(listener)

    def remove_listener(self, listener: SignalListener) -> None:
        """Unregister a callback. Unknown callbacks are ignored."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, signal: SessionSignal) -> None:
        for listener in list(self._listeners):
            listener(signal, self)

    # Lifecycle

    def start(self) -> bool:
        """
        Start a fresh round.

        Resets score and countdown, then asks the host to start the spawn
        and countdown tasks. Drops left from a paused or ended round are
        cleared first. Does nothing while already running.

        Returns:
            True if a round was started.
        """
        if self._phase is GamePhase.RUNNING:
            return False

        # Leftovers from a paused or finished round
        if self._phase is not GamePhase.IDLE:
            self._emit(SessionSignal.DROPS_CLEAR)

        self._scorer.reset()
        self._time_remaining = self._config.session.duration_seconds
        self._result = None
        self._phase = GamePhase.RUNNING
        self._emit(SessionSignal.TIMERS_START)
        return True

    def pause(self) -> bool:
        """Suspend a running round, keeping score and time."""
        if self._phase is not GamePhase.RUNNING:
            return False

        self._phase = GamePhase.PAUSED
        self._emit(SessionSignal.TIMERS_SUSPEND)
        return True

    def resume(self) -> bool:
        """Continue a paused round from the preserved time."""
        if self._phase is not GamePhase.PAUSED:
            return False

        self._phase = GamePhase.RUNNING
        self._emit(SessionSignal.TIMERS_RESUME)
        return True

    def toggle_pause(self) -> bool:
        """Pause if running, resume if paused."""
        if self._phase is GamePhase.RUNNING:
            return self.pause()
        return self.resume()

    def reset(self) -> bool:
        """
        Abandon the current round and start a new one.

        Always stops timers and clears drops, whatever the phase.
        """
        self._emit(SessionSignal.TIMERS_STOP)
        self._emit(SessionSignal.DROPS_CLEAR)
        self._phase = GamePhase.IDLE
        return self.start()

    def end(self) -> EndResult:
        """
        End the round.

        Idempotent: the first call records the result and signals the host,
        later calls return the same result without side effects.

        Returns:
            EndResult with the final score and whether time ran out.
        """
        if self._phase is GamePhase.ENDED and self._result is not None:
            return self._result

        self._phase = GamePhase.ENDED
        self._result = EndResult(
            final_score=self._scorer.score,
            timed_out=self._time_remaining <= 0
        )
        self._emit(SessionSignal.TIMERS_STOP)
        self._emit(SessionSignal.DROPS_CLEAR)
        self._emit(SessionSignal.GAME_OVER)
        return self._result

    def tick(self) -> int:
        """
        Advance the countdown by one tick.

        Ends the session when the countdown reaches zero.

        Returns:
            Seconds remaining after the tick.
        """
        if self._phase is not GamePhase.RUNNING:
            return self._time_remaining

        self._time_remaining = max(0, self._time_remaining - 1)
        if self._time_remaining <= 0:
            self.end()
        return self._time_remaining

    def register_hit(self, is_polluted: bool) -> int:
        """
        Score one collected drop.

        Args:
            is_polluted: True if the drop was polluted.

        Returns:
            The score after the hit (unchanged when not running).
        """
        if self._phase is not GamePhase.RUNNING:
            return self._scorer.score
        return self._scorer.apply_hit(is_polluted).score

    def apply_hit(self, is_polluted: bool) -> Optional[ScoreEvent]:
        """Like register_hit, but returns the ScoreEvent (None when ignored)."""
        if self._phase is not GamePhase.RUNNING:
            return None
        return self._scorer.apply_hit(is_polluted)

    def __repr__(self) -> str:
        return (
            f"GameSession(phase={self._phase.value}, score={self.score}, "
            f"time_remaining={self._time_remaining})"
        )
