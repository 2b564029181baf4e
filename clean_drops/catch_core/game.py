"""
Core Game
=========

Host for a GameSession: owns the spawn and countdown tasks, the drop field
and the spawner, and reacts to the session's lifecycle signals.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from clean_drops.catch_core.config_loader import GameConfig, get_config
from clean_drops.catch_core.drop_field import DropField
from clean_drops.catch_core.rng import DropSpawner
from clean_drops.catch_core.scoring import ScoreEvent
from clean_drops.catch_core.session import (
    EndResult,
    GamePhase,
    GameSession,
    SessionSignal,
)
from clean_drops.catch_core.state_snapshot import GameSnapshot, SnapshotBuilder
from clean_drops.catch_core.timers import PeriodicTask, TaskScheduler


SPAWN_TASK = "spawn"
TICK_TASK = "countdown"


@dataclass
class AdvanceResult:
    """What happened during one advance() call."""
    spawned: int
    ticks: int
    removed: int
    ended: bool


class CoreGame:
    """
    Main game class.

    Orchestrates:
    - Session lifecycle and scoring
    - Spawn trigger and countdown tick
    - Drop spawning (RNG)
    - Drop and feedback animation

    Time only moves when advance() is called, so the same class drives the
    real-time pygame loop and the fixed-step Gymnasium env.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        debug: bool = False
    ):
        """
        Initialize game.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducible drops.
            debug: If True, print lifecycle signals and collects.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._seed = seed
        self._debug = debug

        self._session = GameSession(config)
        self._spawner = DropSpawner(config, seed)
        self._field = DropField(config)
        self._snapshot_builder = SnapshotBuilder(config)

        # Spawn registered first so it wins ties with the countdown
        self._scheduler = TaskScheduler()
        self._scheduler.add(PeriodicTask(
            SPAWN_TASK, config.session.spawn_interval_ms, self._spawn_drop
        ))
        self._scheduler.add(PeriodicTask(
            TICK_TASK, config.session.tick_interval_ms, self._session.tick
        ))

        self._frame_start_ms: float = 0.0
        self._session.add_listener(self._on_signal)

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def session(self) -> GameSession:
        return self._session

    @property
    def field(self) -> DropField:
        return self._field

    @property
    def scheduler(self) -> TaskScheduler:
        return self._scheduler

    @property
    def phase(self) -> GamePhase:
        return self._session.phase

    @property
    def score(self) -> int:
        """Current score."""
        return self._session.score

    @property
    def time_remaining(self) -> int:
        return self._session.time_remaining

    @property
    def is_over(self) -> bool:
        """True if the session has ended."""
        return self._session.phase is GamePhase.ENDED

    @property
    def result(self) -> Optional[EndResult]:
        return self._session.result

    # Lifecycle

    def start(self) -> bool:
        return self._session.start()

    def pause(self) -> bool:
        return self._session.pause()

    def resume(self) -> bool:
        return self._session.resume()

    def toggle_pause(self) -> bool:
        return self._session.toggle_pause()

    def reset(self, seed: Optional[int] = None) -> bool:
        """
        Restart the round.

        Args:
            seed: New random seed for the spawner. Keeps the previous if None.
        """
        if seed is not None:
            self._seed = seed
        self._spawner.reset(self._seed)
        return self._session.reset()

    def end(self) -> EndResult:
        return self._session.end()

    def _on_signal(self, signal: SessionSignal, session: GameSession) -> None:
        """Translate session signals into timer and field actions."""
        if self._debug:
            print(f"[DEBUG] {signal.value}: {session!r}")

        if signal is SessionSignal.TIMERS_START:
            self._scheduler.start_all()
        elif signal is SessionSignal.TIMERS_SUSPEND:
            self._scheduler.suspend_all()
        elif signal is SessionSignal.TIMERS_RESUME:
            self._scheduler.resume_all()
        elif signal is SessionSignal.TIMERS_STOP:
            self._scheduler.stop_all()
        elif signal is SessionSignal.DROPS_CLEAR:
            self._field.clear()

    # Time

    def advance(self, dt_ms: float) -> AdvanceResult:
        """
        Advance game time.

        Fires due spawn/countdown callbacks in time order, then moves drops
        (only while running) and feedback text.

        Args:
            dt_ms: Elapsed milliseconds.

        Returns:
            AdvanceResult summarizing the frame.
        """
        was_over = self.is_over
        self._frame_start_ms = self._scheduler.now_ms
        fired = self._scheduler.advance(dt_ms)
        removed = self._field.update(dt_ms, move_drops=self._session.is_running)

        return AdvanceResult(
            spawned=fired[SPAWN_TASK],
            ticks=fired[TICK_TASK],
            removed=len(removed),
            ended=self.is_over and not was_over
        )

    def _spawn_drop(self) -> None:
        """Spawn trigger callback."""
        if not self._session.is_running:
            return
        spec = self._spawner.roll(self._field.width)
        drop = self._field.add(spec)
        # The field update below ages every drop by the whole frame
        drop.age_ms = -(self._scheduler.now_ms - self._frame_start_ms)

    # Input

    def collect(self, uid: int) -> Optional[ScoreEvent]:
        """
        Collect a drop by uid.

        Returns:
            ScoreEvent, or None if the game is not running or the drop
            cannot be collected.
        """
        if not self._session.accepting_input:
            return None

        drop = self._field.collect(uid)
        if drop is None:
            return None

        event = self._session.apply_hit(drop.is_polluted)
        self._field.add_feedback(drop, event.label, drop.is_polluted)

        if self._debug:
            print(f"[DEBUG] collect uid={uid}: {event!r}")
        return event

    def collect_at(self, x: float, y: float) -> Optional[ScoreEvent]:
        """Collect the drop under a container point, if any."""
        if not self._session.accepting_input:
            return None
        drop = self._field.hit_test(x, y)
        if drop is None:
            return None
        return self.collect(drop.uid)

    def resize(self, width: float, height: float) -> bool:
        """Forward a container resize. Returns True if drops were purged."""
        return self._field.resize(width, height)

    # Views

    def snapshot(self) -> GameSnapshot:
        """Fixed-size observation of the current state."""
        return self._snapshot_builder.build(self)

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        result = self._session.result
        return {
            "score": self._session.score,
            "time_remaining": self._session.time_remaining,
            "phase": self._session.phase.value,
            "drop_count": self._field.drop_count,
            "clean_collected": self._session.hits,
            "polluted_collected": self._session.misses,
            "drops_spawned": self._spawner.rolled,
            "timed_out": result.timed_out if result is not None else False,
        }

    def get_render_data(self) -> Dict[str, Any]:
        """
        Get data needed for rendering.

        Returns:
            Dict with container size, drops, feedback text and HUD values.
        """
        drops_data = []
        fade_ms = self._config.feedback.collect_fade_ms
        for drop in self._field.drops.values():
            alpha = 1.0
            if drop.is_collected:
                alpha = max(0.0, 1.0 - drop.collected_age_ms / fade_ms)
            drops_data.append({
                "uid": drop.uid,
                "is_polluted": drop.is_polluted,
                "x": drop.x,
                "y": drop.y,
                "size": drop.size,
                "tilt": drop.tilt,
                "collected": drop.is_collected,
                "alpha": alpha,
            })

        texts_data = []
        for floating in self._field.floating_texts:
            dy, alpha = self._field.text_offset(floating)
            texts_data.append({
                "text": floating.text,
                "color": floating.color,
                "x": floating.x,
                "y": floating.y + dy,
                "alpha": alpha,
            })

        result = self._session.result
        return {
            "board_width": self._field.width,
            "board_height": self._field.height,
            "phase": self._session.phase.value,
            "score": self._session.score,
            "time_remaining": self._session.time_remaining,
            "drops": drops_data,
            "floating_texts": texts_data,
            "end_title": result.title if result is not None else "",
            "final_score": result.final_score if result is not None else 0,
        }
