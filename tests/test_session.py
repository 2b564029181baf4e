"""
Tests for the game session state machine.
"""

import random

import pytest

from clean_drops.catch_core.config_loader import load_config
from clean_drops.catch_core.session import GamePhase, GameSession, SessionSignal


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def session(config):
    return GameSession(config)


@pytest.fixture
def signals(session):
    received = []
    session.add_listener(lambda signal, _session: received.append(signal))
    return received


class TestLifecycle:
    """Test phase transitions and emitted signals."""

    def test_initial_state(self, session, config):
        """New session is idle with a full clock."""
        assert session.phase is GamePhase.IDLE
        assert session.score == 0
        assert session.time_remaining == config.session.duration_seconds
        assert session.result is None

    def test_start_runs_and_signals(self, session, signals):
        """Start moves to running and asks for timers."""
        assert session.start()
        assert session.phase is GamePhase.RUNNING
        assert signals == [SessionSignal.TIMERS_START]

    def test_start_while_running_is_noop(self, session, signals):
        """Double start must not reset a running round."""
        session.start()
        session.register_hit(False)
        session.tick()

        assert not session.start()
        assert session.score == 1
        assert session.time_remaining == 29
        assert signals == [SessionSignal.TIMERS_START]

    def test_start_resets_score_and_time(self, session):
        """Start after an ended round begins fresh."""
        session.start()
        for _ in range(5):
            session.register_hit(False)
        for _ in range(10):
            session.tick()
        session.end()

        assert session.start()
        assert session.score == 0
        assert session.time_remaining == 30
        assert session.result is None

    def test_start_from_paused_resets(self, session):
        """Start while paused begins a new round."""
        session.start()
        session.register_hit(False)
        session.tick()
        session.pause()

        assert session.start()
        assert session.phase is GamePhase.RUNNING
        assert session.score == 0
        assert session.time_remaining == 30

    def test_start_after_round_clears_drops_first(self, session, signals):
        """A new round from paused or ended asks for leftover drops to go."""
        session.start()
        session.pause()
        signals.clear()

        session.start()
        assert signals == [SessionSignal.DROPS_CLEAR, SessionSignal.TIMERS_START]

        session.end()
        signals.clear()
        session.start()
        assert signals == [SessionSignal.DROPS_CLEAR, SessionSignal.TIMERS_START]

    def test_pause_only_when_running(self, session, signals):
        """Pause is a no-op unless running."""
        assert not session.pause()
        assert session.phase is GamePhase.IDLE

        session.start()
        assert session.pause()
        assert session.phase is GamePhase.PAUSED
        assert not session.pause()
        assert signals == [SessionSignal.TIMERS_START, SessionSignal.TIMERS_SUSPEND]

    def test_resume_only_when_paused(self, session, signals):
        """Resume is a no-op unless paused."""
        assert not session.resume()
        session.start()
        assert not session.resume()
        session.pause()
        assert session.resume()
        assert session.phase is GamePhase.RUNNING
        assert signals[-1] is SessionSignal.TIMERS_RESUME

    def test_toggle_pause(self, session):
        """Toggle alternates between running and paused."""
        session.start()
        session.toggle_pause()
        assert session.phase is GamePhase.PAUSED
        session.toggle_pause()
        assert session.phase is GamePhase.RUNNING

    def test_toggle_pause_idle_is_noop(self, session):
        assert not session.toggle_pause()
        assert session.phase is GamePhase.IDLE

    def test_reset_restarts(self, session, signals):
        """Reset stops timers, clears drops and starts over."""
        session.start()
        session.register_hit(False)
        session.tick()
        signals.clear()

        assert session.reset()
        assert session.phase is GamePhase.RUNNING
        assert session.score == 0
        assert session.time_remaining == 30
        assert signals == [
            SessionSignal.TIMERS_STOP,
            SessionSignal.DROPS_CLEAR,
            SessionSignal.TIMERS_START,
        ]

    def test_reset_from_any_phase(self, session):
        """Reset always ends up running."""
        for prepare in (lambda: None, session.pause, session.end):
            session.start()
            prepare()
            session.reset()
            assert session.phase is GamePhase.RUNNING


class TestEnd:
    """Test the end of a round."""

    def test_thirty_ticks_end_round(self, session):
        """Scenario: 30 one-second ticks end the round by timeout."""
        session.start()
        for _ in range(30):
            session.tick()

        assert session.phase is GamePhase.ENDED
        assert session.time_remaining == 0
        assert session.result.timed_out
        assert session.result.title == "Time's up!"

    def test_ticks_before_timeout_keep_running(self, session):
        session.start()
        for _ in range(29):
            session.tick()
        assert session.phase is GamePhase.RUNNING
        assert session.time_remaining == 1

    def test_manual_end(self, session):
        """Manual end is not a timeout."""
        session.start()
        session.register_hit(False)
        result = session.end()

        assert session.phase is GamePhase.ENDED
        assert result.final_score == 1
        assert not result.timed_out
        assert result.title == "Game over"

    def test_end_is_idempotent(self, session, signals):
        """Second end has no additional effect."""
        session.start()
        first = session.end()
        emitted = list(signals)

        second = session.end()

        assert second == first
        assert signals == emitted
        assert signals.count(SessionSignal.GAME_OVER) == 1

    def test_end_signals(self, session, signals):
        session.start()
        signals.clear()
        session.end()
        assert signals == [
            SessionSignal.TIMERS_STOP,
            SessionSignal.DROPS_CLEAR,
            SessionSignal.GAME_OVER,
        ]

    def test_no_mutation_after_end(self, session):
        """Ticks and hits after the end change nothing."""
        session.start()
        session.register_hit(False)
        session.end()

        session.tick()
        session.register_hit(False)
        session.register_hit(True)

        assert session.score == 1
        assert session.time_remaining == 30


class TestScoring:
    """Test register_hit through the session."""

    def test_clean_and_polluted_scenario(self, session):
        """Scenario: three clean, one polluted -> 2."""
        session.start()
        for _ in range(3):
            session.register_hit(False)
        assert session.register_hit(True) == 2
        assert session.score == 2
        assert session.hits == 3
        assert session.misses == 1

    def test_score_may_go_negative(self, session):
        session.start()
        session.register_hit(True)
        session.register_hit(True)
        assert session.score == -2

    def test_hits_ignored_unless_running(self, session):
        """Idle, paused and ended sessions never change score."""
        assert session.register_hit(False) == 0

        session.start()
        session.register_hit(False)
        session.pause()
        assert session.register_hit(False) == 1
        assert session.register_hit(True) == 1
        assert session.apply_hit(False) is None

    def test_pause_hit_resume_scenario(self, session):
        """Scenario: pause, hit (ignored), resume -> score unchanged."""
        session.start()
        session.register_hit(False)
        session.pause()
        session.register_hit(False)
        session.resume()

        assert session.phase is GamePhase.RUNNING
        assert session.score == 1

    def test_pause_resume_preserves_state(self, session):
        """Pause/resume keeps score and time exactly."""
        session.start()
        for _ in range(4):
            session.register_hit(False)
        for _ in range(7):
            session.tick()
        session.pause()
        session.tick()
        session.resume()

        assert session.score == 4
        assert session.time_remaining == 23


class TestInvariants:
    """Random operation sequences keep the invariants."""

    def test_random_sequences(self, session, config):
        rng = random.Random(7)
        operations = [
            session.start,
            session.pause,
            session.resume,
            session.reset,
            session.end,
            session.tick,
            session.tick,
            lambda: session.register_hit(True),
            lambda: session.register_hit(True),
            lambda: session.register_hit(False),
        ]

        for _ in range(5000):
            phase_before = session.phase
            time_before = session.time_remaining
            rng.choice(operations)()

            assert 0 <= session.time_remaining <= config.session.duration_seconds
            assert session.score >= config.scoring.score_floor
            # Time only drops while running
            if session.time_remaining < time_before:
                assert phase_before is GamePhase.RUNNING


class TestListeners:

    def test_remove_listener(self, session):
        received = []

        def listener(signal, _session):
            received.append(signal)

        session.add_listener(listener)
        session.remove_listener(listener)
        session.remove_listener(listener)
        session.start()

        assert received == []
