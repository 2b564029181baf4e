"""
Scoring System
==============

Applies collect scores based on game configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from clean_drops.catch_core.config_loader import GameConfig, get_config


@dataclass
class ScoreEvent:
    """Record of a scoring event."""
    points: int          # Signed change actually applied
    is_polluted: bool
    score: int           # Total after the event
    label: str           # Floating feedback text, from the configured points

    def __repr__(self) -> str:
        kind = "polluted" if self.is_polluted else "clean"
        return f"ScoreEvent({kind}, points={self.points}, score={self.score})"


class ScoreTracker:
    """
    Tracks game score and collect counts.

    Clean drops add clean_points. Polluted drops subtract polluted_penalty,
    but the score never falls below score_floor.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize score tracker.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._floor = config.scoring.score_floor
        self._score: int = 0
        self._clean_collected: int = 0
        self._polluted_collected: int = 0

    @property
    def score(self) -> int:
        """Current total score."""
        return self._score

    @property
    def floor(self) -> int:
        """Lowest score the tracker will report."""
        return self._floor

    @property
    def clean_collected(self) -> int:
        """Clean drops collected since the last reset."""
        return self._clean_collected

    @property
    def polluted_collected(self) -> int:
        """Polluted drops collected since the last reset."""
        return self._polluted_collected

    def apply_hit(self, is_polluted: bool) -> ScoreEvent:
        """
        Apply the score for one collected drop.

        Args:
            is_polluted: True if the collected drop was polluted.

        Returns:
            ScoreEvent describing the points applied.
        """
        scoring = self._config.scoring
        before = self._score
        if is_polluted:
            self._score = max(self._floor, self._score - scoring.polluted_penalty)
            self._polluted_collected += 1
        else:
            self._score += scoring.clean_points
            self._clean_collected += 1

        return ScoreEvent(
            points=self._score - before,
            is_polluted=is_polluted,
            score=self._score,
            label=f"-{scoring.polluted_penalty}" if is_polluted else f"+{scoring.clean_points}"
        )

    def reset(self) -> None:
        """Reset score and counters to zero."""
        self._score = 0
        self._clean_collected = 0
        self._polluted_collected = 0
