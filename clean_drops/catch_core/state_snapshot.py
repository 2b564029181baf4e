"""
State Snapshot
==============

Packs game state into fixed-size numpy arrays for Gymnasium observations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, TYPE_CHECKING
import numpy as np

from clean_drops.catch_core.config_loader import GameConfig, get_config

if TYPE_CHECKING:
    from clean_drops.catch_core.game import CoreGame

# Observation index of each phase
PHASE_INDEX = {"idle": 0, "running": 1, "paused": 2, "ended": 3}


@dataclass
class GameSnapshot:
    """
    Game state snapshot.

    Drop arrays are fixed-size with masking for variable drop counts.
    Positions are normalized to [0, 1] by the container size.
    """
    time_remaining: int
    score: int
    phase: int
    drop_count: int

    drop_x: np.ndarray            # (MAX_DROPS,) float32, center x
    drop_y: np.ndarray            # (MAX_DROPS,) float32, center y in [-1, 2]
    drop_size: np.ndarray         # (MAX_DROPS,) float32
    drop_polluted: np.ndarray     # (MAX_DROPS,) int8
    drop_mask: np.ndarray         # (MAX_DROPS,) int8

    board_rgb: Optional[np.ndarray] = None

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert to Gymnasium observation dictionary."""
        obs = {
            "time_remaining": np.array(self.time_remaining, dtype=np.int32),
            "score": np.array(self.score, dtype=np.int32),
            "phase": np.int64(self.phase),
            "drop_count": np.array(self.drop_count, dtype=np.int32),
            "drop_x": self.drop_x,
            "drop_y": self.drop_y,
            "drop_size": self.drop_size,
            "drop_polluted": self.drop_polluted,
            "drop_mask": self.drop_mask,
        }

        if self.board_rgb is not None:
            obs["board_rgb"] = self.board_rgb

        return obs


class SnapshotBuilder:
    """Builds game state snapshots."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._max_drops = config.env.max_drops

    @property
    def max_drops(self) -> int:
        return self._max_drops

    def build(self, game: "CoreGame") -> GameSnapshot:
        """Build a snapshot from current game state."""
        drop_x = np.zeros(self._max_drops, dtype=np.float32)
        drop_y = np.zeros(self._max_drops, dtype=np.float32)
        drop_size = np.zeros(self._max_drops, dtype=np.float32)
        drop_polluted = np.zeros(self._max_drops, dtype=np.int8)
        drop_mask = np.zeros(self._max_drops, dtype=np.int8)

        field = game.field
        width = max(1.0, field.width)
        height = max(1.0, field.height)

        # Only collectable drops; oldest first, overflow dropped
        live = [d for d in field.drops.values() if not d.is_collected]
        count = min(len(live), self._max_drops)

        for i, drop in enumerate(live[:count]):
            cx, cy = drop.center
            drop_x[i] = min(1.0, max(0.0, cx / width))
            drop_y[i] = min(2.0, max(-1.0, cy / height))
            drop_size[i] = min(1.0, drop.size / width)
            drop_polluted[i] = 1 if drop.is_polluted else 0
            drop_mask[i] = 1

        return GameSnapshot(
            time_remaining=game.time_remaining,
            score=game.score,
            phase=PHASE_INDEX[game.phase.value],
            drop_count=count,
            drop_x=drop_x,
            drop_y=drop_y,
            drop_size=drop_size,
            drop_polluted=drop_polluted,
            drop_mask=drop_mask
        )
