"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple, Optional

import yaml


@dataclass(frozen=True)
class SessionConfig:
    """Round length and timer periods."""
    duration_seconds: int    # Countdown start value
    spawn_interval_ms: int   # Period of the spawn trigger
    tick_interval_ms: int    # Period of the countdown tick


@dataclass(frozen=True)
class SpawnConfig:
    """Drop spawning policy."""
    min_fall_ms: int
    max_fall_ms: int
    polluted_probability: float
    min_size: int
    max_size: int
    edge_margin: int


@dataclass(frozen=True)
class ScoringConfig:
    """Scoring parameters."""
    clean_points: int
    polluted_penalty: int
    score_floor: int


@dataclass(frozen=True)
class BoardConfig:
    """Default container geometry in pixels."""
    width: int
    height: int


@dataclass(frozen=True)
class CapsConfig:
    """Game limits."""
    max_drops: int


@dataclass(frozen=True)
class FeedbackConfig:
    """Collect animation and floating score text."""
    collect_fade_ms: int
    float_duration_ms: int
    float_lifetime_ms: int
    float_rise: float
    clean_color: Tuple[int, int, int]
    polluted_color: Tuple[int, int, int]


@dataclass(frozen=True)
class EnvConfig:
    """Gymnasium environment parameters."""
    frame_ms: int
    max_drops: int


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    session: SessionConfig
    spawn: SpawnConfig
    scoring: ScoringConfig
    board: BoardConfig
    caps: CapsConfig
    feedback: FeedbackConfig
    env: EnvConfig

    @property
    def duration_ms(self) -> int:
        """Round length in milliseconds."""
        return self.session.duration_seconds * self.session.tick_interval_ms


def _parse_color(color_data: List) -> Tuple[int, int, int]:
    """Parse RGB color from YAML."""
    if len(color_data) != 3:
        raise ValueError(f"Color must have 3 values [R, G, B], got {color_data}")
    return (int(color_data[0]), int(color_data[1]), int(color_data[2]))


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    session = config.session
    if session.duration_seconds <= 0:
        raise ValueError(f"duration_seconds must be positive, got {session.duration_seconds}")
    if session.spawn_interval_ms <= 0 or session.tick_interval_ms <= 0:
        raise ValueError(
            f"Timer intervals must be positive, got spawn={session.spawn_interval_ms} "
            f"tick={session.tick_interval_ms}"
        )

    spawn = config.spawn
    if spawn.min_fall_ms <= 0 or spawn.min_fall_ms > spawn.max_fall_ms:
        raise ValueError(
            f"Fall range must satisfy 0 < min_fall_ms <= max_fall_ms, "
            f"got [{spawn.min_fall_ms}, {spawn.max_fall_ms}]"
        )
    if not 0.0 <= spawn.polluted_probability <= 1.0:
        raise ValueError(
            f"polluted_probability must be in [0, 1], got {spawn.polluted_probability}"
        )
    if spawn.min_size <= 0 or spawn.min_size > spawn.max_size:
        raise ValueError(
            f"Size range must satisfy 0 < min_size <= max_size, "
            f"got [{spawn.min_size}, {spawn.max_size}]"
        )
    if spawn.edge_margin < 0:
        raise ValueError(f"edge_margin must not be negative, got {spawn.edge_margin}")

    if config.scoring.clean_points <= 0 or config.scoring.polluted_penalty < 0:
        raise ValueError(
            f"clean_points must be positive and polluted_penalty not negative, "
            f"got {config.scoring.clean_points} and {config.scoring.polluted_penalty}"
        )
    if config.scoring.score_floor > 0:
        raise ValueError(f"score_floor must not be positive, got {config.scoring.score_floor}")

    if config.caps.max_drops <= 0:
        raise ValueError(f"max_drops must be positive, got {config.caps.max_drops}")

    if config.env.frame_ms <= 0 or config.env.max_drops <= 0:
        raise ValueError(
            f"env.frame_ms and env.max_drops must be positive, "
            f"got {config.env.frame_ms} and {config.env.max_drops}"
        )


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")

    try:
        config = _parse_config(raw)
    except KeyError as e:
        raise ValueError(f"Missing config key {e} in {config_path}") from e

    _validate_config(config)
    return config


def _parse_config(raw: dict) -> GameConfig:
    """Build GameConfig from parsed YAML. Missing required keys raise KeyError."""
    session_data = raw["session"]
    session = SessionConfig(
        duration_seconds=int(session_data["duration_seconds"]),
        spawn_interval_ms=int(session_data["spawn_interval_ms"]),
        tick_interval_ms=int(session_data.get("tick_interval_ms", 1000))
    )

    spawn_data = raw["spawn"]
    spawn = SpawnConfig(
        min_fall_ms=int(spawn_data["min_fall_ms"]),
        max_fall_ms=int(spawn_data["max_fall_ms"]),
        polluted_probability=float(spawn_data["polluted_probability"]),
        min_size=int(spawn_data.get("min_size", 40)),
        max_size=int(spawn_data.get("max_size", 68)),
        edge_margin=int(spawn_data.get("edge_margin", 4))
    )

    scoring_data = raw.get("scoring", {})
    scoring = ScoringConfig(
        clean_points=int(scoring_data.get("clean_points", 1)),
        polluted_penalty=int(scoring_data.get("polluted_penalty", 1)),
        score_floor=int(scoring_data.get("score_floor", -9999))
    )

    board_data = raw["board"]
    board = BoardConfig(
        width=int(board_data["width"]),
        height=int(board_data["height"])
    )

    caps_data = raw.get("caps", {})
    caps = CapsConfig(
        max_drops=int(caps_data.get("max_drops", 200))
    )

    fb_data = raw.get("feedback", {})
    feedback = FeedbackConfig(
        collect_fade_ms=int(fb_data.get("collect_fade_ms", 260)),
        float_duration_ms=int(fb_data.get("float_duration_ms", 700)),
        float_lifetime_ms=int(fb_data.get("float_lifetime_ms", 800)),
        float_rise=float(fb_data.get("float_rise", 40)),
        clean_color=_parse_color(fb_data.get("clean_color", [30, 198, 255])),
        polluted_color=_parse_color(fb_data.get("polluted_color", [255, 107, 107]))
    )

    env_data = raw.get("env", {})
    env = EnvConfig(
        frame_ms=int(env_data.get("frame_ms", 100)),
        max_drops=int(env_data.get("max_drops", 32))
    )

    return GameConfig(
        session=session,
        spawn=spawn,
        scoring=scoring,
        board=board,
        caps=caps,
        feedback=feedback,
        env=env
    )


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
