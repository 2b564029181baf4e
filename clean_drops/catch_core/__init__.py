"""
Catch Core - The heart of the Clean Drops game.

This module provides the session state machine, the timer-driven game host,
and a Gymnasium environment wrapper.

Main exports:
- GameSession: Lifecycle state machine (start/pause/resume/reset/end, scoring)
- CoreGame: Host that owns the spawn and countdown timers and the drop field
- CatchEnv: Gymnasium environment for agents
- GameConfig: Configuration loaded from game_config.yaml
"""

from clean_drops.catch_core.config_loader import GameConfig, load_config, get_config
from clean_drops.catch_core.session import (
    EndResult,
    GamePhase,
    GameSession,
    SessionSignal,
)
from clean_drops.catch_core.scoring import ScoreEvent, ScoreTracker
from clean_drops.catch_core.rng import DropSpawner, DropSpec, roll_drop
from clean_drops.catch_core.timers import PeriodicTask, TaskScheduler
from clean_drops.catch_core.drop_field import Drop, DropField, FloatingText
from clean_drops.catch_core.game import AdvanceResult, CoreGame
from clean_drops.catch_core.env_gym import CatchEnv

__all__ = [
    "GameConfig",
    "load_config",
    "get_config",
    "EndResult",
    "GamePhase",
    "GameSession",
    "SessionSignal",
    "ScoreEvent",
    "ScoreTracker",
    "DropSpawner",
    "DropSpec",
    "roll_drop",
    "PeriodicTask",
    "TaskScheduler",
    "Drop",
    "DropField",
    "FloatingText",
    "AdvanceResult",
    "CoreGame",
    "CatchEnv",
]
