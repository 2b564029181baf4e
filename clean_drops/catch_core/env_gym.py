"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the Clean Drops game.
Each step is one optional click followed by env.frame_ms of game time.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from clean_drops.catch_core.config_loader import GameConfig, load_config
from clean_drops.catch_core.game import CoreGame
from clean_drops.catch_core.session import GamePhase
from clean_drops.catch_core.state_snapshot import GameSnapshot


class CatchEnv(gym.Env):
    """
    Clean Drops as a Gymnasium environment.

    Action Space:
        Box(low=0.0, high=1.0, shape=(3,), dtype=float32)
        [x, y, click]: click position normalized to the container, and a
        click flag. The click happens only when click > 0.5.

    Observation Space:
        Dict with time remaining, score, phase and padded drop arrays.

    Reward:
        Score change during the step (+1 clean, -1 polluted).

    Info:
        Contains score, delta_score, time_remaining, collect counts, etc.
    """

    metadata = {
        "render_modes": ["human", "rgb_array"],
        "render_fps": 10,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        render_mode: Optional[str] = None,
        image_obs: bool = False,
        image_width: Optional[int] = None,
        image_height: Optional[int] = None,
        debug: bool = False,
    ):
        """
        Initialize environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            render_mode: "human" for window, "rgb_array" for numpy, None for headless.
            image_obs: If True, include board_rgb in observations.
            image_width: Observation image width. Defaults to board width.
            image_height: Observation image height. Defaults to board height.
            debug: If True, enables verbose debug output.
        """
        super().__init__()

        self._config = load_config(config_path)

        self.render_mode = render_mode
        self._image_obs = image_obs
        self._debug = debug

        self._img_width = image_width or self._config.board.width
        self._img_height = image_height or self._config.board.height

        self._game = CoreGame(config=self._config, debug=debug)
        self._renderer = None

        self.action_space = spaces.Box(
            low=0.0,
            high=1.0,
            shape=(3,),
            dtype=np.float32
        )

        self.observation_space = self._build_observation_space()

        if self._debug:
            print(f"[DEBUG] CatchEnv initialized")
            print(f"[DEBUG]   Board: {self._config.board.width}x{self._config.board.height}")
            print(f"[DEBUG]   Frame: {self._config.env.frame_ms}ms")
            print(f"[DEBUG]   Max drops: {self._config.env.max_drops}")

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        max_drops = self._config.env.max_drops
        duration = self._config.session.duration_seconds
        floor = self._config.scoring.score_floor

        obs_dict = {
            "time_remaining": spaces.Box(low=0, high=duration, shape=(), dtype=np.int32),
            "score": spaces.Box(low=floor, high=np.iinfo(np.int32).max, shape=(), dtype=np.int32),
            "phase": spaces.Discrete(4),
            "drop_count": spaces.Box(low=0, high=max_drops, shape=(), dtype=np.int32),
            "drop_x": spaces.Box(low=0.0, high=1.0, shape=(max_drops,), dtype=np.float32),
            # Drops enter from above the container and land past its bottom
            "drop_y": spaces.Box(low=-1.0, high=2.0, shape=(max_drops,), dtype=np.float32),
            "drop_size": spaces.Box(low=0.0, high=1.0, shape=(max_drops,), dtype=np.float32),
            "drop_polluted": spaces.MultiBinary(max_drops),
            "drop_mask": spaces.MultiBinary(max_drops),
        }

        if self._image_obs:
            obs_dict["board_rgb"] = spaces.Box(
                low=0,
                high=255,
                shape=(self._img_height, self._img_width, 3),
                dtype=np.uint8
            )

        return spaces.Dict(obs_dict)

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment and start a new round.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        self._game.reset(seed=seed)

        obs = self._snapshot_to_obs(self._game.snapshot())
        info = self._game.get_info()
        info["delta_score"] = 0

        return obs, info

    def step(
        self,
        action: Union[np.ndarray, Tuple[float, float, float]]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one step.

        Args:
            action: [x, y, click] in [0, 1].

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
        """
        action = np.clip(np.asarray(action, dtype=np.float32).reshape(-1), 0.0, 1.0)
        x_norm, y_norm, click = float(action[0]), float(action[1]), float(action[2])

        score_before = self._game.score
        collected = None

        if click > 0.5:
            field = self._game.field
            collected = self._game.collect_at(x_norm * field.width, y_norm * field.height)

        frame = self._game.advance(self._config.env.frame_ms)

        delta_score = self._game.score - score_before
        terminated = self._game.phase is GamePhase.ENDED

        obs = self._snapshot_to_obs(self._game.snapshot())

        info = self._game.get_info()
        info["delta_score"] = delta_score
        info["collected"] = collected is not None
        info["spawned"] = frame.spawned

        if self._debug:
            print(f"[DEBUG] Step: click={click > 0.5}, delta_score={delta_score}, "
                  f"drops={obs['drop_count']}, time={obs['time_remaining']}")
            if terminated:
                print(f"[DEBUG] TERMINATED: score={self._game.score}")

        return obs, float(delta_score), terminated, False, info

    def _snapshot_to_obs(self, snapshot: GameSnapshot) -> Dict[str, np.ndarray]:
        """Convert snapshot to observation dict."""
        if self._image_obs:
            snapshot.board_rgb = self._render_to_array()
        return snapshot.to_obs_dict()

    def _render_to_array(self) -> np.ndarray:
        """Render board to RGB array."""
        if self._renderer is None:
            self._init_renderer()

        render_data = self._game.get_render_data()
        return self._renderer.render(
            render_data,
            self._img_width,
            self._img_height
        )

    def _init_renderer(self) -> None:
        from clean_drops.catch_core.render_pygame import PygameRenderer
        self._renderer = PygameRenderer(self._config)

    def render(self) -> Optional[np.ndarray]:
        """
        Render the current game state.

        Returns:
            RGB array if render_mode is "rgb_array", None otherwise.
        """
        if self.render_mode == "rgb_array":
            return self._render_to_array()

        if self.render_mode == "human":
            if self._renderer is None:
                self._init_renderer()

            render_data = self._game.get_render_data()
            self._renderer.render_to_screen(render_data)
            return None

        return None

    def close(self) -> None:
        """Clean up resources."""
        if self._renderer is not None:
            self._renderer.close()
            self._renderer = None

    @property
    def game(self) -> CoreGame:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
