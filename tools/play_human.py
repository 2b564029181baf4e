"""
Human Play Mode
================

Play Clean Drops interactively: click the clean drops, avoid the polluted
ones, before the countdown runs out.

Controls:
    - Click: Collect drop
    - Space/Enter: Start (or play again after the round ends)
    - P: Pause / resume
    - R: Restart round
    - ESC: Quit

Usage:
    python -m tools.play_human [--seed SEED] [--width WIDTH] [--height HEIGHT]
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from clean_drops.catch_core.config_loader import load_config, GameConfig
from clean_drops.catch_core.game import CoreGame
from clean_drops.catch_core.render_pygame import PygameRenderer
from clean_drops.catch_core.session import GamePhase, GameSession, SessionSignal


class HumanPlayer:
    """
    Real-time pygame front end for CoreGame.

    Frame time from the pygame clock is fed into CoreGame.advance().
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        window_width: int = 480,
        window_height: int = 700,
        target_fps: int = 60
    ):
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame required. Install: pip install pygame")

        if config is None:
            config = load_config()

        self._config = config
        self._seed = seed
        self._window_width = window_width
        self._window_height = window_height
        self._target_fps = target_fps

        self._game = CoreGame(config=config, seed=seed)
        self._game.session.add_listener(self._on_signal)

        pygame.init()
        self._screen = pygame.display.set_mode((window_width, window_height), pygame.RESIZABLE)
        pygame.display.set_caption("Clean Drops")
        self._clock = pygame.time.Clock()

        self._renderer = PygameRenderer(config)
        self._running = True
        self._fit_container()

    def run(self) -> int:
        """Run the game loop. Returns the last score."""
        print("=== Clean Drops ===")
        print("Click clean drops (+1), avoid polluted ones (-1)")
        print("Space to start, P to pause, R to restart, ESC to quit")
        print()

        while self._running:
            dt_ms = self._clock.tick(self._target_fps)
            self._handle_events()
            self._game.advance(dt_ms)
            self._render()

        pygame.quit()
        return self._game.score

    def _on_signal(self, signal: SessionSignal, session: GameSession) -> None:
        """Console feedback for lifecycle changes."""
        if signal is SessionSignal.TIMERS_START:
            print(f"--- Round started: {session.time_remaining}s ---")
        elif signal is SessionSignal.GAME_OVER:
            result = session.result
            print(f"\n{result.title} Score: {result.final_score} "
                  f"(clean {session.hits}, polluted {session.misses})")

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.VIDEORESIZE:
                self._window_width, self._window_height = event.w, event.h
                self._screen = pygame.display.set_mode(
                    (event.w, event.h), pygame.RESIZABLE
                )
                self._fit_container()

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._running = False
                elif event.key in (pygame.K_SPACE, pygame.K_RETURN):
                    if self._game.phase in (GamePhase.IDLE, GamePhase.ENDED):
                        self._game.start()
                elif event.key == pygame.K_p:
                    if self._game.toggle_pause():
                        print("Paused" if self._game.phase is GamePhase.PAUSED else "Resumed")
                elif event.key == pygame.K_r:
                    self._game.reset(seed=self._seed)

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._collect(event.pos)

    def _fit_container(self) -> None:
        """Size the container to the window, leaving room for the HUD."""
        width = max(100, self._window_width - PygameRenderer.SIDE_MARGIN)
        height = max(100, self._window_height - PygameRenderer.HUD_HEIGHT - PygameRenderer.BOTTOM_MARGIN)
        if self._game.resize(width, height):
            print("Too many drops on screen, cleared")

    def _collect(self, screen_pos) -> None:
        """Collect the drop under the cursor, if any."""
        x, y = self._renderer.screen_to_board(*screen_pos)
        event = self._game.collect_at(x, y)
        if event is not None:
            print(f"  {event.label} (Total: {event.score})")

    def _render(self) -> None:
        """Render the game."""
        self._renderer.draw(self._screen, self._game.get_render_data())
        pygame.display.flip()


def main():
    parser = argparse.ArgumentParser(description="Play Clean Drops interactively")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--width", type=int, default=480, help="Window width (default: 480)")
    parser.add_argument("--height", type=int, default=700, help="Window height (default: 700)")
    parser.add_argument("--fps", type=int, default=60, help="Target FPS")

    args = parser.parse_args()

    try:
        config = load_config()
        player = HumanPlayer(
            config=config,
            seed=args.seed,
            window_width=args.width,
            window_height=args.height,
            target_fps=args.fps
        )
        score = player.run()
        print(f"\nFinal Score: {score}")
        return 0
    except ImportError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
