"""
Pygame Renderer
===============

Renders the Clean Drops container, drops, HUD and overlays with pygame.
Supports both display mode (human play) and headless RGB output.
"""

from __future__ import annotations

import math
from typing import Dict, Any, Optional, Tuple

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

import numpy as np

from clean_drops.catch_core.config_loader import GameConfig, get_config


class PygameRenderer:
    """
    Renderer using pygame.

    Supports:
    - Teardrop shaped clean / polluted drops with collect fade
    - Score and time HUD with floating feedback text
    - Start, pause and end overlays
    - Screen display for human mode
    - RGB array output for agents
    """

    # Degrees for the two cosmetic tilt variants
    TILT_DEGREES = {1: -8.0, 2: 8.0}

    # Layout in pixels
    HUD_HEIGHT = 60
    SIDE_MARGIN = 20
    BOTTOM_MARGIN = 10

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize renderer.

        Args:
            config: Game configuration.
        """
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame is required for PygameRenderer. Install: pip install pygame")

        if config is None:
            config = get_config()

        self._config = config

        if not pygame.get_init():
            pygame.init()

        # Display surface (created on demand)
        self._screen: Optional[pygame.Surface] = None
        self._screen_size: Optional[Tuple[int, int]] = None

        # Fonts
        pygame.font.init()
        self._font = pygame.font.Font(None, 28)
        self._font_large = pygame.font.Font(None, 48)
        self._font_small = pygame.font.Font(None, 22)

        # Colors - water palette
        self._bg_color = (225, 240, 250)
        self._box_color = (240, 250, 255)
        self._box_border_color = (120, 170, 210)
        self._text_color = (30, 60, 90)
        self._text_muted = (90, 120, 150)
        self._clean_color = (60, 170, 240)
        self._polluted_color = (120, 110, 70)
        self._overlay_color = (10, 30, 50, 170)

        # Last layout: (scale, offset_x, offset_y)
        self._layout: Tuple[float, float, float] = (1.0, 0.0, 0.0)

        # Drop surfaces keyed by (size, polluted, tilt)
        self._drop_cache: Dict[Tuple[int, bool, int], pygame.Surface] = {}

    # Public API

    def render(
        self,
        render_data: Dict[str, Any],
        width: int,
        height: int
    ) -> np.ndarray:
        """
        Render to RGB array (for agent observation).

        Args:
            render_data: Data from CoreGame.get_render_data().
            width: Output image width.
            height: Output image height.

        Returns:
            (height, width, 3) uint8 array.
        """
        surface = pygame.Surface((width, height))
        self._render_to_surface(surface, render_data)
        array = pygame.surfarray.array3d(surface)
        return np.transpose(array, (1, 0, 2))

    def render_to_screen(
        self,
        render_data: Dict[str, Any],
        window_width: int = 480,
        window_height: int = 700
    ) -> None:
        """
        Render to pygame window and flip the display.

        Args:
            render_data: Data from CoreGame.get_render_data().
            window_width: Window width.
            window_height: Window height.
        """
        if self._screen is None or self._screen_size != (window_width, window_height):
            self._screen = pygame.display.set_mode((window_width, window_height), pygame.RESIZABLE)
            self._screen_size = (window_width, window_height)
            pygame.display.set_caption("Clean Drops")

        self._render_to_surface(self._screen, render_data)
        pygame.display.flip()

    def draw(self, surface: pygame.Surface, render_data: Dict[str, Any]) -> None:
        """Render onto a caller-owned surface."""
        self._render_to_surface(surface, render_data)

    def screen_to_board(self, screen_x: float, screen_y: float) -> Tuple[float, float]:
        """Convert a screen point to container coordinates using the last layout."""
        scale, offset_x, offset_y = self._layout
        return ((screen_x - offset_x) / scale, (screen_y - offset_y) / scale)

    def close(self) -> None:
        """Clean up pygame resources."""
        self._drop_cache.clear()
        if self._screen is not None:
            self._screen = None

    # Drawing

    def _render_to_surface(
        self,
        surface: pygame.Surface,
        render_data: Dict[str, Any]
    ) -> None:
        """Render game state to a pygame surface."""
        width, height = surface.get_size()

        board_width = render_data["board_width"]
        board_height = render_data["board_height"]

        # Reserve space for HUD at top
        ui_height = self.HUD_HEIGHT
        game_area_height = max(1, height - ui_height)

        scale_x = (width - self.SIDE_MARGIN) / board_width
        scale_y = (game_area_height - self.BOTTOM_MARGIN) / board_height
        scale = max(0.01, min(scale_x, scale_y))

        board_render_width = board_width * scale
        board_render_height = board_height * scale
        offset_x = (width - board_render_width) / 2
        offset_y = ui_height + (game_area_height - board_render_height) / 2
        self._layout = (scale, offset_x, offset_y)

        surface.fill(self._bg_color)

        self._draw_ui(surface, render_data, width)

        box_rect = pygame.Rect(
            int(offset_x) - 3,
            int(offset_y) - 3,
            int(board_render_width) + 6,
            int(board_render_height) + 6
        )
        pygame.draw.rect(surface, self._box_border_color, box_rect, border_radius=8)

        inner_rect = pygame.Rect(
            int(offset_x),
            int(offset_y),
            int(board_render_width),
            int(board_render_height)
        )
        pygame.draw.rect(surface, self._box_color, inner_rect, border_radius=4)

        # Drops enter from above, so clip to the container
        previous_clip = surface.get_clip()
        surface.set_clip(inner_rect)
        for drop in render_data["drops"]:
            self._draw_drop(surface, drop, scale, offset_x, offset_y)
        for floating in render_data["floating_texts"]:
            self._draw_floating_text(surface, floating, scale, offset_x, offset_y)
        surface.set_clip(previous_clip)

        phase = render_data["phase"]
        if phase == "idle":
            self._draw_overlay(surface, "Clean Drops", "Catch clean drops, avoid polluted ones",
                               "Press Space to start")
        elif phase == "paused":
            self._draw_overlay(surface, "Paused", f"Score: {render_data['score']}",
                               "Press P to resume")
        elif phase == "ended":
            self._draw_overlay(surface, render_data["end_title"],
                               f"Final score: {render_data['final_score']}",
                               "Press Space to play again")

    def _draw_ui(
        self,
        surface: pygame.Surface,
        render_data: Dict[str, Any],
        width: int
    ) -> None:
        """Draw score (left) and time remaining (right)."""
        score_surface = self._font_large.render(f"Score: {render_data['score']}", True, self._text_color)
        surface.blit(score_surface, (16, 12))

        time_left = render_data["time_remaining"]
        time_color = (200, 60, 60) if time_left <= 5 else self._text_color
        time_surface = self._font_large.render(f"{time_left}s", True, time_color)
        surface.blit(time_surface, (width - time_surface.get_width() - 16, 12))

    def _draw_drop(
        self,
        surface: pygame.Surface,
        drop: Dict[str, Any],
        scale: float,
        offset_x: float,
        offset_y: float
    ) -> None:
        """Draw one drop, scaled and faded."""
        size = max(2, int(drop["size"] * scale))
        sprite = self._get_drop_sprite(size, drop["is_polluted"], drop["tilt"])

        if drop["collected"]:
            sprite = pygame.transform.rotozoom(sprite, 0, 1.0 + 0.3 * (1.0 - drop["alpha"]))
            sprite.set_alpha(int(255 * drop["alpha"]))

        cx = offset_x + (drop["x"] + drop["size"] / 2) * scale
        cy = offset_y + (drop["y"] + drop["size"] / 2) * scale
        rect = sprite.get_rect(center=(int(cx), int(cy)))
        surface.blit(sprite, rect)

    def _get_drop_sprite(self, size: int, is_polluted: bool, tilt: int) -> pygame.Surface:
        """Build (and cache) a teardrop surface."""
        key = (size, is_polluted, tilt)
        cached = self._drop_cache.get(key)
        if cached is not None:
            return cached

        color = self._polluted_color if is_polluted else self._clean_color
        sprite = pygame.Surface((size, size), pygame.SRCALPHA)

        # Round body in the lower part, pointed tip at the top
        radius = size * 0.32
        cx, cy = size / 2, size - radius - 1
        tip = (cx, 1)
        angle = math.asin(min(1.0, radius / max(1.0, cy - tip[1])))
        left = (cx - radius * math.cos(angle), cy - radius * math.sin(angle))
        right = (cx + radius * math.cos(angle), cy - radius * math.sin(angle))
        pygame.draw.polygon(sprite, color, [tip, left, right])
        pygame.draw.circle(sprite, color, (int(cx), int(cy)), int(radius))

        # Highlight, or grime spots for polluted water
        if is_polluted:
            spot = (70, 60, 35)
            pygame.draw.circle(sprite, spot, (int(cx - radius / 3), int(cy)), max(1, int(radius / 4)))
            pygame.draw.circle(sprite, spot, (int(cx + radius / 3), int(cy + radius / 3)), max(1, int(radius / 5)))
        else:
            shine = tuple(min(255, c + 70) for c in color)
            pygame.draw.circle(sprite, shine, (int(cx - radius / 3), int(cy - radius / 3)), max(1, int(radius / 4)))

        sprite = pygame.transform.rotate(sprite, self.TILT_DEGREES.get(tilt, 0.0))
        self._drop_cache[key] = sprite
        return sprite

    def _draw_floating_text(
        self,
        surface: pygame.Surface,
        floating: Dict[str, Any],
        scale: float,
        offset_x: float,
        offset_y: float
    ) -> None:
        """Draw "+1" / "-1" feedback."""
        text_surface = self._font.render(floating["text"], True, floating["color"])
        text_surface.set_alpha(int(255 * floating["alpha"]))
        x = offset_x + floating["x"] * scale - text_surface.get_width() / 2
        y = offset_y + floating["y"] * scale - text_surface.get_height() / 2
        surface.blit(text_surface, (int(x), int(y)))

    def _draw_overlay(self, surface: pygame.Surface, title: str, subtitle: str, hint: str) -> None:
        """Dim the scene and show a centered message box."""
        width, height = surface.get_size()
        overlay = pygame.Surface((width, height), pygame.SRCALPHA)
        overlay.fill(self._overlay_color)
        surface.blit(overlay, (0, 0))

        box_w, box_h = min(width - 20, 340), 170
        box_x = (width - box_w) // 2
        box_y = (height - box_h) // 2
        pygame.draw.rect(surface, self._box_color, (box_x, box_y, box_w, box_h), border_radius=16)
        pygame.draw.rect(surface, self._box_border_color, (box_x, box_y, box_w, box_h), 3, border_radius=16)

        title_surface = self._font_large.render(title, True, self._text_color)
        surface.blit(title_surface, (box_x + (box_w - title_surface.get_width()) // 2, box_y + 22))

        sub_surface = self._font.render(subtitle, True, self._text_color)
        surface.blit(sub_surface, (box_x + (box_w - sub_surface.get_width()) // 2, box_y + 80))

        hint_surface = self._font_small.render(hint, True, self._text_muted)
        surface.blit(hint_surface, (box_x + (box_w - hint_surface.get_width()) // 2, box_y + 125))
