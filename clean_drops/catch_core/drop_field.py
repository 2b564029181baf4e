"""
Drop Field
==========

Tracks the transient entities inside the game container: falling drops and
the floating "+1" / "-1" feedback text shown where a drop was collected.

Coordinates are container pixels with y growing downward.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from clean_drops.catch_core.config_loader import GameConfig, get_config
from clean_drops.catch_core.rng import DropSpec


@dataclass
class Drop:
    """A falling drop."""
    uid: int
    is_polluted: bool
    x: float
    size: int
    fall_ms: int
    tilt: int
    container_height: float
    age_ms: float = 0.0
    collected_age_ms: Optional[float] = None

    @property
    def progress(self) -> float:
        """Fraction of the fall completed, in [0, 1]."""
        return max(0.0, min(1.0, self.age_ms / self.fall_ms))

    @property
    def y(self) -> float:
        """Top edge. Starts just above the container, ends at the bottom."""
        start = -float(self.size)
        return start + self.progress * (self.container_height - start)

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.size / 2, self.y + self.size / 2)

    @property
    def is_collected(self) -> bool:
        return self.collected_age_ms is not None

    @property
    def has_landed(self) -> bool:
        return self.age_ms >= self.fall_ms

    def contains(self, px: float, py: float) -> bool:
        """True if the point lies within the drop's box."""
        y = self.y
        return self.x <= px <= self.x + self.size and y <= py <= y + self.size


@dataclass
class FloatingText:
    """Score feedback that rises and fades."""
    text: str
    color: Tuple[int, int, int]
    x: float
    y: float
    age_ms: float = 0.0


class DropField:
    """
    Container of live drops and feedback text.

    - Landed drops disappear
    - Collected drops linger for collect_fade_ms, then disappear
    - Floating text rises for float_duration_ms and is removed after
      float_lifetime_ms
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        width: Optional[float] = None,
        height: Optional[float] = None
    ):
        """
        Initialize an empty field.

        Args:
            config: Game configuration. Uses default if None.
            width: Container width. Uses board.width if None.
            height: Container height. Uses board.height if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._width = float(width if width is not None else config.board.width)
        self._height = float(height if height is not None else config.board.height)
        self._drops: Dict[int, Drop] = {}
        self._texts: List[FloatingText] = []
        self._next_uid: int = 1

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height

    @property
    def drops(self) -> Dict[int, Drop]:
        """Live drops keyed by uid."""
        return self._drops

    @property
    def floating_texts(self) -> List[FloatingText]:
        return self._texts

    @property
    def drop_count(self) -> int:
        return len(self._drops)

    def add(self, spec: DropSpec) -> Drop:
        """Create a drop at the top of the container from a spawn roll."""
        drop = Drop(
            uid=self._next_uid,
            is_polluted=spec.is_polluted,
            x=spec.x,
            size=spec.size,
            fall_ms=spec.fall_ms,
            tilt=spec.tilt,
            container_height=self._height
        )
        self._drops[drop.uid] = drop
        self._next_uid += 1
        return drop

    def get(self, uid: int) -> Optional[Drop]:
        return self._drops.get(uid)

    def collect(self, uid: int) -> Optional[Drop]:
        """
        Mark a drop as collected.

        Returns:
            The drop, or None if it is unknown or already collected.
        """
        drop = self._drops.get(uid)
        if drop is None or drop.is_collected:
            return None
        drop.collected_age_ms = 0.0
        return drop

    def hit_test(self, x: float, y: float) -> Optional[Drop]:
        """
        Find the collectable drop under a point.

        Later drops are drawn on top, so the newest match wins.
        """
        for drop in reversed(list(self._drops.values())):
            if not drop.is_collected and drop.contains(x, y):
                return drop
        return None

    def add_feedback(self, drop: Drop, text: str, is_polluted: bool) -> FloatingText:
        """Spawn floating text just above a drop's current position."""
        fb = self._config.feedback
        color = fb.polluted_color if is_polluted else fb.clean_color
        cx, _ = drop.center
        floating = FloatingText(text=text, color=color, x=cx, y=drop.y + 10)
        self._texts.append(floating)
        return floating

    def text_offset(self, floating: FloatingText) -> Tuple[float, float]:
        """
        Current rise and opacity of a floating text.

        Returns:
            (dy, alpha) with dy <= 0 pixels and alpha in [0, 1].
        """
        fb = self._config.feedback
        t = min(1.0, floating.age_ms / fb.float_duration_ms)
        return (-fb.float_rise * t, 1.0 - t)

    def update(self, dt_ms: float, move_drops: bool = True) -> List[int]:
        """
        Advance animations.

        Args:
            dt_ms: Elapsed milliseconds.
            move_drops: False freezes the falling drops (paused game).

        Returns:
            UIDs of drops removed this update.
        """
        removed = []
        fade_ms = self._config.feedback.collect_fade_ms

        if move_drops:
            for uid, drop in list(self._drops.items()):
                if drop.is_collected:
                    drop.collected_age_ms += dt_ms
                    if drop.collected_age_ms >= fade_ms:
                        removed.append(uid)
                    continue
                drop.age_ms += dt_ms
                if drop.has_landed:
                    removed.append(uid)

            for uid in removed:
                del self._drops[uid]

        lifetime = self._config.feedback.float_lifetime_ms
        for floating in self._texts:
            floating.age_ms += dt_ms
        self._texts = [f for f in self._texts if f.age_ms < lifetime]

        return removed

    def clear(self) -> None:
        """Remove every drop. Floating text finishes its animation."""
        self._drops.clear()

    def resize(self, width: float, height: float) -> bool:
        """
        Adopt a new container size.

        Drops keep their positions; if too many have built up they are all
        removed.

        Returns:
            True if the drops were purged.
        """
        self._width = float(width)
        self._height = float(height)
        for drop in self._drops.values():
            drop.container_height = self._height

        if len(self._drops) > self._config.caps.max_drops:
            self.clear()
            return True
        return False
