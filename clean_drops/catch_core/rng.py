"""
RNG - Drop Spawn Policy
=======================

Decides what each spawn tick produces: clean or polluted, how fast it falls,
how big it is and where it enters the container.

All randomness comes from an injected random.Random so sequences are
reproducible from a seed.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

from clean_drops.catch_core.config_loader import GameConfig, get_config


@dataclass(frozen=True)
class DropSpec:
    """Outcome of one spawn roll."""
    is_polluted: bool
    fall_ms: int
    size: int
    x: float       # Left edge inside the container
    tilt: int      # Cosmetic rotation variant, 1 or 2


def roll_drop(
    rng: random.Random,
    config: GameConfig,
    container_width: float
) -> DropSpec:
    """
    Roll a single drop.

    Args:
        rng: Random source. The only source of randomness used.
        config: Game configuration.
        container_width: Current container width in pixels.

    Returns:
        DropSpec for the new drop.
    """
    spawn = config.spawn

    is_polluted = rng.random() < spawn.polluted_probability
    tilt = 1 if rng.random() > 0.5 else 2

    # Narrow containers still get a drop, just a smaller one
    max_size = max(1, min(spawn.max_size, int(container_width) - 2 * spawn.edge_margin))
    min_size = min(spawn.min_size, max_size)
    size = rng.randint(min_size, max_size)

    span = max(0.0, container_width - size - 2 * spawn.edge_margin)
    x = rng.random() * span + spawn.edge_margin

    fall_ms = rng.randint(spawn.min_fall_ms, spawn.max_fall_ms)

    return DropSpec(
        is_polluted=is_polluted,
        fall_ms=fall_ms,
        size=size,
        x=x,
        tilt=tilt
    )


class DropSpawner:
    """
    Seeded source of DropSpecs.

    Wraps roll_drop with its own random.Random so a game can be replayed
    from its seed.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize spawner.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility. Random if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._seed = seed
        self._rng = random.Random(seed)
        self._rolled: int = 0

    @property
    def rolled(self) -> int:
        """Number of drops rolled since the last reset."""
        return self._rolled

    def roll(self, container_width: float) -> DropSpec:
        """Roll the next drop for a container of the given width."""
        self._rolled += 1
        return roll_drop(self._rng, self._config, container_width)

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reset the spawner.

        Args:
            seed: New random seed. Reuses the previous seed if None.
        """
        if seed is not None:
            self._seed = seed
        self._rng = random.Random(self._seed)
        self._rolled = 0
