"""
Tests for the drop spawn policy.
"""

import random
from dataclasses import replace

import pytest

from clean_drops.catch_core.config_loader import load_config
from clean_drops.catch_core.rng import DropSpawner, roll_drop


@pytest.fixture
def config():
    return load_config()


class TestRollDrop:
    """Test the pure spawn roll."""

    def test_same_rng_state_same_drop(self, config):
        """roll_drop only depends on the supplied random source."""
        a = roll_drop(random.Random(5), config, 480)
        b = roll_drop(random.Random(5), config, 480)
        assert a == b

    def test_values_in_range(self, config):
        rng = random.Random(1)
        spawn = config.spawn
        width = 480

        for _ in range(500):
            drop = roll_drop(rng, config, width)
            assert spawn.min_fall_ms <= drop.fall_ms <= spawn.max_fall_ms
            assert spawn.min_size <= drop.size <= spawn.max_size
            assert drop.x >= spawn.edge_margin
            assert drop.x + drop.size <= width - spawn.edge_margin
            assert drop.tilt in (1, 2)

    def test_polluted_rate(self, config):
        """Roughly 28% of drops are polluted."""
        rng = random.Random(42)
        rolls = [roll_drop(rng, config, 480) for _ in range(5000)]
        rate = sum(d.is_polluted for d in rolls) / len(rolls)
        assert 0.24 < rate < 0.32

    def test_probability_extremes(self, config):
        never = replace(config, spawn=replace(config.spawn, polluted_probability=0.0))
        always = replace(config, spawn=replace(config.spawn, polluted_probability=1.0))
        rng = random.Random(3)

        assert not any(roll_drop(rng, never, 480).is_polluted for _ in range(200))
        assert all(roll_drop(rng, always, 480).is_polluted for _ in range(200))

    def test_narrow_container(self, config):
        """A container narrower than the smallest drop still gets a drop inside it."""
        rng = random.Random(9)
        for _ in range(100):
            drop = roll_drop(rng, config, 30)
            assert 1 <= drop.size <= 30 - 2 * config.spawn.edge_margin
            assert drop.x >= config.spawn.edge_margin


class TestDropSpawner:
    """Test the seeded spawner."""

    def test_deterministic_with_seed(self, config):
        """Same seed should produce the same sequence."""
        s1 = DropSpawner(config, seed=42)
        s2 = DropSpawner(config, seed=42)

        assert [s1.roll(480) for _ in range(50)] == [s2.roll(480) for _ in range(50)]

    def test_different_seeds_differ(self, config):
        s1 = DropSpawner(config, seed=42)
        s2 = DropSpawner(config, seed=123)

        assert [s1.roll(480) for _ in range(50)] != [s2.roll(480) for _ in range(50)]

    def test_reset_restores_sequence(self, config):
        spawner = DropSpawner(config, seed=42)
        initial = [spawner.roll(480) for _ in range(10)]

        spawner.reset()
        assert spawner.rolled == 0
        assert [spawner.roll(480) for _ in range(10)] == initial

    def test_reset_with_new_seed(self, config):
        spawner = DropSpawner(config, seed=1)
        spawner.reset(seed=2)
        assert [spawner.roll(480) for _ in range(10)] == _rolls(config, 2, 480, 10)

    def test_rolled_counter(self, config):
        spawner = DropSpawner(config, seed=0)
        for _ in range(7):
            spawner.roll(480)
        assert spawner.rolled == 7


def _rolls(config, seed, width, count):
    spawner = DropSpawner(config, seed=seed)
    return [spawner.roll(width) for _ in range(count)]
