"""
Smoke tests for the command line tools.
"""

from tools.benchmark_speed import benchmark_core_game, benchmark_single_env


class TestBenchmark:
    """Benchmarks run and report throughput."""

    def test_core_game(self):
        result = benchmark_core_game(num_steps=400, seed=1)
        assert result["mode"] == "core_game"
        assert result["num_steps"] == 400
        assert result["steps_per_second"] > 0

    def test_single_env(self):
        result = benchmark_single_env(num_steps=50, seed=1)
        assert result["num_envs"] == 1
        assert result["ms_per_step"] > 0
